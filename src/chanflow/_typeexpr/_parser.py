"""Parser for the textual type syntax used in part and pin declarations.

Grammar (Go-flavoured)::

    type  := "$" IDENT
           | "*" type
           | "[" "]" type
           | "[" NUMBER "]" type
           | "chan" ["<-"] type
           | "<-" "chan" type
           | "map" "[" type "]" type
           | "func" "(" ... ")" [result]
           | ("interface" | "struct") "{" ... "}"
           | IDENT ["." IDENT]

Function, struct and interface types are kept as opaque named types with
their text normalised; they may not contain type parameters.
"""

import re

from ._expr import Compound, TypeExpr, TypeName, TypeParam

_TOKEN_RE = re.compile(
    r"\s*(?:"
    r"(?P<ident>[A-Za-z_][A-Za-z0-9_]*)"
    r"|(?P<number>[0-9]+)"
    r"|(?P<string>\"(?:[^\"\\]|\\.)*\"|`[^`]*`)"
    r"|(?P<punct><-|\.\.\.|[$*\[\]{}().,;])"
    r")",
)

_CLOSERS = frozenset({")", "]", "}", ",", ";"})
_BRACKETS = {"(": ")", "{": "}"}


class TypeSyntaxError(ValueError):
    """Raised when a type expression cannot be parsed."""

    def __init__(self, text: str, reason: str) -> None:
        self.text = text
        self.reason = reason
        super().__init__(f"Invalid type {text!r}: {reason}")


def _tokenize(text: str) -> list[str]:
    tokens: list[str] = []
    pos = 0
    stripped = text.rstrip()
    while pos < len(stripped):
        m = _TOKEN_RE.match(stripped, pos)
        if m is None:
            raise TypeSyntaxError(text, f"unexpected character {stripped[pos:].lstrip()[:1]!r}")
        tokens.append(m.group(m.lastgroup or "punct"))
        pos = m.end()
    return tokens


def _is_ident(tok: str) -> bool:
    return tok[0].isalpha() or tok[0] == "_"


def _needs_space(prev: str, tok: str) -> bool:  # noqa: PLR0911
    if tok == "}":
        return prev != "{"
    if prev in {"(", "[", "]", "*", ".", "..."} or tok in _CLOSERS or tok in {".", "{"}:
        return False
    if tok == "(":
        # Method and function names hug their parameter list; results do not.
        return not _is_ident(prev)
    if (prev, tok) in {("<-", "chan"), ("chan", "<-"), ("map", "[")}:
        return False
    return True


def _join(tokens: list[str]) -> str:
    """Render tokens of an opaque type with Go-style spacing."""
    out = tokens[0]
    for prev, tok in zip(tokens, tokens[1:], strict=False):
        out += f" {tok}" if _needs_space(prev, tok) else tok
    return out


class _Parser:
    def __init__(self, text: str, scope: str) -> None:
        self.text = text
        self.scope = scope
        self.tokens = _tokenize(text)
        self.pos = 0

    def _peek(self) -> str | None:
        return self.tokens[self.pos] if self.pos < len(self.tokens) else None

    def _next(self) -> str:
        tok = self._peek()
        if tok is None:
            raise TypeSyntaxError(self.text, "unexpected end of input")
        self.pos += 1
        return tok

    def _expect(self, want: str) -> None:
        tok = self._next()
        if tok != want:
            raise TypeSyntaxError(self.text, f"expected {want!r}, got {tok!r}")

    def _ident(self) -> str:
        tok = self._next()
        if not _is_ident(tok):
            raise TypeSyntaxError(self.text, f"expected identifier, got {tok!r}")
        return tok

    def parse(self) -> TypeExpr:
        expr = self._type()
        if self._peek() is not None:
            raise TypeSyntaxError(self.text, f"unexpected trailing {self._peek()!r}")
        return expr

    def _type(self) -> TypeExpr:  # noqa: C901, PLR0911
        start = self.pos
        tok = self._next()
        match tok:
            case "$":
                return TypeParam(self.scope, self._ident())
            case "*":
                return Compound("*", (self._type(),))
            case "[":
                if self._peek() == "]":
                    self.pos += 1
                    return Compound("[]", (self._type(),))
                length = self._next()
                if not length.isdigit():
                    raise TypeSyntaxError(self.text, f"expected array length, got {length!r}")
                self._expect("]")
                return Compound(f"[{length}]", (self._type(),))
            case "chan":
                if self._peek() == "<-":
                    self.pos += 1
                    return Compound("chan<-", (self._type(),))
                return Compound("chan", (self._type(),))
            case "<-":
                self._expect("chan")
                return Compound("<-chan", (self._type(),))
            case "map":
                self._expect("[")
                key = self._type()
                self._expect("]")
                return Compound("map", (key, self._type()))
            case "func":
                self._group("(")
                nxt = self._peek()
                if nxt == "(":
                    self._group("(")
                elif nxt is not None and nxt not in _CLOSERS:
                    self._type()
                return self._opaque(start)
            case "interface" | "struct":
                self._group("{")
                return self._opaque(start)
            case _ if _is_ident(tok):
                if self._peek() == ".":
                    self.pos += 1
                    return TypeName(f"{tok}.{self._ident()}")
                return TypeName(tok)
            case _:
                raise TypeSyntaxError(self.text, f"unexpected {tok!r}")

    def _group(self, opener: str) -> None:
        """Skip a bracketed group starting at the current token."""
        self._expect(opener)
        closer = _BRACKETS[opener]
        depth = 1
        while depth:
            tok = self._next()
            if tok == opener:
                depth += 1
            elif tok == closer:
                depth -= 1

    def _opaque(self, start: int) -> TypeName:
        tokens = self.tokens[start : self.pos]
        if "$" in tokens:
            raise TypeSyntaxError(self.text, "type parameters are not allowed inside func, struct or interface types")
        return TypeName(_join(tokens))


def parse_type(text: str, scope: str = "") -> TypeExpr:
    """Parse a type expression.

    Args:
        text: Type text, e.g. ``"map[string][]$T"``.
        scope: Scope given to every type parameter in the expression,
            normally the name of the node the type belongs to.

    Returns:
        The parsed expression tree.

    Raises:
        TypeSyntaxError: If ``text`` is not a valid type.

    Example:
        >>> str(parse_type("map[string][]$T", "node1"))
        'map[string][]$T'

    """
    if not text.strip():
        raise TypeSyntaxError(text, "empty type")
    return _Parser(text, scope).parse()
