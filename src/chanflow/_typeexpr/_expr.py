"""Immutable type expression trees with node-scoped type parameters."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, ClassVar

if TYPE_CHECKING:
    from collections.abc import Callable, Iterator


@dataclass(slots=True, frozen=True)
class TypeName:
    """A concrete named type such as ``int``, ``pkg.Name`` or ``interface{}``."""

    name: str

    def __str__(self) -> str:
        return self.name


@dataclass(slots=True, frozen=True)
class TypeParam:
    """A free type parameter, scoped to the node it was instantiated for.

    Two parameters spelled the same way on different nodes are distinct,
    because the scope takes part in equality and hashing.
    """

    scope: str
    ident: str

    PREFIX: ClassVar[str] = "$"

    def __str__(self) -> str:
        return f"{self.PREFIX}{self.ident}"


@dataclass(slots=True, frozen=True)
class Compound:
    """A type constructor applied to argument types.

    Heads:
    - ``[]``: slice, one argument
    - ``[N]``: fixed-length array, one argument
    - ``*``: pointer, one argument
    - ``chan``, ``<-chan``, ``chan<-``: channel, one argument
    - ``map``: map, key and value arguments
    """

    head: str
    args: tuple[TypeExpr, ...]

    def __str__(self) -> str:
        match self.head, self.args:
            case "map", (key, value):
                return f"map[{key}]{value}"
            case "chan" | "<-chan" | "chan<-", (elem,):
                return f"{self.head} {elem}"
            case head, (elem,):
                return f"{head}{elem}"
            case _:
                msg = f"Malformed compound type: {self.head} with {len(self.args)} argument(s)"
                raise ValueError(msg)


TypeExpr = TypeName | TypeParam | Compound


def iter_params(expr: TypeExpr) -> Iterator[TypeParam]:
    """Yield every type parameter occurring in ``expr``, in order of appearance."""
    match expr:
        case TypeParam():
            yield expr
        case Compound(args=args):
            for arg in args:
                yield from iter_params(arg)
        case TypeName():
            pass


def map_params(expr: TypeExpr, fn: Callable[[TypeParam], TypeExpr]) -> TypeExpr:
    """Rebuild ``expr`` with every parameter replaced by ``fn(param)``."""
    match expr:
        case TypeParam():
            return fn(expr)
        case Compound(head=head, args=args):
            return Compound(head, tuple(map_params(arg, fn) for arg in args))
        case TypeName():
            return expr


class Type:
    """Mutable holder of a type expression, used for pins and channels.

    Inference refines the held expression in place as bindings are learned,
    and finally lithifies it so no free parameter remains.
    """

    __slots__ = ("expr",)

    def __init__(self, expr: TypeExpr) -> None:
        self.expr = expr

    @classmethod
    def parse(cls, scope: str, text: str) -> Type:
        """Parse ``text`` with any parameters scoped to ``scope``."""
        from ._parser import parse_type  # noqa: PLC0415

        return cls(parse_type(text, scope))

    @property
    def params(self) -> frozenset[TypeParam]:
        return frozenset(iter_params(self.expr))

    @property
    def is_concrete(self) -> bool:
        return next(iter_params(self.expr), None) is None

    def refine(self, bindings: Callable[[TypeExpr], TypeExpr]) -> bool:
        """Substitute known bindings into this type.

        Args:
            bindings: Substitution to apply, usually ``TypeInferenceMap.apply``.

        Returns:
            True if the expression changed.

        """
        refined = bindings(self.expr)
        if refined == self.expr:
            return False
        self.expr = refined
        return True

    def lithify(self, default: TypeExpr) -> bool:
        """Force every remaining free parameter to ``default``.

        Returns:
            True if the expression changed.

        """
        if self.is_concrete:
            return False
        self.expr = map_params(self.expr, lambda _: default)
        return True

    def copy(self) -> Type:
        return Type(self.expr)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Type):
            return NotImplemented
        return self.expr == other.expr

    def __str__(self) -> str:
        return str(self.expr)

    def __repr__(self) -> str:
        return f"Type({self})"
