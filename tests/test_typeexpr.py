"""Tests for type expressions, parsing and unification."""

import pytest

from chanflow._typeexpr import (
    Compound,
    Type,
    TypeInferenceMap,
    TypeName,
    TypeParam,
    TypeSyntaxError,
    UnificationError,
    parse_type,
)

INT = TypeName("int")
STRING = TypeName("string")
ANY = TypeName("interface{}")


def p(ident: str, scope: str = "n") -> TypeParam:
    return TypeParam(scope, ident)


class TestParseType:
    """Tests for parse_type."""

    def test_named(self) -> None:
        assert parse_type("int") == INT

    def test_qualified_name(self) -> None:
        assert parse_type("time.Duration") == TypeName("time.Duration")

    def test_empty_interface_and_struct(self) -> None:
        assert parse_type("interface{}") == ANY
        assert parse_type("struct {}") == TypeName("struct{}")

    def test_param_is_scoped(self) -> None:
        assert parse_type("$T", "node1") == TypeParam("node1", "T")

    def test_compounds(self) -> None:
        expr = parse_type("map[string][]*$V", "x")
        assert expr == Compound(
            "map",
            (STRING, Compound("[]", (Compound("*", (TypeParam("x", "V"),)),))),
        )

    def test_array_and_chan(self) -> None:
        assert parse_type("[4]chan int") == Compound("[4]", (Compound("chan", (INT,)),))

    @pytest.mark.parametrize("text", ["map[string][]*$V", "chan []int", "[3]$T", "*pkg.Thing", "interface{}"])
    def test_str_renders_source_syntax(self, text: str) -> None:
        assert str(parse_type(text, "s")) == text

    @pytest.mark.parametrize(
        ("text", "reason"),
        [
            ("", "empty type"),
            ("map[int", "unexpected end"),
            ("int string", "trailing"),
            ("$", "unexpected end"),
            ("$1", "expected identifier"),
            ("[x]int", "array length"),
            ("int%", "unexpected character"),
            ("interface{", "unexpected end"),
        ],
    )
    def test_invalid(self, text: str, reason: str) -> None:
        with pytest.raises(TypeSyntaxError, match=reason):
            parse_type(text)

    def test_syntax_error_is_value_error(self) -> None:
        with pytest.raises(ValueError, match="Invalid type"):
            parse_type("[]")


class TestParseOpaqueTypes:
    """Tests for func, struct and interface types and directional channels."""

    @pytest.mark.parametrize(
        ("text", "expected"),
        [
            ("func(int) error", "func(int) error"),
            ("func()", "func()"),
            ("func(a, b int) (int, error)", "func(a, b int) (int, error)"),
            ("func(xs ...string) <-chan int", "func(xs ...string) <-chan int"),
            ("struct{ X int }", "struct{ X int }"),
            ("struct{X int; Y map[string][]byte}", "struct{ X int; Y map[string][]byte }"),
            ("struct{ Name string `json:\"name\"` }", "struct{ Name string `json:\"name\"` }"),
            ("interface{ String() string }", "interface{ String() string }"),
            ("interface { Read(p []byte) (n int, err error) }", "interface{ Read(p []byte) (n int, err error) }"),
        ],
    )
    def test_kept_as_named_types(self, text: str, expected: str) -> None:
        assert parse_type(text) == TypeName(expected)

    def test_spacing_is_normalised(self) -> None:
        assert parse_type("func( int )error") == parse_type("func(int) error")
        assert parse_type("struct {X int}") == parse_type("struct{ X int }")

    def test_opaque_element_inside_compound(self) -> None:
        assert parse_type("[]func() error") == Compound("[]", (TypeName("func() error"),))
        assert parse_type("map[string]func(int)") == Compound("map", (STRING, TypeName("func(int)")))
        assert str(parse_type("chan struct{ ok bool }")) == "chan struct{ ok bool }"

    def test_directional_channels(self) -> None:
        assert parse_type("<-chan int") == Compound("<-chan", (INT,))
        assert parse_type("chan<- $T", "n") == Compound("chan<-", (p("T"),))
        assert str(parse_type("<-chan []string")) == "<-chan []string"
        assert str(parse_type("chan<- int")) == "chan<- int"

    def test_directional_channels_do_not_unify_with_plain(self) -> None:
        with pytest.raises(UnificationError):
            TypeInferenceMap().infer(parse_type("<-chan int"), parse_type("chan int"))

    @pytest.mark.parametrize("text", ["func() $T", "struct{ X $T }", "interface{ Get() $T }"])
    def test_parameters_inside_opaque_types_are_rejected(self, text: str) -> None:
        with pytest.raises(TypeSyntaxError, match="not allowed inside"):
            parse_type(text, "n")

    @pytest.mark.parametrize("text", ["func(int", "struct{ X int", "func int"])
    def test_unbalanced(self, text: str) -> None:
        with pytest.raises(TypeSyntaxError):
            parse_type(text)


class TestTypeInferenceMap:
    """Tests for unification."""

    def test_param_binds_to_concrete(self) -> None:
        types = TypeInferenceMap()
        types.infer(p("T"), INT)
        assert types == {p("T"): INT}

    def test_concrete_on_left_binds_param_on_right(self) -> None:
        types = TypeInferenceMap()
        types.infer(STRING, p("T"))
        assert types.apply(p("T")) == STRING

    def test_equal_names_need_no_binding(self) -> None:
        types = TypeInferenceMap()
        types.infer(INT, INT)
        assert types == {}

    def test_same_ident_in_different_scopes_is_independent(self) -> None:
        types = TypeInferenceMap()
        types.infer(p("T", "a"), INT)
        types.infer(p("T", "b"), STRING)
        assert types.apply(p("T", "a")) == INT
        assert types.apply(p("T", "b")) == STRING

    def test_param_chain_resolves_transitively(self) -> None:
        types = TypeInferenceMap()
        types.infer(p("A", "x"), p("B", "y"))
        types.infer(p("B", "y"), p("C", "z"))
        types.infer(p("C", "z"), INT)
        assert types.apply(p("A", "x")) == INT
        assert types.apply(Compound("[]", (p("A", "x"),))) == Compound("[]", (INT,))

    def test_compound_unifies_argumentwise(self) -> None:
        types = TypeInferenceMap()
        types.infer(parse_type("map[$K]$V", "n"), parse_type("map[string][]int", "m"))
        assert types.apply(p("K")) == STRING
        assert types.apply(p("V")) == Compound("[]", (INT,))

    def test_param_unified_with_itself_after_binding(self) -> None:
        types = TypeInferenceMap()
        types.infer(p("T"), INT)
        types.infer(p("T"), INT)
        types.infer(INT, p("T"))
        assert types == {p("T"): INT}

    def test_conflicting_names(self) -> None:
        types = TypeInferenceMap()
        with pytest.raises(UnificationError, match="different named types") as excinfo:
            types.infer(INT, STRING)
        assert excinfo.value.left == INT
        assert excinfo.value.right == STRING

    def test_conflict_through_binding(self) -> None:
        types = TypeInferenceMap()
        types.infer(p("T"), INT)
        with pytest.raises(UnificationError):
            types.infer(p("T"), STRING)

    def test_constructor_mismatch(self) -> None:
        types = TypeInferenceMap()
        with pytest.raises(UnificationError, match="different type constructors"):
            types.infer(parse_type("[]int"), parse_type("chan int"))

    def test_array_lengths_must_match(self) -> None:
        types = TypeInferenceMap()
        with pytest.raises(UnificationError):
            types.infer(parse_type("[2]$T", "n"), parse_type("[3]int"))

    def test_named_against_compound(self) -> None:
        types = TypeInferenceMap()
        with pytest.raises(UnificationError):
            types.infer(INT, parse_type("[]int"))

    def test_occurs_check(self) -> None:
        types = TypeInferenceMap()
        with pytest.raises(UnificationError, match="recursive type"):
            types.infer(p("T"), parse_type("[]$T", "n"))

    def test_occurs_check_through_chain(self) -> None:
        types = TypeInferenceMap()
        types.infer(p("A"), p("B"))
        with pytest.raises(UnificationError, match="recursive type"):
            types.infer(p("B"), parse_type("*$A", "n"))


class TestType:
    """Tests for the mutable Type holder."""

    def test_parse_and_params(self) -> None:
        t = Type.parse("node", "map[$K]$V")
        assert t.params == frozenset({TypeParam("node", "K"), TypeParam("node", "V")})
        assert not t.is_concrete

    def test_refine_reports_change(self) -> None:
        types = TypeInferenceMap({p("T"): INT})
        t = Type(Compound("chan", (p("T"),)))
        assert t.refine(types.apply) is True
        assert str(t) == "chan int"
        assert t.refine(types.apply) is False

    def test_lithify_replaces_every_free_param(self) -> None:
        t = Type.parse("n", "map[$K][]$V")
        assert t.lithify(ANY) is True
        assert str(t) == "map[interface{}][]interface{}"
        assert t.is_concrete
        assert t.lithify(ANY) is False

    def test_copy_is_independent(self) -> None:
        t = Type.parse("n", "$T")
        c = t.copy()
        c.lithify(INT)
        assert t.expr == p("T")
        assert c == Type(INT)
