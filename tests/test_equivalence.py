"""Tests for type and kind equivalence."""

import pytest
from fomega.equivalence import check_kind_equiv, check_type_equiv
from fomega.normalize import normalize
from fomega.translate import TypeTranslator
from fomega.context import Context
from fomega.core import *
from fomega.errors import TypeClash, VariableClash
from fomega.parser import parse_type
from fomega.renamer import Renamer
from fomega.syntax import Name


def elaborate(source: str, ctx: Context = None) -> Annotated:
    ty = parse_type(source) if ctx else Renamer().rename_type(parse_type(source))
    return TypeTranslator().infer_type(ctx or Context(), ty)


def test_kind_equivalence():
    check_kind_equiv(STAR, STAR)
    check_kind_equiv(KArrow(STAR, STAR), KArrow(STAR, STAR))

    with pytest.raises(TypeClash) as exc_info:
        check_kind_equiv(STAR, KArrow(STAR, STAR))
    assert "kind clash" in str(exc_info.value)


def test_int_and_arrows():
    check_type_equiv(elaborate("Int"), elaborate("Int"))
    check_type_equiv(elaborate("Int -> Int -> Int"), elaborate("Int -> Int -> Int"))


def test_variable_clash():
    a = var_type(Name("A", 1), STAR)
    b = var_type(Name("B", 2), STAR)

    check_type_equiv(a, a)
    with pytest.raises(VariableClash) as exc_info:
        check_type_equiv(a, b)
    assert exc_info.value.received == a
    assert exc_info.value.expected == b


def test_same_text_different_binding():
    with pytest.raises(VariableClash):
        check_type_equiv(var_type(Name("A", 1), STAR), var_type(Name("A", 2), STAR))


def test_alpha_equivalent_foralls():
    check_type_equiv(elaborate("∀A: *. A -> A"), elaborate("∀B: *. B -> B"))
    check_type_equiv(elaborate("∀A: *. ∀B: *. A -> B"), elaborate("∀X: *. ∀Y: *. X -> Y"))


def test_binder_order_matters():
    with pytest.raises(VariableClash):
        check_type_equiv(elaborate("∀A: *. ∀B: *. A -> B"), elaborate("∀X: *. ∀Y: *. Y -> X"))


def test_forall_kinds_must_agree():
    with pytest.raises(TypeClash):
        check_type_equiv(elaborate("∀A: *. Int"), elaborate("∀A: * -> *. Int"))


def test_structural_clash():
    with pytest.raises(TypeClash):
        check_type_equiv(elaborate("Int"), elaborate("Int -> Int"))
    with pytest.raises(TypeClash):
        check_type_equiv(elaborate("∀A: *. A"), elaborate("Int -> Int"))


def test_operators_and_applications():
    check_type_equiv(elaborate("λA: *. A -> Int"), elaborate("λB: *. B -> Int"))

    ctx = Context().add_type(Name("F"), KArrow(STAR, STAR))
    check_type_equiv(elaborate("F Int", ctx), elaborate("F Int", ctx))
    with pytest.raises(TypeClash):
        check_type_equiv(elaborate("F Int", ctx), elaborate("F (Int -> Int)", ctx))


def test_equivalence_does_not_reduce():
    redex = elaborate("(λA: *. A) Int")

    with pytest.raises(TypeClash):
        check_type_equiv(redex, elaborate("Int"))
    check_type_equiv(normalize(redex), elaborate("Int"))


@pytest.mark.parametrize("source", [
    "Int",
    "Int -> Int",
    "∀A: *. A -> A",
    "∀F: * -> *. F Int -> F Int",
    "∀A: *. ∀B: *. (A -> B) -> A -> B",
])
def test_normal_form_is_equivalent_to_elaboration(source):
    """Normalizing a redex-free type keeps it in its equivalence class."""
    ty = elaborate(source)

    check_type_equiv(normalize(ty), ty)


@pytest.mark.parametrize("source", [
    "(λA: *. A -> A) Int",
    "∀B: *. (λF: * -> *. F B) (λA: *. A -> A)",
])
def test_normal_forms_represent_their_class(source):
    ty = normalize(elaborate(source))

    check_type_equiv(normalize(ty), ty)
