"""Tests for the type checker."""

import pytest
from fomega.parser import parse, parse_type
from fomega.renamer import Renamer, rename
from fomega.typechecker import CheckerOptions, TypeChecker, type_of
from fomega.translate import TypeTranslator
from fomega.normalize import Strategy, normalize
from fomega.equivalence import check_type_equiv
from fomega.context import Context
from fomega.core import *
from fomega.errors import (
    Mismatch, NormalizationBudgetExceeded, TypeClash, TypeNotAArrow, TypeNotAForall,
    UndefinedVariable, VariableClash, clear_trace, disable_trace, enable_trace, get_trace,
)
from fomega.syntax import SourceLocation


def expected_type(source: str) -> Annotated:
    ty = Renamer().rename_type(parse_type(source))
    return normalize(TypeTranslator().infer_type(Context(), ty))


def assert_type(source: str, type_source: str, options: CheckerOptions = None):
    check_type_equiv(type_of(parse(source), options), expected_type(type_source))


def test_literal():
    assert type_of(parse("42")) == int_type()


def test_identity_function():
    assert_type("λx: Int. x", "Int -> Int")


def test_polymorphic_identity():
    assert_type("ΛA: *. λx: A. x", "∀A: *. A -> A")


def test_type_application():
    """id [Int] 5 has type Int."""
    assert_type("let id: ∀A: *. A -> A = ΛA: *. λx: A. x in id [Int] 5", "Int")
    assert_type("(ΛA: *. λx: A. x) [Int -> Int]", "(Int -> Int) -> Int -> Int")


def test_lazy_type_alias():
    source = "type Id: * = ∀A:*.(A->A) in let f: Id = λA:*.λx:A.x in f [Int] 3"
    assert_type(source, "Int")


def test_shadowing():
    assert_type("λx: Int. λx: Int -> Int. x", "Int -> (Int -> Int) -> Int -> Int")


def test_type_operators():
    assert_type("type Id: * -> * = λA: *. A in λx: Id Int. x", "Int -> Int")
    assert_type("type Const: * -> * -> * = λA: *. λB: *. A in λx: Const Int (Int -> Int). x",
                "Int -> Int")


def test_operator_types_in_application():
    source = "type Id: * -> * = λA: *. A in let f: Id Int -> Int = λx: Int. x in f 5"
    assert_type(source, "Int")


def test_higher_kinded_abstraction():
    assert_type("ΛF: * -> *. λx: F Int. x", "∀F: * -> *. F Int -> F Int")
    assert_type("(ΛF: * -> *. λx: F Int. x) [λA: *. A -> A]", "(Int -> Int) -> Int -> Int")


def test_kind_alias():
    source = "kind K = * -> * in type Id: K = λA: *. A in λx: Id Int. x"
    assert_type(source, "Int -> Int")


def test_checking_against_forall_renames_binder():
    source = "let f: ∀A: *. A -> A = ΛB: *. λx: B. x in f"
    assert_type(source, "∀C: *. C -> C")


def test_not_a_function():
    with pytest.raises(TypeNotAArrow) as exc_info:
        type_of(parse("(5) 6"))
    assert exc_info.value.type == int_type()


def test_not_a_forall():
    with pytest.raises(TypeNotAForall):
        type_of(parse("(5) [Int]"))
    with pytest.raises(TypeNotAForall):
        type_of(parse("(λx: Int. x) [Int]"))


def test_kind_mismatch():
    with pytest.raises(TypeClash):
        type_of(parse("ΛA: * -> *. λx: A. x"))
    with pytest.raises(TypeClash):
        type_of(parse("(ΛF: * -> *. 5) [Int]"))
    with pytest.raises(TypeClash):
        type_of(parse("let f: ∀A: *. A -> A = ΛB: * -> *. λx: Int. x in f"))


def test_argument_mismatch():
    with pytest.raises(Mismatch) as exc_info:
        type_of(parse("(λx: Int. x) (λy: Int. y)"))

    error = exc_info.value
    assert error.expected == int_type()
    assert error.actual == arrow_type(int_type(), int_type())
    assert isinstance(error.__cause__, TypeClash)


def test_parameter_annotation_mismatch():
    with pytest.raises(Mismatch) as exc_info:
        type_of(parse("((λx: Int. x) : (Int -> Int) -> Int)"))

    error = exc_info.value
    assert error.expected == arrow_type(int_type(), int_type())
    assert error.actual == int_type()


def test_variable_clash_is_reported_as_mismatch():
    with pytest.raises(Mismatch) as exc_info:
        type_of(parse("ΛA: *. ΛB: *. ((λx: A. x) : B -> B)"))
    assert isinstance(exc_info.value.__cause__, VariableClash)


def test_undefined_variable():
    with pytest.raises(UndefinedVariable) as exc_info:
        type_of(parse("λx: Int. y"))
    assert exc_info.value.name == "y"


def test_unused_aliases_are_never_elaborated():
    assert type_of(parse("type Bad: * = Int Int in 5")) == int_type()
    assert type_of(parse("let bad: Int = 5 6 in 7")) == int_type()


def test_used_alias_is_checked():
    with pytest.raises(TypeClash):
        type_of(parse("type Bad: * = Int Int in λx: Bad. x"))
    with pytest.raises(TypeNotAArrow):
        type_of(parse("let bad: Int = 5 6 in bad"))


def test_alias_cache_can_be_disabled():
    source = "let id: ∀A: *. A -> A = ΛA: *. λx: A. x in id [Int] (id [Int] 5)"

    assert_type(source, "Int", CheckerOptions(cache_aliases=False))
    assert_type(source, "Int", CheckerOptions(cache_aliases=True))


def test_alias_results_are_memoized():
    source = "let id: ∀A: *. A -> A = ΛA: *. λx: A. x in id [Int] (id [Int] 5)"
    renamed, _ = rename(parse(source))
    checker = TypeChecker()

    checker.infer_expr(Context(), renamed)
    assert list(checker._expr_aliases) == [renamed.name]


def test_renaming_preserves_meaning():
    source = "let id: ∀A: *. A -> A = ΛA: *. λx: A. x in ΛB: *. id [B]"
    expr = parse(source)
    renamed, _ = rename(expr)

    check_type_equiv(type_of(renamed), type_of(expr))


def test_applicative_order_checker():
    source = "type Id: * -> * = λA: *. A in λx: Id (Id Int). x"
    options = CheckerOptions(strategy=Strategy.APPLICATIVE_ORDER)

    assert_type(source, "Int -> Int", options)


def test_weak_strategies_are_rejected():
    with pytest.raises(ValueError):
        TypeChecker(CheckerOptions(strategy=Strategy.CALL_BY_NAME))


def test_normalization_budget():
    source = "type Id: * -> * = λA: *. A in λx: Id Int. x"

    with pytest.raises(NormalizationBudgetExceeded):
        type_of(parse(source), CheckerOptions(fuel=1))
    assert_type(source, "Int -> Int", CheckerOptions(fuel=None))


def test_error_location():
    with pytest.raises(TypeNotAArrow) as exc_info:
        type_of(parse("let x: Int = 5 in\n  x 6"))
    assert exc_info.value.location == SourceLocation(2, 3)


def test_kind_error_gets_enclosing_location():
    with pytest.raises(TypeClash) as exc_info:
        type_of(parse("λy: Int. λx: Int Int. x"))
    assert exc_info.value.location == SourceLocation(1, 10)


def test_error_carries_source():
    source = "(5) 6"
    with pytest.raises(TypeNotAArrow) as exc_info:
        type_of(parse(source, "prog.fw"), CheckerOptions(source_code=source, filename="prog.fw"))

    context = exc_info.value.context
    assert context.source_code == source
    assert context.filename == "prog.fw"


def test_derivation_trace():
    clear_trace()
    enable_trace()
    try:
        type_of(parse("(λx: Int. x) 5"))
        steps = get_trace().steps
    finally:
        disable_trace()
        clear_trace()

    assert any("Inferring type of App" in step.description for step in steps)
    assert any(step.result == "Int" for step in steps)


NESTED_H = "type H: (* -> *) -> * = λF: * -> *. ∀Y: *. Y -> F Y in "
CONST2 = "ΛA: *. λx: A. ΛB: *. λy: B. x"


@pytest.mark.parametrize("cache", [True, False])
def test_reused_alias_binders_do_not_capture(cache):
    """H is expanded twice; the inner copy of ∀Y must not capture the outer Y."""
    source = NESTED_H + f"(({CONST2}) : H (λX: *. H (λZ: *. X)))"

    assert_type(source, "∀A: *. A -> ∀B: *. B -> A", CheckerOptions(cache_aliases=cache))


def test_reused_alias_binders_under_instantiation():
    source = (NESTED_H + f"let f: H (λX: *. H (λZ: *. X)) = {CONST2} in "
              "f [Int] 1 [Int -> Int] (λz: Int. z)")

    assert type_of(parse(source)) == int_type()


def test_fresh_binders_continue_the_renamer_counter():
    source = NESTED_H + f"(({CONST2}) : H (λX: *. H (λZ: *. X)))"
    _, counter = rename(parse(source))

    inner = type_of(parse(source)).desc.body.desc.right
    assert inner.desc.param.id >= counter
