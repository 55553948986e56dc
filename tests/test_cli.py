"""Tests for the command-line interface."""

import pytest
from click.testing import CliRunner

from fomega.cli import checker_options, main
from fomega.normalize import Strategy


@pytest.fixture
def runner():
    return CliRunner()


def test_version(runner):
    result = runner.invoke(main, ["--version"])

    assert result.exit_code == 0
    assert "fomega version" in result.output


def test_expression(runner):
    result = runner.invoke(main, ["--no-color", "-e", "(λx: Int. x) 5"])

    assert result.exit_code == 0
    assert "5 : Int" in result.output


def test_file(runner, tmp_path):
    program = tmp_path / "id.fw"
    program.write_text(
        "-- the polymorphic identity\n"
        "let id: ∀A: *. A -> A = ΛA: *. λx: A. x in\n"
        "id [Int] 42\n",
        encoding="utf-8",
    )

    result = runner.invoke(main, ["--no-color", str(program)])

    assert result.exit_code == 0
    assert "42 : Int" in result.output


def test_type_check_only(runner):
    result = runner.invoke(main, ["--no-color", "--type-check-only", "-e", "ΛA: *. λx: A. x"])

    assert result.exit_code == 0
    assert "Type checked successfully" in result.output
    assert "∀A: *. A -> A" in result.output


def test_ast(runner):
    result = runner.invoke(main, ["--ast", "-e", "(5 : Int)"])

    assert result.exit_code == 0
    assert "Abstract Syntax Tree" in result.output
    assert "Annotation" in result.output


def test_strategy(runner):
    source = "λy: Int. (λx: Int. x) y"

    normal = runner.invoke(main, ["--no-color", "-e", source])
    weak = runner.invoke(main, ["--no-color", "--strategy", "cbn", "-e", source])

    assert "λy: Int. y : Int -> Int" in normal.output
    assert "(λx: Int. x) y" in weak.output


def test_steps(runner):
    result = runner.invoke(main, ["--no-color", "--steps", "0", "-e", "(λx: Int. x) 5"])

    assert result.exit_code == 0
    assert "(λx: Int. x) 5 : Int" in result.output


def test_verbose(runner):
    result = runner.invoke(main, ["--no-color", "-v", "-e", "(λx: Int. x) 5"])

    assert result.exit_code == 0
    assert "Type Derivation Trace" in result.output
    assert "Reducing" in result.output


def test_type_error(runner):
    result = runner.invoke(main, ["--no-color", "-e", "(5) 6"])

    assert result.exit_code == 1
    assert "expected a function type but got Int" in result.output


def test_parse_error(runner):
    result = runner.invoke(main, ["--no-color", "-e", "λx. x"])

    assert result.exit_code == 1
    assert "Parse error" in result.output


def test_fuel(runner):
    source = "type Id: * -> * = λA: *. A in λx: Id Int. x"

    starved = runner.invoke(main, ["--no-color", "--fuel", "1", "-e", source])
    assert starved.exit_code == 1
    assert "budget" in starved.output

    fed = runner.invoke(main, ["--no-color", "--no-cache", "-e", source])
    assert fed.exit_code == 0
    assert "Int -> Int" in fed.output


def test_missing_file(runner):
    result = runner.invoke(main, ["does-not-exist.fw"])

    assert result.exit_code != 0


def test_checker_options_for_weak_strategies():
    options = checker_options(Strategy.CALL_BY_VALUE, 50, False)

    assert options.strategy == Strategy.NORMAL_ORDER
    assert options.fuel == 50
    assert not options.cache_aliases
    assert checker_options(Strategy.APPLICATIVE_ORDER, None, True).strategy == Strategy.APPLICATIVE_ORDER


def test_zero_fuel_is_unbounded(runner):
    source = "type Id: * -> * = λA: *. A in λx: Id Int. x"
    result = runner.invoke(main, ["--no-color", "--fuel", "0", "-e", source])

    assert result.exit_code == 0
    assert "Int -> Int" in result.output


def test_deeply_nested_input(runner):
    result = runner.invoke(main, ["--no-color", "-e", "(" * 5000 + "5" + ")" * 5000])

    assert result.exit_code == 1
    assert "nested too deeply" in result.output
