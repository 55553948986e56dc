"""Tests for the REPL commands."""

import pytest
from fomega.repl import Repl, ReplState
from fomega.normalize import Strategy
from fomega.core import int_type


@pytest.fixture
def repl(monkeypatch):
    monkeypatch.setattr(Repl, "_setup_readline", lambda self: None)
    return Repl()


def test_state_check():
    expr, ty = ReplState().check("(λx: Int. x) 5")

    assert ty == int_type()
    assert str(expr) == "(λx: Int. x) 5"


def test_process_input(repl, capsys):
    repl.process_input("(λx: Int. x) 5")

    assert "5 : Int" in capsys.readouterr().out
    assert repl.state.history == ["(λx: Int. x) 5"]


def test_blank_input_is_ignored(repl, capsys):
    repl.process_input("   ")

    assert capsys.readouterr().out == ""
    assert repl.state.history == []


def test_errors_are_reported(repl, capsys):
    repl.process_input("(5) 6")

    assert "expected a function type" in capsys.readouterr().out


def test_type_command(repl, capsys):
    repl.handle_command(":type λx: Int. x")

    assert "λx: Int. x : Int -> Int" in capsys.readouterr().out


def test_reduce_command(repl, capsys):
    repl.handle_command(":reduce (λx: Int. x) 5")

    assert capsys.readouterr().out.strip() == "5"


def test_ast_command(repl, capsys):
    repl.handle_command(":ast 5")

    assert "Literal(value=5" in capsys.readouterr().out


def test_strategy_command(repl, capsys):
    repl.handle_command(":strategy cbv")
    assert repl.state.strategy == Strategy.CALL_BY_VALUE

    repl.handle_command(":strategy bogus")
    assert "Unknown strategy" in capsys.readouterr().out
    assert repl.state.strategy == Strategy.CALL_BY_VALUE


def test_weak_strategy_still_checks_types(repl, capsys):
    repl.handle_command(":strategy cbn")
    repl.process_input("λy: Int. (λx: Int. x) y")

    assert "λy: Int. (λx: Int. x) y : Int -> Int" in capsys.readouterr().out


def test_verbose_command(repl, capsys):
    repl.handle_command(":verbose")
    assert repl.state.verbose

    repl.process_input("(λx: Int. x) 5")
    out = capsys.readouterr().out
    assert "Type Derivation Trace" in out
    assert "5 : Int" in out


def test_load_command(repl, capsys, tmp_path):
    program = tmp_path / "prog.fw"
    program.write_text("let x: Int = 3 in x\n", encoding="utf-8")

    repl.handle_command(f":load {program}")
    assert "3 : Int" in capsys.readouterr().out

    repl.handle_command(f":load {tmp_path / 'missing.fw'}")
    assert "Cannot read" in capsys.readouterr().out


def test_usage_and_unknown_commands(repl, capsys):
    repl.handle_command(":type")
    repl.handle_command(":frobnicate")

    out = capsys.readouterr().out
    assert "Usage: :type <expr>" in out
    assert "Unknown command: :frobnicate" in out


def test_quit(repl):
    with pytest.raises(SystemExit):
        repl.handle_command(":quit")


def test_completion(repl):
    assert repl._completer(":ty", 0) == ":type"
    assert repl._completer("la", 0) == "lambda"
    assert repl._completer("la", 1) is None
