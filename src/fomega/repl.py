"""REPL (Read-Eval-Print Loop) for fomega.

Each input line is an expression: it is parsed, type checked and reduced,
and the result is printed with its type. Commands start with ``:``.
"""

from __future__ import annotations
from typing import List, Optional
import readline
import os
import sys

from .parser import parse
from .renamer import rename
from .typechecker import CheckerOptions, type_of
from .evaluator import Reducer
from .normalize import Strategy, TYPE_STRATEGIES
from .errors import FOmegaError, enable_trace, disable_trace, clear_trace, get_trace
from .colors import Colors
from .syntax import Expr


KEYWORDS = ["let", "in", "type", "kind", "lambda", "forall", "Int"]
COMMANDS = [":help", ":quit", ":type", ":reduce", ":ast", ":strategy", ":load", ":verbose"]


class ReplState:
    """Settings shared by every input of a REPL session."""

    def __init__(self, strategy: Strategy = Strategy.NORMAL_ORDER, steps: int = 100,
                 fuel: Optional[int] = 10_000, cache: bool = True, verbose: bool = False):
        self.strategy = strategy
        self.steps = steps
        self.fuel = fuel
        self.cache = cache
        self.verbose = verbose
        self.history: List[str] = []

    def options(self, source: str, filename: str = "<repl>") -> CheckerOptions:
        type_strategy = self.strategy if self.strategy in TYPE_STRATEGIES else Strategy.NORMAL_ORDER
        return CheckerOptions(fuel=self.fuel, strategy=type_strategy, cache_aliases=self.cache,
                              source_code=source, filename=filename)

    def check(self, source: str, filename: str = "<repl>"):
        """Parse and type check ``source``; returns the tree and its type."""
        clear_trace()
        expr = parse(source, filename)
        if self.verbose:
            enable_trace()
        try:
            ty = type_of(expr, self.options(source, filename))
            if self.verbose:
                print(get_trace().format())
        finally:
            disable_trace()
        return expr, ty

    def reduce(self, expr: Expr) -> Expr:
        renamed, counter = rename(expr)
        reducer = Reducer(self.strategy, self.steps, counter, trace=self.verbose)
        result = reducer.reduce(renamed)
        if self.verbose:
            for i, step in enumerate(reducer.history, 1):
                print(f"  {Colors.dim(f'{i}.')} {step}")
        return result


class Repl:
    """The REPL interface."""

    def __init__(self, **settings):
        self.state = ReplState(**settings)

        # Setup readline for better interaction
        self._setup_readline()

    def _setup_readline(self):
        """Setup readline with history and completion."""
        histfile = os.path.expanduser("~/.fomega_history")
        try:
            readline.read_history_file(histfile)
        except (FileNotFoundError, PermissionError):
            pass

        # Save history on exit
        import atexit
        atexit.register(readline.write_history_file, histfile)

        readline.set_completer(self._completer)
        readline.parse_and_bind("tab: complete")

    def _completer(self, text: str, state: int) -> Optional[str]:
        """Tab completion for keywords and commands."""
        names = COMMANDS if text.startswith(":") else KEYWORDS
        matches = [name for name in names if name.startswith(text)]

        if state < len(matches):
            return matches[state]
        return None

    def run(self):
        """Run the REPL."""
        print(Colors.bold("fomega REPL v0.1.0"))
        print(f"Type {Colors.keyword(':help')} for help, {Colors.keyword(':quit')} to exit")
        print()

        while True:
            try:
                line = input(f"{Colors.BRIGHT_BLUE}fomega>{Colors.RESET} ")

                if line.startswith(":"):
                    self.handle_command(line)
                else:
                    self.process_input(line)

            except EOFError:
                print("\nGoodbye!")
                break
            except KeyboardInterrupt:
                print("\nUse :quit to exit")
                continue

    def handle_command(self, command: str):
        """Handle REPL commands."""
        cmd, _, arg = command.partition(" ")
        arg = arg.strip()

        if cmd in [":quit", ":q"]:
            print("Goodbye!")
            sys.exit(0)

        elif cmd in [":help", ":h"]:
            self.show_help()

        elif cmd in [":type", ":t"]:
            if not arg:
                print("Usage: :type <expr>")
            else:
                self.run_guarded(self.show_type, arg)

        elif cmd in [":reduce", ":r"]:
            if not arg:
                print("Usage: :reduce <expr>")
            else:
                self.run_guarded(self.show_reduction, arg)

        elif cmd == ":ast":
            if not arg:
                print("Usage: :ast <expr>")
            else:
                self.run_guarded(lambda source: print(repr(parse(source, "<repl>"))), arg)

        elif cmd == ":strategy":
            self.set_strategy(arg)

        elif cmd == ":verbose":
            self.state.verbose = not self.state.verbose
            print(f"Verbose mode {'on' if self.state.verbose else 'off'}")

        elif cmd == ":load":
            if not arg:
                print("Usage: :load <filename>")
            else:
                self.load_file(arg)

        else:
            print(f"Unknown command: {cmd}")
            print("Type :help for help")

    def show_help(self):
        """Show help message."""
        help_text = """
fomega REPL Commands:

  :help, :h             Show this help message
  :quit, :q             Exit the REPL
  :type, :t <expr>      Show the type of an expression
  :reduce, :r <expr>    Reduce an expression without type checking
  :ast <expr>           Show the syntax tree of an expression
  :strategy [name]      Show or set the strategy (normal, applicative, cbn, cbv)
  :verbose              Toggle the derivation trace and reduction steps
  :load <file>          Check and reduce the expression in a file

Expressions:

  42                        Integer literal
  λx: Int. x                Value abstraction (also \\x: Int. x)
  λA: *. λx: A. x           Type abstraction
  f x                       Application
  f [Int]                   Type application
  (e : T)                   Annotation
  let x: T = e in b         Let binding
  type T: * = Int in b      Type alias
  kind K = * -> * in b      Kind alias

Types and kinds:

  Int, A -> B               Base and function types
  ∀A: *. A -> A             Universal type (also forall)
  λF: * -> *. F Int         Type operator
  *, * -> *                 Kinds

Example:

  let id: ∀A: *. A -> A = λA: *. λx: A. x in id [Int] 5
"""
        print(help_text)

    def set_strategy(self, name: str):
        if not name:
            print(f"Strategy: {self.state.strategy.value}")
            return
        try:
            self.state.strategy = Strategy(name)
        except ValueError:
            choices = ", ".join(s.value for s in Strategy)
            print(Colors.error(f"Unknown strategy '{name}' (choose from {choices})"))
            return
        print(f"Strategy set to {self.state.strategy.value}")

    def show_type(self, source: str):
        expr, ty = self.state.check(source)
        print(f"{expr} : {Colors.type_name(str(ty))}")

    def show_reduction(self, source: str):
        print(Colors.literal(str(self.state.reduce(parse(source, "<repl>")))))

    def load_file(self, filename: str):
        """Check and reduce the expression in a file."""
        try:
            with open(filename, 'r') as f:
                content = f.read()
        except OSError as e:
            print(Colors.error(f"Cannot read {filename}: {e}"))
            return

        self.run_guarded(self.evaluate, content, filename)

    def process_input(self, input_str: str):
        """Process a line of input."""
        if not input_str.strip():
            return

        self.state.history.append(input_str)
        self.run_guarded(self.evaluate, input_str)

    def evaluate(self, source: str, filename: str = "<repl>"):
        expr, ty = self.state.check(source, filename)
        result = self.state.reduce(expr)
        print(f"{Colors.literal(str(result))} : {Colors.type_name(str(ty))}")

    def run_guarded(self, action, *args):
        """Run an action, reporting fomega errors instead of leaving the loop."""
        try:
            action(*args)
        except FOmegaError as e:
            print(e.format_error())


def main():
    """Entry point for the REPL."""
    repl = Repl()
    repl.run()


if __name__ == "__main__":
    main()
