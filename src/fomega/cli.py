"""Command-line interface for fomega."""

import click
import sys
from typing import Optional

from fomega.normalize import Strategy, TYPE_STRATEGIES
from fomega.typechecker import CheckerOptions

# Version information
__version__ = "0.1.0"


def checker_options(strategy: Strategy, fuel: Optional[int], cache: bool,
                    source_code: Optional[str] = None,
                    filename: Optional[str] = None) -> CheckerOptions:
    """Build checker options from command-line settings.

    Weak strategies only apply to term reduction; types are then normalized
    in normal order.
    """
    return CheckerOptions(
        fuel=fuel,
        strategy=strategy if strategy in TYPE_STRATEGIES else Strategy.NORMAL_ORDER,
        cache_aliases=cache,
        source_code=source_code,
        filename=filename,
    )


@click.command()
@click.argument('filename', required=False, type=click.Path(exists=True))
@click.option('--expr', '-e', 'expression', help='Check and reduce EXPRESSION instead of a file')
@click.option('--ast', is_flag=True, help='Print the abstract syntax tree')
@click.option('--type-check-only', is_flag=True, help='Only type check, do not reduce')
@click.option('--verbose', '-v', is_flag=True, help='Show the type derivation and reduction steps')
@click.option('--strategy', type=click.Choice([s.value for s in Strategy]), default='normal',
              help='Reduction strategy')
@click.option('--steps', type=click.IntRange(min=0), default=100, help='Maximum reduction steps')
@click.option('--fuel', type=click.IntRange(min=0), default=10_000,
              help='Budget for type-level normalization (0 for unbounded)')
@click.option('--no-cache', is_flag=True, help='Re-elaborate aliases at every use')
@click.option('--no-color', is_flag=True, help='Disable colored output')
@click.option('--version', is_flag=True, help='Show version information')
def main(filename: Optional[str] = None,
         expression: Optional[str] = None,
         ast: bool = False,
         type_check_only: bool = False,
         verbose: bool = False,
         strategy: str = 'normal',
         steps: int = 100,
         fuel: Optional[int] = 10_000,
         no_cache: bool = False,
         no_color: bool = False,
         version: bool = False) -> None:
    """fomega - a checker and reducer for System F-omega.

    If FILENAME or --expr is given, type check and reduce it.
    Otherwise, start an interactive REPL.

    Examples:

      fomega                                  # Start REPL

      fomega program.fw                       # Check and reduce a program

      fomega -e '(λx: Int. x) 5'              # Check and reduce an expression

      fomega program.fw --ast                 # Show AST
    """
    from fomega.colors import Colors, disable_colors

    if version:
        click.echo(f"fomega version {__version__}")
        click.echo("A type checker for System F-omega")
        sys.exit(0)

    if no_color:
        disable_colors()

    chosen = Strategy(strategy)
    fuel = fuel or None

    if filename is None and expression is None:
        from fomega.repl import Repl
        repl = Repl(strategy=chosen, steps=steps, fuel=fuel, cache=not no_cache, verbose=verbose)
        try:
            repl.run()
        except KeyboardInterrupt:
            click.echo("\nGoodbye!")
        return

    from fomega.parser import parse
    from fomega.renamer import rename
    from fomega.typechecker import type_of
    from fomega.evaluator import Reducer
    from fomega.errors import FOmegaError, enable_trace, disable_trace, clear_trace, get_trace

    source = expression
    origin = "<expr>"
    try:
        if filename:
            with open(filename, 'r') as f:
                source = f.read()
            origin = filename

        if verbose:
            click.echo(f"Parsing {origin}...")
        expr = parse(source, origin)

        if ast:
            click.echo(f"Abstract Syntax Tree:\n{expr!r}")
            return

        if verbose:
            click.echo("Type checking...")
            enable_trace()
        ty = type_of(expr, checker_options(chosen, fuel, not no_cache, source, origin))
        if verbose:
            click.echo(get_trace().format())

        if type_check_only:
            click.echo(Colors.success(f"Type checked successfully: {Colors.type_name(str(ty))}"))
            return

        if verbose:
            click.echo(f"Reducing ({chosen.value}, at most {steps} steps)...")
        renamed, counter = rename(expr)
        reducer = Reducer(chosen, steps, counter, trace=verbose)
        result = reducer.reduce(renamed)
        if verbose:
            for i, step in enumerate(reducer.history, 1):
                click.echo(f"  {Colors.dim(f'{i}.')} {step}")

        click.echo(f"{Colors.literal(str(result))} : {Colors.type_name(str(ty))}")

    except FOmegaError as e:
        e.with_source(source, origin)
        click.echo(e.format_error(), err=True)
        sys.exit(1)
    except KeyboardInterrupt:
        click.echo("\nInterrupted", err=True)
        sys.exit(130)
    finally:
        disable_trace()
        clear_trace()


if __name__ == "__main__":
    main()
