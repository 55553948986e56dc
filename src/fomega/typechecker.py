"""Bidirectional type checker for fomega.

``infer_expr`` synthesizes a type for an expression; ``check_expr`` pushes an
expected type into it. Types are normalized before their head is inspected
and before two types are compared, since equivalence itself never reduces.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Dict, Optional

from .syntax import *
from .core import (
    Annotated, STAR, TArrow, TForall, arrow_type, forall_type, int_type, var_type,
)
from .context import Bound, Context
from .translate import TypeTranslator
from .normalize import NameSupply, Normalizer, Strategy, TYPE_STRATEGIES, substitute
from .equivalence import check_kind_equiv, check_type_equiv
from .renamer import rename
from .errors import (
    EquivalenceError, Mismatch, TypeCheckError, TypeNotAArrow, TypeNotAForall, get_trace,
)


@dataclass
class CheckerOptions:
    """Options for type checking."""
    fuel: Optional[int] = 10_000
    strategy: Strategy = Strategy.NORMAL_ORDER
    cache_aliases: bool = True
    source_code: Optional[str] = None
    filename: Optional[str] = None


class TypeChecker(TypeTranslator):
    """Type checker for renamed fomega expressions.

    The checker expects every binder to carry a unique identifier; run the
    tree through ``rename`` first, or use ``type_of`` which does both. Binders
    renamed during substitution take their identifiers from ``names``, which
    should continue the renamer's counter.
    """

    def __init__(self, options: Optional[CheckerOptions] = None,
                 names: Optional[NameSupply] = None):
        self.options = options or CheckerOptions()
        if self.options.strategy not in TYPE_STRATEGIES:
            raise ValueError(f"{self.options.strategy.name} does not compute type normal forms")
        super().__init__(cache_aliases=self.options.cache_aliases)
        self._expr_aliases: Dict[Name, Annotated] = {}
        self.names = names or NameSupply()

    def normalize(self, ty: Annotated) -> Annotated:
        """Normalize with a fresh fuel budget."""
        return Normalizer(self.options.fuel, self.options.strategy, self.names).normalize(ty)

    def infer_expr(self, ctx: Context, expr: Expr) -> Annotated:
        """Synthesize the type of an expression."""
        if expr.location:
            self.current_location = expr.location

        trace = get_trace()
        if trace.enabled:
            trace.add_step(f"Inferring type of {type(expr).__name__}: {expr}",
                           location=expr.location,
                           context=ctx.describe())

        result = self._infer(ctx, expr)

        if trace.enabled:
            trace.add_step(f"Inferred {type(expr).__name__}", location=expr.location,
                           result=str(result))
        return result

    def _infer(self, ctx: Context, expr: Expr) -> Annotated:
        if isinstance(expr, Literal):
            return int_type()

        elif isinstance(expr, Var):
            entry = ctx.get_expr(expr.name)
            if isinstance(entry, Bound):
                return entry.value
            if expr.name in self._expr_aliases:
                return self._expr_aliases[expr.name]
            inferred = self.infer_expr(ctx, entry.value)
            if self.cache_aliases:
                self._expr_aliases[expr.name] = inferred
            return inferred

        elif isinstance(expr, Annotation):
            ty = self.check_type(ctx, expr.type, STAR)
            self.check_expr(ctx, expr.expr, ty)
            return ty

        elif isinstance(expr, Let):
            return self.infer_expr(ctx.add_expr_alias(expr.name, expr.value), expr.body)

        elif isinstance(expr, TypeAlias):
            return self.infer_expr(ctx.add_type_alias(expr.name, expr.value), expr.body)

        elif isinstance(expr, KindAlias):
            return self.infer_expr(ctx.add_kind_alias(expr.name, expr.value), expr.body)

        elif isinstance(expr, Lambda):
            param_type = self.check_type(ctx, expr.param_type, STAR)
            body = self.infer_expr(ctx.add_expr(expr.param, param_type), expr.body)
            return arrow_type(param_type, body)

        elif isinstance(expr, App):
            function = self.normalize(self.infer_expr(ctx, expr.function))
            if not isinstance(function.desc, TArrow):
                raise TypeNotAArrow(function, expr.location)
            self.check_expr(ctx, expr.argument, function.desc.left)
            return function.desc.right

        elif isinstance(expr, TypeAbstraction):
            param_kind = self.transl_kind(ctx, expr.param_kind)
            body = self.infer_expr(ctx.add_type(expr.param, param_kind), expr.body)
            return forall_type(expr.param, param_kind, body)

        elif isinstance(expr, TypeApplication):
            function = self.normalize(self.infer_expr(ctx, expr.function))
            forall = function.desc
            if not isinstance(forall, TForall):
                raise TypeNotAForall(function, expr.location)
            argument = self.check_type(ctx, expr.type_argument, forall.param_kind)
            return substitute(forall.body, forall.param, argument, self.names)

        raise TypeError(f"Unknown expression node: {expr!r}")

    def check_expr(self, ctx: Context, expr: Expr, expected: Annotated) -> None:
        """Check an expression against an expected type."""
        if expr.location:
            self.current_location = expr.location

        expected = self.normalize(expected)
        desc = expected.desc

        trace = get_trace()
        if trace.enabled:
            trace.add_step(f"Checking {type(expr).__name__}: {expr}",
                           location=expr.location,
                           context=ctx.describe(),
                           result=str(expected))

        if isinstance(expr, TypeAbstraction) and isinstance(desc, TForall):
            param_kind = self.transl_kind(ctx, expr.param_kind)
            check_kind_equiv(param_kind, desc.param_kind)
            body = substitute(desc.body, desc.param, var_type(expr.param, desc.param_kind),
                              self.names)
            self.check_expr(ctx.add_type(expr.param, desc.param_kind), expr.body, body)

        elif isinstance(expr, Lambda) and isinstance(desc, TArrow):
            param_type = self.normalize(self.check_type(ctx, expr.param_type, STAR))
            try:
                check_type_equiv(param_type, desc.left)
            except EquivalenceError as err:
                raise Mismatch(desc.left, param_type, expr.location) from err
            self.check_expr(ctx.add_expr(expr.param, desc.left), expr.body, desc.right)

        else:
            actual = self.normalize(self.infer_expr(ctx, expr))
            try:
                check_type_equiv(actual, expected)
            except EquivalenceError as err:
                raise Mismatch(expected, actual, expr.location) from err


def type_of(expr: Expr, options: Optional[CheckerOptions] = None) -> Annotated:
    """Rename and type check a closed expression, returning its normal-form type."""
    options = options or CheckerOptions()
    checker = TypeChecker(options)
    try:
        renamed, counter = rename(expr)
        checker.names = NameSupply(counter)
        return checker.normalize(checker.infer_expr(Context(), renamed))
    except TypeCheckError as err:
        if err.context.location is None:
            err.context.location = checker.current_location
        err.with_source(options.source_code, options.filename)
        raise
