"""Kind checking and translation of surface types for fomega.

``TypeTranslator`` turns surface kinds and types into the checker's internal,
kind-annotated representation, checking kinds on the way.
"""

from __future__ import annotations
from typing import Dict, Optional

from . import core
from . import syntax
from .core import (
    Annotated, KArrow, KStar, STAR, TApp, TLam, arrow_type, forall_type, int_type, var_type,
)
from .context import Bound, Context
from .equivalence import check_kind_equiv
from .errors import TypeClash
from .syntax import Name, SourceLocation


class TypeTranslator:
    """Translates surface kinds and types, inferring and checking kinds.

    Alias bodies are elaborated lazily, at each reference. With
    ``cache_aliases`` the first elaboration of an alias is remembered under its
    identifier; identifiers are globally unique after renaming, so a cached
    result is valid at every reference site.
    """

    def __init__(self, cache_aliases: bool = True):
        self.cache_aliases = cache_aliases
        self.current_location: Optional[SourceLocation] = None
        self._type_aliases: Dict[Name, Annotated] = {}
        self._kind_aliases: Dict[Name, core.Kind] = {}

    def transl_kind(self, ctx: Context, kind: syntax.Kind) -> core.Kind:
        """Translate a surface kind, expanding kind aliases."""
        if isinstance(kind, syntax.StarKind):
            return STAR

        elif isinstance(kind, syntax.ArrowKind):
            return KArrow(self.transl_kind(ctx, kind.left), self.transl_kind(ctx, kind.right))

        elif isinstance(kind, syntax.KindVar):
            if kind.name in self._kind_aliases:
                return self._kind_aliases[kind.name]
            translated = self.transl_kind(ctx, ctx.get_kind(kind.name))
            if self.cache_aliases:
                self._kind_aliases[kind.name] = translated
            return translated

        raise TypeError(f"Unknown kind node: {kind!r}")

    def infer_type(self, ctx: Context, ty: syntax.Type) -> Annotated:
        """Translate a surface type and synthesize its kind."""
        if isinstance(ty, syntax.IntType):
            return int_type()

        elif isinstance(ty, syntax.TypeVar):
            entry = ctx.get_type(ty.name)
            if isinstance(entry, Bound):
                return var_type(ty.name, entry.value)
            # An alias stands for its definition.
            if ty.name in self._type_aliases:
                return self._type_aliases[ty.name]
            expanded = self.infer_type(ctx, entry.value)
            if self.cache_aliases:
                self._type_aliases[ty.name] = expanded
            return expanded

        elif isinstance(ty, syntax.FunctionType):
            left = self.check_type(ctx, ty.left, STAR)
            right = self.check_type(ctx, ty.right, STAR)
            return arrow_type(left, right)

        elif isinstance(ty, syntax.ForallType):
            param_kind = self.transl_kind(ctx, ty.param_kind)
            body = self.check_type(ctx.add_type(ty.param, param_kind), ty.body, STAR)
            return forall_type(ty.param, param_kind, body)

        elif isinstance(ty, syntax.TypeOperator):
            param_kind = self.transl_kind(ctx, ty.param_kind)
            body = self.infer_type(ctx.add_type(ty.param, param_kind), ty.body)
            return Annotated(TLam(ty.param, param_kind, body), KArrow(param_kind, body.kind))

        elif isinstance(ty, syntax.TypeApp):
            function = self.infer_type(ctx, ty.function)
            if isinstance(function.kind, KStar):
                raise TypeClash(
                    function.kind, "an arrow kind",
                    message=f"type {function} has kind * and cannot be applied to {ty.argument}")
            argument = self.check_type(ctx, ty.argument, function.kind.left)
            return Annotated(TApp(function, argument), function.kind.right)

        elif isinstance(ty, syntax.KindedType):
            kind = self.transl_kind(ctx, ty.kind)
            return self.check_type(ctx, ty.type, kind)

        raise TypeError(f"Unknown type node: {ty!r}")

    def check_type(self, ctx: Context, ty: syntax.Type, expected: core.Kind) -> Annotated:
        """Translate a surface type and require it to have the expected kind."""
        received = self.infer_type(ctx, ty)
        check_kind_equiv(received.kind, expected)
        return received
