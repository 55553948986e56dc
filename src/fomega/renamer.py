"""Global alpha-renaming for fomega.

Every binder in the tree gets a fresh identifier from an explicit,
monotonically increasing counter, and every reference in its scope is
rewritten to match. After this pass no two binders in the source share an
identifier. Copies made later by alias expansion or beta-reduction can repeat
one, which type-level substitution handles by freshening.
"""

from __future__ import annotations
from dataclasses import dataclass, field, replace
from typing import Dict, Tuple

from .syntax import *
from .errors import UndefinedVariable


@dataclass(frozen=True)
class Scope:
    """Name -> identifier maps for the three namespaces.

    Scopes are persistent: binding returns a new scope, so a binder's mapping
    disappears once the traversal leaves its subtree.
    """
    exprs: Dict[str, Name] = field(default_factory=dict)
    types: Dict[str, Name] = field(default_factory=dict)
    kinds: Dict[str, Name] = field(default_factory=dict)

    def bind_expr(self, name: Name) -> Scope:
        return replace(self, exprs={**self.exprs, name.value: name})

    def bind_type(self, name: Name) -> Scope:
        return replace(self, types={**self.types, name.value: name})

    def bind_kind(self, name: Name) -> Scope:
        return replace(self, kinds={**self.kinds, name.value: name})


def _resolve(names: Dict[str, Name], name: Name) -> Name:
    try:
        found = names[name.value]
    except KeyError:
        raise UndefinedVariable(name.value, name.location, list(names)) from None
    return replace(found, location=name.location)


class Renamer:
    """Alpha-converts surface trees, threading an explicit counter."""

    def __init__(self, counter: int = 1):
        self.counter = counter

    def fresh(self, name: Name) -> Name:
        """Mint the next identifier for a binder."""
        renamed = Name(name.value, self.counter, name.location)
        self.counter += 1
        return renamed

    def rename_kind(self, kind: Kind, scope: Scope) -> Kind:
        if isinstance(kind, StarKind):
            return kind
        elif isinstance(kind, KindVar):
            return KindVar(_resolve(scope.kinds, kind.name))
        elif isinstance(kind, ArrowKind):
            return ArrowKind(self.rename_kind(kind.left, scope),
                             self.rename_kind(kind.right, scope))
        raise TypeError(f"Unknown kind node: {kind!r}")

    def rename_type(self, ty: Type, scope: Scope = Scope()) -> Type:
        if isinstance(ty, IntType):
            return ty
        elif isinstance(ty, TypeVar):
            return TypeVar(_resolve(scope.types, ty.name))
        elif isinstance(ty, FunctionType):
            return FunctionType(self.rename_type(ty.left, scope),
                                self.rename_type(ty.right, scope))
        elif isinstance(ty, (ForallType, TypeOperator)):
            param_kind = self.rename_kind(ty.param_kind, scope)
            param = self.fresh(ty.param)
            body = self.rename_type(ty.body, scope.bind_type(param))
            return type(ty)(param, param_kind, body)
        elif isinstance(ty, TypeApp):
            return TypeApp(self.rename_type(ty.function, scope),
                           self.rename_type(ty.argument, scope))
        elif isinstance(ty, KindedType):
            return KindedType(self.rename_type(ty.type, scope),
                              self.rename_kind(ty.kind, scope))
        raise TypeError(f"Unknown type node: {ty!r}")

    def rename_expr(self, expr: Expr, scope: Scope = Scope()) -> Expr:
        if isinstance(expr, Literal):
            return expr

        elif isinstance(expr, Var):
            return Var(_resolve(scope.exprs, expr.name), expr.location)

        elif isinstance(expr, Lambda):
            param_type = self.rename_type(expr.param_type, scope)
            param = self.fresh(expr.param)
            body = self.rename_expr(expr.body, scope.bind_expr(param))
            return Lambda(param, param_type, body, expr.location)

        elif isinstance(expr, App):
            return App(self.rename_expr(expr.function, scope),
                       self.rename_expr(expr.argument, scope),
                       expr.location)

        elif isinstance(expr, TypeAbstraction):
            param_kind = self.rename_kind(expr.param_kind, scope)
            param = self.fresh(expr.param)
            body = self.rename_expr(expr.body, scope.bind_type(param))
            return TypeAbstraction(param, param_kind, body, expr.location)

        elif isinstance(expr, TypeApplication):
            return TypeApplication(self.rename_expr(expr.function, scope),
                                   self.rename_type(expr.type_argument, scope),
                                   expr.location)

        elif isinstance(expr, Annotation):
            return Annotation(self.rename_expr(expr.expr, scope),
                              self.rename_type(expr.type, scope),
                              expr.location)

        # Alias values are renamed in the enclosing scope: aliases are not recursive.
        elif isinstance(expr, Let):
            value = self.rename_expr(expr.value, scope)
            name = self.fresh(expr.name)
            body = self.rename_expr(expr.body, scope.bind_expr(name))
            return Let(name, value, body, expr.location)

        elif isinstance(expr, TypeAlias):
            value = self.rename_type(expr.value, scope)
            name = self.fresh(expr.name)
            body = self.rename_expr(expr.body, scope.bind_type(name))
            return TypeAlias(name, value, body, expr.location)

        elif isinstance(expr, KindAlias):
            value = self.rename_kind(expr.value, scope)
            name = self.fresh(expr.name)
            body = self.rename_expr(expr.body, scope.bind_kind(name))
            return KindAlias(name, value, body, expr.location)

        raise TypeError(f"Unknown expression node: {expr!r}")


def rename(expr: Expr, counter: int = 1) -> Tuple[Expr, int]:
    """Rename a closed expression; returns the new tree and the next free id."""
    renamer = Renamer(counter)
    renamed = renamer.rename_expr(expr)
    return renamed, renamer.counter
