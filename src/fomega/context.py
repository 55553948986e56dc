"""Typing context for fomega.

The context has three namespaces (expressions, types, kinds). Each entry is
either an elaborated value (``Bound``) or an alias holding the unelaborated
surface tree (``Alias``), which the checker re-derives where it is used.

Contexts are persistent: every ``add_*`` returns a new context and leaves the
receiver untouched, so sibling subtrees never see each other's bindings.
"""

from __future__ import annotations
from dataclasses import dataclass, field, replace
from typing import Dict, Generic, List, TypeVar, Union

from . import core
from . import syntax
from .syntax import Name
from .errors import UndefinedVariable

T = TypeVar('T')


@dataclass(frozen=True)
class Bound(Generic[T]):
    """An elaborated entry: a type for expressions, a kind for types."""
    value: T


@dataclass(frozen=True)
class Alias(Generic[T]):
    """A deferred entry, elaborated at each reference."""
    value: T


ExprEntry = Union[Bound[core.Annotated], Alias[syntax.Expr]]
TypeEntry = Union[Bound[core.Kind], Alias[syntax.Type]]


@dataclass(frozen=True)
class Context:
    """Type checking context."""
    exprs: Dict[Name, ExprEntry] = field(default_factory=dict)
    types: Dict[Name, TypeEntry] = field(default_factory=dict)
    kinds: Dict[Name, syntax.Kind] = field(default_factory=dict)

    def add_expr(self, name: Name, ty: core.Annotated) -> Context:
        """Bind an expression variable to its type."""
        return replace(self, exprs={**self.exprs, name: Bound(ty)})

    def add_expr_alias(self, name: Name, expr: syntax.Expr) -> Context:
        return replace(self, exprs={**self.exprs, name: Alias(expr)})

    def add_type(self, name: Name, kind: core.Kind) -> Context:
        """Bind a type variable to its kind."""
        return replace(self, types={**self.types, name: Bound(kind)})

    def add_type_alias(self, name: Name, ty: syntax.Type) -> Context:
        return replace(self, types={**self.types, name: Alias(ty)})

    def add_kind_alias(self, name: Name, kind: syntax.Kind) -> Context:
        return replace(self, kinds={**self.kinds, name: kind})

    def get_expr(self, name: Name) -> ExprEntry:
        try:
            return self.exprs[name]
        except KeyError:
            raise UndefinedVariable(name.value, name.location, _names(self.exprs)) from None

    def get_type(self, name: Name) -> TypeEntry:
        try:
            return self.types[name]
        except KeyError:
            raise UndefinedVariable(name.value, name.location, _names(self.types)) from None

    def get_kind(self, name: Name) -> syntax.Kind:
        try:
            return self.kinds[name]
        except KeyError:
            raise UndefinedVariable(name.value, name.location, _names(self.kinds)) from None

    def describe(self) -> Dict[str, str]:
        """Render the bound expression variables for the derivation trace."""
        return {
            name.value: str(entry.value)
            for name, entry in self.exprs.items()
            if isinstance(entry, Bound)
        }


def _names(entries: Dict[Name, object]) -> List[str]:
    return [name.value for name in entries]
