"""Type-level normalization for fomega.

Reduces type-level redexes (a ``TApp`` whose head is a ``TLam``) until none
remain.

Substitution is capture-avoiding. Renaming makes every binder unique in the
source, but elaboration shares alias bodies and beta-reduction copies its
argument, so a substituted type can meet a second copy of a binder it
mentions freely. Such a binder is renamed to a fresh identifier from a
``NameSupply``.

Normalization spends one unit of fuel per recursive descent and per
beta-step; running out raises ``NormalizationBudgetExceeded``.
"""

from __future__ import annotations
from enum import Enum
from typing import Iterator, Optional, Set

from .core import *
from .syntax import Name
from .errors import NormalizationBudgetExceeded


class Strategy(Enum):
    """Reduction strategies shared by the type normalizer and the term reducer."""
    NORMAL_ORDER = "normal"
    APPLICATIVE_ORDER = "applicative"
    CALL_BY_NAME = "cbn"
    CALL_BY_VALUE = "cbv"


# Weak strategies stop at the head and would leave redexes under binders,
# which equivalence cannot see through.
TYPE_STRATEGIES = (Strategy.NORMAL_ORDER, Strategy.APPLICATIVE_ORDER)


class NameSupply:
    """Hands out identifiers for binders renamed during substitution."""

    def __init__(self, counter: int = 1):
        self.counter = counter

    def fresh(self, name: Name) -> Name:
        renamed = Name(name.value, self.counter, name.location)
        self.counter += 1
        return renamed

    def reserve(self, *types: Annotated) -> None:
        """Move the counter past every identifier used in ``types``."""
        for ty in types:
            self.counter = max([self.counter] + [name.id + 1 for name in type_names(ty)])


def type_names(ty: Annotated) -> Iterator[Name]:
    """Yield every identifier in a type, bound or free."""
    desc = ty.desc
    if isinstance(desc, TVar):
        yield desc.name
    elif isinstance(desc, TArrow):
        yield from type_names(desc.left)
        yield from type_names(desc.right)
    elif isinstance(desc, (TForall, TLam)):
        yield desc.param
        yield from type_names(desc.body)
    elif isinstance(desc, TApp):
        yield from type_names(desc.function)
        yield from type_names(desc.argument)


def free_vars(ty: Annotated) -> Set[Name]:
    """The free type variables of ``ty``."""
    desc = ty.desc
    if isinstance(desc, TInt):
        return set()
    elif isinstance(desc, TVar):
        return {desc.name}
    elif isinstance(desc, TArrow):
        return free_vars(desc.left) | free_vars(desc.right)
    elif isinstance(desc, (TForall, TLam)):
        return free_vars(desc.body) - {desc.param}
    elif isinstance(desc, TApp):
        return free_vars(desc.function) | free_vars(desc.argument)

    raise TypeError(f"Unknown type node: {desc!r}")


class Substitution:
    """Capture-avoiding replacement of one type variable."""

    def __init__(self, param: Name, replacement: Annotated, names: NameSupply):
        self.param = param
        self.replacement = replacement
        self.names = names
        self.free = free_vars(replacement)

    def apply(self, ty: Annotated) -> Annotated:
        desc = ty.desc

        if isinstance(desc, TInt):
            return ty
        elif isinstance(desc, TVar):
            return self.replacement if desc.name == self.param else ty
        elif isinstance(desc, TArrow):
            return Annotated(TArrow(self.apply(desc.left), self.apply(desc.right)), ty.kind)
        elif isinstance(desc, (TForall, TLam)):
            if desc.param == self.param:
                return ty
            param, body = desc.param, desc.body
            if param in self.free and self.param in free_vars(body):
                self.names.reserve(body, self.replacement)
                fresh = self.names.fresh(param)
                body = substitute(body, param, var_type(fresh, desc.param_kind), self.names)
                param = fresh
            return Annotated(type(desc)(param, desc.param_kind, self.apply(body)), ty.kind)
        elif isinstance(desc, TApp):
            return Annotated(TApp(self.apply(desc.function), self.apply(desc.argument)), ty.kind)

        raise TypeError(f"Unknown type node: {desc!r}")


def substitute(ty: Annotated, param: Name, replacement: Annotated,
               names: Optional[NameSupply] = None) -> Annotated:
    """Replace free occurrences of ``param`` in ``ty`` by ``replacement``.

    A binder that would capture a free variable of ``replacement`` is renamed
    with an identifier from ``names``; the supply is first moved past every
    identifier in sight, so any supply (or none) is safe to pass.
    """
    return Substitution(param, replacement, names or NameSupply()).apply(ty)


class Normalizer:
    """One normalization run with its own fuel budget."""

    def __init__(self, fuel: Optional[int] = None,
                 strategy: Strategy = Strategy.NORMAL_ORDER,
                 names: Optional[NameSupply] = None):
        if strategy not in TYPE_STRATEGIES:
            raise ValueError(f"{strategy.name} does not compute type normal forms")
        self.fuel = fuel
        self.remaining = fuel
        self.strategy = strategy
        self.names = names or NameSupply()

    def normalize(self, ty: Annotated) -> Annotated:
        try:
            return self._normalize(ty)
        except RecursionError:
            raise NormalizationBudgetExceeded(self.fuel, recursion_limit=True) from None

    def _spend(self) -> None:
        if self.remaining is None:
            return
        if self.remaining <= 0:
            raise NormalizationBudgetExceeded(self.fuel)
        self.remaining -= 1

    def _beta(self, function: Annotated, argument: Annotated, kind: Kind) -> Annotated:
        self._spend()
        lam = function.desc
        reduced = substitute(lam.body, lam.param, argument, self.names)
        return Annotated(reduced.desc, kind)

    def _weak_head(self, ty: Annotated) -> Annotated:
        """Contract head redexes, leftmost-outermost first."""
        desc = ty.desc
        if not isinstance(desc, TApp):
            return ty

        self._spend()
        function = self._weak_head(desc.function)
        if isinstance(function.desc, TLam):
            return self._weak_head(self._beta(function, desc.argument, ty.kind))
        return Annotated(TApp(function, desc.argument), ty.kind)

    def _normalize(self, ty: Annotated) -> Annotated:
        self._spend()
        if self.strategy is Strategy.NORMAL_ORDER:
            ty = self._weak_head(ty)
        desc = ty.desc

        if isinstance(desc, (TInt, TVar)):
            return ty

        elif isinstance(desc, TArrow):
            return Annotated(TArrow(self._normalize(desc.left),
                                    self._normalize(desc.right)), ty.kind)

        elif isinstance(desc, (TForall, TLam)):
            body = self._normalize(desc.body)
            return Annotated(type(desc)(desc.param, desc.param_kind, body), ty.kind)

        elif isinstance(desc, TApp):
            function = self._normalize(desc.function)
            argument = self._normalize(desc.argument)
            # Only reachable under applicative order; normal order already
            # contracted every head redex above.
            if isinstance(function.desc, TLam):
                return self._normalize(self._beta(function, argument, ty.kind))
            return Annotated(TApp(function, argument), ty.kind)

        raise TypeError(f"Unknown type node: {desc!r}")


def normalize(ty: Annotated, fuel: Optional[int] = None,
              strategy: Strategy = Strategy.NORMAL_ORDER,
              names: Optional[NameSupply] = None) -> Annotated:
    """Reduce ``ty`` to its type-level normal form."""
    return Normalizer(fuel, strategy, names).normalize(ty)
