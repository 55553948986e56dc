"""Core kind and type definitions for fomega.

This module defines the checker's internal representation. These are
separate from the surface syntax: every type node is paired with its
synthesized kind (see ``Annotated``), which is what normalization and
equivalence operate on.
"""

from __future__ import annotations
from dataclasses import dataclass
from abc import ABC, abstractmethod

from .syntax import Name


class Kind(ABC):
    """Base class for internal kinds."""

    @abstractmethod
    def __str__(self) -> str:
        pass


@dataclass(frozen=True)
class KStar(Kind):
    """Kind of proper types."""

    def __str__(self) -> str:
        return "*"


@dataclass(frozen=True)
class KArrow(Kind):
    """Kind of type operators."""
    left: Kind
    right: Kind

    def __str__(self) -> str:
        if isinstance(self.left, KArrow):
            return f"({self.left}) -> {self.right}"
        return f"{self.left} -> {self.right}"


STAR = KStar()


class Type(ABC):
    """Base class for internal type descriptions."""

    @abstractmethod
    def __str__(self) -> str:
        pass


@dataclass(frozen=True)
class Annotated:
    """A type description paired with its kind."""
    desc: Type
    kind: Kind

    def __str__(self) -> str:
        return str(self.desc)


@dataclass(frozen=True)
class TInt(Type):
    """Integer type."""

    def __str__(self) -> str:
        return "Int"


@dataclass(frozen=True)
class TVar(Type):
    """Type variable, identified by its unique name."""
    name: Name

    def __str__(self) -> str:
        return str(self.name)


@dataclass(frozen=True)
class TArrow(Type):
    """Function type."""
    left: Annotated
    right: Annotated

    def __str__(self) -> str:
        left = str(self.left)
        if isinstance(self.left.desc, (TArrow, TForall, TLam)):
            left = f"({left})"
        return f"{left} -> {self.right}"


@dataclass(frozen=True)
class TForall(Type):
    """Universal type."""
    param: Name
    param_kind: Kind
    body: Annotated

    def __str__(self) -> str:
        return f"∀{self.param}: {self.param_kind}. {self.body}"


@dataclass(frozen=True)
class TLam(Type):
    """Type operator."""
    param: Name
    param_kind: Kind
    body: Annotated

    def __str__(self) -> str:
        return f"λ{self.param}: {self.param_kind}. {self.body}"


@dataclass(frozen=True)
class TApp(Type):
    """Type operator application."""
    function: Annotated
    argument: Annotated

    def __str__(self) -> str:
        function = str(self.function)
        if not isinstance(self.function.desc, (TInt, TVar, TApp)):
            function = f"({function})"
        argument = str(self.argument)
        if not isinstance(self.argument.desc, (TInt, TVar)):
            argument = f"({argument})"
        return f"{function} {argument}"


def int_type() -> Annotated:
    """The annotated integer type."""
    return Annotated(TInt(), STAR)


def var_type(name: Name, kind: Kind) -> Annotated:
    """An annotated type variable."""
    return Annotated(TVar(name), kind)


def arrow_type(left: Annotated, right: Annotated) -> Annotated:
    """An annotated function type."""
    return Annotated(TArrow(left, right), STAR)


def forall_type(param: Name, param_kind: Kind, body: Annotated) -> Annotated:
    """An annotated universal type."""
    return Annotated(TForall(param, param_kind, body), STAR)
