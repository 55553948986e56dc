"""Surface syntax tree definitions for fomega.

These are the trees produced by the parser. They are immutable; the renamer
produces new trees in which every binder carries a globally unique id.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Optional
from abc import ABC, abstractmethod


@dataclass(frozen=True)
class SourceLocation:
    """Source code location information."""
    line: int
    column: int
    filename: Optional[str] = None


class ASTNode(ABC):
    """Base class for all surface tree nodes."""

    @abstractmethod
    def __str__(self) -> str:
        pass


@dataclass(frozen=True)
class Name:
    """An identifier: display name plus disambiguation counter.

    Two names denote the same binding iff both ``value`` and ``id`` match.
    Freshly parsed names have ``id == 0``; the renamer assigns the rest.
    """
    value: str
    id: int = 0
    location: Optional[SourceLocation] = field(default=None, compare=False)

    def __str__(self) -> str:
        return self.value

    def __repr__(self) -> str:
        return f"Name({self.value}#{self.id})"


# Kinds
class Kind(ASTNode):
    """Base class for surface kinds."""
    pass


@dataclass(frozen=True)
class StarKind(Kind):
    """The kind of proper types (*)."""

    def __str__(self) -> str:
        return "*"


@dataclass(frozen=True)
class KindVar(Kind):
    """Reference to a kind alias."""
    name: Name

    def __str__(self) -> str:
        return str(self.name)


@dataclass(frozen=True)
class ArrowKind(Kind):
    """Kind of type operators (k1 -> k2)."""
    left: Kind
    right: Kind

    def __str__(self) -> str:
        if isinstance(self.left, ArrowKind):
            return f"({self.left}) -> {self.right}"
        return f"{self.left} -> {self.right}"


# Type expressions
class Type(ASTNode):
    """Base class for surface type expressions."""
    pass


@dataclass(frozen=True)
class IntType(Type):
    """The built-in integer type."""

    def __str__(self) -> str:
        return "Int"


@dataclass(frozen=True)
class TypeVar(Type):
    """Type variable or type alias reference."""
    name: Name

    def __str__(self) -> str:
        return str(self.name)


@dataclass(frozen=True)
class FunctionType(Type):
    """Function type (arrow type)."""
    left: Type
    right: Type

    def __str__(self) -> str:
        left = str(self.left)
        if isinstance(self.left, (FunctionType, ForallType, TypeOperator)):
            left = f"({left})"
        return f"{left} -> {self.right}"


@dataclass(frozen=True)
class ForallType(Type):
    """Universal quantification over a type of the given kind."""
    param: Name
    param_kind: Kind
    body: Type

    def __str__(self) -> str:
        return f"∀{self.param}: {self.param_kind}. {self.body}"


@dataclass(frozen=True)
class TypeOperator(Type):
    """Type-level abstraction (type operator)."""
    param: Name
    param_kind: Kind
    body: Type

    def __str__(self) -> str:
        return f"λ{self.param}: {self.param_kind}. {self.body}"


@dataclass(frozen=True)
class TypeApp(Type):
    """Type-level application."""
    function: Type
    argument: Type

    def __str__(self) -> str:
        function = str(self.function)
        if not isinstance(self.function, (IntType, TypeVar, TypeApp)):
            function = f"({function})"
        argument = str(self.argument)
        if not isinstance(self.argument, (IntType, TypeVar)):
            argument = f"({argument})"
        return f"{function} {argument}"


@dataclass(frozen=True)
class KindedType(Type):
    """Type with an explicit kind annotation."""
    type: Type
    kind: Kind

    def __str__(self) -> str:
        return f"({self.type} : {self.kind})"


# Expressions
class Expr(ASTNode):
    """Base class for expressions."""
    pass


def _atom(expr: Expr) -> str:
    """Render an expression, parenthesized unless it is atomic."""
    if isinstance(expr, (Literal, Var, Annotation)):
        return str(expr)
    return f"({expr})"


@dataclass(frozen=True)
class Literal(Expr):
    """Integer literal."""
    value: int
    location: Optional[SourceLocation] = field(default=None, compare=False)

    def __str__(self) -> str:
        return str(self.value)


@dataclass(frozen=True)
class Var(Expr):
    """Variable reference."""
    name: Name
    location: Optional[SourceLocation] = field(default=None, compare=False)

    def __str__(self) -> str:
        return str(self.name)


@dataclass(frozen=True)
class Lambda(Expr):
    """Value abstraction."""
    param: Name
    param_type: Type
    body: Expr
    location: Optional[SourceLocation] = field(default=None, compare=False)

    def __str__(self) -> str:
        return f"λ{self.param}: {self.param_type}. {self.body}"


@dataclass(frozen=True)
class App(Expr):
    """Function application."""
    function: Expr
    argument: Expr
    location: Optional[SourceLocation] = field(default=None, compare=False)

    def __str__(self) -> str:
        if isinstance(self.function, (App, TypeApplication)):
            function = str(self.function)
        else:
            function = _atom(self.function)
        return f"{function} {_atom(self.argument)}"


@dataclass(frozen=True)
class TypeAbstraction(Expr):
    """Abstraction of an expression over a type."""
    param: Name
    param_kind: Kind
    body: Expr
    location: Optional[SourceLocation] = field(default=None, compare=False)

    def __str__(self) -> str:
        return f"λ{self.param}: {self.param_kind}. {self.body}"


@dataclass(frozen=True)
class TypeApplication(Expr):
    """Application of an expression to a type argument."""
    function: Expr
    type_argument: Type
    location: Optional[SourceLocation] = field(default=None, compare=False)

    def __str__(self) -> str:
        if isinstance(self.function, (App, TypeApplication)):
            function = str(self.function)
        else:
            function = _atom(self.function)
        return f"{function} [{self.type_argument}]"


@dataclass(frozen=True)
class Annotation(Expr):
    """Expression with a type annotation."""
    expr: Expr
    type: Type
    location: Optional[SourceLocation] = field(default=None, compare=False)

    def __str__(self) -> str:
        return f"({self.expr} : {self.type})"


@dataclass(frozen=True)
class Let(Expr):
    """Let binding. The value is an alias, elaborated at each use."""
    name: Name
    value: Expr
    body: Expr
    location: Optional[SourceLocation] = field(default=None, compare=False)

    def __str__(self) -> str:
        if isinstance(self.value, Annotation):
            return f"let {self.name}: {self.value.type} = {self.value.expr} in {self.body}"
        return f"let {self.name} = {self.value} in {self.body}"


@dataclass(frozen=True)
class TypeAlias(Expr):
    """Type alias binding."""
    name: Name
    value: Type
    body: Expr
    location: Optional[SourceLocation] = field(default=None, compare=False)

    def __str__(self) -> str:
        if isinstance(self.value, KindedType):
            return f"type {self.name}: {self.value.kind} = {self.value.type} in {self.body}"
        return f"type {self.name} = {self.value} in {self.body}"


@dataclass(frozen=True)
class KindAlias(Expr):
    """Kind alias binding."""
    name: Name
    value: Kind
    body: Expr
    location: Optional[SourceLocation] = field(default=None, compare=False)

    def __str__(self) -> str:
        return f"kind {self.name} = {self.value} in {self.body}"
