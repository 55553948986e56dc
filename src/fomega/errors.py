"""Error types for fomega.

Every error the checker can produce is a subclass of ``TypeCheckError``;
front-end errors are ``LexError`` and ``ParseError``. All of them carry an
``ErrorContext`` for the enhanced reporting in ``error_reporting``.
"""

from typing import Any, List, Optional

from .syntax import SourceLocation
from .error_reporting import (
    FOmegaError,
    ErrorContext,
    ErrorKind,
    get_trace,
    enable_trace,
    disable_trace,
    clear_trace,
)


class TypeCheckError(FOmegaError):
    """Type checking error."""

    error_kind: Optional[ErrorKind] = None

    def __init__(self, message: str, location: Optional[SourceLocation] = None,
                 context: Optional[ErrorContext] = None, **kwargs: Any):
        if context is None:
            context = ErrorContext(location=location, kind=self.error_kind, **kwargs)
        super().__init__(message, context)


class UndefinedVariable(TypeCheckError):
    """Reference to an unbound expression, type or kind name."""

    error_kind = ErrorKind.UNDEFINED_VARIABLE

    def __init__(self, name: str, location: Optional[SourceLocation] = None,
                 available_names: Optional[List[str]] = None):
        super().__init__(f"undefined variable '{name}'", location,
                         actual=name, available_names=available_names)
        self.name = name


class Mismatch(TypeCheckError):
    """An expression's type disagrees with the type required of it."""

    error_kind = ErrorKind.TYPE_MISMATCH

    def __init__(self, expected: Any, actual: Any, location: Optional[SourceLocation] = None):
        super().__init__(f"expected type {expected} but got {actual}", location,
                         expected=str(expected), actual=str(actual))
        self.expected = expected
        self.actual = actual


class UnexpectedType(TypeCheckError):
    """A type's normal form does not have the required head shape."""

    def __init__(self, type: Any, location: Optional[SourceLocation] = None,
                 message: Optional[str] = None):
        super().__init__(message or f"unexpected type {type}", location, actual=str(type))
        self.type = type


class TypeNotAArrow(UnexpectedType):
    """Applied an expression whose type is not a function type."""

    error_kind = ErrorKind.NOT_A_FUNCTION

    def __init__(self, type: Any, location: Optional[SourceLocation] = None):
        super().__init__(type, location, f"expected a function type but got {type}")


class TypeNotAForall(UnexpectedType):
    """Type-applied an expression whose type is not universally quantified."""

    error_kind = ErrorKind.NOT_A_FORALL

    def __init__(self, type: Any, location: Optional[SourceLocation] = None):
        super().__init__(type, location, f"expected a universal type but got {type}")


class EquivalenceError(TypeCheckError):
    """Two types or kinds failed to compare equivalent."""

    def __init__(self, message: str, received: Any, expected: Any,
                 location: Optional[SourceLocation] = None):
        super().__init__(message, location, expected=str(expected), actual=str(received))
        self.received = received
        self.expected = expected


class VariableClash(EquivalenceError):
    """Two distinct type variables were compared."""

    error_kind = ErrorKind.VARIABLE_CLASH

    def __init__(self, received: Any, expected: Any, location: Optional[SourceLocation] = None):
        super().__init__(f"variable clash: {received} is not {expected}", received, expected, location)


class TypeClash(EquivalenceError):
    """Structurally incompatible types or kinds were compared."""

    error_kind = ErrorKind.KIND_MISMATCH

    def __init__(self, received: Any, expected: Any, location: Optional[SourceLocation] = None,
                 message: Optional[str] = None):
        super().__init__(message or f"type clash: {received} is not {expected}",
                         received, expected, location)


class NormalizationBudgetExceeded(TypeCheckError):
    """Type-level normalization ran out of fuel."""

    error_kind = ErrorKind.NORMALIZATION_BUDGET

    def __init__(self, fuel: Optional[int], location: Optional[SourceLocation] = None,
                 recursion_limit: bool = False):
        if recursion_limit or fuel is None:
            message = "type normalization exceeded the interpreter recursion limit"
        else:
            message = f"type normalization exceeded its budget of {fuel} steps"
        super().__init__(message, location)
        self.fuel = fuel


class LexError(FOmegaError):
    """Lexical analysis error."""

    def __init__(self, message: str, line: int, column: int, filename: Optional[str] = None):
        location = SourceLocation(line, column, filename)
        super().__init__(f"Lexical error at {line}:{column}: {message}",
                         ErrorContext(location=location, kind=ErrorKind.SYNTAX))
        self.line = line
        self.column = column


class ParseError(FOmegaError):
    """Parse error."""

    def __init__(self, message: str, line: int, column: int, filename: Optional[str] = None):
        location = SourceLocation(line, column, filename)
        super().__init__(f"Parse error at {line}:{column}: {message}",
                         ErrorContext(location=location, kind=ErrorKind.SYNTAX))
        self.line = line
        self.column = column


class EvalError(FOmegaError):
    """Term reduction error."""
    pass


__all__ = [
    "FOmegaError", "ErrorContext", "ErrorKind",
    "TypeCheckError", "UndefinedVariable", "Mismatch", "UnexpectedType",
    "TypeNotAArrow", "TypeNotAForall", "EquivalenceError", "VariableClash",
    "TypeClash", "NormalizationBudgetExceeded", "LexError", "ParseError",
    "EvalError", "get_trace", "enable_trace", "disable_trace", "clear_trace",
]
