"""Error reporting for fomega.

This module provides:
- Source location tracking and context display with a caret under the error
- Suggestions for common mistakes (misspelled names, kind errors)
- A type derivation trace for verbose mode
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Optional, List, Dict
from enum import Enum, auto

from .syntax import SourceLocation
from .colors import Colors


class ErrorKind(Enum):
    """Categories of errors for suggestion generation."""
    UNDEFINED_VARIABLE = auto()
    TYPE_MISMATCH = auto()
    KIND_MISMATCH = auto()
    NOT_A_FUNCTION = auto()
    NOT_A_FORALL = auto()
    VARIABLE_CLASH = auto()
    NORMALIZATION_BUDGET = auto()
    SYNTAX = auto()


@dataclass
class ErrorContext:
    """Context information for an error."""
    source_code: Optional[str] = None
    filename: Optional[str] = None
    location: Optional[SourceLocation] = None
    kind: Optional[ErrorKind] = None
    # Additional context for generating suggestions
    expected: Optional[str] = None
    actual: Optional[str] = None
    available_names: Optional[List[str]] = None
    similar_names: Optional[List[str]] = None


@dataclass
class TypeDerivation:
    """A step in type derivation for verbose output."""
    description: str
    location: Optional[SourceLocation]
    context: Dict[str, str]  # Variable name -> type
    result: Optional[str]


class TypeDerivationTrace:
    """Accumulates type derivation steps for verbose output."""

    def __init__(self):
        self.steps: List[TypeDerivation] = []
        self.enabled = False

    def add_step(self, description: str, location: Optional[SourceLocation] = None,
                 context: Optional[Dict[str, str]] = None, result: Optional[str] = None):
        """Add a derivation step."""
        if self.enabled:
            self.steps.append(TypeDerivation(
                description=description,
                location=location,
                context=context or {},
                result=result
            ))

    def format(self) -> str:
        """Format the trace for display."""
        if not self.steps:
            return ""

        lines = [Colors.bold("\nType Derivation Trace:")]
        for i, step in enumerate(self.steps, 1):
            lines.append(f"\n{Colors.dim(f'Step {i}:')} {step.description}")

            if step.location:
                lines.append(f"  {Colors.dim('at')} {format_location(step.location)}")

            if step.context:
                lines.append(f"  {Colors.dim('context:')}")
                for var, ty in step.context.items():
                    lines.append(f"    {Colors.var_name(var)} : {Colors.type_name(ty)}")

            if step.result:
                lines.append(f"  {Colors.dim('result:')} {Colors.type_name(step.result)}")

        return "\n".join(lines)


# Global trace instance
_trace = TypeDerivationTrace()


def get_trace() -> TypeDerivationTrace:
    """Get the global type derivation trace."""
    return _trace


def enable_trace():
    """Enable type derivation tracing."""
    _trace.enabled = True


def disable_trace():
    """Disable type derivation tracing."""
    _trace.enabled = False


def clear_trace():
    """Clear the type derivation trace."""
    _trace.steps = []


def format_location(location: Optional[SourceLocation]) -> str:
    """Format a source location for display."""
    if not location:
        return "<unknown location>"

    parts = []
    if location.filename:
        parts.append(location.filename)
    parts.append(f"{location.line}:{location.column}")

    return ":".join(parts)


def show_source_context(source_code: str, location: SourceLocation,
                        error_message: str = "", context_lines: int = 2) -> str:
    """Display source code context around an error location."""
    lines = source_code.split('\n')

    if not (0 < location.line <= len(lines)):
        return ""

    output = []

    if error_message:
        output.append(Colors.error(f"Error: {error_message}"))

    output.append(f"{Colors.dim('at')} {format_location(location)}")
    output.append("")

    start_line = max(0, location.line - context_lines - 1)
    end_line = min(len(lines), location.line + context_lines)

    for i in range(start_line, end_line):
        line_num = i + 1
        line_content = lines[i]

        if line_num == location.line:
            output.append(f"{Colors.error('→')} {line_num:4d} │ {line_content}")

            if location.column > 0:
                spaces = ' ' * (location.column - 1)
                width = max(0, min(len(line_content) - location.column, 10))
                marker = Colors.error('^' + '~' * width)
                output.append(f"       │ {spaces}{marker}")
        else:
            output.append(f"  {line_num:4d} │ {line_content}")

    return '\n'.join(output)


def suggest_similar_names(name: str, available_names: List[str], max_suggestions: int = 3) -> List[str]:
    """Find similar names using edit distance."""
    suggestions = []

    for available in sorted(set(available_names)):
        if available == name:
            continue
        distance = edit_distance(name, available)
        if distance <= 2:
            suggestions.append((distance, available))

    suggestions.sort(key=lambda x: x[0])
    return [name for _, name in suggestions[:max_suggestions]]


def edit_distance(s1: str, s2: str) -> int:
    """Calculate Levenshtein edit distance between two strings."""
    if len(s1) < len(s2):
        return edit_distance(s2, s1)

    if len(s2) == 0:
        return len(s1)

    previous_row = range(len(s2) + 1)
    for i, c1 in enumerate(s1):
        current_row = [i + 1]
        for j, c2 in enumerate(s2):
            # j+1 instead of j since previous_row and current_row are one character longer
            insertions = previous_row[j + 1] + 1
            deletions = current_row[j] + 1
            substitutions = previous_row[j] + (c1 != c2)
            current_row.append(min(insertions, deletions, substitutions))
        previous_row = current_row

    return previous_row[-1]


def generate_suggestion(error_context: ErrorContext) -> Optional[str]:
    """Generate a helpful suggestion based on the error context."""
    if not error_context.kind:
        return None

    suggestions = []

    if error_context.kind == ErrorKind.UNDEFINED_VARIABLE:
        similar = error_context.similar_names
        if similar is None and error_context.actual and error_context.available_names:
            similar = suggest_similar_names(error_context.actual, error_context.available_names)
        if similar:
            names = ", ".join(f"'{name}'" for name in similar[:3])
            suggestions.append(f"Did you mean: {names}?")

        if error_context.actual and error_context.actual[0].isupper():
            suggestions.append("Note: uppercase names refer to types and kinds, lowercase names to values")

    elif error_context.kind == ErrorKind.KIND_MISMATCH:
        if error_context.expected and "->" in error_context.expected:
            suggestions.append("A type operator is expected here; pass something like λA: *. A")
        elif error_context.actual and "->" in error_context.actual:
            suggestions.append("This type operator is not fully applied")

    elif error_context.kind == ErrorKind.NOT_A_FUNCTION:
        suggestions.append("Only expressions of function type can be applied to arguments")

    elif error_context.kind == ErrorKind.NOT_A_FORALL:
        suggestions.append("Only polymorphic expressions (of type ∀A: k. T) take [type] arguments")

    elif error_context.kind == ErrorKind.NORMALIZATION_BUDGET:
        suggestions.append("The type-level program may not terminate; raise the budget with --fuel")

    if suggestions:
        return "\n".join(f"{Colors.hint('Hint:')} {s}" for s in suggestions)

    return None


class FOmegaError(Exception):
    """Base class for all fomega errors with enhanced reporting."""

    def __init__(self, message: str, context: Optional[ErrorContext] = None):
        super().__init__(message)
        self.context = context or ErrorContext()
        self._formatted_message = None

    @property
    def location(self) -> Optional[SourceLocation]:
        return self.context.location

    def with_source(self, source_code: Optional[str], filename: Optional[str] = None) -> FOmegaError:
        """Attach source text for context display, keeping existing values."""
        if not self.context.source_code:
            self.context.source_code = source_code
        if not self.context.filename:
            self.context.filename = filename
        self._formatted_message = None
        return self

    def format_error(self) -> str:
        """Format the error with context and suggestions."""
        if self._formatted_message:
            return self._formatted_message

        parts = []

        if self.context.source_code and self.context.location:
            parts.append(show_source_context(
                self.context.source_code,
                self.context.location,
                str(self)
            ))
        else:
            parts.append(Colors.error(f"Error: {self}"))
            if self.context.location:
                parts.append(f"{Colors.dim('at')} {format_location(self.context.location)}")

        suggestion = generate_suggestion(self.context)
        if suggestion:
            parts.append("")
            parts.append(suggestion)

        trace_output = get_trace().format()
        if trace_output:
            parts.append(trace_output)

        self._formatted_message = '\n'.join(parts)
        return self._formatted_message
