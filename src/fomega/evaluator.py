"""Term-level reducer for fomega.

Reduces surface expressions by beta-contraction of value and type
applications, inlining of ``let``/``type``/``kind`` aliases and erasure of
annotations. Four strategies are supported:

- normal order: leftmost-outermost, reducing under binders
- applicative order: leftmost-innermost, reducing under binders
- call-by-name: weak head reduction, arguments passed unevaluated
- call-by-value: weak reduction, arguments evaluated before the call

Substitution is capture-avoiding. A binder whose identifier occurs free in the
substituted term is given a fresh identifier from the reducer's counter, so
the input should be a renamed tree and the counter should continue the
renamer's numbering.
"""

from __future__ import annotations
from dataclasses import fields, replace
from typing import Dict, FrozenSet, Iterator, List, Optional, Set

from .syntax import *
from .normalize import Strategy
from .errors import EvalError

EXPR = "expr"
TYPE = "type"
KIND = "kind"

EAGER = (Strategy.APPLICATIVE_ORDER, Strategy.CALL_BY_VALUE)
STRONG = (Strategy.NORMAL_ORDER, Strategy.APPLICATIVE_ORDER)


def iter_names(node: ASTNode) -> Iterator[Name]:
    """Yield every identifier in a tree, bound or free."""
    for f in fields(node):
        value = getattr(node, f.name)
        if isinstance(value, Name):
            yield value
        elif isinstance(value, ASTNode):
            yield from iter_names(value)


def _bind(bound: Dict[str, FrozenSet[Name]], namespace: str, name: Name) -> Dict[str, FrozenSet[Name]]:
    return {**bound, namespace: bound[namespace] | {name}}


def free_names(node: ASTNode) -> Dict[str, Set[Name]]:
    """Collect the free identifiers of a tree, per namespace."""
    found: Dict[str, Set[Name]] = {EXPR: set(), TYPE: set(), KIND: set()}
    _collect(node, {EXPR: frozenset(), TYPE: frozenset(), KIND: frozenset()}, found)
    return found


def _collect(node: ASTNode, bound: Dict[str, FrozenSet[Name]], found: Dict[str, Set[Name]]) -> None:
    if isinstance(node, Var):
        if node.name not in bound[EXPR]:
            found[EXPR].add(node.name)
    elif isinstance(node, TypeVar):
        if node.name not in bound[TYPE]:
            found[TYPE].add(node.name)
    elif isinstance(node, KindVar):
        if node.name not in bound[KIND]:
            found[KIND].add(node.name)

    elif isinstance(node, (ForallType, TypeOperator, TypeAbstraction)):
        _collect(node.param_kind, bound, found)
        _collect(node.body, _bind(bound, TYPE, node.param), found)
    elif isinstance(node, Lambda):
        _collect(node.param_type, bound, found)
        _collect(node.body, _bind(bound, EXPR, node.param), found)
    elif isinstance(node, Let):
        _collect(node.value, bound, found)
        _collect(node.body, _bind(bound, EXPR, node.name), found)
    elif isinstance(node, TypeAlias):
        _collect(node.value, bound, found)
        _collect(node.body, _bind(bound, TYPE, node.name), found)
    elif isinstance(node, KindAlias):
        _collect(node.value, bound, found)
        _collect(node.body, _bind(bound, KIND, node.name), found)

    else:
        for f in fields(node):
            child = getattr(node, f.name)
            if isinstance(child, ASTNode):
                _collect(child, bound, found)


def _reference(namespace: str, name: Name) -> ASTNode:
    if namespace == EXPR:
        return Var(name, name.location)
    elif namespace == TYPE:
        return TypeVar(name)
    return KindVar(name)


class Substitution:
    """Capture-avoiding replacement of one identifier in one namespace."""

    def __init__(self, reducer: Reducer, namespace: str, name: Name, replacement: ASTNode):
        self.reducer = reducer
        self.namespace = namespace
        self.name = name
        self.replacement = replacement
        self.free = free_names(replacement)

    def apply(self, node: ASTNode) -> ASTNode:
        if isinstance(node, (Var, TypeVar, KindVar)):
            if node.name == self.name and _namespace_of(node) == self.namespace:
                return self.replacement
            return node

        elif isinstance(node, (ForallType, TypeOperator, TypeAbstraction)):
            param, body = self._under(TYPE, node.param, node.body)
            return replace(node, param=param, param_kind=self.apply(node.param_kind), body=body)
        elif isinstance(node, Lambda):
            param, body = self._under(EXPR, node.param, node.body)
            return replace(node, param=param, param_type=self.apply(node.param_type), body=body)
        elif isinstance(node, Let):
            name, body = self._under(EXPR, node.name, node.body)
            return replace(node, name=name, value=self.apply(node.value), body=body)
        elif isinstance(node, TypeAlias):
            name, body = self._under(TYPE, node.name, node.body)
            return replace(node, name=name, value=self.apply(node.value), body=body)
        elif isinstance(node, KindAlias):
            name, body = self._under(KIND, node.name, node.body)
            return replace(node, name=name, value=self.apply(node.value), body=body)

        changes = {
            f.name: self.apply(getattr(node, f.name))
            for f in fields(node)
            if isinstance(getattr(node, f.name), ASTNode)
        }
        return replace(node, **changes) if changes else node

    def _under(self, namespace: str, binder: Name, body: ASTNode):
        """Push the substitution under a binder, freshening it if it would capture."""
        if namespace == self.namespace and binder == self.name:
            return binder, body
        if binder in self.free[namespace]:
            fresh = self.reducer.fresh(binder)
            body = Substitution(self.reducer, namespace, binder, _reference(namespace, fresh)).apply(body)
            binder = fresh
        return binder, self.apply(body)


def _namespace_of(node: ASTNode) -> str:
    if isinstance(node, Var):
        return EXPR
    elif isinstance(node, TypeVar):
        return TYPE
    return KIND


class Reducer:
    """Small-step reducer with a step limit."""

    def __init__(self, strategy: Strategy = Strategy.NORMAL_ORDER, limit: int = 100,
                 counter: int = 1, trace: bool = False):
        if limit < 0:
            raise EvalError(f"Step limit must be non-negative, got {limit}")
        self.strategy = strategy
        self.limit = limit
        self.counter = counter
        self.trace = trace
        self.history: List[Expr] = []

    def fresh(self, name: Name) -> Name:
        renamed = Name(name.value, self.counter, name.location)
        self.counter += 1
        return renamed

    def substitute(self, node: ASTNode, namespace: str, name: Name, replacement: ASTNode) -> ASTNode:
        return Substitution(self, namespace, name, replacement).apply(node)

    def reduce(self, expr: Expr) -> Expr:
        """Reduce until no redex remains or the step limit is spent."""
        steps = 0
        while steps < self.limit:
            reduced = self.step(expr)
            if reduced is None:
                break
            expr = reduced
            steps += 1
            if self.trace:
                self.history.append(expr)
        return expr

    def step(self, expr: Expr) -> Optional[Expr]:
        """Contract one redex, or return None when ``expr`` is irreducible."""
        eager = self.strategy in EAGER
        strong = self.strategy in STRONG

        if isinstance(expr, (Literal, Var)):
            return None

        elif isinstance(expr, Annotation):
            return expr.expr

        elif isinstance(expr, Let):
            if eager:
                value = self.step(expr.value)
                if value is not None:
                    return replace(expr, value=value)
            return self.substitute(expr.body, EXPR, expr.name, expr.value)

        elif isinstance(expr, TypeAlias):
            return self.substitute(expr.body, TYPE, expr.name, expr.value)

        elif isinstance(expr, KindAlias):
            return self.substitute(expr.body, KIND, expr.name, expr.value)

        elif isinstance(expr, (Lambda, TypeAbstraction)):
            if not strong:
                return None
            body = self.step(expr.body)
            return None if body is None else replace(expr, body=body)

        elif isinstance(expr, App):
            function = expr.function
            if not eager and isinstance(function, Lambda):
                return self.substitute(function.body, EXPR, function.param, expr.argument)
            reduced = self.step(function)
            if reduced is not None:
                return replace(expr, function=reduced)
            if eager or strong:
                argument = self.step(expr.argument)
                if argument is not None:
                    return replace(expr, argument=argument)
            if isinstance(function, Lambda):
                return self.substitute(function.body, EXPR, function.param, expr.argument)
            return None

        elif isinstance(expr, TypeApplication):
            function = expr.function
            if not eager and isinstance(function, TypeAbstraction):
                return self.substitute(function.body, TYPE, function.param, expr.type_argument)
            reduced = self.step(function)
            if reduced is not None:
                return replace(expr, function=reduced)
            if isinstance(function, TypeAbstraction):
                return self.substitute(function.body, TYPE, function.param, expr.type_argument)
            return None

        raise EvalError(f"Cannot reduce expression: {type(expr).__name__}")


def next_counter(expr: Expr) -> int:
    """The first identifier not used anywhere in ``expr``."""
    return max((name.id for name in iter_names(expr)), default=0) + 1


def reduce(expr: Expr, strategy: Strategy = Strategy.NORMAL_ORDER, limit: int = 100,
           counter: Optional[int] = None) -> Expr:
    """Reduce a renamed expression under the given strategy."""
    if counter is None:
        counter = next_counter(expr)
    return Reducer(strategy, limit, counter).reduce(expr)
