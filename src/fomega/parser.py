"""Parser for fomega using recursive descent."""

from typing import List, Optional

from .lexer import Token, TokenType, lex
from .errors import ParseError
from .syntax import *


class Parser:
    """Recursive descent parser for fomega."""

    def __init__(self, tokens: List[Token], filename: Optional[str] = None):
        self.tokens = tokens
        self.filename = filename
        self.position = 0
        self.current_token = tokens[0] if tokens else Token(TokenType.EOF, "", 1, 1)

    def advance(self) -> None:
        """Move to the next token."""
        if self.position < len(self.tokens) - 1:
            self.position += 1
            self.current_token = self.tokens[self.position]

    def peek(self, offset: int = 1) -> Optional[Token]:
        """Look ahead at a token."""
        pos = self.position + offset
        if pos < len(self.tokens):
            return self.tokens[pos]
        return None

    def error(self, message: str) -> ParseError:
        token = self.current_token
        return ParseError(message, token.line, token.column, self.filename)

    def expect(self, token_type: TokenType) -> Token:
        """Consume a token of the expected type."""
        if self.current_token.type != token_type:
            raise self.error(f"Expected {token_type.name}, got {self.current_token.type.name}")
        token = self.current_token
        self.advance()
        return token

    def match(self, *token_types: TokenType) -> bool:
        """Check if current token matches any of the given types."""
        return self.current_token.type in token_types

    def consume(self, token_type: TokenType) -> bool:
        """Consume a token if it matches the type."""
        if self.current_token.type == token_type:
            self.advance()
            return True
        return False

    def location(self, token: Token) -> SourceLocation:
        return SourceLocation(token.line, token.column, self.filename)

    def name(self, token: Token) -> Name:
        return Name(token.value, location=self.location(token))

    # Kind parsing

    def parse_kind(self) -> Kind:
        """Parse a kind; arrows associate to the right."""
        left = self.parse_atomic_kind()
        if self.consume(TokenType.ARROW):
            return ArrowKind(left, self.parse_kind())
        return left

    def parse_atomic_kind(self) -> Kind:
        if self.consume(TokenType.STAR):
            return StarKind()

        if self.match(TokenType.TNAME):
            token = self.current_token
            self.advance()
            return KindVar(self.name(token))

        if self.consume(TokenType.LPAREN):
            kind = self.parse_kind()
            self.expect(TokenType.RPAREN)
            return kind

        raise self.error(f"Expected kind, got {self.current_token.type.name}")

    # Type parsing

    def parse_type(self) -> Type:
        """Parse a type expression."""
        if self.match(TokenType.FORALL, TokenType.LAMBDA):
            is_forall = self.current_token.type == TokenType.FORALL
            self.advance()
            param = self.name(self.expect(TokenType.TNAME))
            self.expect(TokenType.COLON)
            param_kind = self.parse_kind()
            self.expect(TokenType.DOT)
            body = self.parse_type()
            if is_forall:
                return ForallType(param, param_kind, body)
            return TypeOperator(param, param_kind, body)

        return self.parse_function_type()

    def parse_function_type(self) -> Type:
        """Parse function types (arrows)."""
        left = self.parse_type_app()

        if self.consume(TokenType.ARROW):
            right = self.parse_type()
            return FunctionType(left, right)

        return left

    def parse_type_app(self) -> Type:
        """Parse type application."""
        left = self.parse_atomic_type()

        while self.match(TokenType.INT_TYPE, TokenType.TNAME, TokenType.LPAREN):
            arg = self.parse_atomic_type()
            left = TypeApp(left, arg)

        return left

    def parse_atomic_type(self) -> Type:
        """Parse atomic types."""
        if self.consume(TokenType.INT_TYPE):
            return IntType()

        if self.match(TokenType.TNAME):
            token = self.current_token
            self.advance()
            return TypeVar(self.name(token))

        if self.consume(TokenType.LPAREN):
            ty = self.parse_type()
            if self.consume(TokenType.COLON):
                ty = KindedType(ty, self.parse_kind())
            self.expect(TokenType.RPAREN)
            return ty

        raise self.error(f"Expected type, got {self.current_token.type.name}")

    # Expression parsing

    def parse_expr(self) -> Expr:
        """Parse an expression."""
        if self.match(TokenType.LET):
            return self.parse_let()
        if self.match(TokenType.TYPE):
            return self.parse_type_alias()
        if self.match(TokenType.KIND):
            return self.parse_kind_alias()
        if self.match(TokenType.LAMBDA):
            return self.parse_lambda()
        return self.parse_app()

    def parse_lambda(self) -> Expr:
        """Parse value and type abstractions."""
        start = self.expect(TokenType.LAMBDA)
        location = self.location(start)

        if self.match(TokenType.TNAME):
            param = self.name(self.current_token)
            self.advance()
            self.expect(TokenType.COLON)
            param_kind = self.parse_kind()
            self.expect(TokenType.DOT)
            body = self.parse_expr()
            return TypeAbstraction(param, param_kind, body, location)

        param = self.name(self.expect(TokenType.IDENT))
        self.expect(TokenType.COLON)
        param_type = self.parse_type()
        self.expect(TokenType.DOT)
        body = self.parse_expr()
        return Lambda(param, param_type, body, location)

    def parse_let(self) -> Expr:
        """Parse let x: T = e in body. The value is wrapped in an annotation."""
        start = self.expect(TokenType.LET)
        name = self.name(self.expect(TokenType.IDENT))
        self.expect(TokenType.COLON)
        annotation = self.parse_type()
        self.expect(TokenType.EQUALS)
        value = self.parse_expr()
        self.expect(TokenType.IN)
        body = self.parse_expr()
        location = self.location(start)
        return Let(name, Annotation(value, annotation, value.location), body, location)

    def parse_type_alias(self) -> Expr:
        """Parse type X: K = T in body. The value is wrapped in a kind annotation."""
        start = self.expect(TokenType.TYPE)
        name = self.name(self.expect(TokenType.TNAME))
        self.expect(TokenType.COLON)
        kind = self.parse_kind()
        self.expect(TokenType.EQUALS)
        value = self.parse_type()
        self.expect(TokenType.IN)
        body = self.parse_expr()
        return TypeAlias(name, KindedType(value, kind), body, self.location(start))

    def parse_kind_alias(self) -> Expr:
        """Parse kind K = k in body."""
        start = self.expect(TokenType.KIND)
        name = self.name(self.expect(TokenType.TNAME))
        self.expect(TokenType.EQUALS)
        value = self.parse_kind()
        self.expect(TokenType.IN)
        body = self.parse_expr()
        return KindAlias(name, value, body, self.location(start))

    def parse_app(self) -> Expr:
        """Parse application of terms and of [type] arguments."""
        expr = self.parse_atomic_expr()

        while self.match(TokenType.INT, TokenType.IDENT, TokenType.LPAREN, TokenType.LBRACKET):
            if self.match(TokenType.LBRACKET):
                self.advance()
                type_argument = self.parse_type()
                self.expect(TokenType.RBRACKET)
                expr = TypeApplication(expr, type_argument, expr.location)
            else:
                argument = self.parse_atomic_expr()
                expr = App(expr, argument, expr.location)

        return expr

    def parse_atomic_expr(self) -> Expr:
        """Parse atomic expressions."""
        token = self.current_token

        if self.consume(TokenType.INT):
            return Literal(int(token.value), self.location(token))

        if self.consume(TokenType.IDENT):
            return Var(self.name(token), self.location(token))

        if self.consume(TokenType.LPAREN):
            expr = self.parse_expr()
            if self.consume(TokenType.COLON):
                annotation = self.parse_type()
                expr = Annotation(expr, annotation, self.location(token))
            self.expect(TokenType.RPAREN)
            return expr

        raise self.error(f"Expected expression, got {token.type.name}")

    def parse_program(self) -> Expr:
        """Parse a complete source text: a single expression."""
        expr = self.parse_expr()
        if not self.match(TokenType.EOF):
            raise self.error(f"Unexpected {self.current_token.type.name} after expression")
        return expr


def _run(parser: Parser, rule):
    try:
        return rule()
    except RecursionError:
        raise parser.error("input is nested too deeply") from None


def parse(source: str, filename: Optional[str] = None) -> Expr:
    """Parse source code into a surface expression."""
    tokens = lex(source, filename)
    parser = Parser(tokens, filename)
    return _run(parser, parser.parse_program)


def parse_type(source: str) -> Type:
    """Parse a standalone type expression."""
    parser = Parser(lex(source))
    ty = _run(parser, parser.parse_type)
    parser.expect(TokenType.EOF)
    return ty


def parse_kind(source: str) -> Kind:
    """Parse a standalone kind expression."""
    parser = Parser(lex(source))
    kind = _run(parser, parser.parse_kind)
    parser.expect(TokenType.EOF)
    return kind
