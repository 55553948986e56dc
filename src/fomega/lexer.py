"""Lexer for fomega."""

from dataclasses import dataclass
from enum import Enum, auto
from typing import List, Optional

from .errors import LexError


class TokenType(Enum):
    """Token types for fomega."""
    # Literals
    INT = auto()

    # Identifiers and keywords
    IDENT = auto()       # lowercase: term variables
    TNAME = auto()       # uppercase: types and kinds
    INT_TYPE = auto()    # Int
    LET = auto()         # let
    IN = auto()          # in
    TYPE = auto()        # type
    KIND = auto()        # kind
    LAMBDA = auto()      # λ, \, Λ, lambda
    FORALL = auto()      # ∀, forall

    # Symbols
    LPAREN = auto()      # (
    RPAREN = auto()      # )
    LBRACKET = auto()    # [
    RBRACKET = auto()    # ]
    ARROW = auto()       # ->
    STAR = auto()        # *
    DOT = auto()         # .
    COLON = auto()       # :
    EQUALS = auto()      # =

    # Special
    EOF = auto()


@dataclass
class Token:
    """A lexical token."""
    type: TokenType
    value: str
    line: int
    column: int

    def __repr__(self) -> str:
        return f"Token({self.type.name}, {self.value!r}, {self.line}, {self.column})"


class Lexer:
    """Lexical analyzer for fomega."""

    KEYWORDS = {
        'let': TokenType.LET,
        'in': TokenType.IN,
        'type': TokenType.TYPE,
        'kind': TokenType.KIND,
        'lambda': TokenType.LAMBDA,
        'forall': TokenType.FORALL,
        'Int': TokenType.INT_TYPE,
    }

    SYMBOLS = {
        '(': TokenType.LPAREN,
        ')': TokenType.RPAREN,
        '[': TokenType.LBRACKET,
        ']': TokenType.RBRACKET,
        '->': TokenType.ARROW,
        '*': TokenType.STAR,
        '.': TokenType.DOT,
        ':': TokenType.COLON,
        '=': TokenType.EQUALS,
        'λ': TokenType.LAMBDA,
        'Λ': TokenType.LAMBDA,
        '\\': TokenType.LAMBDA,
        '∀': TokenType.FORALL,
    }

    def __init__(self, source: str, filename: Optional[str] = None):
        self.source = source
        self.filename = filename
        self.position = 0
        self.line = 1
        self.column = 1
        self.tokens: List[Token] = []

    def current_char(self) -> Optional[str]:
        """Get the current character."""
        if self.position >= len(self.source):
            return None
        return self.source[self.position]

    def peek_char(self, offset: int = 1) -> Optional[str]:
        """Peek at a character ahead."""
        pos = self.position + offset
        if pos >= len(self.source):
            return None
        return self.source[pos]

    def advance(self) -> None:
        """Move to the next character."""
        if self.position < len(self.source):
            if self.source[self.position] == '\n':
                self.line += 1
                self.column = 1
            else:
                self.column += 1
            self.position += 1

    def skip_whitespace(self) -> None:
        """Skip whitespace and comments."""
        while self.current_char() is not None:
            if self.current_char() in ' \t\r\n':
                self.advance()
            # Single-line comments
            elif self.current_char() == '-' and self.peek_char() == '-':
                while self.current_char() is not None and self.current_char() != '\n':
                    self.advance()
            else:
                break

    def read_number(self) -> str:
        """Read a number literal."""
        value = ""
        while self.current_char() is not None and self.current_char().isdigit():
            value += self.current_char()
            self.advance()
        return value

    def read_identifier(self) -> str:
        """Read an identifier or keyword."""
        value = ""
        while (self.current_char() is not None and
               (self.current_char().isalnum() or self.current_char() in '_\'') and
               self.current_char() not in self.SYMBOLS):
            value += self.current_char()
            self.advance()
        return value

    def tokenize(self) -> List[Token]:
        """Tokenize the source code."""
        self.tokens = []

        while self.position < len(self.source):
            self.skip_whitespace()

            if self.current_char() is None:
                break

            start_line = self.line
            start_column = self.column
            char = self.current_char()

            if char.isdigit():
                value = self.read_number()
                self.tokens.append(Token(TokenType.INT, value, start_line, start_column))

            elif (char.isalpha() or char == '_') and char not in self.SYMBOLS:
                value = self.read_identifier()
                if value in self.KEYWORDS:
                    token_type = self.KEYWORDS[value]
                elif value[0].isupper():
                    token_type = TokenType.TNAME
                else:
                    token_type = TokenType.IDENT
                self.tokens.append(Token(token_type, value, start_line, start_column))

            # Two-character symbols
            elif self.peek_char() and char + self.peek_char() in self.SYMBOLS:
                symbol = char + self.peek_char()
                self.advance()
                self.advance()
                self.tokens.append(Token(self.SYMBOLS[symbol], symbol, start_line, start_column))

            elif char in self.SYMBOLS:
                self.advance()
                self.tokens.append(Token(self.SYMBOLS[char], char, start_line, start_column))

            else:
                raise LexError(f"Unexpected character '{char}'",
                               self.line, self.column, self.filename)

        self.tokens.append(Token(TokenType.EOF, '', self.line, self.column))

        return self.tokens


def lex(source: str, filename: Optional[str] = None) -> List[Token]:
    """Convenience function to tokenize source code."""
    lexer = Lexer(source, filename)
    return lexer.tokenize()
