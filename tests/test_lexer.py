"""Tests for the lexer."""

import pytest
from fomega.lexer import Lexer, Token, TokenType, lex
from fomega.errors import LexError


def test_simple_tokens():
    """Test lexing simple tokens."""
    source = "( ) [ ] -> * . : = \\ λ Λ ∀"
    tokens = lex(source)

    expected_types = [
        TokenType.LPAREN, TokenType.RPAREN,
        TokenType.LBRACKET, TokenType.RBRACKET,
        TokenType.ARROW, TokenType.STAR,
        TokenType.DOT, TokenType.COLON,
        TokenType.EQUALS,
        TokenType.LAMBDA, TokenType.LAMBDA, TokenType.LAMBDA,
        TokenType.FORALL,
        TokenType.EOF
    ]

    assert len(tokens) == len(expected_types)
    for token, expected_type in zip(tokens, expected_types):
        assert token.type == expected_type


def test_keywords():
    """Test lexing keywords."""
    source = "let in type kind lambda forall Int"
    tokens = lex(source)

    expected = [
        (TokenType.LET, "let"),
        (TokenType.IN, "in"),
        (TokenType.TYPE, "type"),
        (TokenType.KIND, "kind"),
        (TokenType.LAMBDA, "lambda"),
        (TokenType.FORALL, "forall"),
        (TokenType.INT_TYPE, "Int"),
        (TokenType.EOF, ""),
    ]

    assert len(tokens) == len(expected)
    for token, (expected_type, expected_value) in zip(tokens, expected):
        assert token.type == expected_type
        assert token.value == expected_value


def test_identifiers():
    """Lowercase names are term variables, uppercase names are types or kinds."""
    tokens = lex("x foo_bar x' Foo A1 Integer")

    expected = [
        (TokenType.IDENT, "x"),
        (TokenType.IDENT, "foo_bar"),
        (TokenType.IDENT, "x'"),
        (TokenType.TNAME, "Foo"),
        (TokenType.TNAME, "A1"),
        (TokenType.TNAME, "Integer"),
    ]

    for token, (expected_type, expected_value) in zip(tokens, expected):
        assert token.type == expected_type
        assert token.value == expected_value


def test_numbers():
    """Test lexing integer literals."""
    tokens = lex("0 42 12345")

    assert [t.type for t in tokens[:-1]] == [TokenType.INT] * 3
    assert [t.value for t in tokens[:-1]] == ["0", "42", "12345"]


def test_arrows_without_spaces():
    """Arrows split adjacent names."""
    tokens = lex("A->B")

    assert [t.type for t in tokens] == [
        TokenType.TNAME, TokenType.ARROW, TokenType.TNAME, TokenType.EOF
    ]


def test_binders_without_spaces():
    """A lambda symbol directly followed by a name."""
    tokens = lex("λx:Int.x")

    assert [t.type for t in tokens] == [
        TokenType.LAMBDA, TokenType.IDENT, TokenType.COLON, TokenType.INT_TYPE,
        TokenType.DOT, TokenType.IDENT, TokenType.EOF
    ]


def test_comments():
    """Test that comments are skipped."""
    source = """
    x -- this is a comment
    y
    """
    tokens = lex(source)

    assert len(tokens) == 3
    assert tokens[0].value == "x"
    assert tokens[1].value == "y"
    assert tokens[2].type == TokenType.EOF


def test_positions():
    """Test that token positions are tracked correctly."""
    tokens = lex("let x\n  in")

    assert (tokens[0].line, tokens[0].column) == (1, 1)
    assert (tokens[1].line, tokens[1].column) == (1, 5)
    assert (tokens[2].line, tokens[2].column) == (2, 3)


def test_unexpected_character():
    """Test lexing errors."""
    with pytest.raises(LexError) as exc_info:
        lex("x @ y", "input.fw")

    error = exc_info.value
    assert "Unexpected character '@'" in str(error)
    assert (error.line, error.column) == (1, 3)
    assert error.location.filename == "input.fw"


def test_lexer_reuse():
    """A Lexer instance produces the same tokens when run again."""
    lexer = Lexer("λA: *. A")
    first = lexer.tokenize()

    assert isinstance(first[0], Token)
    assert [t.type for t in first] == [t.type for t in Lexer("λA: *. A").tokenize()]
