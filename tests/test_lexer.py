"""Tests for the tokenizer: piece classification, positions and lexer errors."""

import pytest

from rai import INT_MAX, ErrorCode, LexerError, TokenType, tokenize


def _types(tokens):
    return [token.type for token in tokens]


# --- Classification ---

def test_single_number():
    tokens = tokenize("42")
    assert len(tokens) == 1
    assert tokens[0].type == TokenType.NUMBER
    assert tokens[0].value == 42


def test_number_operator_alternation():
    tokens = tokenize("1 + 22 - 333")
    assert _types(tokens) == [
        TokenType.NUMBER, TokenType.PLUS, TokenType.NUMBER,
        TokenType.MINUS, TokenType.NUMBER,
    ]
    assert [t.value for t in tokens] == [1, '+', 22, '-', 333]


def test_tokens_are_an_immutable_sequence():
    tokens = tokenize("1 + 2")
    assert isinstance(tokens, tuple)


def test_leading_zeros_are_allowed():
    assert tokenize("007")[0].value == 7


def test_structure_is_not_checked_by_the_lexer():
    # adjacent operators are lexically fine; the parser rejects them
    assert _types(tokenize("- - 1")) == [TokenType.MINUS, TokenType.MINUS, TokenType.NUMBER]


def test_indexes_and_columns():
    tokens = tokenize("10 - 3")
    assert [t.index for t in tokens] == [0, 1, 2]
    assert [t.column for t in tokens] == [1, 4, 6]


def test_largest_literal():
    assert tokenize(str(INT_MAX))[0].value == INT_MAX


# --- Errors ---

@pytest.mark.parametrize("text", ["", " ", "   ", "\t"])
def test_empty_input(text):
    with pytest.raises(LexerError) as exc_info:
        tokenize(text)
    assert exc_info.value.error_code == ErrorCode.EMPTY_INPUT


@pytest.mark.parametrize("text, piece, position", [
    ("a + 1", "a", 1),
    ("1 + b", "b", 5),
    ("1 * 2", "*", 3),
    ("-1", "-1", 1),
    ("+1 + 2", "+1", 1),
    ("1.5", "1.5", 1),
    ("12abc", "12abc", 1),
    ("1 ++ 2", "++", 3),
    ("1\t+ 2", "1\t+", 1),
    ("٣", "٣", 1),  # ARABIC-INDIC DIGIT THREE
])
def test_malformed_token(text, piece, position):
    with pytest.raises(LexerError) as exc_info:
        tokenize(text)
    err = exc_info.value
    assert err.error_code == ErrorCode.MALFORMED_TOKEN
    assert err.piece == piece
    assert err.position == position


@pytest.mark.parametrize("text, position", [
    ("1  + 2", 3),   # consecutive spaces leave an empty piece
    (" 1 + 2", 1),   # leading space
    ("1 + 2 ", 7),   # trailing space
])
def test_empty_piece_is_malformed(text, position):
    with pytest.raises(LexerError) as exc_info:
        tokenize(text)
    assert exc_info.value.error_code == ErrorCode.MALFORMED_TOKEN
    assert exc_info.value.piece == ''
    assert exc_info.value.position == position


def test_literal_too_large():
    piece = str(INT_MAX + 1)
    with pytest.raises(LexerError) as exc_info:
        tokenize("1 + " + piece)
    err = exc_info.value
    assert err.error_code == ErrorCode.OVERFLOW
    assert err.piece == piece
    assert err.position == 5


def test_huge_literal_is_rejected_without_conversion():
    with pytest.raises(LexerError) as exc_info:
        tokenize("9" * 10000)
    assert exc_info.value.error_code == ErrorCode.OVERFLOW


def test_error_message_names_the_piece():
    with pytest.raises(LexerError) as exc_info:
        tokenize("1 + x")
    assert exc_info.value.message == "LexerError: Malformed token -> 'x' at column 5"
