import pytest

from exprcalc.errors import ParserError, TokenizerError
from exprcalc.tokenizer import Token, Tokenizer, TokenType, is_valid_name, tokenize


def _types(code: str) -> list[TokenType]:
    return [t.type for t in tokenize(code)]


@pytest.mark.parametrize(
    "code, expected_types",
    [
        pytest.param("", [TokenType.END]),
        pytest.param("   ", [TokenType.END]),
        pytest.param("1", [TokenType.NUMBER, TokenType.END]),
        pytest.param(
            "a+=1",
            [TokenType.NAME, TokenType.ASSIGN_ADD, TokenType.NUMBER, TokenType.END],
        ),
        pytest.param(
            "a -= b *= c /= d",
            [
                TokenType.NAME,
                TokenType.ASSIGN_SUB,
                TokenType.NAME,
                TokenType.ASSIGN_MUL,
                TokenType.NAME,
                TokenType.ASSIGN_DIV,
                TokenType.NAME,
                TokenType.END,
            ],
        ),
        pytest.param(
            "1<=2>=3==4!=5<6>7",
            [
                TokenType.NUMBER,
                TokenType.LE,
                TokenType.NUMBER,
                TokenType.GE,
                TokenType.NUMBER,
                TokenType.EQ,
                TokenType.NUMBER,
                TokenType.NE,
                TokenType.NUMBER,
                TokenType.LT,
                TokenType.NUMBER,
                TokenType.GT,
                TokenType.NUMBER,
                TokenType.END,
            ],
        ),
        pytest.param(
            "!a && b || c",
            [TokenType.NOT, TokenType.NAME, TokenType.AND, TokenType.NAME, TokenType.OR, TokenType.NAME, TokenType.END],
        ),
        pytest.param(
            "f(1, 2) ^ x = y",
            [
                TokenType.NAME,
                TokenType.LHPAREN,
                TokenType.NUMBER,
                TokenType.COMMA,
                TokenType.NUMBER,
                TokenType.RHPAREN,
                TokenType.POWER,
                TokenType.NAME,
                TokenType.ASSIGN,
                TokenType.NAME,
                TokenType.END,
            ],
        ),
        pytest.param(
            "(2+3)-1",
            [
                TokenType.LHPAREN,
                TokenType.NUMBER,
                TokenType.PLUS,
                TokenType.NUMBER,
                TokenType.RHPAREN,
                TokenType.MINUS,
                TokenType.NUMBER,
                TokenType.END,
            ],
        ),
    ],
)
def test_token_types(code: str, expected_types: list[TokenType]) -> None:
    assert _types(code) == expected_types


@pytest.mark.parametrize(
    "code, expected_value",
    [
        pytest.param("42", 42.0),
        pytest.param("-7", -7.0),
        pytest.param("+7", 7.0),
        pytest.param(".25", 0.25),
        pytest.param("5.", 5.0),
        pytest.param("1e3", 1000.0),
        pytest.param("1.5E-1", 0.15),
    ],
)
def test_number_values(code: str, expected_value: float) -> None:
    token = Tokenizer(code).advance()
    assert token.type is TokenType.NUMBER
    assert token.lexeme == code
    assert token.value == expected_value


def test_leading_sign_suppressed() -> None:
    tokenizer = Tokenizer("-1")
    assert tokenizer.advance(suppress_leading_sign=True).type is TokenType.MINUS
    assert tokenizer.advance().value == 1.0


def test_names_allow_digits_and_underscore() -> None:
    tokens = tokenize("var_1 + x2")
    assert tokens[0] == Token(type=TokenType.NAME, lexeme="var_1", start_idx=0)
    assert tokens[2] == Token(type=TokenType.NAME, lexeme="x2", start_idx=8)


def test_reading_past_end_fails() -> None:
    tokenizer = Tokenizer("1")
    tokenizer.advance()
    assert tokenizer.advance().type is TokenType.END
    with pytest.raises(ParserError, match="Unexpected end of expression"):
        tokenizer.advance()


@pytest.mark.parametrize(
    "code, errmsg, error_char_idx",
    [
        pytest.param("1 # 2", "Unexpected character '#'", 2),
        pytest.param("_a", "Unexpected character '_'", 0),
        pytest.param("a & b", "Unexpected character '&'", 2),
        pytest.param("\x07", "Unexpected character 0x07", 0),
        pytest.param("3..1", "Bad numeric literal: 3..1", 0),
        pytest.param("1e+", "Bad numeric literal: 1e+", 0),
    ],
)
def test_tokenizer_errors(code: str, errmsg: str, error_char_idx: int) -> None:
    with pytest.raises(TokenizerError) as exc_info:
        tokenize(code)
    assert exc_info.value.errmsg == errmsg
    assert exc_info.value.error_char_idx == error_char_idx


def test_token_length_limit() -> None:
    tokenizer = Tokenizer("a" * 20, max_token_length=10)
    with pytest.raises(TokenizerError, match="Token longer than 10 characters"):
        tokenizer.advance()


def test_error_pointer_is_elided_for_long_input() -> None:
    code = "1 + 2 + 3 + 4 + 5 + 6 # 7 + 8 + 9 + 10 + 11"
    with pytest.raises(TokenizerError) as exc_info:
        tokenize(code)
    assert str(exc_info.value).splitlines() == [
        "[Tokenizer error] Unexpected character '#'",
        "...4 + 5 + 6 # 7 + 8 + ...",
        "             ^",
    ]


@pytest.mark.parametrize(
    "name, valid",
    [
        pytest.param("a", True),
        pytest.param("abc_12", True),
        pytest.param("A1", True),
        pytest.param("", False),
        pytest.param("1a", False),
        pytest.param("_a", False),
        pytest.param("a-b", False),
    ],
)
def test_is_valid_name(name: str, valid: bool) -> None:
    assert is_valid_name(name) is valid
