import enum
import logging
import string
from dataclasses import dataclass
from typing import Optional

from exprcalc.config import DEFAULT_MAX_TOKEN_LENGTH
from exprcalc.errors import ParserError, TokenizerError
from exprcalc.utils import PrintableEnum

logger = logging.getLogger(__name__)


class TokenType(PrintableEnum):
    END = enum.auto()
    NUMBER = enum.auto()
    NAME = enum.auto()
    PLUS = enum.auto()
    MINUS = enum.auto()
    MULTIPLY = enum.auto()
    DIVIDE = enum.auto()
    POWER = enum.auto()
    ASSIGN = enum.auto()
    ASSIGN_ADD = enum.auto()
    ASSIGN_SUB = enum.auto()
    ASSIGN_MUL = enum.auto()
    ASSIGN_DIV = enum.auto()
    LHPAREN = enum.auto()
    RHPAREN = enum.auto()
    COMMA = enum.auto()
    NOT = enum.auto()
    LT = enum.auto()
    LE = enum.auto()
    GT = enum.auto()
    GE = enum.auto()
    EQ = enum.auto()
    NE = enum.auto()
    AND = enum.auto()
    OR = enum.auto()


@dataclass
class Token:
    type: TokenType
    lexeme: str
    start_idx: int = 0
    value: float = 0.0  # only meaningful for NUMBER

    def __str__(self) -> str:
        return f"<{self.type}>{self.lexeme}"


END_LEXEME = "<end of expression>"

SINGLE_CHAR_TOKENS = {
    "=": TokenType.ASSIGN,
    "<": TokenType.LT,
    ">": TokenType.GT,
    "+": TokenType.PLUS,
    "-": TokenType.MINUS,
    "/": TokenType.DIVIDE,
    "*": TokenType.MULTIPLY,
    "^": TokenType.POWER,
    "(": TokenType.LHPAREN,
    ")": TokenType.RHPAREN,
    ",": TokenType.COMMA,
    "!": TokenType.NOT,
}

# two-character tokens, checked before single characters
DOUBLE_CHAR_TOKENS = {
    "==": TokenType.EQ,
    "<=": TokenType.LE,
    ">=": TokenType.GE,
    "!=": TokenType.NE,
    "+=": TokenType.ASSIGN_ADD,
    "-=": TokenType.ASSIGN_SUB,
    "*=": TokenType.ASSIGN_MUL,
    "/=": TokenType.ASSIGN_DIV,
    "&&": TokenType.AND,
    "||": TokenType.OR,
}

ASCII_DIGITS = frozenset(string.digits)
NAME_START_CHARS = frozenset(string.ascii_letters)
NAME_CHARS = frozenset(string.ascii_letters + string.digits + "_")


def _is_valid_in_number(s: str) -> bool:
    return s in ASCII_DIGITS or s == "."


def is_valid_name(name: str) -> bool:
    return bool(name) and name[0] in NAME_START_CHARS and all(c in NAME_CHARS for c in name)


class Tokenizer:
    """Cursor over expression text holding exactly one lookahead token.

    ``current`` is the lookahead; ``advance`` scans the next token from the
    remaining text and makes it current. A fresh tokenizer has no current
    token, so each evaluation starts from a clean state.
    """

    def __init__(self, code: str, max_token_length: int = DEFAULT_MAX_TOKEN_LENGTH) -> None:
        self.code = code
        self.pos = 0
        self.max_token_length = max_token_length
        self.current: Optional[Token] = None

    def peek(self) -> Token:
        if self.current is None:
            raise ParserError("No token has been read yet", code=self.code, error_char_idx=self.pos)
        return self.current

    def rest(self) -> str:
        """Source text from the start of the lookahead token onwards"""
        start_idx = self.current.start_idx if self.current is not None else self.pos
        return self.code[start_idx:]

    def advance(self, suppress_leading_sign: bool = False) -> Token:
        """Scan the next token and make it current.

        With ``suppress_leading_sign`` a ``+``/``-`` is never read as part of a
        numeric literal, which is what makes ``(2+3)-1`` a subtraction.
        """
        self.current = self._scan(suppress_leading_sign)
        return self.current

    def _scan(self, suppress_leading_sign: bool) -> Token:
        code = self.code
        while self.pos < len(code) and code[self.pos].isspace():
            self.pos += 1

        start_idx = self.pos
        if start_idx >= len(code):
            if self.current is not None and self.current.type is TokenType.END:
                raise ParserError("Unexpected end of expression", code=code, error_char_idx=start_idx)
            return Token(type=TokenType.END, lexeme=END_LEXEME, start_idx=start_idx)

        first = code[start_idx]
        second = code[start_idx + 1] if start_idx + 1 < len(code) else ""

        if (
            (not suppress_leading_sign and first in "+-" and _is_valid_in_number(second))
            or first in ASCII_DIGITS
            or (first == "." and second in ASCII_DIGITS)
        ):
            return self._scan_number(start_idx)

        two_chars = code[start_idx : start_idx + 2]
        if two_chars in DOUBLE_CHAR_TOKENS:
            self.pos += 2
            return Token(type=DOUBLE_CHAR_TOKENS[two_chars], lexeme=two_chars, start_idx=start_idx)

        if first in SINGLE_CHAR_TOKENS:
            self.pos += 1
            return Token(type=SINGLE_CHAR_TOKENS[first], lexeme=first, start_idx=start_idx)

        if first in NAME_START_CHARS:
            end_idx = start_idx + 1
            while end_idx < len(code) and code[end_idx] in NAME_CHARS:
                end_idx += 1
            self.pos = end_idx
            return Token(type=TokenType.NAME, lexeme=self._lexeme(start_idx, end_idx), start_idx=start_idx)

        if ord(first) < ord(" "):
            errmsg = f"Unexpected character 0x{ord(first):02x}"
        else:
            errmsg = f"Unexpected character {first!r}"
        raise TokenizerError(errmsg, code=code, error_char_idx=start_idx)

    def _scan_number(self, start_idx: int) -> Token:
        code = self.code
        end_idx = start_idx
        if code[end_idx] in "+-":
            end_idx += 1
        while end_idx < len(code) and _is_valid_in_number(code[end_idx]):
            end_idx += 1

        # exponent, as in 1.53158e+15
        if end_idx < len(code) and code[end_idx] in "eE":
            end_idx += 1
            if end_idx < len(code) and code[end_idx] in "+-":
                end_idx += 1
            while end_idx < len(code) and code[end_idx] in ASCII_DIGITS:
                end_idx += 1

        self.pos = end_idx
        lexeme = self._lexeme(start_idx, end_idx)
        try:
            value = float(lexeme)
        except ValueError:
            raise TokenizerError(f"Bad numeric literal: {lexeme}", code=code, error_char_idx=start_idx) from None
        return Token(type=TokenType.NUMBER, lexeme=lexeme, start_idx=start_idx, value=value)

    def _lexeme(self, start_idx: int, end_idx: int) -> str:
        if end_idx - start_idx > self.max_token_length:
            raise TokenizerError(
                f"Token longer than {self.max_token_length} characters",
                code=self.code,
                error_char_idx=start_idx,
            )
        return self.code[start_idx:end_idx]


def tokenize(code: str) -> list[Token]:
    """Whole token stream of ``code``, ending with the END token.

    Signs are folded into literals only where an operand is expected, the
    same way the evaluator reads them.
    """
    tokenizer = Tokenizer(code)
    tokens = [tokenizer.advance()]
    while tokens[-1].type is not TokenType.END:
        suppress_leading_sign = tokens[-1].type in (TokenType.NUMBER, TokenType.NAME, TokenType.RHPAREN)
        tokens.append(tokenizer.advance(suppress_leading_sign))
    logger.debug("Tokenized %r into %d tokens", code, len(tokens))
    return tokens
