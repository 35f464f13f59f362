"""Expression evaluator.

Parses and computes in a single pass: each precedence tier is a method that
pulls operands from the next tighter tier, so no syntax tree is built.
Tiers, loosest first::

    ,                        comma list, keeps the last value
    && ||                    both operands always evaluated
    < <= > >= == !=          1.0 for true, 0.0 for false
    + -
    * / ^
    primary                  literals, variables, assignment, calls, unary - and !, ( )

Example::

    evaluator = Evaluator()
    evaluator.evaluate("a = 24 + a * 2")
    evaluator.lookup_symbol("a")
"""
import logging
import math
from dataclasses import dataclass, field
from typing import NoReturn, Optional

from exprcalc.builtins import arities_of, ieee_pow, is_function_name, lookup_function
from exprcalc.config import EvaluatorConfig
from exprcalc.errors import CalcRuntimeError, EvalError, ParserError, SymbolTableFullError
from exprcalc.symbols import SymbolTable
from exprcalc.tokenizer import Token, Tokenizer, TokenType

logger = logging.getLogger(__name__)


ASSIGNMENT_OPERATORS = (
    TokenType.ASSIGN,
    TokenType.ASSIGN_ADD,
    TokenType.ASSIGN_SUB,
    TokenType.ASSIGN_MUL,
    TokenType.ASSIGN_DIV,
)

COMPARISONS = {
    TokenType.LT: lambda a, b: a < b,
    TokenType.LE: lambda a, b: a <= b,
    TokenType.GT: lambda a, b: a > b,
    TokenType.GE: lambda a, b: a >= b,
    TokenType.EQ: lambda a, b: a == b,
    TokenType.NE: lambda a, b: a != b,
}


@dataclass
class EvalResult:
    value: float
    error: Optional[EvalError] = field(default=None)

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def message(self) -> Optional[str]:
        return self.error.errmsg if self.error is not None else None


class Evaluator:
    def __init__(self, symbols: Optional[SymbolTable] = None, config: Optional[EvaluatorConfig] = None) -> None:
        self.config = config or EvaluatorConfig()
        self.symbols = symbols if symbols is not None else SymbolTable(max_symbols=self.config.max_symbols)
        self._reset("")

    def _reset(self, code: str) -> None:
        self._tokenizer = Tokenizer(code, max_token_length=self.config.max_token_length)
        self._depth = 0
        self._undeclared_reads: list[Token] = []

    def save_symbol(self, name: str, value: float) -> bool:
        """Store a variable; False when the symbol table is full.

        Raises ValueError if ``name`` is not a valid identifier.
        """
        return self.symbols.save(name, value)

    def lookup_symbol(self, name: str) -> Optional[float]:
        return self.symbols.lookup(name)

    def evaluate(self, code: str) -> EvalResult:
        """Evaluate ``code``; failures come back in the result instead of raising"""
        try:
            return EvalResult(value=self.evaluate_or_raise(code))
        except EvalError as e:
            return EvalResult(value=math.nan, error=e)

    def evaluate_or_raise(self, code: str) -> float:
        """Evaluate ``code`` and return its value.

        Raises an ``EvalError`` subclass on failure, in which case the symbol
        table is left as it was before the call.
        """
        logger.debug("Evaluating %r", code)
        self._reset(code)
        snapshot = self.symbols.snapshot()
        try:
            result = self._evaluate_all()
        except RecursionError:
            # only reachable when max_depth is set beyond what the interpreter allows
            self.symbols.restore(snapshot)
            logger.debug("Evaluation of %r exceeded the recursion limit", code)
            raise ParserError("Expression nested too deeply", code=code, error_char_idx=0) from None
        except EvalError as e:
            self.symbols.restore(snapshot)
            logger.debug("Evaluation of %r failed: %s", code, e.errmsg)
            raise
        logger.debug("Evaluated %r = %r", code, result)
        return result

    def _evaluate_all(self) -> float:
        if not self.symbols.seed_constants():
            raise SymbolTableFullError("Symbol table full, cannot store constants")
        self._advance()
        result = self._comma_list()
        if self._current.type is not TokenType.END:
            self._fail(ParserError, f"Unexpected text at end of expression: {self._tokenizer.rest()!r}")
        if math.isnan(result) and self._undeclared_reads:
            self._fail(
                CalcRuntimeError,
                f"Undefined variable {self._undeclared_reads[0].lexeme!r}",
                error_char_idx=self._undeclared_reads[0].start_idx,
            )
        return result

    @property
    def _code(self) -> str:
        return self._tokenizer.code

    @property
    def _current(self) -> Token:
        return self._tokenizer.peek()

    def _advance(self, suppress_leading_sign: bool = False) -> Token:
        return self._tokenizer.advance(suppress_leading_sign)

    def _fail(self, error_cls: type[EvalError], errmsg: str, error_char_idx: Optional[int] = None) -> NoReturn:
        if error_char_idx is None:
            error_char_idx = self._current.start_idx
        raise error_cls(errmsg, code=self._code, error_char_idx=error_char_idx)

    def _expect(self, token_type: TokenType, lexeme: str) -> None:
        if self._current.type is not token_type:
            self._fail(ParserError, f"Expected {lexeme!r}, found {self._current.lexeme!r}")

    def _comma_list(self) -> float:
        mark = len(self._undeclared_reads)
        left = self._expression()
        while self._current.type is TokenType.COMMA:
            self._advance()
            # reads in the discarded operand cannot reach the result
            del self._undeclared_reads[mark:]
            left = self._expression()  # discard previous value
        return left

    def _expression(self) -> float:
        left = self._comparison()
        while self._current.type in (TokenType.AND, TokenType.OR):
            operator = self._current.type
            self._advance()
            right = self._comparison()
            if operator is TokenType.AND:
                left = 1.0 if (left != 0.0 and right != 0.0) else 0.0
            else:
                left = 1.0 if (left != 0.0 or right != 0.0) else 0.0
        return left

    def _comparison(self) -> float:
        left = self._add_subtract()
        while self._current.type in COMPARISONS:
            compare = COMPARISONS[self._current.type]
            self._advance()
            left = 1.0 if compare(left, self._add_subtract()) else 0.0
        return left

    def _add_subtract(self) -> float:
        left = self._term()
        while self._current.type in (TokenType.PLUS, TokenType.MINUS):
            operator = self._current.type
            self._advance()
            right = self._term()
            left = left + right if operator is TokenType.PLUS else left - right
        return left

    def _term(self) -> float:
        left = self._primary()
        while self._current.type in (TokenType.MULTIPLY, TokenType.DIVIDE, TokenType.POWER):
            operator = self._current
            self._advance()
            right = self._primary()
            if operator.type is TokenType.MULTIPLY:
                left *= right
            elif operator.type is TokenType.DIVIDE:
                if right == 0.0:
                    self._fail(CalcRuntimeError, "Divide by zero", error_char_idx=operator.start_idx)
                left /= right
            else:
                left = ieee_pow(left, right)
        return left

    def _primary(self) -> float:
        self._depth += 1
        try:
            if self._depth > self.config.max_depth:
                self._fail(ParserError, f"Expression nested deeper than {self.config.max_depth} levels")
            return self._primary_inner()
        finally:
            self._depth -= 1

    def _primary_inner(self) -> float:
        token = self._current
        if token.type is TokenType.NUMBER:
            self._advance(suppress_leading_sign=True)
            return token.value
        elif token.type is TokenType.NAME:
            self._advance(suppress_leading_sign=True)
            if self._current.type is TokenType.LHPAREN:
                return self._function_call(token)
            return self._variable(token)
        elif token.type is TokenType.MINUS:
            self._advance()
            return -self._primary()
        elif token.type is TokenType.NOT:
            self._advance()
            return 1.0 if self._primary() == 0.0 else 0.0
        elif token.type is TokenType.LHPAREN:
            self._advance()
            value = self._comma_list()  # commas are allowed inside parentheses
            self._expect(TokenType.RHPAREN, ")")
            self._advance(suppress_leading_sign=True)
            return value
        elif token.type is TokenType.END:
            self._fail(ParserError, "Unexpected end of expression")
        else:
            self._fail(ParserError, f"Unexpected token: {token.lexeme!r}")

    def _function_call(self, name_token: Token) -> float:
        name = name_token.lexeme
        if not is_function_name(name):
            self._fail(CalcRuntimeError, f"Function {name!r} not implemented", error_char_idx=name_token.start_idx)

        self._advance()  # eat the (
        args = [self._expression()]
        while self._current.type is TokenType.COMMA:
            self._advance()
            args.append(self._expression())
        self._expect(TokenType.RHPAREN, ")")

        func = lookup_function(len(args), name)
        if func is None:
            expected = " or ".join(str(arity) for arity in arities_of(name))
            self._fail(
                CalcRuntimeError,
                f"Function {name!r} not implemented for {len(args)} argument(s), expected {expected}",
                error_char_idx=name_token.start_idx,
            )
        self._advance(suppress_leading_sign=True)
        try:
            return func(*args)
        except CalcRuntimeError as e:
            raise CalcRuntimeError(e.errmsg, code=self._code, error_char_idx=name_token.start_idx) from e

    def _variable(self, name_token: Token) -> float:
        name = name_token.lexeme
        mark = len(self._undeclared_reads)
        operator = self._current
        value = self.symbols.lookup(name)
        if value is None:
            # undeclared names read as NaN but are not added to the table
            if operator.type is not TokenType.ASSIGN:
                self._undeclared_reads.append(name_token)
            value = math.nan

        if operator.type not in ASSIGNMENT_OPERATORS:
            return value

        if self.symbols.is_read_only(name):
            self._fail(CalcRuntimeError, f"Variable {name!r} is read-only", error_char_idx=name_token.start_idx)

        self._advance()
        rhs = self._expression()
        if operator.type is TokenType.ASSIGN:
            value = rhs
        elif operator.type is TokenType.ASSIGN_ADD:
            value += rhs
        elif operator.type is TokenType.ASSIGN_SUB:
            value -= rhs
        elif operator.type is TokenType.ASSIGN_MUL:
            value *= rhs
        else:
            if rhs == 0.0:
                self._fail(CalcRuntimeError, "Divide by zero", error_char_idx=operator.start_idx)
            value /= rhs

        if math.isnan(value) and len(self._undeclared_reads) > mark:
            # never store the NaN read from an undeclared variable
            source = self._undeclared_reads[mark]
            self._fail(CalcRuntimeError, f"Undefined variable {source.lexeme!r}", error_char_idx=source.start_idx)

        if not self.symbols.save(name, value):
            self._fail(
                SymbolTableFullError,
                f"Symbol table full, cannot store {name!r}",
                error_char_idx=name_token.start_idx,
            )
        return value


def evaluate(code: str, symbols: Optional[SymbolTable] = None) -> EvalResult:
    return Evaluator(symbols=symbols).evaluate(code)
