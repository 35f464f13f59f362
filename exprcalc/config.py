from dataclasses import dataclass
from typing import Optional

DEFAULT_MAX_DEPTH = 64
DEFAULT_MAX_TOKEN_LENGTH = 1023


@dataclass(frozen=True)
class EvaluatorConfig:
    # nested parentheses, unary operators, call arguments and assignments all count
    max_depth: int = DEFAULT_MAX_DEPTH
    # None lets the symbol table grow without bound
    max_symbols: Optional[int] = None
    max_token_length: int = DEFAULT_MAX_TOKEN_LENGTH

    def __post_init__(self) -> None:
        if self.max_depth < 1:
            raise ValueError(f"max_depth must be positive, got {self.max_depth}")
        if self.max_symbols is not None and self.max_symbols < 0:
            raise ValueError(f"max_symbols must not be negative, got {self.max_symbols}")
        if self.max_token_length < 1:
            raise ValueError(f"max_token_length must be positive, got {self.max_token_length}")
