from dataclasses import dataclass
from typing import ClassVar

from exprcalc.utils import point_at


@dataclass
class EvalError(Exception):
    errmsg: str
    code: str = ""
    error_char_idx: int = -1

    kind: ClassVar[str] = "Evaluation"

    def __str__(self) -> str:
        lines = [f"[{self.kind} error] {self.errmsg}"]
        if self.code and self.error_char_idx >= 0:
            lines.extend(point_at(self.code, self.error_char_idx))
        return "\n".join(lines)


class TokenizerError(EvalError):
    kind = "Tokenizer"


class ParserError(EvalError):
    kind = "Parser"


class CalcRuntimeError(EvalError):
    kind = "Runtime"


class SymbolTableFullError(CalcRuntimeError):
    pass
