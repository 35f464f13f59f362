import logging
import math
import time
from typing import Callable, Iterator, Optional

from exprcalc.tokenizer import is_valid_name

logger = logging.getLogger(__name__)

CONSTANTS = {
    "pi": math.pi,
    "e": math.e,
}


def _seconds(clock: Callable[[], float]) -> float:
    return float(math.floor(clock()))


def _milliseconds(clock: Callable[[], float]) -> float:
    return clock() * 1000.0


# computed on every read, shadowing anything stored under the same name
PSEUDO_VARIABLES: dict[str, Callable[[Callable[[], float]], float]] = {
    "time": _seconds,
    "timems": _milliseconds,
}


class SymbolTable:
    """Named variables that persist across evaluations.

    Seeded with ``pi`` and ``e``. ``max_symbols`` bounds the number of stored
    names; when it is ``None`` the table grows as needed.
    """

    def __init__(
        self,
        max_symbols: Optional[int] = None,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self.max_symbols = max_symbols
        self.clock = clock
        self._symbols: dict[str, float] = {}
        self.seed_constants()

    def seed_constants(self) -> bool:
        """Store ``pi`` and ``e`` unless they are already present"""
        ok = True
        for name, value in CONSTANTS.items():
            if name not in self._symbols:
                ok = self.save(name, value) and ok
        return ok

    def lookup(self, name: str) -> Optional[float]:
        if name in PSEUDO_VARIABLES:
            return PSEUDO_VARIABLES[name](self.clock)
        return self._symbols.get(name)

    def save(self, name: str, value: float) -> bool:
        """Insert or overwrite ``name``; False only when the table is full"""
        if not is_valid_name(name):
            raise ValueError(f"Invalid symbol name: {name!r}")
        if name not in self._symbols and self.max_symbols is not None and len(self._symbols) >= self.max_symbols:
            logger.warning("Symbol table full (%d symbols), cannot store %r", self.max_symbols, name)
            return False
        logger.debug("Saving symbol %s = %r", name, value)
        self._symbols[name] = float(value)
        return True

    def is_read_only(self, name: str) -> bool:
        return name in PSEUDO_VARIABLES

    def snapshot(self) -> dict[str, float]:
        return dict(self._symbols)

    def restore(self, snapshot: dict[str, float]) -> None:
        self._symbols = dict(snapshot)

    def __contains__(self, name: object) -> bool:
        return name in self._symbols

    def __iter__(self) -> Iterator[str]:
        return iter(self._symbols)

    def __len__(self) -> int:
        return len(self._symbols)

    def __repr__(self) -> str:
        return f"SymbolTable({self._symbols!r})"
