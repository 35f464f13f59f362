import math
import random
from dataclasses import dataclass
from typing import Callable, Optional

from exprcalc.errors import CalcRuntimeError

# upper bound on the number of dice one roll() call may throw
MAX_ROLL_DICE = 10_000


@dataclass
class BuiltinFunc:
    name: str
    arity: int
    fn: Callable[..., float]
    # overflow takes the sign of the first argument instead of always +inf
    signed_overflow: bool = False

    def __call__(self, *args: float) -> float:
        # math raises where C returns NaN or an infinity; follow C
        try:
            return float(self.fn(*args))
        except ValueError:
            return math.nan
        except OverflowError:
            return math.copysign(math.inf, args[0]) if self.signed_overflow else math.inf


# one catalog per arity, filled at import time
BUILTIN_FUNCS: dict[int, dict[str, BuiltinFunc]] = {1: {}, 2: {}, 3: {}}

_rng = random.Random()


def seed_random(seed: Optional[int] = None) -> None:
    """Reseed the generator behind rand, percent and roll"""
    _rng.seed(seed)


def register_builtin_func(name: str, arity: int, signed_overflow: bool = False):
    def decorator(fn: Callable[..., float]) -> Callable[..., float]:
        catalog = BUILTIN_FUNCS[arity]
        if name in catalog:
            raise ValueError(f"Built-in {name!r} with {arity} argument(s) is already registered")
        catalog[name] = BuiltinFunc(name=name, arity=arity, fn=fn, signed_overflow=signed_overflow)
        return fn

    return decorator


def lookup_function(arity: int, name: str) -> Optional[BuiltinFunc]:
    return BUILTIN_FUNCS.get(arity, {}).get(name)


def is_function_name(name: str) -> bool:
    return any(name in catalog for catalog in BUILTIN_FUNCS.values())


def arities_of(name: str) -> list[int]:
    return sorted(arity for arity, catalog in BUILTIN_FUNCS.items() if name in catalog)


def ieee_pow(a: float, b: float) -> float:
    """``math.pow`` returning infinities and NaN the way C ``pow`` does"""
    odd_exponent = math.isfinite(b) and float(b).is_integer() and b % 2 == 1
    try:
        return math.pow(a, b)
    except OverflowError:
        return -math.inf if a < 0 and odd_exponent else math.inf
    except ValueError:
        if a == 0.0:
            # zero to a negative power
            return math.copysign(math.inf, a) if odd_exponent else math.inf
        return math.nan


for _name, _fn in [
    ("abs", math.fabs),
    ("acos", math.acos),
    ("asin", math.asin),
    ("atan", math.atan),
    ("ceil", math.ceil),
    ("cos", math.cos),
    ("cosh", math.cosh),
    ("exp", math.exp),
    ("floor", math.floor),
    ("sin", math.sin),
    ("sinh", math.sinh),
    ("sqrt", math.sqrt),
    ("tan", math.tan),
    ("tanh", math.tanh),
]:
    register_builtin_func(_name, arity=1, signed_overflow=_name in ("ceil", "floor", "sinh"))(_fn)


@register_builtin_func("atanh", arity=1)
def atanh_(arg: float) -> float:
    if abs(arg) == 1.0:
        return math.copysign(math.inf, arg)
    return math.atanh(arg)


@register_builtin_func("log", arity=1)
def log_(arg: float) -> float:
    return -math.inf if arg == 0.0 else math.log(arg)


@register_builtin_func("log10", arity=1)
def log10_(arg: float) -> float:
    return -math.inf if arg == 0.0 else math.log10(arg)


def random_below(x: int) -> int:
    """Random integer from 0 up to, but excluding, x"""
    if x <= 0:
        return 0
    return _rng.randrange(x)


@register_builtin_func("int", arity=1, signed_overflow=True)
def int_(arg: float) -> float:
    return float(math.trunc(arg))


@register_builtin_func("rand", arity=1, signed_overflow=True)
def rand_(arg: float) -> float:
    return float(random_below(int(arg)))


@register_builtin_func("percent", arity=1)
def percent_(arg: float) -> float:
    # true arg% of the time
    if arg >= 100:
        return 1.0
    if not arg > 0:
        return 0.0
    return 1.0 if random_below(100) < int(arg) else 0.0


@register_builtin_func("min", arity=2)
def min_(a: float, b: float) -> float:
    return a if a < b else b


@register_builtin_func("max", arity=2)
def max_(a: float, b: float) -> float:
    return a if a > b else b


@register_builtin_func("mod", arity=2)
def mod_(a: float, b: float) -> float:
    if b == 0.0:
        raise CalcRuntimeError("Divide by zero in mod")
    return math.fmod(a, b)


@register_builtin_func("pow", arity=2)
def pow_(a: float, b: float) -> float:
    n = int(b) if math.isfinite(b) else 0
    if 0 < n <= 64 and n == b:
        # repeated multiplication keeps small integer powers exact
        result = a
        for _ in range(n - 1):
            result *= a
        return result
    return ieee_pow(a, b)


@register_builtin_func("roll", arity=2)
def roll_(howmany: float, die: float) -> float:
    if howmany > MAX_ROLL_DICE:
        raise CalcRuntimeError(f"Cannot roll more than {MAX_ROLL_DICE} dice")
    sides = int(die)
    return float(sum(random_below(sides) + 1 for _ in range(int(howmany))))


@register_builtin_func("if", arity=3)
def if_(cond: float, if_true: float, if_false: float) -> float:
    return if_true if cond != 0.0 else if_false
