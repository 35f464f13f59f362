import math
import random
import re
import string
import warnings

from exprcalc.evaluator import Evaluator

warnings.filterwarnings("ignore")

evaluator = Evaluator()


def eval_py(code: str) -> float | str:
    try:
        return eval(code)
    except Exception as e:
        return str(e)


def eval_my(code: str) -> float | str:
    result = evaluator.evaluate(code)
    if result.error is not None:
        return result.error.errmsg
    return result.value


def generate_chars(length: int) -> str | None:
    """Random arithmetic text, None if Python would read it differently"""
    code = "".join(random.choices(string.digits + ".()+-*/ ", k=length))
    if re.findall(r"\*\s*\*", code):
        return None  # avoid generating powers (10**4)
    if re.findall(r"/\s*/", code):
        return None  # avoid generating int devision (10 // 3)
    if re.findall(r"\+\s*[(+.]", code):
        return None  # unary plus only exists as part of a numeric literal here
    return code


def generate_pair(depth: int) -> tuple[str, str]:
    """The same random expression in this language and in Python.

    Comparisons, ``&&``, ``||``, ``!`` and ``if`` evaluate every operand here,
    so the Python side uses ``&``, ``|`` and list indexing instead of the
    short-circuiting ``and``, ``or`` and conditional expression.
    """
    if depth == 0 or random.random() < 0.3:
        literal = random.choice(["0", "1", "2", "-3", "0.5", "10", "-.25"])
        return literal, f"({literal})"

    a, a_py = generate_pair(depth - 1)
    b, b_py = generate_pair(depth - 1)
    kind = random.choice(["arith", "compare", "logic", "not", "if", "minmax"])
    if kind == "arith":
        op = random.choice("+-*/")
        return f"({a} {op} {b})", f"({a_py} {op} {b_py})"
    elif kind == "compare":
        op = random.choice(["<", "<=", ">", ">=", "==", "!="])
        return f"({a} {op} {b})", f"float({a_py} {op} {b_py})"
    elif kind == "logic":
        op, op_py = random.choice([("&&", "&"), ("||", "|")])
        return f"({a} {op} {b})", f"float(bool({a_py}) {op_py} bool({b_py}))"
    elif kind == "not":
        return f"!{a}", f"float(not {a_py})"
    elif kind == "if":
        c, c_py = generate_pair(depth - 1)
        return f"if({c}, {a}, {b})", f"[{b_py}, {a_py}][bool({c_py})]"
    else:
        fn = random.choice(["min", "max"])
        return f"{fn}({a}, {b})", f"{fn}({a_py}, {b_py})"


def same(res_py: float | str, res_my: float | str) -> bool:
    if isinstance(res_py, (int, float)) and isinstance(res_my, float):
        return math.isclose(float(res_py), res_my) or (math.isnan(res_py) and math.isnan(res_my))
    if isinstance(res_py, str) and isinstance(res_my, str):
        return True
    if isinstance(res_py, str) and res_py.startswith("leading zeros in decimal integer literals are not permitted"):
        return True
    return False


if __name__ == "__main__":
    while True:
        if random.random() < 0.5:
            code = py_code = generate_chars(10)
            if code is None:
                continue
        else:
            code, py_code = generate_pair(depth=4)

        res_py = eval_py(py_code)
        res_my = eval_my(code)
        if same(res_py, res_my):
            continue
        print(f"{code!r}\npy: {res_py}\nmy: {res_my}\n\n")
