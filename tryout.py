from exprcalc.errors import EvalError
from exprcalc.evaluator import Evaluator
from exprcalc.tokenizer import tokenize

evaluator = Evaluator()

for code in [
    "5",
    "-1",
    "1 + 1",
    "-1 + 1",
    "1 + -1",
    "4 + 6 * 3",
    "(4 + 6)",
    "(4+6) * 3",
    "(2+3)-1",
    "80225/+2",
    "7/6/2000",
    "5^2",
    "a = 1, b= 2, c = a + b",
    "var = (1 + 14 * (54^2))",
    "10 / 5/ 2",
    "a = b = 10",
    "a=24+a*2",
    "if (1 < 2, 22, 33)",
    "42 + sqrt (64)",
    "mod(1, 0)",
    "nosuchfn(1)",
]:
    print("=" * 10)
    print(f"code: {code!r}")
    try:
        tokens = tokenize(code)
    except EvalError as e:
        print(e)
        continue

    print(f"tokens: {' '.join(str(t) for t in tokens)}")

    try:
        result = evaluator.evaluate_or_raise(code)
    except EvalError as e:
        print(e)
        continue
    print(f"result: {result}")
    print(f"symbols: {evaluator.symbols}")
