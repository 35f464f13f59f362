import argparse
import logging

from exprcalc.evaluator import Evaluator


if __name__ == "__main__":
    arg_parser = argparse.ArgumentParser(description="Interactive expression evaluator")
    arg_parser.add_argument("--debug", action="store_true", help="log tokenizer and evaluator activity")
    args = arg_parser.parse_args()
    logging.basicConfig(level=logging.DEBUG if args.debug else logging.WARNING)

    evaluator = Evaluator()

    while True:
        try:
            code = input("? ")
        except EOFError:
            break
        if not code:
            break

        result = evaluator.evaluate(code)
        print(f"{code} = {result.value:.16g}")
        if result.error is not None:
            print(result.error)
