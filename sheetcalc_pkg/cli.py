from __future__ import annotations

import argparse
import json
from typing import Any

from .api import create_calculator
from .calculator import SyntaxTreeCalculator
from .config import DEFAULT_SCALE, LOG_LEVEL, VERSION
from .logging_config import get_logger, setup_logging
from .types import EvalResult, ParseError

logger = get_logger("cli")

REPL_COMMANDS = {"help", "quit", "exit", "scale", "tree", "functions"}


def _health_check() -> int:
    """Run health check to verify basic operations.

    Returns:
        Exit code (0 for success, non-zero for failures)
    """
    checks_passed = 0
    checks_failed = 0

    print("Running SheetCalc health check...")
    print("-" * 50)

    checks = [
        ("Basic arithmetic", "1 + 2 * 3", 10, "7"),
        ("Division rounding", "10 / 3", 3, "3.333"),
        ("Division by zero", "1 / 0", 10, "#DIV0"),
        ("Syntax errors", "(1 + 2", 10, "#SYNTAXERROR"),
        ("Functions", "IF(1, RounD(Sin(5), 2), 0)", 10, "-0.96"),
    ]
    for label, expression, scale, expected in checks:
        try:
            result = create_calculator(scale).calculate(expression)
        except Exception as e:
            print(f"[FAIL] {label} check failed: {e}")
            checks_failed += 1
            continue
        if result == expected:
            print(f"[OK] {label} works")
            checks_passed += 1
        else:
            print(f"[FAIL] {label}: expected {expected}, got {result}")
            checks_failed += 1

    print("-" * 50)
    print(f"Results: {checks_passed} passed, {checks_failed} failed")

    if checks_failed > 0:
        print("\n[WARN] Some health checks failed. Core functionality may be impaired.")
        return 1

    print("\n[OK] All health checks passed!")
    return 0


def print_result_pretty(res: EvalResult, output_format: str = "human", show_tree: bool = False) -> None:
    """Print result in specified format.

    Args:
        res: Result of a calculation
        output_format: "json" or "human"
        show_tree: Also print the parsed tree (human format)
    """
    if output_format == "json":
        data: dict[str, Any] = res.to_dict()
        if not show_tree:
            data.pop("tree", None)
        print(json.dumps(data))
        return
    if show_tree and res.tree is not None:
        print(f"Tree: {res.tree}")
    print(res.output)


def print_help_text() -> None:
    print(
        """SheetCalc: spreadsheet style calculator

Enter an expression to evaluate it, for example:
  1 + 2 * 3
  (-20 * 1.8) / 2
  2 ^ 0.5
  IF(1, ROUND(SIN(5), 2), 0)

Operators:  +  -  *  /  ^   (^ binds tighter than * and /, which bind
            tighter than + and -; equal operators group left to right)
Functions:  SIN(x), IF(condition, then, else), ROUND(value, digits)

Errors:
  #SYNTAXERROR   the input is not a valid expression
  #DIV0          division by zero
  #ERROR(msg)    any other arithmetic failure

Commands:
  scale [N]      show or set the number of fractional digits
  tree EXPR      show how EXPR is grouped
  functions      list the available functions
  help           show this text
  quit, exit     leave the calculator"""
    )


def _handle_command(calculator: SyntaxTreeCalculator, raw: str) -> bool:
    """Run a REPL command. Returns False if ``raw`` is not a command."""
    command, _, argument = raw.partition(" ")
    command = command.lower()
    argument = argument.strip()
    if command not in REPL_COMMANDS or (command == "tree" and not argument):
        return False
    if command == "help":
        print_help_text()
    elif command == "functions":
        for declaration in calculator.functions:
            print(f"{declaration.name.upper()} ({declaration.arity} argument(s))")
    elif command == "scale":
        if not argument:
            print(f"Scale: {calculator.scale}")
            return True
        try:
            calculator.scale = int(argument)
        except ValueError:
            print(f"Error: invalid scale {argument!r}")
            return True
        print(f"Scale set to {calculator.scale}")
    elif command == "tree":
        try:
            tree = calculator.parse(argument)
        except ParseError as e:
            print(f"Error: {e}")
            return True
        print("" if tree is None else str(tree))
    return True


def repl_loop(calculator: SyntaxTreeCalculator, output_format: str = "human", show_tree: bool = False) -> None:
    """Interactive REPL loop."""
    try:
        import readline  # noqa: F401
    except (ImportError, ModuleNotFoundError):
        # readline not available on Windows - that's fine
        pass

    print("SheetCalc: type 'help' for commands, 'quit' to exit.")
    while True:
        try:
            raw = input(">>> ").strip()
        except (EOFError, KeyboardInterrupt):
            print("\nGoodbye.")
            break
        if not raw:
            continue
        if raw.lower() in ("quit", "exit"):
            print("Goodbye.")
            break
        if _handle_command(calculator, raw):
            continue
        print_result_pretty(calculator.evaluate(raw), output_format, show_tree)


def main_entry(argv: list[str] | None = None) -> int:
    """
    Main entry point for SheetCalc CLI.

    Args:
        argv: Optional command-line arguments (defaults to sys.argv)

    Returns:
        Exit code (0 for success, non-zero for errors)
    """
    parser = argparse.ArgumentParser(prog="sheetcalc")
    parser.add_argument(
        "-e",
        "--eval",
        type=str,
        help="Evaluate one expression and exit (non-interactive)",
        dest="eval_expr",
    )
    parser.add_argument(
        "--format",
        type=str,
        choices=["json", "human"],
        default="human",
        help="Output format: json (machine-readable) or human (human-readable)",
    )
    parser.add_argument(
        "-s",
        "--scale",
        type=int,
        help=f"Maximum fractional digits for inexact results (default: {DEFAULT_SCALE})",
    )
    parser.add_argument(
        "--strict",
        action="store_true",
        help="Only accept unsigned integers, parentheses and operators",
    )
    parser.add_argument(
        "--tree", action="store_true", help="Also print the parsed expression tree"
    )
    parser.add_argument(
        "-v", "--version", action="store_true", help="Show program version"
    )
    parser.add_argument(
        "--log-level",
        type=str,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default=LOG_LEVEL.upper(),
        help="Set logging level",
    )
    parser.add_argument("--log-file", type=str, help="Write logs to file")
    parser.add_argument(
        "--health-check",
        action="store_true",
        help="Run health check and verify core operations",
    )
    args = parser.parse_args(argv)

    setup_logging(level=args.log_level, log_file=args.log_file)

    if args.version:
        print(VERSION)
        return 0
    if args.health_check:
        return _health_check()

    if args.scale is not None and args.scale < 0:
        parser.error("--scale must be a non-negative integer")
    calculator = create_calculator(args.scale, strict=args.strict)
    logger.debug("calculator ready (scale=%d, strict=%s)", calculator.scale, calculator.strict)

    if args.eval_expr is not None:
        expr = args.eval_expr.strip()
        # Remove ">>>" prompt if present
        if expr.startswith(">>>"):
            expr = expr[3:].strip()
        result = calculator.evaluate(expr)
        print_result_pretty(result, args.format, args.tree)
        return 0 if result.ok else 1

    repl_loop(calculator, args.format, args.tree)
    return 0


if __name__ == "__main__":
    import sys

    sys.exit(main_entry())
