"""Public API for SheetCalc - returns structured objects without side effects."""

from __future__ import annotations

from .calculator import SyntaxTreeCalculator
from .config import DEFAULT_SCALE
from .functions import register_builtins
from .types import EvalResult, ParseError


def create_calculator(scale: int | None = None, strict: bool = False) -> SyntaxTreeCalculator:
    """Create a calculator with the built-in functions SIN, IF and ROUND.

    Args:
        scale: Maximum fractional digits for inexact results (default: DEFAULT_SCALE)
        strict: Only accept unsigned integers, parentheses and operators

    Returns:
        A ready to use SyntaxTreeCalculator
    """
    calculator = SyntaxTreeCalculator(
        scale=DEFAULT_SCALE if scale is None else scale, strict=strict
    )
    register_builtins(calculator.functions)
    return calculator


def calculate(expression: str | None, scale: int | None = None) -> str:
    """Calculate an expression and return the result or an error token.

    Example:
        >>> from sheetcalc_pkg.api import calculate
        >>> calculate("1 + 2 * 3")
        '7'
        >>> calculate("10 / 3", scale=3)
        '3.333'
        >>> calculate("1 / 0")
        '#DIV0'
    """
    return create_calculator(scale).calculate(expression)


def evaluate(expression: str | None, scale: int | None = None) -> EvalResult:
    """Calculate an expression and return an EvalResult.

    Example:
        >>> from sheetcalc_pkg.api import evaluate
        >>> result = evaluate("1 + 2 * 3")
        >>> print(result.result)
        7
        >>> print(result.tree)
        (1 + {2 * 3})
    """
    return create_calculator(scale).evaluate(expression)


def validate_expression(expression: str) -> tuple[bool, str | None]:
    """Validate an expression without evaluating it.

    Returns:
        Tuple of (is_valid, error_message)

    Example:
        >>> from sheetcalc_pkg.api import validate_expression
        >>> validate_expression("2 + 2")
        (True, None)
        >>> validate_expression("2 +")
        (False, 'Expression ends with an operator')
    """
    try:
        create_calculator().parse(expression)
        return True, None
    except ParseError as e:
        return False, str(e)


def render_tree(expression: str, initialized: bool = True) -> str | None:
    """Render the parsed tree of an expression.

    Args:
        expression: Expression to parse
        initialized: Apply precedence restructuring before rendering

    Returns:
        The rendering, or None for blank input

    Raises:
        ParseError: If the expression is not valid

    Example:
        >>> from sheetcalc_pkg.api import render_tree
        >>> render_tree("1 + 2 * 3")
        '(1 + {2 * 3})'
        >>> render_tree("1 + 2 * 3", initialized=False)
        '(1 + 2 * 3)'
    """
    calculator = create_calculator()
    if initialized:
        tree = calculator.parse(expression)
    elif expression is None or not expression.strip():
        tree = None
    else:
        tree = calculator.parser.parse_raw(expression)
    return None if tree is None else str(tree)
