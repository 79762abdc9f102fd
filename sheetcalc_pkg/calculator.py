"""Spreadsheet-style calculator facade.

``SyntaxTreeCalculator.calculate`` never raises: every failure is turned
into one of the error tokens ``#SYNTAXERROR``, ``#DIV0`` or
``#ERROR(message)``.
"""

from __future__ import annotations

from typing import Callable

from .config import (
    DEFAULT_SCALE,
    ERROR_TOKEN_TEMPLATE,
    MAX_NESTING_DEPTH,
    SYNTAX_ERROR_TOKEN,
)
from .functions import FunctionRegistry
from .logging_config import get_logger
from .numeric import to_plain_string
from .parser import Parser
from .tree import LValue
from .types import EvalResult, EvaluationError, ParseError

logger = get_logger("calculator")


def _validated_scale(scale: int) -> int:
    if isinstance(scale, bool) or not isinstance(scale, int) or scale < 0:
        raise ValueError(f"Scale must be a non-negative integer, got {scale!r}")
    return scale


class SyntaxTreeCalculator:
    """Calculator that parses input into an explicit expression tree.

    The tree mirrors the input and renders back to it, which makes it
    suitable for analyzing or rewriting what the user typed.

    Args:
        scale: Maximum fractional digits kept for inexact results
        strict: Only accept unsigned integers, parentheses and operators
        max_depth: Maximum nesting of parentheses and function calls

    Example:
        >>> calc = SyntaxTreeCalculator(scale=3)
        >>> calc.calculate("10 / 3")
        '3.333'
        >>> calc.calculate("1 / 0")
        '#DIV0'
    """

    def __init__(
        self,
        scale: int = DEFAULT_SCALE,
        strict: bool = False,
        max_depth: int = MAX_NESTING_DEPTH,
    ) -> None:
        self._scale = _validated_scale(scale)
        self.functions = FunctionRegistry()
        self.parser = Parser(self.functions, strict=strict, max_depth=max_depth)

    @property
    def scale(self) -> int:
        return self._scale

    @scale.setter
    def scale(self, scale: int) -> None:
        self._scale = _validated_scale(scale)

    @property
    def strict(self) -> bool:
        return self.parser.strict

    def with_scale(self, scale: int) -> SyntaxTreeCalculator:
        self.scale = scale
        return self

    def register(
        self, name: str, arity: int, function: Callable[..., object]
    ) -> SyntaxTreeCalculator:
        """Register a function of 1-3 unevaluated arguments plus the scale.

        Existing functions with the same (case-insensitive) name are replaced.
        """
        self.functions.register(name, arity, function)
        return self

    def parse(self, text: str | None) -> LValue | None:
        """Parse ``text`` into an initialized tree (None for blank input).

        Raises:
            ParseError: If the input is not a valid expression
        """
        if text is None or not text.strip():
            return None
        return self.parser.parse(text)

    def evaluate(self, text: str | None) -> EvalResult:
        """Calculate ``text`` and return a structured result."""
        if text is None or not text.strip():
            return EvalResult(ok=True, result="")

        try:
            tree = self.parser.parse(text)
        except ParseError as e:
            logger.debug("evaluate term %r fails with %s (%s)", text, SYNTAX_ERROR_TOKEN, e.code)
            return EvalResult(ok=False, error=SYNTAX_ERROR_TOKEN)
        if tree is None:
            return EvalResult(ok=True, result="")

        rendered: str | None = None
        try:
            rendered = str(tree)
            result = to_plain_string(tree.evaluate(self._scale))
        except EvaluationError as e:
            error = e.message if e.is_token else ERROR_TOKEN_TEMPLATE.format(e.message)
        except (ArithmeticError, ValueError) as e:
            error = ERROR_TOKEN_TEMPLATE.format(e)
        except Exception as e:
            # user-registered functions may fail in arbitrary ways
            logger.warning("evaluating %r failed unexpectedly", text, exc_info=True)
            error = ERROR_TOKEN_TEMPLATE.format(e)
        else:
            logger.debug("evaluate term %r yields %r", text, result)
            return EvalResult(ok=True, result=result, tree=rendered)

        logger.debug("evaluate term %r fails with %r", text, error)
        return EvalResult(ok=False, error=error, tree=rendered)

    def calculate(self, text: str | None) -> str:
        """Evaluate ``text`` and return the result or an error token.

        Returns:
            ``""`` for blank input, a plain decimal string on success,
            otherwise ``#SYNTAXERROR``, ``#DIV0`` or ``#ERROR(message)``
        """
        return self.evaluate(text).output
