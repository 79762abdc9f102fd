"""Binary operators with their symbols, precedence and decimal semantics."""

from __future__ import annotations

from decimal import Decimal
from enum import Enum

from . import numeric
from .types import ParseError


class Operator(Enum):
    """The fixed operator set. Higher precedence binds tighter."""

    PLUS = ("+", 0)
    MINUS = ("-", 0)
    MULTIPLICATION = ("*", 1)
    DIVISION = ("/", 1)
    POTENCY = ("^", 2)

    def __init__(self, symbol: str, precedence: int):
        self.symbol = symbol
        self.precedence = precedence

    @classmethod
    def from_symbol(cls, symbol: str) -> "Operator":
        """Look up an operator by its token.

        Raises:
            ParseError: If ``symbol`` is not an operator
        """
        for operator in cls:
            if operator.symbol == symbol:
                return operator
        raise ParseError(f"Invalid operator {symbol!r}", "INVALID_OPERATOR")

    def apply(self, a: Decimal, b: Decimal, scale: int) -> Decimal:
        """Apply the operator to two operands.

        Args:
            a: Left operand
            b: Right operand
            scale: Fractional digits kept for inexact results

        Raises:
            EvaluationError: On division by zero or float domain/range errors
        """
        if self is Operator.PLUS:
            return numeric.add(a, b)
        if self is Operator.MINUS:
            return numeric.subtract(a, b)
        if self is Operator.MULTIPLICATION:
            return numeric.multiply(a, b)
        if self is Operator.DIVISION:
            return numeric.divide(a, b, scale)
        return numeric.power(a, b, scale)

    def __str__(self) -> str:
        return self.symbol
