"""Decimal arithmetic helpers.

Addition, subtraction and multiplication are exact. Division and
exponentiation with a negative exponent round half-up to ``scale``
fractional digits. Results computed through floats are converted back
using their exact binary value and rounded to ``scale`` digits only when
they carry more fractional digits than that.
"""

from __future__ import annotations

import math
from decimal import (
    MAX_EMAX,
    MAX_PREC,
    MIN_EMIN,
    ROUND_HALF_UP,
    Context,
    Decimal,
    DivisionByZero,
    InvalidOperation,
    Overflow,
    localcontext,
)
from fractions import Fraction

from .config import DIV0_TOKEN, MAX_EXACT_EXPONENT, MAX_RESULT_DIGITS
from .types import EvaluationError

# Large enough that +, - and * never round
EXACT_CONTEXT = Context(
    prec=MAX_PREC,
    rounding=ROUND_HALF_UP,
    Emax=MAX_EMAX,
    Emin=MIN_EMIN,
    traps=[InvalidOperation, DivisionByZero, Overflow],
)

NEGATIVE_ONE = Decimal(-1)


def add(a: Decimal, b: Decimal) -> Decimal:
    with localcontext(EXACT_CONTEXT):
        return a + b


def subtract(a: Decimal, b: Decimal) -> Decimal:
    with localcontext(EXACT_CONTEXT):
        return a - b


def multiply(a: Decimal, b: Decimal) -> Decimal:
    with localcontext(EXACT_CONTEXT):
        return a * b


def strip_trailing_zeros(value: Decimal) -> Decimal:
    """Remove trailing fractional zeros (``1.500`` -> ``1.5``, ``100`` -> ``1E+2``)."""
    return value.normalize(context=EXACT_CONTEXT)


def quantizer(places: int) -> Decimal:
    """Return the exponent template for ``places`` fractional digits."""
    return Decimal((0, (1,), -places))


def round_half_up(value: Decimal, places: int) -> Decimal:
    """Round to ``places`` fractional digits without stripping zeros."""
    return value.quantize(quantizer(places), rounding=ROUND_HALF_UP, context=EXACT_CONTEXT)


def _round_fraction(value: Fraction, scale: int) -> Decimal:
    scaled = value * Fraction(10) ** scale
    quotient, remainder = divmod(abs(scaled.numerator), scaled.denominator)
    if remainder * 2 >= scaled.denominator:
        quotient += 1
    if value < 0:
        quotient = -quotient
    return Decimal(quotient).scaleb(-scale, context=EXACT_CONTEXT)


def divide(dividend: Decimal, divisor: Decimal, scale: int) -> Decimal:
    """Divide to ``scale`` fractional digits (half-up), stripping trailing zeros.

    Raises:
        EvaluationError: ``#DIV0`` when the divisor is zero
    """
    if divisor.is_zero():
        raise EvaluationError(DIV0_TOKEN, "DIV0")
    quotient = Fraction(dividend) / Fraction(divisor)
    return strip_trailing_zeros(_round_fraction(quotient, scale))


def integral_value(value: Decimal, limit: int) -> int | None:
    """Return ``value`` as an int if it is integral and ``abs(value) <= limit``."""
    if not value.is_finite():
        return None
    if not value.is_zero() and value.adjusted() > len(str(limit)):
        return None
    if value != value.to_integral_value():
        return None
    result = int(value)
    if abs(result) > limit:
        return None
    return result


def estimated_power_digits(base: Decimal, exponent: int) -> int:
    """Upper estimate of the digits needed to write ``base ** exponent`` out in full."""
    _, digits, base_exponent = base.as_tuple()
    return (len(digits) + abs(base_exponent)) * abs(exponent)


def _integer_power(base: Decimal, exponent: int) -> Decimal:
    sign, digits, base_exponent = base.as_tuple()
    coefficient = 0
    for digit in digits:
        coefficient = coefficient * 10 + digit
    result = Decimal(coefficient**exponent).scaleb(
        base_exponent * exponent, context=EXACT_CONTEXT
    )
    if sign and exponent % 2 == 1:
        return result.copy_negate()
    return result


def from_float(value: float, scale: int) -> Decimal:
    """Convert a float result to a Decimal bounded to ``scale`` fractional digits."""
    if math.isnan(value) or math.isinf(value):
        raise EvaluationError("Infinite or NaN", "MATH_ERROR")
    result = strip_trailing_zeros(Decimal(value))
    if -result.as_tuple().exponent > scale:
        return round_half_up(result, scale)
    return result


def power(base: Decimal, exponent: Decimal, scale: int) -> Decimal:
    """Raise ``base`` to ``exponent``.

    Integral exponents are computed exactly (negative ones as a rounded
    reciprocal) unless the result would exceed ``MAX_RESULT_DIGITS``;
    anything else goes through ``math.pow``.
    """
    integral = integral_value(exponent, MAX_EXACT_EXPONENT)
    if integral is not None and estimated_power_digits(base, integral) <= MAX_RESULT_DIGITS:
        if integral >= 0:
            return _integer_power(base, integral)
        if base.is_zero():
            raise EvaluationError(DIV0_TOKEN, "DIV0")
        return divide(Decimal(1), _integer_power(base, -integral), scale)
    try:
        result = math.pow(float(base), float(exponent))
    except (OverflowError, ValueError) as e:
        raise EvaluationError(str(e), "MATH_ERROR") from e
    # operands beyond the float range convert to inf without raising
    if math.isinf(result):
        raise EvaluationError("math range error", "MATH_ERROR")
    return from_float(result, scale)


def to_plain_string(value: Decimal) -> str:
    """Render without scientific notation; negative zero renders as ``0``."""
    if value.is_zero():
        value = value.copy_abs()
    return format(value, "f")
