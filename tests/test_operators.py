"""Tests for operator semantics and the decimal helpers behind them."""

from decimal import Decimal

import pytest

from sheetcalc_pkg import numeric
from sheetcalc_pkg.operators import Operator
from sheetcalc_pkg.types import EvaluationError, ParseError


def D(value):
    return Decimal(value)


class TestOperatorTable:
    """Test symbols and precedence."""

    def test_symbols(self):
        assert [op.symbol for op in Operator] == ["+", "-", "*", "/", "^"]

    def test_precedence_tiers(self):
        assert Operator.PLUS.precedence == Operator.MINUS.precedence == 0
        assert Operator.MULTIPLICATION.precedence == Operator.DIVISION.precedence == 1
        assert Operator.POTENCY.precedence == 2

    def test_from_symbol(self):
        assert Operator.from_symbol("^") is Operator.POTENCY
        assert Operator.from_symbol("-") is Operator.MINUS

    def test_from_symbol_rejects_unknown(self):
        with pytest.raises(ParseError) as exc_info:
            Operator.from_symbol("%")
        assert exc_info.value.code == "INVALID_OPERATOR"


class TestExactOperators:
    """Addition, subtraction and multiplication never round."""

    def test_addition(self):
        assert Operator.PLUS.apply(D("1.5"), D("2.25"), 0) == D("3.75")

    def test_subtraction(self):
        assert Operator.MINUS.apply(D("0.3"), D("0.1"), 0) == D("0.2")

    def test_multiplication_keeps_all_digits(self):
        a = D("123456789012345678901234567890")
        result = Operator.MULTIPLICATION.apply(a, a, 2)
        assert result == D(123456789012345678901234567890**2)

    def test_long_addition(self):
        result = Operator.PLUS.apply(D("1E+40"), D("0.000000000000000000001"), 0)
        assert numeric.to_plain_string(result) == "1" + "0" * 40 + ".000000000000000000001"


class TestDivision:
    """Division rounds half-up to the scale and strips trailing zeros."""

    @pytest.mark.parametrize(
        "a, b, scale, expected",
        [
            ("10", "3", 3, "3.333"),
            ("2", "3", 3, "0.667"),
            ("1", "8", 2, "0.13"),
            ("-1", "8", 2, "-0.13"),
            ("8", "2", 10, "4"),
            ("100", "1", 10, "100"),
            ("1", "3", 0, "0"),
            ("-36.0", "2", 3, "-18"),
        ],
    )
    def test_divide(self, a, b, scale, expected):
        result = Operator.DIVISION.apply(D(a), D(b), scale)
        assert numeric.to_plain_string(result) == expected

    @pytest.mark.parametrize("divisor", ["0", "0.000", "-0"])
    def test_division_by_zero(self, divisor):
        with pytest.raises(EvaluationError) as exc_info:
            Operator.DIVISION.apply(D("1"), D(divisor), 10)
        assert exc_info.value.message == "#DIV0"
        assert exc_info.value.code == "DIV0"


class TestPotency:
    """Integral exponents are exact, others use floats."""

    @pytest.mark.parametrize(
        "a, b, scale, expected",
        [
            ("4", "2", 10, "16"),
            ("2", "10", 0, "1024"),
            ("-2", "3", 0, "-8"),
            ("-2", "2", 0, "4"),
            ("1.5", "2", 0, "2.25"),
            ("0", "0", 0, "1"),
            ("2", "2.0", 0, "4"),
            ("2", "-1", 10, "0.5"),
            ("3", "-1", 3, "0.333"),
            ("2", "0.5", 3, "1.414"),
            ("4", "0.5", 3, "2"),
        ],
    )
    def test_power(self, a, b, scale, expected):
        result = Operator.POTENCY.apply(D(a), D(b), scale)
        assert numeric.to_plain_string(result) == expected

    def test_large_exact_power(self):
        result = Operator.POTENCY.apply(D("2"), D("200"), 0)
        assert result == D(2**200)

    def test_zero_to_negative_power(self):
        with pytest.raises(EvaluationError) as exc_info:
            Operator.POTENCY.apply(D("0"), D("-1"), 10)
        assert exc_info.value.message == "#DIV0"

    def test_negative_base_fractional_exponent(self):
        with pytest.raises(EvaluationError) as exc_info:
            Operator.POTENCY.apply(D("-1"), D("0.5"), 10)
        assert exc_info.value.code == "MATH_ERROR"

    def test_float_overflow(self):
        with pytest.raises(EvaluationError) as exc_info:
            Operator.POTENCY.apply(D("10"), D("1000.5"), 10)
        assert exc_info.value.code == "MATH_ERROR"


class TestNumericHelpers:
    """Test conversions used by the evaluator."""

    def test_plain_string_has_no_exponent(self):
        assert numeric.to_plain_string(D("1E+5")) == "100000"
        assert numeric.to_plain_string(D("1.50")) == "1.50"

    def test_plain_string_negative_zero(self):
        assert numeric.to_plain_string(D("-0")) == "0"
        assert numeric.to_plain_string(D("-0.00")) == "0.00"

    def test_from_float_within_scale(self):
        assert numeric.from_float(0.5, 3) == D("0.5")
        assert numeric.from_float(2.0, 3) == D("2")

    def test_from_float_rounds_half_up(self):
        assert numeric.from_float(0.8414709848078965, 10) == D("0.8414709848")

    def test_from_float_rejects_non_finite(self):
        with pytest.raises(EvaluationError):
            numeric.from_float(float("inf"), 3)
        with pytest.raises(EvaluationError):
            numeric.from_float(float("nan"), 3)

    def test_integral_value(self):
        assert numeric.integral_value(D("3.0"), 10) == 3
        assert numeric.integral_value(D("-3"), 10) == -3
        assert numeric.integral_value(D("2.5"), 10) is None
        assert numeric.integral_value(D("11"), 10) is None
        assert numeric.integral_value(D("1E+30"), 10) is None
