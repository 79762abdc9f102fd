"""Tests for built-in functions and user-registered functions."""

import unittest
from decimal import Decimal

from sheetcalc_pkg.api import create_calculator
from sheetcalc_pkg.functions import FunctionRegistry, register_builtins
from sheetcalc_pkg.tree import BinaryFunction, TertiaryFunction, UnaryFunction
from sheetcalc_pkg.types import EvaluationError


class TestBuiltins(unittest.TestCase):
    """Test SIN, IF and ROUND."""

    def setUp(self):
        self.calculator = create_calculator()

    def test_sin(self):
        self.assertEqual(self.calculator.calculate("SIN(1)"), "0.8414709848")
        self.assertEqual(self.calculator.calculate("SIN(0)"), "0")

    def test_sin_respects_scale(self):
        self.calculator.scale = 3
        self.assertEqual(self.calculator.calculate("SIN(1)"), "0.841")

    def test_if_selects_branch(self):
        self.assertEqual(self.calculator.calculate("IF(1, 2, 3)"), "2")
        self.assertEqual(self.calculator.calculate("IF(0, 2, 3)"), "3")
        self.assertEqual(self.calculator.calculate("IF(0.0, 1, 2)"), "2")
        self.assertEqual(self.calculator.calculate("IF(-0.5, 1, 2)"), "1")

    def test_if_only_evaluates_selected_branch(self):
        self.assertEqual(self.calculator.calculate("IF(0, 1/0, 5)"), "5")
        self.assertEqual(self.calculator.calculate("IF(1, 5, 1/0)"), "5")
        self.assertEqual(self.calculator.calculate("IF(1, 1/0, 5)"), "#DIV0")

    def test_round(self):
        self.assertEqual(self.calculator.calculate("ROUND(10 / 3, 1 + 1)"), "3.33")
        self.assertEqual(self.calculator.calculate("ROUND(2.5, 0)"), "3")
        self.assertEqual(self.calculator.calculate("ROUND(-2.5, 0)"), "-3")
        self.assertEqual(self.calculator.calculate("ROUND(1.5, 3)"), "1.500")

    def test_round_negative_precision(self):
        self.assertEqual(self.calculator.calculate("ROUND(1234, -2)"), "1200")

    def test_round_invalid_precision(self):
        self.assertEqual(
            self.calculator.calculate("ROUND(1, 0.5)"),
            "#ERROR(Invalid rounding precision)",
        )
        self.assertEqual(
            self.calculator.calculate("ROUND(1, 100000)"),
            "#ERROR(Invalid rounding precision)",
        )

    def test_nested_calls(self):
        self.assertEqual(
            self.calculator.calculate("IF(1, RounD(Sin(5), 2), 0)"), "-0.96"
        )
        self.assertEqual(self.calculator.calculate("2 * ROUND(SIN(1), 1) + 1"), "2.6")


class TestRegistry(unittest.TestCase):
    """Test the function registry."""

    def test_builtins(self):
        registry = register_builtins(FunctionRegistry())
        self.assertEqual(len(registry), 3)
        self.assertEqual({d.name for d in registry}, {"sin", "if", "round"})
        self.assertIn("SIN", registry)
        self.assertNotIn("cos", registry)
        self.assertNotIn(1, registry)

    def test_bind_creates_node_for_arity(self):
        registry = register_builtins(FunctionRegistry())
        calculator = create_calculator()
        one = calculator.parse("1").head
        self.assertIsInstance(registry.lookup("sin").bind([one]), UnaryFunction)
        self.assertIsInstance(registry.lookup("round").bind([one, one]), BinaryFunction)
        self.assertIsInstance(
            registry.lookup("if").bind([one, one, one]), TertiaryFunction
        )
        with self.assertRaises(ValueError):
            registry.lookup("sin").bind([one, one])

    def test_invalid_registrations(self):
        registry = FunctionRegistry()
        with self.assertRaises(ValueError):
            registry.register("f", 4, lambda a, b, c, d, scale: a)
        with self.assertRaises(ValueError):
            registry.register("f", 0, lambda scale: Decimal(0))
        with self.assertRaises(ValueError):
            registry.register("1abc", 1, lambda a, scale: a.evaluate(scale))
        with self.assertRaises(ValueError):
            registry.register("my_func", 1, lambda a, scale: a.evaluate(scale))
        with self.assertRaises(ValueError):
            registry.register("sin\n", 1, lambda a, scale: a.evaluate(scale))
        with self.assertRaises(ValueError):
            registry.register("f", 1, "not callable")
        self.assertEqual(len(registry), 0)

    def test_registration_replaces_case_insensitively(self):
        registry = FunctionRegistry()
        registry.register("Twice", 1, lambda a, scale: a.evaluate(scale) * 2)
        registry.register("TWICE", 1, lambda a, scale: a.evaluate(scale) * 3)
        self.assertEqual(len(registry), 1)
        self.assertEqual(registry.lookup("twice").name, "TWICE")


class TestUserFunctions(unittest.TestCase):
    """Test calling user-registered functions through the calculator."""

    def setUp(self):
        self.calculator = create_calculator()

    def test_custom_function(self):
        self.calculator.register(
            "max", 2, lambda a, b, scale: max(a.evaluate(scale), b.evaluate(scale))
        )
        self.assertEqual(self.calculator.calculate("MAX(1, 2 * 3) + 1"), "7")
        self.assertEqual(self.calculator.calculate("max(-1, -2)"), "-1")

    def test_register_is_chainable(self):
        result = self.calculator.register("one", 1, lambda a, scale: Decimal(1))
        self.assertIs(result, self.calculator)

    def test_override_builtin(self):
        self.calculator.register("sin", 1, lambda a, scale: Decimal(42))
        self.assertEqual(self.calculator.calculate("SIN(1)"), "42")

    def test_int_result_is_accepted(self):
        self.calculator.register("seven", 1, lambda a, scale: 7)
        self.assertEqual(self.calculator.calculate("SEVEN(0) * 2"), "14")

    def test_function_raising_arithmetic_error(self):
        self.calculator.register("fail", 1, lambda a, scale: 1 / 0)
        self.assertEqual(
            self.calculator.calculate("FAIL(1)"), "#ERROR(division by zero)"
        )

    def test_function_returning_float(self):
        self.calculator.register("half", 1, lambda a, scale: 0.5)
        self.assertEqual(
            self.calculator.calculate("HALF(1)"), "#ERROR(Function half returned float)"
        )

    def test_function_raising_error_token(self):
        def not_available(a, scale):
            raise EvaluationError("#NA")

        self.calculator.register("na", 1, not_available)
        self.assertEqual(self.calculator.calculate("NA(1) + 1"), "#NA")

    def test_function_raising_unexpected_error(self):
        def broken(a, scale):
            raise KeyError("missing")

        self.calculator.register("broken", 1, broken)
        self.assertEqual(self.calculator.calculate("BROKEN(1)"), "#ERROR('missing')")


if __name__ == "__main__":
    unittest.main()
