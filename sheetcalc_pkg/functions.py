"""Function registry and the built-in spreadsheet functions.

A function receives its arguments as unevaluated ``LValue`` nodes followed
by the rounding scale, and decides itself which arguments to evaluate.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from decimal import Decimal
from typing import Callable, Iterator

from .config import FUNCTION_NAME_RE, MAX_ROUNDING_DIGITS
from .logging_config import get_logger
from .numeric import from_float, integral_value, round_half_up
from .tree import BinaryFunction, FunctionCall, LValue, TertiaryFunction, UnaryFunction
from .types import EvaluationError

logger = get_logger("functions")

NODE_TYPES: dict[int, type[FunctionCall]] = {
    1: UnaryFunction,
    2: BinaryFunction,
    3: TertiaryFunction,
}


@dataclass(frozen=True)
class FunctionDeclaration:
    name: str
    arity: int
    function: Callable[..., Decimal]

    def bind(self, arguments: list[LValue]) -> FunctionCall:
        """Create the tree node calling this function with ``arguments``."""
        if len(arguments) != self.arity:
            raise ValueError(
                f"{self.name} expects {self.arity} arguments, got {len(arguments)}"
            )
        return NODE_TYPES[self.arity](self.name, self.function, *arguments)


class FunctionRegistry:
    """Case-insensitive mapping from function name to declaration."""

    def __init__(self) -> None:
        self._declarations: dict[str, FunctionDeclaration] = {}

    def register(self, name: str, arity: int, function: Callable[..., Decimal]) -> None:
        """Register ``function``, replacing any declaration with the same name.

        Raises:
            ValueError: If the name cannot be written as an identifier or the
                arity is not 1, 2 or 3
        """
        if not isinstance(name, str) or not FUNCTION_NAME_RE.fullmatch(name):
            raise ValueError(f"Invalid function name: {name!r}")
        if arity not in NODE_TYPES:
            raise ValueError(f"Unsupported arity {arity!r} for {name}; expected 1, 2 or 3")
        if not callable(function):
            raise ValueError(f"Function {name} is not callable")
        key = name.lower()
        if key in self._declarations:
            logger.debug("replacing function %s", name)
        self._declarations[key] = FunctionDeclaration(name, arity, function)

    def lookup(self, name: str) -> FunctionDeclaration | None:
        return self._declarations.get(name.lower())

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and name.lower() in self._declarations

    def __iter__(self) -> Iterator[FunctionDeclaration]:
        return iter(self._declarations.values())

    def __len__(self) -> int:
        return len(self._declarations)


def sin(value: LValue, scale: int) -> Decimal:
    """Sine of the argument (radians), computed in floating point."""
    v = value.evaluate(scale)
    return from_float(math.sin(float(v)), scale)


def if_(
    condition: LValue, when_not_zero: LValue, when_zero: LValue, scale: int
) -> Decimal:
    """Evaluate the condition, then only the selected branch."""
    if condition.evaluate(scale).is_zero():
        return when_zero.evaluate(scale)
    return when_not_zero.evaluate(scale)


def round_(value: LValue, precision: LValue, scale: int) -> Decimal:
    """Round half-up to the number of fractional digits given by ``precision``."""
    v = value.evaluate(scale)
    places = integral_value(precision.evaluate(0), MAX_ROUNDING_DIGITS)
    if places is None:
        raise EvaluationError("Invalid rounding precision", "INVALID_PRECISION")
    return round_half_up(v, places)


BUILTIN_FUNCTIONS: tuple[tuple[str, int, Callable[..., Decimal]], ...] = (
    ("sin", 1, sin),
    ("if", 3, if_),
    ("round", 2, round_),
)


def register_builtins(registry: FunctionRegistry) -> FunctionRegistry:
    for name, arity, function in BUILTIN_FUNCTIONS:
        registry.register(name, arity, function)
    return registry
