"""Expression tree nodes.

The parser builds a tree of ``LValue`` nodes that mirrors the input: every
pair of parentheses becomes a ``Term`` and every operand keeps the order it
was written in. ``initialize()`` then returns a new tree in which each
``Term`` only chains operators of a single precedence tier, so evaluation
is a plain left-to-right fold.

``str(node)`` renders the tree back to text. Terms written by the user
render with ``( )``, groups introduced by precedence restructuring with
``{ }``.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from decimal import Decimal
from typing import Callable

from .numeric import to_plain_string
from .operators import Operator
from .types import EvaluationError


class LValue:
    """Base class of all evaluable nodes."""

    def evaluate(self, scale: int) -> Decimal:
        raise NotImplementedError

    def initialize(self) -> LValue:
        """Return the tree with precedence restructuring applied."""
        return self


@dataclass(frozen=True)
class Constant(LValue):
    value: Decimal

    def evaluate(self, scale: int) -> Decimal:
        return self.value

    def __str__(self) -> str:
        return to_plain_string(self.value)


@dataclass(frozen=True)
class Term(LValue):
    """A left-associative chain ``head op1 operand1 op2 operand2 ...``."""

    head: LValue
    pairs: tuple[tuple[Operator, LValue], ...] = ()
    synthetic: bool = False

    def evaluate(self, scale: int) -> Decimal:
        result = self.head.evaluate(scale)
        for operator, operand in self.pairs:
            result = operator.apply(result, operand.evaluate(scale), scale)
        return result

    def initialize(self) -> Term:
        grouped = self._group_by_precedence()
        return Term(
            grouped.head.initialize(),
            tuple((operator, operand.initialize()) for operator, operand in grouped.pairs),
            grouped.synthetic,
        )

    def _group_by_precedence(self) -> Term:
        """Keep the lowest tier at this level and fold higher-tier runs into synthetic terms.

        ``1 + 2 * 3 ^ 2 - 4`` becomes ``1 + {2 * 3 ^ 2} - 4``; the synthetic
        group is split again when it is initialized.
        """
        if not self.pairs:
            return self
        lowest = min(operator.precedence for operator, _ in self.pairs)
        if all(operator.precedence == lowest for operator, _ in self.pairs):
            return self

        groups: list[tuple[LValue, list[tuple[Operator, LValue]]]] = [(self.head, [])]
        lowest_operators: list[Operator] = []
        for operator, operand in self.pairs:
            if operator.precedence == lowest:
                lowest_operators.append(operator)
                groups.append((operand, []))
            else:
                groups[-1][1].append((operator, operand))

        operands = [
            Term(first, tuple(run), synthetic=True) if run else first
            for first, run in groups
        ]
        return Term(operands[0], tuple(zip(lowest_operators, operands[1:])), self.synthetic)

    def __str__(self) -> str:
        opening, closing = ("{", "}") if self.synthetic else ("(", ")")
        parts = [str(self.head)]
        for operator, operand in self.pairs:
            parts.append(f"{operator} {operand}")
        return opening + " ".join(parts) + closing


UnaryCallable = Callable[[LValue, int], Decimal]
BinaryCallable = Callable[[LValue, LValue, int], Decimal]
TertiaryCallable = Callable[[LValue, LValue, LValue, int], Decimal]


class FunctionCall(LValue):
    """Common behaviour of function nodes; arguments are passed unevaluated."""

    name: str

    @property
    def arguments(self) -> tuple[LValue, ...]:
        raise NotImplementedError

    def _checked(self, result: object) -> Decimal:
        if isinstance(result, Decimal):
            return result
        if isinstance(result, int) and not isinstance(result, bool):
            return Decimal(result)
        raise EvaluationError(
            f"Function {self.name} returned {type(result).__name__}", "INVALID_RESULT"
        )

    def __str__(self) -> str:
        return f"{self.name}({', '.join(str(argument) for argument in self.arguments)})"


@dataclass(frozen=True)
class UnaryFunction(FunctionCall):
    name: str
    function: UnaryCallable
    argument: LValue

    @property
    def arguments(self) -> tuple[LValue, ...]:
        return (self.argument,)

    def evaluate(self, scale: int) -> Decimal:
        return self._checked(self.function(self.argument, scale))

    def initialize(self) -> UnaryFunction:
        return replace(self, argument=self.argument.initialize())


@dataclass(frozen=True)
class BinaryFunction(FunctionCall):
    name: str
    function: BinaryCallable
    first: LValue
    second: LValue

    @property
    def arguments(self) -> tuple[LValue, ...]:
        return (self.first, self.second)

    def evaluate(self, scale: int) -> Decimal:
        return self._checked(self.function(self.first, self.second, scale))

    def initialize(self) -> BinaryFunction:
        return replace(
            self, first=self.first.initialize(), second=self.second.initialize()
        )


@dataclass(frozen=True)
class TertiaryFunction(FunctionCall):
    name: str
    function: TertiaryCallable
    first: LValue
    second: LValue
    third: LValue

    @property
    def arguments(self) -> tuple[LValue, ...]:
        return (self.first, self.second, self.third)

    def evaluate(self, scale: int) -> Decimal:
        return self._checked(self.function(self.first, self.second, self.third, scale))

    def initialize(self) -> TertiaryFunction:
        return replace(
            self,
            first=self.first.initialize(),
            second=self.second.initialize(),
            third=self.third.initialize(),
        )


def negated(node: LValue) -> Term:
    """Wrap ``node`` as ``(-1 * node)`` so the sign stays visible in the rendering."""
    return Term(Constant(Decimal(-1)), ((Operator.MULTIPLICATION, node),))
