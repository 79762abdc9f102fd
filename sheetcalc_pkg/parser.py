"""Recursive-descent parser building ``LValue`` trees.

The grammar is driven by a two-state machine: a value (number, function
call, opening parenthesis, sign) is only accepted while a value is
expected, an operator or closing parenthesis only after a value. Any other
combination is a syntax error.
"""

from __future__ import annotations

from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import Iterator

from .config import (
    MAX_INPUT_LENGTH,
    MAX_LITERAL_EXPONENT,
    MAX_NESTING_DEPTH,
    STRICT_NUMBER_RE,
)
from .functions import FunctionDeclaration, FunctionRegistry
from .logging_config import get_logger
from .numeric import NEGATIVE_ONE, multiply
from .operators import Operator
from .tokenizer import Token, TokenKind, tokenize
from .tree import Constant, LValue, Term, negated
from .types import ParseError

logger = get_logger("parser")

SIGNS = {"+": Decimal(1), "-": NEGATIVE_ONE}


class ParseState(Enum):
    EXPECT_NUMBER = "number"
    EXPECT_OPERATOR = "operator"

    def ensure(self, expected: "ParseState", token: Token) -> None:
        if self is not expected:
            raise ParseError(
                f"Expected {expected.value}, but received {token} at position {token.position}",
                "UNEXPECTED_TOKEN",
            )


class Parser:
    """Parse expressions against a function registry.

    The parser holds no per-call state, so one instance can parse from
    several threads as long as the registry is not modified meanwhile.

    Args:
        functions: Registry consulted for identifiers
        strict: Only accept unsigned integers, parentheses and operators
        max_depth: Maximum nesting of parentheses and function calls
    """

    def __init__(
        self,
        functions: FunctionRegistry | None = None,
        strict: bool = False,
        max_depth: int = MAX_NESTING_DEPTH,
    ) -> None:
        self.functions = functions if functions is not None else FunctionRegistry()
        self.strict = strict
        self.max_depth = max_depth

    def parse(self, text: str) -> LValue | None:
        """Parse ``text`` into an initialized tree.

        Returns:
            The tree, or None if the input contains no tokens at all

        Raises:
            ParseError: If the input is not a valid expression
        """
        tree = self.parse_raw(text)
        if tree is None:
            return None
        tree = tree.initialize()
        logger.debug("parsing success: %s", tree)
        return tree

    def parse_raw(self, text: str) -> Term | None:
        """Parse ``text`` without precedence restructuring.

        The result renders back to the structure of the input.
        """
        if len(text) > MAX_INPUT_LENGTH:
            raise ParseError(
                f"Input too long (max {MAX_INPUT_LENGTH} characters)", "TOO_LONG"
            )
        tokens = tokenize(text, strict=self.strict)
        first = next(tokens)
        if first.kind is TokenKind.END:
            logger.debug("parsing finished; empty input")
            return None
        try:
            term, _ = self._parse_term(tokens, 0, frozenset(), first)
        except ParseError as e:
            logger.debug("parsing failed; %s", e)
            raise
        except RecursionError as e:
            logger.debug("parsing failed; recursion limit reached")
            raise ParseError("Expression too deeply nested", "TOO_DEEP") from e
        return term

    def _parse_term(
        self,
        tokens: Iterator[Token],
        depth: int,
        closers: frozenset[str],
        first: Token | None = None,
    ) -> tuple[Term, str]:
        """Parse operands and operators until a closer or the end of input.

        Args:
            tokens: Token stream positioned after ``first``
            depth: Current nesting depth
            closers: Symbols that end this term (empty at top level)
            first: Already consumed token to start with

        Returns:
            The term and the closing symbol ("" at end of input)
        """
        if depth > self.max_depth:
            raise ParseError(
                f"Expression too deeply nested (>{self.max_depth} levels)", "TOO_DEEP"
            )
        head: LValue | None = None
        pairs: list[tuple[Operator, LValue]] = []
        pending: Operator | None = None
        sign = Decimal(1)
        state = ParseState.EXPECT_NUMBER

        token = first if first is not None else next(tokens)
        while token.kind is not TokenKind.END:
            operand: LValue | None = None
            if token.is_word:
                state.ensure(ParseState.EXPECT_NUMBER, token)
                operand = self._parse_operand(tokens, token, sign, depth)
            elif state is ParseState.EXPECT_OPERATOR:
                if token.text in closers:
                    logger.debug("sub-term parsing success; closed by %r", token.text)
                    return Term(head, tuple(pairs)), token.text
                pending = Operator.from_symbol(token.text)
                state = ParseState.EXPECT_NUMBER
            elif token.is_symbol("("):
                group, _ = self._parse_term(tokens, depth + 1, frozenset(")"))
                operand = group if sign == 1 else negated(group)
            elif token.text in SIGNS and not self.strict:
                sign = multiply(sign, SIGNS[token.text])
            else:
                raise ParseError(
                    f"Unexpected symbol {token} at position {token.position}",
                    "UNEXPECTED_TOKEN",
                )

            if operand is not None:
                if head is None:
                    head = operand
                else:
                    pairs.append((pending, operand))
                sign = Decimal(1)
                state = ParseState.EXPECT_OPERATOR
            token = next(tokens)

        if closers:
            raise ParseError("Missing closing parenthesis", "MISSING_PARENTHESIS")
        if head is None:
            raise ParseError("Empty expression", "EMPTY")
        if state is ParseState.EXPECT_NUMBER:
            raise ParseError("Expression ends with an operator", "TRAILING_OPERATOR")
        return Term(head, tuple(pairs)), ""

    def _parse_operand(
        self, tokens: Iterator[Token], token: Token, sign: Decimal, depth: int
    ) -> LValue:
        if token.kind is TokenKind.IDENTIFIER:
            declaration = self.functions.lookup(token.text)
            if declaration is None:
                raise ParseError(f"Unknown function {token.text!r}", "UNKNOWN_FUNCTION")
            call = self._parse_call(tokens, declaration, depth + 1)
            return call if sign == 1 else negated(call)
        return Constant(multiply(self._parse_number(token), sign))

    def _parse_number(self, token: Token) -> Decimal:
        if self.strict and not STRICT_NUMBER_RE.fullmatch(token.text):
            raise ParseError(f"Invalid number {token}", "INVALID_NUMBER")
        try:
            value = Decimal(token.text)
        except InvalidOperation as e:
            raise ParseError(f"Invalid number {token}", "INVALID_NUMBER") from e
        if not value.is_finite():
            raise ParseError(f"Invalid number {token}", "INVALID_NUMBER")
        if (
            abs(value.adjusted()) > MAX_LITERAL_EXPONENT
            or abs(value.as_tuple().exponent) > MAX_LITERAL_EXPONENT
        ):
            raise ParseError(f"Number out of range {token}", "INVALID_NUMBER")
        return value

    def _parse_call(
        self, tokens: Iterator[Token], declaration: FunctionDeclaration, depth: int
    ) -> LValue:
        if not next(tokens).is_symbol("("):
            raise ParseError(
                f"Missing opening parenthesis after {declaration.name}",
                "MISSING_PARENTHESIS",
            )
        arguments: list[LValue] = []
        for index in range(declaration.arity):
            expected = ")" if index == declaration.arity - 1 else ","
            argument, closer = self._parse_term(tokens, depth, frozenset(",)"))
            if closer != expected:
                raise ParseError(
                    f"{declaration.name} expects {declaration.arity} argument(s)",
                    "ARITY_MISMATCH",
                )
            # a lone operand needs no grouping of its own
            arguments.append(argument.head if not argument.pairs else argument)
        return declaration.bind(arguments)
