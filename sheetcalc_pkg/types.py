"""Type definitions, error classes and result dataclasses for consistent API responses."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any


@dataclass
class EvalResult:
    """Result of calculating an expression."""

    ok: bool
    result: str | None = None
    error: str | None = None
    tree: str | None = None

    @property
    def output(self) -> str:
        """The string the calculator facade returns for this result."""
        if self.ok:
            return self.result or ""
        return self.error or ""

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        result_dict: dict[str, Any] = {"ok": self.ok}
        if self.result is not None:
            result_dict["result"] = self.result
        if self.error is not None:
            result_dict["error"] = self.error
        if self.tree is not None:
            result_dict["tree"] = self.tree
        return result_dict

    def __repr__(self) -> str:
        """Return string representation of the result."""
        if not self.ok:
            return f"EvalResult(ok=False, error={self.error!r})"
        parts = [f"ok={self.ok}"]
        if self.result is not None:
            parts.append(f"result={self.result!r}")
        if self.tree is not None:
            parts.append(f"tree={self.tree!r}")
        return f"EvalResult({', '.join(parts)})"


class ParseError(Exception):
    """Raised when the input does not follow the expression grammar."""

    def __init__(self, message: str, code: str = "PARSE_ERROR"):
        self.message = message
        self.code = code
        super().__init__(self.message)

    def __str__(self) -> str:
        return self.message


class EvaluationError(Exception):
    """Raised when a well-formed expression cannot be evaluated.

    A message starting with ``#`` is an error token (for example ``#DIV0``)
    and is reported verbatim by the calculator facade.
    """

    def __init__(self, message: str, code: str = "EVALUATION_ERROR"):
        self.message = message
        self.code = code
        super().__init__(self.message)

    @property
    def is_token(self) -> bool:
        return self.message.startswith("#")

    def __str__(self) -> str:
        return self.message
