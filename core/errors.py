"""
Error types shared by every calculator.

The engine performs no I/O, so there is a single failure kind: ``InvalidInput``.
It is deterministic (retrying with the same input fails the same way) and lists
every invariant the input violated.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Dict, Generic, List, Optional, TypeVar

T = TypeVar("T")


class InvalidInput(ValueError):
    """Input rejected by a calculator guard."""

    def __init__(
        self,
        message: str,
        violations: Optional[List[str]] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message)
        self.violations = violations or [message]
        self.context = context or {}

    @classmethod
    def from_violations(cls, calculator: str, violations: List[str]) -> "InvalidInput":
        joined = "; ".join(violations)
        return cls(
            f"{calculator}: {joined}",
            violations=list(violations),
            context={"calculator": calculator},
        )


@dataclass(frozen=True)
class CalculationOutcome(Generic[T]):
    """Result-or-description wrapper for callers that don't want exceptions."""

    result: Optional[T]
    error: Optional[str] = None
    violations: tuple = ()

    @property
    def ok(self) -> bool:
        return self.error is None


def attempt(fn: Callable[..., T], *args: Any, **kwargs: Any) -> CalculationOutcome[T]:
    """
    Run a calculator and fold ``InvalidInput`` into a null result.

    Only ``InvalidInput`` is caught; anything else is a bug and propagates.
    """
    try:
        return CalculationOutcome(result=fn(*args, **kwargs))
    except InvalidInput as exc:
        return CalculationOutcome(
            result=None,
            error=str(exc),
            violations=tuple(exc.violations),
        )
