"""
Input guards shared by the calculators.

Two layers:
- type correctness: pydantic input models; ``build_input`` turns their
  ValidationError into InvalidInput. Raw values (dicts from a form or a JSON
  body) should go through ``build_input``: calling a model class directly,
  e.g. ``AllocationProfile(risk_tolerance="reckless", ...)``, still raises
  pydantic's own ValidationError.
- semantic invariants: each calculator fills a ValidationResult (errors block,
  warnings are only logged) and calls ``raise_if_invalid`` once, so the caller
  sees every violated invariant at the same time.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any, List, Mapping, Optional, Type, TypeVar, Union

from pydantic import BaseModel, TypeAdapter, ValidationError

from .errors import InvalidInput

M = TypeVar("M", bound=BaseModel)


@dataclass
class ValidationResult:
    """Collects all validation warnings/errors for one calculator input."""
    calculator: str
    errors: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return len(self.errors) == 0

    def require_positive(self, name: str, value: Decimal) -> None:
        if value <= 0:
            self.errors.append(f"{name} must be positive, got {value}")

    def require_non_negative(self, name: str, value: Decimal) -> None:
        if value < 0:
            self.errors.append(f"{name} must not be negative, got {value}")

    def raise_if_invalid(self) -> None:
        if self.errors:
            raise InvalidInput.from_violations(self.calculator, self.errors)

    def summary(self) -> str:
        lines = []
        if self.errors:
            lines.append(f"ERRORS ({len(self.errors)}):")
            for e in self.errors:
                lines.append(f"  ✗ {e}")
        if self.warnings:
            lines.append(f"WARNINGS ({len(self.warnings)}):")
            for w in self.warnings:
                lines.append(f"  ⚠ {w}")
        if not lines:
            lines.append("✓ All checks passed.")
        return "\n".join(lines)


def pydantic_violations(exc: ValidationError, fallback: str) -> List[str]:
    """One "field: message" line per pydantic error."""
    return [
        f"{'.'.join(str(p) for p in err['loc']) or fallback}: {err['msg']}"
        for err in exc.errors()
    ]


def build_input(
    model: Union[Type[M], TypeAdapter],
    data: Mapping[str, Any],
    *,
    calculator: Optional[str] = None,
) -> Any:
    """
    Build a calculator input from raw values.

    ``model`` is an input model class or a TypeAdapter over a tagged union of
    them. Malformed numbers and unrecognized enum values come back as
    InvalidInput naming each offending field.
    """
    name = calculator or getattr(model, "__name__", "input")
    try:
        if isinstance(model, TypeAdapter):
            return model.validate_python(dict(data))
        return model.model_validate(dict(data))
    except ValidationError as exc:
        raise InvalidInput.from_violations(name, pydantic_violations(exc, name)) from exc
