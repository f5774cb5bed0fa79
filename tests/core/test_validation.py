"""Tests for input guards"""

from decimal import Decimal

import pytest
from pydantic import BaseModel, TypeAdapter, ValidationError

from core.errors import InvalidInput
from core.schema import RiskTolerance
from core.validation import ValidationResult, build_input, pydantic_violations


class _Sample(BaseModel):
    amount: Decimal
    risk: RiskTolerance


class TestValidationResult:
    """Test collect-then-raise behavior"""

    def test_valid_when_no_errors(self):
        check = ValidationResult("demo")
        check.require_positive("amount", Decimal("1"))
        check.require_non_negative("rate", Decimal("0"))
        assert check.is_valid
        check.raise_if_invalid()

    def test_collects_every_violation(self):
        check = ValidationResult("demo")
        check.require_positive("amount", Decimal("0"))
        check.require_non_negative("rate", Decimal("-1"))

        with pytest.raises(InvalidInput) as exc_info:
            check.raise_if_invalid()

        err = exc_info.value
        assert len(err.violations) == 2
        assert "amount must be positive" in err.violations[0]
        assert "rate must not be negative" in err.violations[1]
        assert str(err).startswith("demo: ")

    def test_warnings_do_not_block(self):
        check = ValidationResult("demo")
        check.warnings.append("odd but allowed")
        assert check.is_valid
        check.raise_if_invalid()

    def test_summary(self):
        check = ValidationResult("demo")
        assert check.summary() == "✓ All checks passed."
        check.errors.append("bad")
        check.warnings.append("hmm")
        text = check.summary()
        assert "ERRORS (1):" in text
        assert "✗ bad" in text
        assert "⚠ hmm" in text


class TestBuildInput:
    """Test conversion of pydantic failures"""

    def test_builds_model(self):
        model = build_input(_Sample, {"amount": "12.50", "risk": "moderate"})
        assert model.amount == Decimal("12.50")
        assert model.risk is RiskTolerance.MODERATE

    def test_bad_enum_and_number_reported_together(self):
        with pytest.raises(InvalidInput) as exc_info:
            build_input(_Sample, {"amount": "lots", "risk": "reckless"})
        err = exc_info.value
        assert len(err.violations) == 2
        assert any(v.startswith("amount:") for v in err.violations)
        assert any(v.startswith("risk:") for v in err.violations)
        assert err.context["calculator"] == "_Sample"

    def test_invalid_input_is_value_error(self):
        with pytest.raises(ValueError):
            build_input(_Sample, {})

    def test_type_adapter_uses_calculator_name(self):
        adapter = TypeAdapter(_Sample)
        assert build_input(adapter, {"amount": "1", "risk": "aggressive"}).amount == Decimal("1")
        with pytest.raises(InvalidInput) as exc_info:
            build_input(adapter, {"amount": "1", "risk": "reckless"}, calculator="sample")
        assert exc_info.value.context["calculator"] == "sample"
        assert exc_info.value.violations[0].startswith("risk:")

    def test_direct_construction_still_raises_pydantic_error(self):
        with pytest.raises(ValidationError) as exc_info:
            _Sample(amount=Decimal("1"), risk="reckless")
        assert pydantic_violations(exc_info.value, "_Sample")[0].startswith("risk:")
