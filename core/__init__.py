"""
Core package: configuration, schema enums, numeric primitives, errors, validation
and logging setup. No calculator logic lives here.
"""

from .config import DEFAULT_CONFIG, EngineConfig
from .errors import CalculationOutcome, InvalidInput, attempt
from .logconfig import configure_logging, get_logger
from .schema import ASSET_CLASSES, InvestmentGoal, RiskTolerance
from .utils import (
    annuity_future_value,
    compound_growth,
    level_payment,
    periodic_rate,
    quantize_money,
)
from .validation import ValidationResult, build_input

__all__ = [
    "DEFAULT_CONFIG",
    "EngineConfig",
    "CalculationOutcome",
    "InvalidInput",
    "attempt",
    "configure_logging",
    "get_logger",
    "ASSET_CLASSES",
    "InvestmentGoal",
    "RiskTolerance",
    "annuity_future_value",
    "compound_growth",
    "level_payment",
    "periodic_rate",
    "quantize_money",
    "ValidationResult",
    "build_input",
]
