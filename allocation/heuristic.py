"""
Asset-allocation heuristic.

Start from "100 minus age" in stocks (age in bonds, 5 in cash), then layer:
  1. risk-tolerance adjustment
  2. investment-goal adjustment
  3. time-horizon adjustment
  4. spread any deficit/surplus evenly over the four buckets
  5. clamp to [0, 100], round half-up, alternatives takes the residual

If clamping pushed stocks + bonds + cash above 100, alternatives goes to zero
and the excess comes off the largest bucket, so the target always sums to 100.

Build an AllocationProfile from raw values with ``core.validation.build_input``
so an unknown risk tolerance or goal comes back as InvalidInput.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import ROUND_FLOOR, Decimal
from typing import Dict

from pydantic import BaseModel, ConfigDict

from core.logconfig import get_logger
from core.schema import ASSET_CLASSES, InvestmentGoal, RiskTolerance
from core.utils import HUNDRED, ZERO
from core.validation import ValidationResult

log = get_logger(__name__)

HALF = Decimal("0.5")


class AllocationProfile(BaseModel):
    model_config = ConfigDict(frozen=True)

    age: int
    risk_tolerance: RiskTolerance
    goal: InvestmentGoal
    horizon_years: Decimal = ZERO


@dataclass(frozen=True)
class AllocationTarget:
    stocks_percent: int
    bonds_percent: int
    cash_percent: int
    alternatives_percent: int

    def as_dict(self) -> Dict[str, int]:
        return {
            "stocks": self.stocks_percent,
            "bonds": self.bonds_percent,
            "cash": self.cash_percent,
            "alternatives": self.alternatives_percent,
        }

    @property
    def total(self) -> int:
        return sum(self.as_dict().values())


@dataclass(frozen=True)
class RiskClassification:
    level: str
    # annual return band in percent, e.g. "6-8"
    expected_return: str


def _round_half_up(value: Decimal) -> int:
    return int((value + HALF).to_integral_value(rounding=ROUND_FLOOR))


def _clamp(value: int) -> int:
    return max(0, min(100, value))


def recommend_allocation(profile: AllocationProfile) -> AllocationTarget:
    check = ValidationResult("recommend_allocation")
    if profile.age <= 0:
        check.errors.append(f"age must be positive, got {profile.age}")
    check.require_non_negative("horizon_years", profile.horizon_years)
    check.raise_if_invalid()

    age = Decimal(profile.age)
    horizon = profile.horizon_years
    w = {
        "stocks": HUNDRED - age,
        "bonds": age,
        "cash": Decimal(5),
        "alternatives": ZERO,
    }

    # 1. risk tolerance
    if profile.risk_tolerance is RiskTolerance.CONSERVATIVE:
        w["stocks"] = max(w["stocks"] - 20, Decimal(20))
        w["bonds"] = min(w["bonds"] + 15, Decimal(60))
        w["cash"] = Decimal(15)
    elif profile.risk_tolerance is RiskTolerance.MODERATE:
        w["cash"] = Decimal(10)
        w["alternatives"] = Decimal(5)
    elif profile.risk_tolerance is RiskTolerance.AGGRESSIVE:
        w["stocks"] = min(w["stocks"] + 15, Decimal(90))
        w["bonds"] = max(w["bonds"] - 10, Decimal(5))
        w["cash"] = Decimal(5)
        w["alternatives"] = Decimal(10)

    # 2. goal
    if profile.goal is InvestmentGoal.RETIREMENT:
        if horizon > 20:
            w["stocks"] += 10
            w["bonds"] -= 5
    elif profile.goal is InvestmentGoal.WEALTH:
        w["stocks"] += 15
        w["bonds"] -= 10
        w["alternatives"] += 5
    elif profile.goal is InvestmentGoal.INCOME:
        w["bonds"] += 20
        w["stocks"] -= 15
    elif profile.goal is InvestmentGoal.PRESERVATION:
        w["cash"] += 10
        w["bonds"] += 10
        w["stocks"] -= 20

    # 3. horizon
    if horizon > 20:
        w["stocks"] += 5
        w["bonds"] -= 5
    elif horizon < 5:
        w["stocks"] -= 10
        w["bonds"] += 5
        w["cash"] += 5

    # 4. normalize
    total = sum(w.values())
    if total != HUNDRED:
        adjustment = (HUNDRED - total) / 4
        w = {k: v + adjustment for k, v in w.items()}

    # 5. clamp + round
    pct = {k: _clamp(_round_half_up(w[k])) for k in ("stocks", "bonds", "cash")}
    residual = 100 - sum(pct.values())
    if residual < 0:
        log.debug("allocation_excess_trimmed", excess=-residual)
        excess = -residual
        while excess > 0:
            largest = max(pct, key=pct.get)
            take = min(excess, pct[largest])
            pct[largest] -= take
            excess -= take
        residual = 0
    pct["alternatives"] = residual

    target = AllocationTarget(
        stocks_percent=pct["stocks"],
        bonds_percent=pct["bonds"],
        cash_percent=pct["cash"],
        alternatives_percent=pct["alternatives"],
    )
    log.debug("allocation_recommended", **{k: target.as_dict()[k] for k in ASSET_CLASSES})
    return target


def classify_risk(target: AllocationTarget) -> RiskClassification:
    """Risk label and expected annual return band, keyed on the stock share."""
    stocks = target.stocks_percent
    if stocks >= 80:
        return RiskClassification(level="High", expected_return="9-12")
    if stocks >= 60:
        return RiskClassification(level="Moderate-High", expected_return="8-10")
    if stocks >= 40:
        return RiskClassification(level="Moderate", expected_return="6-8")
    return RiskClassification(level="Conservative", expected_return="4-6")
