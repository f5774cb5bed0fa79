"""
Rebalancing diff calculator: money to move per bucket to reach a target allocation.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Dict

import pandas as pd
from pydantic import BaseModel, ConfigDict

from core.config import DEFAULT_CONFIG, EngineConfig
from core.logconfig import get_logger
from core.schema import ASSET_CLASSES, RebalanceAction
from core.utils import HUNDRED, ZERO, decimal_guard, quantize_money
from core.validation import ValidationResult

from .heuristic import AllocationTarget

log = get_logger(__name__)


class AllocationWeights(BaseModel):
    """Percent per bucket (60 means 60%). Alternatives is optional."""
    model_config = ConfigDict(frozen=True)

    stocks: Decimal
    bonds: Decimal
    cash: Decimal
    alternatives: Decimal = ZERO

    @classmethod
    def from_target(cls, target: AllocationTarget) -> "AllocationWeights":
        return cls(**{k: Decimal(v) for k, v in target.as_dict().items()})

    def as_dict(self) -> Dict[str, Decimal]:
        return {k: getattr(self, k) for k in ASSET_CLASSES}

    @property
    def total(self) -> Decimal:
        return sum(self.as_dict().values(), ZERO)


class RebalanceInput(BaseModel):
    model_config = ConfigDict(frozen=True)

    current: AllocationWeights
    target: AllocationWeights
    total_portfolio_value: Decimal


@dataclass(frozen=True)
class RebalanceLeg:
    asset: str
    current_amount: Decimal
    target_amount: Decimal
    delta_amount: Decimal
    action: RebalanceAction


@dataclass(frozen=True)
class RebalancePlan:
    legs: Dict[str, RebalanceLeg]
    rebalance_needed: bool
    # half of sum |delta|: each trade has a buy and a sell side
    total_trade_volume: Decimal

    def to_dataframe(self) -> pd.DataFrame:
        return pd.DataFrame([
            {
                "Asset": leg.asset,
                "Current": float(leg.current_amount),
                "Target": float(leg.target_amount),
                "Delta": float(leg.delta_amount),
                "Action": leg.action.value,
            }
            for leg in self.legs.values()
        ])


def _check_weights(check: ValidationResult, label: str, weights: AllocationWeights, tolerance: Decimal) -> None:
    for asset, value in weights.as_dict().items():
        check.require_non_negative(f"{label}.{asset}", value)
    if abs(weights.total - HUNDRED) > tolerance:
        check.errors.append(f"{label} allocation sums to {weights.total}, expected 100 (±{tolerance})")


def plan_rebalance(
    inputs: RebalanceInput,
    *,
    config: EngineConfig = DEFAULT_CONFIG,
) -> RebalancePlan:
    """
    Per bucket: delta = target amount - current amount. A bucket holds when
    |delta| is under ``config.hold_threshold`` of the portfolio, otherwise it
    buys (delta > 0) or sells. Rebalancing is flagged when sum |delta| exceeds
    ``config.rebalance_threshold`` of the portfolio.

    Unbalanced weight sets are rejected, never silently rescaled.
    """
    check = ValidationResult("plan_rebalance")
    check.require_positive("total_portfolio_value", inputs.total_portfolio_value)
    _check_weights(check, "current", inputs.current, config.allocation_tolerance)
    _check_weights(check, "target", inputs.target, config.allocation_tolerance)
    check.raise_if_invalid()

    total = inputs.total_portfolio_value
    hold_below = total * config.hold_threshold
    current = inputs.current.as_dict()
    target = inputs.target.as_dict()

    legs: Dict[str, RebalanceLeg] = {}
    gross = ZERO
    with decimal_guard("plan_rebalance"):
        for asset in ASSET_CLASSES:
            current_amount = current[asset] / HUNDRED * total
            target_amount = target[asset] / HUNDRED * total
            delta = target_amount - current_amount
            gross += abs(delta)

            if abs(delta) < hold_below:
                action = RebalanceAction.HOLD
            elif delta > 0:
                action = RebalanceAction.BUY
            else:
                action = RebalanceAction.SELL

            legs[asset] = RebalanceLeg(
                asset=asset,
                current_amount=quantize_money(current_amount),
                target_amount=quantize_money(target_amount),
                delta_amount=quantize_money(delta),
                action=action,
            )

        plan = RebalancePlan(
            legs=legs,
            rebalance_needed=gross > total * config.rebalance_threshold,
            total_trade_volume=quantize_money(gross / 2),
        )
    log.debug(
        "rebalance_planned",
        rebalance_needed=plan.rebalance_needed,
        total_trade_volume=str(plan.total_trade_volume),
    )
    return plan
