"""
Engine configuration.
Calculator inputs live next to each calculator (engine/, allocation/); this holds
the engine-wide knobs every calculator can be handed via ``config=``.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Tuple


@dataclass(frozen=True)
class EngineConfig:
    # compounding / schedules
    periods_per_year: int = 12
    allowed_periods_per_year: Tuple[int, ...] = (1, 2, 4, 12, 52, 365)

    # Monte Carlo
    max_simulation_count: int = 10_000
    paths_per_chunk: int = 1_000
    seed: int = 7
    percentile_levels: Tuple[int, ...] = (5, 25, 50, 75, 95)

    # rebalancing thresholds, as fractions of total portfolio value
    hold_threshold: Decimal = Decimal("0.01")
    rebalance_threshold: Decimal = Decimal("0.05")
    # allowed distance of a weight set from 100, in percentage points
    allocation_tolerance: Decimal = Decimal("1")

    # retirement income (4% rule)
    safe_withdrawal_rate: Decimal = Decimal("0.04")

    # debt payoff
    max_payoff_months: int = 600
    minimum_payment_fraction: Decimal = Decimal("0.03")
    aggressive_payment_fraction: Decimal = Decimal("0.10")
    recommended_loan_fraction: Decimal = Decimal("0.80")

    # deposit schemes
    fd_tax_free_interest: Decimal = Decimal("40000")
    ppf_rate_percent: Decimal = Decimal("7.1")
    ppf_tenure_years: int = 15


DEFAULT_CONFIG = EngineConfig()
