"""
Loan amortization engine: level-payment schedule with an optional lump-sum prepayment.

Rounding rules (shared by every run so prepayment savings are not a rounding artifact):
  1. Level payment rounded to cents once, up front
  2. Interest per period = balance * r, rounded to cents
  3. Principal = payment - interest (+ prepayment in its period), capped at the balance
  4. The last scheduled period sweeps whatever balance is left, so the schedule
     always ends at exactly zero at or before ceil(term_years * 12) periods
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import ROUND_CEILING, Decimal
from typing import List, Optional, Tuple

import pandas as pd
from pydantic import BaseModel, ConfigDict

from core.config import DEFAULT_CONFIG, EngineConfig
from core.logconfig import get_logger
from core.schema import AMORTIZATION_COLUMNS
from core.utils import ZERO, decimal_guard, level_payment, periodic_rate, quantize_money
from core.validation import ValidationResult

log = get_logger(__name__)


class AmortizationInput(BaseModel):
    model_config = ConfigDict(frozen=True)

    principal: Decimal
    annual_rate_percent: Decimal
    term_years: Decimal
    prepayment: Decimal = ZERO
    prepayment_period: Optional[int] = None
    # Truncates the returned schedule only; totals always cover the full loan.
    max_schedule_entries: Optional[int] = None


@dataclass(frozen=True)
class AmortizationEntry:
    period: int
    payment: Decimal
    principal_portion: Decimal
    interest_portion: Decimal
    remaining_balance: Decimal


@dataclass(frozen=True)
class AmortizationResult:
    periodic_payment: Decimal
    total_interest: Decimal
    total_paid: Decimal
    schedule: Tuple[AmortizationEntry, ...]
    payoff_period: int
    prepayment_interest_saved: Optional[Decimal] = None
    periods_saved: Optional[int] = None

    def to_dataframe(self) -> pd.DataFrame:
        """Schedule as a table, one row per period."""
        rows = [
            {
                "Period": e.period,
                "Payment": float(e.payment),
                "Principal": float(e.principal_portion),
                "Interest": float(e.interest_portion),
                "Balance": float(e.remaining_balance),
            }
            for e in self.schedule
        ]
        return pd.DataFrame(rows, columns=list(AMORTIZATION_COLUMNS))


def term_periods(term_years: Decimal, periods_per_year: int = 12) -> int:
    """Whole payment periods covering the term (a partial month counts as one)."""
    return int((term_years * periods_per_year).to_integral_value(rounding=ROUND_CEILING))


def run_schedule(
    principal: Decimal,
    rate: Decimal,
    payment: Decimal,
    n_periods: int,
    *,
    prepayment: Decimal = ZERO,
    prepayment_period: Optional[int] = None,
) -> List[AmortizationEntry]:
    """
    Iterate the loan period by period until the balance reaches zero.

    Never runs past ``n_periods``; a prepayment only shortens the schedule.
    """
    balance = principal
    entries: List[AmortizationEntry] = []

    for period in range(1, n_periods + 1):
        interest = quantize_money(balance * rate)
        principal_part = payment - interest

        if prepayment_period == period and prepayment > ZERO:
            principal_part += prepayment

        # final period (or an overshoot) clears the loan
        if principal_part >= balance or period == n_periods:
            principal_part = balance

        balance = balance - principal_part
        entries.append(
            AmortizationEntry(
                period=period,
                payment=interest + principal_part,
                principal_portion=principal_part,
                interest_portion=interest,
                remaining_balance=balance,
            )
        )
        if balance <= ZERO:
            break

    return entries


def amortize(
    inputs: AmortizationInput,
    *,
    config: EngineConfig = DEFAULT_CONFIG,
) -> AmortizationResult:
    """
    Build the amortization schedule and totals for a fixed-rate loan.

    With a prepayment, the schedule is run twice through ``run_schedule`` (with
    and without the lump sum) and the interest difference is reported as
    ``prepayment_interest_saved``. A prepayment period past the end of the loan
    is ignored (saved = 0).
    """
    check = ValidationResult("amortize")
    check.require_positive("principal", inputs.principal)
    check.require_positive("term_years", inputs.term_years)
    check.require_non_negative("annual_rate_percent", inputs.annual_rate_percent)
    check.require_non_negative("prepayment", inputs.prepayment)
    if inputs.prepayment_period is not None and inputs.prepayment_period < 1:
        check.errors.append(f"prepayment_period must be 1 or later, got {inputs.prepayment_period}")
    if inputs.max_schedule_entries is not None and inputs.max_schedule_entries < 0:
        check.errors.append("max_schedule_entries must not be negative")
    check.raise_if_invalid()

    n = term_periods(inputs.term_years, config.periods_per_year)
    has_prepayment = inputs.prepayment > ZERO and inputs.prepayment_period is not None

    with decimal_guard("amortize"):
        principal = quantize_money(inputs.principal)
        r = periodic_rate(inputs.annual_rate_percent, config.periods_per_year)
        payment = quantize_money(level_payment(principal, r, n))

        base = run_schedule(principal, r, payment, n)
        schedule = base
        if has_prepayment:
            if inputs.prepayment_period > n:
                check.warnings.append(
                    f"prepayment_period {inputs.prepayment_period} is after the last period {n}"
                )
            else:
                schedule = run_schedule(
                    principal,
                    r,
                    payment,
                    n,
                    prepayment=quantize_money(inputs.prepayment),
                    prepayment_period=inputs.prepayment_period,
                )

    for warning in check.warnings:
        log.warning("amortization_degraded", reason=warning)

    total_interest = sum((e.interest_portion for e in schedule), ZERO)
    total_paid = sum((e.payment for e in schedule), ZERO)

    saved = None
    periods_saved = None
    if has_prepayment:
        base_interest = sum((e.interest_portion for e in base), ZERO)
        saved = base_interest - total_interest
        periods_saved = len(base) - len(schedule)

    shown = tuple(schedule)
    if inputs.max_schedule_entries is not None:
        shown = shown[: inputs.max_schedule_entries]

    log.debug(
        "loan_amortized",
        periodic_payment=str(payment),
        total_interest=str(total_interest),
        payoff_period=len(schedule),
    )
    return AmortizationResult(
        periodic_payment=payment,
        total_interest=total_interest,
        total_paid=total_paid,
        schedule=shown,
        payoff_period=len(schedule),
        prepayment_interest_saved=saved,
        periods_saved=periods_saved,
    )
