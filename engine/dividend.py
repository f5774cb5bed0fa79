"""
Dividend reinvestment projector: year-by-year income and portfolio growth.

Each simulated year:
  1. add twelve monthly contributions to the portfolio
  2. income = portfolio * current yield
  3. optionally reinvest the income
  4. grow the portfolio AND the yield by (1 + growth)

Step 4 grows the yield on top of a price that already grew, so income per
share compounds at (1 + growth)^2 a year and yield-on-cost rises faster than
the price.

Capital growth is final value - contributions - all income received, whether
or not the income was reinvested. With reinvestment off, that subtracts income
that never entered the portfolio, so capital growth reads lower than the
portfolio's own gain.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal

from pydantic import BaseModel, ConfigDict

from core.logconfig import get_logger
from core.utils import HUNDRED, ONE, ZERO, decimal_guard, quantize_money
from core.validation import ValidationResult

log = get_logger(__name__)

PERCENT_PLACES = Decimal("0.01")


class DividendProjectionInput(BaseModel):
    model_config = ConfigDict(frozen=True)

    initial_value: Decimal
    current_yield_percent: Decimal
    annual_growth_percent: Decimal = ZERO
    years: int
    monthly_contribution: Decimal = ZERO
    reinvest: bool = True


@dataclass(frozen=True)
class DividendProjectionResult:
    final_portfolio_value: Decimal
    final_annual_income: Decimal
    monthly_income: Decimal
    total_income_received: Decimal
    total_contributions: Decimal
    yield_on_cost_percent: Decimal
    capital_growth: Decimal
    income_growth: Decimal


def project_dividends(inputs: DividendProjectionInput) -> DividendProjectionResult:
    check = ValidationResult("project_dividends")
    check.require_positive("initial_value", inputs.initial_value)
    check.require_positive("current_yield_percent", inputs.current_yield_percent)
    if inputs.years <= 0:
        check.errors.append(f"years must be positive, got {inputs.years}")
    check.require_non_negative("monthly_contribution", inputs.monthly_contribution)
    if inputs.annual_growth_percent <= -HUNDRED:
        check.errors.append("annual_growth_percent must be greater than -100")
    check.raise_if_invalid()

    with decimal_guard("project_dividends"):
        growth = ONE + inputs.annual_growth_percent / HUNDRED
        yearly_contribution = inputs.monthly_contribution * 12

        portfolio = inputs.initial_value
        current_yield = inputs.current_yield_percent / HUNDRED
        total_income = ZERO

        for _ in range(inputs.years):
            portfolio += yearly_contribution
            income = portfolio * current_yield
            total_income += income
            if inputs.reinvest:
                portfolio += income
            portfolio *= growth
            current_yield *= growth

        final_income = portfolio * current_yield
        contributions = inputs.initial_value + yearly_contribution * inputs.years

        result = DividendProjectionResult(
            final_portfolio_value=quantize_money(portfolio),
            final_annual_income=quantize_money(final_income),
            monthly_income=quantize_money(final_income / 12),
            total_income_received=quantize_money(total_income),
            total_contributions=quantize_money(contributions),
            yield_on_cost_percent=(final_income / inputs.initial_value * HUNDRED).quantize(
                PERCENT_PLACES, rounding=ROUND_HALF_UP
            ),
            capital_growth=quantize_money(portfolio - contributions - total_income),
            income_growth=quantize_money(total_income),
        )

    log.debug(
        "dividends_projected",
        final_portfolio_value=str(result.final_portfolio_value),
        yield_on_cost_percent=str(result.yield_on_cost_percent),
    )
    return result
