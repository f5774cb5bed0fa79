"""
Return metrics: plain ROI / CAGR and rental real-estate returns.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal
from typing import Optional

from pydantic import BaseModel, ConfigDict

from core.utils import HUNDRED, ONE, ZERO, decimal_guard, quantize_money
from core.validation import ValidationResult

PERCENT_PLACES = Decimal("0.01")


def _pct(value: Decimal) -> Decimal:
    return (value * HUNDRED).quantize(PERCENT_PLACES, rounding=ROUND_HALF_UP)


class ROIInput(BaseModel):
    model_config = ConfigDict(frozen=True)

    initial_investment: Decimal
    final_value: Decimal
    years: Decimal = ZERO
    additional_costs: Decimal = ZERO


@dataclass(frozen=True)
class ROIResult:
    total_investment: Decimal
    total_gain: Decimal
    total_roi_percent: Decimal
    # None when no holding period was given
    annualized_roi_percent: Optional[Decimal] = None


def return_on_investment(inputs: ROIInput) -> ROIResult:
    """Total ROI and, given a holding period, CAGR = (final/invested)^(1/years) - 1."""
    check = ValidationResult("return_on_investment")
    check.require_positive("initial_investment", inputs.initial_investment)
    check.require_positive("final_value", inputs.final_value)
    check.require_non_negative("years", inputs.years)
    check.require_non_negative("additional_costs", inputs.additional_costs)
    check.raise_if_invalid()

    with decimal_guard("return_on_investment"):
        invested = inputs.initial_investment + inputs.additional_costs
        gain = inputs.final_value - invested
        annualized = None
        if inputs.years > ZERO:
            annualized = _pct((inputs.final_value / invested) ** (ONE / inputs.years) - ONE)

        return ROIResult(
            total_investment=quantize_money(invested),
            total_gain=quantize_money(gain),
            total_roi_percent=_pct(gain / invested),
            annualized_roi_percent=annualized,
        )


class RealEstateInput(BaseModel):
    model_config = ConfigDict(frozen=True)

    purchase_price: Decimal
    down_payment: Decimal
    monthly_rent: Decimal
    monthly_expenses: Decimal = ZERO
    annual_property_taxes: Decimal = ZERO
    annual_insurance: Decimal = ZERO
    maintenance_percent: Decimal = Decimal("2")
    vacancy_percent: Decimal = Decimal("5")
    appreciation_percent: Decimal = Decimal("3")
    holding_years: Decimal = Decimal("10")


@dataclass(frozen=True)
class RealEstateResult:
    monthly_cash_flow: Decimal
    annual_cash_flow: Decimal
    net_operating_income: Decimal
    cap_rate_percent: Decimal
    cash_on_cash_percent: Decimal
    future_value: Decimal
    total_appreciation: Decimal
    total_roi_percent: Decimal


def real_estate_returns(inputs: RealEstateInput) -> RealEstateResult:
    """
    Rental property returns over a holding period.

    Maintenance is a yearly percentage of the purchase price; rent is reduced
    by the vacancy rate. NOI here is rent minus operating expenses with no
    debt service, so it equals the annual cash flow.
    """
    check = ValidationResult("real_estate_returns")
    check.require_positive("purchase_price", inputs.purchase_price)
    check.require_positive("down_payment", inputs.down_payment)
    check.require_positive("monthly_rent", inputs.monthly_rent)
    for name in ("monthly_expenses", "annual_property_taxes", "annual_insurance",
                 "maintenance_percent", "holding_years"):
        check.require_non_negative(name, getattr(inputs, name))
    if not ZERO <= inputs.vacancy_percent <= HUNDRED:
        check.errors.append(f"vacancy_percent must be within [0, 100], got {inputs.vacancy_percent}")
    if inputs.appreciation_percent <= -HUNDRED:
        check.errors.append("appreciation_percent must be greater than -100")
    check.raise_if_invalid()

    with decimal_guard("real_estate_returns"):
        effective_rent = inputs.monthly_rent * (ONE - inputs.vacancy_percent / HUNDRED)
        monthly_costs = (
            inputs.monthly_expenses
            + inputs.annual_property_taxes / 12
            + inputs.annual_insurance / 12
            + inputs.purchase_price * inputs.maintenance_percent / HUNDRED / 12
        )
        monthly_cash_flow = effective_rent - monthly_costs
        annual_cash_flow = monthly_cash_flow * 12
        noi = effective_rent * 12 - monthly_costs * 12

        future_value = inputs.purchase_price * (ONE + inputs.appreciation_percent / HUNDRED) ** inputs.holding_years
        appreciation = future_value - inputs.purchase_price
        total_return = annual_cash_flow * inputs.holding_years + appreciation

        return RealEstateResult(
            monthly_cash_flow=quantize_money(monthly_cash_flow),
            annual_cash_flow=quantize_money(annual_cash_flow),
            net_operating_income=quantize_money(noi),
            cap_rate_percent=_pct(noi / inputs.purchase_price),
            cash_on_cash_percent=_pct(annual_cash_flow / inputs.down_payment),
            future_value=quantize_money(future_value),
            total_appreciation=quantize_money(appreciation),
            total_roi_percent=_pct(total_return / inputs.down_payment),
        )
