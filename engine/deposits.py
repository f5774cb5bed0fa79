"""
Deposit-style savings plans.

  SIP            level monthly installment paid at the start of each month
                 (annuity due), optionally stepped up every year
  fixed deposit  lump sum compounded yearly / quarterly / monthly, with tax on
                 the interest once it passes ``config.fd_tax_free_interest``
  PPF            yearly deposit at the start of each year for a fixed tenure
                 at a fixed rate; deposits are deductible at the saver's slab

All three pay in before growth is applied for the period, which is the only
difference from ``engine.projection.future_value``'s end-of-period deposits.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal
from typing import Optional

from pydantic import BaseModel, ConfigDict

from core.config import DEFAULT_CONFIG, EngineConfig
from core.logconfig import get_logger
from core.schema import CompoundingFrequency
from core.utils import (
    HUNDRED,
    ONE,
    ZERO,
    annuity_future_value,
    compound_growth,
    decimal_guard,
    periodic_rate,
    quantize_money,
)
from core.validation import ValidationResult

log = get_logger(__name__)

PERCENT_PLACES = Decimal("0.01")


def _check_percent(check: ValidationResult, name: str, value: Decimal) -> None:
    if not ZERO <= value <= HUNDRED:
        check.errors.append(f"{name} must be within [0, 100], got {value}")


# ---------------------------------------------------------------------------
# SIP
# ---------------------------------------------------------------------------


class SIPInput(BaseModel):
    model_config = ConfigDict(frozen=True)

    monthly_amount: Decimal
    annual_rate_percent: Decimal
    years: Decimal
    # yearly raise of the installment; 0 means a flat SIP
    step_up_percent: Decimal = ZERO


@dataclass(frozen=True)
class SIPResult:
    maturity_amount: Decimal
    total_investment: Decimal
    wealth_gained: Decimal
    # set only when step_up_percent > 0
    step_up_maturity: Optional[Decimal] = None
    step_up_benefit: Optional[Decimal] = None


def step_up_maturity(monthly_amount: Decimal, annual_rate: Decimal, years: int, step_up: Decimal) -> Decimal:
    """
    Maturity of a SIP whose installment rises by ``step_up`` after every year.

    Each year's twelve installments are treated as one lump at the start of
    that year and compounded annually to maturity. This is coarser than the
    monthly annuity-due used for the flat SIP, so the reported benefit also
    contains the timing difference between the two models.
    """
    total = ZERO
    installment = monthly_amount
    for year in range(1, years + 1):
        total += installment * 12 * (ONE + annual_rate) ** (years - year + 1)
        installment *= ONE + step_up
    return total


def sip_maturity(inputs: SIPInput) -> SIPResult:
    """
    Maturity of a monthly investment plan.

    FV = A * ((1+r)^n - 1)/r * (1+r) with r the monthly rate and n = 12 * years;
    linear (A * n) at a zero rate. A step-up needs whole years.
    """
    check = ValidationResult("sip_maturity")
    check.require_positive("monthly_amount", inputs.monthly_amount)
    check.require_non_negative("annual_rate_percent", inputs.annual_rate_percent)
    check.require_positive("years", inputs.years)
    check.require_non_negative("step_up_percent", inputs.step_up_percent)
    if inputs.step_up_percent > ZERO and inputs.years != inputs.years.to_integral_value():
        check.errors.append(f"a step-up SIP needs whole years, got {inputs.years}")
    check.raise_if_invalid()

    with decimal_guard("sip_maturity"):
        r = periodic_rate(inputs.annual_rate_percent, 12)
        n = inputs.years * 12
        raw = annuity_future_value(inputs.monthly_amount, r, n, beginning_of_period=True)
        maturity = quantize_money(raw)
        invested = quantize_money(inputs.monthly_amount * n)

        stepped = None
        benefit = None
        if inputs.step_up_percent > ZERO:
            raw_stepped = step_up_maturity(
                inputs.monthly_amount,
                inputs.annual_rate_percent / HUNDRED,
                int(inputs.years),
                inputs.step_up_percent / HUNDRED,
            )
            stepped = quantize_money(raw_stepped)
            benefit = quantize_money(raw_stepped - raw)

    log.debug("sip_projected", maturity_amount=str(maturity), step_up_benefit=str(benefit))
    return SIPResult(
        maturity_amount=maturity,
        total_investment=invested,
        wealth_gained=maturity - invested,
        step_up_maturity=stepped,
        step_up_benefit=benefit,
    )


# ---------------------------------------------------------------------------
# Fixed deposit
# ---------------------------------------------------------------------------


class FixedDepositInput(BaseModel):
    model_config = ConfigDict(frozen=True)

    principal: Decimal
    annual_rate_percent: Decimal
    years: Decimal
    compounding: CompoundingFrequency = CompoundingFrequency.QUARTERLY
    tax_rate_percent: Decimal = ZERO


@dataclass(frozen=True)
class FixedDepositResult:
    maturity_amount: Decimal
    interest_earned: Decimal
    taxable_interest: Decimal
    tax_amount: Decimal
    post_tax_amount: Decimal
    # simple yearly average of the post-tax gain
    effective_annual_rate_percent: Decimal


def fixed_deposit(
    inputs: FixedDepositInput,
    *,
    config: EngineConfig = DEFAULT_CONFIG,
) -> FixedDepositResult:
    """
    Maturity and post-tax return of a fixed deposit.

    Once the interest passes the tax-free threshold all of it is taxable, not
    only the excess. The effective rate is (post-tax gain / principal) / years.
    """
    check = ValidationResult("fixed_deposit")
    check.require_positive("principal", inputs.principal)
    check.require_non_negative("annual_rate_percent", inputs.annual_rate_percent)
    check.require_positive("years", inputs.years)
    _check_percent(check, "tax_rate_percent", inputs.tax_rate_percent)
    check.raise_if_invalid()

    ppy = inputs.compounding.periods_per_year
    with decimal_guard("fixed_deposit"):
        r = periodic_rate(inputs.annual_rate_percent, ppy)
        maturity = compound_growth(inputs.principal, r, inputs.years * ppy)
        interest = maturity - inputs.principal
        taxable = interest if interest > config.fd_tax_free_interest else ZERO
        tax = taxable * inputs.tax_rate_percent / HUNDRED
        post_tax = maturity - tax
        effective = (post_tax - inputs.principal) / inputs.principal / inputs.years * HUNDRED

        result = FixedDepositResult(
            maturity_amount=quantize_money(maturity),
            interest_earned=quantize_money(interest),
            taxable_interest=quantize_money(taxable),
            tax_amount=quantize_money(tax),
            post_tax_amount=quantize_money(post_tax),
            effective_annual_rate_percent=effective.quantize(PERCENT_PLACES, rounding=ROUND_HALF_UP),
        )

    if taxable > ZERO:
        log.debug("fd_interest_taxed", taxable_interest=str(result.taxable_interest))
    return result


# ---------------------------------------------------------------------------
# PPF
# ---------------------------------------------------------------------------


class PPFInput(BaseModel):
    model_config = ConfigDict(frozen=True)

    annual_deposit: Decimal
    tax_slab_percent: Decimal = ZERO
    current_age: Optional[int] = None


@dataclass(frozen=True)
class PPFResult:
    maturity_amount: Decimal
    total_investment: Decimal
    total_interest: Decimal
    # deduction on every deposit over the tenure
    tax_savings: Decimal
    maturity_age: Optional[int] = None


def ppf_maturity(
    inputs: PPFInput,
    *,
    config: EngineConfig = DEFAULT_CONFIG,
) -> PPFResult:
    """
    PPF balance after ``config.ppf_tenure_years`` yearly deposits.

    Each year: balance = (balance + deposit) * (1 + rate), i.e. a yearly
    annuity due at ``config.ppf_rate_percent``.
    """
    check = ValidationResult("ppf_maturity")
    check.require_positive("annual_deposit", inputs.annual_deposit)
    _check_percent(check, "tax_slab_percent", inputs.tax_slab_percent)
    if inputs.current_age is not None and inputs.current_age <= 0:
        check.errors.append(f"current_age must be positive, got {inputs.current_age}")
    check.raise_if_invalid()

    tenure = config.ppf_tenure_years
    with decimal_guard("ppf_maturity"):
        rate = config.ppf_rate_percent / HUNDRED
        maturity = quantize_money(
            annuity_future_value(inputs.annual_deposit, rate, Decimal(tenure), beginning_of_period=True)
        )
        invested = quantize_money(inputs.annual_deposit * tenure)
        tax_savings = quantize_money(inputs.annual_deposit * inputs.tax_slab_percent / HUNDRED * tenure)

    return PPFResult(
        maturity_amount=maturity,
        total_investment=invested,
        total_interest=maturity - invested,
        tax_savings=tax_savings,
        maturity_age=None if inputs.current_age is None else inputs.current_age + tenure,
    )
