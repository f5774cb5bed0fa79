"""
Debt payoff and borrowing capacity.

- Credit-card payoff: months and interest to clear a revolving balance under
  the minimum / fixed / aggressive payment strategies.
- Loan eligibility: largest EMI allowed by the FOIR (fixed obligation to
  income ratio) for the loan type, and the principal that EMI can service.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Dict, Optional

from pydantic import BaseModel, ConfigDict

from core.config import DEFAULT_CONFIG, EngineConfig
from core.logconfig import get_logger
from core.schema import LoanType, PaymentStrategy
from core.utils import ZERO, annuity_present_value, decimal_guard, periodic_rate, quantize_money
from core.validation import ValidationResult

from .amortization import term_periods

log = get_logger(__name__)

FOIR_LIMITS: Dict[LoanType, Decimal] = {
    LoanType.HOME: Decimal("0.50"),
    LoanType.CAR: Decimal("0.40"),
    LoanType.PERSONAL: Decimal("0.30"),
}


class CreditCardInput(BaseModel):
    model_config = ConfigDict(frozen=True)

    balance: Decimal
    annual_rate_percent: Decimal
    # defaults to config.minimum_payment_fraction of the balance
    minimum_payment: Optional[Decimal] = None
    fixed_payment: Optional[Decimal] = None
    strategy: PaymentStrategy = PaymentStrategy.MINIMUM


@dataclass(frozen=True)
class PayoffResult:
    strategy: PaymentStrategy
    monthly_payment: Decimal
    paid_off: bool
    months: Optional[int] = None
    total_interest: Optional[Decimal] = None


@dataclass(frozen=True)
class CreditCardResult:
    selected: PayoffResult
    strategies: Dict[PaymentStrategy, PayoffResult]


def simulate_payoff(
    balance: Decimal,
    monthly_rate: Decimal,
    payment: Decimal,
    strategy: PaymentStrategy,
    *,
    max_months: int,
) -> PayoffResult:
    """Pay ``payment`` every month until the balance is gone or ``max_months`` pass."""
    months = 0
    total_interest = ZERO

    while balance > ZERO and months < max_months:
        interest = quantize_money(balance * monthly_rate)
        principal = min(payment - interest, balance)
        if principal <= ZERO:
            # payment never covers the interest
            return PayoffResult(strategy=strategy, monthly_payment=payment, paid_off=False)
        total_interest += interest
        balance -= principal
        months += 1

    if balance > ZERO:
        return PayoffResult(strategy=strategy, monthly_payment=payment, paid_off=False)
    return PayoffResult(
        strategy=strategy,
        monthly_payment=payment,
        paid_off=True,
        months=months,
        total_interest=total_interest,
    )


def credit_card_payoff(
    inputs: CreditCardInput,
    *,
    config: EngineConfig = DEFAULT_CONFIG,
) -> CreditCardResult:
    check = ValidationResult("credit_card_payoff")
    check.require_positive("balance", inputs.balance)
    check.require_non_negative("annual_rate_percent", inputs.annual_rate_percent)
    if inputs.minimum_payment is not None:
        check.require_positive("minimum_payment", inputs.minimum_payment)
    if inputs.fixed_payment is not None:
        check.require_positive("fixed_payment", inputs.fixed_payment)
    if inputs.strategy is PaymentStrategy.FIXED and inputs.fixed_payment is None:
        check.errors.append("fixed strategy needs a fixed_payment")
    check.raise_if_invalid()

    with decimal_guard("credit_card_payoff"):
        balance = quantize_money(inputs.balance)
        r = periodic_rate(inputs.annual_rate_percent, 12)
        payments = {
            PaymentStrategy.MINIMUM: quantize_money(
                inputs.minimum_payment
                if inputs.minimum_payment is not None
                else balance * config.minimum_payment_fraction
            ),
            PaymentStrategy.AGGRESSIVE: quantize_money(balance * config.aggressive_payment_fraction),
        }
        if inputs.fixed_payment is not None:
            payments[PaymentStrategy.FIXED] = quantize_money(inputs.fixed_payment)

        strategies = {
            strategy: simulate_payoff(balance, r, payment, strategy, max_months=config.max_payoff_months)
            for strategy, payment in payments.items()
        }

    selected = strategies[inputs.strategy]
    if not selected.paid_off:
        log.warning("balance_never_repaid", strategy=inputs.strategy.value, payment=str(selected.monthly_payment))
    return CreditCardResult(selected=selected, strategies=strategies)


class EligibilityInput(BaseModel):
    model_config = ConfigDict(frozen=True)

    monthly_income: Decimal
    existing_emi: Decimal = ZERO
    annual_rate_percent: Decimal
    tenure_years: Decimal
    loan_type: LoanType = LoanType.HOME


@dataclass(frozen=True)
class EligibilityResult:
    max_emi: Decimal
    max_loan_amount: Decimal
    recommended_loan_amount: Decimal

    @property
    def eligible(self) -> bool:
        return self.max_emi > ZERO


def loan_eligibility(
    inputs: EligibilityInput,
    *,
    config: EngineConfig = DEFAULT_CONFIG,
) -> EligibilityResult:
    """
    Max EMI = income * FOIR(loan type) - existing EMIs; max loan is the present
    value of that EMI over the tenure. Existing obligations at or above the FOIR
    limit leave nothing to borrow (all zeros), which is not an error.
    """
    check = ValidationResult("loan_eligibility")
    check.require_positive("monthly_income", inputs.monthly_income)
    check.require_non_negative("existing_emi", inputs.existing_emi)
    check.require_non_negative("annual_rate_percent", inputs.annual_rate_percent)
    check.require_positive("tenure_years", inputs.tenure_years)
    check.raise_if_invalid()

    with decimal_guard("loan_eligibility"):
        max_emi = quantize_money(inputs.monthly_income * FOIR_LIMITS[inputs.loan_type] - inputs.existing_emi)
        if max_emi <= ZERO:
            zero = quantize_money(ZERO)
            return EligibilityResult(max_emi=zero, max_loan_amount=zero, recommended_loan_amount=zero)

        r = periodic_rate(inputs.annual_rate_percent, 12)
        n = term_periods(inputs.tenure_years)
        max_loan = annuity_present_value(max_emi, r, Decimal(n))

        return EligibilityResult(
            max_emi=max_emi,
            max_loan_amount=quantize_money(max_loan),
            recommended_loan_amount=quantize_money(max_loan * config.recommended_loan_fraction),
        )
