"""
Projection engine: deterministic calculators + Monte Carlo runner.

Inputs are pydantic models; build them from raw dicts with
``core.validation.build_input`` to get InvalidInput instead of pydantic errors.
"""

from .amortization import AmortizationInput, AmortizationResult, amortize
from .deposits import (
    FixedDepositInput,
    FixedDepositResult,
    PPFInput,
    PPFResult,
    SIPInput,
    SIPResult,
    fixed_deposit,
    ppf_maturity,
    sip_maturity,
)
from .dividend import DividendProjectionInput, DividendProjectionResult, project_dividends
from .payoff import (
    CreditCardInput,
    CreditCardResult,
    EligibilityInput,
    EligibilityResult,
    credit_card_payoff,
    loan_eligibility,
)
from .projection import (
    ContributionForGoalRequest,
    FutureValueRequest,
    ProjectionInput,
    RetirementInput,
    TimeToGoalRequest,
    contribution_for_goal,
    future_value,
    parse_projection_request,
    plan_retirement,
    project,
    time_to_goal,
)
from .returns import RealEstateInput, ROIInput, real_estate_returns, return_on_investment
from .runner import MonteCarloInput, MonteCarloResult, run_monte_carlo

__all__ = [
    "AmortizationInput",
    "AmortizationResult",
    "amortize",
    "FixedDepositInput",
    "FixedDepositResult",
    "PPFInput",
    "PPFResult",
    "SIPInput",
    "SIPResult",
    "fixed_deposit",
    "ppf_maturity",
    "sip_maturity",
    "DividendProjectionInput",
    "DividendProjectionResult",
    "project_dividends",
    "CreditCardInput",
    "CreditCardResult",
    "EligibilityInput",
    "EligibilityResult",
    "credit_card_payoff",
    "loan_eligibility",
    "ContributionForGoalRequest",
    "FutureValueRequest",
    "ProjectionInput",
    "RetirementInput",
    "TimeToGoalRequest",
    "contribution_for_goal",
    "future_value",
    "parse_projection_request",
    "plan_retirement",
    "project",
    "time_to_goal",
    "RealEstateInput",
    "ROIInput",
    "real_estate_returns",
    "return_on_investment",
    "MonteCarloInput",
    "MonteCarloResult",
    "run_monte_carlo",
]
