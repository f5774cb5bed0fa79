"""
Compound / retirement projector.

Three solve-for-X operations share the growth primitives in core.utils but are
separate requests with separate entry points:

  future-value   given principal + periodic contribution -> future value
  goal-planning  given principal + target value          -> required contribution
  time-to-goal   given principal + contribution + target -> periods until target

``project()`` dispatches on the request type; it never guesses the mode from
which optional fields happen to be filled in.

Rates are annual percentages (7 means 7%). Contributions are made at the end
of each compounding period (ordinary annuity).
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import ROUND_CEILING, ROUND_HALF_UP, Decimal
from typing import Annotated, Any, Literal, Mapping, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter

from core.config import DEFAULT_CONFIG, EngineConfig
from core.errors import InvalidInput
from core.logconfig import get_logger
from core.utils import (
    CENT,
    HUNDRED,
    ONE,
    ZERO,
    annuity_future_value,
    compound_growth,
    decimal_guard,
    periodic_rate,
    quantize_money,
)
from core.validation import ValidationResult, build_input

log = get_logger(__name__)

RATE_PLACES = Decimal("0.0001")
YEAR_PLACES = Decimal("0.01")


class _Request(BaseModel):
    model_config = ConfigDict(frozen=True)


class FutureValueRequest(_Request):
    mode: Literal["future-value"] = "future-value"
    principal: Decimal = ZERO
    periodic_contribution: Decimal = ZERO
    annual_rate_percent: Decimal
    years: Decimal
    inflation_rate_percent: Decimal = ZERO
    periods_per_year: int = 12


# Plain future-value input under its shorter name.
ProjectionInput = FutureValueRequest


class ContributionForGoalRequest(_Request):
    mode: Literal["goal-planning"] = "goal-planning"
    principal: Decimal = ZERO
    target_value: Decimal
    annual_rate_percent: Decimal
    years: Decimal
    periods_per_year: int = 12


class TimeToGoalRequest(_Request):
    mode: Literal["time-to-goal"] = "time-to-goal"
    principal: Decimal = ZERO
    periodic_contribution: Decimal = ZERO
    target_value: Decimal
    annual_rate_percent: Decimal
    periods_per_year: int = 12


ProjectionRequest = Annotated[
    Union[FutureValueRequest, ContributionForGoalRequest, TimeToGoalRequest],
    Field(discriminator="mode"),
]

_request_adapter: TypeAdapter = TypeAdapter(ProjectionRequest)


@dataclass(frozen=True)
class ProjectionResult:
    future_value: Decimal
    total_contributions: Decimal
    total_growth: Decimal
    effective_annual_rate_percent: Decimal
    real_value: Optional[Decimal] = None


@dataclass(frozen=True)
class GoalPlanResult:
    required_contribution: Decimal
    future_value: Decimal
    total_contributions: Decimal
    total_growth: Decimal
    goal_already_met: bool = False


@dataclass(frozen=True)
class TimeToGoalResult:
    """``reachable=False`` leaves every other field as None."""
    reachable: bool
    years: Optional[Decimal] = None
    periods: Optional[int] = None
    total_contributions: Optional[Decimal] = None
    total_growth: Optional[Decimal] = None


def _check_rate(check: ValidationResult, annual_rate_percent: Decimal, periods_per_year: int,
                config: EngineConfig) -> None:
    if periods_per_year not in config.allowed_periods_per_year:
        check.errors.append(
            f"periods_per_year must be one of {config.allowed_periods_per_year}, got {periods_per_year}"
        )
    elif annual_rate_percent / HUNDRED / periods_per_year <= -ONE:
        check.errors.append(
            f"annual_rate_percent {annual_rate_percent} wipes out the balance every period"
        )


def future_value(
    request: FutureValueRequest,
    *,
    config: EngineConfig = DEFAULT_CONFIG,
) -> ProjectionResult:
    """
    Future value of a principal plus a level periodic contribution.

    FV = P*(1+r)^n + C*((1+r)^n - 1)/r, with the annuity term falling back to
    C*n when r == 0. ``real_value`` deflates FV by (1+inflation)^years.
    """
    check = ValidationResult("future_value")
    check.require_positive("years", request.years)
    check.require_non_negative("principal", request.principal)
    check.require_non_negative("periodic_contribution", request.periodic_contribution)
    _check_rate(check, request.annual_rate_percent, request.periods_per_year, config)
    if request.inflation_rate_percent <= -HUNDRED:
        check.errors.append("inflation_rate_percent must be greater than -100")
    check.raise_if_invalid()

    ppy = request.periods_per_year
    with decimal_guard("future_value"):
        r = periodic_rate(request.annual_rate_percent, ppy)
        n = request.years * ppy
        raw_fv = compound_growth(request.principal, r, n) + annuity_future_value(
            request.periodic_contribution, r, n
        )
        fv = quantize_money(raw_fv)
        contributions = quantize_money(request.principal + request.periodic_contribution * n)

        real_value = None
        if request.inflation_rate_percent != ZERO:
            deflator = (ONE + request.inflation_rate_percent / HUNDRED) ** request.years
            real_value = quantize_money(raw_fv / deflator)

        effective = (((ONE + r) ** ppy - ONE) * HUNDRED).quantize(RATE_PLACES, rounding=ROUND_HALF_UP)

    log.debug("future_value_projected", future_value=str(fv), periods=str(n))
    return ProjectionResult(
        future_value=fv,
        total_contributions=contributions,
        total_growth=fv - contributions,
        effective_annual_rate_percent=effective,
        real_value=real_value,
    )


def contribution_for_goal(
    request: ContributionForGoalRequest,
    *,
    config: EngineConfig = DEFAULT_CONFIG,
) -> GoalPlanResult:
    """
    Periodic contribution needed to reach ``target_value`` after ``years``.

    The principal's own growth is credited first; if it already reaches the
    target the required contribution is zero and ``goal_already_met`` is set.
    """
    check = ValidationResult("contribution_for_goal")
    check.require_positive("years", request.years)
    check.require_positive("target_value", request.target_value)
    check.require_non_negative("principal", request.principal)
    _check_rate(check, request.annual_rate_percent, request.periods_per_year, config)
    check.raise_if_invalid()

    ppy = request.periods_per_year
    with decimal_guard("contribution_for_goal"):
        r = periodic_rate(request.annual_rate_percent, ppy)
        n = request.years * ppy
        grown_principal = compound_growth(request.principal, r, n)
        shortfall = request.target_value - grown_principal

        if shortfall <= ZERO:
            fv = quantize_money(grown_principal)
            principal = quantize_money(request.principal)
            return GoalPlanResult(
                required_contribution=ZERO.quantize(CENT),
                future_value=fv,
                total_contributions=principal,
                total_growth=fv - principal,
                goal_already_met=True,
            )

        factor = annuity_future_value(ONE, r, n)
        required = quantize_money(shortfall / factor)
        fv = quantize_money(request.target_value)
        contributions = quantize_money(request.principal + required * n)

    log.debug("goal_contribution_solved", required_contribution=str(required))
    return GoalPlanResult(
        required_contribution=required,
        future_value=fv,
        total_contributions=contributions,
        total_growth=fv - contributions,
    )


def time_to_goal(
    request: TimeToGoalRequest,
    *,
    config: EngineConfig = DEFAULT_CONFIG,
) -> TimeToGoalResult:
    """
    Periods until principal plus contributions reach ``target_value``.

    Inverts FV(n) in closed form: (1+r)^n = (T*r + C) / (P*r + C), so
    n = ln(...) / ln(1+r); with r == 0, n = (T - P) / C. A goal the inputs can
    never reach returns ``reachable=False`` instead of raising.
    """
    check = ValidationResult("time_to_goal")
    check.require_positive("target_value", request.target_value)
    check.require_non_negative("principal", request.principal)
    check.require_non_negative("periodic_contribution", request.periodic_contribution)
    _check_rate(check, request.annual_rate_percent, request.periods_per_year, config)
    check.raise_if_invalid()

    P = request.principal
    C = request.periodic_contribution
    T = request.target_value
    ppy = request.periods_per_year

    with decimal_guard("time_to_goal"):
        if P >= T:
            return TimeToGoalResult(
                reachable=True,
                years=ZERO.quantize(YEAR_PLACES),
                periods=0,
                total_contributions=quantize_money(P),
                total_growth=ZERO.quantize(CENT),
            )

        r = periodic_rate(request.annual_rate_percent, ppy)
        n: Optional[Decimal] = None
        if r == ZERO:
            if C > ZERO:
                n = (T - P) / C
        else:
            numerator = T * r + C
            denominator = P * r + C
            if numerator > ZERO and denominator > ZERO:
                candidate = (numerator / denominator).ln() / (ONE + r).ln()
                if candidate > ZERO:
                    n = candidate

        if n is None:
            log.warning("goal_unreachable", target_value=str(T), annual_rate_percent=str(request.annual_rate_percent))
            return TimeToGoalResult(reachable=False)

        contributions = quantize_money(P + C * n)
        target = quantize_money(T)

    return TimeToGoalResult(
        reachable=True,
        years=(n / ppy).quantize(YEAR_PLACES, rounding=ROUND_HALF_UP),
        periods=int(n.to_integral_value(rounding=ROUND_CEILING)),
        total_contributions=contributions,
        total_growth=target - contributions,
    )


def parse_projection_request(data: Mapping[str, Any]):
    """Build the right request type from a dict carrying a ``mode`` key."""
    return build_input(_request_adapter, data, calculator="projection")


def project(
    request: Union[FutureValueRequest, ContributionForGoalRequest, TimeToGoalRequest],
    *,
    config: EngineConfig = DEFAULT_CONFIG,
):
    """Dispatch a tagged projection request to its entry point."""
    if isinstance(request, FutureValueRequest):
        return future_value(request, config=config)
    if isinstance(request, ContributionForGoalRequest):
        return contribution_for_goal(request, config=config)
    if isinstance(request, TimeToGoalRequest):
        return time_to_goal(request, config=config)
    raise InvalidInput.from_violations(
        "projection", [f"unsupported request type {type(request).__name__}"]
    )


# ---------------------------------------------------------------------------
# Retirement planner
# ---------------------------------------------------------------------------


class RetirementInput(_Request):
    current_age: Decimal
    retirement_age: Decimal
    current_savings: Decimal = ZERO
    monthly_contribution: Decimal = ZERO
    annual_return_percent: Decimal = Decimal("7")
    target_annual_income: Decimal = ZERO
    inflation_rate_percent: Decimal = Decimal("3")


@dataclass(frozen=True)
class RetirementResult:
    total_savings: Decimal
    monthly_income: Decimal
    total_contributions: Decimal
    investment_growth: Decimal
    inflation_adjusted_target: Decimal
    goal_met: bool


def plan_retirement(
    inputs: RetirementInput,
    *,
    config: EngineConfig = DEFAULT_CONFIG,
) -> RetirementResult:
    """
    Savings at retirement and the income they support under the safe-withdrawal rule.

    Income = savings * safe_withdrawal_rate / 12; the goal is met when that
    annual income covers the target income grown by inflation until retirement.
    """
    check = ValidationResult("plan_retirement")
    check.require_positive("current_age", inputs.current_age)
    if inputs.retirement_age <= inputs.current_age:
        check.errors.append(
            f"retirement_age ({inputs.retirement_age}) must be after current_age ({inputs.current_age})"
        )
    check.require_non_negative("target_annual_income", inputs.target_annual_income)
    check.raise_if_invalid()

    years = inputs.retirement_age - inputs.current_age
    projection = future_value(
        FutureValueRequest(
            principal=inputs.current_savings,
            periodic_contribution=inputs.monthly_contribution,
            annual_rate_percent=inputs.annual_return_percent,
            years=years,
            periods_per_year=12,
        ),
        config=config,
    )

    with decimal_guard("plan_retirement"):
        monthly_income = quantize_money(projection.future_value * config.safe_withdrawal_rate / 12)
        target = quantize_money(
            inputs.target_annual_income * (ONE + inputs.inflation_rate_percent / HUNDRED) ** years
        )

    return RetirementResult(
        total_savings=projection.future_value,
        monthly_income=monthly_income,
        total_contributions=projection.total_contributions,
        investment_growth=projection.total_growth,
        inflation_adjusted_target=target,
        goal_met=monthly_income * 12 >= target,
    )
