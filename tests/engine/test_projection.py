"""Tests for the compound / retirement projector"""

from decimal import Decimal

import pytest

from core.errors import InvalidInput, attempt
from engine.projection import (
    ContributionForGoalRequest,
    FutureValueRequest,
    GoalPlanResult,
    ProjectionResult,
    RetirementInput,
    TimeToGoalRequest,
    TimeToGoalResult,
    contribution_for_goal,
    future_value,
    parse_projection_request,
    plan_retirement,
    project,
    time_to_goal,
)


class TestFutureValue:
    """Test future value projection"""

    def test_monthly_saver(self, monthly_saver):
        result = future_value(FutureValueRequest(**monthly_saver))
        assert result.future_value == Decimal("691150.47")
        assert result.total_contributions == Decimal("190000.00")
        assert result.effective_annual_rate_percent == Decimal("7.2290")

    def test_annual_compounding_lands_in_reference_band(self, monthly_saver):
        # 6000/year deposited once a year at 7% for 30 years
        request = FutureValueRequest(
            principal=Decimal("10000"),
            periodic_contribution=Decimal("6000"),
            annual_rate_percent=Decimal("7"),
            years=Decimal("30"),
            periods_per_year=1,
        )
        result = future_value(request)
        assert result.future_value == Decimal("642887.27")
        assert Decimal("620000") <= result.future_value <= Decimal("650000")

    def test_growth_identity(self, monthly_saver):
        result = future_value(FutureValueRequest(**monthly_saver))
        assert result.future_value == result.total_contributions + result.total_growth

    def test_zero_rate_is_linear(self):
        result = future_value(
            FutureValueRequest(
                principal=Decimal("1000"),
                periodic_contribution=Decimal("100"),
                annual_rate_percent=Decimal("0"),
                years=Decimal("10"),
            )
        )
        assert result.future_value == Decimal("13000.00")
        assert result.total_growth == Decimal("0.00")

    def test_real_value_with_inflation(self, monthly_saver):
        result = future_value(
            FutureValueRequest(**monthly_saver, inflation_rate_percent=Decimal("3"))
        )
        assert result.real_value == Decimal("284744.84")

    def test_no_inflation_means_no_real_value(self, monthly_saver):
        assert future_value(FutureValueRequest(**monthly_saver)).real_value is None

    def test_rejects_bad_inputs_together(self):
        request = FutureValueRequest(
            principal=Decimal("-1"),
            annual_rate_percent=Decimal("5"),
            years=Decimal("0"),
            periods_per_year=7,
        )
        with pytest.raises(InvalidInput) as exc_info:
            future_value(request)
        assert len(exc_info.value.violations) == 3

    def test_rate_that_wipes_out_balance(self):
        request = FutureValueRequest(
            principal=Decimal("100"), annual_rate_percent=Decimal("-100"), years=Decimal("1"), periods_per_year=1
        )
        with pytest.raises(InvalidInput):
            future_value(request)


class TestContributionForGoal:
    """Test goal planning"""

    def test_required_contribution(self):
        result = contribution_for_goal(
            ContributionForGoalRequest(
                principal=Decimal("10000"),
                target_value=Decimal("1000000"),
                annual_rate_percent=Decimal("7"),
                years=Decimal("30"),
            )
        )
        assert result.required_contribution == Decimal("753.16")
        assert not result.goal_already_met
        assert result.future_value == result.total_contributions + result.total_growth

    def test_goal_already_met(self):
        result = contribution_for_goal(
            ContributionForGoalRequest(
                principal=Decimal("100000"),
                target_value=Decimal("50000"),
                annual_rate_percent=Decimal("5"),
                years=Decimal("10"),
            )
        )
        assert result.goal_already_met
        assert result.required_contribution == Decimal("0.00")

    def test_zero_rate(self):
        result = contribution_for_goal(
            ContributionForGoalRequest(
                principal=Decimal("0"),
                target_value=Decimal("1200"),
                annual_rate_percent=Decimal("0"),
                years=Decimal("1"),
            )
        )
        assert result.required_contribution == Decimal("100.00")


class TestTimeToGoal:
    """Test time-to-goal solving"""

    def test_inverts_future_value(self):
        result = time_to_goal(
            TimeToGoalRequest(
                principal=Decimal("10000"),
                periodic_contribution=Decimal("500"),
                target_value=Decimal("691150.47"),
                annual_rate_percent=Decimal("7"),
            )
        )
        assert result.reachable
        assert result.periods == 360
        assert result.years == Decimal("30.00")

    def test_zero_rate(self):
        result = time_to_goal(
            TimeToGoalRequest(
                principal=Decimal("1000"),
                periodic_contribution=Decimal("300"),
                target_value=Decimal("2000"),
                annual_rate_percent=Decimal("0"),
            )
        )
        # 1000 / 300 = 3.33 periods -> 4 whole periods
        assert result.periods == 4
        assert result.years == Decimal("0.28")

    def test_already_there(self):
        result = time_to_goal(
            TimeToGoalRequest(
                principal=Decimal("5000"),
                target_value=Decimal("1000"),
                annual_rate_percent=Decimal("5"),
            )
        )
        assert result.reachable
        assert result.periods == 0

    def test_unreachable_without_growth_or_contributions(self):
        result = time_to_goal(
            TimeToGoalRequest(
                principal=Decimal("1000"),
                target_value=Decimal("2000"),
                annual_rate_percent=Decimal("0"),
            )
        )
        assert result == TimeToGoalResult(reachable=False)

    def test_unreachable_with_negative_rate(self):
        # contributions are eaten by a -10% rate before reaching 100k
        result = time_to_goal(
            TimeToGoalRequest(
                principal=Decimal("0"),
                periodic_contribution=Decimal("10"),
                target_value=Decimal("100000"),
                annual_rate_percent=Decimal("-10"),
            )
        )
        assert not result.reachable
        assert result.periods is None


class TestDispatch:
    """Test tagged request parsing and dispatch"""

    def test_parse_and_project_each_mode(self, monthly_saver):
        fv = project(parse_projection_request({"mode": "future-value", **monthly_saver}))
        assert isinstance(fv, ProjectionResult)

        goal = project(
            parse_projection_request(
                {"mode": "goal-planning", "target_value": "100000", "annual_rate_percent": "5", "years": "10"}
            )
        )
        assert isinstance(goal, GoalPlanResult)

        ttg = project(
            parse_projection_request(
                {
                    "mode": "time-to-goal",
                    "principal": "1000",
                    "periodic_contribution": "100",
                    "target_value": "5000",
                    "annual_rate_percent": "6",
                }
            )
        )
        assert isinstance(ttg, TimeToGoalResult)

    def test_unknown_mode(self):
        with pytest.raises(InvalidInput):
            parse_projection_request({"mode": "guess", "years": "1"})

    def test_bad_field_reported_under_projection(self):
        with pytest.raises(InvalidInput) as exc_info:
            parse_projection_request({"mode": "future-value", "annual_rate_percent": "seven", "years": "1"})
        assert exc_info.value.context["calculator"] == "projection"
        assert any("annual_rate_percent" in v for v in exc_info.value.violations)

    def test_project_rejects_other_types(self):
        with pytest.raises(InvalidInput):
            project(object())

    def test_attempt_wraps_failure(self):
        outcome = attempt(
            future_value,
            FutureValueRequest(annual_rate_percent=Decimal("5"), years=Decimal("-1")),
        )
        assert outcome.result is None
        assert "years must be positive" in outcome.error


class TestRetirement:
    """Test retirement planner"""

    def test_projection_and_income(self):
        result = plan_retirement(
            RetirementInput(
                current_age=Decimal("30"),
                retirement_age=Decimal("65"),
                current_savings=Decimal("10000"),
                monthly_contribution=Decimal("500"),
                target_annual_income=Decimal("50000"),
            )
        )
        assert result.total_savings == Decimal("1015588.82")
        assert result.monthly_income == Decimal("3385.30")
        assert result.inflation_adjusted_target == Decimal("140693.12")
        assert not result.goal_met
        assert result.total_savings == result.total_contributions + result.investment_growth

    def test_goal_met(self):
        result = plan_retirement(
            RetirementInput(
                current_age=Decimal("30"),
                retirement_age=Decimal("65"),
                current_savings=Decimal("10000"),
                monthly_contribution=Decimal("500"),
                target_annual_income=Decimal("10000"),
            )
        )
        assert result.goal_met

    def test_retirement_age_must_follow_current_age(self):
        with pytest.raises(InvalidInput):
            plan_retirement(RetirementInput(current_age=Decimal("50"), retirement_age=Decimal("40")))
