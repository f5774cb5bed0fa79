"""Tests for the loan amortization engine"""

from decimal import Decimal
from itertools import product

import pytest
from structlog.testing import capture_logs

from core.errors import InvalidInput
from core.schema import AMORTIZATION_COLUMNS
from engine.amortization import AmortizationInput, amortize, run_schedule, term_periods


class TestMortgageSchedule:
    """Test a 30-year fixed mortgage"""

    def test_payment_and_totals(self, mortgage):
        result = amortize(AmortizationInput(**mortgage))
        assert result.periodic_payment == Decimal("1798.65")
        assert result.total_interest == Decimal("347515.44")
        assert result.total_paid == Decimal("647515.44")
        assert result.payoff_period == 360
        assert result.prepayment_interest_saved is None

    def test_principal_portions_sum_to_principal(self, mortgage):
        result = amortize(AmortizationInput(**mortgage))
        assert sum(e.principal_portion for e in result.schedule) == Decimal("300000.00")

    def test_ends_at_zero(self, mortgage):
        result = amortize(AmortizationInput(**mortgage))
        assert result.schedule[-1].remaining_balance == Decimal("0")
        assert all(e.remaining_balance > 0 for e in result.schedule[:-1])

    def test_last_payment_sweeps_rounding_residue(self, mortgage):
        last = amortize(AmortizationInput(**mortgage)).schedule[-1]
        assert last.payment == Decimal("1800.09")
        assert last.interest_portion == Decimal("8.96")

    def test_first_period_split(self, mortgage):
        first = amortize(AmortizationInput(**mortgage)).schedule[0]
        assert first.interest_portion == Decimal("1500.00")
        assert first.principal_portion == Decimal("298.65")
        assert first.remaining_balance == Decimal("299701.35")

    def test_to_dataframe(self, mortgage):
        df = amortize(AmortizationInput(**mortgage)).to_dataframe()
        assert list(df.columns) == list(AMORTIZATION_COLUMNS)
        assert len(df) == 360
        assert df["Balance"].iloc[-1] == 0.0


class TestPrepayment:
    """Test lump-sum prepayment"""

    def test_saves_interest_and_periods(self, mortgage):
        result = amortize(
            AmortizationInput(**mortgage, prepayment=Decimal("50000"), prepayment_period=12)
        )
        assert result.prepayment_interest_saved > 0
        assert result.periods_saved > 0
        assert result.payoff_period == 360 - result.periods_saved
        assert result.schedule[11].principal_portion > Decimal("50000")
        assert result.schedule[-1].remaining_balance == Decimal("0")
        assert sum(e.principal_portion for e in result.schedule) == Decimal("300000.00")

    def test_savings_match_base_difference(self, mortgage):
        base = amortize(AmortizationInput(**mortgage))
        prepaid = amortize(
            AmortizationInput(**mortgage, prepayment=Decimal("50000"), prepayment_period=12)
        )
        assert prepaid.prepayment_interest_saved == base.total_interest - prepaid.total_interest

    def test_prepayment_covering_the_balance(self):
        result = amortize(
            AmortizationInput(
                principal=Decimal("10000"),
                annual_rate_percent=Decimal("5"),
                term_years=Decimal("5"),
                prepayment=Decimal("20000"),
                prepayment_period=3,
            )
        )
        assert result.payoff_period == 3
        assert result.schedule[-1].remaining_balance == Decimal("0")

    def test_prepayment_after_term_is_ignored(self, mortgage):
        with capture_logs() as logs:
            result = amortize(
                AmortizationInput(**mortgage, prepayment=Decimal("1000"), prepayment_period=400)
            )
        assert result.prepayment_interest_saved == Decimal("0")
        assert result.periods_saved == 0
        assert result.total_interest == Decimal("347515.44")
        assert any(e["event"] == "amortization_degraded" and e["log_level"] == "warning" for e in logs)


class TestEdgeCases:
    """Test degenerate loans and guards"""

    def test_zero_rate(self):
        result = amortize(
            AmortizationInput(principal=Decimal("12000"), annual_rate_percent=Decimal("0"), term_years=Decimal("1"))
        )
        assert result.periodic_payment == Decimal("1000.00")
        assert result.total_interest == Decimal("0")
        assert result.payoff_period == 12

    def test_fractional_term_rounds_up(self):
        assert term_periods(Decimal("1.5")) == 18
        assert term_periods(Decimal("0.01")) == 1
        assert term_periods(Decimal("2"), 1) == 2

    def test_schedule_truncation_keeps_totals(self, mortgage):
        full = amortize(AmortizationInput(**mortgage))
        short = amortize(AmortizationInput(**mortgage, max_schedule_entries=12))
        assert len(short.schedule) == 12
        assert short.total_interest == full.total_interest
        assert short.payoff_period == 360

    def test_run_schedule_never_exceeds_periods(self):
        entries = run_schedule(Decimal("1000"), Decimal("0.01"), Decimal("10"), 6)
        assert len(entries) == 6
        assert entries[-1].remaining_balance == Decimal("0")

    def test_rejects_invalid_loan(self):
        with pytest.raises(InvalidInput) as exc_info:
            amortize(
                AmortizationInput(
                    principal=Decimal("0"),
                    annual_rate_percent=Decimal("-1"),
                    term_years=Decimal("0"),
                    prepayment_period=0,
                )
            )
        assert len(exc_info.value.violations) == 4

    def test_principal_beyond_cent_precision(self):
        with pytest.raises(InvalidInput, match="non-finite"):
            amortize(
                AmortizationInput(
                    principal=Decimal("1e27"),
                    annual_rate_percent=Decimal("5"),
                    term_years=Decimal("30"),
                )
            )


class TestScheduleProperties:
    """Test schedule invariants across a grid of loans"""

    @pytest.mark.parametrize(
        "principal,rate,term,prepayment",
        list(
            product(
                ["1000", "250000.55"],
                ["0", "3.5", "6", "18"],
                ["1", "2.5", "15", "30"],
                [None, ("5000", 6), ("20000", 24)],
            )
        ),
    )
    def test_invariants(self, principal, rate, term, prepayment):
        extra = {}
        if prepayment is not None:
            extra = {"prepayment": Decimal(prepayment[0]), "prepayment_period": prepayment[1]}
        result = amortize(
            AmortizationInput(
                principal=Decimal(principal),
                annual_rate_percent=Decimal(rate),
                term_years=Decimal(term),
                **extra,
            )
        )
        schedule = result.schedule

        assert sum(e.principal_portion for e in schedule) == Decimal(principal)
        assert schedule[-1].remaining_balance == Decimal("0")
        assert all(e.remaining_balance > 0 for e in schedule[:-1])
        assert all(e.principal_portion >= 0 and e.interest_portion >= 0 for e in schedule)
        assert result.payoff_period == len(schedule) <= term_periods(Decimal(term))
        assert result.total_paid == result.total_interest + Decimal(principal)

        if prepayment is None:
            assert result.prepayment_interest_saved is None
        else:
            assert result.prepayment_interest_saved >= 0
            assert result.periods_saved >= 0
