from __future__ import annotations

from enum import Enum
from typing import Tuple

# Asset buckets shared by the allocation heuristic and the rebalancer, in display order.
ASSET_CLASSES: Tuple[str, ...] = (
    "stocks",
    "bonds",
    "cash",
    "alternatives",
)

# Column order for amortization schedule exports (AmortizationResult.to_dataframe()).
AMORTIZATION_COLUMNS: Tuple[str, ...] = (
    "Period",
    "Payment",
    "Principal",
    "Interest",
    "Balance",
)


class RiskTolerance(str, Enum):
    CONSERVATIVE = "conservative"
    MODERATE = "moderate"
    AGGRESSIVE = "aggressive"


class InvestmentGoal(str, Enum):
    RETIREMENT = "retirement"
    WEALTH = "wealth"
    INCOME = "income"
    PRESERVATION = "preservation"


class RebalanceAction(str, Enum):
    BUY = "buy"
    SELL = "sell"
    HOLD = "hold"


class LoanType(str, Enum):
    HOME = "home"
    CAR = "car"
    PERSONAL = "personal"


class PaymentStrategy(str, Enum):
    MINIMUM = "minimum"
    FIXED = "fixed"
    AGGRESSIVE = "aggressive"


class CompoundingFrequency(str, Enum):
    YEARLY = "yearly"
    QUARTERLY = "quarterly"
    MONTHLY = "monthly"

    @property
    def periods_per_year(self) -> int:
        return {"yearly": 1, "quarterly": 4, "monthly": 12}[self.value]
