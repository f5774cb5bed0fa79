"""
Allocation models: age-based asset-allocation heuristic and the rebalancing diff calculator.
"""

from .heuristic import (
    AllocationProfile,
    AllocationTarget,
    RiskClassification,
    classify_risk,
    recommend_allocation,
)
from .rebalancing import (
    AllocationWeights,
    RebalanceInput,
    RebalanceLeg,
    RebalancePlan,
    plan_rebalance,
)

__all__ = [
    "AllocationProfile",
    "AllocationTarget",
    "RiskClassification",
    "classify_risk",
    "recommend_allocation",
    "AllocationWeights",
    "RebalanceInput",
    "RebalanceLeg",
    "RebalancePlan",
    "plan_rebalance",
]
