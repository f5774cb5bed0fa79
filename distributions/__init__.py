"""
Return distributions for Monte Carlo: Box–Muller sampling and nearest-rank aggregation.
"""

from .percentiles import nearest_rank, percentile_table, summarize_distribution
from .sampler import ReturnParams, ReturnSampler, SampledReturns, box_muller

__all__ = [
    "ReturnParams",
    "ReturnSampler",
    "SampledReturns",
    "box_muller",
    "nearest_rank",
    "percentile_table",
    "summarize_distribution",
]
