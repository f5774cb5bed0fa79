"""
Aggregate N simulated ending values into distribution summaries.

Percentiles are nearest-rank on the sorted values (index = floor(p/100 * N),
clamped to the last element), never interpolated, so a seeded run reproduces
the same figures exactly.
"""

from __future__ import annotations

from typing import Dict, Sequence

import numpy as np
import pandas as pd

from core.utils import excel_round


def nearest_rank(sorted_values: np.ndarray, percentile: float) -> float:
    n = len(sorted_values)
    if n == 0:
        raise ValueError("cannot take a percentile of an empty sample")
    idx = min(int(np.floor(percentile * n / 100.0)), n - 1)
    return float(sorted_values[idx])


def percentile_table(
    sorted_values: np.ndarray,
    levels: Sequence[int] = (5, 25, 50, 75, 95),
) -> Dict[int, float]:
    """{level: value} for each requested level; ``sorted_values`` must be ascending."""
    return {p: nearest_rank(sorted_values, p) for p in levels}


def summarize_distribution(
    values: np.ndarray,
    *,
    label: str = "Ending Value",
    levels: Sequence[int] = (5, 25, 50, 75, 95),
) -> pd.DataFrame:
    """
    One-row summary table: mean, spread and nearest-rank percentiles.

    Columns: Metric, Mean, Std Dev, Min, P05..P95, Max. Figures are rounded to
    cents (half away from zero) for display.
    """
    ordered = np.sort(np.asarray(values, dtype=float))
    row = {
        "Metric": label,
        "Mean": float(np.mean(ordered)),
        "Std Dev": float(np.std(ordered)),
        "Min": float(ordered[0]),
    }
    for p, value in percentile_table(ordered, levels).items():
        row[f"P{p:02d}"] = value
    row["Max"] = float(ordered[-1])

    table = pd.DataFrame([row])
    numeric = table.columns.drop("Metric")
    table[numeric] = excel_round(table[numeric].to_numpy(), 2)
    return table
