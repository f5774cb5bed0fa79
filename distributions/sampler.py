"""
Return sampler: draws N paths of annual portfolio returns.

Input:  Distribution parameters (expected annual return, annual volatility)
        + a numpy Generator supplied by the caller
Output: (N × years) table of sampled annual returns, one row per path

Each row represents one plausible market future:
  Path 1: +9.1%, -3.4%, +14.0%, ...   (choppy)
  Path 2: -18.2%, +6.3%, +2.0%, ...   (early drawdown)
  Path 3: +12.5%, +11.0%, +7.7%, ...  (bull run)

Method:
  1. Two independent uniform draws per (path, year)
  2. Box–Muller: z = sqrt(-2 ln u1) * cos(2 pi u2) gives a standard normal
  3. annual return = mean + volatility * z

One return is drawn per year and reused for all twelve months of that year, so
a path keeps its regime for the whole year.
"""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np
import pandas as pd


@dataclass(frozen=True)
class ReturnParams:
    """Annual return distribution, as fractions (0.07 means 7%)."""
    mean: float = 0.07
    volatility: float = 0.15

    @classmethod
    def from_percent(cls, mean_percent: float, volatility_percent: float) -> "ReturnParams":
        return cls(mean=float(mean_percent) / 100.0, volatility=float(volatility_percent) / 100.0)

    def summary(self) -> pd.DataFrame:
        return pd.DataFrame([
            {"Variable": "Annual Return", "Mean": self.mean, "StdDev": self.volatility},
        ])


@dataclass
class SampledReturns:
    """
    Output of sampling: annual returns for N paths.

    This is the (N × years) table the Monte Carlo runner compounds.
    """
    annual_returns: np.ndarray  # shape (n_paths, years)

    @property
    def n_paths(self) -> int:
        return self.annual_returns.shape[0]

    @property
    def years(self) -> int:
        return self.annual_returns.shape[1]

    def to_dataframe(self) -> pd.DataFrame:
        df = pd.DataFrame(
            self.annual_returns,
            columns=[f"year_{y + 1}" for y in range(self.years)],
        )
        df.insert(0, "path_id", np.arange(self.n_paths))
        return df

    def get_path(self, path_idx: int) -> list:
        return [float(r) for r in self.annual_returns[path_idx]]


def box_muller(rng: np.random.Generator, size) -> np.ndarray:
    """Standard normal deviates from pairs of uniforms (cosine branch only)."""
    # rng.random() is in [0, 1); flip it so log never sees zero
    u1 = 1.0 - rng.random(size)
    u2 = rng.random(size)
    return np.sqrt(-2.0 * np.log(u1)) * np.cos(2.0 * np.pi * u2)


class ReturnSampler:
    """
    Generates N paths of annual returns from distribution parameters.

    Usage:
        params = ReturnParams.from_percent(7, 15)
        sampler = ReturnSampler(params, np.random.default_rng(42))
        paths = sampler.sample(n_paths=1000, years=30)
        # paths.annual_returns → (1000, 30) array
    """

    def __init__(self, params: ReturnParams, rng: np.random.Generator):
        self.params = params
        self.rng = rng

    def sample(self, n_paths: int, years: int) -> SampledReturns:
        if n_paths <= 0 or years <= 0:
            raise ValueError(f"n_paths and years must be positive, got {n_paths} and {years}")

        z = box_muller(self.rng, (n_paths, years))
        returns = self.params.mean + self.params.volatility * z
        return SampledReturns(annual_returns=returns)
