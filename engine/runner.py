"""
Monte Carlo runner: compounds sampled return paths into a distribution of ending values.

Per path and year:
  1. apply the year's sampled return to the balance
  2. twelve times: add the monthly contribution, then grow by (1 + annual/12)

Paths are vectorized within a chunk. Every chunk draws from its own child
generator spawned from the caller's Generator, so the output depends only on
the seed and ``paths_per_chunk``, never on how many workers ran the chunks.
Chunk results are concatenated and sorted once before percentiles are read.
"""

from __future__ import annotations

import math
from concurrent.futures import ProcessPoolExecutor
from dataclasses import dataclass, field
from decimal import ROUND_HALF_UP, Decimal
from typing import List, Optional, Tuple

import numpy as np
import pandas as pd
from pydantic import BaseModel, ConfigDict

from core.config import DEFAULT_CONFIG, EngineConfig
from core.errors import InvalidInput
from core.logconfig import get_logger
from core.utils import CENT, HUNDRED, ZERO, decimal_guard, float_to_money, quantize_money
from core.validation import ValidationResult
from distributions.percentiles import percentile_table, summarize_distribution
from distributions.sampler import ReturnParams, ReturnSampler

log = get_logger(__name__)


class MonteCarloInput(BaseModel):
    model_config = ConfigDict(frozen=True)

    initial_amount: Decimal
    monthly_contribution: Decimal = ZERO
    years: int
    expected_annual_return_percent: Decimal
    annual_volatility_percent: Decimal
    simulation_count: int = 1_000


@dataclass(frozen=True)
class ConfidenceBand:
    low: Decimal
    high: Decimal

    @property
    def width(self) -> Decimal:
        return self.high - self.low


@dataclass(frozen=True)
class MonteCarloResult:
    median: Decimal
    p5: Decimal
    p25: Decimal
    p75: Decimal
    p95: Decimal
    mean: Decimal
    success_rate_percent: Decimal
    confidence_band_50: ConfidenceBand
    confidence_band_90: ConfidenceBand
    total_contributed: Decimal
    simulation_count: int
    # sorted ascending
    ending_values: np.ndarray = field(repr=False, compare=False)

    @property
    def worst_case(self) -> Decimal:
        return self.p5

    @property
    def best_case(self) -> Decimal:
        return self.p95

    def summary(self) -> pd.DataFrame:
        return summarize_distribution(self.ending_values)


def simulate_chunk(
    initial: float,
    monthly: float,
    years: int,
    params: ReturnParams,
    n_paths: int,
    rng: np.random.Generator,
) -> np.ndarray:
    """Ending balances for ``n_paths`` paths (unsorted)."""
    returns = ReturnSampler(params, rng).sample(n_paths, years).annual_returns

    balances = np.full(n_paths, initial, dtype=float)
    # overflow shows up as inf and is rejected by the caller
    with np.errstate(over="ignore", invalid="ignore"):
        for year in range(years):
            annual = returns[:, year]
            balances *= 1.0 + annual
            monthly_growth = 1.0 + annual / 12.0
            for _ in range(12):
                balances = (balances + monthly) * monthly_growth
    return balances


def _run_chunk(job: Tuple[float, float, int, ReturnParams, int, np.random.Generator]) -> np.ndarray:
    return simulate_chunk(*job)


def _chunk_sizes(total: int, per_chunk: int) -> List[int]:
    n_chunks = math.ceil(total / per_chunk)
    sizes = [per_chunk] * n_chunks
    sizes[-1] = total - per_chunk * (n_chunks - 1)
    return sizes


def run_monte_carlo(
    inputs: MonteCarloInput,
    *,
    rng: Optional[np.random.Generator] = None,
    seed: Optional[int] = None,
    workers: int = 1,
    config: EngineConfig = DEFAULT_CONFIG,
) -> MonteCarloResult:
    """
    Simulate ``simulation_count`` portfolio paths and summarize the ending values.

    Parameters
    ----------
    inputs : MonteCarloInput
        Amounts in money, rates in percent (7 means 7%)
    rng : np.random.Generator, optional
        Source of randomness. Takes precedence over ``seed``.
    seed : int, optional
        Seed for a fresh generator; falls back to ``config.seed``
    workers : int
        Processes used to run chunks. 1 runs everything in the calling process.

    ``simulation_count`` above ``config.max_simulation_count`` is capped (with a
    warning). Success rate is the share of paths ending strictly above the total
    contributed capital ``initial + monthly * 12 * years``.
    """
    check = ValidationResult("run_monte_carlo")
    check.require_positive("initial_amount", inputs.initial_amount)
    check.require_non_negative("monthly_contribution", inputs.monthly_contribution)
    if inputs.years <= 0:
        check.errors.append(f"years must be positive, got {inputs.years}")
    if inputs.simulation_count <= 0:
        check.errors.append(f"simulation_count must be positive, got {inputs.simulation_count}")
    check.require_non_negative("annual_volatility_percent", inputs.annual_volatility_percent)
    if inputs.expected_annual_return_percent <= -HUNDRED:
        check.errors.append("expected_annual_return_percent must be greater than -100")
    if workers < 1:
        check.errors.append(f"workers must be at least 1, got {workers}")
    check.raise_if_invalid()

    n_paths = inputs.simulation_count
    if n_paths > config.max_simulation_count:
        log.warning(
            "simulation_count_capped",
            requested=n_paths,
            cap=config.max_simulation_count,
        )
        n_paths = config.max_simulation_count

    if rng is None:
        rng = np.random.default_rng(config.seed if seed is None else seed)

    params = ReturnParams.from_percent(
        inputs.expected_annual_return_percent, inputs.annual_volatility_percent
    )
    initial = float(inputs.initial_amount)
    monthly = float(inputs.monthly_contribution)

    sizes = _chunk_sizes(n_paths, config.paths_per_chunk)
    jobs = [
        (initial, monthly, inputs.years, params, size, child)
        for size, child in zip(sizes, rng.spawn(len(sizes)))
    ]

    if workers > 1 and len(jobs) > 1:
        with ProcessPoolExecutor(max_workers=min(workers, len(jobs))) as pool:
            chunks = list(pool.map(_run_chunk, jobs))
    else:
        chunks = [_run_chunk(job) for job in jobs]

    ending = np.sort(np.concatenate(chunks))
    if not np.isfinite(ending).all():
        raise InvalidInput.from_violations(
            "run_monte_carlo",
            ["simulated balances overflow double precision; lower years or expected_annual_return_percent"],
        )

    with decimal_guard("run_monte_carlo"):
        contributed = quantize_money(
            inputs.initial_amount + inputs.monthly_contribution * 12 * inputs.years
        )
        successes = int(np.count_nonzero(ending > float(contributed)))
        success_rate = (Decimal(successes) * HUNDRED / Decimal(n_paths)).quantize(
            CENT, rounding=ROUND_HALF_UP
        )
        pct = {
            p: float_to_money(v)
            for p, v in percentile_table(ending, config.percentile_levels).items()
        }
        mean = float_to_money(np.mean(ending))

    log.debug(
        "monte_carlo_complete",
        simulation_count=n_paths,
        chunks=len(jobs),
        workers=workers,
        median=str(pct[50]),
        success_rate_percent=str(success_rate),
    )
    return MonteCarloResult(
        median=pct[50],
        p5=pct[5],
        p25=pct[25],
        p75=pct[75],
        p95=pct[95],
        mean=mean,
        success_rate_percent=success_rate,
        confidence_band_50=ConfidenceBand(low=pct[25], high=pct[75]),
        confidence_band_90=ConfidenceBand(low=pct[5], high=pct[95]),
        total_contributed=contributed,
        simulation_count=n_paths,
        ending_values=ending,
    )
