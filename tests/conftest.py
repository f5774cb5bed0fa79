"""Pytest configuration and shared fixtures."""

from decimal import Decimal

import numpy as np
import pytest

from core.config import EngineConfig


@pytest.fixture
def config() -> EngineConfig:
    """Engine config with a small chunk size so multi-chunk paths are exercised."""
    return EngineConfig(paths_per_chunk=250)


@pytest.fixture
def rng() -> np.random.Generator:
    return np.random.default_rng(1234)


@pytest.fixture
def mortgage() -> dict:
    """30-year fixed mortgage: 300k at 6%."""
    return {
        "principal": Decimal("300000"),
        "annual_rate_percent": Decimal("6"),
        "term_years": Decimal("30"),
    }


@pytest.fixture
def monthly_saver() -> dict:
    """10k start, 500/month, 7% for 30 years."""
    return {
        "principal": Decimal("10000"),
        "periodic_contribution": Decimal("500"),
        "annual_rate_percent": Decimal("7"),
        "years": Decimal("30"),
    }


@pytest.fixture
def monte_carlo_inputs() -> dict:
    return {
        "initial_amount": Decimal("10000"),
        "monthly_contribution": Decimal("500"),
        "years": 10,
        "expected_annual_return_percent": Decimal("7"),
        "annual_volatility_percent": Decimal("15"),
        "simulation_count": 1000,
    }
