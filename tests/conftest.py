"""Pytest fixtures for binomsim tests."""

import pytest

from binomsim.core.config import ExperimentConfig


@pytest.fixture
def default_seed() -> int:
    """Default random seed for reproducible tests."""
    return 42


@pytest.fixture
def small_config(default_seed) -> ExperimentConfig:
    """Small seeded configuration that runs inline."""
    return ExperimentConfig(
        iterations=5_000,
        trials=20,
        success_probability=0.3,
        random_seed=default_seed,
        n_workers=1,
        block_size=1_000,
    )
