"""Core foundation layer: configuration, errors, Bernoulli sampling."""

from binomsim.core.config import ExperimentConfig
from binomsim.core.errors import (
    BinomsimError,
    CoefficientOverflowError,
    ConfigurationError,
    ProbabilityUnavailableError,
    SimulationError,
)
from binomsim.core.sampler import TrialSampler

__all__ = [
    "ExperimentConfig",
    "TrialSampler",
    "BinomsimError",
    "ConfigurationError",
    "SimulationError",
    "ProbabilityUnavailableError",
    "CoefficientOverflowError",
]
