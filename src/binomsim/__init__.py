"""binomsim - Monte-Carlo and exact binomial distributions.

Simulates repeated batches of Bernoulli trials in parallel and compares
the observed success-count frequencies with the closed-form probability
mass function computed in fixed-precision decimal arithmetic.
"""

__version__ = "0.1.0"

from binomsim.core.config import ExperimentConfig
from binomsim.exact.calculator import ExactProbabilityCalculator, probability_of
from binomsim.experiment.runner import run_experiment
from binomsim.model.simulator import simulate

__all__ = [
    "ExperimentConfig",
    "ExactProbabilityCalculator",
    "probability_of",
    "run_experiment",
    "simulate",
    "__version__",
]
