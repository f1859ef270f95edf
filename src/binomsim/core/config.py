"""Experiment configuration dataclass."""

import math
import numbers
from dataclasses import dataclass, replace
from typing import Optional

from binomsim.core.errors import ConfigurationError


# Experiments handed to a worker in one unit of work
DEFAULT_BLOCK_SIZE: int = 10_000


def _require_positive_int(value, name: str) -> None:
    """Reject booleans, non-integral numbers and values <= 0."""
    if isinstance(value, bool) or not isinstance(value, numbers.Integral):
        raise ConfigurationError(f"{name} must be an integer, got {value!r}")
    if value <= 0:
        raise ConfigurationError(f"{name} must be greater than 0, got {value}")


@dataclass(frozen=True)
class ExperimentConfig:
    """Configuration for a binomial experiment.

    Shared read-only by the simulator and the exact calculator. Every
    field is validated on construction so an invalid configuration never
    reaches a computation.

    Attributes:
        iterations: Number of simulated experiments.
        trials: Bernoulli draws per experiment (the largest possible
            success count).
        success_probability: Probability of success of a single draw,
            in (0, 1].
        random_seed: Master seed. None draws fresh OS entropy, so runs
            are not reproducible.
        n_workers: Worker processes for the simulation. None uses every
            available CPU; 1 runs inline.
        block_size: Experiments per unit of parallel work.
    """

    iterations: int = 100_000
    trials: int = 50
    success_probability: float = 0.95

    # Reproducibility
    random_seed: Optional[int] = None

    # Parallelism
    n_workers: Optional[int] = None
    block_size: int = DEFAULT_BLOCK_SIZE

    def __post_init__(self) -> None:
        _require_positive_int(self.iterations, "iterations")
        _require_positive_int(self.trials, "trials")

        p = self.success_probability
        if isinstance(p, bool) or not isinstance(p, numbers.Real):
            raise ConfigurationError(
                f"success_probability must be a real number, got {p!r}"
            )
        if math.isnan(p) or p <= 0.0 or p > 1.0:
            raise ConfigurationError(
                "success_probability must be between 0 (exclusive) and 1 "
                f"(inclusive), got {p}"
            )

        if self.random_seed is not None:
            if isinstance(self.random_seed, bool) or not isinstance(
                self.random_seed, numbers.Integral
            ):
                raise ConfigurationError(
                    f"random_seed must be an integer or None, got {self.random_seed!r}"
                )
            if self.random_seed < 0:
                raise ConfigurationError(
                    f"random_seed must be non-negative, got {self.random_seed}"
                )
        if self.n_workers is not None:
            _require_positive_int(self.n_workers, "n_workers")
        _require_positive_int(self.block_size, "block_size")

    @property
    def failure_probability(self) -> float:
        """Probability that a single draw fails."""
        return 1.0 - self.success_probability

    @property
    def expected_successes(self) -> float:
        """Mean of the binomial distribution, n * p."""
        return self.trials * self.success_probability

    def validate_target(self, target: int) -> int:
        """Check that a success count lies in [0, trials].

        Args:
            target: Success count to check.

        Returns:
            The target, unchanged.

        Raises:
            ConfigurationError: If the target is not an integer in range.
        """
        if isinstance(target, bool) or not isinstance(target, numbers.Integral):
            raise ConfigurationError(f"target must be an integer, got {target!r}")
        if not 0 <= target <= self.trials:
            raise ConfigurationError(
                f"target must be between 0 and {self.trials}, got {target}"
            )
        return int(target)

    def clone_with_seed(self, new_seed: Optional[int]) -> "ExperimentConfig":
        """Create a copy of this configuration with a different seed.

        Args:
            new_seed: The new random seed to use.

        Returns:
            A new, validated ExperimentConfig.
        """
        return replace(self, random_seed=new_seed)

    def with_iterations(self, iterations: int) -> "ExperimentConfig":
        """Create a copy of this configuration with a different iteration count."""
        return replace(self, iterations=iterations)
