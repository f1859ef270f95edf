"""Bernoulli trial sampling."""

from typing import Union

import numpy as np


SeedLike = Union[None, int, np.random.SeedSequence]


class TrialSampler:
    """Draw Bernoulli outcomes from a uniform random source.

    A draw succeeds when a uniform value in [0, 1) is <= p. The sampler
    owns its generator, so one instance must not be shared across
    processes or threads; give each worker its own.

    Attributes:
        success_probability: Probability of success, in (0, 1].
        rng: NumPy random generator providing the uniform values.
    """

    def __init__(self, success_probability: float, rng: np.random.Generator) -> None:
        """Initialize sampler.

        Args:
            success_probability: Probability of success of one draw.
            rng: NumPy random generator.
        """
        self.success_probability = float(success_probability)
        self.rng = rng

    @classmethod
    def from_seed(cls, success_probability: float, seed: SeedLike = None) -> "TrialSampler":
        """Create a sampler with a fresh PCG64 generator.

        Args:
            success_probability: Probability of success of one draw.
            seed: Integer seed, SeedSequence, or None for OS entropy.

        Returns:
            A new TrialSampler.
        """
        return cls(success_probability, np.random.default_rng(seed))

    def draw(self) -> bool:
        """Draw a single Bernoulli outcome."""
        return bool(self.rng.random() <= self.success_probability)

    def run_experiment(self, trials: int) -> int:
        """Count successes over one experiment of `trials` draws."""
        return int(self.count_successes(trials, 1)[0])

    def count_successes(self, trials: int, size: int) -> np.ndarray:
        """Run `size` independent experiments of `trials` draws each.

        Args:
            trials: Draws per experiment.
            size: Number of experiments.

        Returns:
            Integer array of length `size` with the success count of
            each experiment, every value in [0, trials].
        """
        uniforms = self.rng.random((size, trials))
        return np.count_nonzero(uniforms <= self.success_probability, axis=1)
