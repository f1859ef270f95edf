"""Closed-form binomial probabilities under a fixed precision policy."""

import logging
from decimal import Decimal
from typing import Dict, Optional

from binomsim.core.config import ExperimentConfig
from binomsim.core.errors import ProbabilityUnavailableError
from binomsim.exact.coefficient import CoefficientStrategy, binomial_coefficient
from binomsim.exact.precision import (
    DEFAULT_PRECISION,
    TRAPPED_SIGNALS,
    PrecisionContext,
    to_decimal,
)

logger = logging.getLogger(__name__)


class ExactProbabilityCalculator:
    """Compute P(k) = C(n, k) * p^k * (1 - p)^(n - k).

    Every intermediate (both powers, the coefficient and the two
    multiplications) is rounded under one decimal context, so the same
    inputs always give the same digits.

    Attributes:
        config: Experiment configuration; only `trials` and
            `success_probability` are read.
        precision: Digits and rounding of every operation.
        strategy: How C(n, k) is computed.
    """

    def __init__(
        self,
        config: ExperimentConfig,
        precision: PrecisionContext = DEFAULT_PRECISION,
        strategy: CoefficientStrategy = CoefficientStrategy.ARBITRARY,
    ) -> None:
        self.config = config
        self.precision = precision
        self.strategy = CoefficientStrategy(strategy)

        self._p = to_decimal(config.success_probability)

    @property
    def trials(self) -> int:
        return self.config.trials

    def probability_of(self, k: int) -> Decimal:
        """Exact probability of exactly k successes.

        Args:
            k: Success count in [0, trials].

        Returns:
            The probability, rounded to `precision.digits` digits.

        Raises:
            ValueError: If k is outside [0, trials].
            CoefficientOverflowError: If the bounded strategy cannot
                represent C(n, k).
            ProbabilityUnavailableError: If an operation cannot be
                represented under the precision policy.
        """
        n = self.trials
        k = self.config.validate_target(k)
        ctx = self.precision.context()

        coefficient = binomial_coefficient(n, k, self.strategy, ctx)
        try:
            success = self._power(ctx, self._p, k)
            failure = self._power(ctx, ctx.subtract(Decimal(1), self._p), n - k)
            return ctx.multiply(ctx.multiply(Decimal(coefficient), success), failure)
        except TRAPPED_SIGNALS as e:
            raise ProbabilityUnavailableError(
                f"P({k}) for n={n}, p={self._p} is not representable: {e!r}"
            ) from e

    @staticmethod
    def _power(ctx, base: Decimal, exponent: int) -> Decimal:
        # x^0 is 1 by definition; 0^0 would otherwise be InvalidOperation
        if exponent == 0:
            return Decimal(1)
        return ctx.power(base, exponent)

    def try_probability_of(self, k: int) -> Optional[Decimal]:
        """Exact probability of k, or None when it cannot be computed."""
        try:
            return self.probability_of(k)
        except ProbabilityUnavailableError as e:
            logger.warning(f"Exact probability for k={k} unavailable: {e}")
            return None

    def distribution(self) -> Dict[int, Optional[Decimal]]:
        """Exact probability of every success count 0..trials.

        A count whose computation fails maps to None; the others are
        still computed.
        """
        return {k: self.try_probability_of(k) for k in range(self.trials + 1)}

    def total_probability(self) -> Decimal:
        """Sum of the available probabilities over 0..trials."""
        ctx = self.precision.context()
        total = Decimal(0)
        for value in self.distribution().values():
            if value is not None:
                total = ctx.add(total, value)
        return total


def probability_of(
    config: ExperimentConfig,
    k: int,
    precision: PrecisionContext = DEFAULT_PRECISION,
    strategy: CoefficientStrategy = CoefficientStrategy.ARBITRARY,
) -> Decimal:
    """Exact probability of exactly k successes for `config`."""
    return ExactProbabilityCalculator(config, precision, strategy).probability_of(k)
