"""Confidence intervals and convergence checks for simulated frequencies.

A simulated frequency f of one success count over n iterations is a
binomial proportion, so its standard error is sqrt(f * (1 - f) / n) and
shrinks as 1 / sqrt(n).
"""

import math
from dataclasses import dataclass
from decimal import Decimal
from typing import Dict, List, Optional, Sequence, Union

import numpy as np
import pandas as pd
from scipy import stats

from binomsim.core.config import ExperimentConfig
from binomsim.exact.calculator import ExactProbabilityCalculator
from binomsim.model.simulator import simulate
from binomsim.results.histogram import Histogram


# Default number of standard errors a simulated frequency may deviate
DEFAULT_N_SE: float = 3.0


def standard_error(probability: Union[float, Decimal], iterations: int) -> float:
    """Standard error of a frequency estimated from `iterations` samples."""
    if iterations <= 0:
        raise ValueError(f"iterations must be positive, got {iterations}")
    p = float(probability)
    return math.sqrt(max(p * (1.0 - p), 0.0) / iterations)


def frequency_ci(count: int, iterations: int, confidence: float = 0.95) -> Dict:
    """Normal-approximation confidence interval for a simulated frequency.

    Args:
        count: Experiments that produced the success count.
        iterations: Total experiments.
        confidence: Confidence level (default 0.95 for 95% CI).

    Returns:
        Dictionary containing:
        - mean: Observed frequency
        - se: Standard error
        - ci_lower: Lower bound of CI (clipped at 0)
        - ci_upper: Upper bound of CI (clipped at 1)
        - ci_half_width: Half-width of CI
        - n: Sample size
    """
    mean = count / iterations
    se = standard_error(mean, iterations)

    z_crit = stats.norm.ppf((1 + confidence) / 2)
    half_width = float(z_crit * se)

    return {
        "mean": mean,
        "se": se,
        "ci_lower": max(mean - half_width, 0.0),
        "ci_upper": min(mean + half_width, 1.0),
        "ci_half_width": half_width,
        "n": iterations,
    }


def within_tolerance(
    heuristic: Union[float, Decimal],
    exact: Union[float, Decimal],
    iterations: int,
    n_se: float = DEFAULT_N_SE,
) -> bool:
    """Check that a simulated frequency agrees with the exact probability.

    The tolerance is `n_se` standard errors of the estimator, taken at
    the exact probability.
    """
    se = standard_error(exact, iterations)
    return abs(float(heuristic) - float(exact)) <= n_se * se


def compare_distributions(
    histogram: Histogram,
    exact: Dict[int, Optional[Decimal]],
    n_se: float = DEFAULT_N_SE,
) -> pd.DataFrame:
    """Compare simulated frequencies with exact probabilities per count.

    Args:
        histogram: Simulated histogram.
        exact: Exact probability per success count; None marks an
            unavailable value.
        n_se: Tolerance in standard errors.

    Returns:
        DataFrame with columns: successes, frequency, exact, abs_error,
        se, within_tolerance. Unavailable exact values give NaN and
        within_tolerance False.
    """
    rows = []
    for k in histogram:
        frequency = histogram.frequency(k)
        p = exact.get(k)
        if p is None:
            rows.append({
                "successes": k,
                "frequency": frequency,
                "exact": np.nan,
                "abs_error": np.nan,
                "se": np.nan,
                "within_tolerance": False,
            })
            continue

        se = standard_error(p, histogram.iterations)
        rows.append({
            "successes": k,
            "frequency": frequency,
            "exact": float(p),
            "abs_error": abs(frequency - float(p)),
            "se": se,
            "within_tolerance": within_tolerance(frequency, p, histogram.iterations, n_se),
        })
    return pd.DataFrame(rows)


@dataclass
class ConvergenceResult:
    """Result of a convergence study.

    Attributes:
        target: Success count studied.
        exact: Exact probability of `target`.
        n_se: Tolerance in standard errors.
        results: DataFrame with columns: iterations, frequency, exact,
            abs_error, se, within_tolerance.
    """
    target: int
    exact: Decimal
    n_se: float
    results: pd.DataFrame

    def to_dataframe(self) -> pd.DataFrame:
        """Return results as DataFrame."""
        return self.results

    @property
    def converged(self) -> bool:
        """Whether every iteration level fell within tolerance."""
        return bool(self.results["within_tolerance"].all())

    def summary(self) -> str:
        """Human-readable summary of the study."""
        last = self.results.iloc[-1]
        return (
            f"P({self.target}) exact={float(self.exact):.6f}; "
            f"at {int(last['iterations'])} iterations "
            f"frequency={last['frequency']:.6f} "
            f"(error {last['abs_error']:.2e}, se {last['se']:.2e})"
        )


def convergence_study(
    config: ExperimentConfig,
    target: int,
    iteration_levels: Sequence[int] = (1_000, 10_000, 100_000, 1_000_000),
    n_se: float = DEFAULT_N_SE,
) -> ConvergenceResult:
    """Simulate at increasing iteration counts and track the error.

    Each level reuses `config` with only `iterations` changed, so a
    seeded config gives a reproducible study.

    Args:
        config: Base configuration.
        target: Success count to track.
        iteration_levels: Iteration counts to simulate, in order.
        n_se: Tolerance in standard errors.

    Returns:
        ConvergenceResult with one row per iteration level.

    Raises:
        ValueError: If iteration_levels is empty.
    """
    if not iteration_levels:
        raise ValueError("iteration_levels must contain at least one level")
    target = config.validate_target(target)
    exact = ExactProbabilityCalculator(config).probability_of(target)

    rows: List[Dict] = []
    for iterations in iteration_levels:
        histogram = simulate(config.with_iterations(iterations))
        frequency = histogram.frequency(target)
        rows.append({
            "iterations": iterations,
            "frequency": frequency,
            "exact": float(exact),
            "abs_error": abs(frequency - float(exact)),
            "se": standard_error(exact, iterations),
            "within_tolerance": within_tolerance(frequency, exact, iterations, n_se),
        })

    return ConvergenceResult(
        target=target,
        exact=exact,
        n_se=n_se,
        results=pd.DataFrame(rows),
    )
