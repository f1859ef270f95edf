"""Experiment runner: simulate, time and compare with the exact PMF."""

import logging
import time
from typing import Optional

from binomsim.core.config import ExperimentConfig
from binomsim.core.errors import ProbabilityUnavailableError
from binomsim.exact.calculator import ExactProbabilityCalculator
from binomsim.exact.coefficient import CoefficientStrategy
from binomsim.exact.precision import DEFAULT_PRECISION, PrecisionContext
from binomsim.model.simulator import ProgressCallback, simulate
from binomsim.results.report import ExperimentReport

logger = logging.getLogger(__name__)


def run_experiment(
    config: ExperimentConfig,
    target: int,
    precision: PrecisionContext = DEFAULT_PRECISION,
    strategy: CoefficientStrategy = CoefficientStrategy.ARBITRARY,
    progress_callback: Optional[ProgressCallback] = None,
) -> ExperimentReport:
    """Simulate the experiment and compare it with the exact probability.

    Args:
        config: Experiment configuration.
        target: Success count to report both probabilities for.
        precision: Precision policy for both probabilities.
        strategy: Coefficient strategy of the exact calculator.
        progress_callback: Optional callback(completed_blocks,
            total_blocks), forwarded to the simulator.

    Returns:
        ExperimentReport with the full histogram and both probabilities.
        The exact probability is None when it cannot be represented.

    Raises:
        ConfigurationError: If target is outside [0, trials]. Checked
            before the simulation starts.
        SimulationError: If a simulation worker fails.
    """
    target = config.validate_target(target)

    start_time = time.perf_counter()
    histogram = simulate(config, progress_callback=progress_callback)
    elapsed = time.perf_counter() - start_time

    heuristic = histogram.frequency_decimal(target, precision)

    calculator = ExactProbabilityCalculator(config, precision, strategy)
    try:
        exact = calculator.probability_of(target)
    except ProbabilityUnavailableError as e:
        logger.warning(f"Exact probability for {target} unavailable: {e}")
        exact = None

    logger.info(
        f"Experiment finished in {elapsed * 1000:.1f}ms: "
        f"heuristic={float(heuristic):.6f}, "
        f"exact={'n/a' if exact is None else format(float(exact), '.6f')}"
    )

    return ExperimentReport(
        config=config,
        histogram=histogram,
        elapsed_seconds=elapsed,
        target=target,
        heuristic_probability=heuristic,
        exact_probability=exact,
        precision=precision,
    )
