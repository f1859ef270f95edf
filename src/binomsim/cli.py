"""Command-line entry point.

Example:
    python -m binomsim --iterations 100000 --trials 50 --probability 0.95 --target 43
"""

import argparse
import logging
import sys
from typing import List, Optional

from binomsim.core.config import ExperimentConfig
from binomsim.core.errors import SimulationError
from binomsim.exact.coefficient import CoefficientStrategy
from binomsim.exact.precision import PrecisionContext
from binomsim.experiment.runner import run_experiment

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="binomsim",
        description="Compare simulated and exact binomial probabilities.",
    )
    parser.add_argument("--iterations", type=int, default=100_000,
                        help="Number of simulated experiments")
    parser.add_argument("--trials", type=int, default=50,
                        help="Bernoulli draws per experiment")
    parser.add_argument("--probability", type=float, default=0.95,
                        help="Success probability of one draw, in (0, 1]")
    parser.add_argument("--target", type=int, default=43,
                        help="Success count to report both probabilities for")
    parser.add_argument("--seed", type=int, default=None,
                        help="Random seed for a reproducible run")
    parser.add_argument("--workers", type=int, default=None,
                        help="Worker processes (default: all CPUs)")
    parser.add_argument("--precision", type=int, default=34,
                        help="Significant digits of the exact calculation")
    parser.add_argument("--strategy", default=CoefficientStrategy.ARBITRARY.value,
                        choices=[s.value for s in CoefficientStrategy],
                        help="Binomial coefficient strategy")
    parser.add_argument("--log-level", default="WARNING",
                        choices=["DEBUG", "INFO", "WARNING", "ERROR"])
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        config = ExperimentConfig(
            iterations=args.iterations,
            trials=args.trials,
            success_probability=args.probability,
            random_seed=args.seed,
            n_workers=args.workers,
        )
        precision = PrecisionContext(digits=args.precision)
        report = run_experiment(
            config,
            args.target,
            precision=precision,
            strategy=CoefficientStrategy(args.strategy),
        )
    except ValueError as e:
        print(f"error: {e}", file=sys.stderr)
        return 2
    except SimulationError as e:
        logger.error(f"Simulation failed: {e}")
        return 1

    for line in report.format_lines():
        print(line)
    return 0
