"""Monte-Carlo simulation of repeated binomial experiments.

The run is split into blocks of `config.block_size` experiments. Each
block draws from its own generator, spawned from the run's root
SeedSequence by block index, and returns a partial histogram. Partials
are merged by summation once every block has finished, so workers never
share mutable state and a seeded run gives the same histogram for any
number of workers.
"""

import logging
import os
import time
from concurrent.futures import Executor, ProcessPoolExecutor, as_completed
from typing import Callable, List, Optional, Tuple

import numpy as np

from binomsim.core.config import ExperimentConfig
from binomsim.core.errors import SimulationError
from binomsim.core.sampler import TrialSampler
from binomsim.results.histogram import Histogram

logger = logging.getLogger(__name__)

# Upper bound on uniforms held in memory at once by one block (~32 MiB)
MAX_UNIFORMS_PER_BATCH: int = 2**22

ProgressCallback = Callable[[int, int], None]


def plan_blocks(iterations: int, block_size: int) -> List[int]:
    """Split `iterations` experiments into block sizes.

    Every block holds `block_size` experiments except possibly the last.
    """
    n_full, remainder = divmod(iterations, block_size)
    blocks = [block_size] * n_full
    if remainder:
        blocks.append(remainder)
    return blocks


def simulate_block(
    trials: int,
    success_probability: float,
    n_experiments: int,
    seed: np.random.SeedSequence,
) -> np.ndarray:
    """Run one block of experiments and count outcomes.

    Module-level so it can be pickled into worker processes.

    Args:
        trials: Draws per experiment.
        success_probability: Probability of success of one draw.
        n_experiments: Experiments in this block.
        seed: SeedSequence owned by this block.

    Returns:
        Partial histogram: array of length trials + 1 whose entries sum
        to n_experiments.
    """
    sampler = TrialSampler.from_seed(success_probability, seed)
    partial = np.zeros(trials + 1, dtype=np.int64)

    batch = max(1, MAX_UNIFORMS_PER_BATCH // trials)
    remaining = n_experiments
    while remaining > 0:
        size = min(batch, remaining)
        successes = sampler.count_successes(trials, size)
        partial += np.bincount(successes, minlength=trials + 1)
        remaining -= size

    return partial


class ExperimentSimulator:
    """Run `iterations` independent experiments and build a Histogram.

    Attributes:
        config: Experiment configuration.
        n_workers: Resolved worker count.
    """

    def __init__(self, config: ExperimentConfig) -> None:
        self.config = config
        self.n_workers = config.n_workers or os.cpu_count() or 1

    def _block_tasks(self) -> List[Tuple[int, np.random.SeedSequence]]:
        blocks = plan_blocks(self.config.iterations, self.config.block_size)
        root = np.random.SeedSequence(self.config.random_seed)
        return list(zip(blocks, root.spawn(len(blocks))))

    def simulate(
        self,
        progress_callback: Optional[ProgressCallback] = None,
        executor: Optional[Executor] = None,
    ) -> Histogram:
        """Run the simulation.

        Args:
            progress_callback: Optional callback(completed_blocks,
                total_blocks) for progress reporting.
            executor: Executor to submit blocks to. When None, blocks run
                inline for a single worker (or a single block) and on a
                private ProcessPoolExecutor otherwise.

        Returns:
            Histogram whose counts sum to `config.iterations`.

        Raises:
            SimulationError: If any block fails. Pending blocks are
                cancelled and no histogram is returned.
        """
        cfg = self.config
        tasks = self._block_tasks()
        start_time = time.perf_counter()

        if executor is not None:
            partials = self._run_on(executor, tasks, progress_callback)
        elif self.n_workers == 1 or len(tasks) == 1:
            partials = self._run_inline(tasks, progress_callback)
        else:
            workers = min(self.n_workers, len(tasks))
            with ProcessPoolExecutor(max_workers=workers) as pool:
                partials = self._run_on(pool, tasks, progress_callback)

        histogram = Histogram.from_partials(partials, cfg.trials, iterations=cfg.iterations)

        elapsed = (time.perf_counter() - start_time) * 1000
        logger.debug(
            f"Simulated {cfg.iterations} experiments of {cfg.trials} trials "
            f"in {len(tasks)} blocks ({elapsed:.1f}ms)"
        )
        return histogram

    def _run_inline(
        self,
        tasks: List[Tuple[int, np.random.SeedSequence]],
        progress_callback: Optional[ProgressCallback],
    ) -> List[np.ndarray]:
        cfg = self.config
        partials = []
        for done, (size, seed) in enumerate(tasks, start=1):
            try:
                partials.append(
                    simulate_block(cfg.trials, cfg.success_probability, size, seed)
                )
            except Exception as e:
                logger.error(f"Simulation block {done - 1} failed: {e}")
                raise SimulationError(f"Simulation block {done - 1} failed: {e}") from e

            if progress_callback is not None:
                progress_callback(done, len(tasks))
        return partials

    def _run_on(
        self,
        executor: Executor,
        tasks: List[Tuple[int, np.random.SeedSequence]],
        progress_callback: Optional[ProgressCallback],
    ) -> List[np.ndarray]:
        cfg = self.config
        futures = {
            executor.submit(
                simulate_block, cfg.trials, cfg.success_probability, size, seed
            ): index
            for index, (size, seed) in enumerate(tasks)
        }

        partials = []
        try:
            for done, future in enumerate(as_completed(futures), start=1):
                partials.append(future.result())
                if progress_callback is not None:
                    progress_callback(done, len(tasks))
        except Exception as e:
            for pending in futures:
                pending.cancel()
            logger.error(f"Simulation aborted: {e}")
            raise SimulationError(f"Simulation aborted: {e}") from e

        return partials


def simulate(
    config: ExperimentConfig,
    progress_callback: Optional[ProgressCallback] = None,
    executor: Optional[Executor] = None,
) -> Histogram:
    """Simulate `config.iterations` experiments and return the Histogram."""
    return ExperimentSimulator(config).simulate(progress_callback, executor)
