"""Tests for the Monte-Carlo experiment simulator."""

from concurrent.futures import ThreadPoolExecutor

import numpy as np
import pytest
from scipy import stats

import binomsim.model.simulator as simulator_module
from binomsim.core.config import ExperimentConfig
from binomsim.core.errors import SimulationError
from binomsim.model.simulator import (
    ExperimentSimulator,
    plan_blocks,
    simulate,
    simulate_block,
)
from binomsim.results.histogram import Histogram


def _failing_block(*args, **kwargs):
    raise RuntimeError("worker crashed")


class TestPlanBlocks:
    """Splitting iterations into blocks."""

    def test_exact_multiple(self):
        """Iterations divisible by block size give equal blocks."""
        assert plan_blocks(30_000, 10_000) == [10_000, 10_000, 10_000]

    def test_remainder(self):
        """The last block holds the remainder."""
        assert plan_blocks(25_000, 10_000) == [10_000, 10_000, 5_000]

    def test_smaller_than_block(self):
        """Fewer iterations than a block give a single block."""
        assert plan_blocks(7, 10_000) == [7]


class TestSimulateBlock:
    """A single unit of work."""

    def test_partial_sums_to_block(self):
        """Partial histogram covers every experiment in the block."""
        partial = simulate_block(10, 0.5, 1_234, np.random.SeedSequence(1))

        assert partial.shape == (11,)
        assert partial.sum() == 1_234

    def test_batches_large_blocks(self, monkeypatch):
        """Blocks bigger than one batch are drawn in several batches."""
        monkeypatch.setattr(simulator_module, "MAX_UNIFORMS_PER_BATCH", 100)

        partial = simulate_block(10, 0.5, 1_005, np.random.SeedSequence(1))

        assert partial.sum() == 1_005


class TestHistogramInvariants:
    """Properties every simulation satisfies."""

    @pytest.mark.parametrize("iterations, trials, p", [
        (1, 1, 0.5),
        (999, 3, 0.2),
        (5_000, 20, 0.3),
        (12_345, 50, 0.95),
    ])
    def test_counts_sum_to_iterations(self, iterations, trials, p):
        """Histogram counts always sum to iterations."""
        config = ExperimentConfig(
            iterations=iterations,
            trials=trials,
            success_probability=p,
            random_seed=3,
            n_workers=1,
            block_size=1_000,
        )

        histogram = simulate(config)

        assert isinstance(histogram, Histogram)
        assert histogram.iterations == iterations
        assert sum(histogram.values()) == iterations
        assert histogram.trials == trials

    def test_probability_one(self):
        """With p = 1 every experiment succeeds on every trial."""
        config = ExperimentConfig(
            iterations=500, trials=7, success_probability=1.0, n_workers=1
        )

        histogram = simulate(config)

        assert histogram.observed() == [(7, 500)]

    def test_mean_close_to_np(self):
        """Sample mean is close to n * p."""
        config = ExperimentConfig(
            iterations=20_000, trials=30, success_probability=0.4,
            random_seed=11, n_workers=1,
        )

        histogram = simulate(config)

        assert histogram.mean() == pytest.approx(12.0, abs=0.1)


class TestReproducibility:
    """Seeded simulations."""

    def test_same_seed_same_histogram(self, small_config):
        """Same seed produces identical histograms."""
        assert simulate(small_config) == simulate(small_config)

    def test_different_seed_different_histogram(self, small_config):
        """Different seeds produce different histograms."""
        other = small_config.clone_with_seed(small_config.random_seed + 1)

        assert simulate(small_config) != simulate(other)

    def test_independent_of_worker_count(self, small_config):
        """A seeded run gives the same histogram on any number of workers."""
        inline = simulate(small_config)
        parallel = ExperimentSimulator(
            ExperimentConfig(
                iterations=small_config.iterations,
                trials=small_config.trials,
                success_probability=small_config.success_probability,
                random_seed=small_config.random_seed,
                n_workers=2,
                block_size=small_config.block_size,
            )
        ).simulate()

        assert parallel == inline

    def test_external_executor(self, small_config):
        """Blocks can run on a caller-provided executor."""
        with ThreadPoolExecutor(max_workers=4) as pool:
            threaded = simulate(small_config, executor=pool)

        assert threaded == simulate(small_config)


class TestProgress:
    """Progress reporting."""

    def test_progress_callback(self, small_config):
        """Callback fires once per block."""
        progress = []

        def callback(current, total):
            progress.append((current, total))

        simulate(small_config, progress_callback=callback)

        assert len(progress) == 5
        assert progress[0] == (1, 5)
        assert progress[-1] == (5, 5)

    def test_progress_with_executor(self, small_config):
        """Callback fires once per completed future."""
        progress = []

        with ThreadPoolExecutor(max_workers=2) as pool:
            simulate(small_config, executor=pool,
                     progress_callback=lambda c, t: progress.append((c, t)))

        assert [c for c, _ in progress] == [1, 2, 3, 4, 5]


class TestWorkerFailure:
    """A failing worker aborts the whole run."""

    def test_inline_failure(self, small_config, monkeypatch):
        """Inline block failure raises SimulationError."""
        monkeypatch.setattr(simulator_module, "simulate_block", _failing_block)

        with pytest.raises(SimulationError) as excinfo:
            simulate(small_config)
        assert isinstance(excinfo.value.__cause__, RuntimeError)

    def test_executor_failure(self, small_config, monkeypatch):
        """Pool block failure raises SimulationError, no partial result."""
        monkeypatch.setattr(simulator_module, "simulate_block", _failing_block)

        with ThreadPoolExecutor(max_workers=2) as pool:
            with pytest.raises(SimulationError):
                simulate(small_config, executor=pool)


class TestReferenceScenario:
    """Simulated frequencies against the reference PMF."""

    def test_trials_50_p_095_target_43(self, default_seed):
        """Heuristic P(43) lies within 5 standard errors of the exact value."""
        config = ExperimentConfig(
            iterations=100_000,
            trials=50,
            success_probability=0.95,
            random_seed=default_seed,
        )

        histogram = simulate(config)

        exact = stats.binom.pmf(43, 50, 0.95)
        se = np.sqrt(exact * (1 - exact) / config.iterations)
        assert abs(histogram.frequency(43) - exact) <= 5 * se

    def test_goodness_of_fit(self, default_seed):
        """Histogram is consistent with the binomial PMF (chi-square)."""
        config = ExperimentConfig(
            iterations=50_000, trials=10, success_probability=0.5,
            random_seed=default_seed, n_workers=1,
        )

        histogram = simulate(config)

        expected = stats.binom.pmf(np.arange(11), 10, 0.5) * config.iterations
        _, p_value = stats.chisquare(np.array(histogram.counts), expected)
        assert p_value > 1e-4
