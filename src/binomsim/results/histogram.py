"""Success-count histogram produced by one simulation run."""

from collections.abc import Mapping
from decimal import Decimal
from typing import Dict, Iterable, Iterator, List, Optional, Tuple

import numpy as np
import pandas as pd

from binomsim.exact.precision import DEFAULT_PRECISION, PrecisionContext


class Histogram(Mapping):
    """Immutable mapping from success count to number of experiments.

    Covers every success count in [0, trials]; counts that were never
    observed map to 0. The counts always sum to `iterations`.

    Attributes:
        trials: Largest possible success count.
        iterations: Number of experiments aggregated.
    """

    __slots__ = ("_counts", "trials", "iterations")

    def __init__(self, counts: Iterable[int], iterations: Optional[int] = None) -> None:
        """Build a histogram from per-count totals.

        Args:
            counts: Occurrence count for each success count 0..trials,
                in order.
            iterations: Expected total. Checked against the counts
                when given.

        Raises:
            ValueError: If a count is negative or the total disagrees
                with `iterations`.
        """
        values = tuple(int(c) for c in counts)
        if not values:
            raise ValueError("Histogram needs at least one success count")
        if any(c < 0 for c in values):
            raise ValueError("Histogram counts must be non-negative")

        total = sum(values)
        if iterations is not None and total != iterations:
            raise ValueError(
                f"Histogram counts sum to {total}, expected {iterations} iterations"
            )

        self._counts: Tuple[int, ...] = values
        self.trials = len(values) - 1
        self.iterations = total

    @classmethod
    def from_counts(cls, counts: Dict[int, int], trials: int) -> "Histogram":
        """Build a histogram from a sparse {success_count: count} dict."""
        dense = [0] * (trials + 1)
        for k, count in counts.items():
            if not 0 <= k <= trials:
                raise ValueError(f"Success count {k} outside [0, {trials}]")
            dense[k] += count
        return cls(dense)

    @classmethod
    def from_partials(
        cls, partials: Iterable[np.ndarray], trials: int, iterations: Optional[int] = None
    ) -> "Histogram":
        """Merge per-worker partial histograms by summation.

        Args:
            partials: Arrays of length trials + 1.
            trials: Largest possible success count.
            iterations: Expected total across all partials.

        Returns:
            The merged Histogram.
        """
        merged = np.zeros(trials + 1, dtype=np.int64)
        for partial in partials:
            merged += partial
        return cls(merged.tolist(), iterations=iterations)

    # Mapping protocol

    def __getitem__(self, k: int) -> int:
        if isinstance(k, bool) or not isinstance(k, (int, np.integer)):
            raise KeyError(k)
        if not 0 <= k <= self.trials:
            raise KeyError(k)
        return self._counts[k]

    def __iter__(self) -> Iterator[int]:
        return iter(range(self.trials + 1))

    def __len__(self) -> int:
        return self.trials + 1

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Histogram):
            return self._counts == other._counts
        return super().__eq__(other)

    def __hash__(self) -> int:
        return hash(self._counts)

    def __repr__(self) -> str:
        return (
            f"Histogram(trials={self.trials}, iterations={self.iterations}, "
            f"observed={dict(self.observed())})"
        )

    # Derived views

    @property
    def counts(self) -> Tuple[int, ...]:
        """Dense counts, indexed by success count."""
        return self._counts

    def observed(self) -> List[Tuple[int, int]]:
        """Non-zero (success_count, count) pairs, ascending."""
        return [(k, c) for k, c in enumerate(self._counts) if c > 0]

    def frequency(self, k: int) -> float:
        """Normalized frequency of success count k."""
        return self[k] / self.iterations

    def frequency_decimal(
        self, k: int, precision: PrecisionContext = DEFAULT_PRECISION
    ) -> Decimal:
        """Normalized frequency of k, divided under a precision context."""
        return precision.divide(self[k], self.iterations)

    def normalized(self) -> Dict[int, float]:
        """Normalized frequency of every success count."""
        return {k: c / self.iterations for k, c in enumerate(self._counts)}

    def mean(self) -> float:
        """Sample mean of the success counts."""
        return float(np.dot(np.arange(self.trials + 1), self._counts) / self.iterations)

    def merge(self, other: "Histogram") -> "Histogram":
        """Combine two histograms over the same trial count."""
        if other.trials != self.trials:
            raise ValueError(
                f"Cannot merge histograms over {self.trials} and {other.trials} trials"
            )
        return Histogram(a + b for a, b in zip(self._counts, other._counts))

    def to_dataframe(self, observed_only: bool = False) -> pd.DataFrame:
        """Return counts as a DataFrame.

        Args:
            observed_only: Drop success counts that were never observed.

        Returns:
            DataFrame with columns: successes, count, frequency; sorted by
            success count ascending.
        """
        df = pd.DataFrame({
            "successes": np.arange(self.trials + 1),
            "count": np.array(self._counts, dtype=np.int64),
        })
        df["frequency"] = df["count"] / self.iterations
        if observed_only:
            df = df[df["count"] > 0].reset_index(drop=True)
        return df
