"""Experiment report: simulated frequencies next to exact probabilities."""

from dataclasses import dataclass
from decimal import Decimal
from typing import List, Optional

import pandas as pd

from binomsim.core.config import ExperimentConfig
from binomsim.exact.precision import DEFAULT_PRECISION, PrecisionContext
from binomsim.results.histogram import Histogram


@dataclass(frozen=True)
class ExperimentReport:
    """Outcome of one experiment run.

    Attributes:
        config: Configuration the run used.
        histogram: Simulated success-count histogram.
        elapsed_seconds: Wall-clock time of the simulation.
        target: Success count both probabilities are reported for.
        heuristic_probability: Simulated frequency of `target`.
        exact_probability: Closed-form probability of `target`, or None
            when it could not be computed.
        precision: Precision policy used for both probabilities.
    """
    config: ExperimentConfig
    histogram: Histogram
    elapsed_seconds: float
    target: int
    heuristic_probability: Decimal
    exact_probability: Optional[Decimal]
    precision: PrecisionContext = DEFAULT_PRECISION

    @property
    def elapsed_ms(self) -> int:
        return int(self.elapsed_seconds * 1000)

    def frequency_table(self) -> pd.DataFrame:
        """Observed success counts with their normalized frequency, ascending."""
        return self.histogram.to_dataframe(observed_only=True)

    def format_lines(self) -> List[str]:
        """Render the report as plain text lines."""
        lines = [
            f"Value: {k} Probability: {self.histogram.frequency_decimal(k, self.precision)}"
            for k, _ in self.histogram.observed()
        ]
        exact = (
            str(self.exact_probability)
            if self.exact_probability is not None
            else "unavailable"
        )
        lines.extend([
            "",
            f"Time Taken to Calculate: {self.elapsed_ms} ms",
            "",
            f"Heuristic Probability for {self.target}: {self.heuristic_probability}",
            f"Mathematical Probability for {self.target}: {exact}",
        ])
        return lines
