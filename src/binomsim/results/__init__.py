"""Results layer: histogram and experiment report."""

from binomsim.results.histogram import Histogram
from binomsim.results.report import ExperimentReport

__all__ = ["Histogram", "ExperimentReport"]
