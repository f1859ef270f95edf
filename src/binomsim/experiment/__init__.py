"""Experimentation layer: experiment runner, CI and convergence analysis."""

from binomsim.experiment.runner import run_experiment
from binomsim.experiment.analysis import (
    ConvergenceResult,
    compare_distributions,
    convergence_study,
    frequency_ci,
    standard_error,
    within_tolerance,
)

__all__ = [
    "run_experiment",
    "ConvergenceResult",
    "compare_distributions",
    "convergence_study",
    "frequency_ci",
    "standard_error",
    "within_tolerance",
]
