"""Exact layer: precision policy, binomial coefficient, closed-form PMF."""

from binomsim.exact.precision import DEFAULT_PRECISION, PrecisionContext, to_decimal
from binomsim.exact.coefficient import (
    MAX_N_FOR_K,
    CoefficientStrategy,
    binomial_coefficient,
    bounded_binomial_coefficient,
    decimal_binomial_coefficient,
)
from binomsim.exact.calculator import ExactProbabilityCalculator, probability_of

__all__ = [
    "PrecisionContext",
    "DEFAULT_PRECISION",
    "to_decimal",
    "CoefficientStrategy",
    "MAX_N_FOR_K",
    "binomial_coefficient",
    "bounded_binomial_coefficient",
    "decimal_binomial_coefficient",
    "ExactProbabilityCalculator",
    "probability_of",
]
