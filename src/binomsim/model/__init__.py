"""Simulation layer: parallel Monte-Carlo experiment runner."""

from binomsim.model.simulator import ExperimentSimulator, simulate, simulate_block

__all__ = ["ExperimentSimulator", "simulate", "simulate_block"]
