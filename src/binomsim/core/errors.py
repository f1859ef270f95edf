"""Exception hierarchy shared by the simulator and the exact calculator."""


class BinomsimError(Exception):
    """Base class for all binomsim errors."""


class ConfigurationError(BinomsimError, ValueError):
    """Raised when an experiment configuration or target value is invalid.

    Detected eagerly, before any simulation or exact computation starts.
    """


class SimulationError(BinomsimError, RuntimeError):
    """Raised when a simulation worker fails.

    The whole run is aborted; a partial histogram is never returned.
    """


class ProbabilityUnavailableError(BinomsimError, ArithmeticError):
    """Raised when an exact probability cannot be represented.

    Covers decimal context failures (overflow, invalid operation, division
    by zero) for a single success count.
    """


class CoefficientOverflowError(ProbabilityUnavailableError):
    """Raised when the bounded-integer coefficient is too large to represent."""
