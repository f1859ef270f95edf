"""Fixed-precision decimal arithmetic policy."""

import numbers
from dataclasses import dataclass
from decimal import (
    ROUND_HALF_UP,
    Context,
    Decimal,
    DivisionByZero,
    InvalidOperation,
    Overflow,
)
from typing import Union

from binomsim.core.errors import ProbabilityUnavailableError


Number = Union[numbers.Real, str, Decimal]

# Signals that turn a computation into an unavailable probability
TRAPPED_SIGNALS = (Overflow, InvalidOperation, DivisionByZero)

_ROUNDING_MODES = {
    "ROUND_CEILING", "ROUND_DOWN", "ROUND_FLOOR", "ROUND_HALF_DOWN",
    "ROUND_HALF_EVEN", "ROUND_HALF_UP", "ROUND_UP", "ROUND_05UP",
}


def to_decimal(value: Number) -> Decimal:
    """Convert a number to Decimal without binary floating-point noise.

    Floats go through their shortest round-trip repr, so 0.95 becomes
    Decimal('0.95') rather than Decimal('0.9499999999999999555...').
    Other real types (numpy scalars, Fraction) go through float first.
    """
    if isinstance(value, (Decimal, str)):
        return Decimal(value)
    if isinstance(value, numbers.Integral):
        return Decimal(int(value))
    if isinstance(value, numbers.Real):
        return Decimal(repr(float(value)))
    return Decimal(value)


@dataclass(frozen=True)
class PrecisionContext:
    """Significant digits and rounding applied to every exact operation.

    Attributes:
        digits: Significant decimal digits kept after each operation.
        rounding: A `decimal` rounding mode name.
    """

    digits: int = 34
    rounding: str = ROUND_HALF_UP

    def __post_init__(self) -> None:
        if isinstance(self.digits, bool) or not isinstance(self.digits, int) or self.digits < 1:
            raise ValueError(f"digits must be a positive integer, got {self.digits!r}")
        if self.rounding not in _ROUNDING_MODES:
            raise ValueError(f"Unknown rounding mode: {self.rounding!r}")

    def context(self) -> Context:
        """Build a fresh decimal Context for this policy.

        Overflow, InvalidOperation and DivisionByZero are trapped so they
        raise instead of yielding Infinity or NaN.
        """
        return Context(
            prec=self.digits,
            rounding=self.rounding,
            traps=list(TRAPPED_SIGNALS),
        )

    @property
    def tolerance(self) -> Decimal:
        """Relative rounding error of a single operation, 10^(1 - digits)."""
        return Decimal(1).scaleb(1 - self.digits)

    def divide(self, numerator: Number, denominator: Number) -> Decimal:
        """Divide two numbers under this policy.

        Raises:
            ProbabilityUnavailableError: If the quotient cannot be
                represented (e.g. division by zero).
        """
        ctx = self.context()
        try:
            return ctx.divide(to_decimal(numerator), to_decimal(denominator))
        except TRAPPED_SIGNALS as e:
            raise ProbabilityUnavailableError(
                f"Cannot divide {numerator} by {denominator}: {e!r}"
            ) from e


DEFAULT_PRECISION = PrecisionContext()
