"""Binomial coefficient strategies.

Two ways of computing C(n, k):

- ARBITRARY: running product in decimal arithmetic under a precision
  context. Never overflows; costs more.
- BOUNDED: running product in 32-bit signed integer range, guarded by a
  precomputed bound table. Returns None ("too large to represent")
  instead of a wrapped value.

Both reduce k to min(k, n - k) and divide at every step of the product
so intermediate magnitudes stay close to the final coefficient.
"""

from decimal import Context, Decimal
from enum import Enum
from typing import Optional, Union

from binomsim.core.errors import CoefficientOverflowError, ProbabilityUnavailableError
from binomsim.exact.precision import DEFAULT_PRECISION, TRAPPED_SIGNALS


INT32_MAX: int = 2**31 - 1

# MAX_N_FOR_K[k] is the largest n accepted by the bounded strategy for a
# reduced k. Entry k is the largest n with C(n, k + 1) <= INT32_MAX, which
# keeps one extra factor of headroom over C(n, k) itself. Reduced k beyond
# the table always overflows: it needs n >= 34, and C(34, 17) > INT32_MAX.
MAX_N_FOR_K = (
    INT32_MAX,  # k = 0
    65536,
    2345,
    477,
    193,
    110,
    75,
    58,
    49,
    43,
    39,
    37,
    35,
    34,
    34,
    33,
    33,  # k = 16
)


class CoefficientStrategy(str, Enum):
    """How the calculator computes C(n, k)."""
    ARBITRARY = "arbitrary"  # decimal running product, never overflows
    BOUNDED = "bounded"      # 32-bit integer running product with bound table


def _check_arguments(n: int, k: int) -> None:
    if n < 0:
        raise ValueError(f"n must be non-negative, got {n}")
    if not 0 <= k <= n:
        raise ValueError(f"k must be between 0 and {n}, got {k}")


def decimal_binomial_coefficient(n: int, k: int, context: Optional[Context] = None) -> Decimal:
    """Compute C(n, k) as a running decimal product.

    result = result * (n - i + 1) / i for i = 1..k, every multiplication
    and division rounded under `context`.

    Args:
        n: Total number of trials.
        k: Number of successes.
        context: Decimal context; defaults to the 34-digit HALF_UP policy.

    Returns:
        The coefficient, exact while it fits in the context's precision.

    Raises:
        ProbabilityUnavailableError: If the context traps an operation.
    """
    _check_arguments(n, k)
    ctx = context if context is not None else DEFAULT_PRECISION.context()

    k = min(k, n - k)
    if k == 0:
        return Decimal(1)

    result = Decimal(1)
    try:
        for i in range(1, k + 1):
            result = ctx.divide(ctx.multiply(result, Decimal(n - i + 1)), Decimal(i))
    except TRAPPED_SIGNALS as e:
        raise ProbabilityUnavailableError(
            f"C({n}, {k}) is not representable under prec={ctx.prec}: {e!r}"
        ) from e
    return result


def bounded_binomial_coefficient(n: int, k: int) -> Optional[int]:
    """Compute C(n, k) within 32-bit signed integer range.

    Args:
        n: Total number of trials.
        k: Number of successes.

    Returns:
        The exact coefficient, or None when (n, k) lies beyond the bound
        table and the value would not be representable.
    """
    _check_arguments(n, k)

    k = min(k, n - k)
    if k == 0:
        return 1
    if k >= len(MAX_N_FOR_K) or n > MAX_N_FOR_K[k]:
        return None

    result = 1
    for i in range(1, k + 1):
        # C(n, i - 1) * (n - i + 1) is always divisible by i
        result = result * (n - i + 1) // i
    return result


def binomial_coefficient(
    n: int,
    k: int,
    strategy: CoefficientStrategy = CoefficientStrategy.ARBITRARY,
    context: Optional[Context] = None,
) -> Union[Decimal, int]:
    """Compute C(n, k) with the requested strategy.

    Raises:
        CoefficientOverflowError: If the bounded strategy cannot
            represent the coefficient.
        ProbabilityUnavailableError: If the decimal context traps.
    """
    strategy = CoefficientStrategy(strategy)
    if strategy is CoefficientStrategy.BOUNDED:
        value = bounded_binomial_coefficient(n, k)
        if value is None:
            raise CoefficientOverflowError(
                f"C({n}, {k}) is too large for the bounded-integer strategy"
            )
        return value
    return decimal_binomial_coefficient(n, k, context)
