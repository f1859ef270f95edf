"""Tests for binomial coefficient strategies."""

import math
from decimal import Context, Decimal, Overflow

import pytest

from binomsim.core.errors import CoefficientOverflowError, ProbabilityUnavailableError
from binomsim.exact.coefficient import (
    INT32_MAX,
    MAX_N_FOR_K,
    CoefficientStrategy,
    binomial_coefficient,
    bounded_binomial_coefficient,
    decimal_binomial_coefficient,
)


class TestDecimalCoefficient:
    """Arbitrary-precision strategy."""

    @pytest.mark.parametrize("n", [1, 2, 7, 20, 50])
    def test_matches_math_comb(self, n):
        """Exact for coefficients that fit in the precision."""
        for k in range(n + 1):
            assert decimal_binomial_coefficient(n, k) == math.comb(n, k)

    @pytest.mark.parametrize("n", [10, 33, 101])
    def test_symmetry(self, n):
        """C(n, k) == C(n, n - k)."""
        for k in range(n + 1):
            assert decimal_binomial_coefficient(n, k) == decimal_binomial_coefficient(n, n - k)

    def test_edges_are_one(self):
        """C(n, 0) == C(n, n) == 1."""
        assert decimal_binomial_coefficient(500, 0) == 1
        assert decimal_binomial_coefficient(500, 500) == 1

    def test_large_n_relative_error(self):
        """Large coefficients keep the context's relative precision."""
        value = decimal_binomial_coefficient(1000, 500)
        reference = Decimal(math.comb(1000, 500))

        assert abs(value - reference) / reference < Decimal("1e-28")

    def test_context_overflow_reported(self):
        """A trapped overflow becomes ProbabilityUnavailableError."""
        ctx = Context(prec=34, Emax=10, traps=[Overflow])

        with pytest.raises(ProbabilityUnavailableError):
            decimal_binomial_coefficient(100, 50, ctx)

    @pytest.mark.parametrize("n, k", [(5, 6), (5, -1), (-1, 0)])
    def test_invalid_arguments(self, n, k):
        """k outside [0, n] is rejected."""
        with pytest.raises(ValueError):
            decimal_binomial_coefficient(n, k)


class TestBoundedCoefficient:
    """Bounded-integer strategy."""

    def test_documented_bound_k2(self):
        """k = 2: n = 2345 computes, n = 2346 overflows."""
        assert bounded_binomial_coefficient(2345, 2) == 2_748_340
        assert bounded_binomial_coefficient(2346, 2) is None

    def test_symmetric_reduction(self):
        """Bound is looked up for min(k, n - k)."""
        assert bounded_binomial_coefficient(2345, 2343) == 2_748_340
        assert bounded_binomial_coefficient(2346, 2344) is None

    def test_edges_bypass_table(self):
        """C(n, 0) and C(n, n) are 1 for any n."""
        assert bounded_binomial_coefficient(10**9, 0) == 1
        assert bounded_binomial_coefficient(10**9, 10**9) == 1

    def test_k16_entry(self):
        """k = 16 computes up to n = 33."""
        assert bounded_binomial_coefficient(32, 16) == math.comb(32, 16)
        assert bounded_binomial_coefficient(33, 16) == math.comb(33, 16)

    @pytest.mark.parametrize("n, k", [(34, 17), (35, 17), (40, 20)])
    def test_k_beyond_table_overflows(self, n, k):
        """Reduced k past the table is never representable."""
        assert math.comb(n, k) > INT32_MAX
        assert bounded_binomial_coefficient(n, k) is None

    @pytest.mark.parametrize("n", range(1, 41))
    def test_correct_or_sentinel(self, n):
        """Every result is either the exact value or the sentinel."""
        for k in range(n + 1):
            value = bounded_binomial_coefficient(n, k)
            if value is not None:
                assert value == math.comb(n, k)
                assert value <= INT32_MAX

    def test_table_bounds_fit_int32(self):
        """The coefficient at every table bound fits in 32 bits."""
        for k, n in enumerate(MAX_N_FOR_K[1:], start=1):
            assert math.comb(n, k) <= INT32_MAX
            assert bounded_binomial_coefficient(n, k) == math.comb(n, k)


class TestDispatch:
    """binomial_coefficient strategy selection."""

    def test_arbitrary_returns_decimal(self):
        """Default strategy returns a Decimal."""
        value = binomial_coefficient(50, 7)

        assert isinstance(value, Decimal)
        assert value == 99_884_400

    def test_bounded_returns_int(self):
        """Bounded strategy returns an int."""
        assert binomial_coefficient(50, 7, CoefficientStrategy.BOUNDED) == 99_884_400

    def test_strategy_by_name(self):
        """Strategies can be given by value."""
        assert binomial_coefficient(10, 3, "bounded") == 120

    def test_bounded_overflow_raises(self):
        """The sentinel is surfaced as CoefficientOverflowError."""
        with pytest.raises(CoefficientOverflowError):
            binomial_coefficient(2346, 2, CoefficientStrategy.BOUNDED)

    def test_overflow_is_unavailable_probability(self):
        """Overflow is a kind of unavailable probability."""
        assert issubclass(CoefficientOverflowError, ProbabilityUnavailableError)
