"""Tests for EMA computation and crossover predicates."""

import pytest

from perpdash.exceptions import InvalidInputError
from perpdash.signals.ema import (
    compute_ema,
    compute_sma_seeded_ema,
    crossed_above,
    crossed_below,
)


class TestComputeEma:
    """Tests for the first-value-seeded EMA."""

    def test_empty_input_raises(self) -> None:
        with pytest.raises(InvalidInputError, match="empty input"):
            compute_ema([], period=5)

    def test_single_value_returns_that_value(self) -> None:
        assert compute_ema([42.5], period=5) == [42.5]

    def test_known_values_period_3(self) -> None:
        """Verify EMA with known values for period=3.

        k = 2 / (3 + 1) = 0.5
        EMA[0] = 1
        EMA[1] = 2 * 0.5 + 1 * 0.5 = 1.5
        EMA[2] = 3 * 0.5 + 1.5 * 0.5 = 2.25
        EMA[3] = 4 * 0.5 + 2.25 * 0.5 = 3.125
        """
        assert compute_ema([1.0, 2.0, 3.0, 4.0], period=3) == [1.0, 1.5, 2.25, 3.125]

    def test_seed_equals_first_input(self) -> None:
        values = [17.0, 3.0, 99.0, 12.0]
        assert compute_ema(values, period=5)[0] == values[0]

    def test_output_length_matches_input(self) -> None:
        values = [float(i) for i in range(1, 21)]
        assert len(compute_ema(values, period=5)) == 20

    def test_shorter_than_period_does_not_fail(self) -> None:
        result = compute_ema([10.0, 20.0], period=5)
        assert len(result) == 2
        assert result[1] == pytest.approx(20 / 3 + 10 * 2 / 3)

    def test_constant_values_return_same(self) -> None:
        assert compute_ema([100.0] * 10, period=5) == pytest.approx([100.0] * 10)

    def test_period_1_ema_equals_input(self) -> None:
        """With period=1, k=1 and the EMA tracks the input exactly."""
        assert compute_ema([1.0, 5.0, 3.0], period=1) == [1.0, 5.0, 3.0]

    def test_deterministic(self) -> None:
        values = [100.0, 103.2, 99.7, 101.1, 108.4, 95.3]
        assert compute_ema(values) == compute_ema(values)

    @pytest.mark.parametrize("period", [0, -1, -5])
    def test_period_below_one_raises(self, period) -> None:
        """period=-1 would divide by zero, period=0 gives k=2."""
        with pytest.raises(InvalidInputError, match="at least 1"):
            compute_ema([100.0, 110.0, 120.0], period=period)


class TestComputeSmaSeededEma:
    """Tests for the SMA-seeded EMA variant."""

    def test_shorter_than_period_returns_empty(self) -> None:
        assert compute_sma_seeded_ema([1.0, 2.0], period=3) == []

    def test_seed_is_sma_of_first_period(self) -> None:
        result = compute_sma_seeded_ema([1.0, 2.0, 3.0, 4.0], period=3)
        assert len(result) == 2
        assert result[0] == 2.0
        # k = 0.5: 4 * 0.5 + 2 * 0.5
        assert result[1] == 3.0

    @pytest.mark.parametrize("period", [0, -1])
    def test_period_below_one_raises(self, period) -> None:
        with pytest.raises(InvalidInputError, match="at least 1"):
            compute_sma_seeded_ema([1.0, 2.0, 3.0], period=period)


class TestCrossovers:
    """Tests for strict crossover predicates."""

    def test_crossed_above(self) -> None:
        assert crossed_above(99.0, 100.0, 101.0, 100.0)

    def test_touching_from_below_counts_as_prior_state(self) -> None:
        assert crossed_above(100.0, 100.0, 101.0, 100.5)

    def test_close_equal_to_ema_is_not_a_cross(self) -> None:
        assert not crossed_above(99.0, 100.0, 100.0, 100.0)
        assert not crossed_below(101.0, 100.0, 100.0, 100.0)

    def test_crossed_below(self) -> None:
        assert crossed_below(101.0, 100.0, 99.0, 100.0)

    def test_staying_above_is_not_a_cross(self) -> None:
        assert not crossed_below(105.0, 100.0, 104.0, 101.0)
