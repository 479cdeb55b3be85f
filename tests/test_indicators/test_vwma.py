"""
Tests for VWMA calculation (vectorized, reference and incremental).
"""
import pytest
import pandas as pd
import numpy as np

from predictview.data.quotes import QuoteSeries
from predictview.indicators.vwma import (
    VWMAIndicator,
    VWMATracker,
    calculate_vwma,
    calculate_vwma_naive,
)
from predictview.shared.types import Quote


def _quotes(closes, volumes, start="2024-01-01 00:00"):
    times = pd.date_range(start, periods=len(closes), freq="min")
    return QuoteSeries(
        Quote(timestamp=t, close=float(c), volume=float(v))
        for t, c, v in zip(times, closes, volumes)
    )


@pytest.fixture
def random_series():
    """200 quotes with a random walk price and random volumes (some zero)."""
    rng = np.random.RandomState(7)
    closes = 40000 + np.cumsum(rng.randn(200) * 50)
    volumes = rng.uniform(0, 5, 200)
    volumes[rng.rand(200) < 0.1] = 0.0
    return _quotes(closes, volumes)


def _assert_same(actual, expected):
    assert len(actual) == len(expected)
    for a, e in zip(actual, expected):
        if e is None:
            assert a is None
        else:
            assert a == pytest.approx(e, rel=1e-7)


class TestCalculateVWMA:
    """Test the vectorized calculator."""

    def test_literal_values(self):
        series = _quotes([10, 20, 30], [1, 1, 2])
        result = calculate_vwma(series, 2)
        assert result[0] is None
        assert result[1] == pytest.approx(15.0)
        assert result[2] == pytest.approx(80.0 / 3.0)

    def test_zero_volume_window_is_none(self):
        series = _quotes([5, 5], [0, 0])
        result = calculate_vwma(series, 2)
        assert result == [None, None]

    def test_zero_volume_after_traded_window(self):
        """Windows that fall back to all-zero volume are None, not tiny residues."""
        series = _quotes([1.1, 2.2, 3.3, 4.4, 5.5], [0.1, 0.2, 0.0, 0.0, 0.3])
        result = calculate_vwma(series, 2)
        assert result[1] == pytest.approx((1.1 * 0.1 + 2.2 * 0.2) / 0.3)
        assert result[2] == pytest.approx(2.2)
        assert result[3] is None
        assert result[4] == pytest.approx(5.5)

    def test_alignment(self, random_series):
        for period in (1, 2, 5, 20, 200, 500):
            assert len(calculate_vwma(random_series, period)) == len(random_series)

    def test_warm_up(self, random_series):
        for period in (1, 3, 50):
            result = calculate_vwma(random_series, period)
            assert all(v is None for v in result[:period - 1])

    def test_period_longer_than_series(self):
        series = _quotes([1, 2, 3], [1, 1, 1])
        assert calculate_vwma(series, 4) == [None, None, None]

    def test_period_one_is_close_when_traded(self):
        series = _quotes([10, 20, 30], [1, 0, 2])
        result = calculate_vwma(series, 1)
        assert result[0] == pytest.approx(10.0)
        assert result[1] is None
        assert result[2] == pytest.approx(30.0)

    def test_empty_series(self):
        assert calculate_vwma(QuoteSeries(), 5) == []

    def test_accepts_plain_list(self):
        series = list(_quotes([10, 20, 30], [1, 1, 2]))
        assert calculate_vwma(series, 3)[2] == pytest.approx(110.0 / 4.0)

    def test_no_nan_in_output(self, random_series):
        result = calculate_vwma(random_series, 3)
        assert not any(isinstance(v, float) and np.isnan(v) for v in result)

    @pytest.mark.parametrize("period", [0, -1, 2.5, True, "3", None])
    def test_invalid_period_rejected(self, period):
        with pytest.raises(ValueError):
            calculate_vwma(_quotes([1, 2], [1, 1]), period)

    def test_deterministic(self, random_series):
        assert calculate_vwma(random_series, 20) == calculate_vwma(random_series, 20)

    def test_input_not_mutated(self):
        quotes = list(_quotes([10, 20, 30], [1, 1, 2]))
        before = list(quotes)
        calculate_vwma(quotes, 2)
        assert quotes == before

    def test_matches_naive(self, random_series):
        for period in (1, 2, 7, 20, 199, 200, 201):
            _assert_same(
                calculate_vwma(random_series, period),
                calculate_vwma_naive(random_series, period),
            )

    def test_extension_keeps_prefix(self, random_series):
        """Appending a quote never changes earlier values."""
        head = random_series[:150]
        extra = Quote(
            timestamp=random_series[-1].timestamp + pd.Timedelta(minutes=1),
            close=41000.0,
            volume=3.0,
        )
        for func in (calculate_vwma, calculate_vwma_naive):
            before = func(head, 10)
            after = func(head.extend([extra]), 10)
            assert after[:len(before)] == before
            assert len(after) == len(before) + 1


class TestCalculateVWMANaive:
    """Test the reference calculator."""

    def test_literal_values(self):
        result = calculate_vwma_naive(_quotes([10, 20, 30], [1, 1, 2]), 2)
        assert result == [None, 15.0, 80.0 / 3.0]

    def test_zero_volume(self):
        assert calculate_vwma_naive(_quotes([5, 5], [0, 0]), 2) == [None, None]

    def test_invalid_period(self):
        with pytest.raises(ValueError):
            calculate_vwma_naive(_quotes([1], [1]), 0)


class TestVWMATracker:
    """Test the incremental calculator."""

    def test_matches_full_calculation(self, random_series):
        for period in (1, 5, 20, 300):
            tracker = VWMATracker(period)
            tracker.extend(random_series)
            _assert_same(tracker.values, calculate_vwma(random_series, period))

    def test_incremental_batches(self, random_series):
        tracker = VWMATracker(10)
        first = tracker.extend(random_series[:50])
        second = tracker.extend(random_series[50:])
        assert len(tracker) == len(random_series)
        assert tracker.values == first + second
        _assert_same(tracker.values, calculate_vwma_naive(random_series, 10))

    def test_update_returns_value(self):
        tracker = VWMATracker(2)
        series = _quotes([10, 20, 30], [1, 1, 2])
        assert tracker.update(series[0]) is None
        assert tracker.update(series[1]) == pytest.approx(15.0)
        assert tracker.update(series[2]) == pytest.approx(80.0 / 3.0)
        assert tracker.last == pytest.approx(80.0 / 3.0)

    def test_zero_volume_after_traded_window(self):
        tracker = VWMATracker(2)
        tracker.extend(_quotes([1.1, 2.2, 3.3, 4.4], [0.1, 0.2, 0.0, 0.0]))
        assert tracker.values[3] is None

    def test_large_volume_leaving_window(self):
        series = _quotes([100, 101], [1e8, 1e-9])
        tracker = VWMATracker(1)
        _assert_same(tracker.extend(series), [100.0, 101.0])
        _assert_same(tracker.values, calculate_vwma_naive(series, 1))

    def test_large_volume_leaving_wider_window(self):
        series = _quotes([100, 100, 400], [1e17, 1, 1])
        tracker = VWMATracker(2)
        _assert_same(tracker.extend(series), [None, 100.0, 250.0])
        _assert_same(tracker.values, calculate_vwma_naive(series, 2))

    def test_mixed_magnitude_volumes(self):
        rng = np.random.RandomState(11)
        closes = 40000 + np.cumsum(rng.randn(300) * 50)
        volumes = 10.0 ** rng.uniform(-9, 9, 300)
        volumes[rng.rand(300) < 0.1] = 0.0
        series = _quotes(closes, volumes)

        for period in (1, 3, 10, 50):
            tracker = VWMATracker(period)
            tracker.extend(series)
            _assert_same(tracker.values, calculate_vwma_naive(series, period))

    def test_reset(self):
        tracker = VWMATracker(2)
        tracker.extend(_quotes([1, 2, 3], [1, 1, 1]))
        tracker.reset()
        assert len(tracker) == 0
        assert tracker.last is None

    def test_values_is_a_copy(self):
        tracker = VWMATracker(1)
        tracker.extend(_quotes([1, 2], [1, 1]))
        values = tracker.values
        values.append(99.0)
        assert len(tracker.values) == 2

    def test_invalid_period(self):
        with pytest.raises(ValueError):
            VWMATracker(0)


class TestVWMAIndicator:
    """Test VWMAIndicator implementation."""

    def test_calculate(self, random_series):
        indicator = VWMAIndicator(period=5)
        assert indicator.calculate(random_series) == calculate_vwma(random_series, 5)

    def test_get_value_at(self):
        indicator = VWMAIndicator(period=2)
        series = _quotes([10, 20, 30], [1, 1, 2])
        assert indicator.get_value_at(series, 0) is None
        assert indicator.get_value_at(series, 1) == pytest.approx(15.0)
        assert indicator.get_value_at(series, 10) is None

    def test_get_last_value(self):
        indicator = VWMAIndicator(period=2)
        assert indicator.get_last_value(_quotes([10, 20, 30], [1, 1, 2])) == pytest.approx(80.0 / 3.0)
        assert indicator.get_last_value(QuoteSeries()) is None

    def test_different_periods_differ(self, random_series):
        values1 = VWMAIndicator(period=5).calculate(random_series)
        values2 = VWMAIndicator(period=20).calculate(random_series)
        assert values1 != values2
