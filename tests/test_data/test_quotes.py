"""
Tests for the quote series model and record parsing.
"""
import pytest
import pandas as pd

from predictview.data.quotes import QuoteSeries, as_series, parse_quote_record
from predictview.shared.types import Direction, Quote


def _quote(minute, close=100.0, volume=1.0):
    return Quote(
        timestamp=pd.Timestamp("2024-01-01") + pd.Timedelta(minutes=minute),
        close=close,
        volume=volume,
    )


class TestParseQuoteRecord:
    """Test conversion of raw quotations rows."""

    def test_upstream_columns(self):
        quote = parse_quote_record({
            'time': '2024-03-01T12:00:00+00:00',
            'close': '65000.5',
            'vol': 3,
            'dir': 1,
            'liq': 12.5,
        })
        assert quote.timestamp == pd.Timestamp('2024-03-01T12:00:00+00:00')
        assert quote.close == 65000.5
        assert quote.volume == 3.0
        assert quote.direction == Direction.UP
        assert quote.liquidity == 12.5

    def test_long_column_names(self):
        quote = parse_quote_record({
            'timestamp': '2024-03-01 12:00',
            'close': 1.0,
            'volume': 2.0,
            'direction': 'down',
        })
        assert quote.direction == Direction.DOWN
        assert quote.liquidity is None

    def test_missing_direction_is_down(self):
        quote = parse_quote_record({'time': '2024-03-01', 'close': 1, 'vol': 1})
        assert quote.direction == Direction.DOWN

    def test_nan_liquidity_is_none(self):
        quote = parse_quote_record({'time': '2024-03-01', 'close': 1, 'vol': 1, 'liq': float('nan')})
        assert quote.liquidity is None

    @pytest.mark.parametrize("record", [
        {'close': 1, 'vol': 1},
        {'time': '2024-03-01', 'vol': 1},
        {'time': '2024-03-01', 'close': 1},
        {'time': '2024-03-01', 'close': 'abc', 'vol': 1},
        {'time': '2024-03-01', 'close': 1, 'vol': -1},
        {'time': None, 'close': 1, 'vol': 1},
    ])
    def test_invalid_records(self, record):
        with pytest.raises(ValueError):
            parse_quote_record(record)


class TestQuoteSeries:
    """Test ordering, immutability and views."""

    def test_sequence_behaviour(self):
        quotes = [_quote(i, close=float(i)) for i in range(5)]
        series = QuoteSeries(quotes)
        assert len(series) == 5
        assert series[0] is quotes[0]
        assert list(series) == quotes
        assert series.closes == [0.0, 1.0, 2.0, 3.0, 4.0]
        assert series.volumes == [1.0] * 5
        assert series.last is quotes[-1]

    def test_slice_is_series(self):
        series = QuoteSeries(_quote(i) for i in range(5))
        head = series[:3]
        assert isinstance(head, QuoteSeries)
        assert len(head) == 3

    def test_empty(self):
        series = QuoteSeries()
        assert len(series) == 0
        assert series.last is None
        assert repr(series) == "QuoteSeries([])"

    def test_out_of_order_rejected(self):
        with pytest.raises(ValueError, match="ordered by time"):
            QuoteSeries([_quote(2), _quote(1)])

    def test_duplicate_timestamps_kept(self):
        series = QuoteSeries([_quote(1, close=1.0), _quote(1, close=2.0)])
        assert series.closes == [1.0, 2.0]

    def test_extend_returns_new_series(self):
        series = QuoteSeries([_quote(0), _quote(1)])
        extended = series.extend([_quote(2)])
        assert len(series) == 2
        assert len(extended) == 3
        assert extended[:2] == series

    def test_extend_before_last_rejected(self):
        series = QuoteSeries([_quote(0), _quote(5)])
        with pytest.raises(ValueError):
            series.extend([_quote(3)])

    def test_extend_empty_is_same(self):
        series = QuoteSeries([_quote(0)])
        assert series.extend([]) is series

    def test_after(self):
        series = QuoteSeries(_quote(i) for i in range(5))
        newer = series.after(series[2].timestamp)
        assert [q.timestamp for q in newer] == series.timestamps[3:]
        assert series.after(None) is series

    def test_equality_and_hash(self):
        a = QuoteSeries([_quote(0), _quote(1)])
        b = QuoteSeries([_quote(0), _quote(1)])
        assert a == b
        assert hash(a) == hash(b)
        assert a != QuoteSeries([_quote(0)])

    def test_as_series(self):
        series = QuoteSeries([_quote(0)])
        assert as_series(series) is series
        assert isinstance(as_series([_quote(0)]), QuoteSeries)


class TestQuoteSeriesFrames:
    """Test DataFrame conversion."""

    def test_to_frame(self):
        series = QuoteSeries([_quote(0, close=10.0, volume=2.0), _quote(1, close=11.0, volume=0.0)])
        frame = series.to_frame()
        assert list(frame.columns) == ['close', 'volume', 'direction', 'liquidity']
        assert frame.index.name == 'time'
        assert frame['close'].tolist() == [10.0, 11.0]
        assert frame['direction'].tolist() == ['up', 'up']

    def test_from_frame_upstream_columns(self):
        frame = pd.DataFrame(
            {'close': [1.0, 2.0], 'vol': [3.0, 4.0], 'dir': [1, 0]},
            index=pd.to_datetime(['2024-01-01 00:00', '2024-01-01 00:01']),
        )
        series = QuoteSeries.from_frame(frame)
        assert series.closes == [1.0, 2.0]
        assert series.volumes == [3.0, 4.0]
        assert [q.direction for q in series] == [Direction.UP, Direction.DOWN]

    def test_frame_round_trip(self):
        series = QuoteSeries([_quote(0, close=10.0), _quote(1, close=11.0)])
        assert QuoteSeries.from_frame(series.to_frame()) == series
