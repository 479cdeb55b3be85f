"""
Quote series model.

A QuoteSeries is an immutable, time-ordered sequence of Quote records.
New data extends the sequence by producing a new series; existing entries
are never mutated or reordered.
"""
from collections.abc import Sequence
from typing import Any, Dict, Iterable, Iterator, List, Mapping, Optional, Union

import pandas as pd

from ..shared.types import Direction, Quote

FRAME_COLUMNS = ['close', 'volume', 'direction', 'liquidity']


def _to_timestamp(value) -> pd.Timestamp:
    ts = pd.Timestamp(value)
    if ts is pd.NaT:
        raise ValueError(f"Invalid timestamp: {value!r}")
    return ts


def _optional_float(value) -> Optional[float]:
    if value is None or pd.isna(value):
        return None
    return float(value)


def parse_quote_record(record: Mapping[str, Any]) -> Quote:
    """
    Build a Quote from a raw quotations row.

    Accepts the upstream column names (`time`, `close`, `vol`, `dir`, `liq`)
    as well as the long names used by Quote itself.

    Raises:
        ValueError: If a required field is missing or not numeric
    """
    try:
        raw_time = record['time'] if 'time' in record else record['timestamp']
        close = record['close']
        volume = record['vol'] if 'vol' in record else record['volume']
    except KeyError as e:
        raise ValueError(f"Quote record missing field {e.args[0]!r}: {dict(record)}") from e

    raw_dir = record.get('dir', record.get('direction', 0))
    raw_liq = record.get('liq', record.get('liquidity'))

    try:
        return Quote(
            timestamp=_to_timestamp(raw_time),
            close=float(close),
            volume=float(volume),
            direction=Direction.from_code(raw_dir),
            liquidity=_optional_float(raw_liq),
        )
    except (TypeError, ValueError) as e:
        raise ValueError(f"Invalid quote record {dict(record)}: {e}") from e


class QuoteSeries(Sequence):
    """
    Ordered, immutable sequence of quotes.

    Timestamps must be non-decreasing; duplicates are kept as-is.
    """

    __slots__ = ('_quotes',)

    def __init__(self, quotes: Iterable[Quote] = ()):
        items = tuple(quotes)
        for prev, curr in zip(items, items[1:]):
            if curr.timestamp < prev.timestamp:
                raise ValueError(
                    f"Quotes must be ordered by time: {curr.timestamp} follows {prev.timestamp}"
                )
        self._quotes = items

    def __len__(self) -> int:
        return len(self._quotes)

    def __getitem__(self, index):
        if isinstance(index, slice):
            return QuoteSeries(self._quotes[index])
        return self._quotes[index]

    def __iter__(self) -> Iterator[Quote]:
        return iter(self._quotes)

    def __eq__(self, other) -> bool:
        if not isinstance(other, QuoteSeries):
            return NotImplemented
        return self._quotes == other._quotes

    def __hash__(self) -> int:
        return hash(self._quotes)

    def __repr__(self) -> str:
        if not self._quotes:
            return "QuoteSeries([])"
        return (
            f"QuoteSeries(len={len(self._quotes)}, "
            f"first={self._quotes[0].timestamp}, last={self._quotes[-1].timestamp})"
        )

    @property
    def quotes(self) -> tuple:
        return self._quotes

    @property
    def last(self) -> Optional[Quote]:
        """Most recent quote, or None for an empty series."""
        return self._quotes[-1] if self._quotes else None

    @property
    def closes(self) -> List[float]:
        return [q.close for q in self._quotes]

    @property
    def volumes(self) -> List[float]:
        return [q.volume for q in self._quotes]

    @property
    def timestamps(self) -> List[pd.Timestamp]:
        return [q.timestamp for q in self._quotes]

    def extend(self, quotes: Iterable[Quote]) -> "QuoteSeries":
        """
        Return a new series with `quotes` appended.

        Raises:
            ValueError: If the batch is not ordered or starts before the last quote
        """
        batch = tuple(quotes)
        if not batch:
            return self
        return QuoteSeries(self._quotes + batch)

    def after(self, timestamp: Optional[pd.Timestamp]) -> "QuoteSeries":
        """Quotes strictly newer than `timestamp` (all quotes if None)."""
        if timestamp is None:
            return self
        ts = _to_timestamp(timestamp)
        return QuoteSeries(q for q in self._quotes if q.timestamp > ts)

    def to_frame(self) -> pd.DataFrame:
        """DataFrame indexed by timestamp with close/volume/direction/liquidity columns."""
        frame = pd.DataFrame(
            {
                'close': [q.close for q in self._quotes],
                'volume': [q.volume for q in self._quotes],
                'direction': [q.direction.value for q in self._quotes],
                'liquidity': [q.liquidity for q in self._quotes],
            },
            index=pd.DatetimeIndex(self.timestamps, name='time'),
            columns=FRAME_COLUMNS,
        )
        return frame

    @classmethod
    def from_frame(cls, frame: pd.DataFrame) -> "QuoteSeries":
        """
        Build a series from a DataFrame with a datetime index.

        Column names may be the upstream ones (close, vol, dir, liq) or the
        long ones (close, volume, direction, liquidity).
        """
        records: List[Dict[str, Any]] = []
        for ts, row in frame.iterrows():
            record = row.to_dict()
            record['time'] = ts
            records.append(record)
        return cls.from_records(records)

    @classmethod
    def from_records(cls, records: Iterable[Mapping[str, Any]]) -> "QuoteSeries":
        return cls(parse_quote_record(r) for r in records)


SeriesLike = Union[QuoteSeries, Sequence[Quote]]


def as_series(quotes: SeriesLike) -> QuoteSeries:
    """Wrap a plain sequence of quotes as a QuoteSeries (no copy if already one)."""
    if isinstance(quotes, QuoteSeries):
        return quotes
    return QuoteSeries(quotes)
