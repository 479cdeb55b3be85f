"""
Volume-Weighted Moving Average (VWMA).

VWMA[i] = sum(close[j] * volume[j]) / sum(volume[j]) over the window
[i - period + 1, i]. Positions with insufficient history, and windows whose
volumes are all zero, are None.

Three interchangeable implementations:
- calculate_vwma: vectorized rolling sums (O(N)), the default
- calculate_vwma_naive: per-window recomputation (O(N * period)), reference
- VWMATracker: incremental window sums, one quote at a time
"""
import math
from collections import deque
from typing import Deque, Iterable, List, Optional, Sequence

import numpy as np
import pandas as pd

from ..shared.defaults import VWMA_PERIOD
from ..shared.types import Quote, validate_period
from .base import SeriesIndicator


def _to_optional_list(values: pd.Series) -> List[Optional[float]]:
    return [None if pd.isna(v) else float(v) for v in values.to_numpy()]


def calculate_vwma(series: Sequence[Quote], period: int = VWMA_PERIOD) -> List[Optional[float]]:
    """
    Calculate VWMA for every position of the series.

    Args:
        series: Quotes ordered by time (not modified)
        period: Window length, integer >= 1

    Returns:
        List of the same length as series; None for i < period - 1 and for
        windows whose total volume is zero

    Raises:
        ValueError: If period is not an integer >= 1
    """
    validate_period(period)
    if len(series) == 0:
        return []

    closes = np.array([q.close for q in series], dtype=float)
    volumes = np.array([q.volume for q in series], dtype=float)

    weighted = pd.Series(closes * volumes).rolling(period, min_periods=period).sum()
    total = pd.Series(volumes).rolling(period, min_periods=period).sum()
    # Count of non-zero volumes decides the zero-volume case exactly
    traded = pd.Series((volumes != 0).astype(float)).rolling(period, min_periods=period).sum()

    vwma = (weighted / total).where(traded > 0)
    return _to_optional_list(vwma)


def calculate_vwma_naive(series: Sequence[Quote], period: int = VWMA_PERIOD) -> List[Optional[float]]:
    """Recompute each window from scratch. Same contract as calculate_vwma."""
    validate_period(period)
    quotes = list(series)
    result: List[Optional[float]] = []

    for i in range(len(quotes)):
        if i < period - 1:
            result.append(None)
            continue

        window = quotes[i - period + 1:i + 1]
        sum_volume = sum(q.volume for q in window)
        if sum_volume == 0:
            result.append(None)
        else:
            sum_price_volume = sum(q.close * q.volume for q in window)
            result.append(sum_price_volume / sum_volume)

    return result


class VWMATracker:
    """
    Incremental VWMA over an append-only quote stream.

    Keeps the current window and its sums. Appending only adds to the sums;
    evicting a quote re-sums the window with math.fsum, so a large volume
    leaving the window cannot cancel the remaining small ones to zero.
    Values for already-seen quotes never change.
    """

    def __init__(self, period: int = VWMA_PERIOD):
        self.period = validate_period(period)
        self.reset()

    def reset(self) -> None:
        """Forget all quotes."""
        self._window: Deque[Quote] = deque()
        self._weighted = 0.0
        self._volume = 0.0
        self._traded = 0
        self._values: List[Optional[float]] = []

    def __len__(self) -> int:
        return len(self._values)

    @property
    def values(self) -> List[Optional[float]]:
        """Copy of all values so far, aligned with the quotes fed in."""
        return list(self._values)

    @property
    def last(self) -> Optional[float]:
        return self._values[-1] if self._values else None

    def update(self, quote: Quote) -> Optional[float]:
        """Append one quote and return the VWMA at its position."""
        self._window.append(quote)
        self._weighted += quote.close * quote.volume
        self._volume += quote.volume
        if quote.volume != 0:
            self._traded += 1

        if len(self._window) > self.period:
            old = self._window.popleft()
            if old.volume != 0:
                self._traded -= 1
            self._weighted = math.fsum(q.close * q.volume for q in self._window)
            self._volume = math.fsum(q.volume for q in self._window)

        if len(self._window) < self.period or self._traded == 0:
            value = None
        else:
            value = self._weighted / self._volume

        self._values.append(value)
        return value

    def extend(self, quotes: Iterable[Quote]) -> List[Optional[float]]:
        """Append quotes in order and return their VWMA values."""
        return [self.update(q) for q in quotes]


class VWMAIndicator(SeriesIndicator):
    """Volume-Weighted Moving Average indicator."""

    def __init__(self, period: int = VWMA_PERIOD):
        self.period = validate_period(period)

    def calculate(self, series: Sequence[Quote]) -> List[Optional[float]]:
        """Calculate VWMA values."""
        return calculate_vwma(series, self.period)

    def __repr__(self) -> str:
        return f"VWMAIndicator(period={self.period})"
