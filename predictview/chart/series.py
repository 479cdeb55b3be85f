"""
Chart series preparation.

Converts quotes and VWMA values into plain point lists for a line/histogram
charting surface. Times are unix seconds. Undefined values are dropped, never
plotted as zero or interpolated.
"""
from typing import Dict, Iterable, List, Mapping, Optional, Sequence

import pandas as pd

from ..shared.defaults import VOLUME_UP_COLOR, VOLUME_DOWN_COLOR
from ..shared.types import Indicator, Quote
from ..indicators.evaluator import evaluate_all


def to_unix_seconds(timestamp: pd.Timestamp) -> int:
    """Unix time in seconds; naive timestamps are taken as UTC."""
    ts = pd.Timestamp(timestamp)
    if ts.tzinfo is None:
        ts = ts.tz_localize('UTC')
    return int(ts.timestamp())


def price_points(series: Sequence[Quote]) -> List[Dict]:
    return [{'time': to_unix_seconds(q.timestamp), 'value': q.close} for q in series]


def volume_bars(
    series: Sequence[Quote],
    up_color: str = VOLUME_UP_COLOR,
    down_color: str = VOLUME_DOWN_COLOR,
) -> List[Dict]:
    """Volume histogram; a bar is up-colored when close >= previous close."""
    bars = []
    prev_close: Optional[float] = None
    for q in series:
        rising = prev_close is None or q.close >= prev_close
        bars.append({
            'time': to_unix_seconds(q.timestamp),
            'value': q.volume,
            'color': up_color if rising else down_color,
        })
        prev_close = q.close
    return bars


def line_points(series: Sequence[Quote], values: Sequence[Optional[float]]) -> List[Dict]:
    """
    Pair each quote time with its indicator value, skipping None.

    Raises:
        ValueError: If values is not aligned with series
    """
    if len(values) != len(series):
        raise ValueError(
            f"Indicator values ({len(values)}) not aligned with series ({len(series)})"
        )
    return [
        {'time': to_unix_seconds(q.timestamp), 'value': v}
        for q, v in zip(series, values)
        if v is not None
    ]


def indicator_lines(
    series: Sequence[Quote],
    indicators: Iterable[Indicator],
    values: Optional[Mapping[str, Sequence[Optional[float]]]] = None,
) -> Dict[str, Dict]:
    """
    Line series for every visible indicator.

    Args:
        series: Quotes ordered by time
        indicators: Indicator snapshot (hidden ones are skipped)
        values: Precomputed values by id; computed here when missing

    Returns:
        Mapping of indicator id to {'title', 'color', 'period', 'data'}
    """
    visible = [ind for ind in indicators if ind.visible]
    values = dict(values) if values is not None else {}
    missing = [ind for ind in visible if ind.id not in values]
    if missing:
        values.update(evaluate_all(series, missing))

    return {
        ind.id: {
            'title': ind.title,
            'color': ind.color,
            'period': ind.period,
            'data': line_points(series, values[ind.id]),
        }
        for ind in visible
    }
