"""
Multi-indicator evaluation.

Applies the VWMA calculation once per configured indicator against the same
quote series. Stateless functions recompute from scratch; IncrementalEvaluator
keeps running sums per indicator and only processes appended quotes.

Hidden indicators are evaluated by default (include_hidden=True) so that
their last values remain available to the trend signal.
"""
import logging
from typing import Dict, Iterable, List, Optional, Sequence

from ..data.quotes import QuoteSeries, SeriesLike, as_series
from ..shared.types import Indicator, Quote
from .vwma import VWMATracker, calculate_vwma

logger = logging.getLogger(__name__)

ValueSeries = List[Optional[float]]


def _selected(indicators: Iterable[Indicator], include_hidden: bool) -> Dict[str, Indicator]:
    """Indicators keyed by id (last one wins on duplicate ids)."""
    return {ind.id: ind for ind in indicators if include_hidden or ind.visible}


def evaluate_all(
    series: Sequence[Quote],
    indicators: Iterable[Indicator],
    include_hidden: bool = True,
) -> Dict[str, ValueSeries]:
    """
    Calculate the VWMA series of every indicator.

    Args:
        series: Quotes ordered by time
        indicators: Indicator snapshot
        include_hidden: If False, indicators with visible=False are skipped

    Returns:
        Mapping of indicator id to a value list aligned with series
    """
    selected = _selected(indicators, include_hidden)
    by_period: Dict[int, ValueSeries] = {}
    results: Dict[str, ValueSeries] = {}
    for ind_id, indicator in selected.items():
        if indicator.period not in by_period:
            by_period[indicator.period] = calculate_vwma(series, indicator.period)
        results[ind_id] = list(by_period[indicator.period])
    return results


def last_values(
    series: Sequence[Quote],
    indicators: Iterable[Indicator],
    include_hidden: bool = True,
) -> Dict[str, Optional[float]]:
    """
    VWMA value at the final quote for every indicator.

    Every selected indicator gets an entry; it is None when the series is
    empty, shorter than the period, or the last window has zero volume.
    """
    evaluated = evaluate_all(series, indicators, include_hidden=include_hidden)
    return {ind_id: (values[-1] if values else None) for ind_id, values in evaluated.items()}


class IncrementalEvaluator:
    """
    Keeps one VWMATracker per indicator over an append-only quote series.

    Call sync() with the latest registry snapshot whenever configuration
    changes, and append() with each batch of newer quotes.
    """

    def __init__(
        self,
        indicators: Iterable[Indicator] = (),
        series: Optional[SeriesLike] = None,
        include_hidden: bool = True,
    ):
        self.include_hidden = include_hidden
        self._series = as_series(series) if series is not None else QuoteSeries()
        self._indicators: Dict[str, Indicator] = {}
        self._trackers: Dict[str, VWMATracker] = {}
        self.sync(indicators)

    @property
    def series(self) -> QuoteSeries:
        return self._series

    @property
    def indicators(self) -> Dict[str, Indicator]:
        return dict(self._indicators)

    def _build_tracker(self, indicator: Indicator) -> VWMATracker:
        tracker = VWMATracker(indicator.period)
        tracker.extend(self._series)
        return tracker

    def sync(self, indicators: Iterable[Indicator]) -> None:
        """
        Align trackers with an indicator snapshot.

        New ids are replayed over the current series, removed ids are dropped,
        and ids whose period changed are rebuilt. Color/visibility changes keep
        the existing tracker.
        """
        selected = _selected(indicators, self.include_hidden)

        for ind_id in list(self._trackers):
            if ind_id not in selected:
                del self._trackers[ind_id]

        for ind_id, indicator in selected.items():
            tracker = self._trackers.get(ind_id)
            if tracker is None or tracker.period != indicator.period:
                logger.debug(f"Rebuilding VWMA tracker {ind_id} ({indicator.title})")
                self._trackers[ind_id] = self._build_tracker(indicator)

        self._indicators = selected

    def append(self, quotes: Iterable[Quote]) -> QuoteSeries:
        """
        Append newer quotes and update every tracker.

        Raises:
            ValueError: If the batch would break time ordering (nothing is applied)
        """
        batch = list(quotes)
        if not batch:
            return self._series
        self._series = self._series.extend(batch)
        for tracker in self._trackers.values():
            tracker.extend(batch)
        return self._series

    def reset(self, series: SeriesLike) -> None:
        """Replace the whole series and rebuild all trackers."""
        self._series = as_series(series)
        self._trackers = {
            ind_id: self._build_tracker(indicator)
            for ind_id, indicator in self._indicators.items()
        }

    def values(self) -> Dict[str, ValueSeries]:
        """Mapping of indicator id to its value list aligned with the series."""
        return {ind_id: tracker.values for ind_id, tracker in self._trackers.items()}

    def last_values(self) -> Dict[str, Optional[float]]:
        return {ind_id: tracker.last for ind_id, tracker in self._trackers.items()}
