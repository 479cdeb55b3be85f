"""
Dashboard state: quotes, indicator registry and derived values.

Owns the quote series (extended by polling) and the indicator registry, and
exposes read-only derived outputs: VWMA series, last values, the trend state
and chart payloads. Derived values come from an IncrementalEvaluator that is
re-synced with the registry snapshot on every read.
"""
import logging
from typing import Dict, List, Optional, Tuple

from ..chart.series import indicator_lines, price_points, volume_bars
from ..data.quotes import QuoteSeries
from ..data.source import CsvQuoteSource, QuoteSource, QuoteSourceError, SupabaseQuoteSource
from ..indicators.evaluator import IncrementalEvaluator
from ..indicators.registry import IndicatorRegistry
from ..shared.defaults import (
    TREND_FAST_ID, TREND_MEDIUM_ID, TREND_SLOW_ID, INCLUDE_HIDDEN_IN_TREND,
)
from ..shared.types import Direction, Quote
from ..signals.trend import TrendState, trend_from_values
from .config import DashboardConfig, SourceConfig

logger = logging.getLogger(__name__)


def build_source(config: SourceConfig) -> QuoteSource:
    """CSV source if csv_path is set, otherwise the Supabase quotations table."""
    if config.csv_path:
        return CsvQuoteSource(config.csv_path, limit=config.limit)
    url, api_key = config.resolved_credentials()
    return SupabaseQuoteSource(
        url,
        api_key,
        table=config.table,
        limit=config.limit,
        timeout=config.timeout,
        max_retries=config.max_retries,
    )


class DashboardState:
    """
    Live dashboard state.

    Responsibilities:
    - Load the initial batch of quotes and poll for strictly newer ones
    - Keep per-indicator VWMA values up to date incrementally
    - Derive the trend state from the fast/medium/slow indicators
    """

    def __init__(
        self,
        source: QuoteSource,
        registry: Optional[IndicatorRegistry] = None,
        trend_ids: Tuple[str, str, str] = (TREND_FAST_ID, TREND_MEDIUM_ID, TREND_SLOW_ID),
        include_hidden_in_trend: bool = INCLUDE_HIDDEN_IN_TREND,
    ):
        self.source = source
        self.registry = registry if registry is not None else IndicatorRegistry.default()
        self.trend_ids = trend_ids
        self.include_hidden_in_trend = include_hidden_in_trend
        self.is_loading = False
        self.error: Optional[str] = None
        # Hidden indicators are always tracked; visibility is applied on read
        self._evaluator = IncrementalEvaluator(self.registry.snapshot(), include_hidden=True)

    @classmethod
    def from_config(
        cls,
        config: DashboardConfig,
        source: Optional[QuoteSource] = None,
    ) -> "DashboardState":
        registry = IndicatorRegistry(
            config.indicators,
            min_period=config.min_period,
            max_period=config.max_period,
        )
        return cls(
            source if source is not None else build_source(config.source),
            registry=registry,
            trend_ids=config.trend_ids,
            include_hidden_in_trend=config.include_hidden_in_trend,
        )

    @property
    def quotes(self) -> QuoteSeries:
        return self._evaluator.series

    @property
    def current_quote(self) -> Optional[Quote]:
        return self.quotes.last

    @property
    def current_direction(self) -> Optional[Direction]:
        quote = self.current_quote
        return quote.direction if quote is not None else None

    def fetch_initial(self) -> bool:
        """
        Replace the series with a fresh batch from the source.

        Returns:
            True on success; on failure the error text is kept in `error`
        """
        self.is_loading = True
        self.error = None
        try:
            quotes = self.source.fetch()
        except QuoteSourceError as e:
            logger.error(f"Initial fetch failed: {e}")
            self.error = str(e)
            return False
        finally:
            self.is_loading = False

        self._evaluator.sync(self.registry.snapshot())
        self._evaluator.reset(QuoteSeries(quotes))
        logger.info(f"Loaded {len(quotes)} quotes")
        return True

    def poll(self) -> int:
        """
        Append quotes newer than the current last one.

        Fetch errors are logged and leave the state unchanged.

        Returns:
            Number of quotes appended
        """
        last = self.current_quote
        after = last.timestamp if last is not None else None
        try:
            fetched = self.source.fetch(after)
        except QuoteSourceError as e:
            logger.error(f"Poll error: {e}")
            return 0

        batch = [q for q in fetched if after is None or q.timestamp > after]
        if not batch:
            logger.debug("Poll returned no new quotes")
            return 0

        self._evaluator.sync(self.registry.snapshot())
        self._evaluator.append(batch)
        logger.debug(f"Appended {len(batch)} quotes (last={batch[-1].timestamp})")
        return len(batch)

    def _synced_values(self) -> Dict[str, List[Optional[float]]]:
        self._evaluator.sync(self.registry.snapshot())
        return self._evaluator.values()

    def vwma_series(self, include_hidden: bool = True) -> Dict[str, List[Optional[float]]]:
        """VWMA values per indicator id, aligned with `quotes`."""
        values = self._synced_values()
        if include_hidden:
            return values
        return {ind.id: values[ind.id] for ind in self.registry.snapshot() if ind.visible}

    def last_values(self, include_hidden: bool = True) -> Dict[str, Optional[float]]:
        """VWMA value at the latest quote per indicator id (None if undefined)."""
        return {
            ind_id: (values[-1] if values else None)
            for ind_id, values in self.vwma_series(include_hidden).items()
        }

    def trend(self) -> Optional[TrendState]:
        """Trend state from the configured fast/medium/slow indicators, or None."""
        fast_id, medium_id, slow_id = self.trend_ids
        values = self.last_values(include_hidden=self.include_hidden_in_trend)
        return trend_from_values(values, fast_id, medium_id, slow_id)

    def chart_payload(self) -> Dict:
        """Price, volume and visible VWMA line data for a charting surface."""
        series = self.quotes
        return {
            'price': price_points(series),
            'volume': volume_bars(series),
            'vwma': indicator_lines(series, self.registry.snapshot(), self._synced_values()),
        }
