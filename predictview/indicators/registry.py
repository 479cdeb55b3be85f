"""
Indicator registry.

Holds the configured VWMA indicators keyed by id. The registry never mutates
an indicator or its internal mapping in place: every change builds a new
mapping and swaps it in under a lock, so readers always see a complete
snapshot.
"""
import logging
import threading
from dataclasses import replace
from typing import Dict, Iterable, Iterator, Optional, Tuple

from ..shared.defaults import DEFAULT_INDICATORS, MIN_PERIOD, UI_MIN_PERIOD, UI_MAX_PERIOD
from ..shared.types import Indicator, validate_period

logger = logging.getLogger(__name__)


class IndicatorRegistry:
    """Mapping from indicator id to Indicator with atomic snapshot updates."""

    def __init__(
        self,
        indicators: Iterable[Indicator] = (),
        min_period: int = MIN_PERIOD,
        max_period: Optional[int] = None,
    ):
        """
        Initialize the registry.

        Args:
            indicators: Initial indicators (ids must be unique)
            min_period: Smallest accepted period (>= 1)
            max_period: Largest accepted period (None = unbounded)
        """
        validate_period(min_period)
        if max_period is not None and max_period < min_period:
            raise ValueError(
                f"max_period ({max_period}) must be >= min_period ({min_period})"
            )
        self.min_period = min_period
        self.max_period = max_period
        self._lock = threading.Lock()

        initial: Dict[str, Indicator] = {}
        for indicator in indicators:
            self._check_period(indicator.period)
            if indicator.id in initial:
                raise ValueError(f"Duplicate indicator id: {indicator.id}")
            initial[indicator.id] = indicator
        self._indicators: Dict[str, Indicator] = initial

    @classmethod
    def default(cls) -> "IndicatorRegistry":
        """Registry with the four default dashboard indicators and UI period bounds."""
        return cls(
            [
                Indicator(id=ind_id, period=period, color=color, visible=True)
                for ind_id, (period, color) in DEFAULT_INDICATORS.items()
            ],
            min_period=UI_MIN_PERIOD,
            max_period=UI_MAX_PERIOD,
        )

    def _check_period(self, period: int) -> None:
        validate_period(period)
        if period < self.min_period:
            raise ValueError(f"period must be >= {self.min_period}, got {period}")
        if self.max_period is not None and period > self.max_period:
            raise ValueError(f"period must be <= {self.max_period}, got {period}")

    def snapshot(self) -> Tuple[Indicator, ...]:
        """Current indicators in insertion order."""
        return tuple(self._indicators.values())

    def get(self, indicator_id: str) -> Indicator:
        try:
            return self._indicators[indicator_id]
        except KeyError:
            raise KeyError(f"Unknown indicator: {indicator_id}") from None

    def __contains__(self, indicator_id) -> bool:
        return indicator_id in self._indicators

    def __len__(self) -> int:
        return len(self._indicators)

    def __iter__(self) -> Iterator[Indicator]:
        return iter(self.snapshot())

    def add(self, indicator: Indicator) -> Indicator:
        """
        Register a new indicator.

        Raises:
            ValueError: If the id is already registered or the period is out of bounds
        """
        self._check_period(indicator.period)
        with self._lock:
            if indicator.id in self._indicators:
                raise ValueError(f"Duplicate indicator id: {indicator.id}")
            updated = dict(self._indicators)
            updated[indicator.id] = indicator
            self._indicators = updated
        logger.debug(f"Added indicator {indicator.id} ({indicator.title})")
        return indicator

    def remove(self, indicator_id: str) -> Indicator:
        """Remove an indicator and return it. Raises KeyError if unknown."""
        with self._lock:
            if indicator_id not in self._indicators:
                raise KeyError(f"Unknown indicator: {indicator_id}")
            updated = dict(self._indicators)
            removed = updated.pop(indicator_id)
            self._indicators = updated
        logger.debug(f"Removed indicator {indicator_id}")
        return removed

    def update(
        self,
        indicator_id: str,
        period: Optional[int] = None,
        color: Optional[str] = None,
        visible: Optional[bool] = None,
    ) -> Indicator:
        """
        Replace an indicator with changed attributes (all-or-nothing).

        Returns:
            The new Indicator

        Raises:
            KeyError: If the id is unknown
            ValueError: If the new period is invalid or out of bounds
        """
        changes = {}
        if period is not None:
            self._check_period(period)
            changes['period'] = period
        if color is not None:
            changes['color'] = color
        if visible is not None:
            changes['visible'] = bool(visible)

        with self._lock:
            if indicator_id not in self._indicators:
                raise KeyError(f"Unknown indicator: {indicator_id}")
            new_indicator = replace(self._indicators[indicator_id], **changes)
            updated = dict(self._indicators)
            updated[indicator_id] = new_indicator
            self._indicators = updated
        logger.debug(f"Updated indicator {indicator_id}: {changes}")
        return new_indicator

    def toggle(self, indicator_id: str) -> Indicator:
        """Flip visibility of an indicator."""
        with self._lock:
            if indicator_id not in self._indicators:
                raise KeyError(f"Unknown indicator: {indicator_id}")
            current = self._indicators[indicator_id]
            new_indicator = replace(current, visible=not current.visible)
            updated = dict(self._indicators)
            updated[indicator_id] = new_indicator
            self._indicators = updated
        logger.debug(f"Toggled indicator {indicator_id} visible={new_indicator.visible}")
        return new_indicator
