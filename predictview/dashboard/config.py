"""
Dashboard configuration.

Contains the quote source settings, polling interval, indicator set and
trend roles. Config validation runs at construction time (fail fast with
clear errors).
"""
import os
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from ..shared.defaults import (
    DEFAULT_INDICATORS,
    FETCH_LIMIT, QUOTES_TABLE,
    REQUEST_TIMEOUT_SECONDS, REQUEST_MAX_RETRIES,
    SUPABASE_URL_ENV, SUPABASE_KEY_ENV,
    POLL_INTERVAL_SECONDS,
    UI_MIN_PERIOD, UI_MAX_PERIOD,
    TREND_FAST_ID, TREND_MEDIUM_ID, TREND_SLOW_ID,
    INCLUDE_HIDDEN_IN_TREND,
)
from ..shared.types import Indicator, validate_period


def _require_number(name: str, value, integer: bool = False) -> None:
    """Raise ValueError unless value is a real number (an int if `integer`); bool is rejected."""
    allowed = (int,) if integer else (int, float)
    if isinstance(value, bool) or not isinstance(value, allowed):
        kind = "an integer" if integer else "a number"
        raise ValueError(f"{name} must be {kind}, got {value!r}")


def default_indicators() -> List[Indicator]:
    return [
        Indicator(id=ind_id, period=period, color=color, visible=True)
        for ind_id, (period, color) in DEFAULT_INDICATORS.items()
    ]


@dataclass
class SourceConfig:
    """Where quotes come from: the Supabase quotations table or a CSV export."""
    url: Optional[str] = None
    api_key: Optional[str] = None
    table: str = QUOTES_TABLE
    limit: int = FETCH_LIMIT
    timeout: float = REQUEST_TIMEOUT_SECONDS
    max_retries: int = REQUEST_MAX_RETRIES
    csv_path: Optional[str] = None

    def __post_init__(self) -> None:
        _require_number("source limit", self.limit, integer=True)
        _require_number("source timeout", self.timeout)
        _require_number("source max_retries", self.max_retries, integer=True)
        if self.limit < 1:
            raise ValueError(f"source limit must be >= 1, got {self.limit}")
        if self.timeout <= 0:
            raise ValueError(f"source timeout must be > 0, got {self.timeout}")
        if self.max_retries < 1:
            raise ValueError(f"source max_retries must be >= 1, got {self.max_retries}")

    def resolved_credentials(self) -> Tuple[str, str]:
        """
        Url and key from config, falling back to the environment.

        Raises:
            ValueError: If either is missing
        """
        url = self.url or os.environ.get(SUPABASE_URL_ENV)
        key = self.api_key or os.environ.get(SUPABASE_KEY_ENV)
        if not url or not key:
            raise ValueError(
                f"Missing Supabase credentials: set source.url/source.api_key "
                f"or {SUPABASE_URL_ENV}/{SUPABASE_KEY_ENV}"
            )
        return url, key


@dataclass
class DashboardConfig:
    """Configuration for the dashboard host."""

    name: str = "predictview"
    source: SourceConfig = field(default_factory=SourceConfig)
    poll_interval_seconds: float = POLL_INTERVAL_SECONDS

    # Period bounds enforced when indicators are edited
    min_period: int = UI_MIN_PERIOD
    max_period: int = UI_MAX_PERIOD

    indicators: List[Indicator] = field(default_factory=default_indicators)

    # Trend roles (indicator ids)
    trend_fast_id: str = TREND_FAST_ID
    trend_medium_id: str = TREND_MEDIUM_ID
    trend_slow_id: str = TREND_SLOW_ID

    # Whether hidden indicators still feed the trend signal
    include_hidden_in_trend: bool = INCLUDE_HIDDEN_IN_TREND

    def __post_init__(self) -> None:
        _require_number("poll_interval_seconds", self.poll_interval_seconds)
        if self.poll_interval_seconds <= 0:
            raise ValueError(
                f"poll_interval_seconds must be > 0, got {self.poll_interval_seconds}"
            )
        validate_period(self.min_period)
        validate_period(self.max_period)
        if self.min_period > self.max_period:
            raise ValueError(
                f"min_period ({self.min_period}) must be <= max_period ({self.max_period})"
            )

        seen = set()
        for ind in self.indicators:
            if ind.id in seen:
                raise ValueError(f"Duplicate indicator id: {ind.id}")
            seen.add(ind.id)
            if not (self.min_period <= ind.period <= self.max_period):
                raise ValueError(
                    f"Indicator {ind.id} period ({ind.period}) must be in "
                    f"[{self.min_period}, {self.max_period}]"
                )

        roles = [self.trend_fast_id, self.trend_medium_id, self.trend_slow_id]
        if len(set(roles)) != 3:
            raise ValueError(f"Trend roles must be three distinct indicators, got {roles}")
        for role in roles:
            if role not in seen:
                raise ValueError(f"Trend indicator '{role}' is not configured")

    @property
    def trend_ids(self) -> Tuple[str, str, str]:
        return self.trend_fast_id, self.trend_medium_id, self.trend_slow_id
