"""
Shared types and defaults for the dashboard.

This module provides:
- Quote, Indicator and Direction types
- Centralized default values for indicators, polling and the quote source
"""
from .types import Direction, Quote, Indicator, validate_period
from .defaults import (
    VWMA_PERIOD, MIN_PERIOD, UI_MIN_PERIOD, UI_MAX_PERIOD,
    POLL_INTERVAL_SECONDS, FETCH_LIMIT,
    DEFAULT_INDICATORS, INDICATOR_NAMES,
    TREND_FAST_ID, TREND_MEDIUM_ID, TREND_SLOW_ID,
)

__all__ = [
    'Direction',
    'Quote',
    'Indicator',
    'validate_period',
    'VWMA_PERIOD', 'MIN_PERIOD', 'UI_MIN_PERIOD', 'UI_MAX_PERIOD',
    'POLL_INTERVAL_SECONDS', 'FETCH_LIMIT',
    'DEFAULT_INDICATORS', 'INDICATOR_NAMES',
    'TREND_FAST_ID', 'TREND_MEDIUM_ID', 'TREND_SLOW_ID',
]
