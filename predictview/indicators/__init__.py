"""
Indicator calculation module.

Provides:
- VWMA calculation (vectorized, reference and incremental)
- The indicator registry with atomic snapshot updates
- Multi-indicator evaluation and last-value extraction
"""
from .base import SeriesIndicator
from .vwma import VWMAIndicator, VWMATracker, calculate_vwma, calculate_vwma_naive
from .registry import IndicatorRegistry
from .evaluator import IncrementalEvaluator, evaluate_all, last_values

__all__ = [
    'SeriesIndicator',
    'VWMAIndicator',
    'VWMATracker',
    'calculate_vwma',
    'calculate_vwma_naive',
    'IndicatorRegistry',
    'IncrementalEvaluator',
    'evaluate_all',
    'last_values',
]
