"""
Signal generation module.

Derives the discrete trend signal from the latest values of the fast,
medium and slow VWMA indicators.
"""
from .trend import (
    TrendSignal,
    TrendState,
    classify,
    classify_comparisons,
    compare,
    trend_from_values,
)

__all__ = [
    'TrendSignal',
    'TrendState',
    'classify',
    'classify_comparisons',
    'compare',
    'trend_from_values',
]
