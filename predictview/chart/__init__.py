"""
Chart output module.

Provides:
- Point lists for price, volume and visible VWMA lines
- Static PNG rendering with matplotlib
"""
from .series import price_points, volume_bars, line_points, indicator_lines, to_unix_seconds
from .plot import ChartRenderer

__all__ = [
    'price_points',
    'volume_bars',
    'line_points',
    'indicator_lines',
    'to_unix_seconds',
    'ChartRenderer',
]
