"""
Dashboard host module.

Provides:
- DashboardConfig and its YAML loader
- DashboardState, which polls a quote source and derives VWMA values and
  the trend state from the indicator registry
"""
from .config import DashboardConfig, SourceConfig, default_indicators
from .config_loader import load_config_from_yaml, config_from_dict
from .state import DashboardState, build_source

__all__ = [
    'DashboardConfig',
    'SourceConfig',
    'default_indicators',
    'load_config_from_yaml',
    'config_from_dict',
    'DashboardState',
    'build_source',
]
