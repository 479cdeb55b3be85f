"""
YAML configuration loader for the dashboard.

Loads source, polling and indicator settings from YAML files, allowing the
indicator set to be changed without code changes.
"""
import yaml
from pathlib import Path
from typing import Any, Dict, List, Union

from .config import DashboardConfig, SourceConfig, default_indicators
from ..shared.defaults import (
    POLL_INTERVAL_SECONDS, UI_MIN_PERIOD, UI_MAX_PERIOD,
    TREND_FAST_ID, TREND_MEDIUM_ID, TREND_SLOW_ID,
    INCLUDE_HIDDEN_IN_TREND,
)
from ..shared.types import Indicator


def _parse_indicators(raw: Any) -> List[Indicator]:
    """
    Accept either a list of {id, period, color, visible} mappings or a
    mapping of id -> {period, color, visible}.
    """
    if raw is None:
        return default_indicators()
    if isinstance(raw, dict):
        raw = [dict(value or {}, id=key) for key, value in raw.items()]
    if not isinstance(raw, list):
        raise ValueError(f"'indicators' must be a list or mapping, got {type(raw).__name__}")

    indicators = []
    for entry in raw:
        if not isinstance(entry, dict) or 'id' not in entry or 'period' not in entry:
            raise ValueError(f"Indicator entry needs 'id' and 'period': {entry}")
        kwargs = {'id': str(entry['id']), 'period': entry['period']}
        if 'color' in entry:
            kwargs['color'] = str(entry['color'])
        if 'visible' in entry:
            kwargs['visible'] = bool(entry['visible'])
        indicators.append(Indicator(**kwargs))
    return indicators


def config_from_dict(config_dict: Dict[str, Any], name: str = "predictview") -> DashboardConfig:
    """Build a DashboardConfig from the nested YAML structure."""
    source = config_dict.get('source', {}) or {}
    polling = config_dict.get('polling', {}) or {}
    periods = config_dict.get('periods', {}) or {}
    trend = config_dict.get('trend', {}) or {}

    source_kwargs = {
        key: source[key]
        for key in ('url', 'api_key', 'table', 'limit', 'timeout', 'max_retries', 'csv_path')
        if key in source
    }

    return DashboardConfig(
        name=config_dict.get('name', name),
        source=SourceConfig(**source_kwargs),
        poll_interval_seconds=polling.get('interval_seconds', POLL_INTERVAL_SECONDS),
        min_period=periods.get('min', UI_MIN_PERIOD),
        max_period=periods.get('max', UI_MAX_PERIOD),
        indicators=_parse_indicators(config_dict.get('indicators')),
        trend_fast_id=trend.get('fast', TREND_FAST_ID),
        trend_medium_id=trend.get('medium', TREND_MEDIUM_ID),
        trend_slow_id=trend.get('slow', TREND_SLOW_ID),
        include_hidden_in_trend=trend.get('include_hidden', INCLUDE_HIDDEN_IN_TREND),
    )


def load_config_from_yaml(yaml_path: Union[str, Path]) -> DashboardConfig:
    """
    Load dashboard configuration from YAML file.

    Args:
        yaml_path: Path to YAML configuration file

    Returns:
        DashboardConfig object

    Raises:
        FileNotFoundError: If YAML file doesn't exist
        ValueError: If YAML is invalid or missing required fields
    """
    yaml_path = Path(yaml_path)

    if not yaml_path.exists():
        raise FileNotFoundError(f"Config file not found: {yaml_path}")

    with open(yaml_path, 'r') as f:
        try:
            config_dict = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ValueError(f"Invalid YAML in {yaml_path}: {e}") from e

    if not config_dict:
        raise ValueError(f"Empty config file: {yaml_path}")
    if not isinstance(config_dict, dict):
        raise ValueError(f"Config root must be a mapping: {yaml_path}")

    return config_from_dict(config_dict, name=yaml_path.stem)

