"""
Shared types for the dashboard modules.

This module consolidates the quote record, indicator configuration and
direction enum used across data, indicator, signal and chart modules.
"""
from dataclasses import dataclass
from enum import Enum
from typing import Optional

import pandas as pd

from .defaults import MIN_PERIOD


class Direction(Enum):
    """Predicted price direction carried by each quote."""
    UP = "up"
    DOWN = "down"

    @classmethod
    def from_code(cls, code) -> "Direction":
        """Map the upstream integer `dir` column (1 = up, anything else = down)."""
        if isinstance(code, Direction):
            return code
        if isinstance(code, str):
            lowered = code.strip().lower()
            if lowered in ("up", "down"):
                return cls(lowered)
            code = float(lowered)
        return cls.UP if code == 1 else cls.DOWN


def validate_period(period) -> int:
    """Return period if it is an integer >= 1, else raise ValueError."""
    if isinstance(period, bool) or not isinstance(period, int):
        raise ValueError(f"period must be an integer, got {period!r}")
    if period < MIN_PERIOD:
        raise ValueError(f"period must be >= {MIN_PERIOD}, got {period}")
    return period


@dataclass(frozen=True)
class Quote:
    """Single timestamped observation of price, volume, direction and liquidity."""
    timestamp: pd.Timestamp
    close: float
    volume: float
    direction: Direction = Direction.UP
    liquidity: Optional[float] = None

    def __post_init__(self) -> None:
        if self.volume < 0:
            raise ValueError(f"volume must be non-negative, got {self.volume}")


@dataclass(frozen=True)
class Indicator:
    """
    A configured VWMA overlay.

    Identity is the `id` string, never the position in a list. Instances are
    immutable; registry updates replace them.
    """
    id: str
    period: int
    color: str = "#3b82f6"
    visible: bool = True

    def __post_init__(self) -> None:
        if not self.id:
            raise ValueError("indicator id must be a non-empty string")
        validate_period(self.period)

    @property
    def title(self) -> str:
        return f"VWMA({self.period})"
