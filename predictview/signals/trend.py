"""
Trend signal classification from fast/medium/slow VWMA values.

Three pairwise comparisons use strict `>`; ties count as "not above".
So equal fast/medium/slow values give STRONG_DOWN.

Priority:
1. all three above      -> STRONG_UP
2. none above           -> STRONG_DOWN
3. fast > medium > slow -> UP
4. fast <= medium <= slow -> DOWN
5. anything else        -> SIDEWAYS

Any missing value means there is no signal (None), never a default label.
"""
from dataclasses import dataclass
from enum import Enum
from typing import Mapping, Optional

from ..shared.defaults import TREND_FAST_ID, TREND_MEDIUM_ID, TREND_SLOW_ID


class TrendSignal(Enum):
    """Discrete trend classification."""
    STRONG_UP = "strong_up"
    UP = "up"
    SIDEWAYS = "sideways"
    DOWN = "down"
    STRONG_DOWN = "strong_down"

    @property
    def label(self) -> str:
        return self.value.replace("_", " ").upper()

    @property
    def color(self) -> str:
        if self in (TrendSignal.STRONG_UP, TrendSignal.UP):
            return "#22c55e"
        if self in (TrendSignal.STRONG_DOWN, TrendSignal.DOWN):
            return "#ef4444"
        return "#f59e0b"


@dataclass(frozen=True)
class TrendState:
    """Pairwise comparisons and the signal derived from them."""
    fast_above_medium: bool
    fast_above_slow: bool
    medium_above_slow: bool
    signal: TrendSignal


def classify_comparisons(
    fast_above_medium: bool,
    fast_above_slow: bool,
    medium_above_slow: bool,
) -> TrendSignal:
    """Map the three comparison flags to a TrendSignal."""
    if fast_above_medium and fast_above_slow and medium_above_slow:
        return TrendSignal.STRONG_UP
    if not fast_above_medium and not fast_above_slow and not medium_above_slow:
        return TrendSignal.STRONG_DOWN
    if fast_above_medium and medium_above_slow:
        return TrendSignal.UP
    if not fast_above_medium and not medium_above_slow:
        return TrendSignal.DOWN
    return TrendSignal.SIDEWAYS


def compare(
    fast: Optional[float],
    medium: Optional[float],
    slow: Optional[float],
) -> Optional[TrendState]:
    """
    Compare the latest fast/medium/slow values.

    Returns:
        TrendState, or None if any value is missing
    """
    if fast is None or medium is None or slow is None:
        return None
    fast_above_medium = fast > medium
    fast_above_slow = fast > slow
    medium_above_slow = medium > slow
    return TrendState(
        fast_above_medium=fast_above_medium,
        fast_above_slow=fast_above_slow,
        medium_above_slow=medium_above_slow,
        signal=classify_comparisons(fast_above_medium, fast_above_slow, medium_above_slow),
    )


def classify(
    fast: Optional[float],
    medium: Optional[float],
    slow: Optional[float],
) -> Optional[TrendSignal]:
    """TrendSignal for the three values, or None (no signal) if any is missing."""
    state = compare(fast, medium, slow)
    return state.signal if state is not None else None


def trend_from_values(
    values: Mapping[str, Optional[float]],
    fast_id: str = TREND_FAST_ID,
    medium_id: str = TREND_MEDIUM_ID,
    slow_id: str = TREND_SLOW_ID,
) -> Optional[TrendState]:
    """Compare the last values of three indicators by id (absent ids count as missing)."""
    return compare(values.get(fast_id), values.get(medium_id), values.get(slow_id))
