"""
Base indicator interface.

All series indicators follow this pattern:
1. Calculate one value per quote, aligned with the input series
2. Report None where the value is undefined (never NaN or 0)
"""
from abc import ABC, abstractmethod
from typing import List, Optional, Sequence

from ..shared.types import Quote


class SeriesIndicator(ABC):
    """
    Base class for quote-series indicators.

    Indicators calculate values from quote data that can be charted or fed
    into signal classification. They do not generate signals directly.
    """

    @abstractmethod
    def calculate(self, series: Sequence[Quote]) -> List[Optional[float]]:
        """
        Calculate indicator values from quote data.

        Args:
            series: Quotes ordered by time

        Returns:
            List with one value per quote (None where undefined)
        """
        pass

    def get_value_at(self, series: Sequence[Quote], index: int) -> Optional[float]:
        """
        Get indicator value at a position of the series.

        Args:
            series: Quotes ordered by time
            index: Position in the series (negative indexes count from the end)

        Returns:
            Indicator value, or None if undefined or out of range
        """
        values = self.calculate(series)
        if not -len(values) <= index < len(values):
            return None
        return values[index]

    def get_last_value(self, series: Sequence[Quote]) -> Optional[float]:
        """Indicator value at the final quote, or None for an empty series."""
        return self.get_value_at(series, -1)
