"""
CSV quote loader.

Loads exported quotations tables with support for:
- Date range filtering
- Incremental reads (rows strictly newer than a timestamp)
- Row limits matching the remote query page size
"""
import pandas as pd
from pathlib import Path
from typing import Optional, Union
from datetime import datetime

from .quotes import QuoteSeries

REQUIRED_COLUMNS = ('time', 'close', 'vol')

DateLike = Union[str, datetime, pd.Timestamp]


class QuoteLoader:
    """
    Loads quotes from a CSV export of the quotations table.

    Expected columns: time, close, vol, dir and optionally liq.
    """

    def __init__(self, data_path: Union[str, Path]):
        """
        Initialize the quote loader.

        Args:
            data_path: Path to the CSV file containing the quotations
        """
        self.data_path = Path(data_path)
        if not self.data_path.exists():
            raise FileNotFoundError(f"Data file not found: {self.data_path}")

    def load_frame(self) -> pd.DataFrame:
        """Read the CSV into a time-sorted DataFrame (raw upstream column names)."""
        df = pd.read_csv(self.data_path)

        missing = [c for c in REQUIRED_COLUMNS if c not in df.columns]
        if missing:
            raise ValueError(
                f"Column(s) {missing} not found in {self.data_path}. Available: {list(df.columns)}"
            )

        df['time'] = pd.to_datetime(df['time'])
        if 'dir' not in df.columns:
            df['dir'] = 0
        if 'liq' not in df.columns:
            df['liq'] = None

        # Stable sort keeps duplicate timestamps in file order
        df = df.sort_values('time', kind='mergesort').reset_index(drop=True)
        return df

    def load(
        self,
        start_date: Optional[DateLike] = None,
        end_date: Optional[DateLike] = None,
        after: Optional[DateLike] = None,
        limit: Optional[int] = None,
    ) -> QuoteSeries:
        """
        Load quotes with optional filtering.

        Args:
            start_date: Keep rows at or after this time (inclusive)
            end_date: Keep rows at or before this time (inclusive)
            after: Keep rows strictly newer than this time
            limit: Keep at most this many of the oldest matching rows

        Returns:
            QuoteSeries ordered by time
        """
        df = self.load_frame()

        if start_date is not None:
            df = df[df['time'] >= pd.to_datetime(start_date)]
        if end_date is not None:
            df = df[df['time'] <= pd.to_datetime(end_date)]
        if after is not None:
            df = df[df['time'] > pd.to_datetime(after)]
        if limit is not None:
            df = df.head(limit)

        return QuoteSeries.from_records(df.to_dict('records'))
