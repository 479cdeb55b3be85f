"""
Static chart rendering of price, volume and VWMA overlays.
"""
import logging
from pathlib import Path
from typing import Iterable, Mapping, Optional, Sequence, Union

import matplotlib.dates as mdates
import matplotlib.pyplot as plt
import numpy as np

from ..shared.defaults import PRICE_COLOR
from ..shared.types import Indicator, Quote
from ..signals.trend import TrendState
from ..indicators.evaluator import evaluate_all
from .series import volume_bars

logger = logging.getLogger(__name__)


class ChartRenderer:
    """Creates price/volume charts with VWMA lines."""

    def __init__(self, output_dir: Optional[Union[str, Path]] = None):
        """
        Initialize the renderer.

        Args:
            output_dir: Directory to save charts (None for current directory)
        """
        self.output_dir = Path(output_dir) if output_dir else Path.cwd()
        self.output_dir.mkdir(parents=True, exist_ok=True)

    @staticmethod
    def _bar_width(times: np.ndarray) -> float:
        """Bar width in days: 80% of the median spacing (one minute if undefined)."""
        if len(times) < 2:
            return 1.0 / 1440
        spacing = np.median(np.diff(times))
        return float(spacing) * 0.8 if spacing > 0 else 1.0 / 1440

    def render(
        self,
        series: Sequence[Quote],
        indicators: Iterable[Indicator],
        values: Optional[Mapping[str, Sequence[Optional[float]]]] = None,
        trend: Optional[TrendState] = None,
        title: str = "BTC Price / Volume / VWMA",
        output_filename: Optional[str] = None,
        figsize: tuple = (14, 8),
    ) -> Path:
        """
        Render the chart to a PNG file.

        Args:
            series: Quotes ordered by time
            indicators: Indicator snapshot (only visible ones are drawn)
            values: Precomputed VWMA values by indicator id
            trend: Trend state shown in the title
            title: Chart title
            output_filename: Output filename (default: chart.png)
            figsize: Figure size (width, height)

        Returns:
            Path to saved chart
        """
        visible = [ind for ind in indicators if ind.visible]
        values = dict(values) if values is not None else {}
        missing = [ind for ind in visible if ind.id not in values]
        if missing:
            values.update(evaluate_all(series, missing))

        fig, (ax_price, ax_volume) = plt.subplots(
            2, 1, figsize=figsize, sharex=True, gridspec_kw={'height_ratios': [3, 1]}
        )
        try:
            times = mdates.date2num([q.timestamp.to_pydatetime() for q in series])
            closes = [q.close for q in series]
            ax_price.plot(times, closes, linewidth=2, color=PRICE_COLOR, label='BTC Price')

            for ind in visible:
                points = [(t, v) for t, v in zip(times, values[ind.id]) if v is not None]
                if not points:
                    continue
                xs, ys = zip(*points)
                ax_price.plot(xs, ys, linewidth=1, color=ind.color, label=ind.title)

            colors = [bar['color'] for bar in volume_bars(series)]
            ax_volume.bar(
                times, [q.volume for q in series], width=self._bar_width(times), color=colors
            )

            if trend is not None:
                title = f"{title} | {trend.signal.label}"
            ax_price.set_title(title, fontsize=14, fontweight='bold')
            ax_price.set_ylabel('Price')
            ax_volume.set_ylabel('Volume')
            ax_price.grid(True, alpha=0.3)
            ax_volume.grid(True, alpha=0.3)
            if len(series) > 0:
                ax_price.legend(loc='upper left')
            ax_volume.xaxis_date()
            ax_volume.xaxis.set_major_formatter(mdates.DateFormatter('%Y-%m-%d %H:%M'))
            fig.autofmt_xdate()

            output_path = self.output_dir / (output_filename or "chart.png")
            plt.tight_layout()
            plt.savefig(output_path, dpi=150, bbox_inches='tight')
        finally:
            plt.close(fig)

        logger.info(f"Chart saved to {output_path}")
        return output_path
