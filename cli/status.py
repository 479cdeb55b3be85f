#!/usr/bin/env python3
"""
Dashboard status CLI.

Loads quotes from the configured source (or a CSV export), then prints the
latest quote, the last value of every VWMA indicator, the pairwise
fast/medium/slow comparisons and the overall trend signal. With --watch it
keeps polling for new quotes.
"""
import argparse
import logging
import sys
import time
from pathlib import Path
from typing import List, Optional, Tuple

from predictview.chart.plot import ChartRenderer
from predictview.dashboard.config import DashboardConfig
from predictview.dashboard.config_loader import load_config_from_yaml
from predictview.dashboard.state import DashboardState
from predictview.data.source import CsvQuoteSource
from predictview.shared.defaults import INDICATOR_NAMES

logger = logging.getLogger(__name__)


def setup_logging(log_path: Optional[Path] = None, verbose: bool = False):
    """
    Setup logging to stderr and optionally to file.

    Args:
        log_path: Path to log file (None = stderr only)
        verbose: If True, use DEBUG level, otherwise INFO
    """
    level = logging.DEBUG if verbose else logging.INFO

    formatter = logging.Formatter(
        '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    root_logger.handlers.clear()

    # Keep stdout for the status report
    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(level)
    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)

    if log_path:
        log_path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_path)
        file_handler.setLevel(level)
        file_handler.setFormatter(formatter)
        root_logger.addHandler(file_handler)


def _fmt(value: Optional[float]) -> str:
    return "n/a" if value is None else f"{value:,.2f}"


def format_status(state: DashboardState) -> str:
    """Format the current dashboard state for display."""
    lines = []

    quote = state.current_quote
    if quote is None:
        lines.append("No data")
        return "\n".join(lines)

    lines.append(f"Time: {quote.timestamp}")
    lines.append(f"  Price: ${quote.close:,.2f}")
    lines.append(f"  Volume: {quote.volume:,.2f}")
    lines.append(f"  Direction: {quote.direction.value.upper()}")
    lines.append("")

    lines.append("VWMA indicators:")
    last = state.last_values()
    for ind in state.registry.snapshot():
        name = INDICATOR_NAMES.get(ind.id, ind.id)
        flag = "" if ind.visible else " (hidden)"
        lines.append(f"  {name:<8} {ind.title:<11} {_fmt(last.get(ind.id)):>14}{flag}")
    lines.append("")

    trend = state.trend()
    if trend is None:
        lines.append("VWMA state: no data")
        return "\n".join(lines)

    fast_id, medium_id, slow_id = state.trend_ids
    fast, medium, slow = (INDICATOR_NAMES.get(i, i) for i in (fast_id, medium_id, slow_id))
    lines.append("VWMA state:")
    for left, right, above in (
        (fast, medium, trend.fast_above_medium),
        (fast, slow, trend.fast_above_slow),
        (medium, slow, trend.medium_above_slow),
    ):
        lines.append(f"  {left} {'above' if above else 'below'} {right}")
    lines.append(f"Signal: {trend.signal.label}")

    return "\n".join(lines)


def build_state(args: argparse.Namespace) -> Tuple[DashboardConfig, DashboardState]:
    """Create config and dashboard state from CLI arguments (config file and/or CSV override)."""
    config = load_config_from_yaml(args.config) if args.config else DashboardConfig()
    source = CsvQuoteSource(args.csv, limit=config.source.limit) if args.csv else None
    return config, DashboardState.from_config(config, source=source)


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Show BTC price, VWMA indicators and the trend signal"
    )
    parser.add_argument(
        "--config",
        type=str,
        default=None,
        help="Path to dashboard YAML config (default: built-in indicator set)"
    )
    parser.add_argument(
        "--csv",
        type=str,
        default=None,
        help="Read quotes from a CSV export instead of the configured source"
    )
    parser.add_argument(
        "--watch",
        action="store_true",
        help="Keep polling for new quotes and reprint the status"
    )
    parser.add_argument(
        "--interval",
        type=float,
        default=None,
        help="Polling interval in seconds (default: from config)"
    )
    parser.add_argument(
        "--iterations",
        type=int,
        default=None,
        help="Stop watching after this many polls (default: run until interrupted)"
    )
    parser.add_argument(
        "--plot",
        type=str,
        default=None,
        help="Write a PNG chart to this path"
    )
    parser.add_argument(
        "--log-file",
        type=str,
        default=None,
        help="Also write logs to this file"
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Enable verbose logging (DEBUG level)"
    )
    return parser.parse_args(argv)


def _render(state: DashboardState, plot_path: str) -> None:
    path = Path(plot_path)
    renderer = ChartRenderer(path.parent)
    renderer.render(
        state.quotes,
        state.registry.snapshot(),
        values=state.vwma_series(),
        trend=state.trend(),
        output_filename=path.name,
    )


def main(argv: Optional[List[str]] = None) -> int:
    """Entry point."""
    args = parse_args(argv)
    setup_logging(Path(args.log_file) if args.log_file else None, args.verbose)

    try:
        config, state = build_state(args)
    except (FileNotFoundError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    if not state.fetch_initial():
        print(f"Error: {state.error}", file=sys.stderr)
        return 1

    print(format_status(state))
    if args.plot:
        _render(state, args.plot)

    if not args.watch:
        return 0

    interval = args.interval if args.interval is not None else config.poll_interval_seconds

    polls = 0
    try:
        while args.iterations is None or polls < args.iterations:
            time.sleep(interval)
            polls += 1
            if state.poll():
                print()
                print(format_status(state))
                if args.plot:
                    _render(state, args.plot)
    except KeyboardInterrupt:
        logger.info("Interrupted, stopping")

    return 0


if __name__ == "__main__":
    sys.exit(main())
