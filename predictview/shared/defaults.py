"""
Centralized default values for the dashboard.

This is the SINGLE SOURCE OF TRUTH for indicator, polling and source defaults.
All modules should import from here to ensure consistency.
"""

# VWMA defaults
VWMA_PERIOD = 20  # Single-indicator default period
MIN_PERIOD = 1  # Smallest period the calculator accepts
UI_MIN_PERIOD = 10  # Period bounds enforced by the indicator editor
UI_MAX_PERIOD = 2000

# Polling / remote source
POLL_INTERVAL_SECONDS = 10
FETCH_LIMIT = 1000  # Max rows per quotations query
QUOTES_TABLE = "quotations"
REQUEST_TIMEOUT_SECONDS = 10
REQUEST_MAX_RETRIES = 3
SUPABASE_URL_ENV = "PREDICTVIEW_SUPABASE_URL"
SUPABASE_KEY_ENV = "PREDICTVIEW_SUPABASE_KEY"

# Default indicator set: id -> (period, color)
DEFAULT_INDICATORS = {
    "vwma-gray": (10, "#9ca3af"),
    "vwma-blue": (50, "#0066ff"),
    "vwma-green": (200, "#00ff00"),
    "vwma-red": (1000, "#ff0000"),
}

INDICATOR_NAMES = {
    "vwma-gray": "Gray",
    "vwma-blue": "Blue",
    "vwma-green": "Green",
    "vwma-red": "Red",
}

# Trend roles (gray is charted but not compared)
TREND_FAST_ID = "vwma-blue"
TREND_MEDIUM_ID = "vwma-green"
TREND_SLOW_ID = "vwma-red"

# Hidden indicators still feed the trend signal
INCLUDE_HIDDEN_IN_TREND = True

# Chart colors
PRICE_COLOR = "#f59e0b"
VOLUME_UP_COLOR = "#26a69a"
VOLUME_DOWN_COLOR = "#ef5350"
