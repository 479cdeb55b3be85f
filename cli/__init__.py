"""
CLI entry points for the dashboard.

Provides command-line interfaces for:
- Printing the latest quote, VWMA values and trend signal
- Watching the quote source and re-rendering on new data
"""
