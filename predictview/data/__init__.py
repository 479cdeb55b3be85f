"""
Quote data module.

Provides:
- QuoteSeries, the immutable time-ordered quote sequence
- CSV loading of exported quotations
- Quote sources (Supabase REST, CSV) behind a common fetch protocol
"""
from .quotes import QuoteSeries, parse_quote_record, as_series
from .loader import QuoteLoader
from .source import QuoteSource, QuoteSourceError, SupabaseQuoteSource, CsvQuoteSource

__all__ = [
    'QuoteSeries',
    'parse_quote_record',
    'as_series',
    'QuoteLoader',
    'QuoteSource',
    'QuoteSourceError',
    'SupabaseQuoteSource',
    'CsvQuoteSource',
]
