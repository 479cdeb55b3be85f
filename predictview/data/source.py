"""
Quote sources for the dashboard.

A source returns quotes ordered by time, optionally only those strictly
newer than a given timestamp (used for polling).
"""
import logging
import os
import time
from pathlib import Path
from typing import Any, List, Optional, Protocol, Union

import pandas as pd
import requests

from ..shared.defaults import (
    FETCH_LIMIT, QUOTES_TABLE,
    REQUEST_TIMEOUT_SECONDS, REQUEST_MAX_RETRIES,
    SUPABASE_URL_ENV, SUPABASE_KEY_ENV,
)
from ..shared.types import Quote
from .loader import QuoteLoader
from .quotes import parse_quote_record

logger = logging.getLogger(__name__)


class QuoteSourceError(Exception):
    """Raised when quotes cannot be fetched from a source."""
    pass


class QuoteSource(Protocol):
    """Protocol for anything that can deliver time-ordered quotes."""

    def fetch(self, after: Optional[pd.Timestamp] = None) -> List[Quote]:
        """
        Fetch quotes ordered by time.

        Args:
            after: If given, only quotes strictly newer than this timestamp

        Returns:
            List of quotes, oldest first
        """
        ...


class SupabaseQuoteSource:
    """Reads the quotations table through the Supabase REST (PostgREST) API."""

    def __init__(
        self,
        url: str,
        api_key: str,
        table: str = QUOTES_TABLE,
        limit: int = FETCH_LIMIT,
        timeout: float = REQUEST_TIMEOUT_SECONDS,
        max_retries: int = REQUEST_MAX_RETRIES,
        session: Optional[requests.Session] = None,
    ):
        if not url or not api_key:
            raise ValueError("Supabase url and api_key are required")
        if limit < 1:
            raise ValueError(f"limit must be >= 1, got {limit}")
        if max_retries < 1:
            raise ValueError(f"max_retries must be >= 1, got {max_retries}")
        self.endpoint = f"{url.rstrip('/')}/rest/v1/{table}"
        self.api_key = api_key
        self.limit = limit
        self.timeout = timeout
        self.max_retries = max_retries
        self.session = session or requests.Session()

    @classmethod
    def from_env(cls, **kwargs) -> "SupabaseQuoteSource":
        """Build a source from PREDICTVIEW_SUPABASE_URL / PREDICTVIEW_SUPABASE_KEY."""
        url = os.environ.get(SUPABASE_URL_ENV)
        key = os.environ.get(SUPABASE_KEY_ENV)
        if not url or not key:
            raise ValueError(
                f"Missing Supabase environment variables ({SUPABASE_URL_ENV}, {SUPABASE_KEY_ENV})"
            )
        return cls(url, key, **kwargs)

    def _headers(self) -> dict:
        return {
            'apikey': self.api_key,
            'Authorization': f"Bearer {self.api_key}",
            'Accept': 'application/json',
        }

    def _params(self, after: Optional[pd.Timestamp]) -> dict:
        params = {
            'select': '*',
            'order': 'time.asc',
            'limit': str(self.limit),
        }
        if after is not None:
            params['time'] = f"gt.{pd.Timestamp(after).isoformat()}"
        return params

    def _request_with_retry(self, params: dict) -> Any:
        """GET with linear backoff on transient failures."""
        for attempt in range(1, self.max_retries + 1):
            try:
                response = self.session.get(
                    self.endpoint,
                    params=params,
                    headers=self._headers(),
                    timeout=self.timeout,
                )
                response.raise_for_status()
                return response.json()
            except ValueError as e:
                # Also catches requests.JSONDecodeError (a ValueError subclass)
                raise QuoteSourceError(f"Quotations response is not valid JSON: {e}") from e
            except requests.RequestException as e:
                if attempt == self.max_retries:
                    raise QuoteSourceError(f"Failed to fetch quotations: {e}") from e
                sleep_seconds = attempt * 2
                logger.warning(
                    f"Quotations request failed (attempt {attempt}/{self.max_retries}), "
                    f"retrying in {sleep_seconds}s: {e}"
                )
                time.sleep(sleep_seconds)
        raise QuoteSourceError("Failed to fetch quotations")

    def fetch(self, after: Optional[pd.Timestamp] = None) -> List[Quote]:
        payload = self._request_with_retry(self._params(after))
        if not isinstance(payload, list):
            raise QuoteSourceError(f"Unexpected quotations payload: {type(payload).__name__}")
        try:
            quotes = [parse_quote_record(row) for row in payload]
        except ValueError as e:
            raise QuoteSourceError(str(e)) from e
        quotes.sort(key=lambda q: q.timestamp)
        logger.debug(f"Fetched {len(quotes)} quotes (after={after})")
        return quotes


class CsvQuoteSource:
    """Serves quotes from a CSV export, re-reading the file on every fetch."""

    def __init__(self, data_path: Union[str, Path], limit: int = FETCH_LIMIT):
        self.loader = QuoteLoader(data_path)
        self.limit = limit

    def fetch(self, after: Optional[pd.Timestamp] = None) -> List[Quote]:
        try:
            series = self.loader.load(after=after, limit=self.limit)
        except (OSError, ValueError) as e:
            raise QuoteSourceError(f"Failed to read {self.loader.data_path}: {e}") from e
        return list(series)
