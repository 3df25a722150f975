"""Yahoo Finance adapter for symbol lookup and daily price history.

yfinance is synchronous, so every call is pushed onto a worker thread with
``asyncio.to_thread``.
"""

from __future__ import annotations

import asyncio
import logging
from datetime import date, timedelta
from typing import Any

import yfinance as yf

logger = logging.getLogger(__name__)


class YahooMarketData:
    """Implements both ``SymbolLookup`` and ``PriceHistory``."""

    def __init__(self, max_search_results: int = 8) -> None:
        self._max_search_results = max_search_results

    async def search(self, query: str) -> dict[str, Any]:
        """Return ``{"quotes": [{"symbol": ..., ...}, ...]}`` for *query*."""
        return await asyncio.to_thread(self._search_sync, query)

    async def chart(
        self,
        ticker: str,
        period1: date,
        period2: date,
        interval: str = "1d",
    ) -> dict[str, Any]:
        """Return ``{"quotes": [{"date", "close"}, ...]}`` for ``[period1, period2]``."""
        return await asyncio.to_thread(self._chart_sync, ticker, period1, period2, interval)

    # ------------------------------------------------------------------
    # Blocking helpers
    # ------------------------------------------------------------------

    def _search_sync(self, query: str) -> dict[str, Any]:
        result = yf.Search(query, max_results=self._max_search_results, news_count=0)
        return {"quotes": list(result.quotes or [])}

    @staticmethod
    def _chart_sync(ticker: str, period1: date, period2: date, interval: str) -> dict[str, Any]:
        # yfinance treats ``end`` as exclusive.
        frame = yf.Ticker(ticker).history(
            start=period1.isoformat(),
            end=(period2 + timedelta(days=1)).isoformat(),
            interval=interval,
            auto_adjust=False,
        )
        if frame is None or frame.empty:
            logger.warning("No price rows for %s between %s and %s.", ticker, period1, period2)
            return {"quotes": []}

        quotes = [
            {"date": index.strftime("%Y-%m-%d"), "close": row.get("Close")}
            for index, row in frame.iterrows()
        ]
        return {"quotes": quotes}
