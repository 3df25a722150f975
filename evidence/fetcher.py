"""Concurrent evidence collection: search fan-out plus a price series.

Lifecycle of one ``fetch`` call:
    1. For each category (recent, weekly, monthly, earnings) in turn:
        - dispatch every query of the category concurrently;
        - pass each raw response through dedup, then the category's date window;
        - record a ``QueryOutcome`` per query (failures are recorded, not raised).
    2. Fetch the price series for the mode's window.  Failure here is fatal
       and surfaces as ``UpstreamFetchError``.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from datetime import date, timedelta
from typing import Any, Protocol

from evidence.dedup import deduplicate_response
from evidence.prices import PriceHistory, parse_price_series
from evidence.temporal import filter_by_date_window
from models.config import DEFAULT_LOOKBACK_DAYS, SearchConfig
from models.errors import UpstreamFetchError
from models.evidence import (
    CATEGORIES,
    EvidenceBundle,
    EvidenceCategory,
    FetchedEvidence,
    PriceQuote,
    QueryOutcome,
    QuerySet,
    SearchResponse,
)

logger = logging.getLogger(__name__)


class SearchProvider(Protocol):
    """Web/news search: ``search(query, **params) -> {"results": [...], "images": [...]}``."""

    async def search(self, query: str, **params: Any) -> dict[str, Any]:
        ...


@dataclass(frozen=True)
class CategoryProfile:
    """Provider parameters for a category when searching relative to now."""

    topic: str
    time_range: str


CATEGORY_PROFILES: dict[EvidenceCategory, CategoryProfile] = {
    "recent": CategoryProfile(topic="news", time_range="day"),
    "weekly": CategoryProfile(topic="general", time_range="week"),
    "monthly": CategoryProfile(topic="general", time_range="month"),
    "earnings": CategoryProfile(topic="general", time_range="year"),
}


class EvidenceFetcher:
    """Runs planned queries against a search provider and fetches prices.

    Collaborators are injected at construction and shared across calls; the
    fetcher itself keeps no per-call state.
    """

    def __init__(
        self,
        search: SearchProvider,
        prices: PriceHistory,
        config: SearchConfig | None = None,
    ) -> None:
        self._search = search
        self._prices = prices
        self._config = config or SearchConfig()

    # ------------------------------------------------------------------
    # Public interface
    # ------------------------------------------------------------------

    async def fetch(
        self,
        ticker: str,
        queries: QuerySet,
        as_of: date | None = None,
    ) -> FetchedEvidence:
        """Collect evidence for *ticker* as known on *as_of* (``None`` = today).

        Raises ``UpstreamFetchError`` if the price series cannot be fetched.
        """
        anchor = as_of or date.today()
        outcomes: dict[EvidenceCategory, list[QueryOutcome]] = {}

        for category in CATEGORIES:
            category_queries = queries.for_category(category)
            if not category_queries:
                outcomes[category] = []
                continue
            window = self.window_for(category, anchor)
            outcomes[category] = await self._search_category(
                category, category_queries, window, simulated=as_of is not None
            )

        bundle = EvidenceBundle(**outcomes)
        failed = sum(
            1 for c in CATEGORIES for o in bundle.outcomes(c) if not o.succeeded
        )
        logger.info(
            "Fetched evidence for %s (as of %s): %d result(s), %d failed query(ies).",
            ticker,
            anchor,
            bundle.result_count,
            failed,
        )

        prices = await self._fetch_prices(ticker, as_of)
        return FetchedEvidence(ticker=ticker, as_of=as_of, bundle=bundle, prices=prices)

    def window_for(self, category: EvidenceCategory, anchor: date) -> tuple[date, date]:
        """Inclusive ``(start, end)`` window for *category* ending at *anchor*."""
        days = self._config.lookback_days.get(category, DEFAULT_LOOKBACK_DAYS[category])
        return anchor - timedelta(days=days), anchor

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    async def _search_category(
        self,
        category: EvidenceCategory,
        queries: list[str],
        window: tuple[date, date],
        simulated: bool,
    ) -> list[QueryOutcome]:
        params = self._search_params(category, simulated)
        # Each task captures its own failure, so gather never short-circuits.
        return list(
            await asyncio.gather(
                *(self._run_query(q, params, window) for q in queries)
            )
        )

    async def _run_query(
        self,
        query: str,
        params: dict[str, Any],
        window: tuple[date, date],
    ) -> QueryOutcome:
        try:
            raw = await self._search.search(query, **params)
            cleaned = filter_by_date_window(deduplicate_response(raw), *window)
            response = SearchResponse.model_validate(cleaned)
        except Exception as exc:
            logger.warning("Search failed for query '%s': %s", query, exc)
            return QueryOutcome(query=query, response=None, succeeded=False)
        return QueryOutcome(query=query, response=response, succeeded=True)

    def _search_params(self, category: EvidenceCategory, simulated: bool) -> dict[str, Any]:
        profile = CATEGORY_PROFILES[category]
        if simulated:
            # As-of searches are bounded by the date window filter, not time_range.
            return {
                "topic": profile.topic,
                "max_results": self._config.max_results,
                "search_depth": self._config.search_depth,
            }
        return {"topic": profile.topic, "time_range": profile.time_range}

    async def _fetch_prices(self, ticker: str, as_of: date | None) -> list[PriceQuote]:
        if as_of is None:
            period1, period2 = self._config.price_history_start, date.today()
        else:
            period1, period2 = as_of - timedelta(days=1), as_of + timedelta(days=1)

        try:
            payload = await self._prices.chart(ticker, period1, period2)
        except Exception as exc:
            raise UpstreamFetchError(
                f"Price fetch failed for {ticker} ({period1} to {period2}): {exc}"
            ) from exc

        quotes = parse_price_series(payload.get("quotes") if isinstance(payload, dict) else None)
        if not quotes:
            raise UpstreamFetchError(f"Stock data not found for {ticker}.")
        return quotes
