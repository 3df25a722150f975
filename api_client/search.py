"""Tavily web/news search adapter."""

from __future__ import annotations

import logging
import os
from typing import Any

from tavily import AsyncTavilyClient

logger = logging.getLogger(__name__)


class TavilySearchProvider:
    """``SearchProvider`` backed by ``tavily.AsyncTavilyClient``.

    Returns Tavily's raw response mapping; dedup, date filtering and
    validation are the fetcher's job.
    """

    def __init__(self, api_key: str | None = None) -> None:
        key = api_key or os.getenv("TAVILY_API_KEY")
        if not key:
            raise ValueError(
                "TavilySearchProvider requires an API key. "
                "Pass api_key= or set the TAVILY_API_KEY environment variable."
            )
        self._client = AsyncTavilyClient(api_key=key)

    async def search(self, query: str, **params: Any) -> dict[str, Any]:
        logger.debug("Tavily search '%s' %s", query, params)
        return await self._client.search(query=query, **params)
