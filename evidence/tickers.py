"""Ticker validation against a symbol-lookup service."""

from __future__ import annotations

import logging
from typing import Any, Protocol

from models.errors import TickerValidationError
from models.result import StepResult

logger = logging.getLogger(__name__)

MAX_SUGGESTIONS = 3


class SymbolLookup(Protocol):
    """Symbol search service: ``search(query) -> {"quotes": [{"symbol": ...}, ...]}``."""

    async def search(self, query: str) -> dict[str, Any]:
        ...


class TickerResolver:
    """Resolve a user-supplied symbol to a canonical ticker.

    Single attempt, no retries.  Every outcome, including a lookup failure,
    comes back as a ``StepResult``; ``data`` holds the canonical symbol.
    """

    def __init__(self, lookup: SymbolLookup) -> None:
        self._lookup = lookup

    async def resolve(self, ticker: str) -> StepResult[str]:
        try:
            payload = await self._lookup.search(ticker)
        except Exception as exc:
            logger.error("Validation failed for ticker '%s': %s", ticker, exc)
            message = str(exc)
            if "Not Found" in message or "Failed to fetch" in message:
                return StepResult.fail(f"Error searching for ticker symbol: {ticker}")
            return StepResult.fail("Failed to validate ticker due to an unexpected error.")

        quotes = payload.get("quotes") if isinstance(payload, dict) else None
        if not quotes:
            return StepResult.fail(f"No results found for ticker symbol: {ticker}")

        symbols = [
            q["symbol"]
            for q in quotes
            if isinstance(q, dict) and isinstance(q.get("symbol"), str)
        ]
        if ticker in symbols:
            logger.info("Ticker '%s' validated.", ticker)
            return StepResult.ok(ticker)

        suggestions = ", ".join(symbols[:MAX_SUGGESTIONS])
        if suggestions:
            return StepResult.fail(
                f'Ticker symbol "{ticker}" not found. '
                f"Did you mean one of these: {suggestions}?"
            )
        return StepResult.fail(
            f'Ticker symbol "{ticker}" not found. No similar symbols were identified.'
        )

    async def require(self, ticker: str) -> str:
        """Like ``resolve`` but raises ``TickerValidationError`` on failure."""
        result = await self.resolve(ticker)
        if not result.success:
            raise TickerValidationError(result.error)
        return result.data
