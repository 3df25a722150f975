"""Price-series parsing and the price-history collaborator interface."""

from __future__ import annotations

import logging
import math
from datetime import date
from typing import Any, Protocol

from evidence.temporal import parse_trading_date
from models.evidence import PriceQuote

logger = logging.getLogger(__name__)


class PriceHistory(Protocol):
    """Historical price service: ``chart(ticker, period1, period2) -> {"quotes": [...]}``.

    ``period2`` is inclusive.
    """

    async def chart(
        self,
        ticker: str,
        period1: date,
        period2: date,
        interval: str = "1d",
    ) -> dict[str, Any]:
        ...


def parse_price_series(raw_quotes: Any) -> list[PriceQuote]:
    """Convert raw ``{date, close}`` rows into an ascending ``PriceQuote`` list.

    Rows with an unparseable date or a missing / non-numeric / NaN close are
    dropped.  When several rows share a date the last one wins.
    """
    if not isinstance(raw_quotes, list):
        return []

    by_day: dict[date, float] = {}
    dropped = 0
    for row in raw_quotes:
        if not isinstance(row, dict):
            dropped += 1
            continue
        day = parse_trading_date(row.get("date"))
        close = _as_price(row.get("close"))
        if day is None or close is None:
            dropped += 1
            continue
        by_day[day] = close

    if dropped:
        logger.debug("Dropped %d unusable price row(s).", dropped)

    return [PriceQuote(date=d, close=by_day[d]) for d in sorted(by_day)]


def _as_price(value: Any) -> float | None:
    if isinstance(value, bool):
        return None
    try:
        price = float(value)
    except (TypeError, ValueError):
        return None
    if math.isnan(price) or math.isinf(price):
        return None
    return price
