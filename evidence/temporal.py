"""Publication-date filtering of search results.

Missing and malformed dates are treated differently on purpose:

* no ``published_date`` at all  -> kept (absence cannot disqualify an item)
* a ``published_date`` that does not parse -> dropped (untrustworthy metadata)
"""

from __future__ import annotations

import logging
from datetime import date, datetime
from typing import Any

import pandas as pd
from dateutil import parser as dateutil_parser

logger = logging.getLogger(__name__)


def parse_published_date(value: Any) -> date | None:
    """Parse a provider timestamp to a UTC calendar date, or ``None``.

    Anything pandas or dateutil can read is accepted: ISO-8601, RFC 2822
    (``"Mon, 14 Oct 2024 13:05:00 GMT"``) and human-readable forms such as
    ``"March 12, 2025"``.  Naive timestamps are taken to be UTC.
    """
    if isinstance(value, date) and not isinstance(value, datetime):
        return value
    ts = _timestamp(value)
    if ts is None:
        return None
    if ts.tzinfo is not None:
        ts = ts.tz_convert("UTC")
    return ts.date()


def parse_trading_date(value: Any) -> date | None:
    """Calendar date of a price bar in the timezone it was stamped in.

    Daily bars are stamped at exchange-local midnight, so converting them to
    UTC first would move every bar east of Greenwich onto the previous day.
    """
    if isinstance(value, date) and not isinstance(value, datetime):
        return value
    ts = _timestamp(value)
    return None if ts is None else ts.date()


def filter_by_date_window(
    response: dict[str, Any] | None,
    start: date | datetime,
    end: date | datetime,
) -> dict[str, Any] | None:
    """Keep results whose ``published_date`` falls within ``[start, end]``.

    Both bounds are inclusive and compared at day granularity.  ``None`` and
    payloads without a ``results`` list are returned unchanged.
    """
    if not isinstance(response, dict) or not isinstance(response.get("results"), list):
        return response

    start_day = _as_date(start)
    end_day = _as_date(end)

    kept = []
    dropped = 0
    for item in response["results"]:
        raw = item.get("published_date") if isinstance(item, dict) else None
        if _is_missing(raw):
            kept.append(item)
            continue

        published = parse_published_date(raw)
        if published is None or not (start_day <= published <= end_day):
            dropped += 1
            continue
        kept.append(item)

    if dropped:
        logger.debug(
            "Date filter [%s, %s] dropped %d of %d result(s).",
            start_day,
            end_day,
            dropped,
            len(response["results"]),
        )

    filtered = dict(response)
    filtered["results"] = kept
    return filtered


def _is_missing(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def _as_date(value: date | datetime) -> date:
    if isinstance(value, datetime):
        return parse_published_date(value)
    return value


def _timestamp(value: Any) -> pd.Timestamp | None:
    """Read *value* with pandas, falling back to dateutil; ``None`` if neither can."""
    if isinstance(value, str):
        value = value.strip()
        if not value:
            return None
    elif not isinstance(value, datetime):
        return None

    try:
        ts = pd.Timestamp(value)
    except (TypeError, ValueError, OverflowError):
        try:
            ts = pd.Timestamp(dateutil_parser.parse(value))
        except (TypeError, ValueError, OverflowError):
            return None
    return None if pd.isna(ts) else ts
