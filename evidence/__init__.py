"""Evidence collection: ticker resolution, search fan-out, dedup and date filtering."""

from evidence.dedup import deduplicate_response, normalize_url
from evidence.fetcher import EvidenceFetcher, SearchProvider
from evidence.prices import PriceHistory, parse_price_series
from evidence.temporal import filter_by_date_window, parse_published_date, parse_trading_date
from evidence.tickers import SymbolLookup, TickerResolver

__all__ = [
    "EvidenceFetcher",
    "PriceHistory",
    "SearchProvider",
    "SymbolLookup",
    "TickerResolver",
    "deduplicate_response",
    "filter_by_date_window",
    "normalize_url",
    "parse_price_series",
    "parse_published_date",
    "parse_trading_date",
]
