"""One-shot analysis output."""

from __future__ import annotations

from datetime import date

from pydantic import BaseModel

from models.evidence import EvidenceBundle, PriceQuote, QuerySet
from models.signal import QueryAnalysis, ResearchReport, TradingSignal


class PriceSnapshot(BaseModel):
    """Headline price figures derived from the fetched series."""

    current_price: float
    first_close: float
    price_change: float
    price_change_pct: float

    @classmethod
    def from_series(cls, prices: list[PriceQuote]) -> PriceSnapshot | None:
        if not prices:
            return None
        first = prices[0].close
        last = prices[-1].close
        change = last - first
        pct = (change / first) * 100 if first else 0.0
        return cls(
            current_price=last,
            first_close=first,
            price_change=change,
            price_change_pct=pct,
        )


class AnalysisResult(BaseModel):
    """All intermediate and final artefacts of one pipeline pass."""

    ticker: str
    as_of: date | None = None
    variant: str
    queries: QuerySet
    evidence: EvidenceBundle
    prices: list[PriceQuote]
    summary: list[str] | None = None
    query_analysis: QueryAnalysis | None = None
    report: ResearchReport | None = None
    signal: TradingSignal

    @property
    def price_snapshot(self) -> PriceSnapshot | None:
        return PriceSnapshot.from_series(self.prices)
