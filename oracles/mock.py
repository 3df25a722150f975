"""Deterministic offline oracle backend (no API calls).

Selected with ``oracle.backend: mock``.  Useful for dry runs of the full
simulation loop and for tests: the same evidence always yields the same
queries, summary and signal.
"""

from __future__ import annotations

import re
import statistics
from datetime import date

from models.config import OracleConfig
from models.evidence import CATEGORIES, EvidenceBundle, PriceQuote, QuerySet
from models.signal import (
    FundamentalAnalysis,
    KeyPricePoint,
    MarketSentiment,
    PriceTargets,
    QueryAnalysis,
    QueryInsight,
    ResearchReport,
    RiskFactor,
    StockPerformance,
    SynthesizedSummary,
    TradingSignal,
)
from oracles.base import (
    EvidenceSynthesizer,
    OracleSuite,
    QueryPlanner,
    ResearchReporter,
    SignalGenerator,
)
from oracles.policy import default_size
from oracles.registry import register

POSITIVE_TERMS = frozenset({
    "beat", "beats", "upgrade", "upgraded", "surge", "surges", "record",
    "growth", "raises", "raised", "bullish", "outperform", "rally", "strong",
})
NEGATIVE_TERMS = frozenset({
    "miss", "misses", "downgrade", "downgraded", "plunge", "plunges", "lawsuit",
    "cut", "cuts", "bearish", "underperform", "decline", "weak", "probe",
})

_WORD = re.compile(r"[a-z]+")


def _mock_score(texts: list[str]) -> int:
    """Positive minus negative keyword hits across *texts*."""
    score = 0
    for text in texts:
        for word in _WORD.findall(text.lower()):
            if word in POSITIVE_TERMS:
                score += 1
            elif word in NEGATIVE_TERMS:
                score -= 1
    return score


def _mock_signal(texts: list[str], source: str) -> TradingSignal:
    score = _mock_score(texts)
    if score == 0:
        return TradingSignal(
            signal="neutral",
            confidence=20,
            action="hold",
            stocks=0,
            reason=f"No directional keywords in the {source}.",
        )
    confidence = min(95, 30 + 15 * abs(score))
    bullish = score > 0
    return TradingSignal(
        signal="bullish" if bullish else "bearish",
        confidence=confidence,
        action="buy" if bullish else "sell",
        stocks=default_size(confidence),
        reason=f"Keyword balance of {score:+d} across the {source}.",
    )


class MockQueryPlanner(QueryPlanner):
    async def plan(
        self,
        ticker: str,
        as_of: date | None = None,
        include_earnings: bool = False,
    ) -> QuerySet:
        suffix = f" before {as_of.isoformat()}" if as_of else ""
        return QuerySet(
            recent=[f"{ticker} stock news{suffix}", f"{ticker} analyst rating change{suffix}"],
            weekly=[f"{ticker} weekly stock performance{suffix}"],
            monthly=[f"{ticker} monthly outlook and sector trends{suffix}"],
            earnings=[f"{ticker} latest earnings call highlights{suffix}"] if include_earnings else [],
        )


class MockEvidenceSynthesizer(EvidenceSynthesizer):
    async def synthesize(self, ticker: str, evidence: EvidenceBundle) -> list[str]:
        bullets: list[str] = []
        for category in CATEGORIES:
            for outcome in evidence.outcomes(category):
                if outcome.response is None:
                    continue
                bullets.extend(
                    f"[{category}] {r.title}" for r in outcome.response.results if r.title
                )
        if not bullets:
            bullets = [f"No material news found for {ticker}."]
        return SynthesizedSummary(summary_analysis=bullets).summary_analysis


class MockSignalGenerator(SignalGenerator):
    async def from_summary(self, ticker: str, summary: list[str]) -> TradingSignal:
        return _mock_signal(summary, "summary")

    async def from_report(self, ticker: str, report: ResearchReport) -> TradingSignal:
        signal = _mock_signal(
            [report.executive_summary, report.market_sentiment.news_sentiment, report.conclusion],
            "report",
        )
        last = next(
            (p.value for p in report.stock_performance.key_price_points if p.description == "Last close"),
            None,
        )
        targets = None
        if last is not None:
            targets = PriceTargets(conservative=last * 0.95, base_case=last, optimistic=last * 1.05)
        return signal.model_copy(update={"price_targets": targets, "time_horizon": "short_term"})


class MockResearchReporter(ResearchReporter):
    async def analyze_queries(self, ticker: str, evidence: EvidenceBundle) -> QueryAnalysis:
        sections: dict[str, list[QueryInsight]] = {}
        for category in CATEGORIES:
            insights = []
            for outcome in evidence.outcomes(category):
                titles = [r.title for r in outcome.response.results if r.title] if outcome.response else []
                insights.append(
                    QueryInsight(query=outcome.query, relevant=bool(titles), key_points=titles[:3])
                )
            key = "earnings_call_analysis" if category == "earnings" else f"{category}_analysis"
            sections[key] = insights
        return QueryAnalysis(**sections)

    async def write_report(
        self,
        ticker: str,
        prices: list[PriceQuote],
        analysis: QueryAnalysis,
    ) -> ResearchReport:
        points = analysis.relevant_points()
        closes = [q.close for q in prices]
        key_points: list[KeyPricePoint] = []
        trend = "No price data."
        volatility = "Unknown."
        if closes:
            key_points = [
                KeyPricePoint(description="First close", value=closes[0]),
                KeyPricePoint(description="Last close", value=closes[-1]),
                KeyPricePoint(description="High", value=max(closes)),
                KeyPricePoint(description="Low", value=min(closes)),
            ]
            change = (closes[-1] - closes[0]) / closes[0] * 100 if closes[0] else 0.0
            trend = f"{'Up' if change >= 0 else 'Down'} {abs(change):.2f}% over {len(closes)} sessions."
            returns = [b / a - 1 for a, b in zip(closes, closes[1:]) if a]
            if len(returns) >= 2:
                volatility = f"Daily return stdev {statistics.stdev(returns) * 100:.2f}%."

        headline = " ".join(points[:5]) or f"No relevant news found for {ticker}."
        return ResearchReport(
            executive_summary=headline,
            stock_performance=StockPerformance(
                recent_trend=trend,
                key_price_points=key_points,
                volatility_assessment=volatility,
            ),
            fundamental_analysis=FundamentalAnalysis(
                earnings="Not assessed offline.",
                revenue="Not assessed offline.",
                growth_outlook="Not assessed offline.",
            ),
            market_sentiment=MarketSentiment(
                analyst_ratings="Not assessed offline.",
                news_sentiment=headline,
            ),
            risk_assessment=[
                RiskFactor(
                    risk_factor="Offline analysis",
                    impact="Medium",
                    description="Report built from headlines and prices only.",
                )
            ],
            competitive_position="Not assessed offline.",
            conclusion=headline,
        )


@register("mock")
def build_mock_suite(config: OracleConfig) -> OracleSuite:
    return OracleSuite(
        planner=MockQueryPlanner(),
        synthesizer=MockEvidenceSynthesizer(),
        signals=MockSignalGenerator(),
        reporter=MockResearchReporter(),
    )
