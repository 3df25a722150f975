"""Tests for the deterministic mock backend and the oracle registry."""

import asyncio
from datetime import date

import pytest

from models.config import OracleConfig
from models.evidence import EvidenceBundle, PriceQuote, QueryOutcome, SearchResponse
from oracles.base import OracleSuite
from oracles.mock import (
    MockEvidenceSynthesizer,
    MockQueryPlanner,
    MockResearchReporter,
    MockSignalGenerator,
)
from oracles.registry import create_oracles


def _bundle(*titles: str) -> EvidenceBundle:
    response = SearchResponse.model_validate(
        {"results": [{"title": t, "url": f"https://example.com/{i}"} for i, t in enumerate(titles)]}
    )
    return EvidenceBundle(
        recent=[QueryOutcome(query="recent q", response=response, succeeded=True)],
        weekly=[QueryOutcome(query="weekly q", response=None, succeeded=False)],
    )


# =============================================================================
# 1. REGISTRY
# =============================================================================


class TestRegistry:
    def test_mock_backend_registered(self):
        suite = create_oracles(OracleConfig(backend="mock"))
        assert isinstance(suite, OracleSuite)
        assert isinstance(suite.planner, MockQueryPlanner)

    def test_unknown_backend_raises(self):
        with pytest.raises(KeyError, match="Unknown oracle backend 'nope'"):
            create_oracles(OracleConfig(backend="nope"))


# =============================================================================
# 2. MOCK STRATEGIES
# =============================================================================


class TestMockPlanner:
    def test_as_of_date_in_every_query(self):
        queries = asyncio.run(MockQueryPlanner().plan("AAPL", as_of=date(2025, 3, 14)))
        all_queries = queries.recent + queries.weekly + queries.monthly
        assert all_queries
        assert all("before 2025-03-14" in q for q in all_queries)
        assert queries.earnings == []

    def test_earnings_on_request(self):
        queries = asyncio.run(MockQueryPlanner().plan("AAPL", include_earnings=True))
        assert len(queries.earnings) == 1


class TestMockSynthesizer:
    def test_titles_become_bullets(self):
        summary = asyncio.run(
            MockEvidenceSynthesizer().synthesize("AAPL", _bundle("Apple beats", "Apple rallies"))
        )
        assert summary == ["[recent] Apple beats", "[recent] Apple rallies"]

    def test_no_evidence(self):
        summary = asyncio.run(MockEvidenceSynthesizer().synthesize("AAPL", EvidenceBundle()))
        assert summary == ["No material news found for AAPL."]


class TestMockSignals:
    def test_positive_keywords_buy(self):
        signal = asyncio.run(
            MockSignalGenerator().from_summary("AAPL", ["Apple beats estimates", "Analyst upgrade"])
        )
        assert signal.signal == "bullish"
        assert signal.action == "buy"
        assert signal.confidence == 60
        assert signal.stocks == 50

    def test_negative_keywords_sell(self):
        signal = asyncio.run(MockSignalGenerator().from_summary("AAPL", ["Shares plunge on miss"]))
        assert signal.signal == "bearish"
        assert signal.action == "sell"
        assert signal.confidence == 60

    def test_no_keywords_hold(self):
        signal = asyncio.run(MockSignalGenerator().from_summary("AAPL", ["Apple holds event"]))
        assert signal.action == "hold"
        assert signal.stocks == 0
        assert signal.confidence <= 30

    def test_deterministic(self):
        summary = ["Record growth", "Lawsuit filed"]
        first = asyncio.run(MockSignalGenerator().from_summary("AAPL", summary))
        second = asyncio.run(MockSignalGenerator().from_summary("AAPL", summary))
        assert first == second


class TestMockReporter:
    def test_report_round_feeds_report_signal(self):
        reporter = MockResearchReporter()
        analysis = asyncio.run(reporter.analyze_queries("AAPL", _bundle("Apple beats")))
        assert analysis.recent_analysis[0].relevant is True
        assert analysis.weekly_analysis[0].relevant is False
        assert analysis.relevant_points() == ["Apple beats"]

        prices = [
            PriceQuote(date=date(2025, 3, 10), close=100.0),
            PriceQuote(date=date(2025, 3, 11), close=102.0),
            PriceQuote(date=date(2025, 3, 12), close=101.0),
        ]
        report = asyncio.run(reporter.write_report("AAPL", prices, analysis))
        assert report.stock_performance.recent_trend.startswith("Up 1.00%")
        assert {p.description for p in report.stock_performance.key_price_points} == {
            "First close",
            "Last close",
            "High",
            "Low",
        }

        signal = asyncio.run(MockSignalGenerator().from_report("AAPL", report))
        assert signal.signal == "bullish"
        assert signal.time_horizon == "short_term"
        assert signal.price_targets.base_case == 101.0
