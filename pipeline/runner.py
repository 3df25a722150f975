"""Pipeline entry points: one pass for a (ticker, as-of) pair, and one-shot mode.

``AnalysisPipeline`` is what the simulation runner calls once per day;
``AnalysisRunner`` adds ticker resolution in front of it for the one-shot
flow.  ``build_pipeline`` wires the production adapters together.
"""

from __future__ import annotations

import logging
from datetime import date

from evidence.fetcher import EvidenceFetcher, SearchProvider
from evidence.prices import PriceHistory
from evidence.tickers import TickerResolver
from models.analysis import AnalysisResult
from models.config import PipelineConfig
from models.result import StepResult
from oracles.base import OracleSuite
from oracles.registry import create_oracles
from pipeline.graph import compile_pipeline_graph

logger = logging.getLogger(__name__)


class AnalysisPipeline:
    """Runs the compiled pipeline graph and packages its state."""

    def __init__(
        self,
        fetcher: EvidenceFetcher,
        oracles: OracleSuite,
        config: PipelineConfig | None = None,
    ) -> None:
        self.config = config or PipelineConfig()
        self._graph = compile_pipeline_graph(fetcher, oracles, self.config)

    async def run(self, ticker: str, as_of: date | None = None) -> StepResult[AnalysisResult]:
        """Plan, fetch, analyse and signal for *ticker* as known on *as_of*.

        Never raises for stage failures: the first failing stage ends the
        pass and its message comes back in ``StepResult.error``.
        """
        state = await self._graph.ainvoke({"ticker": ticker, "as_of": as_of})

        if state.get("error"):
            return StepResult.fail(state["error"])

        return StepResult.ok(
            AnalysisResult(
                ticker=ticker,
                as_of=as_of,
                variant=self.config.variant,
                queries=state["queries"],
                evidence=state["evidence"],
                prices=state.get("prices", []),
                summary=state.get("summary"),
                query_analysis=state.get("query_analysis"),
                report=state.get("report"),
                signal=state["signal"],
            )
        )


class AnalysisRunner:
    """One-shot mode: validate the ticker, then run a live pipeline pass."""

    def __init__(self, resolver: TickerResolver, pipeline: AnalysisPipeline) -> None:
        self._resolver = resolver
        self._pipeline = pipeline

    async def run(self, ticker: str) -> StepResult[AnalysisResult]:
        ticker = ticker.strip().upper()
        resolved = await self._resolver.resolve(ticker)
        if not resolved.success:
            logger.error("Ticker validation failed: %s", resolved.error)
            return StepResult.fail(resolved.error or f"Invalid ticker: {ticker}")

        logger.info("Running %s analysis for %s.", self._pipeline.config.variant, resolved.data)
        result = await self._pipeline.run(resolved.data)
        if not result.success:
            logger.error("Analysis for %s failed: %s", resolved.data, result.error)
        return result


def build_pipeline(
    config: PipelineConfig,
    search: SearchProvider | None = None,
    market_data: PriceHistory | None = None,
    oracles: OracleSuite | None = None,
) -> AnalysisPipeline:
    """Assemble an ``AnalysisPipeline`` from *config*.

    Adapters not passed in are built here: Tavily for search, Yahoo Finance
    for prices, and the oracle backend named in ``config.oracle``.
    """
    if search is None:
        from api_client.search import TavilySearchProvider

        search = TavilySearchProvider()
    if market_data is None:
        from api_client.market_data import YahooMarketData

        market_data = YahooMarketData()
    if oracles is None:
        oracles = create_oracles(config.oracle)

    fetcher = EvidenceFetcher(search, market_data, config.search)
    return AnalysisPipeline(fetcher, oracles, config)
