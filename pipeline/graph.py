"""
LangGraph pipeline for one analysis pass.

Graph structure (basic variant):
  [START]
    -> [plan_queries]     (QueryPlanner, as-of cutoff applied)
    -> [fetch_evidence]   (EvidenceFetcher: search fan-out + prices)
    -> [synthesize]       (EvidenceSynthesizer, <= 10 bullets)
    -> [generate_signal]  (SignalGenerator.from_summary + banding)
  [END]

Extended variant replaces [synthesize] with:
    -> [analyze_queries]  (ResearchReporter.analyze_queries)
    -> [write_report]     (ResearchReporter.write_report)
    -> [generate_signal]  (SignalGenerator.from_report + banding)

Every node catches its own failure, records ``error`` and ``failed_stage``
in the state, and the conditional edge after it routes to END.
"""

from __future__ import annotations

import logging
from datetime import date
from typing import Any, Awaitable, Callable, TypedDict

from langgraph.graph import END, START, StateGraph

from evidence.fetcher import EvidenceFetcher
from models.config import PipelineConfig
from models.errors import PipelineError
from models.evidence import EvidenceBundle, PriceQuote, QuerySet
from models.signal import QueryAnalysis, ResearchReport, TradingSignal
from oracles.base import OracleSuite
from oracles.policy import apply_confidence_banding

logger = logging.getLogger(__name__)


# =============================================================================
# STATE DEFINITION
# =============================================================================


class PipelineState(TypedDict, total=False):
    """State that flows through the pipeline graph."""

    # --- Inputs (set once at invocation) ---
    ticker: str
    as_of: date | None

    # --- Stage outputs ---
    queries: QuerySet
    evidence: EvidenceBundle
    prices: list[PriceQuote]
    summary: list[str]
    query_analysis: QueryAnalysis
    report: ResearchReport
    signal: TradingSignal

    # --- Failure ---
    failed_stage: str
    error: str


NodeFn = Callable[[PipelineState], Awaitable[dict[str, Any]]]


def _stage(name: str, body: NodeFn) -> NodeFn:
    """Wrap a node so any exception becomes ``{failed_stage, error}``."""

    async def _node(state: PipelineState) -> dict[str, Any]:
        try:
            return await body(state)
        except PipelineError as exc:
            logger.warning("[%s] %s failed: %s", state.get("ticker"), name, exc)
            return {"failed_stage": name, "error": str(exc)}
        except Exception as exc:
            logger.exception("[%s] %s raised unexpectedly.", state.get("ticker"), name)
            return {"failed_stage": name, "error": f"Unexpected error during {name}: {exc}"}

    _node.__name__ = name
    return _node


def _next_or_end(next_node: str) -> Callable[[PipelineState], str]:
    def _route(state: PipelineState) -> str:
        return END if state.get("error") else next_node

    return _route


# =============================================================================
# GRAPH CONSTRUCTION
# =============================================================================


def build_pipeline_graph(
    fetcher: EvidenceFetcher,
    oracles: OracleSuite,
    config: PipelineConfig,
) -> StateGraph:
    """
    Build the pipeline graph for ``config.variant``.

    Nodes close over the injected collaborators, so the compiled graph is
    reusable across tickers and as-of dates.
    """
    extended = config.variant == "extended"

    async def plan_queries(state: PipelineState) -> dict[str, Any]:
        queries = await oracles.planner.plan(
            state["ticker"], as_of=state.get("as_of"), include_earnings=extended
        )
        return {"queries": queries}

    async def fetch_evidence(state: PipelineState) -> dict[str, Any]:
        fetched = await fetcher.fetch(state["ticker"], state["queries"], as_of=state.get("as_of"))
        return {"evidence": fetched.bundle, "prices": fetched.prices}

    async def synthesize(state: PipelineState) -> dict[str, Any]:
        summary = await oracles.synthesizer.synthesize(state["ticker"], state["evidence"])
        return {"summary": summary}

    async def analyze_queries(state: PipelineState) -> dict[str, Any]:
        analysis = await oracles.reporter.analyze_queries(state["ticker"], state["evidence"])
        return {"query_analysis": analysis}

    async def write_report(state: PipelineState) -> dict[str, Any]:
        report = await oracles.reporter.write_report(
            state["ticker"], state.get("prices", []), state["query_analysis"]
        )
        return {"report": report}

    async def generate_signal(state: PipelineState) -> dict[str, Any]:
        if extended:
            signal = await oracles.signals.from_report(state["ticker"], state["report"])
        else:
            signal = await oracles.signals.from_summary(state["ticker"], state["summary"])
        if config.enforce_banding:
            signal = apply_confidence_banding(signal)
        logger.info(
            "[%s] Signal (as of %s): %s, confidence %d, %s %d.",
            state["ticker"],
            state.get("as_of") or "today",
            signal.signal,
            signal.confidence,
            signal.action,
            signal.stocks,
        )
        return {"signal": signal}

    if extended:
        steps: list[tuple[str, NodeFn]] = [
            ("plan_queries", plan_queries),
            ("fetch_evidence", fetch_evidence),
            ("analyze_queries", analyze_queries),
            ("write_report", write_report),
            ("generate_signal", generate_signal),
        ]
    else:
        steps = [
            ("plan_queries", plan_queries),
            ("fetch_evidence", fetch_evidence),
            ("synthesize", synthesize),
            ("generate_signal", generate_signal),
        ]

    graph = StateGraph(PipelineState)
    for name, body in steps:
        graph.add_node(name, _stage(name, body))

    graph.add_edge(START, steps[0][0])
    for (current, _), (following, _) in zip(steps, steps[1:]):
        graph.add_conditional_edges(
            current,
            _next_or_end(following),
            {following: following, END: END},
        )
    graph.add_edge(steps[-1][0], END)

    return graph


def compile_pipeline_graph(
    fetcher: EvidenceFetcher,
    oracles: OracleSuite,
    config: PipelineConfig,
):
    """Build and compile the pipeline graph, ready for ``ainvoke``."""
    return build_pipeline_graph(fetcher, oracles, config).compile()
