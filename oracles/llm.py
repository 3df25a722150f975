"""LLM-backed oracle backend.

Each strategy wraps a ``StructuredLLM`` and a prompt pair from
``oracles.prompts``; schema validation happens in ``StructuredLLM``.
"""

from __future__ import annotations

import logging
from datetime import date

from api_client.llm.client import StructuredLLM, create_chat_model
from models.config import OracleConfig
from models.evidence import EvidenceBundle, PriceQuote, QuerySet
from models.signal import QueryAnalysis, ResearchReport, SynthesizedSummary, TradingSignal
from oracles import prompts
from oracles.base import (
    EvidenceSynthesizer,
    OracleSuite,
    QueryPlanner,
    ResearchReporter,
    SignalGenerator,
)
from oracles.registry import register

logger = logging.getLogger(__name__)


class LLMQueryPlanner(QueryPlanner):
    def __init__(self, llm: StructuredLLM) -> None:
        self._llm = llm

    async def plan(
        self,
        ticker: str,
        as_of: date | None = None,
        include_earnings: bool = False,
    ) -> QuerySet:
        queries = await self._llm.generate(
            QuerySet,
            prompts.PLANNER_SYSTEM_PROMPT,
            prompts.PLANNER_USER_PROMPT,
            {
                "ticker": ticker,
                "as_of_clause": prompts.build_as_of_clause(as_of),
                "earnings_instruction": (
                    prompts.EARNINGS_INSTRUCTION
                    if include_earnings
                    else prompts.NO_EARNINGS_INSTRUCTION
                ),
            },
        )
        if not include_earnings and queries.earnings:
            queries = queries.model_copy(update={"earnings": []})
        logger.info(
            "Planned queries for %s (as of %s): %d recent, %d weekly, %d monthly, %d earnings.",
            ticker,
            as_of or "today",
            len(queries.recent),
            len(queries.weekly),
            len(queries.monthly),
            len(queries.earnings),
        )
        return queries


class LLMEvidenceSynthesizer(EvidenceSynthesizer):
    def __init__(self, llm: StructuredLLM) -> None:
        self._llm = llm

    async def synthesize(self, ticker: str, evidence: EvidenceBundle) -> list[str]:
        variables = {"ticker": ticker, **prompts.evidence_variables(evidence)}
        summary = await self._llm.generate(
            SynthesizedSummary,
            prompts.SYNTHESIS_SYSTEM_PROMPT,
            prompts.SYNTHESIS_USER_PROMPT,
            variables,
        )
        return summary.summary_analysis


class LLMSignalGenerator(SignalGenerator):
    def __init__(self, llm: StructuredLLM) -> None:
        self._llm = llm

    async def from_summary(self, ticker: str, summary: list[str]) -> TradingSignal:
        return await self._llm.generate(
            TradingSignal,
            prompts.SIGNAL_SYSTEM_PROMPT,
            prompts.SIGNAL_FROM_SUMMARY_PROMPT,
            {"ticker": ticker, "summary": prompts.format_summary(summary)},
        )

    async def from_report(self, ticker: str, report: ResearchReport) -> TradingSignal:
        return await self._llm.generate(
            TradingSignal,
            prompts.SIGNAL_SYSTEM_PROMPT,
            prompts.SIGNAL_FROM_REPORT_PROMPT,
            {"ticker": ticker, "report_json": prompts.report_json(report)},
        )


class LLMResearchReporter(ResearchReporter):
    def __init__(self, llm: StructuredLLM) -> None:
        self._llm = llm

    async def analyze_queries(self, ticker: str, evidence: EvidenceBundle) -> QueryAnalysis:
        variables = {"ticker": ticker, **prompts.evidence_variables(evidence)}
        return await self._llm.generate(
            QueryAnalysis,
            prompts.QUERY_ANALYSIS_SYSTEM_PROMPT,
            prompts.QUERY_ANALYSIS_USER_PROMPT,
            variables,
        )

    async def write_report(
        self,
        ticker: str,
        prices: list[PriceQuote],
        analysis: QueryAnalysis,
    ) -> ResearchReport:
        return await self._llm.generate(
            ResearchReport,
            prompts.REPORT_SYSTEM_PROMPT,
            prompts.REPORT_USER_PROMPT,
            {
                "ticker": ticker,
                "price_rows": prompts.format_price_rows(prices),
                "analysis_json": prompts.analysis_json(analysis),
            },
        )


@register("llm")
def build_llm_suite(config: OracleConfig) -> OracleSuite:
    """Planner on ``planner_model`` (if set); everything else on ``llm_model``."""
    main = StructuredLLM(
        create_chat_model(config.llm_provider, config.llm_model, config.temperature),
        name=config.llm_model,
    )
    planner_llm = main
    if config.planner_model and config.planner_model != config.llm_model:
        planner_llm = StructuredLLM(
            create_chat_model(config.llm_provider, config.planner_model, config.temperature),
            name=config.planner_model,
        )

    return OracleSuite(
        planner=LLMQueryPlanner(planner_llm),
        synthesizer=LLMEvidenceSynthesizer(main),
        signals=LLMSignalGenerator(main),
        reporter=LLMResearchReporter(main),
    )
