"""Abstract interfaces for the generative steps of the pipeline.

Every backend (LLM-backed, deterministic mock, test stubs) implements these
so the pipeline graph can call them interchangeably.  Implementations raise
``ModelOutputError`` on failure; the graph turns that into a halted stage.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import date

from models.evidence import EvidenceBundle, PriceQuote, QuerySet
from models.signal import QueryAnalysis, ResearchReport, TradingSignal


class QueryPlanner(ABC):
    @abstractmethod
    async def plan(
        self,
        ticker: str,
        as_of: date | None = None,
        include_earnings: bool = False,
    ) -> QuerySet:
        """Produce categorised search queries for *ticker*.

        When *as_of* is given the queries must only ask for information
        knowable strictly before that date.
        """


class EvidenceSynthesizer(ABC):
    @abstractmethod
    async def synthesize(self, ticker: str, evidence: EvidenceBundle) -> list[str]:
        """Compress *evidence* into at most 10 bullets, weighted 70/20/10."""


class SignalGenerator(ABC):
    @abstractmethod
    async def from_summary(self, ticker: str, summary: list[str]) -> TradingSignal:
        """Map a synthesized summary to a trading signal."""

    @abstractmethod
    async def from_report(self, ticker: str, report: ResearchReport) -> TradingSignal:
        """Map a research report to a trading signal with targets and horizon."""


class ResearchReporter(ABC):
    @abstractmethod
    async def analyze_queries(self, ticker: str, evidence: EvidenceBundle) -> QueryAnalysis:
        """Judge each query's results for relevance and extract key points."""

    @abstractmethod
    async def write_report(
        self,
        ticker: str,
        prices: list[PriceQuote],
        analysis: QueryAnalysis,
    ) -> ResearchReport:
        """Produce the multi-section research report."""


@dataclass
class OracleSuite:
    """The four generative strategies a pipeline run needs."""

    planner: QueryPlanner
    synthesizer: EvidenceSynthesizer
    signals: SignalGenerator
    reporter: ResearchReporter
