"""Data models for the evidence pipeline and trading simulation.

The evidence, oracle, pipeline and simulation packages all import from models.
"""

from models.analysis import AnalysisResult, PriceSnapshot
from models.config import OracleConfig, PipelineConfig, SearchConfig, SimulationConfig
from models.errors import ModelOutputError, PipelineError, TickerValidationError, UpstreamFetchError
from models.evidence import (
    EvidenceBundle,
    FetchedEvidence,
    ImageItem,
    PriceQuote,
    QueryOutcome,
    QuerySet,
    SearchResponse,
    SearchResultItem,
)
from models.log import SimulationDayLog, SimulationResult, SimulationSummary
from models.portfolio import PortfolioState, TradeExecution
from models.result import StepResult
from models.signal import (
    PriceTargets,
    QueryAnalysis,
    QueryInsight,
    ResearchReport,
    SynthesizedSummary,
    TradingSignal,
)

__all__ = [
    # analysis
    "AnalysisResult",
    "PriceSnapshot",
    # config
    "OracleConfig",
    "PipelineConfig",
    "SearchConfig",
    "SimulationConfig",
    # errors
    "ModelOutputError",
    "PipelineError",
    "TickerValidationError",
    "UpstreamFetchError",
    # evidence
    "EvidenceBundle",
    "FetchedEvidence",
    "ImageItem",
    "PriceQuote",
    "QueryOutcome",
    "QuerySet",
    "SearchResponse",
    "SearchResultItem",
    # log
    "SimulationDayLog",
    "SimulationResult",
    "SimulationSummary",
    # portfolio
    "PortfolioState",
    "TradeExecution",
    # result
    "StepResult",
    # signal
    "PriceTargets",
    "QueryAnalysis",
    "QueryInsight",
    "ResearchReport",
    "SynthesizedSummary",
    "TradingSignal",
]
