"""Structured outputs of the generative steps: summary, analysis, report, signal.

Each model doubles as the structured-output schema handed to the LLM, so
field descriptions are written for the model as much as for readers.
"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field, field_validator

SignalDirection = Literal["bullish", "bearish", "neutral"]
TradeAction = Literal["buy", "sell", "short", "cover", "hold"]
TimeHorizon = Literal["short_term", "medium_term", "long_term"]

MAX_SUMMARY_BULLETS = 10


# =============================================================================
# SYNTHESIS (basic pipeline)
# =============================================================================


class SynthesizedSummary(BaseModel):
    """Weighted bullet-point distillation of an evidence bundle."""

    summary_analysis: list[str] = Field(
        description=(
            "Up to 10 concise bullet points summarising the key findings, "
            "drawn only from the supplied search results."
        ),
    )

    @field_validator("summary_analysis")
    @classmethod
    def _cap_bullets(cls, value: list[str]) -> list[str]:
        bullets = [b.strip() for b in value if isinstance(b, str) and b.strip()]
        return bullets[:MAX_SUMMARY_BULLETS]


# =============================================================================
# QUERY ANALYSIS + RESEARCH REPORT (extended pipeline)
# =============================================================================


class QueryInsight(BaseModel):
    query: str
    relevant: bool = Field(description="Whether the results say anything useful about the ticker.")
    key_points: list[str] = Field(
        default_factory=list,
        description="Facts extracted from this query's results.",
    )


class QueryAnalysis(BaseModel):
    """Per-query relevance analysis across the four evidence categories."""

    recent_analysis: list[QueryInsight] = Field(default_factory=list)
    weekly_analysis: list[QueryInsight] = Field(default_factory=list)
    monthly_analysis: list[QueryInsight] = Field(default_factory=list)
    earnings_call_analysis: list[QueryInsight] = Field(default_factory=list)

    def relevant_points(self) -> list[str]:
        points: list[str] = []
        for insights in (
            self.recent_analysis,
            self.weekly_analysis,
            self.monthly_analysis,
            self.earnings_call_analysis,
        ):
            for insight in insights:
                if insight.relevant:
                    points.extend(insight.key_points)
        return points


class KeyPricePoint(BaseModel):
    description: str
    value: float


class StockPerformance(BaseModel):
    recent_trend: str
    key_price_points: list[KeyPricePoint] = Field(default_factory=list)
    volatility_assessment: str


class FundamentalAnalysis(BaseModel):
    earnings: str
    revenue: str
    growth_outlook: str
    management_commentary: str | None = None


class MarketSentiment(BaseModel):
    analyst_ratings: str
    institutional_activity: str | None = None
    retail_sentiment: str | None = None
    news_sentiment: str


class RiskFactor(BaseModel):
    risk_factor: str
    impact: Literal["Low", "Medium", "High"]
    description: str


class ResearchReport(BaseModel):
    """Multi-section research report consumed by the report-driven signal step."""

    executive_summary: str
    stock_performance: StockPerformance
    fundamental_analysis: FundamentalAnalysis
    market_sentiment: MarketSentiment
    risk_assessment: list[RiskFactor] = Field(default_factory=list)
    competitive_position: str
    conclusion: str


# =============================================================================
# TRADING SIGNAL
# =============================================================================


class PriceTargets(BaseModel):
    conservative: float | None = None
    base_case: float | None = None
    optimistic: float | None = None


class TradingSignal(BaseModel):
    """Directional decision with confidence, action and size."""

    signal: SignalDirection
    confidence: int = Field(
        ge=0,
        le=100,
        description=(
            "Confidence 0-100 from the clarity, consistency and strength of the "
            "evidence. 30 or below means the evidence is too weak to act on."
        ),
    )
    action: TradeAction
    stocks: int = Field(
        ge=0,
        description=(
            "Suggested share count: about 50 for low but actionable confidence, "
            "100 for moderate, 200 for high, 0 for hold."
        ),
    )
    reason: str = Field(
        description="Short justification that cites specific findings from the evidence.",
    )
    price_targets: PriceTargets | None = None
    time_horizon: TimeHorizon | None = None

    @field_validator("confidence", mode="before")
    @classmethod
    def _round_confidence(cls, value):
        if isinstance(value, float):
            return round(value)
        return value
