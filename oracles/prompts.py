"""
Prompt templates for the generative pipeline steps.

All templates are rendered through ``ChatPromptTemplate``: placeholders use
``{name}`` and bulky payloads (evidence JSON, price rows) are passed in as
variables so their braces are never parsed as template fields.

Design goals:
  - Evidence only: every analysis step is told to use nothing but its input
  - No lookahead: an as-of date turns into an explicit cutoff instruction
  - Stable policy: the confidence-to-action bands are spelled out verbatim
"""

from __future__ import annotations

import json
from datetime import date

from models.evidence import EvidenceBundle, PriceQuote
from models.signal import QueryAnalysis, ResearchReport


# =============================================================================
# SHARED RULES
# =============================================================================

CONFIDENCE_POLICY = """
## Action Policy
- Confidence 30 or below: action MUST be "hold" and stocks MUST be 0.
- Neutral signal: action is "hold", stocks 0.
- Bullish with confidence above 30: "buy" (or "cover" when closing a short).
- Bearish with confidence above 30: "sell" when a position is held, "short" to open one.
- Share count by confidence: about 50 for 31-60, 100 for 61-80, 200 for 81-100.
"""

EVIDENCE_ONLY = """
## Constraints
- Use ONLY the material provided below. Do not add outside knowledge.
- Do not give financial advice beyond the requested structured output.
"""


def build_as_of_clause(as_of: date | None) -> str:
    """Cutoff instruction for the planner; empty when running live."""
    if as_of is None:
        return "Assume the present is today; recent news is wanted."
    day = as_of.isoformat()
    return (
        f"IMPORTANT: The current date is {day}. You are reconstructing what an "
        f"analyst could have known on that day. Every query must target "
        f"information published strictly BEFORE {day}. Never ask about events, "
        f"results or prices on or after {day}; include the date or month in the "
        f"query text (e.g. 'as of {as_of.strftime('%B %Y')}') so the search "
        f"engine favours period-appropriate sources."
    )


# =============================================================================
# QUERY PLANNING
# =============================================================================

PLANNER_SYSTEM_PROMPT = """You are a financial research assistant who writes search \
queries for a news search API. Queries must be specific to the requested ticker, \
phrased the way one would search a financial news database, and likely to return \
concrete, decision-relevant facts. Avoid vague queries."""

PLANNER_USER_PROMPT = """Write search queries for the stock ticker {ticker}.

{as_of_clause}

Produce these query sets:
- recent (max 5): the last 24-48 hours. Earnings releases, analyst rating changes, \
M&A activity, major partnerships, unexpected company events.
- weekly (max 5): the last 7 days. Follow-ups on recent news, competitor and sector \
developments, short-term narrative.
- monthly (max 5): the last 30 days. Product launches, regulatory changes, broader \
sentiment shifts, baseline narrative.
{earnings_instruction}"""

EARNINGS_INSTRUCTION = """- earnings (max 3): the most recent earnings call. Reported revenue \
and EPS versus expectations, guidance, management commentary."""

NO_EARNINGS_INSTRUCTION = "- earnings: leave empty."


# =============================================================================
# SYNTHESIS
# =============================================================================

SYNTHESIS_SYSTEM_PROMPT = """You are a financial analyst who condenses search results \
about one stock into a short, weighted briefing.""" + EVIDENCE_ONLY

SYNTHESIS_USER_PROMPT = """Ticker: {ticker}

PRIMARY evidence (last 24-48 hours), weight 70%:
```json
{recent_json}
```

SECONDARY evidence (last 7 days), weight 20%:
```json
{weekly_json}
```

BASELINE evidence (last 30 days), weight 10%:
```json
{monthly_json}
```

Method:
1. Pull the most significant market-moving facts from PRIMARY.
2. Say whether SECONDARY supports, contradicts or adds nuance to them.
3. Say whether recent news departs from the BASELINE narrative.
4. Assess sentiment per timeframe and note conflicts between sources.
5. Prefer concrete figures: reported numbers, price targets, event outcomes.

Return summary_analysis as at most 10 bullet strings, PRIMARY findings first."""


# =============================================================================
# SIGNALS
# =============================================================================

SIGNAL_SYSTEM_PROMPT = """You are a trading analyst who turns an evidence briefing \
into one structured trading signal.""" + CONFIDENCE_POLICY + EVIDENCE_ONLY

SIGNAL_FROM_SUMMARY_PROMPT = """Ticker: {ticker}

The briefing below was synthesized with weights PRIMARY 70% (24-48 hours), \
SECONDARY 20% (7 days), BASELINE 10% (30 days).

Briefing:
{summary}

Return signal, confidence, action, stocks and reason. The reason must cite the \
specific briefing points that drive the decision."""

SIGNAL_FROM_REPORT_PROMPT = """Ticker: {ticker}

Research report:
```json
{report_json}
```

Return signal, confidence, action, stocks and reason, plus price_targets \
(conservative, base_case, optimistic) and time_horizon \
(short_term, medium_term or long_term). The reason must cite specific report \
sections."""


# =============================================================================
# QUERY ANALYSIS + RESEARCH REPORT
# =============================================================================

QUERY_ANALYSIS_SYSTEM_PROMPT = """You are a research analyst screening search results \
for relevance to one stock.""" + EVIDENCE_ONLY

QUERY_ANALYSIS_USER_PROMPT = """Ticker: {ticker}

For every query in every category below, decide whether its results are relevant \
to {ticker} and list the key factual points they contain.

recent (24-48 hours):
```json
{recent_json}
```

weekly (7 days):
```json
{weekly_json}
```

monthly (30 days):
```json
{monthly_json}
```

earnings call:
```json
{earnings_json}
```"""

REPORT_SYSTEM_PROMPT = """You are an equity research analyst writing a concise, \
structured research report.""" + EVIDENCE_ONLY

REPORT_USER_PROMPT = """Ticker: {ticker}

Daily closing prices (date, close):
{price_rows}

Relevant findings from the news analysis:
```json
{analysis_json}
```

Write the report: executive summary, stock performance (recent trend, key price \
points, volatility), fundamental analysis (earnings, revenue, growth outlook, \
management commentary if available), market sentiment (analyst ratings, \
institutional and retail activity if available, news sentiment), risk assessment \
(each risk rated Low, Medium or High), competitive position and conclusion."""


# =============================================================================
# PAYLOAD BUILDERS
# =============================================================================


def evidence_variables(evidence: EvidenceBundle) -> dict[str, str]:
    """JSON payloads for each category, keyed by template variable name."""
    return {
        f"{category}_json": json.dumps(evidence.for_prompt(category), indent=2, default=str)
        for category in ("recent", "weekly", "monthly", "earnings")
    }


def format_summary(summary: list[str]) -> str:
    return "\n".join(f"- {point}" for point in summary) or "- (no findings)"


def format_price_rows(prices: list[PriceQuote], limit: int = 120) -> str:
    """One ``YYYY-MM-DD, close`` line per quote, most recent *limit* rows."""
    rows = prices[-limit:]
    return "\n".join(f"{q.date.isoformat()}, {q.close:.2f}" for q in rows) or "(no prices)"


def report_json(report: ResearchReport) -> str:
    return json.dumps(report.model_dump(), indent=2)


def analysis_json(analysis: QueryAnalysis) -> str:
    return json.dumps(analysis.model_dump(), indent=2)
