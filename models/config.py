"""Pipeline and simulation configuration models, loaded from YAML.

These live in ``models/`` because they are shared data contracts used by the
evidence fetcher, the oracle registry, the pipeline graph and the
simulation runner.
"""

from __future__ import annotations

from datetime import date
from pathlib import Path
from typing import Literal

import yaml
from pydantic import BaseModel, Field

DEFAULT_LOOKBACK_DAYS: dict[str, int] = {
    "recent": 2,
    "weekly": 7,
    "monthly": 30,
    "earnings": 90,
}


class OracleConfig(BaseModel):
    """Configuration for the generative steps (planner, synthesizer, signals, report)."""

    backend: str = Field(
        default="llm",
        description="Registered oracle backend, e.g. 'llm' or 'mock'.",
    )
    llm_provider: str = Field(
        default="openai",
        description="LLM provider identifier, e.g. 'openai', 'anthropic'.",
    )
    llm_model: str = Field(
        default="gpt-4o",
        description="Model used for synthesis, research reports and signals.",
    )
    planner_model: str | None = Field(
        default=None,
        description="Optional faster model for query planning. Falls back to llm_model.",
    )
    temperature: float = Field(
        default=0.2,
        ge=0.0,
        le=2.0,
        description="Sampling temperature for the LLM.",
    )


class SearchConfig(BaseModel):
    """Search provider and price-window settings for the evidence fetcher."""

    max_results: int = Field(
        default=5,
        ge=1,
        le=20,
        description="Results requested per query when searching an as-of window.",
    )
    search_depth: Literal["basic", "advanced"] = Field(
        default="advanced",
        description="Search depth requested for as-of (simulation) queries.",
    )
    lookback_days: dict[str, int] = Field(
        default_factory=lambda: dict(DEFAULT_LOOKBACK_DAYS),
        description="Per-category window length in days, anchored at the as-of date.",
    )
    price_history_start: date = Field(
        default=date(2024, 1, 1),
        description="Start of the price window fetched in one-shot mode.",
    )


class PipelineConfig(BaseModel):
    """Configuration for one pass through plan -> fetch -> analyse -> signal."""

    variant: Literal["basic", "extended"] = Field(
        default="basic",
        description=(
            "'basic' feeds the synthesized bullet summary to the signal step; "
            "'extended' adds query analysis and a research report."
        ),
    )
    enforce_banding: bool = Field(
        default=True,
        description="Clamp model signals to the confidence-to-action policy.",
    )
    oracle: OracleConfig = Field(default_factory=OracleConfig)
    search: SearchConfig = Field(default_factory=SearchConfig)

    @classmethod
    def from_yaml(cls, path: str | Path) -> PipelineConfig:
        """Load and validate a ``PipelineConfig`` from a YAML file."""
        return cls(**_load_mapping(path))


class SimulationConfig(BaseModel):
    """Top-level configuration for a day-stepped simulation run."""

    ticker: str = Field(description="Symbol to simulate, e.g. 'AAPL'.")
    timeframe_days: int = Field(
        default=5,
        ge=1,
        le=90,
        description="Number of calendar days back from end_date to simulate.",
    )
    end_date: date | None = Field(
        default=None,
        description="Last day of the window. Defaults to yesterday.",
    )
    initial_cash: float = Field(
        default=10_000.0,
        gt=0,
        description="Starting cash balance for the portfolio.",
    )
    initial_shares: int = Field(
        default=0,
        ge=0,
        description="Shares held before the first simulated day.",
    )
    trade_size: int = Field(
        default=100,
        gt=0,
        description="Fixed per-trade share quantity (Q).",
    )
    pipeline: PipelineConfig = Field(default_factory=PipelineConfig)

    @classmethod
    def from_yaml(cls, path: str | Path) -> SimulationConfig:
        """Load and validate a ``SimulationConfig`` from a YAML file.

        Raises ``FileNotFoundError`` if the file does not exist and
        ``ValueError`` if the content is not a valid YAML mapping.
        """
        return cls(**_load_mapping(path))


def _load_mapping(path: str | Path) -> dict:
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")

    with path.open(encoding="utf-8") as fh:
        raw = yaml.safe_load(fh)

    if not isinstance(raw, dict):
        raise ValueError(
            f"Expected a YAML mapping in {path}, got {type(raw).__name__}."
        )
    return raw
