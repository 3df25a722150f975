"""Simulation audit-trail models.

- ``SimulationDayLog``: one entry per simulated day, plus the seeded start row.
- ``SimulationResult``: terminal status, the full log and a run summary.
"""

from __future__ import annotations

from datetime import date
from typing import Literal

from pydantic import BaseModel, Field

from models.portfolio import TradeExecution
from models.signal import SignalDirection, TradeAction

START_LABEL = "Start"

SimulationStatus = Literal[
    "idle",
    "validating",
    "fetching_history",
    "running",
    "finalizing",
    "completed",
    "failed",
]


class SimulationDayLog(BaseModel):
    """Per-day audit row.

    ``shares_traded`` is signed: negative for sell/short, positive for
    buy/cover, zero for hold or no-op. ``action`` is ``None`` when the day
    had nothing to do (hold with no position) or errored.
    """

    date: str  # YYYY-MM-DD, or "Start" for the seeded row
    price: float | None
    signal: SignalDirection | None = None
    confidence: int | None = None
    action: TradeAction | None = None
    shares_traded: int = 0
    shares_held: int
    cash: float
    portfolio_value: float
    reason: str | None = None
    error: str | None = None


class SimulationSummary(BaseModel):
    initial_value: float
    final_value: float
    return_pct: float
    final_cash: float
    final_shares: int
    days_simulated: int
    days_errored: int
    trades_executed: int


class SimulationResult(BaseModel):
    """Everything a caller needs to render a finished (or failed) run."""

    ticker: str
    status: SimulationStatus
    start_date: date | None = None
    end_date: date | None = None
    log: list[SimulationDayLog] = Field(default_factory=list)
    trades: list[TradeExecution] = Field(default_factory=list)
    summary: SimulationSummary | None = None
    error: str | None = None
