"""Tests for day-log normalization, entry building and rendering."""

from datetime import date

import pytest

from models.log import SimulationDayLog
from models.portfolio import PortfolioState, TradeExecution
from models.signal import TradingSignal
from simulation.sim_logging import (
    NO_POSITION_REASON,
    build_day_entry,
    build_start_entry,
    format_day_log,
    format_summary,
    normalize_day_action,
    summarize,
)

DAY = date(2025, 3, 14)


def _signal(action="buy", reason="Strong quarter.") -> TradingSignal:
    return TradingSignal(signal="bullish", confidence=70, action=action, stocks=100, reason=reason)


def _execution(action, traded, status="executed", requested=None, message="") -> TradeExecution:
    return TradeExecution(
        requested_action=requested or action,
        action=action,
        shares_traded=traded,
        price=100.0,
        status=status,
        message=message,
    )


# =============================================================================
# 1. NORMALIZATION
# =============================================================================


class TestNormalizeDayAction:
    @pytest.mark.parametrize(
        "action, traded, expected",
        [("sell", 50, -50), ("short", 50, -50), ("buy", 50, 50), ("cover", -50, 50)],
    )
    def test_sign_convention(self, action, traded, expected):
        _, signed, _ = normalize_day_action(action, traded, 100, "r", None)
        assert signed == expected

    def test_hold_without_position_suppressed(self):
        assert normalize_day_action("hold", 0, 0, None, None) == (None, 0, NO_POSITION_REASON)

    def test_suppressed_hold_keeps_existing_reason(self):
        assert normalize_day_action("hold", 0, 0, "Mixed news.", None) == (None, 0, "Mixed news.")

    def test_hold_with_position_kept(self):
        assert normalize_day_action("hold", 0, 10, "Wait.", None) == ("hold", 0, "Wait.")

    def test_hold_with_error_not_suppressed(self):
        assert normalize_day_action("hold", 0, 0, None, "boom") == ("hold", 0, None)


# =============================================================================
# 2. ENTRY BUILDING
# =============================================================================


class TestEntries:
    def test_start_entry(self):
        entry = build_start_entry(PortfolioState(cash=1_000.0, shares_held=5), 20.0)
        assert entry.date == "Start"
        assert entry.portfolio_value == 1_100.0
        assert entry.action is None

    def test_executed_sell_logged_negative(self):
        portfolio = PortfolioState(cash=5_000.0, shares_held=0)
        entry = build_day_entry(DAY, 100.0, portfolio, _signal("sell"), _execution("sell", 50), None)
        assert entry.date == "2025-03-14"
        assert entry.action == "sell"
        assert entry.shares_traded == -50
        assert entry.confidence == 70

    def test_downgrade_note_appended_to_reason(self):
        portfolio = PortfolioState(cash=10_000.0, shares_held=0)
        execution = _execution("hold", 0, "downgraded", requested="buy", message="Insufficient cash.")
        entry = build_day_entry(DAY, 105.0, portfolio, _signal("buy"), execution, None)
        assert entry.action is None
        assert entry.reason == "Strong quarter. (Insufficient cash.)"
        assert entry.portfolio_value == 10_000.0

    def test_failed_day(self):
        portfolio = PortfolioState(cash=500.0, shares_held=10)
        entry = build_day_entry(DAY, 60.0, portfolio, None, None, "Failed to fetch news data")
        assert entry.error == "Failed to fetch news data"
        assert entry.shares_traded == 0
        assert entry.signal is None
        assert entry.action is None
        assert entry.portfolio_value == 1_100.0


# =============================================================================
# 3. SUMMARY + RENDERING
# =============================================================================


def _log() -> list[SimulationDayLog]:
    return [
        SimulationDayLog(date="Start", price=100.0, shares_held=0, cash=10_000.0, portfolio_value=10_000.0),
        SimulationDayLog(
            date="2025-03-13", price=100.0, signal="bullish", confidence=70, action="buy",
            shares_traded=50, shares_held=50, cash=5_000.0, portfolio_value=10_000.0, reason="Beat.",
        ),
        SimulationDayLog(
            date="2025-03-14", price=110.0, shares_held=50, cash=5_000.0,
            portfolio_value=10_500.0, error="timeout",
        ),
    ]


class TestSummaryAndRendering:
    def test_summarize(self):
        summary = summarize(_log(), [_execution("buy", 50)])
        assert summary.initial_value == 10_000.0
        assert summary.final_value == 10_500.0
        assert summary.return_pct == pytest.approx(5.0)
        assert summary.days_simulated == 2
        assert summary.days_errored == 1
        assert summary.trades_executed == 1

    def test_summarize_empty(self):
        assert summarize([], []) is None

    def test_format_day_log(self):
        text = format_day_log(_log())
        assert "Start" in text
        assert "2025-03-13" in text
        assert "error: timeout" in text
        assert "Beat." in text

    def test_format_summary(self):
        text = format_summary(summarize(_log(), []))
        assert "$10,500.00" in text
        assert "+5.00%" in text
