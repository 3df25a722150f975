"""Simulation audit log: per-day entry construction, normalization and rendering.

Nothing is written to disk; the log lives on ``SimulationResult`` and the
CLI prints it with ``format_day_log`` / ``format_summary``.
"""

from __future__ import annotations

from datetime import date

from models.log import START_LABEL, SimulationDayLog, SimulationSummary
from models.portfolio import PortfolioState, TradeExecution
from models.signal import TradeAction, TradingSignal


NO_POSITION_REASON = "No position to hold."

_NEGATIVE_ACTIONS = frozenset({"sell", "short"})


def normalize_day_action(
    action: TradeAction | None,
    shares_traded: int,
    shares_held: int,
    reason: str | None,
    error: str | None,
) -> tuple[TradeAction | None, int, str | None]:
    """Return the ``(action, signed shares_traded, reason)`` to log for a day.

    Sells and shorts are logged as negative share counts, everything else as
    positive.  A ``hold`` with no position and no error is not a decision
    worth showing: its action label is dropped and the reason defaults to
    "No position to hold.".
    """
    if action in _NEGATIVE_ACTIONS:
        signed = -abs(shares_traded)
    else:
        signed = abs(shares_traded)

    if action == "hold" and shares_held == 0 and not error:
        return None, 0, reason or NO_POSITION_REASON
    return action, signed, reason


def build_start_entry(portfolio: PortfolioState, first_close: float) -> SimulationDayLog:
    """The seeded row valuing the opening portfolio at the first close."""
    return SimulationDayLog(
        date=START_LABEL,
        price=first_close,
        shares_held=portfolio.shares_held,
        cash=portfolio.cash,
        portfolio_value=portfolio.value_at(first_close),
    )


def build_day_entry(
    day: date,
    price: float,
    portfolio: PortfolioState,
    signal: TradingSignal | None,
    execution: TradeExecution | None,
    error: str | None,
) -> SimulationDayLog:
    """Assemble one day's log row from the post-trade portfolio.

    A failed day has no signal or execution; it is logged with zero shares
    traded and the carried-forward portfolio.
    """
    reason = signal.reason if signal else None
    if execution is not None and execution.status == "downgraded" and reason:
        reason = f"{reason} ({execution.message})"
    elif execution is not None and execution.status == "downgraded":
        reason = execution.message

    action, shares_traded, reason = normalize_day_action(
        execution.action if execution else None,
        execution.shares_traded if execution else 0,
        portfolio.shares_held,
        reason,
        error,
    )
    return SimulationDayLog(
        date=day.isoformat(),
        price=price,
        signal=signal.signal if signal else None,
        confidence=signal.confidence if signal else None,
        action=action,
        shares_traded=0 if error else shares_traded,
        shares_held=portfolio.shares_held,
        cash=portfolio.cash,
        portfolio_value=portfolio.value_at(price),
        reason=reason,
        error=error,
    )


def summarize(log: list[SimulationDayLog], trades: list[TradeExecution]) -> SimulationSummary | None:
    """Run summary; return is measured against the seeded start value."""
    if not log:
        return None
    first, last = log[0], log[-1]
    days = [entry for entry in log if entry.date != START_LABEL]
    initial = first.portfolio_value
    return SimulationSummary(
        initial_value=initial,
        final_value=last.portfolio_value,
        return_pct=((last.portfolio_value - initial) / initial) * 100 if initial else 0.0,
        final_cash=last.cash,
        final_shares=last.shares_held,
        days_simulated=len(days),
        days_errored=sum(1 for entry in days if entry.error),
        trades_executed=sum(1 for t in trades if t.status == "executed"),
    )


# ------------------------------------------------------------------
# Rendering
# ------------------------------------------------------------------

_HEADER = (
    f"{'Date':<10}  {'Price':>9}  {'Signal':<8}  {'Conf':>4}  {'Action':<6}  "
    f"{'Traded':>6}  {'Held':>6}  {'Cash':>12}  {'Value':>12}"
)


def format_day_log(log: list[SimulationDayLog]) -> str:
    """Fixed-width table of the log, one line per day plus note lines."""
    lines = [_HEADER, "-" * len(_HEADER)]
    for entry in log:
        price = f"{entry.price:.2f}" if entry.price is not None else "-"
        confidence = str(entry.confidence) if entry.confidence is not None else "-"
        lines.append(
            f"{entry.date:<10}  {price:>9}  {entry.signal or '-':<8}  {confidence:>4}  "
            f"{entry.action or '-':<6}  {entry.shares_traded:>6}  {entry.shares_held:>6}  "
            f"{entry.cash:>12.2f}  {entry.portfolio_value:>12.2f}"
        )
        if entry.error:
            lines.append(f"{'':<10}  error: {entry.error}")
        elif entry.reason:
            lines.append(f"{'':<10}  {entry.reason}")
    return "\n".join(lines)


def format_summary(summary: SimulationSummary) -> str:
    return "\n".join([
        f"Initial value:   ${summary.initial_value:,.2f}",
        f"Final value:     ${summary.final_value:,.2f}",
        f"Return:          {summary.return_pct:+.2f}%",
        f"Final position:  {summary.final_shares} shares, ${summary.final_cash:,.2f} cash",
        f"Days simulated:  {summary.days_simulated} ({summary.days_errored} with errors)",
        f"Trades executed: {summary.trades_executed}",
    ])
