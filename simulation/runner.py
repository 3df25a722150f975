"""Async simulation runner: the day-stepped orchestration loop.

Lifecycle:
    1. validating        resolve the ticker; failure ends the run as ``failed``.
    2. fetching_history  fetch closes for [start - 1 day, end]; fewer than two
                         quotes ends the run as ``failed``.  The first quote
                         seeds the "Start" log row.
    3. running           for each later quote, strictly in order:
                            - run the analysis pipeline as of that day;
                            - execute the signal's action at that day's close;
                            - revalue the portfolio and append the day's row.
                         A failed day is logged with its error and the loop
                         moves on with the carried-forward portfolio.
    4. finalizing        build the summary.
    5. completed
"""

from __future__ import annotations

import logging
from datetime import date, timedelta
from typing import Callable

from evidence.prices import PriceHistory, parse_price_series
from evidence.tickers import TickerResolver
from models.config import SimulationConfig
from models.evidence import PriceQuote
from models.log import SimulationDayLog, SimulationResult, SimulationStatus
from models.portfolio import TradeExecution
from models.signal import TradingSignal
from pipeline.runner import AnalysisPipeline
from simulation.broker import Broker
from simulation.sim_logging import build_day_entry, build_start_entry, summarize

logger = logging.getLogger(__name__)

DayCallback = Callable[[SimulationDayLog], None]


class SimulationRunner:
    """Drives one simulation run for a single ticker.

    Instantiate one runner per run; collaborators are injected so the loop
    can be exercised with deterministic stand-ins.
    """

    def __init__(
        self,
        config: SimulationConfig,
        resolver: TickerResolver,
        market_data: PriceHistory,
        pipeline: AnalysisPipeline,
        on_day: DayCallback | None = None,
    ) -> None:
        self._config = config
        self._resolver = resolver
        self._market_data = market_data
        self._pipeline = pipeline
        self._on_day = on_day
        self._status: SimulationStatus = "idle"

    @property
    def status(self) -> SimulationStatus:
        return self._status

    def window(self) -> tuple[date, date]:
        """Requested ``(start, end)``; ``end`` defaults to yesterday."""
        end = self._config.end_date or (date.today() - timedelta(days=1))
        return end - timedelta(days=self._config.timeframe_days), end

    async def run(self) -> SimulationResult:
        """Execute the full simulation.  Never raises for pipeline or data failures."""
        ticker = self._config.ticker.strip().upper()
        start, end = self.window()

        # ---- Validating ---------------------------------------------------
        self._transition("validating", ticker)
        resolved = await self._resolver.resolve(ticker)
        if not resolved.success:
            return self._fail(ticker, start, end, resolved.error or f"Invalid ticker: {ticker}")
        ticker = resolved.data

        # ---- Fetching history --------------------------------------------
        self._transition("fetching_history", ticker)
        fetch_start = start - timedelta(days=1)
        try:
            payload = await self._market_data.chart(ticker, fetch_start, end)
        except Exception as exc:
            logger.warning("History fetch failed for %s: %s", ticker, exc)
            return self._fail(ticker, start, end, f"Failed to fetch historical data for {ticker}: {exc}")

        history = parse_price_series(payload.get("quotes") if isinstance(payload, dict) else None)
        if not history:
            return self._fail(
                ticker, start, end,
                f"No historical stock data found for {ticker} in the required range.",
            )
        if len(history) < 2:
            return self._fail(
                ticker, start, end,
                f"Insufficient historical data for {ticker}: need at least 2 quotes, got {len(history)}.",
            )

        # ---- Running -----------------------------------------------------
        self._transition("running", ticker)
        broker = Broker(
            initial_cash=self._config.initial_cash,
            initial_shares=self._config.initial_shares,
            trade_size=self._config.trade_size,
        )
        log = [build_start_entry(broker.get_portfolio(history[0].date), history[0].close)]
        self._emit(log[-1])
        logger.info(
            "Simulating %s over %d trading day(s), %s to %s; start value %.2f.",
            ticker,
            len(history) - 1,
            history[1].date,
            history[-1].date,
            log[0].portfolio_value,
        )

        for quote in history[1:]:
            entry = await self._run_day(ticker, quote, broker)
            log.append(entry)
            self._emit(entry)

        # ---- Finalizing --------------------------------------------------
        self._transition("finalizing", ticker)
        trades = broker.get_trade_history()
        summary = summarize(log, trades)

        self._transition("completed", ticker)
        logger.info(
            "Simulation for %s complete: %.2f -> %.2f (%+.2f%%), %d trade(s), %d day(s) with errors.",
            ticker,
            summary.initial_value,
            summary.final_value,
            summary.return_pct,
            summary.trades_executed,
            summary.days_errored,
        )
        return SimulationResult(
            ticker=ticker,
            status="completed",
            start_date=start,
            end_date=end,
            log=log,
            trades=trades,
            summary=summary,
        )

    # ------------------------------------------------------------------
    # Day execution
    # ------------------------------------------------------------------

    async def _run_day(self, ticker: str, quote: PriceQuote, broker: Broker) -> SimulationDayLog:
        """One day: pipeline as of ``quote.date``, trade at ``quote.close``, log."""
        signal: TradingSignal | None = None
        execution: TradeExecution | None = None
        error: str | None = None

        try:
            result = await self._pipeline.run(ticker, as_of=quote.date)
            if result.success:
                signal = result.data.signal
            else:
                error = result.error or "Pipeline failed without an error message."
        except Exception as exc:
            logger.exception("Pipeline raised on %s for %s.", quote.date, ticker)
            error = str(exc) or type(exc).__name__

        if signal is not None:
            execution = broker.execute(signal.action, quote.close)
        else:
            logger.warning("Day %s for %s failed: %s", quote.date, ticker, error)

        entry = build_day_entry(
            quote.date,
            quote.close,
            broker.get_portfolio(quote.date),
            signal,
            execution,
            error,
        )
        logger.info(
            "%s %s close %.2f: %s %+d, held %d, cash %.2f, value %.2f.",
            ticker,
            entry.date,
            quote.close,
            entry.action or "-",
            entry.shares_traded,
            entry.shares_held,
            entry.cash,
            entry.portfolio_value,
        )
        return entry

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _transition(self, status: SimulationStatus, ticker: str) -> None:
        logger.info("Simulation %s: %s -> %s.", ticker, self._status, status)
        self._status = status

    def _fail(self, ticker: str, start: date, end: date, message: str) -> SimulationResult:
        self._transition("failed", ticker)
        logger.error("Simulation for %s failed: %s", ticker, message)
        return SimulationResult(
            ticker=ticker,
            status="failed",
            start_date=start,
            end_date=end,
            error=message,
        )

    def _emit(self, entry: SimulationDayLog) -> None:
        if self._on_day is not None:
            self._on_day(entry)
