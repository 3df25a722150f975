"""In-process broker: single-ticker portfolio accounting and trade execution.

The broker applies one signal action per simulated day at that day's close,
using a fixed trade size.  Orders that cannot be filled are downgraded to
``hold`` rather than rejected, so every call yields a ``TradeExecution``.
"""

from __future__ import annotations

import logging
from datetime import date

from models.portfolio import PortfolioState, TradeExecution
from models.signal import TradeAction

logger = logging.getLogger(__name__)

UNSUPPORTED_SHORT_MESSAGE = "Short positions are not supported; treated as hold."


class Broker:
    """Stateful broker that executes and records trades for one simulation run.

    Instantiate one ``Broker`` per run.  The broker owns the canonical cash
    and share count; ``shares_held`` never goes negative and a buy never
    executes when ``cash < trade_size * price``.
    """

    def __init__(self, initial_cash: float, initial_shares: int = 0, trade_size: int = 100) -> None:
        if trade_size <= 0:
            raise ValueError(f"trade_size must be positive, got {trade_size}.")
        if initial_shares < 0:
            raise ValueError(f"initial_shares cannot be negative, got {initial_shares}.")
        self._cash: float = initial_cash
        self._shares: int = initial_shares
        self._trade_size = trade_size
        self._trade_history: list[TradeExecution] = []

    # ------------------------------------------------------------------
    # Public interface
    # ------------------------------------------------------------------

    @property
    def cash(self) -> float:
        return self._cash

    @property
    def shares_held(self) -> int:
        return self._shares

    def get_portfolio(self, as_of: date | None = None) -> PortfolioState:
        """Return a snapshot of the current portfolio state."""
        return PortfolioState(cash=self._cash, shares_held=self._shares, as_of=as_of)

    def get_trade_history(self) -> list[TradeExecution]:
        """Return every execution that changed the portfolio so far."""
        return list(self._trade_history)

    def value_at(self, price: float) -> float:
        """Mark-to-market value: ``cash + shares_held * price``."""
        return self._cash + self._shares * price

    def execute(self, action: TradeAction, price: float) -> TradeExecution:
        """Apply *action* at *price*.

        buy:   fills ``trade_size`` shares if cash covers them, else holds.
        sell:  fills ``min(trade_size, shares_held)``, or holds with no position.
        short / cover: always held (no short-position accounting).
        hold:  no change.
        """
        if action == "buy":
            execution = self._buy(price)
        elif action == "sell":
            execution = self._sell(price)
        elif action in ("short", "cover"):
            execution = self._downgrade(action, price, UNSUPPORTED_SHORT_MESSAGE)
        else:
            execution = TradeExecution(
                requested_action=action,
                action="hold",
                shares_traded=0,
                price=price,
                status="noop",
                message="Hold; no order placed.",
            )

        if execution.status == "executed":
            self._trade_history.append(execution)
            logger.info(
                "Executed %s %d @ %.2f (cash %.2f, shares %d).",
                execution.action,
                execution.shares_traded,
                price,
                self._cash,
                self._shares,
            )
        elif execution.status == "downgraded":
            logger.info("Downgraded %s to hold: %s", action, execution.message)
        return execution

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _buy(self, price: float) -> TradeExecution:
        quantity = self._trade_size
        cost = quantity * price
        if self._cash < cost:
            return self._downgrade(
                "buy",
                price,
                (
                    f"Insufficient cash to buy {quantity} shares at ${price:.2f} "
                    f"(cost ${cost:.2f}, available ${self._cash:.2f})."
                ),
            )
        self._cash -= cost
        self._shares += quantity
        return TradeExecution(
            requested_action="buy",
            action="buy",
            shares_traded=quantity,
            price=price,
            status="executed",
            message=f"Bought {quantity} shares at ${price:.2f}.",
        )

    def _sell(self, price: float) -> TradeExecution:
        if self._shares <= 0:
            return self._downgrade("sell", price, "No shares held to sell.")
        quantity = min(self._trade_size, self._shares)
        self._shares -= quantity
        self._cash += quantity * price
        return TradeExecution(
            requested_action="sell",
            action="sell",
            shares_traded=quantity,
            price=price,
            status="executed",
            message=f"Sold {quantity} shares at ${price:.2f}.",
        )

    @staticmethod
    def _downgrade(requested: TradeAction, price: float, message: str) -> TradeExecution:
        return TradeExecution(
            requested_action=requested,
            action="hold",
            shares_traded=0,
            price=price,
            status="downgraded",
            message=message,
        )
