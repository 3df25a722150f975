"""Portfolio state models."""

from datetime import date
from typing import Literal

from pydantic import BaseModel

from models.signal import TradeAction


class PortfolioState(BaseModel):
    """Cash and shares of the single simulated ticker at a point in time."""

    cash: float
    shares_held: int
    as_of: date | None = None

    def value_at(self, price: float) -> float:
        return self.cash + self.shares_held * price


class TradeExecution(BaseModel):
    """Outcome of applying one signal action to the portfolio.

    ``requested_action`` is what the signal asked for; ``action`` is what was
    actually done, which is ``hold`` whenever the request was downgraded.
    ``shares_traded`` is unsigned.
    """

    requested_action: TradeAction
    action: TradeAction
    shares_traded: int
    price: float
    status: Literal["executed", "downgraded", "noop"]
    message: str = ""
