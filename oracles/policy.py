"""Confidence-to-action banding applied to every generated signal.

The models are instructed to follow this policy; the pipeline enforces it
afterwards so the invariants hold regardless of what the model returned:

* ``confidence <= 30``  -> ``hold``
* ``neutral``           -> ``hold``
* bullish, > 30         -> ``buy`` or ``cover``
* bearish, > 30         -> ``sell`` or ``short``
* ``hold``              -> ``stocks == 0``
"""

from __future__ import annotations

import logging

from models.signal import TradeAction, TradingSignal

logger = logging.getLogger(__name__)

HOLD_CONFIDENCE_CEILING = 30

# (upper bound inclusive, default share count)
SIZE_TIERS: tuple[tuple[int, int], ...] = (
    (60, 50),
    (80, 100),
    (100, 200),
)

_BULLISH_ACTIONS: frozenset[TradeAction] = frozenset({"buy", "cover"})
_BEARISH_ACTIONS: frozenset[TradeAction] = frozenset({"sell", "short"})


def default_size(confidence: int) -> int:
    """Tiered share count for an actionable *confidence*; 0 at or below the hold band."""
    if confidence <= HOLD_CONFIDENCE_CEILING:
        return 0
    for ceiling, size in SIZE_TIERS:
        if confidence <= ceiling:
            return size
    return SIZE_TIERS[-1][1]


def expected_action(signal: TradingSignal) -> TradeAction:
    """Closest policy-conforming action for *signal*."""
    if signal.confidence <= HOLD_CONFIDENCE_CEILING or signal.signal == "neutral":
        return "hold"
    if signal.signal == "bullish":
        return signal.action if signal.action in _BULLISH_ACTIONS else "buy"
    return signal.action if signal.action in _BEARISH_ACTIONS else "sell"


def apply_confidence_banding(signal: TradingSignal) -> TradingSignal:
    """Return *signal* clamped to the banding policy (unchanged if it already conforms)."""
    action = expected_action(signal)
    if action == "hold":
        stocks = 0
    elif signal.stocks == 0:
        stocks = default_size(signal.confidence)
    else:
        stocks = signal.stocks

    if action == signal.action and stocks == signal.stocks:
        return signal

    logger.info(
        "Banding adjusted signal (%s, confidence %d): %s/%d -> %s/%d.",
        signal.signal,
        signal.confidence,
        signal.action,
        signal.stocks,
        action,
        stocks,
    )
    return signal.model_copy(update={"action": action, "stocks": stocks})
