"""Tests for confidence-to-action banding."""

import pytest

from models.signal import TradingSignal
from oracles.policy import apply_confidence_banding, default_size, expected_action


def _signal(signal="bullish", confidence=70, action="buy", stocks=100) -> TradingSignal:
    return TradingSignal(
        signal=signal,
        confidence=confidence,
        action=action,
        stocks=stocks,
        reason="test",
    )


class TestDefaultSize:
    @pytest.mark.parametrize(
        "confidence, size",
        [(0, 0), (30, 0), (31, 50), (60, 50), (61, 100), (80, 100), (81, 200), (100, 200)],
    )
    def test_tiers(self, confidence, size):
        assert default_size(confidence) == size


class TestExpectedAction:
    def test_low_confidence_holds_whatever_the_direction(self):
        assert expected_action(_signal("bullish", 30, "buy")) == "hold"
        assert expected_action(_signal("bearish", 10, "sell")) == "hold"

    def test_neutral_holds(self):
        assert expected_action(_signal("neutral", 90, "buy")) == "hold"

    def test_bullish_keeps_cover(self):
        assert expected_action(_signal("bullish", 70, "cover")) == "cover"
        assert expected_action(_signal("bullish", 70, "sell")) == "buy"

    def test_bearish_keeps_short(self):
        assert expected_action(_signal("bearish", 70, "short")) == "short"
        assert expected_action(_signal("bearish", 70, "hold")) == "sell"


class TestApplyConfidenceBanding:
    def test_conforming_signal_returned_unchanged(self):
        signal = _signal("bullish", 75, "buy", 100)
        assert apply_confidence_banding(signal) is signal

    def test_low_confidence_forced_to_hold_with_zero_stocks(self):
        banded = apply_confidence_banding(_signal("bullish", 25, "buy", 100))
        assert banded.action == "hold"
        assert banded.stocks == 0
        assert banded.reason == "test"

    def test_hold_always_has_zero_stocks(self):
        banded = apply_confidence_banding(_signal("neutral", 50, "hold", 40))
        assert banded.stocks == 0

    def test_missing_size_filled_from_tier(self):
        banded = apply_confidence_banding(_signal("bearish", 85, "sell", 0))
        assert banded.action == "sell"
        assert banded.stocks == 200

    def test_explicit_size_kept(self):
        banded = apply_confidence_banding(_signal("bullish", 65, "hold", 30))
        assert banded.action == "buy"
        assert banded.stocks == 30

    @pytest.mark.parametrize("confidence", range(0, 101, 5))
    @pytest.mark.parametrize("direction", ["bullish", "bearish", "neutral"])
    @pytest.mark.parametrize("action", ["buy", "sell", "short", "cover", "hold"])
    def test_invariants_hold_for_every_combination(self, confidence, direction, action):
        banded = apply_confidence_banding(_signal(direction, confidence, action, 75))
        if banded.confidence <= 30:
            assert banded.action == "hold"
        if banded.action == "hold":
            assert banded.stocks == 0
