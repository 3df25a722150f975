"""Tests for single-ticker portfolio accounting."""

import pytest

from simulation.broker import UNSUPPORTED_SHORT_MESSAGE, Broker


@pytest.fixture
def broker() -> Broker:
    return Broker(initial_cash=10_000.0, initial_shares=0, trade_size=50)


class TestBuy:
    def test_buy_fills_trade_size(self, broker: Broker):
        execution = broker.execute("buy", 100.0)
        assert execution.status == "executed"
        assert execution.action == "buy"
        assert execution.shares_traded == 50
        assert broker.cash == 5_000.0
        assert broker.shares_held == 50

    def test_buy_with_exact_cash_executes(self):
        broker = Broker(initial_cash=5_000.0, trade_size=50)
        assert broker.execute("buy", 100.0).status == "executed"
        assert broker.cash == 0.0

    def test_insufficient_cash_downgrades_to_hold(self):
        broker = Broker(initial_cash=10_000.0, trade_size=100)
        execution = broker.execute("buy", 105.0)
        assert execution.status == "downgraded"
        assert execution.requested_action == "buy"
        assert execution.action == "hold"
        assert execution.shares_traded == 0
        assert "Insufficient cash" in execution.message
        assert broker.cash == 10_000.0
        assert broker.shares_held == 0


class TestSell:
    def test_sell_caps_at_shares_held(self):
        broker = Broker(initial_cash=0.0, initial_shares=30, trade_size=50)
        execution = broker.execute("sell", 10.0)
        assert execution.shares_traded == 30
        assert broker.shares_held == 0
        assert broker.cash == 300.0

    def test_sell_without_position_downgrades(self, broker: Broker):
        execution = broker.execute("sell", 100.0)
        assert execution.status == "downgraded"
        assert execution.action == "hold"
        assert broker.cash == 10_000.0


class TestUnsupportedAndHold:
    @pytest.mark.parametrize("action", ["short", "cover"])
    def test_short_and_cover_always_hold(self, action):
        broker = Broker(initial_cash=10_000.0, initial_shares=20, trade_size=10)
        execution = broker.execute(action, 50.0)
        assert execution.status == "downgraded"
        assert execution.action == "hold"
        assert execution.shares_traded == 0
        assert execution.message == UNSUPPORTED_SHORT_MESSAGE
        assert broker.shares_held == 20
        assert broker.cash == 10_000.0

    def test_hold_is_noop(self, broker: Broker):
        execution = broker.execute("hold", 100.0)
        assert execution.status == "noop"
        assert broker.get_trade_history() == []


class TestPortfolio:
    def test_value_and_snapshot(self):
        broker = Broker(initial_cash=1_000.0, initial_shares=10, trade_size=5)
        assert broker.value_at(20.0) == 1_200.0
        snapshot = broker.get_portfolio()
        assert snapshot.cash == 1_000.0
        assert snapshot.shares_held == 10
        assert snapshot.value_at(20.0) == 1_200.0

    def test_history_records_executed_trades_only(self, broker: Broker):
        broker.execute("buy", 100.0)
        broker.execute("short", 100.0)
        broker.execute("sell", 110.0)
        broker.execute("sell", 110.0)
        assert [t.action for t in broker.get_trade_history()] == ["buy", "sell"]

    def test_shares_never_negative(self, broker: Broker):
        for action, price in [("sell", 10.0), ("buy", 100.0), ("sell", 90.0), ("sell", 90.0), ("short", 80.0)]:
            broker.execute(action, price)
            assert broker.shares_held >= 0
            assert broker.cash >= 0

    @pytest.mark.parametrize("kwargs", [{"trade_size": 0}, {"initial_shares": -1}])
    def test_invalid_construction(self, kwargs):
        with pytest.raises(ValueError):
            Broker(initial_cash=100.0, **kwargs)
