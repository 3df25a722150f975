"""Tests for raw price-series parsing."""

from datetime import date, datetime, timedelta, timezone

from evidence.prices import parse_price_series


class TestParsePriceSeries:
    def test_sorted_ascending(self):
        quotes = parse_price_series([
            {"date": "2025-03-12", "close": 102.0},
            {"date": "2025-03-10", "close": 100.0},
            {"date": "2025-03-11", "close": 101.0},
        ])
        assert [q.date for q in quotes] == [
            date(2025, 3, 10),
            date(2025, 3, 11),
            date(2025, 3, 12),
        ]
        assert [q.close for q in quotes] == [100.0, 101.0, 102.0]

    def test_accepts_datetime_objects(self):
        quotes = parse_price_series([
            {"date": datetime(2025, 3, 10, 14, 30, tzinfo=timezone.utc), "close": 100},
        ])
        assert quotes[0].date == date(2025, 3, 10)
        assert quotes[0].close == 100.0

    def test_unusable_rows_dropped(self):
        quotes = parse_price_series([
            {"date": "garbage", "close": 1.0},
            {"date": "2025-03-10", "close": None},
            {"date": "2025-03-11", "close": float("nan")},
            {"date": "2025-03-12", "close": "n/a"},
            {"date": "2025-03-13", "close": True},
            "not a row",
            {"date": "2025-03-14", "close": "99.5"},
        ])
        assert [(q.date, q.close) for q in quotes] == [(date(2025, 3, 14), 99.5)]

    def test_duplicate_dates_last_wins(self):
        quotes = parse_price_series([
            {"date": "2025-03-10T09:30:00Z", "close": 100.0},
            {"date": "2025-03-10T16:00:00Z", "close": 101.5},
        ])
        assert len(quotes) == 1
        assert quotes[0].close == 101.5

    def test_non_list_returns_empty(self):
        assert parse_price_series(None) == []
        assert parse_price_series({"quotes": []}) == []

    def test_exchange_local_midnight_keeps_its_calendar_day(self):
        london_summer = timezone(timedelta(hours=1))
        tokyo = timezone(timedelta(hours=9))
        quotes = parse_price_series([
            {"date": datetime(2025, 7, 14, 0, 0, tzinfo=london_summer), "close": 100.0},
            {"date": datetime(2025, 7, 15, 0, 0, tzinfo=tokyo), "close": 101.0},
            {"date": "2025-07-16T00:00:00+09:00", "close": 102.0},
        ])
        assert [q.date for q in quotes] == [
            date(2025, 7, 14),
            date(2025, 7, 15),
            date(2025, 7, 16),
        ]
