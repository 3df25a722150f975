"""Tests for published-date parsing and the inclusive date-window filter."""

from datetime import date, datetime, timedelta, timezone

import pytest

from evidence.temporal import filter_by_date_window, parse_published_date, parse_trading_date

START = date(2025, 3, 10)
END = date(2025, 3, 14)


def _titles(response: dict) -> list[str]:
    return [r["title"] for r in response["results"]]


# =============================================================================
# 1. PARSING
# =============================================================================


class TestParsePublishedDate:
    @pytest.mark.parametrize(
        "value, expected",
        [
            ("2025-03-12", date(2025, 3, 12)),
            ("2025-03-12T08:30:00", date(2025, 3, 12)),
            ("2025-03-12T08:30:00Z", date(2025, 3, 12)),
            ("2025-03-12T08:30:00+00:00", date(2025, 3, 12)),
            ("Wed, 12 Mar 2025 08:30:00 GMT", date(2025, 3, 12)),
            ("March 12, 2025", date(2025, 3, 12)),
            ("12 Mar 2025 08:30", date(2025, 3, 12)),
        ],
    )
    def test_supported_formats(self, value, expected):
        assert parse_published_date(value) == expected

    def test_offset_converted_to_utc_day(self):
        # 23:30 at -05:00 is already the next day in UTC.
        assert parse_published_date("2025-03-12T23:30:00-05:00") == date(2025, 3, 13)

    def test_datetime_and_date_objects(self):
        aware = datetime(2025, 3, 12, 1, 0, tzinfo=timezone(timedelta(hours=3)))
        assert parse_published_date(aware) == date(2025, 3, 11)
        assert parse_published_date(date(2025, 3, 12)) == date(2025, 3, 12)

    @pytest.mark.parametrize("value", ["not a date", "2025-13-45", "", "   ", None, 123])
    def test_unparseable_returns_none(self, value):
        assert parse_published_date(value) is None


# =============================================================================
# 2. WINDOW FILTER
# =============================================================================


class TestFilterByDateWindow:
    def test_bounds_are_inclusive(self):
        response = {
            "results": [
                {"title": "start", "published_date": "2025-03-10"},
                {"title": "end", "published_date": "2025-03-14T23:59:00Z"},
                {"title": "before", "published_date": "2025-03-09"},
                {"title": "after", "published_date": "2025-03-15"},
            ]
        }
        assert _titles(filter_by_date_window(response, START, END)) == ["start", "end"]

    def test_missing_date_kept_but_garbage_date_dropped(self):
        response = {
            "results": [
                {"title": "absent"},
                {"title": "null", "published_date": None},
                {"title": "blank", "published_date": "  "},
                {"title": "garbage", "published_date": "yesterday-ish"},
            ]
        }
        assert _titles(filter_by_date_window(response, START, END)) == [
            "absent",
            "null",
            "blank",
        ]

    def test_datetime_bounds_compared_by_day(self):
        response = {"results": [{"title": "noon", "published_date": "2025-03-10T12:00:00Z"}]}
        start = datetime(2025, 3, 10, 18, 0, tzinfo=timezone.utc)
        end = datetime(2025, 3, 14, 1, 0, tzinfo=timezone.utc)
        assert _titles(filter_by_date_window(response, start, end)) == ["noon"]

    def test_images_and_other_keys_untouched(self):
        response = {
            "answer": None,
            "results": [{"title": "old", "published_date": "2020-01-01"}],
            "images": ["https://img.example.com/a.png"],
        }
        filtered = filter_by_date_window(response, START, END)
        assert filtered["results"] == []
        assert filtered["images"] == ["https://img.example.com/a.png"]
        assert response["results"]  # original untouched

    def test_human_readable_date_inside_window_kept(self):
        response = {
            "results": [
                {"title": "readable", "published_date": "March 12, 2025"},
                {"title": "readable-old", "published_date": "February 2, 2025"},
            ]
        }
        assert _titles(filter_by_date_window(response, START, END)) == ["readable"]

    @pytest.mark.parametrize("payload", [None, {}, {"results": None}])
    def test_malformed_payload_passed_through(self, payload):
        assert filter_by_date_window(payload, START, END) is payload


# =============================================================================
# 3. TRADING DATES
# =============================================================================


class TestParseTradingDate:
    def test_offset_midnight_is_not_shifted(self):
        tokyo_midnight = datetime(2025, 7, 14, 0, 0, tzinfo=timezone(timedelta(hours=9)))
        assert parse_trading_date(tokyo_midnight) == date(2025, 7, 14)
        assert parse_published_date(tokyo_midnight) == date(2025, 7, 13)

    def test_plain_dates_and_garbage(self):
        assert parse_trading_date("2025-07-14") == date(2025, 7, 14)
        assert parse_trading_date(date(2025, 7, 14)) == date(2025, 7, 14)
        assert parse_trading_date("garbage") is None
        assert parse_trading_date(None) is None
