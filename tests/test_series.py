"""Tests for the time-series summarizer and indicator reduction."""

import random

from conftest import make_bars
from core.models import DetailTier, RecordCollection
from core.series import (
    FULL_CAP,
    RECENT_COUNT,
    SUMMARY_THRESHOLD,
    parse_date,
    percent_change,
    recent_values,
    sort_by_date,
    summarize_series,
)

OHLCV_KEYS = {"date", "open", "high", "low", "close", "volume"}


class TestSortByDate:
    def test_descending_by_default(self):
        records = [{"date": "2024-01-02"}, {"date": "2024-01-03"}, {"date": "2024-01-01"}]
        assert [r["date"] for r in sort_by_date(records)] == ["2024-01-03", "2024-01-02", "2024-01-01"]

    def test_intraday_timestamps(self):
        records = [{"date": "2024-01-02 09:30:00"}, {"date": "2024-01-02 15:55:00"}]
        assert sort_by_date(records)[0]["date"] == "2024-01-02 15:55:00"

    def test_undated_records_go_last(self):
        records = [{"date": None}, {"date": "2024-01-01"}, {"no": "date"}]
        assert sort_by_date(records)[0] == {"date": "2024-01-01"}

    def test_parse_date_rejects_garbage(self):
        assert parse_date("not a date") is None
        assert parse_date(None) is None


class TestPercentChange:
    def test_basic(self):
        assert percent_change(100, 150) == 50.0

    def test_zero_start_is_none(self):
        assert percent_change(0, 150) is None

    def test_missing_values_are_none(self):
        assert percent_change(None, 150) is None
        assert percent_change(100, None) is None
        assert percent_change("100", 150) is None


class TestSummarizeSeries:
    def test_small_series_returns_every_point(self):
        bars = make_bars(SUMMARY_THRESHOLD)
        result = summarize_series(RecordCollection(bars), DetailTier.SUMMARY)
        assert len(result["data"]) == SUMMARY_THRESHOLD
        assert "periodHigh" not in result
        assert "below summary threshold" in result["message"]
        assert all(set(point) == OHLCV_KEYS for point in result["data"])
        assert result["data"][0]["date"] > result["data"][-1]["date"]

    def test_large_series_is_digested(self):
        bars = make_bars(250)
        result = summarize_series(RecordCollection(bars), DetailTier.SUMMARY)
        assert "data" not in result
        assert result["periodStartDate"] == bars[0]["date"]
        assert result["periodEndDate"] == bars[-1]["date"]
        assert result["startPrice"] == 100.0
        assert result["endPrice"] == 349.0
        assert result["periodHigh"] == 351.0
        assert result["periodLow"] == 98.0
        assert result["periodHigh"] >= result["periodLow"]
        assert result["priceChangePercent"] == 249.0
        assert len(result["recentData"]) == RECENT_COUNT
        assert "Summarized 250 data points" in result["message"]

    def test_recent_data_is_newest_first(self):
        result = summarize_series(RecordCollection(make_bars(100)), DetailTier.SUMMARY)
        dates = [p["date"] for p in result["recentData"]]
        assert dates == sorted(dates, reverse=True)

    def test_unsorted_series_with_duplicate_dates(self):
        unique = make_bars(100)
        bars = unique + [dict(b) for b in unique]
        random.Random(7).shuffle(bars)

        result = summarize_series(RecordCollection(bars), DetailTier.SUMMARY)

        assert result["periodStartDate"] == "2024-01-01"
        assert result["periodEndDate"] == unique[-1]["date"]
        assert result["startPrice"] == 100.0
        assert result["endPrice"] == 199.0
        dates = [p["date"] for p in result["recentData"]]
        assert len(dates) == RECENT_COUNT
        assert dates == sorted(dates, reverse=True)
        assert dates[0] == unique[-1]["date"]

    def test_zero_start_price_yields_null_change(self):
        bars = make_bars(80)
        bars[0]["close"] = 0
        result = summarize_series(RecordCollection(bars), DetailTier.SUMMARY)
        assert result["priceChangePercent"] is None
        assert "could not be calculated" in result["message"]

    def test_undated_bar_does_not_become_period_start(self):
        bars = make_bars(80)
        bars.append({"close": 1, "high": 500, "low": -5, "open": 1, "volume": 1})
        result = summarize_series(RecordCollection(bars), DetailTier.SUMMARY)
        assert result["periodStartDate"] == "2024-01-01"
        assert result["startPrice"] == 100.0
        assert result["endPrice"] == 179.0
        assert result["priceChangePercent"] == 79.0
        assert result["periodHigh"] == 181.0
        assert result["periodLow"] == 98.0
        assert all("date" in point for point in result["recentData"])

    def test_full_is_capped(self):
        result = summarize_series(RecordCollection(make_bars(250)), DetailTier.FULL)
        assert len(result["data"]) == FULL_CAP
        assert "Showing 150 of 250" in result["message"]

    def test_full_small_series(self):
        result = summarize_series(RecordCollection(make_bars(40)), DetailTier.FULL)
        assert len(result["data"]) == 40


class TestRecentValues:
    def _points(self, count):
        return [{"date": f"2024-02-{d:02d}", "close": 10, "rsi": 40 + d} for d in range(1, count + 1)]

    def test_long_series_enveloped_and_resorted(self):
        result = recent_values(RecordCollection(self._points(20)), "RSI")
        assert result["indicator"] == "RSI"
        assert [v["date"] for v in result["values"]] == ["2024-02-20", "2024-02-19", "2024-02-18"]
        assert result["values"][0]["rsi"] == 60
        assert "3 most recent RSI values of 20" in result["message"]

    def test_short_series_is_bare_list(self):
        result = recent_values(RecordCollection(self._points(2)), "rsi")
        assert isinstance(result, list)
        assert len(result) == 2

    def test_value_aliases(self):
        points = [{"date": "2024-02-01", "SMA": 12.5}, {"date": "2024-02-02", "value": 13.0}]
        result = recent_values(RecordCollection(points), "sma")
        assert result == [{"date": "2024-02-02", "sma": 13.0}, {"date": "2024-02-01", "sma": 12.5}]
