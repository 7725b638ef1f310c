# tests/conftest.py
"""Shared fixtures: canned FMP responses instead of network calls."""

from datetime import date, timedelta

import pytest

from core.fmp_client import ProviderError


class FakeClient:
    """Stands in for FMPClient.  Maps a path to canned JSON or a ProviderError."""

    def __init__(self, responses=None):
        self.responses = dict(responses or {})
        self.calls = []

    def fetch(self, path, query=None):
        self.calls.append((path, dict(query or {})))
        if path not in self.responses:
            raise ProviderError(404, f"No canned response for {path}")
        result = self.responses[path]
        if isinstance(result, ProviderError):
            raise result
        return result

    async def afetch(self, path, query=None):
        return self.fetch(path, query)


@pytest.fixture
def fake_client():
    return FakeClient()


def make_bars(count, start=date(2024, 1, 1), first_close=100.0):
    """`count` daily OHLCV bars in ascending order; close rises by 1 per day."""
    bars = []
    for i in range(count):
        close = first_close + i
        bars.append({
            "date": (start + timedelta(days=i)).isoformat(),
            "open": close - 0.5,
            "high": close + 2,
            "low": close - 2,
            "close": close,
            "volume": 1_000 + i,
            "adjClose": close,
            "vwap": close,
            "label": "ignored",
        })
    return bars


def make_articles(count, text_length=500):
    return [
        {
            "symbol": "AAPL",
            "publishedDate": f"2024-03-{day:02d} 10:00:00",
            "title": f"Headline {day}",
            "image": "https://img.example/x.png",
            "site": "example.com",
            "text": "x" * text_length,
            "url": f"https://news.example/{day}",
        }
        for day in range(1, count + 1)
    ]
