"""Tests for FMPClient: URL building and the ProviderError failure contract."""

import asyncio
import http.client
import io
import json
import urllib.error

import pytest

from core import fmp_client
from core.fmp_client import FMPClient, ProviderError


class FakeResponse:
    def __init__(self, body, status=200):
        self.status = status
        self._body = body if isinstance(body, bytes) else body.encode("utf-8")

    def read(self):
        return self._body

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        return False


@pytest.fixture
def client():
    return FMPClient("KEY", base_url="https://fmp.example/api/v3/")


def _serve(monkeypatch, outcome):
    seen = {}

    def fake_urlopen(request, timeout=None):
        seen["url"] = request.full_url
        seen["timeout"] = timeout
        if isinstance(outcome, BaseException):
            raise outcome
        return outcome

    monkeypatch.setattr(fmp_client.urllib.request, "urlopen", fake_urlopen)
    return seen


class TestBuildUrl:
    def test_drops_none_and_appends_key(self, client):
        url = client.build_url("/stock_news", {"tickers": "AAPL", "limit": 5, "from": None})
        assert url == "https://fmp.example/api/v3/stock_news?tickers=AAPL&limit=5&apikey=KEY"

    def test_adds_leading_slash(self, client):
        assert client.build_url("quote/AAPL").startswith("https://fmp.example/api/v3/quote/AAPL?")


class TestFetch:
    def test_decodes_json(self, client, monkeypatch):
        seen = _serve(monkeypatch, FakeResponse(json.dumps([{"symbol": "AAPL"}])))
        assert client.fetch("/quote/AAPL") == [{"symbol": "AAPL"}]
        assert seen["timeout"] == 15.0

    def test_empty_body_is_none(self, client, monkeypatch):
        _serve(monkeypatch, FakeResponse("  "))
        assert client.fetch("/quote/AAPL") is None

    def test_http_error_uses_provider_message(self, client, monkeypatch):
        body = io.BytesIO(b'{"Error Message": "Invalid API KEY."}')
        _serve(monkeypatch, urllib.error.HTTPError("u", 401, "Unauthorized", {}, body))
        with pytest.raises(ProviderError) as info:
            client.fetch("/quote/AAPL")
        assert info.value.status == 401
        assert str(info.value) == "Invalid API KEY."

    def test_http_error_without_body(self, client, monkeypatch):
        _serve(monkeypatch, urllib.error.HTTPError("u", 502, "Bad Gateway", {}, io.BytesIO(b"<html>")))
        with pytest.raises(ProviderError, match="HTTP 502: Bad Gateway"):
            client.fetch("/quote/AAPL")

    def test_network_error(self, client, monkeypatch):
        _serve(monkeypatch, urllib.error.URLError("connection refused"))
        with pytest.raises(ProviderError) as info:
            client.fetch("/quote/AAPL")
        assert info.value.status is None
        assert "connection refused" in info.value.message

    def test_timeout(self, client, monkeypatch):
        _serve(monkeypatch, TimeoutError())
        with pytest.raises(ProviderError, match="timed out"):
            client.fetch("/quote/AAPL")

    def test_invalid_json(self, client, monkeypatch):
        _serve(monkeypatch, FakeResponse("not json"))
        with pytest.raises(ProviderError, match="Invalid JSON returned by FMP for /quote/AAPL"):
            client.fetch("/quote/AAPL")

    def test_undecodable_body(self, client, monkeypatch):
        _serve(monkeypatch, FakeResponse(b'[{"symbol": "\xff"}]'))
        with pytest.raises(ProviderError, match="Invalid response returned by FMP for /quote/AAPL"):
            client.fetch("/quote/AAPL")

    @pytest.mark.parametrize("failure", [
        ConnectionResetError(104, "Connection reset by peer"),
        http.client.IncompleteRead(b"[{"),
    ])
    def test_dropped_connection(self, client, monkeypatch, failure):
        _serve(monkeypatch, failure)
        with pytest.raises(ProviderError) as info:
            client.fetch("/quote/AAPL")
        assert info.value.status is None
        assert info.value.message.startswith("Request to FMP failed")

    def test_error_message_with_200(self, client, monkeypatch):
        _serve(monkeypatch, FakeResponse('{"Error Message": "Limit Reach."}'))
        with pytest.raises(ProviderError, match="Limit Reach."):
            client.fetch("/quote/AAPL")

    def test_afetch(self, client, monkeypatch):
        _serve(monkeypatch, FakeResponse("[]"))
        assert asyncio.run(client.afetch("/quote/AAPL")) == []
