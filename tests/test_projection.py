"""Tests for field projection and text truncation."""

from core.models import CurationPolicy, FieldRule
from core.policies import DCF_POLICY, NEWS_POLICY, PROFILE_POLICY, QUOTE_POLICY
from core.projection import TRUNCATION_MARKER, project, truncate


class TestTruncate:
    def test_none_passes_through(self):
        assert truncate(None, 10) is None

    def test_short_text_unchanged(self):
        assert truncate("hello", 10) == "hello"

    def test_text_at_limit_unchanged(self):
        text = "x" * 200
        assert truncate(text, 200) == text

    def test_long_text_is_cut_and_marked(self):
        result = truncate("y" * 250, 200)
        assert result.endswith(TRUNCATION_MARKER)
        assert len(result) == 200 + len(TRUNCATION_MARKER)
        assert result.startswith("y" * 200)


class TestProject:
    def test_only_allow_listed_fields_survive(self):
        record = {"symbol": "AAPL", "price": 190.1, "image": "logo.png", "cik": "0000320193"}
        projected = project(record, QUOTE_POLICY)
        assert set(projected) <= set(QUOTE_POLICY.allowed_fields)
        assert projected == {"symbol": "AAPL", "price": 190.1}

    def test_null_fields_are_omitted(self):
        projected = project({"symbol": "AAPL", "pe": None}, QUOTE_POLICY)
        assert "pe" not in projected

    def test_output_follows_declaration_order(self):
        record = {"pe": 30, "symbol": "AAPL", "price": 190}
        assert list(project(record, QUOTE_POLICY)) == ["symbol", "price", "pe"]

    def test_first_present_alias_wins(self):
        policy = CurationPolicy.of("t", FieldRule("stockPrice", aliases=("Stock Price", "price")))
        assert project({"Stock Price": 101, "price": 99}, policy) == {"stockPrice": 101}
        assert project({"Stock Price": None, "price": 99}, policy) == {"stockPrice": 99}
        assert project({"stockPrice": 100, "Stock Price": 101}, policy) == {"stockPrice": 100}

    def test_dcf_space_containing_key(self):
        projected = project({"symbol": "AAPL", "dcf": 150.0, "Stock Price": 100.0}, DCF_POLICY)
        assert projected["stockPrice"] == 100.0
        assert projected["dcfValue"] == 150.0

    def test_profile_renames_market_cap(self):
        projected = project({"symbol": "AAPL", "mktCap": 3_000_000_000_000}, PROFILE_POLICY)
        assert projected == {"symbol": "AAPL", "marketCap": 3_000_000_000_000}

    def test_description_is_truncated(self):
        projected = project({"description": "d" * 1000}, PROFILE_POLICY)
        assert len(projected["description"]) == 300 + len(TRUNCATION_MARKER)

    def test_news_text_becomes_snippet(self):
        projected = project({"title": "t", "text": "z" * 500}, NEWS_POLICY)
        assert "text" not in projected
        assert projected["snippet"].endswith(TRUNCATION_MARKER)

    def test_projection_is_idempotent(self):
        record = {
            "symbol": "AAPL",
            "mktCap": 3e12,
            "exchange": "NASDAQ",
            "description": "d" * 1000,
            "website": "https://apple.com",
            "defaultImage": False,
        }
        once = project(record, PROFILE_POLICY)
        assert project(once, PROFILE_POLICY) == once

    def test_record_is_not_mutated(self):
        record = {"symbol": "AAPL", "description": "d" * 1000}
        project(record, PROFILE_POLICY)
        assert len(record["description"]) == 1000
