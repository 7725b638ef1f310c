"""Tests for the collection capper's K-of-N contract."""

from conftest import make_articles
from core.capping import cap
from core.models import DetailTier, RecordCollection
from core.policies import DIVIDEND_POLICY, NEWS_POLICY


class TestCap:
    def test_summary_tier_caps_and_hints(self):
        capped = cap(RecordCollection(make_articles(12)), DetailTier.SUMMARY, 3, 10, NEWS_POLICY, noun="articles")
        assert capped.shown == 3
        assert capped.total == 12
        assert len(capped.items) == 3
        assert capped.message == "Showing 3 of 12 fetched articles. Request 'full' detail for more."

    def test_full_tier_uses_hard_cap(self):
        capped = cap(RecordCollection(make_articles(12)), DetailTier.FULL, 3, 10, NEWS_POLICY, noun="articles")
        assert capped.shown == 10
        assert "capped at 10" in capped.message
        assert "Request 'full'" not in capped.message

    def test_everything_shown_states_count(self):
        capped = cap(RecordCollection(make_articles(2)), DetailTier.SUMMARY, 3, 10, NEWS_POLICY, noun="articles")
        assert capped.shown == 2
        assert not capped.truncated
        assert capped.message == "Found 2 articles."

    def test_custom_hint_replaces_default(self):
        capped = cap(
            RecordCollection(make_articles(8)), DetailTier.SUMMARY, 5, 5, NEWS_POLICY,
            noun="symbols", hint="Be more specific.",
        )
        assert capped.message == "Showing 5 of 8 fetched symbols. Be more specific."

    def test_no_upgrade_hint_when_tiers_match(self):
        capped = cap(RecordCollection(make_articles(8)), DetailTier.SUMMARY, 5, 5, NEWS_POLICY)
        assert "Request 'full'" not in capped.message

    def test_sort_key_puts_most_recent_first(self):
        dividends = [
            {"date": "2022-05-13", "dividend": 0.23},
            {"date": "2024-05-10", "dividend": 0.25},
            {"date": "2023-05-12", "dividend": 0.24},
        ]
        capped = cap(RecordCollection(dividends), DetailTier.SUMMARY, 2, 2, DIVIDEND_POLICY, sort_key="date")
        assert [d["date"] for d in capped.items] == ["2024-05-10", "2023-05-12"]

    def test_never_exceeds_cap(self):
        for detail in DetailTier:
            capped = cap(RecordCollection(make_articles(30)), detail, 3, 10, NEWS_POLICY)
            assert len(capped.items) <= 10
