"""Tests for usage analytics."""

from dictionary_wiki.core.analytics import UsageAnalytics


def test_track_search_normalizes_and_skips_blank() -> None:
    analytics = UsageAnalytics()
    analytics.track_search("  Rates ")
    analytics.track_search("rates")
    analytics.track_search("   ")
    assert analytics.searches == {"rates": 2}


def test_track_view_keys_by_name_and_id() -> None:
    analytics = UsageAnalytics()
    analytics.track_view("2.1", "Contracted Rates")
    assert analytics.views == {"Contracted Rates (ID: 2.1)": 1}


def test_top_items_highest_first() -> None:
    analytics = UsageAnalytics(searches={"a": 1, "b": 5, "c": 3})
    assert analytics.top_items("searches", 2) == [("b", 5), ("c", 3)]
    assert analytics.top_items("views", 5) == []
