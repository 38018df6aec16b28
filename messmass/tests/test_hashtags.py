"""
Tests for hashtag filter parsing and matching.
"""
from __future__ import annotations

import pytest

from messmass.hashtags import (
    FilterValidationError,
    expand_event_hashtags,
    matches_all,
    matches_any,
    normalize_filter_terms,
    parse_hashtag_query,
    term_matches,
)


class TestParseHashtagQuery:
    """Tests for parse_hashtag_query."""

    def test_plain_tag(self):
        """Test that plain tags have no category."""
        assert parse_hashtag_query("#VIP ") == (None, "vip")

    def test_category_scoped_tag(self):
        """Test category:tag terms."""
        assert parse_hashtag_query("Country:Hungary") == ("country", "hungary")

    def test_invalid_category_is_plain(self):
        """Test that a malformed category leaves the term unscoped."""
        assert parse_hashtag_query("bad cat:x") == (None, "bad cat:x")


class TestNormalizeFilterTerms:
    """Tests for normalize_filter_terms."""

    def test_comma_separated_string(self):
        """Test splitting, trimming, lowercasing and de-duplication."""
        assert normalize_filter_terms(" #A, b ,a,,") == ["a", "b"]

    def test_list_input(self):
        """Test list input with scoped terms."""
        assert normalize_filter_terms(["Country:Hungary", "vip"]) == ["country:hungary", "vip"]

    @pytest.mark.parametrize("terms", [None, "", " , ", [], ["#"]])
    def test_empty_filter_rejected(self, terms):
        """Test that an empty filter raises FilterValidationError."""
        with pytest.raises(FilterValidationError):
            normalize_filter_terms(terms)

    def test_error_is_value_error(self):
        """Test that validation errors are ValueErrors."""
        assert issubclass(FilterValidationError, ValueError)


class TestMatching:
    """Tests for term matching against events."""

    def test_plain_term_matches_any_category(self, make_event):
        """Test that plain terms match general and categorized tags."""
        event = make_event(hashtags=["derby"], categorized={"country": ["hungary"]})
        assert term_matches("derby", event)
        assert term_matches("hungary", event)
        assert not term_matches("vip", event)

    def test_scoped_term_matches_only_its_category(self, make_event):
        """Test that category-scoped terms are strict."""
        event = make_event(hashtags=["hungary"], categorized={"team": ["ferencvaros"]})
        assert term_matches("team:ferencvaros", event)
        assert not term_matches("country:hungary", event)

    def test_and_or(self, make_event):
        """Test AND and OR matching."""
        event = make_event(hashtags=["a", "b"])
        assert matches_all(["a", "b"], event)
        assert not matches_all(["a", "c"], event)
        assert matches_any(["a", "c"], event)
        assert not matches_any(["c", "d"], event)

    def test_expand_event_hashtags(self, make_event):
        """Test display form of all event hashtags."""
        event = make_event(hashtags=["a", "a"], categorized={"team": ["x"], "country": ["hu"]})
        assert expand_event_hashtags(event) == ["a", "country:hu", "team:x"]
