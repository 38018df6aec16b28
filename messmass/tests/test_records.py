"""
Tests for StatRecord helpers and EventDocument.
"""
from __future__ import annotations

from datetime import date, datetime

import pytest

from messmass.records import (
    AVERAGED_FIELDS,
    STAT_FIELDS,
    EventDocument,
    is_number,
    numeric_value,
    parse_event_date,
    resolve_field_name,
    safe_divide,
    stat,
)


class TestFieldCatalogue:
    """Tests for the field catalogue and name resolution."""

    def test_averaged_fields_are_merchandise_prices(self):
        """Test that only unit prices aggregate by mean."""
        assert AVERAGED_FIELDS == {'jerseyPrice', 'scarfPrice', 'flagsPrice', 'capPrice', 'otherPrice'}
        assert AVERAGED_FIELDS <= set(STAT_FIELDS)

    @pytest.mark.parametrize(
        "token,expected",
        [
            ("REMOTE_IMAGES", "remoteImages"),
            ("stats.remoteImages", "remoteImages"),
            ("remoteImages", "remoteImages"),
            ("TOTAL_FANS", "totalFans"),
            ("BITLY_TOTAL_CLICKS", "bitlyTotalClicks"),
            ("customField", "customField"),
        ],
    )
    def test_resolve_field_name(self, token, expected):
        """Test that formula tokens map to camelCase stat keys."""
        assert resolve_field_name(token) == expected


class TestNumericHelpers:
    """Tests for numeric access helpers."""

    def test_numeric_value_ignores_non_numbers(self):
        """Test that strings, bools and missing keys are not numeric."""
        record = {'a': 3, 'b': 'text', 'c': True}
        assert numeric_value(record, 'a') == 3.0
        assert numeric_value(record, 'b') is None
        assert numeric_value(record, 'c') is None
        assert numeric_value(record, 'missing') is None

    @pytest.mark.parametrize("value", [float('nan'), float('inf'), float('-inf')])
    def test_non_finite_floats_are_not_numbers(self, value):
        """Test that NaN and infinities are treated as absent values."""
        assert not is_number(value)
        assert numeric_value({'remoteFans': value}, 'remoteFans') is None
        assert stat({'remoteFans': value}, 'remoteFans') == 0.0

    def test_large_integers_are_numbers(self):
        """Test that integers beyond float range still count as numbers."""
        assert is_number(10 ** 400)

    def test_stat_defaults_to_zero(self):
        """Test that stat treats absent values as zero."""
        assert stat({}, 'remoteFans') == 0.0
        assert stat({'remoteFans': 7}, 'remoteFans') == 7.0

    def test_safe_divide(self):
        """Test that division by zero yields zero."""
        assert safe_divide(10, 4) == 2.5
        assert safe_divide(10, 0) == 0.0


class TestParseEventDate:
    """Tests for parse_event_date."""

    def test_iso_formats(self):
        """Test ISO date and datetime strings, with and without Z."""
        assert parse_event_date("2024-03-12") == date(2024, 3, 12)
        assert parse_event_date("2024-03-12T18:30:00.000Z") == date(2024, 3, 12)

    def test_date_objects_pass_through(self):
        """Test that date and datetime values are accepted."""
        assert parse_event_date(date(2024, 1, 2)) == date(2024, 1, 2)
        assert parse_event_date(datetime(2024, 1, 2, 10, 0)) == date(2024, 1, 2)

    def test_empty_and_invalid(self):
        """Test that empty values give None and garbage raises."""
        assert parse_event_date(None) is None
        assert parse_event_date("") is None
        with pytest.raises(ValueError):
            parse_event_date("not a date")


class TestEventDocument:
    """Tests for EventDocument conversion."""

    def test_from_stored_document(self):
        """Test that the camelCase document shape is read."""
        doc = {
            '_id': 'abc',
            'eventName': 'Derby',
            'eventDate': '2024-09-01T00:00:00Z',
            'hashtags': ['Derby', 'vip'],
            'categorizedHashtags': {'Country': ['Hungary']},
            'stats': {'remoteFans': 10},
            'partner1Id': 'p1',
            'partner2Id': 'p2',
            'isHomeGame': True,
        }
        event = EventDocument.from_dict(doc)
        assert event.event_id == 'abc'
        assert event.event_date == date(2024, 9, 1)
        assert event.hashtags == ('derby', 'vip')
        assert event.categorized_hashtags == {'country': ('hungary',)}
        assert event.partner_id == 'p1'
        assert event.opponent_id == 'p2'
        assert event.is_home_game is True

    def test_round_trip(self, make_event):
        """Test that to_dict output is accepted by from_dict."""
        event = make_event(hashtags=['a'], categorized={'team': ['x']}, stats={'stadium': 5}, partner_id='p1')
        assert EventDocument.from_dict(event.to_dict()) == event

    def test_missing_id_or_date(self):
        """Test that documents without id or date are rejected."""
        with pytest.raises(ValueError):
            EventDocument.from_dict({'eventDate': '2024-01-01'})
        with pytest.raises(ValueError):
            EventDocument.from_dict({'_id': 'x'})
