"""
Tests for presentation formatting.
"""
from __future__ import annotations

import pytest

from messmass.charts import NA, api_number, format_value, round_half_up
from messmass.charts.formatting import api_stats


class TestRoundHalfUp:
    """Tests for round_half_up."""

    @pytest.mark.parametrize("value,digits,expected", [
        (2.5, 0, 3.0),
        (3.5, 0, 4.0),
        (-2.5, 0, -3.0),
        (0.25, 1, 0.3),
        (12.34, 1, 12.3),
    ])
    def test_values(self, value, digits, expected):
        """Test that halves round away from zero."""
        assert round_half_up(value, digits) == expected


class TestFormatValue:
    """Tests for format_value."""

    def test_number(self):
        """Test thousands separators and rounding."""
        assert format_value(1234.5) == '1,235'

    def test_percentage(self):
        """Test fractions rendered in percent-space."""
        assert format_value(0.2, 'percentage') == '20.0%'

    def test_currency(self):
        """Test the default currency prefix."""
        assert format_value(9074.5, 'currency') == '€9,075'

    def test_overrides(self):
        """Test custom prefix and suffix."""
        assert format_value(5, 'number', prefix='#', suffix=' items') == '#5 items'
        assert format_value(5, 'currency', prefix='$') == '$5'

    def test_na_and_text(self):
        """Test that NA and text pass through."""
        assert format_value(NA) == 'N/A'
        assert format_value(None) == 'N/A'
        assert format_value('hello') == 'hello'


class TestApiNumber:
    """Tests for api_number and api_stats."""

    def test_api_number(self):
        """Test numeric API forms."""
        assert api_number(0.1234, 'percentage') == 12.3
        assert api_number(1000.5) == 1001
        assert isinstance(api_number(1000.5, 'currency'), int)
        assert api_number(NA) is None

    def test_api_stats(self):
        """Test that numeric stats are rounded and text passes through."""
        assert api_stats({'jerseyPrice': 24.5, 'name': 'x', 'fans': 3}) == {'jerseyPrice': 25, 'name': 'x', 'fans': 3}
