"""
Tests for chart configuration models.
"""
from __future__ import annotations

import pytest

from messmass.charts import ChartConfiguration, ChartValidationError, ELEMENT_COUNTS


class TestChartConfiguration:
    """Tests for ChartConfiguration parsing and validation."""

    def test_from_dict(self, make_chart_dict):
        """Test building a configuration from a stored document."""
        data = make_chart_dict("merch", "pie", ("[merched]", "[stadium]"), order=3, isActive=False, emoji="👕")
        config = ChartConfiguration.from_dict(data)
        assert config.chart_id == "merch"
        assert config.chart_type == "pie"
        assert len(config.elements) == 2
        assert config.order == 3
        assert config.is_active is False
        assert config.elements[0].color == '#112233'

    def test_active_by_default(self, make_chart_dict):
        """Test that a missing isActive flag means active."""
        assert ChartConfiguration.from_dict(make_chart_dict()).is_active is True

    @pytest.mark.parametrize("chart_type,count", [("pie", 3), ("bar", 4), ("kpi", 2), ("text", 0)])
    def test_element_count_enforced(self, make_chart_dict, chart_type, count):
        """Test that each chart type requires its exact element count."""
        data = make_chart_dict("c", chart_type, ["[merched]"] * count)
        with pytest.raises(ChartValidationError):
            ChartConfiguration.from_dict(data)

    def test_element_counts(self):
        """Test the fixed element counts per chart type."""
        assert ELEMENT_COUNTS == {'pie': 2, 'bar': 5, 'kpi': 1, 'text': 1, 'image': 1}

    def test_unknown_type(self, make_chart_dict):
        """Test that unknown chart types are rejected."""
        with pytest.raises(ChartValidationError):
            ChartConfiguration.from_dict(make_chart_dict(chart_type="donut"))

    def test_bad_formula(self, make_chart_dict):
        """Test that formula errors surface as ChartValidationError."""
        with pytest.raises(ChartValidationError):
            ChartConfiguration.from_dict(make_chart_dict(formulas=("[a] - [b]",)))

    def test_missing_chart_id(self, make_chart_dict):
        """Test that a chart id is required."""
        with pytest.raises(ChartValidationError):
            ChartConfiguration.from_dict(make_chart_dict(chart_id=""))

    def test_value_format_inferred(self, make_chart_dict):
        """Test that percentage formulas default to percentage format."""
        config = ChartConfiguration.from_dict(make_chart_dict(formulas=("[merched] / [stadium] * 100",)))
        assert config.elements[0].value_format == 'percentage'

    def test_round_trip(self, make_chart_dict):
        """Test that to_dict output can be parsed back."""
        data = make_chart_dict("bar", "bar", ["[jersey]", "[scarf]", "[flags]", "[baseballCap]", "[other]"],
                               showTotal=True, totalLabel="Items")
        data['elements'][0]['formatting'] = {'prefix': '#'}
        config = ChartConfiguration.from_dict(data)
        assert ChartConfiguration.from_dict(config.to_dict()) == config
