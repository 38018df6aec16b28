"""
Tests for built-in metric collectors.
"""
from __future__ import annotations

import pytest

from messmass.metrics import Metrics
from messmass.metrics.collectors import (
    AdvertisingCollector,
    BitlyCollector,
    DemographicsCollector,
    FanMetricsCollector,
    MerchandiseCollector,
    VisitsCollector,
)
from messmass.metrics.collectors.advertising import ad_value, social_value


class TestFanMetricsCollector:
    """Tests for FanMetricsCollector."""

    def test_fan_totals_and_rates(self, sample_stats):
        """Test total fans, engagement rate and core fan team."""
        result = FanMetricsCollector().collect(sample_stats, Metrics())
        assert result.get_value('fans', 'total_fans') == 500
        assert result.get_value('fans', 'all_images') == 100
        assert result.get_value('fans', 'engagement_rate') == pytest.approx(0.1)
        assert result.get_value('fans', 'core_fan_team') == pytest.approx(1000)

    def test_indoor_outdoor_fallback(self):
        """Test that older records without remoteFans use indoor + outdoor."""
        result = FanMetricsCollector().collect({'indoor': 10, 'outdoor': 5, 'stadium': 5}, Metrics())
        assert result.get_value('fans', 'remote_fans') == 15
        assert result.get_value('fans', 'total_fans') == 20

    def test_zero_attendees(self):
        """Test that missing attendance gives a zero rate, not an error."""
        result = FanMetricsCollector().collect({'stadium': 10}, Metrics())
        assert result.get_value('fans', 'engagement_rate') == 0.0


class TestMerchandiseCollector:
    """Tests for MerchandiseCollector."""

    def test_penetration_and_types(self, sample_stats):
        """Test penetration rate, per-type counts and diversity."""
        result = MerchandiseCollector().collect(sample_stats, Metrics())
        assert result.get_value('merchandise', 'penetration_rate') == pytest.approx(0.2)
        assert result.get_value('merchandise', 'by_type')['jersey'] == 60
        assert result.get_value('merchandise', 'diversity_index') == 3
        assert result.get_value('merchandise', 'high_value_fans') == 80
        assert result.get_value('merchandise', 'potential_sales') == 400 * 10

    def test_uses_existing_fan_total(self, sample_stats):
        """Test that the fan total from an earlier collector is reused."""
        existing = Metrics()
        existing.add_value('fans', 'total_fans', 1000)
        result = MerchandiseCollector().collect(sample_stats, existing)
        assert result.get_value('merchandise', 'penetration_rate') == pytest.approx(0.1)


class TestAdvertisingCollector:
    """Tests for AdvertisingCollector."""

    def test_ad_value(self, sample_stats):
        """Test social and email value."""
        result = AdvertisingCollector().collect(sample_stats, Metrics())
        assert result.get_value('advertising', 'social_value') == pytest.approx(8700)
        assert result.get_value('advertising', 'email_value') == pytest.approx(374.5)
        assert result.get_value('advertising', 'total_value') == pytest.approx(9074.5)
        assert ad_value(sample_stats) == pytest.approx(9074.5)

    def test_social_value_per_image(self):
        """Test the CPM model for one image."""
        assert social_value(1) == pytest.approx(87.0)


class TestDemographicsCollector:
    """Tests for DemographicsCollector."""

    def test_gender_and_youth(self, sample_stats):
        """Test gender balance and youth index."""
        result = DemographicsCollector().collect(sample_stats, Metrics())
        assert result.get_value('demographics', 'gender_balance') == pytest.approx(60 / 500)
        assert result.get_value('demographics', 'youth_index') == pytest.approx(300 / 500)
        assert result.get_value('demographics', 'diversity_index') == 6


class TestVisitsAndBitly:
    """Tests for VisitsCollector and BitlyCollector."""

    def test_visits(self, sample_stats):
        """Test channel totals and proposition effectiveness."""
        result = VisitsCollector().collect(sample_stats, Metrics())
        assert result.get_value('visits', 'total_visits') == 100
        assert result.get_value('visits', 'proposition_effectiveness') == pytest.approx(0.05)

    def test_bitly_without_clicks(self, sample_stats):
        """Test that no click data adds no bitly metrics."""
        result = BitlyCollector().collect(sample_stats, Metrics())
        assert 'bitly' not in result.categories

    def test_bitly_with_clicks(self):
        """Test click rate and mobile share."""
        stats = {'bitlyTotalClicks': 200, 'bitlyMobileClicks': 150, 'eventAttendees': 1000}
        result = BitlyCollector().collect(stats, Metrics())
        assert result.get_value('bitly', 'click_rate') == pytest.approx(0.2)
        assert result.get_value('bitly', 'mobile_rate') == pytest.approx(0.75)
