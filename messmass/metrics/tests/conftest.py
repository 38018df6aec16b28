"""
Pytest fixtures for metrics tests.
"""
from __future__ import annotations

import pytest


@pytest.fixture
def sample_stats():
    """A StatRecord with fans, images, merchandise and visits."""
    return {
        'remoteFans': 300,
        'stadium': 200,
        'eventAttendees': 5000,
        'remoteImages': 40,
        'hostessImages': 50,
        'selfies': 10,
        'merched': 100,
        'jersey': 60,
        'scarf': 20,
        'baseballCap': 5,
        'female': 220,
        'male': 280,
        'genAlpha': 50,
        'genYZ': 250,
        'genX': 150,
        'boomer': 50,
        'eventValuePropositionVisited': 1000,
        'eventValuePropositionPurchases': 50,
        'visitQrCode': 30,
        'visitWeb': 70,
    }
