"""
Pytest fixtures for chart tests.
"""
from __future__ import annotations

import pytest


@pytest.fixture
def make_chart_dict():
    """Factory for stored chart configuration documents."""
    def _create(chart_id: str = "chart", chart_type: str = "kpi", formulas=("[remoteImages]",), **kwargs):
        elements = [
            {'id': f"el{i}", 'label': f"Element {i}", 'formula': formula, 'color': '#112233'}
            for i, formula in enumerate(formulas)
        ]
        data = {'chartId': chart_id, 'title': chart_id.title(), 'type': chart_type, 'elements': elements}
        data.update(kwargs)
        return data

    return _create
