"""
Derived metrics of one StatRecord.

Collectors write into a Metrics object grouped by area ('fans',
'merchandise', 'advertising', ...). Every value keeps its display format
next to it, so presentation code can render rates and money without
knowing which collector produced them. Rates are stored as fractions.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, Mapping, Optional, Tuple, Union

from messmass.charts.formatting import ValueFormat

# A number, a label (e.g. top country) or a breakdown map of numbers
MetricValue = Union[int, float, str, Dict[str, Any]]


@dataclass
class Metrics:
    """
    Metric values of one event or aggregate, by category.

    Attributes:
        categories: category -> metric name -> value
        formats: category -> metric name -> 'percentage' or 'currency';
            values not listed are plain numbers (or text)
        failures: collector_id -> error message, for collectors that raised
    """
    categories: Dict[str, Dict[str, MetricValue]] = field(default_factory=dict)
    formats: Dict[str, Dict[str, ValueFormat]] = field(default_factory=dict)
    failures: Dict[str, str] = field(default_factory=dict)

    def add_value(self, category: str, name: str, value: MetricValue, value_format: ValueFormat = 'number') -> None:
        self.categories.setdefault(category, {})[name] = value
        if value_format != 'number':
            self.formats.setdefault(category, {})[name] = value_format

    def add_rate(self, category: str, name: str, value: Union[float, Mapping[str, float]]) -> None:
        """Add a fraction (or a map of fractions) shown as a percentage."""
        self.add_value(category, name, dict(value) if isinstance(value, Mapping) else value, 'percentage')

    def add_amount(self, category: str, name: str, value: float) -> None:
        """Add a currency amount."""
        self.add_value(category, name, value, 'currency')

    def get_value(self, category: str, name: str, default: Optional[MetricValue] = None) -> Optional[MetricValue]:
        return self.categories.get(category, {}).get(name, default)

    def format_of(self, category: str, name: str) -> ValueFormat:
        return self.formats.get(category, {}).get(name, 'number')

    def items(self) -> Iterator[Tuple[str, str, MetricValue, ValueFormat]]:
        """(category, name, value, format) for every value, in insertion order."""
        for category, values in self.categories.items():
            for name, value in values.items():
                yield category, name, value, self.format_of(category, name)

    def merge(self, other: Metrics) -> None:
        """Merge another Metrics object into this one; later values win."""
        for category, values in other.categories.items():
            self.categories.setdefault(category, {}).update(values)
        for category, formats in other.formats.items():
            self.formats.setdefault(category, {}).update(formats)
        self.failures.update(other.failures)

    @property
    def is_complete(self) -> bool:
        return not self.failures

    def to_dict(self) -> Dict[str, Dict[str, MetricValue]]:
        """Raw values by category; breakdown maps are copied."""
        return {
            category: {name: dict(value) if isinstance(value, dict) else value for name, value in values.items()}
            for category, values in self.categories.items()
        }
