"""
Base classes for metric collectors.
"""
from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
import logging
from typing import Dict, Type

from messmass.metrics.model import Metrics
from messmass.records import StatRecord

logger = logging.getLogger(__name__)

# Collector Registry
_COLLECTOR_REGISTRY: Dict[str, Type['MetricCollector']] = {}


def register_collector(cls: Type['MetricCollector']) -> Type['MetricCollector']:
    """
    Decorator to register a collector class in the global registry.

    Usage:
        @register_collector
        @dataclass
        class MyCollector(MetricCollector):
            collector_id: str = "my_collector"
            ...
    """
    if getattr(cls, 'collector_id', None):
        _COLLECTOR_REGISTRY[cls.collector_id] = cls
        logger.debug(f"Registered metric collector: {cls.collector_id}")
    else:
        logger.warning(f"Collector {cls.__name__} missing 'collector_id' attribute, not registered")
    return cls


def get_collector_registry() -> Dict[str, Type['MetricCollector']]:
    """Get the global collector registry."""
    return _COLLECTOR_REGISTRY.copy()


@dataclass
class MetricCollector(ABC):
    """
    Base class for metric collectors.

    Collectors read one StatRecord (a single event or an aggregate) and
    produce derived metrics. They never modify the record.

    Attributes:
        collector_id: Unique identifier for this collector
        enabled: Whether this collector is enabled (can be set via config)
    """
    collector_id: str = ""
    enabled: bool = True

    @abstractmethod
    def collect(self, stats: StatRecord, existing_metrics: Metrics) -> Metrics:
        """
        Derive metrics from a StatRecord.

        Args:
            stats: Counter map of one event or aggregate
            existing_metrics: Metrics collected so far by earlier collectors

        Returns:
            Metrics object with collected values
        """
        pass

    def __post_init__(self):
        """Validate collector configuration."""
        if not self.collector_id:
            raise ValueError(f"{self.__class__.__name__} must define collector_id")
