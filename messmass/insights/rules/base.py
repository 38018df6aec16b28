"""
Base classes and registry for insight rules.
"""
from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
import logging
from typing import Dict, List, Protocol, Sequence, Type, runtime_checkable

from messmass.insights.model import EventSnapshot, Insight

logger = logging.getLogger(__name__)

# Rule Registry
_RULE_REGISTRY: Dict[str, Type['BaseRule']] = {}


def register_rule(cls: Type['BaseRule']) -> Type['BaseRule']:
    """
    Decorator to register a rule class in the global registry.

    Registration order is evaluation order.

    Usage:
        @register_rule
        @dataclass
        class MyRule(BaseRule):
            rule_id: str = "my_rule"
            ...
    """
    if getattr(cls, 'rule_id', None):
        _RULE_REGISTRY[cls.rule_id] = cls
        logger.debug(f"Registered insight rule: {cls.rule_id}")
    else:
        logger.warning(f"Rule {cls.__name__} missing 'rule_id' attribute, not registered")
    return cls


def get_rule_registry() -> Dict[str, Type['BaseRule']]:
    """Get the global rule registry."""
    return _RULE_REGISTRY.copy()


@runtime_checkable
class InsightRule(Protocol):
    rule_id: str

    def evaluate(self, current: EventSnapshot, history: Sequence[EventSnapshot]) -> List[Insight]:
        ...


@dataclass
class BaseRule(ABC):
    """
    Base class for insight rules.

    A rule reads the current event and its preceding history (oldest first)
    and returns zero or more insights. Rules hold no state between calls.

    Attributes:
        rule_id: Unique identifier for this rule
        confidence: Confidence attached to the insights it produces
    """
    rule_id: str = ""
    confidence: float = 0.5

    @abstractmethod
    def evaluate(self, current: EventSnapshot, history: Sequence[EventSnapshot]) -> List[Insight]:
        pass

    def __post_init__(self):
        if not self.rule_id:
            raise ValueError(f"{self.__class__.__name__} must define rule_id")

    def insight_id(self, current: EventSnapshot, metric: str = '') -> str:
        parts = [self.rule_id, metric, current.event_id]
        return '-'.join(part for part in parts if part)


def history_values(history: Sequence[EventSnapshot], metric: str) -> List[float]:
    return [snapshot.value(metric) for snapshot in history]
