"""Rule-based insights about an event compared with its partner's history."""

from .config import InsightConfig
from .defaults import RULE_PARAM_MAP, get_default_rules
from .model import (
    PRIORITY_RANK,
    SNAPSHOT_METRICS,
    EventSnapshot,
    Insight,
    InsightReport,
    overall_score,
    snapshot_event,
    sort_insights,
    summarize_insights,
)
from .pipeline import InsightBatchResult, InsightPipeline, InsightResult, snapshot_history
from .rules import BaseRule, get_rule_registry, register_rule

__all__ = [
    'InsightConfig',
    'RULE_PARAM_MAP',
    'get_default_rules',
    'PRIORITY_RANK',
    'SNAPSHOT_METRICS',
    'EventSnapshot',
    'Insight',
    'InsightReport',
    'overall_score',
    'snapshot_event',
    'sort_insights',
    'summarize_insights',
    'InsightBatchResult',
    'InsightPipeline',
    'InsightResult',
    'snapshot_history',
    'BaseRule',
    'get_rule_registry',
    'register_rule',
]
