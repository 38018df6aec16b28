"""
Default insight rules configuration.
"""
from __future__ import annotations

from typing import List

from .config import InsightConfig
from .rules import BaseRule, get_rule_registry


# Rule parameter mapping: maps config fields to rule constructor parameters
RULE_PARAM_MAP = {
    'anomaly': {
        'metrics': lambda cfg: list(cfg.insight_metrics),
        'z_threshold': 'anomaly_z_threshold',
        'z_critical': 'anomaly_z_critical',
        'iqr_multiplier': 'anomaly_iqr_multiplier',
        'pct_change_threshold': 'anomaly_pct_change_threshold',
        'pct_change_critical': 'anomaly_pct_change_critical',
        'consensus_min_history': 'anomaly_consensus_min_history',
    },
    'trend_drop': {
        'metrics': lambda cfg: list(cfg.insight_metrics),
        'threshold': 'trend_drop_threshold',
        'window': 'trend_window',
        'confidence': lambda cfg: cfg.rule_confidence.get('trend_drop', 0.75),
    },
    'consecutive_decline': {
        'metric': 'decline_metric',
        'min_streak': 'decline_streak',
        'confidence': lambda cfg: cfg.rule_confidence.get('consecutive_decline', 0.9),
    },
    'benchmark': {
        'metrics': lambda cfg: list(cfg.insight_metrics),
        'high_percentile': 'benchmark_high_percentile',
        'low_percentile': 'benchmark_low_percentile',
        'min_history': 'benchmark_min_history',
        'confidence': lambda cfg: cfg.rule_confidence.get('benchmark', 0.8),
    },
    'merch_opportunity': {
        'penetration_threshold': 'merch_penetration_threshold',
        'min_fans': 'merch_min_fans',
        'confidence': lambda cfg: cfg.rule_confidence.get('merch_opportunity', 0.7),
    },
    'ad_value_opportunity': {
        'engagement_threshold': 'engagement_threshold',
        'ad_value_threshold': 'ad_value_threshold',
        'confidence': lambda cfg: cfg.rule_confidence.get('ad_value_opportunity', 0.6),
    },
    'home_advantage': {
        'min_advantage': 'home_advantage_min',
        'confidence': lambda cfg: cfg.rule_confidence.get('home_advantage', 0.6),
    },
}


def get_default_rules(config: InsightConfig) -> List[BaseRule]:
    """
    Create default insight rules based on config using the rule registry.

    Automatically discovers all registered rules and instantiates them with
    appropriate config values.

    Args:
        config: InsightConfig instance with rule parameters.

    Returns:
        List[BaseRule]: Configured rules, in registration order.
    """
    registry = get_rule_registry()
    rules = []

    for rule_id, rule_class in registry.items():
        if not config.rule_enabled(rule_id):
            continue

        param_map = RULE_PARAM_MAP.get(rule_id, {})

        kwargs = {}
        for param_name, config_key in param_map.items():
            if callable(config_key):
                kwargs[param_name] = config_key(config)
            else:
                kwargs[param_name] = getattr(config, config_key)

        rules.append(rule_class(**kwargs))

    return rules
