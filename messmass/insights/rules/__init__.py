"""Insight rules: threshold and trend checks of one event against its partner's history.

Built-in rules, in evaluation order:
    - AnomalyRule: z-score, IQR and percent-change detectors voting per metric
    - TrendDropRule: drop against the trailing average
    - ConsecutiveDeclineRule: metric falling several events in a row
    - BenchmarkRule: percentile rank against history
    - MerchOpportunityRule: low merchandise penetration with a large crowd
    - AdValueOpportunityRule: high engagement, low ad value
    - HomeAdvantageRule: home vs away average fans

Extensibility:
    Create custom rules by:
        1. Subclass BaseRule
        2. Implement evaluate(current, history) -> list[Insight]
        3. Use @register_rule decorator for automatic registration

Example:
    >>> from messmass.insights.rules import BaseRule, register_rule
    >>> @register_rule
    ... @dataclass
    ... class MyCustomRule(BaseRule):
    ...     rule_id: str = "my_rule"
    ...     def evaluate(self, current, history):
    ...         return []
"""

from .base import InsightRule
from .base import BaseRule
from .base import register_rule
from .base import get_rule_registry
from .anomaly import AnomalyRule
from .trend import TrendDropRule, ConsecutiveDeclineRule
from .benchmark import BenchmarkRule
from .opportunity import MerchOpportunityRule, AdValueOpportunityRule
from .home_advantage import HomeAdvantageRule

__all__ = [
    'InsightRule',
    'BaseRule',
    'register_rule',
    'get_rule_registry',
    'AnomalyRule',
    'TrendDropRule',
    'ConsecutiveDeclineRule',
    'BenchmarkRule',
    'MerchOpportunityRule',
    'AdValueOpportunityRule',
    'HomeAdvantageRule',
]
