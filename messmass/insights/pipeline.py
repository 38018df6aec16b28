from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from messmass.app_hooks import AppHooks
from messmass.metrics.pipeline import MetricsPipeline
from messmass.records import EventDocument

from .config import InsightConfig
from .defaults import get_default_rules
from .model import EventSnapshot, Insight, InsightReport, snapshot_event, sort_insights
from .rules.base import InsightRule

logger = logging.getLogger(__name__)


@dataclass
class InsightResult:
    event_id: str
    insights: List[Insight] = field(default_factory=list)
    failures: Dict[str, str] = field(default_factory=dict)  # rule_id -> error
    rules_run: List[str] = field(default_factory=list)


@dataclass
class InsightBatchResult:
    results: Dict[str, InsightResult] = field(default_factory=dict)
    failures: Dict[str, str] = field(default_factory=dict)  # event_id -> error
    skipped: int = 0  # events beyond max_events_per_request
    stopped: bool = False


class InsightPipeline:
    """
    Evaluates insight rules for one event, or a batch of events, against
    their preceding history.
    """
    def __init__(self, config: Optional[InsightConfig] = None, rules: Optional[Sequence[InsightRule]] = None,
                 app_hooks: Optional['AppHooks'] = None) -> None:
        self.config = config or InsightConfig()
        self.rules = list(rules) if rules is not None else get_default_rules(self.config)
        self.app_hooks = app_hooks

    def recent_history(self, current: EventSnapshot, history: Iterable[EventSnapshot]) -> List[EventSnapshot]:
        """
        The most recent max_history events dated before the current one,
        oldest first. The current event itself is excluded.
        """
        preceding = [
            snapshot for snapshot in history
            if snapshot.event_id != current.event_id and snapshot.event_date < current.event_date
        ]
        preceding.sort(key=lambda s: (s.event_date, s.event_id))
        return preceding[-self.config.max_history:] if self.config.max_history > 0 else []

    def run(self, current: EventSnapshot, history: Iterable[EventSnapshot] = ()) -> InsightResult:
        """
        Evaluate every enabled rule for one event.

        A rule that raises is logged and recorded in InsightResult.failures;
        the remaining rules still run.

        Args:
            current: Event being analyzed.
            history: Events of the same partner; trimmed to the most recent
                max_history preceding ones.

        Returns:
            InsightResult: Insights ordered by priority then confidence,
            truncated to max_insights.
        """
        result = InsightResult(event_id=current.event_id)
        if not self.config.enabled:
            logger.debug("Insight generation disabled")
            return result

        history = self.recent_history(current, history)
        insights: List[Insight] = []
        for rule in self.rules:
            if not self.config.rule_enabled(rule.rule_id):
                continue
            try:
                found = rule.evaluate(current, history)
            except Exception as e:
                logger.error(f"Error in insight rule {rule.rule_id} for event {current.event_id}: {e}", exc_info=True)
                result.failures[rule.rule_id] = str(e)
                continue
            result.rules_run.append(rule.rule_id)
            insights.extend(found)

        result.insights = sort_insights(insights)[:self.config.max_insights]
        logger.debug(f"Event {current.event_id}: {len(insights)} insights from {len(result.rules_run)} rules, "
                     f"kept {len(result.insights)}")
        return result

    def run_batch(self, items: Sequence[Tuple[EventSnapshot, Sequence[EventSnapshot]]]) -> InsightBatchResult:
        """
        Evaluate several events, each with its own history.

        At most max_events_per_request events are evaluated. An event whose
        evaluation fails is logged and left out of the results.
        """
        batch = InsightBatchResult()
        limit = self.config.max_events_per_request
        if len(items) > limit:
            batch.skipped = len(items) - limit
            logger.warning(f"Insight batch of {len(items)} events capped at {limit}")
        items = list(items)[:limit]

        self._report_step(info="Generating insights", target=len(items), reset_counter=True, plus_step=0)
        for current, history in items:
            if self._stop_requested("Insight generation stopped by user"):
                batch.stopped = True
                break
            try:
                batch.results[current.event_id] = self.run(current, history)
            except Exception as e:
                logger.error(f"Error generating insights for event {current.event_id}: {e}", exc_info=True)
                batch.failures[current.event_id] = str(e)
            self._report_step(plus_step=1)

        if self.app_hooks and callable(getattr(self.app_hooks, "update_key_value", None)):
            self.app_hooks.update_key_value("insight_events", len(batch.results))
        return batch

    def report(self, current: EventSnapshot, history: Iterable[EventSnapshot] = ()) -> InsightReport:
        result = self.run(current, history)
        return InsightReport(event_id=current.event_id, event_date=current.event_date, insights=result.insights)

    def _report_step(self, info: str = "", target: Optional[int] = None, reset_counter: bool = False, plus_step: int = 0) -> None:
        """
        Report a step via app hooks if available. (Private method)

        Args:
            info (str): Information message.
            target (int): Target count for progress.
            reset_counter (bool): Whether to reset the counter.
            plus_step (int): Incremental step count.
        """
        if self.app_hooks and callable(getattr(self.app_hooks, "report_step", None)):
            self.app_hooks.report_step(info=info, target=target, reset_counter=reset_counter, plus_step=plus_step)
        elif info:
            logger.debug(info)

    def _stop_requested(self, logger_stop_message: str = "Stop requested by user") -> bool:
        """
        Check if stop has been requested via app hooks. (Private method)

        Returns:
            bool: True if stop requested, False otherwise.
        """
        if self.app_hooks and callable(getattr(self.app_hooks, "stop_requested", None)):
            if self.app_hooks.stop_requested():
                if logger_stop_message:
                    logger.debug(logger_stop_message)
                return True
        return False


def snapshot_history(current: EventDocument, history: Iterable[EventDocument],
                     metrics_pipeline: Optional[MetricsPipeline] = None) -> Tuple[EventSnapshot, List[EventSnapshot]]:
    """Snapshot an event and its history with one shared metrics pipeline."""
    metrics_pipeline = metrics_pipeline or MetricsPipeline()
    return (
        snapshot_event(current, metrics_pipeline),
        [snapshot_event(event, metrics_pipeline) for event in history],
    )
