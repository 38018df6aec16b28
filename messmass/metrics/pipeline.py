"""
Pipeline for running metric collectors.
"""
from __future__ import annotations

from dataclasses import dataclass, field
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional
import yaml

import messmass.metrics.collectors  # noqa: F401  registers built-in collectors
from messmass.metrics.base import MetricCollector, get_collector_registry
from messmass.metrics.model import Metrics
from messmass.records import StatRecord

logger = logging.getLogger(__name__)


@dataclass
class MetricsConfig:
    """
    Configuration for metric collection.

    Attributes:
        collectors: Dict of collector_id -> enabled status
        config_file: Path to YAML config file (optional)
    """
    collectors: Dict[str, bool] = field(default_factory=dict)
    config_file: Optional[Path] = None

    def __post_init__(self) -> None:
        """Load configuration from file if config_file is specified and exists."""
        if self.config_file and Path(self.config_file).exists():
            self._load_from_file()

    def _load_from_file(self) -> None:
        """
        Load configuration from YAML file.

        Reads the 'metrics' section from the YAML file and extracts
        collector enable/disable settings.
        """
        try:
            with open(self.config_file, 'r', encoding='utf-8') as f:
                data = yaml.safe_load(f) or {}
        except (OSError, yaml.YAMLError) as e:
            logger.warning(f"Failed to load metrics config from {self.config_file}: {e}")
            return

        collectors_config = (data.get('metrics') or {}).get('collectors') or {}
        for collector_id, settings in collectors_config.items():
            if isinstance(settings, dict):
                self.collectors[collector_id] = settings.get('enabled', True)
            elif isinstance(settings, bool):
                self.collectors[collector_id] = settings
        logger.info(f"Loaded metrics config from {self.config_file}")

    def is_enabled(self, collector_id: str) -> bool:
        """
        Check if a collector is enabled.

        Args:
            collector_id: Identifier of the collector to check

        Returns:
            True if enabled (default if not specified), False otherwise
        """
        return self.collectors.get(collector_id, True)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> MetricsConfig:
        """Create configuration from a dictionary with a 'collectors' key."""
        return cls(collectors=dict(data.get('collectors', {})))


@dataclass
class MetricsPipeline:
    """
    Runs metric collectors over one StatRecord.

    A failing collector is logged and skipped; the remaining collectors
    still run.

    Attributes:
        collectors: List of collector instances to run
        config: Configuration for the pipeline
    """
    collectors: List[MetricCollector] = field(default_factory=list)
    config: MetricsConfig = field(default_factory=MetricsConfig)
    failures: Dict[str, str] = field(default_factory=dict, init=False)

    def __post_init__(self) -> None:
        """Initialize collectors from registry if none provided."""
        if not self.collectors:
            self._load_collectors_from_registry()

    def _load_collectors_from_registry(self) -> None:
        registry = get_collector_registry()
        for collector_id, collector_cls in registry.items():
            enabled = self.config.is_enabled(collector_id)
            try:
                collector = collector_cls(enabled=enabled)
            except Exception as e:
                logger.error(f"Failed to load collector {collector_id}: {e}")
                continue
            self.collectors.append(collector)
            logger.debug(f"Loaded collector: {collector_id} (enabled={enabled})")

    def run(self, stats: StatRecord) -> Metrics:
        """
        Run all enabled collectors on a StatRecord.

        Args:
            stats: Counter map of one event or aggregate

        Returns:
            Metrics object with all collected values; collectors that raised
            are listed in its failures (also kept on self.failures)
        """
        metrics = Metrics()
        for collector in self.collectors:
            if not collector.enabled:
                logger.debug(f"Skipping disabled collector: {collector.collector_id}")
                continue
            try:
                metrics.merge(collector.collect(stats, metrics))
            except Exception as e:
                metrics.failures[collector.collector_id] = str(e)
                logger.error(f"Error in collector {collector.collector_id}: {e}", exc_info=True)
        self.failures = dict(metrics.failures)
        return metrics
