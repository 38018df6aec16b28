from __future__ import annotations

from dataclasses import dataclass, field
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional
import yaml

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = Path(__file__).parent / "config.yaml"


def _read_yaml(yaml_path: Path) -> Dict[str, Any]:
    try:
        with open(yaml_path, 'r', encoding='utf-8') as f:
            return yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise ValueError(f"Error parsing {yaml_path}: {e}")


@dataclass
class InsightConfig:
    """
    Configuration for insight generation.

    Loads all configuration values from config.yaml in the insights directory.
    """
    # General settings
    enabled: bool = field(init=False)
    max_history: int = field(init=False)
    max_insights: int = field(init=False)
    max_events_per_request: int = field(init=False)
    insight_metrics: List[str] = field(init=False)

    # Anomaly detection
    anomaly_z_threshold: float = field(init=False)
    anomaly_z_critical: float = field(init=False)
    anomaly_iqr_multiplier: float = field(init=False)
    anomaly_pct_change_threshold: float = field(init=False)
    anomaly_pct_change_critical: float = field(init=False)
    anomaly_consensus_min_history: int = field(init=False)

    # Trends
    trend_drop_threshold: float = field(init=False)
    trend_window: int = field(init=False)
    decline_metric: str = field(init=False)
    decline_streak: int = field(init=False)

    # Benchmarks
    benchmark_high_percentile: int = field(init=False)
    benchmark_low_percentile: int = field(init=False)
    benchmark_min_history: int = field(init=False)

    # Opportunities
    merch_penetration_threshold: float = field(init=False)
    merch_min_fans: int = field(init=False)
    engagement_threshold: float = field(init=False)
    ad_value_threshold: float = field(init=False)

    home_advantage_min: float = field(init=False)

    # Rule confidence levels (nested dict)
    rule_confidence: Dict[str, float] = field(init=False)

    # Rule toggles (nested dict)
    rules_enabled: Dict[str, bool] = field(init=False)

    def __post_init__(self):
        """Load configuration from YAML file."""
        if not DEFAULT_CONFIG_PATH.exists():
            raise FileNotFoundError(
                f"Configuration file not found: {DEFAULT_CONFIG_PATH}. "
                "Please ensure config.yaml exists in the insights directory."
            )

        config_dict = _read_yaml(DEFAULT_CONFIG_PATH)
        for key in self.__dataclass_fields__.keys():
            if key in config_dict:
                object.__setattr__(self, key, config_dict[key])
            else:
                raise ValueError(f"Required configuration field '{key}' not found in config.yaml")

    @classmethod
    def from_yaml(cls, yaml_path: Path) -> InsightConfig:
        """
        Load configuration from a specific YAML file.

        Keys missing from the file fall back to the packaged config.yaml.

        Args:
            yaml_path: Path to YAML config file.

        Returns:
            InsightConfig: Configuration instance loaded from YAML.
        """
        yaml_path = Path(yaml_path) if yaml_path else None
        if not yaml_path or not yaml_path.exists():
            raise FileNotFoundError(f"Configuration file not found: {yaml_path}")

        config = cls.from_dict(_read_yaml(yaml_path))
        logger.info(f"Loaded insight config from {yaml_path}")
        return config

    @classmethod
    def from_dict(cls, config_dict: Dict[str, Any]) -> InsightConfig:
        """
        Create configuration from a dictionary.

        Args:
            config_dict (Dict[str, Any]): Dictionary with configuration values;
                missing keys are read from the packaged config.yaml.
        Returns:
            InsightConfig: Configuration instance.
        """
        instance = object.__new__(cls)
        defaults: Optional[Dict[str, Any]] = None

        for key in cls.__dataclass_fields__.keys():
            if key in config_dict:
                object.__setattr__(instance, key, config_dict[key])
                continue
            if defaults is None:
                if not DEFAULT_CONFIG_PATH.exists():
                    raise ValueError(f"Required configuration field '{key}' not found and no default config.yaml")
                defaults = _read_yaml(DEFAULT_CONFIG_PATH)
            if key not in defaults:
                raise ValueError(f"Required configuration field '{key}' not found")
            object.__setattr__(instance, key, defaults[key])

        return instance

    def rule_enabled(self, rule_id: str) -> bool:
        # default: enabled unless explicitly false
        return self.rules_enabled.get(rule_id, True)
