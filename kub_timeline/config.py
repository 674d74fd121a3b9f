"""Configuration management for kub-timeline."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from kub_timeline.allowances import (
    AllowanceCalculator,
    InMemoryHistoricalData,
    PercentileAllowances,
    never_fail,
)
from kub_timeline.allowances.historical import DEFAULT_MIN_JOB_RUNS

CONFIG_FILENAME = ".kub-timeline.yaml"
DEFAULT_PATHS = [
    Path.cwd() / CONFIG_FILENAME,
    Path.home() / CONFIG_FILENAME,
    Path.home() / ".config" / "kub-timeline" / "config.yaml",
]


@dataclass
class Config:
    """Application configuration."""

    # Allowances
    historical_data: str = ""  # Path to a YAML/JSON percentile document
    never_fail_alerts: list[str] = field(default_factory=list)  # Flake-only alerts
    min_job_runs: int = DEFAULT_MIN_JOB_RUNS

    # Defaults for alert keys
    default_platform: str = ""
    default_topology: str = "ha"

    # Output
    show_point_events: bool = True

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Config:
        """Create config from a dictionary (e.g., parsed YAML)."""
        return cls(
            historical_data=data.get("historical_data", ""),
            never_fail_alerts=list(data.get("never_fail_alerts", [])),
            min_job_runs=int(data.get("min_job_runs", DEFAULT_MIN_JOB_RUNS)),
            default_platform=data.get("default_platform", ""),
            default_topology=data.get("default_topology", "ha"),
            show_point_events=data.get("show_point_events", True),
        )

    @classmethod
    def load(cls, path: str | None = None) -> Config:
        """Load config from file, with env var overrides."""
        config_data: dict[str, Any] = {}

        # Find config file
        if path:
            config_path = Path(path)
        else:
            config_path = None
            for p in DEFAULT_PATHS:
                if p.exists():
                    config_path = p
                    break

        if config_path and config_path.exists():
            with open(config_path) as f:
                config_data = yaml.safe_load(f) or {}

        config = cls.from_dict(config_data)

        # Environment variable overrides
        if env_path := os.environ.get("KUB_TIMELINE_HISTORICAL_DATA"):
            config.historical_data = env_path

        if env_alerts := os.environ.get("KUB_TIMELINE_NEVER_FAIL"):
            config.never_fail_alerts = [a.strip() for a in env_alerts.split(",") if a.strip()]

        if env_runs := os.environ.get("KUB_TIMELINE_MIN_JOB_RUNS"):
            config.min_job_runs = int(env_runs)

        return config

    def allowance_for(self, alert_name: str) -> AllowanceCalculator:
        """Build the allowance calculator configured for an alert."""
        lookup = InMemoryHistoricalData.from_file(
            self.historical_data, min_job_runs=self.min_job_runs
        )
        calculator: AllowanceCalculator = PercentileAllowances(lookup)
        if alert_name in self.never_fail_alerts:
            calculator = never_fail(calculator)
        return calculator
