"""Historical alert statistics.

The allowance policy only needs ``best_match_duration``; where the numbers
come from is up to the lookup implementation. ``InMemoryHistoricalData`` serves
them from a YAML/JSON document of per-key percentiles.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import fields
from datetime import timedelta
from pathlib import Path
from typing import Any

import yaml

from kub_timeline.models import AlertDataKey, StatisticalDuration

logger = logging.getLogger(__name__)

# Fields relaxed, cumulatively and in this order, when no exact match exists.
FUZZY_FIELDS = ("from_release", "architecture", "network", "topology")

DEFAULT_MIN_JOB_RUNS = 100


class HistoricalDataError(Exception):
    """Historical statistics could not be retrieved."""


class NoHistoricalMatch(HistoricalDataError):
    """No record matched the key, exactly or fuzzily."""

    def __init__(self, key: AlertDataKey):
        super().__init__(f"no exact or fuzzy match for {key.describe()}")
        self.key = key


class HistoricalDataLookup(ABC):
    """Source of historical percentile durations for alert keys."""

    @abstractmethod
    def best_match_duration(self, key: AlertDataKey) -> tuple[StatisticalDuration, str]:
        """Return the closest record for ``key`` and a description of the key it matched.

        Implementations should raise HistoricalDataError when nothing can be
        returned; callers that only need a best-effort value may see any error.
        """
        ...


class InMemoryHistoricalData(HistoricalDataLookup):
    """Best-match lookup over an in-memory table of records."""

    def __init__(
        self,
        records: dict[AlertDataKey, StatisticalDuration],
        min_job_runs: int = DEFAULT_MIN_JOB_RUNS,
    ):
        self._records = dict(records)
        self.min_job_runs = min_job_runs

    def __len__(self) -> int:
        return len(self._records)

    def best_match_duration(self, key: AlertDataKey) -> tuple[StatisticalDuration, str]:
        if key in self._records:
            return self._records[key], key.describe()

        relaxed: set[str] = set()
        for name in FUZZY_FIELDS:
            relaxed.add(name)
            for candidate, duration in self._records.items():
                if duration.job_runs < self.min_job_runs:
                    continue
                if _matches(key, candidate, relaxed):
                    logger.debug(
                        "No exact match for %s, using %s", key.describe(), candidate.describe()
                    )
                    return duration, candidate.describe()

        raise NoHistoricalMatch(key)

    @classmethod
    def from_records(
        cls, records: list[dict[str, Any]], min_job_runs: int = DEFAULT_MIN_JOB_RUNS
    ) -> InMemoryHistoricalData:
        """Build from a list of mappings (e.g., parsed YAML).

        Each mapping carries the ``AlertDataKey`` fields plus ``p95``/``p99``
        in seconds and ``job_runs``.
        """
        if not isinstance(records, list):
            raise HistoricalDataError(
                f"expected a list of records, got {type(records).__name__}"
            )

        key_fields = {f.name for f in fields(AlertDataKey)}
        table: dict[AlertDataKey, StatisticalDuration] = {}
        for i, rec in enumerate(records):
            if not isinstance(rec, dict):
                raise HistoricalDataError(f"record {i}: expected a mapping")
            if not rec.get("alert_name"):
                raise HistoricalDataError(f"record {i}: missing alert_name")
            # Null fields fall back to the key defaults.
            key = AlertDataKey(
                **{
                    k: _key_value(i, k, v)
                    for k, v in rec.items()
                    if k in key_fields and v is not None
                }
            )
            try:
                table[key] = StatisticalDuration(
                    p95=timedelta(seconds=float(rec.get("p95", 0))),
                    p99=timedelta(seconds=float(rec.get("p99", 0))),
                    job_runs=int(rec.get("job_runs", 0)),
                )
            except (TypeError, ValueError) as exc:
                raise HistoricalDataError(f"record {i}: {exc}") from exc
        return cls(table, min_job_runs=min_job_runs)

    @classmethod
    def from_file(
        cls, path: str | Path, min_job_runs: int = DEFAULT_MIN_JOB_RUNS
    ) -> InMemoryHistoricalData:
        try:
            with open(path) as f:
                data = yaml.safe_load(f) or []
        except (OSError, yaml.YAMLError) as exc:
            raise HistoricalDataError(f"cannot read historical data {path}: {exc}") from exc
        if isinstance(data, dict):
            data = data.get("items") or []
        if not isinstance(data, list):
            raise HistoricalDataError(
                f"{path}: expected a list of records or a mapping with items"
            )
        instance = cls.from_records(data, min_job_runs=min_job_runs)
        logger.debug("Loaded %d historical records from %s", len(instance), path)
        return instance


def _key_value(index: int, name: str, value: Any) -> str:
    # YAML turns unquoted 4.10 into the float 4.1; refuse rather than guess.
    if not isinstance(value, str):
        raise HistoricalDataError(
            f"record {index}: {name} must be a string, got {type(value).__name__} "
            f"{value!r} (quote it in the document)"
        )
    return value


def _matches(key: AlertDataKey, candidate: AlertDataKey, relaxed: set[str]) -> bool:
    return all(
        getattr(key, f.name) == getattr(candidate, f.name)
        for f in fields(AlertDataKey)
        if f.name not in relaxed
    )
