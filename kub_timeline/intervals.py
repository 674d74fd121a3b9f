"""Reading and writing interval documents.

A document is a YAML or JSON list of interval mappings, or a mapping with an
``items`` list. JSON is a subset of YAML, so both go through ``yaml.safe_load``.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

import yaml

from kub_timeline.models import EventInterval

logger = logging.getLogger(__name__)


class IntervalDocumentError(ValueError):
    """An interval document could not be parsed."""


def parse_intervals(data: Any) -> list[EventInterval]:
    if data is None:
        return []
    if isinstance(data, dict):
        data = data.get("items") or []
    if not isinstance(data, list):
        raise IntervalDocumentError(
            f"expected a list of intervals, got {type(data).__name__}"
        )

    intervals: list[EventInterval] = []
    for i, entry in enumerate(data):
        if not isinstance(entry, dict):
            raise IntervalDocumentError(f"entry {i}: expected a mapping")
        try:
            intervals.append(EventInterval.from_dict(entry))
        except KeyError as exc:
            raise IntervalDocumentError(f"entry {i}: missing field {exc}") from exc
        except (TypeError, ValueError) as exc:
            raise IntervalDocumentError(f"entry {i}: {exc}") from exc

    logger.debug("Parsed %d intervals", len(intervals))
    return intervals


def load_intervals(path: str | Path) -> list[EventInterval]:
    """Load intervals from a YAML or JSON file."""
    with open(path) as f:
        try:
            data = yaml.safe_load(f)
        except yaml.YAMLError as exc:
            raise IntervalDocumentError(f"{path}: {exc}") from exc
    return parse_intervals(data)


def dump_intervals(intervals: list[EventInterval]) -> str:
    """Render intervals as a JSON document."""
    return json.dumps({"items": [e.to_dict() for e in intervals]}, indent=2)
