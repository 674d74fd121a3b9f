"""Data models for cluster event timelines and alert allowances.

Core concepts:
- PodReference / ContainerReference: identities decoded from locator strings
- EventInterval: a state that held for a resource between two instants
- AlertDataKey / StatisticalDuration: historical alert statistics lookup
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Any


# ---------------------------------------------------------------------------
# Resource references: identities decoded from locators
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class NamespacedReference:
    """Identity of a namespaced resource.

    The UID is authoritative. Namespace and name alone are an inexact
    fallback for events that never carried a UID.
    """

    namespace: str = ""
    name: str = ""
    uid: str = ""

    @property
    def is_empty(self) -> bool:
        return not self.uid


@dataclass(frozen=True)
class PodReference(NamespacedReference):
    """A namespaced reference to a pod."""

    def to_locator(self) -> str:
        return f"ns/{self.namespace} pod/{self.name} uid/{self.uid}"


@dataclass(frozen=True)
class ContainerReference:
    """A container, only meaningful together with its owning pod's UID."""

    pod: PodReference = field(default_factory=PodReference)
    container_name: str = ""

    @property
    def is_empty(self) -> bool:
        return not self.pod.uid

    def to_locator(self) -> str:
        return (
            f"ns/{self.pod.namespace} pod/{self.pod.name} uid/{self.pod.uid} "
            f"container/{self.container_name}"
        )


# ---------------------------------------------------------------------------
# Event interval: a state held between two instants
# ---------------------------------------------------------------------------


_FRACTION = re.compile(r"\.(\d+)")


def _as_utc(ts: datetime) -> datetime:
    if ts.tzinfo is None:
        return ts.replace(tzinfo=timezone.utc)
    return ts


@dataclass(frozen=True)
class EventInterval:
    """A single interval in the cluster timeline.

    ``from_ == to`` denotes an instantaneous point event.
    """

    locator: str
    message: str
    from_: datetime
    to: datetime

    def __post_init__(self) -> None:
        # Ensure timezone-aware so intervals from different sources compare
        object.__setattr__(self, "from_", _as_utc(self.from_))
        object.__setattr__(self, "to", _as_utc(self.to))
        if self.to < self.from_:
            raise ValueError(
                f"interval ends before it starts: {self.from_.isoformat()} > {self.to.isoformat()}"
            )

    @classmethod
    def point(cls, locator: str, message: str, at: datetime) -> EventInterval:
        return cls(locator=locator, message=message, from_=at, to=at)

    @property
    def is_point(self) -> bool:
        return self.from_ == self.to

    @property
    def duration(self) -> timedelta:
        return self.to - self.from_

    def to_dict(self) -> dict[str, Any]:
        return {
            "locator": self.locator,
            "message": self.message,
            "from": self.from_.isoformat(),
            "to": self.to.isoformat(),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> EventInterval:
        """Create an interval from a mapping (e.g., parsed YAML or JSON).

        ``to`` defaults to ``from`` so point events can omit it.
        """
        start = _parse_timestamp(data["from"])
        end = _parse_timestamp(data["to"]) if data.get("to") else start
        return cls(
            locator=data.get("locator") or "",
            message=data.get("message") or "",
            from_=start,
            to=end,
        )


def _parse_timestamp(value: Any) -> datetime:
    if isinstance(value, datetime):
        return value
    text = str(value)
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    # fromisoformat on 3.10 only takes 3 or 6 fractional digits; Go emits up to 9.
    text = _FRACTION.sub(lambda m: "." + m.group(1)[:6].ljust(6, "0"), text, count=1)
    return datetime.fromisoformat(text)


# ---------------------------------------------------------------------------
# Historical alert statistics
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class AlertDataKey:
    """Key identifying an alert under a particular cluster topology."""

    alert_name: str
    alert_namespace: str = ""
    alert_level: str = "warning"
    release: str = ""
    from_release: str = ""
    platform: str = ""
    architecture: str = "amd64"
    network: str = ""
    topology: str = "ha"

    def describe(self) -> str:
        parts = [
            f"alert={self.alert_name}",
            f"namespace={self.alert_namespace}",
            f"level={self.alert_level}",
            f"release={self.release}",
            f"from={self.from_release}",
            f"platform={self.platform}",
            f"arch={self.architecture}",
            f"network={self.network}",
            f"topology={self.topology}",
        ]
        return " ".join(parts)


@dataclass(frozen=True)
class StatisticalDuration:
    """Percentile durations an alert has historically been active for."""

    p95: timedelta = timedelta(0)
    p99: timedelta = timedelta(0)
    job_runs: int = 0
