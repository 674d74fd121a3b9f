"""Shared fixtures and helpers for kub-timeline tests.

We build lightweight mock objects that replicate the attribute-access interface
of the kubernetes Python client objects, without requiring the kubernetes
package itself.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Any

import pytest

from kub_timeline.allowances import InMemoryHistoricalData
from kub_timeline.models import AlertDataKey, EventInterval, StatisticalDuration


T0 = datetime(2024, 5, 1, 12, 0, 0, tzinfo=timezone.utc)


def at(seconds: float) -> datetime:
    """Timestamp ``seconds`` after T0."""
    return T0 + timedelta(seconds=seconds)


# ---------------------------------------------------------------------------
# Generic attribute-bag that behaves like a K8s API object
# ---------------------------------------------------------------------------


class K8sObj:
    """Minimal mock for K8s API objects.  Supports nested attribute access."""

    def __init__(self, **kwargs: Any):
        for k, v in kwargs.items():
            if isinstance(v, dict):
                setattr(self, k, K8sObj(**v))
            else:
                setattr(self, k, v)

    def __getattr__(self, name: str) -> Any:
        # Return None for any attribute not set (mirrors K8s client behaviour)
        return None


def make_pod(
    name: str,
    namespace: str = "default",
    node_name: str = "node-1",
    uid: str = "uid-1",
) -> K8sObj:
    return K8sObj(
        metadata=K8sObj(name=name, namespace=namespace, uid=uid),
        spec=K8sObj(node_name=node_name),
    )


# ---------------------------------------------------------------------------
# Interval factory
# ---------------------------------------------------------------------------


def make_interval(
    locator: str = "ns/default pod/p1 uid/uid-1",
    message: str = "",
    start: float = 0,
    end: float | None = None,
) -> EventInterval:
    return EventInterval(
        locator=locator,
        message=message,
        from_=at(start),
        to=at(end if end is not None else start),
    )


# ---------------------------------------------------------------------------
# Historical data
# ---------------------------------------------------------------------------


def make_key(alert_name: str = "KubePodNotReady", **overrides: str) -> AlertDataKey:
    defaults = {
        "alert_namespace": "openshift-monitoring",
        "alert_level": "warning",
        "release": "4.14",
        "from_release": "4.13",
        "platform": "aws",
        "architecture": "amd64",
        "network": "ovn",
        "topology": "ha",
    }
    defaults.update(overrides)
    return AlertDataKey(alert_name=alert_name, **defaults)


@pytest.fixture
def historical_data() -> InMemoryHistoricalData:
    return InMemoryHistoricalData(
        {
            make_key(): StatisticalDuration(
                p95=timedelta(seconds=10), p99=timedelta(seconds=30), job_runs=500
            ),
            make_key(from_release="", network="sdn"): StatisticalDuration(
                p95=timedelta(seconds=20), p99=timedelta(seconds=60), job_runs=500
            ),
            make_key("TargetDown", from_release="", topology="single"): StatisticalDuration(
                p95=timedelta(seconds=5), p99=timedelta(seconds=7), job_runs=10
            ),
        }
    )
