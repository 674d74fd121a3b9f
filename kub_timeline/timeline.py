"""Event timeline ordering.

Intervals arrive from several asynchronous sources, often with identical
timestamps. The ordering here makes every run's timeline deterministic:
pod "constructed" markers come first, grouped by namespace, and everything
else follows by start time, end time, then message.
"""

from __future__ import annotations

from collections.abc import Iterable
from datetime import datetime
from functools import cmp_to_key

from kub_timeline.locator import (
    container_from,
    namespace_from_locator,
    non_unique_pod_locator,
    pod_from,
    reason_from,
)
from kub_timeline.models import ContainerReference, EventInterval, PodReference


def is_pod_constructed(interval: EventInterval) -> bool:
    return "constructed" in interval.message and "pod/" in interval.locator


def _cmp(a, b) -> int:
    return (a > b) - (a < b)


def compare_intervals(lhs: EventInterval, rhs: EventInterval) -> int:
    """Three-way comparison of two intervals for timeline order."""
    lhs_constructed = is_pod_constructed(lhs)
    rhs_constructed = is_pod_constructed(rhs)

    if lhs_constructed and rhs_constructed:
        result = _cmp(namespace_from_locator(lhs.locator), namespace_from_locator(rhs.locator))
        if result:
            return result
    elif lhs_constructed:
        return -1
    elif rhs_constructed:
        return 1

    return (
        _cmp(lhs.from_, rhs.from_)
        or _cmp(lhs.to, rhs.to)
        or _cmp(lhs.message, rhs.message)
    )


interval_sort_key = cmp_to_key(compare_intervals)


def sort_intervals(intervals: Iterable[EventInterval]) -> list[EventInterval]:
    """Return a new list of the intervals in timeline order."""
    return sorted(intervals, key=interval_sort_key)


def sort_intervals_in_place(intervals: list[EventInterval]) -> None:
    intervals.sort(key=interval_sort_key)


# ---------------------------------------------------------------------------
# Timeline queries
# ---------------------------------------------------------------------------


def intervals_for_pod(
    timeline: list[EventInterval], ref: PodReference
) -> list[EventInterval]:
    """Filter timeline to intervals involving a specific pod.

    Intervals whose locator carries no UID are matched on namespace and name.
    """
    wanted = non_unique_pod_locator(ref.to_locator())
    matched = []
    for interval in timeline:
        pod = pod_from(interval.locator)
        if pod.is_empty:
            if non_unique_pod_locator(interval.locator) == wanted:
                matched.append(interval)
        elif pod.uid == ref.uid:
            matched.append(interval)
    return matched


def intervals_for_container(
    timeline: list[EventInterval], ref: ContainerReference
) -> list[EventInterval]:
    return [e for e in timeline if container_from(e.locator) == ref]


def intervals_in_window(
    timeline: list[EventInterval],
    start: datetime,
    end: datetime,
) -> list[EventInterval]:
    """Get all intervals overlapping a time window."""
    return [e for e in timeline if e.from_ <= end and e.to >= start]


def intervals_with_reasons(
    timeline: list[EventInterval], reasons: Iterable[str]
) -> list[EventInterval]:
    wanted = frozenset(reasons)
    return [e for e in timeline if reason_from(e.message) in wanted]
