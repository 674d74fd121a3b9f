"""Lifecycle reason taxonomy.

Reasons in each set mark non-overlapping states of one entity. Ordered by
time, a pod's reasons give a contiguous view of its life from creation to
deletion; a container's run from ContainerWait to ContainerExit. Readiness is
an overlay on the container lifecycle that starts and ends NotReady.
"""

from __future__ import annotations

# Two pods holding the same IP at the same time.
POD_IP_REUSED = "ReusedPodIP"

POD_REASON_CREATED = "Created"
POD_REASON_SCHEDULED = "Scheduled"
POD_REASON_GRACEFUL_DELETE_STARTED = "GracefulDelete"
POD_REASON_DELETED = "Deleted"

# Terminal variants; meaningful reasons but not lifecycle transitions.
POD_REASON_DELETED_BEFORE_SCHEDULING = "DeletedBeforeScheduling"
POD_REASON_DELETED_AFTER_COMPLETION = "DeletedAfterCompletion"

CONTAINER_REASON_CONTAINER_WAIT = "ContainerWait"
CONTAINER_REASON_CONTAINER_START = "ContainerStart"
CONTAINER_REASON_CONTAINER_EXIT = "ContainerExit"

CONTAINER_REASON_READY = "Ready"
CONTAINER_REASON_NOT_READY = "NotReady"

CONTAINER_REASON_READINESS_FAILED = "ReadinessFailed"
CONTAINER_REASON_READINESS_ERRORED = "ReadinessErrored"
CONTAINER_REASON_STARTUP_PROBE_FAILED = "StartupProbeFailed"

# (none) -> Created -> Scheduled -> GracefulDelete -> Deleted -> (none)
POD_LIFECYCLE_TRANSITION_REASONS = frozenset(
    {
        POD_REASON_CREATED,
        POD_REASON_SCHEDULED,
        POD_REASON_GRACEFUL_DELETE_STARTED,
        POD_REASON_DELETED,
    }
)

# (none) -> ContainerWait -> ContainerStart -> ContainerExit -> (none)
CONTAINER_LIFECYCLE_TRANSITION_REASONS = frozenset(
    {
        CONTAINER_REASON_CONTAINER_WAIT,
        CONTAINER_REASON_CONTAINER_START,
        CONTAINER_REASON_CONTAINER_EXIT,
    }
)

CONTAINER_READINESS_TRANSITION_REASONS = frozenset(
    {
        CONTAINER_REASON_READY,
        CONTAINER_REASON_NOT_READY,
    }
)

KUBELET_READINESS_CHECK_REASONS = frozenset(
    {
        CONTAINER_REASON_READINESS_FAILED,
        CONTAINER_REASON_READINESS_ERRORED,
        CONTAINER_REASON_STARTUP_PROBE_FAILED,
    }
)


def is_pod_lifecycle_reason(reason: str) -> bool:
    return reason in POD_LIFECYCLE_TRANSITION_REASONS


def is_container_lifecycle_reason(reason: str) -> bool:
    return reason in CONTAINER_LIFECYCLE_TRANSITION_REASONS


def is_container_readiness_reason(reason: str) -> bool:
    return reason in CONTAINER_READINESS_TRANSITION_REASONS


def is_kubelet_readiness_check_reason(reason: str) -> bool:
    return reason in KUBELET_READINESS_CHECK_REASONS
