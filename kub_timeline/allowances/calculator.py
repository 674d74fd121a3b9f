"""Alert allowance policies.

An allowance calculator gives the durations after which an alert held at or
above the required state should flake and fail. For instance, if an alert is
pending for 4s, ``fail_after`` returns 6s and ``flake_after`` returns 2s, the
test flakes.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from datetime import timedelta
from enum import Enum

from kub_timeline.allowances.historical import HistoricalDataLookup
from kub_timeline.models import AlertDataKey

logger = logging.getLogger(__name__)

NEVER_FAIL_DURATION = timedelta(hours=24)


class AllowanceDecision(str, Enum):
    """Outcome of checking an observed alert duration against its allowances."""

    PASS = "pass"
    FLAKE = "flake"
    FAIL = "fail"


class AllowanceCalculator(ABC):
    """Base class for allowance strategies."""

    @abstractmethod
    def fail_after(self, key: AlertDataKey) -> timedelta:
        """Duration an alert may be active before failing.

        Raises HistoricalDataError when the threshold cannot be determined.
        """
        ...

    @abstractmethod
    def flake_after(self, key: AlertDataKey) -> timedelta:
        """Duration an alert may be active before flaking. Best effort."""
        ...


class PercentileAllowances(AllowanceCalculator):
    """Fail at the historical P99, flake at the historical P95."""

    def __init__(self, lookup: HistoricalDataLookup):
        self.lookup = lookup

    def fail_after(self, key: AlertDataKey) -> timedelta:
        allowed, _ = self.lookup.best_match_duration(key)
        return allowed.p99

    def flake_after(self, key: AlertDataKey) -> timedelta:
        # A statistics outage must never block flake evaluation.
        try:
            allowed, _ = self.lookup.best_match_duration(key)
        except Exception as exc:
            logger.warning("Flake allowance for %s unavailable: %s", key.alert_name, exc)
            return timedelta(0)
        return allowed.p95


class NeverFailAllowance(AllowanceCalculator):
    """Turn an alert test into a flake-only test.

    Failure is pushed out to 24 hours; flaking is decided by the delegate.
    """

    def __init__(self, flake_delegate: AllowanceCalculator):
        self.flake_delegate = flake_delegate

    def fail_after(self, key: AlertDataKey) -> timedelta:
        return NEVER_FAIL_DURATION

    def flake_after(self, key: AlertDataKey) -> timedelta:
        return self.flake_delegate.flake_after(key)


def never_fail(flake_delegate: AllowanceCalculator) -> AllowanceCalculator:
    return NeverFailAllowance(flake_delegate)


def evaluate(
    calculator: AllowanceCalculator,
    key: AlertDataKey,
    observed: timedelta,
) -> AllowanceDecision:
    """Classify how long an alert was active against its allowances.

    Lookup errors from ``fail_after`` propagate to the caller.
    """
    if observed > calculator.fail_after(key):
        return AllowanceDecision.FAIL
    if observed > calculator.flake_after(key):
        return AllowanceDecision.FLAKE
    return AllowanceDecision.PASS
