"""Alert allowance policies backed by historical statistics."""

from kub_timeline.allowances.calculator import (
    NEVER_FAIL_DURATION,
    AllowanceCalculator,
    AllowanceDecision,
    NeverFailAllowance,
    PercentileAllowances,
    evaluate,
    never_fail,
)
from kub_timeline.allowances.historical import (
    HistoricalDataError,
    HistoricalDataLookup,
    InMemoryHistoricalData,
    NoHistoricalMatch,
)

__all__ = [
    "NEVER_FAIL_DURATION",
    "AllowanceCalculator",
    "AllowanceDecision",
    "HistoricalDataError",
    "HistoricalDataLookup",
    "InMemoryHistoricalData",
    "NeverFailAllowance",
    "NoHistoricalMatch",
    "PercentileAllowances",
    "evaluate",
    "never_fail",
]
