"""Aggregations over the calculation history."""

from collections import Counter
from collections.abc import Sequence

from caffeine_calculator.domain.caffeine import Tolerance
from caffeine_calculator.domain.history import (
    HistoryEntry,
    TimelinePoint,
    ToleranceAverage,
    ToleranceCount,
)
from caffeine_calculator.services.calculator import round_half_up


def tolerance_distribution(entries: Sequence[HistoryEntry]) -> list[ToleranceCount]:
    """Count calculations per tolerance level, skipping unused levels."""
    counts = Counter(entry.inputs.tolerance for entry in entries)
    return [
        ToleranceCount(tolerance=tolerance, count=counts[tolerance])
        for tolerance in Tolerance
        if counts[tolerance] > 0
    ]


def average_by_tolerance(entries: Sequence[HistoryEntry]) -> list[ToleranceAverage]:
    """Return the rounded mean dose per tolerance, in first-seen order."""
    totals: dict[Tolerance, list[int]] = {}
    for entry in entries:
        totals.setdefault(entry.inputs.tolerance, []).append(entry.result.total_mg)
    return [
        ToleranceAverage(
            tolerance=tolerance, avg_mg=round_half_up(sum(doses) / len(doses))
        )
        for tolerance, doses in totals.items()
    ]


def timeline(entries: Sequence[HistoryEntry]) -> list[TimelinePoint]:
    """Return doses ordered oldest first."""
    ordered = sorted(entries, key=lambda entry: entry.timestamp)
    return [
        TimelinePoint(timestamp=entry.timestamp, total_mg=entry.result.total_mg)
        for entry in ordered
    ]
