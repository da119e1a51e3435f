"""Tests for history aggregations."""

from datetime import UTC, datetime, timedelta

from caffeine_calculator.domain.caffeine import Tolerance
from caffeine_calculator.domain.history import HistoryEntry, HistoryResult
from caffeine_calculator.services.stats import (
    average_by_tolerance,
    timeline,
    tolerance_distribution,
)
from tests.conftest import make_input

_START = datetime(2024, 3, 1, 8, 0, tzinfo=UTC)


def _entry(offset_hours: int, tolerance: Tolerance, total_mg: int) -> HistoryEntry:
    timestamp = _START + timedelta(hours=offset_hours)
    return HistoryEntry(
        id=int(timestamp.timestamp() * 1000),
        timestamp=timestamp,
        inputs=make_input(tolerance=tolerance),
        result=HistoryResult(total_mg=total_mg, breakdown=""),
    )


def _newest_first() -> list[HistoryEntry]:
    return [
        _entry(3, Tolerance.HIGH, 900),
        _entry(2, Tolerance.MODERATE, 500),
        _entry(1, Tolerance.HIGH, 601),
        _entry(0, Tolerance.MODERATE, 300),
    ]


def test_tolerance_distribution_skips_unused_levels() -> None:
    distribution = tolerance_distribution(_newest_first())

    assert [(item.tolerance, item.count) for item in distribution] == [
        (Tolerance.MODERATE, 2),
        (Tolerance.HIGH, 2),
    ]


def test_average_by_tolerance_in_first_seen_order() -> None:
    averages = average_by_tolerance(_newest_first())

    assert [(item.tolerance, item.avg_mg) for item in averages] == [
        (Tolerance.HIGH, 751),
        (Tolerance.MODERATE, 400),
    ]


def test_timeline_is_oldest_first() -> None:
    points = timeline(_newest_first())

    assert [point.total_mg for point in points] == [300, 601, 500, 900]
    assert points[0].timestamp == _START


def test_empty_history() -> None:
    assert tolerance_distribution([]) == []
    assert average_by_tolerance([]) == []
    assert timeline([]) == []
