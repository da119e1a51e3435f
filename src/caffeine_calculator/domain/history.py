"""Domain models for the calculation history."""

from dataclasses import dataclass
from datetime import datetime

from caffeine_calculator.domain.caffeine import CaffeineInput, Tolerance


@dataclass(frozen=True)
class HistoryResult:
    """Reduced result snapshot; the source catalog is recomputable."""

    total_mg: int
    breakdown: str
    safety_warning: str | None = None


@dataclass(frozen=True)
class HistoryEntry:
    """A persisted calculation."""

    id: int
    timestamp: datetime
    inputs: CaffeineInput
    result: HistoryResult


@dataclass(frozen=True)
class ToleranceCount:
    """Number of calculations made at a tolerance level."""

    tolerance: Tolerance
    count: int


@dataclass(frozen=True)
class ToleranceAverage:
    """Mean recommended dose at a tolerance level."""

    tolerance: Tolerance
    avg_mg: int


@dataclass(frozen=True)
class TimelinePoint:
    """Recommended dose at a point in time."""

    timestamp: datetime
    total_mg: int
