"""Domain models for caffeine dose calculations."""

from dataclasses import dataclass
from enum import StrEnum

LB_TO_KG = 0.453592


class WeightUnit(StrEnum):
    """Unit the body weight was entered in."""

    KG = "kg"
    LB = "lb"


class Tolerance(StrEnum):
    """Coarse caffeine-sensitivity category."""

    LOW = "Low"
    MODERATE = "Moderate"
    HIGH = "High"


class SafetyLevel(StrEnum):
    """Health-guideline band a dose falls into."""

    SAFE = "safe"
    CAUTION = "caution"
    DANGEROUS = "dangerous"


@dataclass(frozen=True)
class CaffeineInput:
    """Validated calculator inputs."""

    weight: float
    weight_unit: WeightUnit
    hours_awake: float
    hours_to_survive: float
    tolerance: Tolerance

    @property
    def weight_kg(self) -> float:
        """Body weight normalized to kilograms."""
        if self.weight_unit == WeightUnit.LB:
            return self.weight * LB_TO_KG
        return self.weight


@dataclass(frozen=True)
class CaffeineSource:
    """Beverage with a known caffeine content per serving."""

    name: str
    serving_size: str
    caffeine_per_serving: int
    servings_needed: int = 0
    serving_size_metric: str | None = None

    @property
    def total_mg(self) -> int:
        """Caffeine delivered by the rounded-up number of servings."""
        return self.servings_needed * self.caffeine_per_serving

    def display_serving_size(self, metric: bool) -> str:
        """Return the metric serving size when requested and available."""
        if metric and self.serving_size_metric:
            return self.serving_size_metric
        return self.serving_size


@dataclass(frozen=True)
class CaffeineResult:
    """Recommended dose with its breakdown and serving equivalents."""

    total_mg: int
    breakdown: str
    sources: list[CaffeineSource]
    safety_warning: str | None = None
    base_mg: int = 0
    weight_mg: int = 0
    sleep_boost_mg: int = 0


@dataclass(frozen=True)
class SafetyGauge:
    """Share of the daily guideline used by a dose."""

    percentage: float
    label: str
