"""Caffeine dose calculator."""

import math
from dataclasses import replace

from caffeine_calculator.domain.caffeine import (
    CaffeineInput,
    CaffeineResult,
    CaffeineSource,
    SafetyGauge,
    SafetyLevel,
    Tolerance,
)

BASE_MG_PER_HOUR = 50
WEIGHT_MG_PER_KG_HOUR = 0.5
SLEEP_DEPRIVATION_MAX_FACTOR = 0.2
FDA_DAILY_LIMIT_MG = 400
DANGEROUS_LIMIT_MG = 1000
GAUGE_FULL = 100
GAUGE_HIGH = 75
GAUGE_MODERATE = 50

TOLERANCE_MODIFIERS = {
    Tolerance.LOW: 0.8,
    Tolerance.MODERATE: 1.0,
    Tolerance.HIGH: 1.2,
}

SOURCE_CATALOG: tuple[CaffeineSource, ...] = (
    CaffeineSource(
        name="Coffee",
        serving_size="8 oz brewed",
        serving_size_metric="240 ml brewed",
        caffeine_per_serving=95,
    ),
    CaffeineSource(
        name="Espresso",
        serving_size="1 oz shot",
        serving_size_metric="30 ml shot",
        caffeine_per_serving=63,
    ),
    CaffeineSource(
        name="Energy Drink",
        serving_size="16 oz (Monster)",
        serving_size_metric="500 ml (Monster)",
        caffeine_per_serving=160,
    ),
    CaffeineSource(
        name="Cola",
        serving_size="12 oz",
        serving_size_metric="355 ml",
        caffeine_per_serving=34,
    ),
    CaffeineSource(
        name="Black Tea",
        serving_size="8 oz",
        serving_size_metric="240 ml",
        caffeine_per_serving=47,
    ),
)

DANGEROUS_WARNING = "This is potentially dangerous. Consult a healthcare professional."
FDA_LIMIT_WARNING = (
    "This exceeds the FDA's recommended daily limit of 400 mg for most adults. "
    "Proceed with caution."
)


class SourceNotFoundError(LookupError):
    """Raised when a source name is not in the catalog."""


def calculate_caffeine(inputs: CaffeineInput) -> CaffeineResult:
    """Compute the recommended dose for validated inputs.

    The function trusts its inputs: ranges are enforced by the request layer,
    and out-of-range values produce meaningless but finite results.
    """
    tolerance_modifier = TOLERANCE_MODIFIERS[inputs.tolerance]
    base_caffeine = BASE_MG_PER_HOUR * inputs.hours_to_survive * tolerance_modifier
    weight_caffeine = (
        inputs.weight_kg * WEIGHT_MG_PER_KG_HOUR * inputs.hours_to_survive
    )
    sleep_factor = min(inputs.hours_awake / 24, 1) * SLEEP_DEPRIVATION_MAX_FACTOR
    sleep_boost = base_caffeine * sleep_factor

    total_mg = round_half_up(base_caffeine + weight_caffeine + sleep_boost)
    base_mg = round_half_up(base_caffeine)
    weight_mg = round_half_up(weight_caffeine)
    sleep_boost_mg = round_half_up(sleep_boost)

    return CaffeineResult(
        total_mg=total_mg,
        breakdown=(
            f"Base: {base_mg} mg + Weight: {weight_mg} mg + "
            f"Sleep Deprivation: {sleep_boost_mg} mg"
        ),
        sources=[
            replace(
                source,
                servings_needed=math.ceil(total_mg / source.caffeine_per_serving),
            )
            for source in SOURCE_CATALOG
        ],
        safety_warning=safety_warning(total_mg),
        base_mg=base_mg,
        weight_mg=weight_mg,
        sleep_boost_mg=sleep_boost_mg,
    )


def classify_safety(total_mg: int) -> SafetyLevel:
    """Return the guideline band for a dose."""
    if total_mg > DANGEROUS_LIMIT_MG:
        return SafetyLevel.DANGEROUS
    if total_mg > FDA_DAILY_LIMIT_MG:
        return SafetyLevel.CAUTION
    return SafetyLevel.SAFE


def safety_warning(total_mg: int) -> str | None:
    """Return advisory text for doses above the daily guideline."""
    level = classify_safety(total_mg)
    if level == SafetyLevel.DANGEROUS:
        return DANGEROUS_WARNING
    if level == SafetyLevel.CAUTION:
        return FDA_LIMIT_WARNING
    return None


def safety_gauge(total_mg: int) -> SafetyGauge:
    """Express a dose as a share of the FDA daily limit."""
    ratio = total_mg / FDA_DAILY_LIMIT_MG * 100
    if ratio > GAUGE_FULL:
        label = "Excessive"
    elif ratio > GAUGE_HIGH:
        label = "High"
    elif ratio > GAUGE_MODERATE:
        label = "Moderate"
    else:
        label = "Safe"
    return SafetyGauge(percentage=min(float(GAUGE_FULL), ratio), label=label)


def select_source(result: CaffeineResult, name: str) -> CaffeineSource:
    """Return the named source from a result, case-insensitively."""
    wanted = name.strip().lower()
    for source in result.sources:
        if source.name.lower() == wanted:
            return source
    raise SourceNotFoundError(name)


def format_report(
    result: CaffeineResult, source: CaffeineSource, metric: bool = True
) -> str:
    """Render the plain-text export of a calculation."""
    lines = [
        "Caffeine Survival Calculation",
        "===========================",
        f"Total Required: {result.total_mg} mg",
        result.breakdown,
        "",
        "Recommended Source:",
        (
            f"{source.servings_needed} servings of {source.name} "
            f"({source.display_serving_size(metric)})"
        ),
        f"Total: {source.total_mg} mg",
    ]
    excess = source.total_mg - result.total_mg
    if excess > 0:
        lines.append(f"Exceeds recommendation by {excess} mg")
    if result.safety_warning:
        lines.extend(["", f"WARNING: {result.safety_warning}"])
    return "\n".join(lines)


def round_half_up(value: float) -> int:
    """Round halves upward, matching the displayed breakdown values."""
    return math.floor(value + 0.5)
