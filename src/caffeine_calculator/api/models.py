"""Request models for the calculator API."""

from pydantic import BaseModel, Field

from caffeine_calculator.domain.caffeine import CaffeineInput, Tolerance, WeightUnit


class CalculationRequest(BaseModel):
    """Calculator form submission."""

    weight: float = Field(ge=10, le=500)
    weight_unit: WeightUnit = WeightUnit.KG
    hours_awake: float = Field(ge=0, le=72)
    hours_to_survive: float = Field(gt=0, le=72)
    tolerance: Tolerance

    def to_input(self) -> CaffeineInput:
        """Convert the request into calculator inputs."""
        return CaffeineInput(
            weight=self.weight,
            weight_unit=self.weight_unit,
            hours_awake=self.hours_awake,
            hours_to_survive=self.hours_to_survive,
            tolerance=self.tolerance,
        )
