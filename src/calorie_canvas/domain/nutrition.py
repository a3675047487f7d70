"""Nutrition domain models."""

import math
from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves away from zero for positives."""
    return math.floor(value + 0.5)


@dataclass(frozen=True)
class NutritionEstimate:
    """Whole-number calories and macros (grams) for one meal."""

    calories: int
    protein: int
    carbs: int
    fat: int

    def __post_init__(self) -> None:
        for name in ("calories", "protein", "carbs", "fat"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int):
                raise TypeError(f"{name} must be an integer, got {value!r}")
            if value < 0:
                raise ValueError(f"{name} must be non-negative, got {value}")

    @classmethod
    def from_amounts(
        cls, calories: float, protein: float, carbs: float, fat: float
    ) -> "NutritionEstimate":
        """Build an estimate from raw amounts, rounding and clamping at zero."""
        return cls(
            calories=max(0, round_half_up(calories)),
            protein=max(0, round_half_up(protein)),
            carbs=max(0, round_half_up(carbs)),
            fat=max(0, round_half_up(fat)),
        )

    def as_dict(self) -> dict[str, int]:
        return {
            "calories": self.calories,
            "protein": self.protein,
            "carbs": self.carbs,
            "fat": self.fat,
        }


DEFAULT_ESTIMATE = NutritionEstimate(calories=200, protein=5, carbs=20, fat=10)


class NutritionSource(str, Enum):
    """Cascade stage that produced an estimate."""

    RECIPE = "recipe"
    PRODUCT = "product"
    GENERATIVE = "generative"
    DEFAULT = "default"


@dataclass(frozen=True)
class ResolutionQuery:
    """Raw food description and the cleaned query derived from it."""

    raw_description: str
    cleaned_query: str

    @classmethod
    def from_description(
        cls, description: str, clean: Callable[[str], str]
    ) -> "ResolutionQuery":
        return cls(raw_description=description, cleaned_query=clean(description))


@dataclass(frozen=True)
class NutritionResolution:
    """Estimate together with the stage and query that produced it."""

    estimate: NutritionEstimate
    source: NutritionSource
    query: ResolutionQuery
