"""Domain models for meal logging."""

from dataclasses import dataclass
from datetime import date, datetime
from enum import Enum
from uuid import UUID

from calorie_canvas.domain.identification import FoodIdentification
from calorie_canvas.domain.nutrition import NutritionResolution


class MealType(str, Enum):
    """Meal slot an entry belongs to."""

    BREAKFAST = "breakfast"
    LUNCH = "lunch"
    DINNER = "dinner"
    SNACK = "snack"


@dataclass(frozen=True)
class MealEntryDraft:
    """Meal entry fields before the record store assigns an id."""

    user_id: UUID
    description: str
    calories: int
    protein: int
    carbs: int
    fat: int
    created_at: datetime
    meal_type: MealType | None = None
    image_url: str | None = None
    notes: str | None = None


@dataclass(frozen=True)
class MealEntry:
    """Persisted meal entry."""

    id: UUID
    user_id: UUID
    description: str
    calories: int
    protein: int
    carbs: int
    fat: int
    created_at: datetime
    meal_type: MealType | None = None
    image_url: str | None = None
    notes: str | None = None


@dataclass(frozen=True)
class DailyTotals:
    """Summed nutrition for one local day."""

    day: date
    calories: int
    protein: int
    carbs: int
    fat: int
    entry_count: int


@dataclass(frozen=True)
class MealAnalysis:
    """Identification and nutrition for a captured or described meal."""

    identification: FoodIdentification
    nutrition: NutritionResolution
    display_description: str
