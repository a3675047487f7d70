"""Request and response models for the HTTP API."""

from datetime import date, datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from calorie_canvas.domain.meals import DailyTotals, MealAnalysis, MealEntry, MealType


class NutritionPayload(BaseModel):
    calories: int = Field(ge=0)
    protein: int = Field(ge=0)
    carbs: int = Field(ge=0)
    fat: int = Field(ge=0)


class AnalyzeMealRequest(BaseModel):
    """Meal to analyse; at least one field must be provided."""

    description: str | None = None
    image_base64: str | None = None


class AnalyzeMealResponse(BaseModel):
    description: str
    display_description: str
    ingredients: list[str]
    nutrition: NutritionPayload
    source: str
    cleaned_query: str

    @classmethod
    def from_analysis(cls, analysis: MealAnalysis) -> "AnalyzeMealResponse":
        resolution = analysis.nutrition
        return cls(
            description=analysis.identification.description,
            display_description=analysis.display_description,
            ingredients=list(analysis.identification.ingredients),
            nutrition=NutritionPayload(**resolution.estimate.as_dict()),
            source=resolution.source.value,
            cleaned_query=resolution.query.cleaned_query,
        )


class CreateMealEntryRequest(BaseModel):
    """Meal entry to log; nutrition values are rounded before storage."""

    model_config = ConfigDict(allow_inf_nan=False)

    user_id: UUID
    description: str = Field(min_length=1)
    calories: float = Field(ge=0)
    protein: float = Field(ge=0)
    carbs: float = Field(ge=0)
    fat: float = Field(ge=0)
    meal_type: MealType | None = None
    image_url: str | None = None
    notes: str | None = None


class MealEntryPayload(BaseModel):
    """Stored meal entry."""

    id: UUID
    user_id: UUID
    description: str
    calories: int
    protein: int
    carbs: int
    fat: int
    meal_type: MealType | None = None
    image_url: str | None = None
    notes: str | None = None
    created_at: datetime

    @classmethod
    def from_entry(cls, entry: MealEntry) -> "MealEntryPayload":
        return cls(
            id=entry.id,
            user_id=entry.user_id,
            description=entry.description,
            calories=entry.calories,
            protein=entry.protein,
            carbs=entry.carbs,
            fat=entry.fat,
            meal_type=entry.meal_type,
            image_url=entry.image_url,
            notes=entry.notes,
            created_at=entry.created_at,
        )

    def to_entry(self) -> MealEntry:
        return MealEntry(**self.model_dump())


class MealEntryListResponse(BaseModel):
    entries: list[MealEntryPayload]


class DailyTotalsResponse(BaseModel):
    day: date
    calories: int
    protein: int
    carbs: int
    fat: int
    entry_count: int

    @classmethod
    def from_totals(cls, totals: DailyTotals) -> "DailyTotalsResponse":
        return cls(
            day=totals.day,
            calories=totals.calories,
            protein=totals.protein,
            carbs=totals.carbs,
            fat=totals.fat,
            entry_count=totals.entry_count,
        )
