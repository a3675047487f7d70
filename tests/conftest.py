"""Shared test fixtures."""

from dataclasses import dataclass, field
from datetime import datetime
from uuid import UUID, uuid4

import pytest

from calorie_canvas.adapters.spoonacular_client import (
    ProductSearchClient,
    RecipeSearchClient,
)
from calorie_canvas.config import Settings
from calorie_canvas.containers import AppContainer
from calorie_canvas.domain.meals import MealEntry, MealEntryDraft
from calorie_canvas.services.analysis import MealAnalysisService
from calorie_canvas.services.generative import GenerativeClient, InlineImage
from calorie_canvas.services.identification import FoodIdentifier
from calorie_canvas.services.meals import MealEntryRepository, MealEntryService
from calorie_canvas.services.nutrition import NutritionResolver

PIZZA_RECIPE_PAYLOAD: dict[str, object] = {
    "results": [
        {
            "id": 1,
            "title": "Pepperoni Pizza",
            "nutrition": {
                "nutrients": [
                    {"name": "Calories", "amount": 570, "unit": "kcal"},
                    {"name": "Protein", "amount": 24, "unit": "g"},
                    {"name": "Carbohydrates", "amount": 62, "unit": "g"},
                    {"name": "Fat", "amount": 22, "unit": "g"},
                ]
            },
        }
    ]
}


@dataclass
class GenerateCall:
    prompt: str
    image: InlineImage | None


@dataclass
class ScriptedGenerativeClient(GenerativeClient):
    """Fake generative client replaying scripted replies in order.

    A reply that is an exception instance is raised instead of returned.
    Once the script is exhausted the ``fallback`` reply is used.
    """

    replies: list[object] = field(default_factory=list)
    fallback: object = "Grilled chicken with rice"
    calls: list[GenerateCall] = field(default_factory=list)

    async def generate(self, *, prompt: str, image: InlineImage | None = None) -> str:
        self.calls.append(GenerateCall(prompt=prompt, image=image))
        reply = self.replies.pop(0) if self.replies else self.fallback
        if isinstance(reply, Exception):
            raise reply
        return str(reply)


@dataclass
class FakeRecipeClient(RecipeSearchClient):
    """Fake recipe database returning a fixed payload or raising."""

    payload: dict[str, object] = field(default_factory=lambda: {"results": []})
    error: Exception | None = None
    queries: list[str] = field(default_factory=list)

    async def search_recipes(self, query: str, number: int = 1) -> dict[str, object]:
        self.queries.append(query)
        if self.error is not None:
            raise self.error
        return self.payload


@dataclass
class FakeProductClient(ProductSearchClient):
    """Fake product database keyed by query."""

    payloads: dict[str, dict[str, object]] = field(default_factory=dict)
    error: Exception | None = None
    queries: list[str] = field(default_factory=list)

    async def search_products(self, query: str, number: int = 1) -> dict[str, object]:
        self.queries.append(query)
        if self.error is not None:
            raise self.error
        return self.payloads.get(query, {"products": []})


@dataclass
class InMemoryMealEntryRepository(MealEntryRepository):
    """In-memory meal entry repository for tests."""

    entries: dict[UUID, MealEntry] = field(default_factory=dict)

    def create_entry(self, draft: MealEntryDraft) -> MealEntry:
        entry = MealEntry(
            id=uuid4(),
            user_id=draft.user_id,
            description=draft.description,
            calories=draft.calories,
            protein=draft.protein,
            carbs=draft.carbs,
            fat=draft.fat,
            meal_type=draft.meal_type,
            image_url=draft.image_url,
            notes=draft.notes,
            created_at=draft.created_at,
        )
        self.entries[entry.id] = entry
        return entry

    def restore_entry(self, entry: MealEntry) -> MealEntry:
        self.entries[entry.id] = entry
        return entry

    def get_entry(self, entry_id: UUID) -> MealEntry | None:
        return self.entries.get(entry_id)

    def list_entries(
        self,
        user_id: UUID,
        start: datetime | None = None,
        end: datetime | None = None,
    ) -> list[MealEntry]:
        results = [
            entry
            for entry in self.entries.values()
            if entry.user_id == user_id
            and (start is None or entry.created_at >= start)
            and (end is None or entry.created_at < end)
        ]
        return sorted(results, key=lambda entry: entry.created_at, reverse=True)

    def delete_entry(self, entry_id: UUID) -> None:
        self.entries.pop(entry_id, None)


@pytest.fixture
def settings() -> Settings:
    return Settings(
        supabase_url="https://example.supabase.co",
        supabase_service_key="header.payload.signature",
        openai_api_key="openai-key",
        spoonacular_api_key="spoonacular-key",
    )


@pytest.fixture
def generative_client() -> ScriptedGenerativeClient:
    return ScriptedGenerativeClient()


@pytest.fixture
def recipe_client() -> FakeRecipeClient:
    return FakeRecipeClient()


@pytest.fixture
def product_client() -> FakeProductClient:
    return FakeProductClient()


@pytest.fixture
def meal_repository() -> InMemoryMealEntryRepository:
    return InMemoryMealEntryRepository()


@pytest.fixture
def container(
    settings: Settings,
    generative_client: ScriptedGenerativeClient,
    recipe_client: FakeRecipeClient,
    product_client: FakeProductClient,
    meal_repository: InMemoryMealEntryRepository,
) -> AppContainer:
    food_identifier = FoodIdentifier(client=generative_client)
    nutrition_resolver = NutritionResolver(
        generative_client=generative_client,
        recipe_client=recipe_client,
        product_client=product_client,
    )

    async def close_resources() -> None:
        return None

    return AppContainer(
        settings=settings,
        food_identifier=food_identifier,
        nutrition_resolver=nutrition_resolver,
        meal_analysis_service=MealAnalysisService(
            identifier=food_identifier,
            resolver=nutrition_resolver,
        ),
        meal_entry_service=MealEntryService(meal_repository),
        close_resources=close_resources,
    )
