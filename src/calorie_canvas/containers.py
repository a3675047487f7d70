"""Dependency container wiring for the application."""

import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from supabase import create_client

from calorie_canvas.adapters.openai_generative_client import OpenAIGenerativeClient
from calorie_canvas.adapters.spoonacular_client import HttpxSpoonacularClient
from calorie_canvas.adapters.supabase_meal_entry_repository import (
    SupabaseMealEntryRepository,
)
from calorie_canvas.config import Settings
from calorie_canvas.services.analysis import MealAnalysisService
from calorie_canvas.services.identification import FoodIdentifier
from calorie_canvas.services.meals import MealEntryService
from calorie_canvas.services.nutrition import NutritionResolver
from calorie_canvas.services.text_normalizer import TextNormalizer

_logger = logging.getLogger(__name__)


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    food_identifier: FoodIdentifier
    nutrition_resolver: NutritionResolver
    meal_analysis_service: MealAnalysisService
    meal_entry_service: MealEntryService
    close_resources: Callable[[], Awaitable[None]]


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    supabase_client = create_client(
        resolved_settings.supabase_url, resolved_settings.supabase_service_key
    )
    normalizer = TextNormalizer()
    generative_client = OpenAIGenerativeClient.create(
        api_key=resolved_settings.openai_api_key,
        model=resolved_settings.openai_model,
        reasoning_effort=resolved_settings.openai_reasoning_effort,
        store=resolved_settings.openai_store,
    )
    spoonacular_client: HttpxSpoonacularClient | None = None
    if resolved_settings.nutrition_databases_enabled:
        spoonacular_client = HttpxSpoonacularClient.create(
            api_key=str(resolved_settings.spoonacular_api_key),
            base_url=resolved_settings.spoonacular_base_url,
        )
    else:
        _logger.warning(
            "Spoonacular API key not set; nutrition falls back to model estimates"
        )
    food_identifier = FoodIdentifier(client=generative_client)
    nutrition_resolver = NutritionResolver(
        generative_client=generative_client,
        recipe_client=spoonacular_client,
        product_client=spoonacular_client,
        normalizer=normalizer,
    )
    meal_analysis_service = MealAnalysisService(
        identifier=food_identifier,
        resolver=nutrition_resolver,
        normalizer=normalizer,
    )
    meal_entry_service = MealEntryService(
        repository=SupabaseMealEntryRepository(supabase_client),
        normalizer=normalizer,
    )

    async def close_resources() -> None:
        await generative_client.close()
        if spoonacular_client is not None:
            await spoonacular_client.close()

    return AppContainer(
        settings=resolved_settings,
        food_identifier=food_identifier,
        nutrition_resolver=nutrition_resolver,
        meal_analysis_service=meal_analysis_service,
        meal_entry_service=meal_entry_service,
        close_resources=close_resources,
    )
