"""Nutrition resolution through recipe, product and model fallbacks."""

import json
import logging
import math
import re
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from calorie_canvas.adapters.spoonacular_client import (
    ProductSearchClient,
    RecipeSearchClient,
)
from calorie_canvas.domain.nutrition import (
    DEFAULT_ESTIMATE,
    NutritionEstimate,
    NutritionResolution,
    NutritionSource,
    ResolutionQuery,
)
from calorie_canvas.services.generative import GenerativeClient, InlineImage
from calorie_canvas.services.text_normalizer import TextNormalizer

_logger = logging.getLogger(__name__)

_Stage = Callable[[str], Awaitable[NutritionEstimate | None]]

_RECIPE_NUTRIENT_NAMES = {
    "calories": "Calories",
    "protein": "Protein",
    "carbs": "Carbohydrates",
    "fat": "Fat",
}

_JSON_DECODER = json.JSONDecoder()
_LEADING_NUMBER = re.compile(r"-?\d+(?:\.\d+)?")

REIDENTIFY_PROMPT = (
    "List the main food items, ingredients, and preparation method in this image. "
    "Be direct and confident in your description, without using phrases like "
    '"the image shows" or "possibly". '
    "Format: [Main dish/ingredient] with [additional ingredients/toppings]."
)

ESTIMATE_PROMPT_TEMPLATE = """Please analyze this food/beverage item and provide its \
estimated nutrition facts in JSON format. Consider:
- Standard serving sizes
- Common preparation methods
- Similar items in nutrition databases
- Brand-specific nutrition if it's a branded item
- Regional or cultural variations if relevant

Food/beverage item: {query}

For accuracy, base your estimates on reliable sources like:
- USDA Food Database
- Restaurant nutrition facts
- Packaged food labels
- Standard recipe calculations

Respond ONLY with a JSON object in this exact format, with protein, carbs and \
fat in grams:
{{"calories": number, "protein": number, "carbs": number, "fat": number}}"""


class ModelNutritionFacts(BaseModel):
    """Nutrition JSON returned by the generative estimate prompt."""

    model_config = ConfigDict(extra="ignore", strict=True, allow_inf_nan=False)

    calories: float = Field(ge=0)
    protein: float = Field(ge=0)
    carbs: float = Field(ge=0)
    fat: float = Field(ge=0)


@dataclass
class NutritionResolver:
    """Resolve a food description to a best-effort nutrition estimate.

    Stages run strictly in order: recipe lookup, product lookup, generative
    estimate, static default. Each stage returns an estimate or ``None``;
    failures inside a stage are logged and treated as ``None`` so resolution
    always finishes with an estimate.
    """

    generative_client: GenerativeClient
    recipe_client: RecipeSearchClient | None = None
    product_client: ProductSearchClient | None = None
    normalizer: TextNormalizer = field(default_factory=TextNormalizer)
    default_estimate: NutritionEstimate = DEFAULT_ESTIMATE

    async def get_nutrition(
        self, description: str, image_base64: str | None = None
    ) -> NutritionEstimate:
        """Return the best available estimate for a description."""
        resolution = await self.resolve(description, image_base64)
        return resolution.estimate

    async def resolve(
        self, description: str, image_base64: str | None = None
    ) -> NutritionResolution:
        """Run the cascade and report which stage produced the estimate."""
        _logger.info("Starting nutrition resolution for: %s", description)
        if image_base64:
            description = await self._enrich_description(description, image_base64)

        query = ResolutionQuery.from_description(
            description, self.normalizer.extract_food_terms
        )
        _logger.info("Cleaned nutrition query: %r", query.cleaned_query)

        stages: tuple[tuple[NutritionSource, _Stage], ...] = (
            (NutritionSource.RECIPE, self._lookup_recipe),
            (NutritionSource.PRODUCT, self._lookup_product),
            (NutritionSource.GENERATIVE, self._estimate_with_model),
        )
        for source, stage in stages:
            estimate = await stage(query.cleaned_query)
            if estimate is not None:
                _logger.info("Nutrition resolved from %s: %s", source.value, estimate)
                return NutritionResolution(
                    estimate=estimate, source=source, query=query
                )

        _logger.info("Using default nutrition values for %r", query.cleaned_query)
        return NutritionResolution(
            estimate=self.default_estimate,
            source=NutritionSource.DEFAULT,
            query=query,
        )

    async def _enrich_description(self, description: str, image_base64: str) -> str:
        """Append a direct, hedge-free model description of the image."""
        try:
            text = await self.generative_client.generate(
                prompt=REIDENTIFY_PROMPT,
                image=InlineImage.from_base64(image_base64),
            )
        except Exception as exc:
            _logger.warning("Re-identification failed, keeping description: %s", exc)
            return description
        enriched = (text or "").strip()
        if not enriched:
            return description
        _logger.info("Enhanced description from image: %s", enriched)
        return f"{description} - {enriched}"

    async def _lookup_recipe(self, query: str) -> NutritionEstimate | None:
        if self.recipe_client is None or not query:
            return None
        try:
            payload = await self.recipe_client.search_recipes(query, number=1)
            results = payload.get("results") or []
            _logger.info("Recipes found for %r: %s", query, len(results))
            return _recipe_estimate(results[0]) if results else None
        except Exception as exc:
            _log_lookup_failure("recipe", query, exc)
            return None

    async def _lookup_product(self, query: str) -> NutritionEstimate | None:
        client = self.product_client
        if client is None or not query:
            return None
        search_query = query
        try:
            estimate = await _search_product(client, search_query)
            first_item = query.split(" with ", 1)[0].strip()
            if estimate is None and " with " in query and first_item:
                _logger.info("Trying individual ingredient search: %s", first_item)
                search_query = first_item
                estimate = await _search_product(client, search_query)
        except Exception as exc:
            _log_lookup_failure("product", search_query, exc)
            return None
        return estimate

    async def _estimate_with_model(self, query: str) -> NutritionEstimate | None:
        if not query:
            return None
        try:
            text = await self.generative_client.generate(
                prompt=ESTIMATE_PROMPT_TEMPLATE.format(query=query)
            )
        except Exception as exc:
            _logger.warning("Generative nutrition estimate failed: %s", exc)
            return None
        return parse_model_estimate(text or "")


async def _search_product(
    client: ProductSearchClient, query: str
) -> NutritionEstimate | None:
    payload = await client.search_products(query, number=1)
    products = payload.get("products") or []
    _logger.info("Products found for %r: %s", query, len(products))
    return _product_estimate(products[0]) if products else None


def parse_model_estimate(text: str) -> NutritionEstimate | None:
    """Parse the first JSON object in model output into an estimate."""
    try:
        payload = _first_json_object(text)
        if payload is None:
            _logger.warning("No JSON found in model nutrition response")
            return None
        facts = ModelNutritionFacts.model_validate(payload)
    except (RecursionError, ValueError, ValidationError) as exc:
        _logger.warning("Invalid nutrition data format from model: %s", exc)
        return None
    return NutritionEstimate.from_amounts(
        calories=facts.calories,
        protein=facts.protein,
        carbs=facts.carbs,
        fat=facts.fat,
    )


def _first_json_object(text: str) -> dict[str, object] | None:
    """Decode the first ``{...}`` in text that parses as a JSON object."""
    start = text.find("{")
    while start != -1:
        try:
            value, _ = _JSON_DECODER.raw_decode(text, start)
        except json.JSONDecodeError:
            value = None
        if isinstance(value, dict):
            return value
        start = text.find("{", start + 1)
    return None


def _recipe_estimate(recipe: dict[str, object]) -> NutritionEstimate | None:
    """Extract macros from a recipe's named nutrient list."""
    nutrition = recipe.get("nutrition")
    if not isinstance(nutrition, dict):
        return None
    nutrients = nutrition.get("nutrients")
    if not isinstance(nutrients, list) or not nutrients:
        return None
    amounts: dict[str, float] = {}
    for nutrient in nutrients:
        if isinstance(nutrient, dict) and isinstance(nutrient.get("name"), str):
            amounts.setdefault(nutrient["name"], _as_amount(nutrient.get("amount")))
    return NutritionEstimate.from_amounts(
        **{
            field_name: amounts.get(nutrient_name, 0.0)
            for field_name, nutrient_name in _RECIPE_NUTRIENT_NAMES.items()
        }
    )


def _product_estimate(product: dict[str, object]) -> NutritionEstimate | None:
    """Extract macros from a product's flat nutrition mapping."""
    nutrition = product.get("nutrition")
    if not isinstance(nutrition, dict) or not nutrition:
        return None
    return NutritionEstimate.from_amounts(
        calories=_as_amount(nutrition.get("calories")),
        protein=_as_amount(nutrition.get("protein")),
        carbs=_as_amount(nutrition.get("carbs")),
        fat=_as_amount(nutrition.get("fat")),
    )


def _as_amount(value: object) -> float:
    """Coerce an API amount such as ``12``, ``3.5`` or ``"12g"`` to a float."""
    amount = 0.0
    if isinstance(value, bool) or value is None:
        return amount
    if isinstance(value, int | float):
        amount = float(value)
    elif isinstance(value, str):
        match = _LEADING_NUMBER.search(value)
        if match:
            amount = float(match.group(0))
    return amount if math.isfinite(amount) else 0.0


def _log_lookup_failure(stage: str, query: str, exc: Exception) -> None:
    _logger.warning(
        "Nutrition %s lookup failed for %r (status=%s): %s",
        stage,
        query,
        _status_code_from_exception(exc),
        exc,
    )


def _status_code_from_exception(exc: Exception) -> str:
    """Extract HTTP status code from an exception, if available."""
    response = getattr(exc, "response", None)
    status_code = getattr(response, "status_code", None)
    if isinstance(status_code, int):
        return str(status_code)
    return "n/a"
