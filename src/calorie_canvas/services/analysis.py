"""Meal analysis: identify the food, then resolve its nutrition."""

import base64
import logging
from dataclasses import dataclass, field

from calorie_canvas.domain.meals import MealAnalysis
from calorie_canvas.services.identification import FoodIdentifier
from calorie_canvas.services.nutrition import NutritionResolver
from calorie_canvas.services.text_normalizer import TextNormalizer

_logger = logging.getLogger(__name__)


@dataclass
class MealAnalysisService:
    """Runs identification and nutrition resolution for one meal."""

    identifier: FoodIdentifier
    resolver: NutritionResolver
    normalizer: TextNormalizer = field(default_factory=TextNormalizer)

    async def analyze(
        self, *, description: str | None = None, image_bytes: bytes | None = None
    ) -> MealAnalysis:
        """Analyse a meal from an image and/or a text description.

        Identification errors propagate so the caller can ask the user to
        retry; nutrition resolution always yields an estimate.
        """
        text = (description or "").strip()
        if image_bytes:
            identification = await self.identifier.identify_from_image_bytes(
                image_bytes, text or None
            )
            image_base64 = base64.b64encode(image_bytes).decode("utf-8")
        elif text:
            identification = await self.identifier.identify_from_text(text)
            image_base64 = None
        else:
            raise ValueError("Provide an image and/or description of the meal")

        resolution = await self.resolver.resolve(
            identification.description, image_base64
        )
        _logger.info(
            "Meal analysed: source=%s query=%r",
            resolution.source.value,
            resolution.query.cleaned_query,
        )
        return MealAnalysis(
            identification=identification,
            nutrition=resolution,
            display_description=self.normalizer.clean_display_text(
                identification.description
            ),
        )
