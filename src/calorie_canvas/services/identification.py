"""Food identification from meal photos and text descriptions."""

import asyncio
import logging
from dataclasses import dataclass
from pathlib import Path

from calorie_canvas.domain.identification import FoodIdentification
from calorie_canvas.errors import ImageLoadError, ModelInvocationError
from calorie_canvas.services.generative import GenerativeClient, InlineImage

_logger = logging.getLogger(__name__)

_FOOD_ONLY_INSTRUCTION = "Provide a clear, concise description of just the food items."


@dataclass
class FoodIdentifier:
    """Service that turns images or text into a food description."""

    client: GenerativeClient

    async def identify_from_image(
        self, image_uri: str, description: str | None = None
    ) -> FoodIdentification:
        """Identify food in a local image, optionally seeded with user text."""
        image_bytes = await load_image_bytes(image_uri)
        return await self.identify_from_image_bytes(image_bytes, description)

    async def identify_from_image_bytes(
        self, image_bytes: bytes, description: str | None = None
    ) -> FoodIdentification:
        """Identify food in already-loaded image bytes."""
        if description and description.strip():
            prompt = (
                "Analyze this food/beverage image and description: "
                f'"{description.strip()}". {_FOOD_ONLY_INSTRUCTION}'
            )
        else:
            prompt = f"Analyze this food/beverage image. {_FOOD_ONLY_INSTRUCTION}"
        return await self._identify(prompt, InlineImage.from_bytes(image_bytes))

    async def identify_from_text(self, description: str) -> FoodIdentification:
        """Identify food from a free-text description."""
        if not description.strip():
            raise ValueError("A food description is required")
        prompt = (
            f'Analyze this food/beverage description: "{description.strip()}". '
            f"{_FOOD_ONLY_INSTRUCTION}"
        )
        return await self._identify(prompt, None)

    async def _identify(
        self, prompt: str, image: InlineImage | None
    ) -> FoodIdentification:
        try:
            text = await self.client.generate(prompt=prompt, image=image)
        except Exception as exc:
            _logger.warning("Food identification call failed: %s", exc)
            raise ModelInvocationError("Failed to identify food") from exc
        cleaned = (text or "").strip()
        if not cleaned:
            raise ModelInvocationError("Model returned no usable description")
        _logger.info("Food identified: %s", cleaned)
        return FoodIdentification(description=cleaned, ingredients=[])


async def load_image_bytes(image_uri: str) -> bytes:
    """Read a local image given a filesystem path or file:// URI."""
    path = Path(image_uri.removeprefix("file://"))
    try:
        data = await asyncio.to_thread(path.read_bytes)
    except OSError as exc:
        raise ImageLoadError(f"Failed to load image data from {image_uri}") from exc
    if not data:
        raise ImageLoadError(f"Image file is empty: {image_uri}")
    return data
