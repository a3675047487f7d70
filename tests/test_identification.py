"""Tests for food identification."""

import asyncio
from pathlib import Path

import pytest

from calorie_canvas.errors import ImageLoadError, ModelInvocationError
from calorie_canvas.services.generative import InlineImage
from calorie_canvas.services.identification import FoodIdentifier, load_image_bytes
from tests.conftest import ScriptedGenerativeClient

JPEG_BYTES = b"\xff\xd8\xff\xe0" + b"fake-jpeg-body"


def test_identify_from_image_file(tmp_path: Path) -> None:
    image_path = tmp_path / "meal.jpg"
    image_path.write_bytes(JPEG_BYTES)
    client = ScriptedGenerativeClient(replies=["  Jollof rice with chicken.\n"])
    identifier = FoodIdentifier(client=client)

    result = asyncio.run(identifier.identify_from_image(f"file://{image_path}"))

    assert result.description == "Jollof rice with chicken."
    assert result.ingredients == []
    call = client.calls[0]
    assert "just the food items" in call.prompt
    assert call.image == InlineImage.from_bytes(JPEG_BYTES)
    assert call.image.mime_type == "image/jpeg"


def test_identify_from_image_includes_user_description(tmp_path: Path) -> None:
    image_path = tmp_path / "meal.png"
    image_path.write_bytes(b"\x89PNG\r\n\x1a\n" + b"body")
    client = ScriptedGenerativeClient(replies=["Chicken caesar salad"])
    identifier = FoodIdentifier(client=client)

    asyncio.run(identifier.identify_from_image(str(image_path), "my lunch salad"))

    assert '"my lunch salad"' in client.calls[0].prompt
    assert client.calls[0].image is not None
    assert client.calls[0].image.mime_type == "image/png"


def test_identify_from_missing_image_raises(tmp_path: Path) -> None:
    client = ScriptedGenerativeClient()
    identifier = FoodIdentifier(client=client)

    with pytest.raises(ImageLoadError):
        asyncio.run(identifier.identify_from_image(str(tmp_path / "missing.jpg")))
    assert client.calls == []


def test_load_image_bytes_rejects_empty_file(tmp_path: Path) -> None:
    image_path = tmp_path / "empty.jpg"
    image_path.write_bytes(b"")

    with pytest.raises(ImageLoadError):
        asyncio.run(load_image_bytes(str(image_path)))


def test_identify_from_text() -> None:
    client = ScriptedGenerativeClient(replies=["Two slices of pepperoni pizza"])
    identifier = FoodIdentifier(client=client)

    result = asyncio.run(identifier.identify_from_text("had 2 pizza slices"))

    assert result.description == "Two slices of pepperoni pizza"
    assert '"had 2 pizza slices"' in client.calls[0].prompt
    assert client.calls[0].image is None


def test_model_error_becomes_model_invocation_error() -> None:
    identifier = FoodIdentifier(
        client=ScriptedGenerativeClient(replies=[RuntimeError("boom")])
    )

    with pytest.raises(ModelInvocationError):
        asyncio.run(identifier.identify_from_text("pasta"))


def test_blank_model_output_is_rejected() -> None:
    identifier = FoodIdentifier(client=ScriptedGenerativeClient(replies=["   "]))

    with pytest.raises(ModelInvocationError):
        asyncio.run(identifier.identify_from_image_bytes(JPEG_BYTES))


def test_blank_text_description_is_rejected() -> None:
    client = ScriptedGenerativeClient()
    identifier = FoodIdentifier(client=client)

    with pytest.raises(ValueError):
        asyncio.run(identifier.identify_from_text("  "))
    assert client.calls == []


def test_inline_image_from_base64_defaults_to_jpeg() -> None:
    image = InlineImage.from_base64("not base64!")

    assert image.mime_type == "image/jpeg"
    assert image.to_data_url() == "data:image/jpeg;base64,not base64!"
