"""Tests for application settings."""

import pytest

from calorie_canvas.config import Settings


@pytest.mark.parametrize(
    ("api_key", "expected"),
    [("spoonacular-key", True), (None, False), ("   ", False)],
)
def test_nutrition_databases_enabled(api_key: str | None, expected: bool) -> None:
    settings = Settings(
        supabase_url="https://example.supabase.co",
        supabase_service_key="header.payload.signature",
        openai_api_key="openai-key",
        spoonacular_api_key=api_key,
    )

    assert settings.nutrition_databases_enabled is expected


def test_settings_defaults() -> None:
    settings = Settings(
        supabase_url="https://example.supabase.co",
        supabase_service_key="header.payload.signature",
        openai_api_key="openai-key",
    )

    assert settings.openai_store is False
    assert settings.spoonacular_base_url == "https://api.spoonacular.com"
