"""FastAPI application factory."""

import base64
import binascii
import logging
import math
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from datetime import UTC, date, datetime
from uuid import UUID
from zoneinfo import ZoneInfoNotFoundError

from fastapi import FastAPI, HTTPException, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from calorie_canvas.api.models import (
    AnalyzeMealRequest,
    AnalyzeMealResponse,
    CreateMealEntryRequest,
    DailyTotalsResponse,
    MealEntryListResponse,
    MealEntryPayload,
)
from calorie_canvas.app_logging import configure_logging
from calorie_canvas.containers import AppContainer
from calorie_canvas.domain.nutrition import NutritionEstimate
from calorie_canvas.errors import (
    EntryNotFoundError,
    ImageLoadError,
    ModelInvocationError,
)

_IDENTIFY_RETRY_MESSAGE = (
    "Could not identify the food. Please try again with a clearer image "
    "or more detailed description."
)


def create_app(container: AppContainer) -> FastAPI:
    """Create a FastAPI app configured with dependencies."""
    configure_logging()
    logger = logging.getLogger(__name__)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        yield
        await app.state.container.close_resources()

    app = FastAPI(lifespan=lifespan)
    app.state.container = container

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        """Report invalid requests, including non-finite JSON numbers."""
        return JSONResponse(
            status_code=422,
            content={"detail": jsonable_encoder(_json_safe(exc.errors()))},
        )

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    @app.post("/meals/analyze")
    async def analyze_meal(
        payload: AnalyzeMealRequest, request: Request
    ) -> AnalyzeMealResponse:
        """Identify a meal and estimate its nutrition."""
        state_container: AppContainer = request.app.state.container
        image_bytes = _decode_image(payload.image_base64)
        try:
            analysis = await state_container.meal_analysis_service.analyze(
                description=payload.description, image_bytes=image_bytes
            )
        except (ModelInvocationError, ImageLoadError) as exc:
            logger.warning("Meal identification failed: %s", exc)
            raise HTTPException(
                status_code=status.HTTP_502_BAD_GATEWAY,
                detail=_IDENTIFY_RETRY_MESSAGE,
            ) from exc
        except ValueError as exc:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)
            ) from exc
        return AnalyzeMealResponse.from_analysis(analysis)

    @app.post("/meals", status_code=status.HTTP_201_CREATED)
    async def create_meal_entry(
        payload: CreateMealEntryRequest, request: Request
    ) -> MealEntryPayload:
        """Log a meal entry."""
        state_container: AppContainer = request.app.state.container
        entry = state_container.meal_entry_service.log_meal(
            user_id=payload.user_id,
            description=payload.description,
            nutrition=NutritionEstimate.from_amounts(
                calories=payload.calories,
                protein=payload.protein,
                carbs=payload.carbs,
                fat=payload.fat,
            ),
            meal_type=payload.meal_type,
            image_url=payload.image_url,
            notes=payload.notes,
        )
        return MealEntryPayload.from_entry(entry)

    @app.get("/meals")
    async def list_meal_entries(
        user_id: UUID, request: Request
    ) -> MealEntryListResponse:
        """Return a user's meal entries, newest first."""
        state_container: AppContainer = request.app.state.container
        entries = state_container.meal_entry_service.list_entries(user_id)
        return MealEntryListResponse(
            entries=[MealEntryPayload.from_entry(entry) for entry in entries]
        )

    @app.get("/meals/totals")
    async def daily_totals(
        user_id: UUID,
        request: Request,
        day: date | None = None,
        timezone: str = "UTC",
    ) -> DailyTotalsResponse:
        """Return summed nutrition for a local day."""
        state_container: AppContainer = request.app.state.container
        resolved_day = day or datetime.now(tz=UTC).date()
        try:
            totals = state_container.meal_entry_service.daily_totals(
                user_id, resolved_day, timezone
            )
        except (ZoneInfoNotFoundError, ValueError) as exc:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=f"Unknown timezone: {timezone}",
            ) from exc
        return DailyTotalsResponse.from_totals(totals)

    @app.delete("/meals/{entry_id}")
    async def delete_meal_entry(entry_id: UUID, request: Request) -> MealEntryPayload:
        """Delete an entry and return it for undo."""
        state_container: AppContainer = request.app.state.container
        try:
            entry = state_container.meal_entry_service.delete_entry(entry_id)
        except EntryNotFoundError as exc:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND) from exc
        return MealEntryPayload.from_entry(entry)

    @app.post("/meals/restore", status_code=status.HTTP_201_CREATED)
    async def restore_meal_entry(
        payload: MealEntryPayload, request: Request
    ) -> MealEntryPayload:
        """Re-insert a deleted entry."""
        state_container: AppContainer = request.app.state.container
        entry = state_container.meal_entry_service.restore_entry(payload.to_entry())
        return MealEntryPayload.from_entry(entry)

    return app


def _decode_image(image_base64: str | None) -> bytes | None:
    """Decode an optional base64 image, accepting data URLs."""
    if not image_base64:
        return None
    data = image_base64
    if data.startswith("data:"):
        data = data.split(",", 1)[-1]
    try:
        return base64.b64decode(data, validate=True)
    except (binascii.Error, ValueError) as exc:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="image_base64 is not valid base64",
        ) from exc


def _json_safe(value: object) -> object:
    """Replace non-finite floats, which strict JSON cannot encode."""
    if isinstance(value, float) and not math.isfinite(value):
        return str(value)
    if isinstance(value, dict):
        return {key: _json_safe(item) for key, item in value.items()}
    if isinstance(value, list | tuple):
        return [_json_safe(item) for item in value]
    return value
