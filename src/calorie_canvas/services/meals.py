"""Meal entry logging service."""

import logging
from dataclasses import dataclass, field
from datetime import UTC, date, datetime, time, timedelta
from typing import Protocol
from uuid import UUID
from zoneinfo import ZoneInfo

from calorie_canvas.domain.meals import DailyTotals, MealEntry, MealEntryDraft, MealType
from calorie_canvas.domain.nutrition import NutritionEstimate
from calorie_canvas.errors import EntryNotFoundError
from calorie_canvas.services.text_normalizer import TextNormalizer

_logger = logging.getLogger(__name__)


class MealEntryRepository(Protocol):
    """Persistence interface for meal entries."""

    def create_entry(self, draft: MealEntryDraft) -> MealEntry:
        """Insert an entry and return it with its assigned id."""

    def restore_entry(self, entry: MealEntry) -> MealEntry:
        """Re-insert a previously deleted entry keeping its id."""

    def get_entry(self, entry_id: UUID) -> MealEntry | None:
        """Return an entry by id."""

    def list_entries(
        self,
        user_id: UUID,
        start: datetime | None = None,
        end: datetime | None = None,
    ) -> list[MealEntry]:
        """Return a user's entries, newest first, optionally within a range."""

    def delete_entry(self, entry_id: UUID) -> None:
        """Delete an entry by id."""


@dataclass
class MealEntryService:
    """Service that assembles, stores and aggregates meal entries."""

    repository: MealEntryRepository
    normalizer: TextNormalizer = field(default_factory=TextNormalizer)

    def log_meal(  # noqa: PLR0913
        self,
        *,
        user_id: UUID,
        description: str,
        nutrition: NutritionEstimate,
        meal_type: MealType | None = None,
        image_url: str | None = None,
        notes: str | None = None,
    ) -> MealEntry:
        """Store a meal entry built from an analysed or edited meal."""
        draft = MealEntryDraft(
            user_id=user_id,
            description=self.normalizer.clean_display_text(description),
            calories=nutrition.calories,
            protein=nutrition.protein,
            carbs=nutrition.carbs,
            fat=nutrition.fat,
            meal_type=meal_type,
            image_url=image_url,
            notes=notes,
            created_at=datetime.now(tz=UTC),
        )
        entry = self.repository.create_entry(draft)
        _logger.info("Meal entry saved: id=%s user=%s", entry.id, user_id)
        return entry

    def list_entries(self, user_id: UUID) -> list[MealEntry]:
        """Return all entries for a user, newest first."""
        return self.repository.list_entries(user_id)

    def delete_entry(self, entry_id: UUID) -> MealEntry:
        """Delete an entry and return it so callers can offer undo."""
        entry = self.repository.get_entry(entry_id)
        if entry is None:
            raise EntryNotFoundError(f"Meal entry {entry_id} not found")
        self.repository.delete_entry(entry_id)
        _logger.info("Meal entry deleted: id=%s", entry_id)
        return entry

    def restore_entry(self, entry: MealEntry) -> MealEntry:
        """Undo a deletion by re-inserting the entry."""
        restored = self.repository.restore_entry(entry)
        _logger.info("Meal entry restored: id=%s", restored.id)
        return restored

    def daily_totals(
        self, user_id: UUID, day: date, timezone_name: str = "UTC"
    ) -> DailyTotals:
        """Sum a user's entries logged on a local calendar day."""
        tz = ZoneInfo(timezone_name)
        start = datetime.combine(day, time.min, tzinfo=tz)
        end = start + timedelta(days=1)
        entries = self.repository.list_entries(
            user_id, start.astimezone(UTC), end.astimezone(UTC)
        )
        return DailyTotals(
            day=day,
            calories=sum(entry.calories for entry in entries),
            protein=sum(entry.protein for entry in entries),
            carbs=sum(entry.carbs for entry in entries),
            fat=sum(entry.fat for entry in entries),
            entry_count=len(entries),
        )
