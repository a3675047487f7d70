"""Supabase repository for meal entries."""

from dataclasses import dataclass
from datetime import datetime
from uuid import UUID

from supabase import Client

from calorie_canvas.domain.meals import MealEntry, MealEntryDraft, MealType
from calorie_canvas.domain.nutrition import round_half_up
from calorie_canvas.services.meals import MealEntryRepository

_TABLE = "nutrition_entries"
_COLUMNS = (
    "id, user_id, description, calories, protein, carbs, fat, meal_type, "
    "image_url, notes, created_at"
)


@dataclass
class SupabaseMealEntryRepository(MealEntryRepository):
    """Supabase implementation for meal entries."""

    client: Client

    def create_entry(self, draft: MealEntryDraft) -> MealEntry:
        """Insert an entry row and return it."""
        response = self.client.table(_TABLE).insert(_draft_payload(draft)).execute()
        if not response.data:
            raise RuntimeError("Failed to create meal entry")
        return _parse_row(response.data[0])

    def restore_entry(self, entry: MealEntry) -> MealEntry:
        """Re-insert a deleted entry with its original id."""
        payload = _draft_payload(entry)
        payload["id"] = str(entry.id)
        response = self.client.table(_TABLE).insert(payload).execute()
        if not response.data:
            raise RuntimeError("Failed to restore meal entry")
        return _parse_row(response.data[0])

    def get_entry(self, entry_id: UUID) -> MealEntry | None:
        """Return an entry by id."""
        response = (
            self.client.table(_TABLE)
            .select(_COLUMNS)
            .eq("id", str(entry_id))
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return _parse_row(response.data[0])

    def list_entries(
        self,
        user_id: UUID,
        start: datetime | None = None,
        end: datetime | None = None,
    ) -> list[MealEntry]:
        """Return a user's entries, newest first."""
        query = self.client.table(_TABLE).select(_COLUMNS).eq("user_id", str(user_id))
        if start is not None:
            query = query.gte("created_at", start.isoformat())
        if end is not None:
            query = query.lt("created_at", end.isoformat())
        response = query.order("created_at", desc=True).execute()
        return [_parse_row(row) for row in response.data or []]

    def delete_entry(self, entry_id: UUID) -> None:
        """Delete an entry row."""
        self.client.table(_TABLE).delete().eq("id", str(entry_id)).execute()


def _draft_payload(entry: MealEntryDraft | MealEntry) -> dict[str, object]:
    return {
        "user_id": str(entry.user_id),
        "description": entry.description,
        "calories": entry.calories,
        "protein": entry.protein,
        "carbs": entry.carbs,
        "fat": entry.fat,
        "meal_type": entry.meal_type.value if entry.meal_type else None,
        "image_url": entry.image_url,
        "notes": entry.notes,
        "created_at": entry.created_at.isoformat(),
    }


def _parse_row(row: dict[str, object]) -> MealEntry:
    meal_type = row.get("meal_type")
    return MealEntry(
        id=UUID(str(row["id"])),
        user_id=UUID(str(row["user_id"])),
        description=str(row.get("description") or ""),
        calories=round_half_up(float(row.get("calories") or 0)),
        protein=round_half_up(float(row.get("protein") or 0)),
        carbs=round_half_up(float(row.get("carbs") or 0)),
        fat=round_half_up(float(row.get("fat") or 0)),
        meal_type=MealType(meal_type) if meal_type else None,
        image_url=row.get("image_url"),
        notes=row.get("notes"),
        created_at=datetime.fromisoformat(str(row["created_at"])),
    )
