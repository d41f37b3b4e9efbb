"""Supabase repository for recipe usage records."""

from dataclasses import dataclass
from datetime import datetime
from uuid import UUID

from supabase import Client

from recipe_planner.domain.usage import UsageRecord
from recipe_planner.services.usage import UsageRepository


@dataclass
class SupabaseUsageRepository(UsageRepository):
    """Supabase-backed usage ledger storage. Rows are only ever inserted."""

    client: Client

    def insert(
        self, recipe_id: UUID, meal_plan_id: UUID | None, made_at: datetime
    ) -> UsageRecord:
        """Insert a usage row and return it."""
        response = (
            self.client.table("recipe_usage")
            .insert(
                {
                    "recipe_id": str(recipe_id),
                    "meal_plan_id": str(meal_plan_id) if meal_plan_id else None,
                    "made_at": made_at.isoformat(),
                }
            )
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to record recipe usage")
        return _parse_record(response.data[0])

    def list_all(self) -> list[UsageRecord]:
        """Return every usage row."""
        response = (
            self.client.table("recipe_usage")
            .select("id, recipe_id, meal_plan_id, made_at")
            .execute()
        )
        return [_parse_record(row) for row in response.data or []]

    def list_by_recipe(self, recipe_id: UUID) -> list[UsageRecord]:
        """Return usage rows for one recipe."""
        response = (
            self.client.table("recipe_usage")
            .select("id, recipe_id, meal_plan_id, made_at")
            .eq("recipe_id", str(recipe_id))
            .execute()
        )
        return [_parse_record(row) for row in response.data or []]


def _parse_record(row: dict[str, object]) -> UsageRecord:
    meal_plan_id = row.get("meal_plan_id")
    return UsageRecord(
        id=UUID(str(row["id"])),
        recipe_id=UUID(str(row["recipe_id"])),
        meal_plan_id=UUID(str(meal_plan_id)) if meal_plan_id else None,
        made_at=datetime.fromisoformat(str(row["made_at"])),
    )
