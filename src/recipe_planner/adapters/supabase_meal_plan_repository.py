"""Supabase repository for meal plans."""

from dataclasses import dataclass
from datetime import date, datetime
from uuid import UUID

from supabase import Client

from recipe_planner.domain.meal_plans import MealPlan, PlanEntry
from recipe_planner.services.meal_plans import MealPlanRepository

_COLUMNS = "id, start_date, end_date, num_days, status, entries, created_at"


@dataclass
class SupabaseMealPlanRepository(MealPlanRepository):
    """Supabase implementation for meal plans.

    Entries are stored as a JSON array on the plan row, so every entry
    change rewrites the whole list.
    """

    client: Client

    def get(self, plan_id: UUID) -> MealPlan | None:
        """Return a plan by id, if present."""
        response = (
            self.client.table("meal_plans")
            .select(_COLUMNS)
            .eq("id", str(plan_id))
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return _parse_plan(response.data[0])

    def create(  # noqa: PLR0913
        self,
        start_date: date,
        end_date: date,
        num_days: int,
        status: str,
        entries: tuple[PlanEntry, ...],
    ) -> MealPlan:
        """Create a plan row and return it."""
        response = (
            self.client.table("meal_plans")
            .insert(
                {
                    "start_date": start_date.isoformat(),
                    "end_date": end_date.isoformat(),
                    "num_days": num_days,
                    "status": status,
                    "entries": _dump_entries(entries),
                }
            )
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to create meal plan")
        return _parse_plan(response.data[0])

    def patch(
        self,
        plan_id: UUID,
        entries: tuple[PlanEntry, ...] | None = None,
        status: str | None = None,
    ) -> MealPlan:
        """Update the given plan fields and return the row."""
        payload: dict[str, object] = {}
        if entries is not None:
            payload["entries"] = _dump_entries(entries)
        if status is not None:
            payload["status"] = status
        response = (
            self.client.table("meal_plans")
            .update(payload)
            .eq("id", str(plan_id))
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to update meal plan")
        return _parse_plan(response.data[0])

    def delete(self, plan_id: UUID) -> None:
        """Delete a plan row."""
        self.client.table("meal_plans").delete().eq("id", str(plan_id)).execute()

    def list_all(self, status: str | None = None) -> list[MealPlan]:
        """Return plans, newest start date first."""
        query = self.client.table("meal_plans").select(_COLUMNS)
        if status is not None:
            query = query.eq("status", status)
        response = query.order("start_date", desc=True).execute()
        return [_parse_plan(row) for row in response.data or []]

    def count(self) -> int:
        """Return the total number of plan rows."""
        response = (
            self.client.table("meal_plans").select("id", count="exact").execute()
        )
        if response.count is not None:
            return int(response.count)
        return len(response.data or [])


def _dump_entries(entries: tuple[PlanEntry, ...]) -> list[dict[str, object]]:
    return [
        {
            "recipe_id": str(entry.recipe_id),
            "assigned_day": entry.assigned_day,
            "is_side": entry.is_side,
        }
        for entry in entries
    ]


def _parse_plan(row: dict[str, object]) -> MealPlan:
    created_raw = row.get("created_at")
    created_at = (
        datetime.fromisoformat(created_raw)
        if isinstance(created_raw, str) and created_raw
        else None
    )
    entries = tuple(
        PlanEntry(
            recipe_id=UUID(str(item["recipe_id"])),
            is_side=bool(item.get("is_side", False)),
            assigned_day=item.get("assigned_day"),
        )
        for item in row.get("entries") or []
    )
    return MealPlan(
        id=UUID(str(row["id"])),
        start_date=date.fromisoformat(str(row["start_date"])),
        end_date=date.fromisoformat(str(row["end_date"])),
        num_days=int(row["num_days"]),
        status=str(row.get("status", "")),
        entries=entries,
        created_at=created_at,
    )
