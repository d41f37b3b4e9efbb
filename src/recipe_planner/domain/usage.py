"""Domain models for recipe usage history."""

from dataclasses import dataclass
from datetime import datetime
from uuid import UUID


@dataclass(frozen=True)
class UsageRecord:
    """Immutable record that a recipe was made, optionally as part of a plan."""

    id: UUID
    recipe_id: UUID
    meal_plan_id: UUID | None
    made_at: datetime
