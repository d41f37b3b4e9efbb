"""Append-only ledger of recipes that have been made."""

import logging
from collections import Counter
from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Protocol
from uuid import UUID

from recipe_planner.domain.errors import NotFoundError
from recipe_planner.domain.usage import UsageRecord
from recipe_planner.services.recipes import RecipeRepository

logger = logging.getLogger(__name__)


class UsageRepository(Protocol):
    """Persistence interface for usage records."""

    def insert(
        self, recipe_id: UUID, meal_plan_id: UUID | None, made_at: datetime
    ) -> UsageRecord:
        """Insert a usage record and return it."""

    def list_all(self) -> list[UsageRecord]:
        """Return every usage record."""

    def list_by_recipe(self, recipe_id: UUID) -> list[UsageRecord]:
        """Return the usage records of one recipe."""


@dataclass
class UsageLedger:
    """Records "made" events and aggregates them into popularity counts."""

    repository: UsageRepository
    recipe_repository: RecipeRepository

    def record_usage(
        self, recipe_id: UUID, meal_plan_id: UUID | None = None
    ) -> UsageRecord:
        """Append a usage record stamped with the current time."""
        if self.recipe_repository.get(recipe_id) is None:
            raise NotFoundError(f"Recipe not found: {recipe_id}")
        record = self.repository.insert(
            recipe_id=recipe_id,
            meal_plan_id=meal_plan_id,
            made_at=datetime.now(tz=UTC),
        )
        logger.info(
            "Recipe marked as made",
            extra={"recipe_id": str(recipe_id), "meal_plan_id": str(meal_plan_id)},
        )
        return record

    def count_by_recipe(self, recipe_id: UUID) -> int:
        return len(self.repository.list_by_recipe(recipe_id))

    def count_all(self) -> dict[UUID, int]:
        """Return usage counts for every recipe made at least once."""
        return dict(Counter(record.recipe_id for record in self.repository.list_all()))
