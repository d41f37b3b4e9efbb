"""Meal plan assembly, mutation and read services."""

import logging
from collections.abc import Iterable
from dataclasses import dataclass, replace
from datetime import date
from typing import Protocol
from uuid import UUID

from recipe_planner.domain.errors import NotFoundError, ValidationError
from recipe_planner.domain.meal_plans import (
    MAX_PLAN_DAYS,
    MIN_PLAN_DAYS,
    PLAN_STATUSES,
    STATUS_ACTIVE,
    MealPlan,
    MealPlanDetail,
    PlanEntry,
    PlanEntryDetail,
    compute_end_date,
    format_date_range,
)
from recipe_planner.domain.usage import UsageRecord
from recipe_planner.domain.wizard import WizardDraft
from recipe_planner.services.recipes import RecipeRepository
from recipe_planner.services.usage import UsageLedger

logger = logging.getLogger(__name__)


class MealPlanRepository(Protocol):
    """Persistence interface for meal plans."""

    def get(self, plan_id: UUID) -> MealPlan | None:
        """Return a plan by id, if present."""

    def create(  # noqa: PLR0913
        self,
        start_date: date,
        end_date: date,
        num_days: int,
        status: str,
        entries: tuple[PlanEntry, ...],
    ) -> MealPlan:
        """Create a plan and return it."""

    def patch(
        self,
        plan_id: UUID,
        entries: tuple[PlanEntry, ...] | None = None,
        status: str | None = None,
    ) -> MealPlan:
        """Replace the given fields of a plan and return it."""

    def delete(self, plan_id: UUID) -> None:
        """Delete a plan."""

    def list_all(self, status: str | None = None) -> list[MealPlan]:
        """Return plans ordered by start date, newest first."""

    def count(self) -> int:
        """Return the number of plans ever kept, whatever their status."""


@dataclass
class MealPlanAssembler:
    """Turns a completed wizard draft into a persisted plan."""

    repository: MealPlanRepository
    recipe_repository: RecipeRepository

    def create_plan(self, draft: WizardDraft) -> MealPlan:
        """Validate the draft and persist it as an active plan.

        Entries are created unassigned; no usage is recorded.
        """
        if draft.start_date is None:
            raise ValidationError("Start date is required")
        _validate_num_days(draft.num_days)
        entries = (
            *(PlanEntry(recipe_id=value, is_side=False) for value in draft.recipe_ids),
            *(PlanEntry(recipe_id=value, is_side=True) for value in draft.side_ids),
        )
        for entry in entries:
            if self.recipe_repository.get(entry.recipe_id) is None:
                raise NotFoundError(f"Recipe not found: {entry.recipe_id}")
        plan = self.repository.create(
            start_date=draft.start_date,
            end_date=compute_end_date(draft.start_date, draft.num_days),
            num_days=draft.num_days,
            status=STATUS_ACTIVE,
            entries=entries,
        )
        logger.info(
            "Meal plan created",
            extra={"plan_id": str(plan.id), "entries": len(entries)},
        )
        return plan


@dataclass
class MealPlanMutator:
    """Edits persisted plans and records made recipes."""

    repository: MealPlanRepository
    usage_ledger: UsageLedger

    def assign_day(
        self,
        plan_id: UUID,
        recipe_id: UUID,
        day: int | None,
        is_side: bool | None = None,
    ) -> MealPlan:
        """Set or clear the day of every entry for ``recipe_id``.

        ``is_side`` narrows the match when a recipe is both a main and a side.
        """
        plan = self._get_plan(plan_id)
        if day is not None:
            _validate_day(day, plan.num_days)
        matched = False
        entries: list[PlanEntry] = []
        for entry in plan.entries:
            if entry.recipe_id == recipe_id and is_side in (None, entry.is_side):
                entries.append(replace(entry, assigned_day=day))
                matched = True
            else:
                entries.append(entry)
        if not matched:
            raise NotFoundError(f"Recipe {recipe_id} is not part of plan {plan_id}")
        return self.repository.patch(plan_id, entries=tuple(entries))

    def mark_as_made(self, plan_id: UUID, recipe_id: UUID) -> UsageRecord:
        """Record that a recipe was made during a plan. Repeat calls add records."""
        plan = self._get_plan(plan_id)
        return self.usage_ledger.record_usage(recipe_id, plan.id)

    def set_status(self, plan_id: UUID, status: str) -> MealPlan:
        """Set any status; transitions between statuses are not restricted."""
        return self.patch_plan(plan_id, status=status)

    def update_entries(self, plan_id: UUID, entries: Iterable[PlanEntry]) -> MealPlan:
        """Replace the whole entry list of a plan."""
        return self.patch_plan(plan_id, entries=entries)

    def patch_plan(
        self,
        plan_id: UUID,
        entries: Iterable[PlanEntry] | None = None,
        status: str | None = None,
    ) -> MealPlan:
        """Validate every given field, then write them in a single patch."""
        if entries is None and status is None:
            raise ValidationError("Nothing to update")
        if status is not None and status not in PLAN_STATUSES:
            raise ValidationError(f"Unknown plan status: {status}")
        plan = self._get_plan(plan_id)
        resolved = None
        if entries is not None:
            resolved = tuple(entries)
            for entry in resolved:
                if entry.assigned_day is not None:
                    _validate_day(entry.assigned_day, plan.num_days)
        return self.repository.patch(plan_id, entries=resolved, status=status)

    def delete_plan(self, plan_id: UUID) -> None:
        """Delete a plan. Its usage records are kept."""
        self._get_plan(plan_id)
        self.repository.delete(plan_id)
        logger.info("Meal plan deleted", extra={"plan_id": str(plan_id)})

    def _get_plan(self, plan_id: UUID) -> MealPlan:
        plan = self.repository.get(plan_id)
        if plan is None:
            raise NotFoundError(f"Meal plan not found: {plan_id}")
        return plan


@dataclass
class MealPlanReader:
    """Read-side queries for plan lists and plan detail views."""

    repository: MealPlanRepository
    recipe_repository: RecipeRepository

    def list_plans(self, status: str | None = None) -> list[MealPlan]:
        if status is not None and status not in PLAN_STATUSES:
            raise ValidationError(f"Unknown plan status: {status}")
        return self.repository.list_all(status=status)

    def get_plan_detail(self, plan_id: UUID) -> MealPlanDetail:
        """Return a plan with its recipes resolved.

        Entries whose recipe was deleted resolve to ``recipe=None``.
        """
        plan = self.repository.get(plan_id)
        if plan is None:
            raise NotFoundError(f"Meal plan not found: {plan_id}")
        details = [
            PlanEntryDetail(
                entry=entry, recipe=self.recipe_repository.get(entry.recipe_id)
            )
            for entry in plan.entries
        ]
        by_day: dict[int | None, list[PlanEntryDetail]] = {}
        for detail in details:
            by_day.setdefault(detail.entry.assigned_day, []).append(detail)
        return MealPlanDetail(
            plan=plan,
            mains=[detail for detail in details if not detail.entry.is_side],
            sides=[detail for detail in details if detail.entry.is_side],
            by_day=by_day,
            date_range=format_date_range(plan.start_date, plan.num_days),
        )


def _validate_num_days(num_days: int) -> None:
    if not MIN_PLAN_DAYS <= num_days <= MAX_PLAN_DAYS:
        raise ValidationError(
            f"Number of days must be between {MIN_PLAN_DAYS} and {MAX_PLAN_DAYS}"
        )


def _validate_day(day: int, num_days: int) -> None:
    if isinstance(day, bool) or not 1 <= day <= num_days:
        raise ValidationError(f"Day must be between 1 and {num_days}, got {day}")
