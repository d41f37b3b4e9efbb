"""Meal-plan wizard draft and its navigable-state codec."""

import re
import secrets
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, replace
from datetime import date
from uuid import UUID

from recipe_planner.domain.errors import ValidationError
from recipe_planner.domain.meal_plans import (
    clamp_num_days,
    compute_end_date,
    format_date_range,
)

DEFAULT_NUM_DAYS = 7

QUERY_NUM_DAYS = "numDays"
QUERY_START_DATE = "startDate"
QUERY_RECIPE_IDS = "recipeIds"
QUERY_SIDE_IDS = "sideIds"

_ISO_DATE = re.compile(r"^\d{4}-\d{2}-\d{2}$")


@dataclass(frozen=True)
class WizardDraft:
    """In-progress meal plan carried through the wizard steps.

    Every mutator returns a new draft. Selections keep the order in which
    they were made but behave as sets: an id appears at most once.
    """

    wizard_session_id: str
    num_days: int = DEFAULT_NUM_DAYS
    start_date: date | None = None
    recipe_ids: tuple[UUID, ...] = ()
    side_ids: tuple[UUID, ...] = ()

    def set_num_days(self, num_days: int) -> "WizardDraft":
        return replace(self, num_days=clamp_num_days(num_days))

    def set_start_date(self, start_date: date | None) -> "WizardDraft":
        return replace(self, start_date=start_date)

    def toggle_recipe(self, recipe_id: UUID) -> "WizardDraft":
        return replace(self, recipe_ids=_toggle(self.recipe_ids, recipe_id))

    def toggle_side(self, side_id: UUID) -> "WizardDraft":
        return replace(self, side_ids=_toggle(self.side_ids, side_id))

    @property
    def end_date(self) -> date | None:
        if self.start_date is None:
            return None
        return compute_end_date(self.start_date, self.num_days)

    @property
    def date_range_display(self) -> str:
        return format_date_range(self.start_date, self.num_days)

    def to_query(self) -> dict[str, str]:
        """Encode the draft into navigable query parameters."""
        query = {QUERY_NUM_DAYS: str(self.num_days)}
        if self.start_date is not None:
            query[QUERY_START_DATE] = self.start_date.isoformat()
        if self.recipe_ids:
            query[QUERY_RECIPE_IDS] = encode_ids(self.recipe_ids)
        if self.side_ids:
            query[QUERY_SIDE_IDS] = encode_ids(self.side_ids)
        return query

    @classmethod
    def from_query(
        cls,
        wizard_session_id: str,
        query: Mapping[str, str | None],
        today: date,
    ) -> "WizardDraft":
        """Rebuild a draft from query parameters, applying defaults."""
        return cls(
            wizard_session_id=wizard_session_id,
            num_days=_parse_num_days(query.get(QUERY_NUM_DAYS)),
            start_date=_parse_start_date(query.get(QUERY_START_DATE), today),
            recipe_ids=decode_ids(query.get(QUERY_RECIPE_IDS)),
            side_ids=decode_ids(query.get(QUERY_SIDE_IDS)),
        )


def new_draft(today: date, num_days: int = DEFAULT_NUM_DAYS) -> WizardDraft:
    """Start a fresh draft with a random session id."""
    return WizardDraft(
        wizard_session_id=secrets.token_hex(4),
        num_days=clamp_num_days(num_days),
        start_date=today,
    )


def encode_ids(ids: Iterable[UUID]) -> str:
    """Join ids into a comma-separated string."""
    return ",".join(str(value) for value in ids)


def decode_ids(raw: str | None) -> tuple[UUID, ...]:
    """Split a comma-separated id string, dropping empty segments and repeats."""
    if not raw:
        return ()
    ids: list[UUID] = []
    for chunk in raw.split(","):
        value = chunk.strip()
        if not value:
            continue
        try:
            parsed = UUID(value)
        except ValueError as exc:
            raise ValidationError(f"Invalid recipe id: {value}") from exc
        if parsed not in ids:
            ids.append(parsed)
    return tuple(ids)


def _toggle(ids: tuple[UUID, ...], value: UUID) -> tuple[UUID, ...]:
    if value in ids:
        return tuple(item for item in ids if item != value)
    return (*ids, value)


def _parse_num_days(raw: str | None) -> int:
    if raw is None or not raw.strip():
        return DEFAULT_NUM_DAYS
    try:
        return clamp_num_days(int(raw))
    except ValueError as exc:
        raise ValidationError(f"numDays must be an integer, got {raw!r}") from exc


def _parse_start_date(raw: str | None, today: date) -> date:
    if raw is None or not raw.strip():
        return today
    if not _ISO_DATE.match(raw):
        raise ValidationError(f"startDate must be YYYY-MM-DD, got {raw!r}")
    try:
        return date.fromisoformat(raw)
    except ValueError as exc:
        raise ValidationError(f"startDate is not a valid date: {raw!r}") from exc
