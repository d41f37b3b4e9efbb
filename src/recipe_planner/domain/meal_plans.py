"""Domain models and calendar helpers for meal plans."""

from dataclasses import dataclass
from datetime import date, datetime, timedelta
from uuid import UUID

from recipe_planner.domain.recipes import Recipe

MIN_PLAN_DAYS = 1
MAX_PLAN_DAYS = 14

STATUS_DRAFT = "draft"
STATUS_ACTIVE = "active"
STATUS_COMPLETED = "completed"
PLAN_STATUSES = (STATUS_DRAFT, STATUS_ACTIVE, STATUS_COMPLETED)


@dataclass(frozen=True)
class PlanEntry:
    """A recipe scheduled in a plan, either as a main or as a side."""

    recipe_id: UUID
    is_side: bool
    assigned_day: int | None = None


@dataclass(frozen=True)
class MealPlan:
    """Represents a persisted meal plan."""

    id: UUID
    start_date: date
    end_date: date
    num_days: int
    status: str
    entries: tuple[PlanEntry, ...]
    created_at: datetime | None = None

    @property
    def mains(self) -> list[PlanEntry]:
        return [entry for entry in self.entries if not entry.is_side]

    @property
    def sides(self) -> list[PlanEntry]:
        return [entry for entry in self.entries if entry.is_side]


@dataclass(frozen=True)
class PlanEntryDetail:
    """Plan entry joined with its recipe; ``recipe`` is None for stale references."""

    entry: PlanEntry
    recipe: Recipe | None


@dataclass(frozen=True)
class MealPlanDetail:
    """Meal plan with resolved recipes and day groupings."""

    plan: MealPlan
    mains: list[PlanEntryDetail]
    sides: list[PlanEntryDetail]
    by_day: dict[int | None, list[PlanEntryDetail]]
    date_range: str


def clamp_num_days(value: int) -> int:
    """Clamp a day count into the supported plan length."""
    return max(MIN_PLAN_DAYS, min(MAX_PLAN_DAYS, value))


def compute_end_date(start_date: date, num_days: int) -> date:
    """Return the last calendar day of a plan starting on ``start_date``."""
    return start_date + timedelta(days=num_days - 1)


def format_date_range(start_date: date | None, num_days: int) -> str:
    """Render a plan's date range, e.g. ``Jun 1 – Jun 5, 2024``.

    When the range crosses a year boundary the start year is shown too:
    ``Dec 30, 2024 – Jan 1, 2025``.
    """
    if start_date is None:
        return ""
    end_date = compute_end_date(start_date, num_days)
    start_label = _short_date(start_date)
    end_label = f"{_short_date(end_date)}, {end_date.year}"
    if start_date.year != end_date.year:
        return f"{start_label}, {start_date.year} – {end_label}"
    return f"{start_label} – {end_label}"


def _short_date(value: date) -> str:
    return f"{_MONTHS[value.month - 1]} {value.day}"


_MONTHS = (
    "Jan",
    "Feb",
    "Mar",
    "Apr",
    "May",
    "Jun",
    "Jul",
    "Aug",
    "Sep",
    "Oct",
    "Nov",
    "Dec",
)
