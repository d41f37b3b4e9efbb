"""Domain models for the restaurant catalog."""

from dataclasses import dataclass
from datetime import datetime
from uuid import UUID

MIN_DISH_RATING = 1
MAX_DISH_RATING = 5


@dataclass(frozen=True)
class Dish:
    """A dish eaten at a restaurant, optionally rated from one to five stars."""

    name: str
    rating: int | None = None


@dataclass(frozen=True)
class Restaurant:
    """Represents a restaurant stored in the catalog."""

    id: UUID
    link: str
    name: str | None
    suburb: str
    cuisine: str | None
    is_favorite: bool
    meal_types: tuple[str, ...] = ()
    dishes: tuple[Dish, ...] = ()
    created_at: datetime | None = None


@dataclass(frozen=True)
class RestaurantFilters:
    favorites_only: bool = False
    cuisine: str | None = None
    suburb: str | None = None
    meal_type: str | None = None
    search: str | None = None
