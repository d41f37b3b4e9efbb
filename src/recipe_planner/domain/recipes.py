"""Domain models for the recipe catalog."""

from dataclasses import dataclass
from datetime import datetime
from uuid import UUID

MEAL_TYPES = (
    "breakfast",
    "lunch",
    "dinner",
    "dessert",
    "sides",
    "snacks",
    "drinks",
    "savoury",
    "sweet",
)

SIDES = "sides"


@dataclass(frozen=True)
class Recipe:
    """Represents a recipe stored in the catalog."""

    id: UUID
    link: str
    name: str | None
    cuisine: str | None
    is_favorite: bool
    meal_types: tuple[str, ...] = ()
    ingredients: tuple[str, ...] = ()
    notes: str | None = None
    description: str | None = None
    image_url: str | None = None
    created_at: datetime | None = None


@dataclass(frozen=True)
class RecipeFilters:
    """Filters accepted by catalog listings."""

    favorites_only: bool = False
    cuisine: str | None = None
    meal_type: str | None = None
    search: str | None = None


@dataclass(frozen=True)
class RankedRecipe:
    """A recipe annotated with how many times it has been made."""

    recipe: Recipe
    usage_count: int = 0


def is_side(recipe: Recipe) -> bool:
    """Return true when the recipe can be served as a side dish."""
    return SIDES in recipe.meal_types


def ordered_meal_types(used: set[str]) -> list[str]:
    """Return the known meal types present in ``used`` in display order."""
    return [meal_type for meal_type in MEAL_TYPES if meal_type in used]
