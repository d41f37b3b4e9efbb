"""Pydantic models for API request bodies."""

from datetime import date
from uuid import UUID

from pydantic import BaseModel, Field

from recipe_planner.domain.meal_plans import PlanEntry
from recipe_planner.domain.restaurants import Dish
from recipe_planner.domain.wizard import DEFAULT_NUM_DAYS


class RecipePayload(BaseModel):
    """Recipe create/update payload."""

    link: str
    name: str | None = None
    cuisine: str | None = None
    ingredients: list[str] = Field(default_factory=list)
    meal_types: list[str] = Field(default_factory=list)
    notes: str | None = None
    description: str | None = None
    image_url: str | None = None


class DishPayload(BaseModel):
    """A dish with an optional one-to-five star rating."""

    name: str
    rating: int | None = None

    def to_dish(self) -> Dish:
        return Dish(name=self.name, rating=self.rating)


class RestaurantPayload(BaseModel):
    """Restaurant create/update payload."""

    link: str
    suburb: str
    name: str | None = None
    cuisine: str | None = None
    meal_types: list[str] = Field(default_factory=list)
    dishes: list[DishPayload] = Field(default_factory=list)

    def to_payload(self) -> dict[str, object]:
        payload = self.model_dump(exclude={"dishes"})
        payload["dishes"] = [dish.to_dish() for dish in self.dishes]
        return payload


class FavoritePayload(BaseModel):
    """Favorite flag update; omitting ``is_favorite`` toggles the flag."""

    is_favorite: bool | None = None


class PlanCreatePayload(BaseModel):
    """Direct plan creation payload, mirroring a finished wizard draft."""

    start_date: date | None = None
    num_days: int = DEFAULT_NUM_DAYS
    recipe_ids: list[UUID] = Field(default_factory=list)
    side_ids: list[UUID] = Field(default_factory=list)


class PlanEntryPayload(BaseModel):
    """Plan entry payload."""

    recipe_id: UUID
    is_side: bool = False
    assigned_day: int | None = None

    def to_entry(self) -> PlanEntry:
        return PlanEntry(
            recipe_id=self.recipe_id,
            is_side=self.is_side,
            assigned_day=self.assigned_day,
        )


class PlanPatchPayload(BaseModel):
    """Partial plan update."""

    status: str | None = None
    entries: list[PlanEntryPayload] | None = None


class AssignDayPayload(BaseModel):
    """Day assignment; ``day=None`` clears the assignment."""

    day: int | None = None
    is_side: bool | None = None
