"""Services for the restaurant catalog."""

import logging
from dataclasses import dataclass
from typing import Protocol
from uuid import UUID

from recipe_planner.domain.errors import NotFoundError, ValidationError
from recipe_planner.domain.recipes import MEAL_TYPES, ordered_meal_types
from recipe_planner.domain.restaurants import (
    MAX_DISH_RATING,
    MIN_DISH_RATING,
    Dish,
    Restaurant,
    RestaurantFilters,
)

logger = logging.getLogger(__name__)


class RestaurantRepository(Protocol):
    """Persistence interface for restaurants."""

    def list_all(self) -> list[Restaurant]:
        """Return every restaurant, oldest first."""

    def search(
        self, filters: RestaurantFilters, limit: int, offset: int
    ) -> list[Restaurant]:
        """Return restaurants matching filters, newest first."""

    def get(self, restaurant_id: UUID) -> Restaurant | None:
        """Return a restaurant by id, if present."""

    def create(self, payload: dict[str, object]) -> Restaurant:
        """Create a restaurant and return it."""

    def update(self, restaurant_id: UUID, payload: dict[str, object]) -> Restaurant:
        """Update a restaurant and return it."""

    def delete(self, restaurant_id: UUID) -> None:
        """Delete a restaurant."""


@dataclass
class RestaurantService:
    """Application service for restaurant catalog operations."""

    repository: RestaurantRepository

    def get_restaurant(self, restaurant_id: UUID) -> Restaurant:
        restaurant = self.repository.get(restaurant_id)
        if restaurant is None:
            raise NotFoundError(f"Restaurant not found: {restaurant_id}")
        return restaurant

    def add_restaurant(self, payload: dict[str, object]) -> Restaurant:
        """Validate and create a restaurant. New restaurants are never favorites."""
        cleaned = _clean_payload(payload)
        cleaned["is_favorite"] = False
        restaurant = self.repository.create(cleaned)
        logger.info("Restaurant created", extra={"restaurant_id": str(restaurant.id)})
        return restaurant

    def update_restaurant(
        self, restaurant_id: UUID, payload: dict[str, object]
    ) -> Restaurant:
        self.get_restaurant(restaurant_id)
        return self.repository.update(restaurant_id, _clean_payload(payload))

    def toggle_favorite(self, restaurant_id: UUID) -> Restaurant:
        restaurant = self.get_restaurant(restaurant_id)
        return self.repository.update(
            restaurant_id, {"is_favorite": not restaurant.is_favorite}
        )

    def delete_restaurant(self, restaurant_id: UUID) -> None:
        self.get_restaurant(restaurant_id)
        self.repository.delete(restaurant_id)
        logger.info("Restaurant deleted", extra={"restaurant_id": str(restaurant_id)})

    def list_restaurants(
        self,
        filters: RestaurantFilters | None = None,
        limit: int = 50,
        offset: int = 0,
    ) -> list[Restaurant]:
        """List restaurants newest first with optional filters."""
        resolved = filters or RestaurantFilters()
        if resolved.meal_type and resolved.meal_type not in MEAL_TYPES:
            raise ValidationError(f"Unknown meal type: {resolved.meal_type}")
        return self.repository.search(
            RestaurantFilters(
                favorites_only=resolved.favorites_only,
                cuisine=resolved.cuisine or None,
                suburb=resolved.suburb or None,
                meal_type=resolved.meal_type or None,
                search=(resolved.search or "").strip() or None,
            ),
            limit=limit,
            offset=offset,
        )

    def list_cuisines(self) -> list[str]:
        cuisines = {item.cuisine for item in self.repository.list_all()}
        return sorted(cuisine for cuisine in cuisines if cuisine)

    def list_suburbs(self) -> list[str]:
        suburbs = {item.suburb for item in self.repository.list_all()}
        return sorted(suburb for suburb in suburbs if suburb)

    def list_used_meal_types(self) -> list[str]:
        used: set[str] = set()
        for restaurant in self.repository.list_all():
            used.update(restaurant.meal_types)
        return ordered_meal_types(used)


def _clean_payload(payload: dict[str, object]) -> dict[str, object]:
    link = str(payload.get("link") or "").strip()
    if not link:
        raise ValidationError("Link is required")
    suburb = str(payload.get("suburb") or "").strip()
    if not suburb:
        raise ValidationError("Suburb is required")
    meal_types = [str(value) for value in payload.get("meal_types") or []]
    unknown = [value for value in meal_types if value not in MEAL_TYPES]
    if unknown:
        raise ValidationError(f"Unknown meal types: {', '.join(unknown)}")
    return {
        "link": link,
        "name": payload.get("name"),
        "suburb": suburb,
        "cuisine": payload.get("cuisine"),
        "meal_types": ordered_meal_types(set(meal_types)),
        "dishes": [_clean_dish(dish) for dish in payload.get("dishes") or []],
    }


def _clean_dish(dish: Dish) -> Dish:
    name = dish.name.strip()
    if not name:
        raise ValidationError("Dish name is required")
    if dish.rating is not None and not (
        MIN_DISH_RATING <= dish.rating <= MAX_DISH_RATING
    ):
        raise ValidationError(
            f"Dish rating must be between {MIN_DISH_RATING} and {MAX_DISH_RATING}"
        )
    return Dish(name=name, rating=dish.rating)
