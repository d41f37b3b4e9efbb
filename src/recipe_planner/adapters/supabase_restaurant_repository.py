"""Supabase implementation for the restaurant catalog."""

from dataclasses import dataclass
from datetime import datetime
from uuid import UUID

from supabase import Client

from recipe_planner.domain.restaurants import Dish, Restaurant, RestaurantFilters
from recipe_planner.services.restaurants import RestaurantRepository


@dataclass
class SupabaseRestaurantRepository(RestaurantRepository):
    """Supabase-backed repository for restaurants.

    Dishes are stored as a JSON array of ``{name, rating}`` on the row.
    """

    client: Client

    def list_all(self) -> list[Restaurant]:
        response = (
            self.client.table("restaurants")
            .select("*")
            .order("created_at", desc=False)
            .execute()
        )
        return [_parse_restaurant(row) for row in response.data or []]

    def search(
        self, filters: RestaurantFilters, limit: int, offset: int
    ) -> list[Restaurant]:
        """Return restaurants matching filters, newest first."""
        query = self.client.table("restaurants").select("*")
        if filters.favorites_only:
            query = query.eq("is_favorite", True)
        if filters.cuisine:
            query = query.eq("cuisine", filters.cuisine)
        if filters.suburb:
            query = query.eq("suburb", filters.suburb)
        if filters.meal_type:
            query = query.contains("meal_types", [filters.meal_type])
        if filters.search:
            query = query.ilike("name", f"%{filters.search}%")
        response = (
            query.order("created_at", desc=True)
            .range(offset, offset + limit - 1)
            .execute()
        )
        return [_parse_restaurant(row) for row in response.data or []]

    def get(self, restaurant_id: UUID) -> Restaurant | None:
        response = (
            self.client.table("restaurants")
            .select("*")
            .eq("id", str(restaurant_id))
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return _parse_restaurant(response.data[0])

    def create(self, payload: dict[str, object]) -> Restaurant:
        response = (
            self.client.table("restaurants").insert(_dump_payload(payload)).execute()
        )
        if not response.data:
            raise RuntimeError("Failed to create restaurant")
        return _parse_restaurant(response.data[0])

    def update(self, restaurant_id: UUID, payload: dict[str, object]) -> Restaurant:
        response = (
            self.client.table("restaurants")
            .update(_dump_payload(payload))
            .eq("id", str(restaurant_id))
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to update restaurant")
        return _parse_restaurant(response.data[0])

    def delete(self, restaurant_id: UUID) -> None:
        (
            self.client.table("restaurants")
            .delete()
            .eq("id", str(restaurant_id))
            .execute()
        )


def _dump_payload(payload: dict[str, object]) -> dict[str, object]:
    dumped = dict(payload)
    if "dishes" in dumped:
        dumped["dishes"] = [
            {"name": dish.name, "rating": dish.rating}
            for dish in dumped["dishes"] or []  # type: ignore[union-attr]
        ]
    return dumped


def _parse_restaurant(row: dict[str, object]) -> Restaurant:
    created_raw = row.get("created_at")
    created_at = (
        datetime.fromisoformat(created_raw)
        if isinstance(created_raw, str) and created_raw
        else None
    )
    dishes = tuple(
        Dish(name=str(item["name"]), rating=item.get("rating"))
        for item in row.get("dishes") or []
    )
    return Restaurant(
        id=UUID(str(row["id"])),
        link=str(row.get("link", "")),
        name=row.get("name"),
        suburb=str(row.get("suburb") or ""),
        cuisine=row.get("cuisine"),
        is_favorite=bool(row.get("is_favorite", False)),
        meal_types=tuple(row.get("meal_types") or ()),
        dishes=dishes,
        created_at=created_at,
    )
