"""Supabase implementation for the recipe catalog."""

from dataclasses import dataclass
from datetime import datetime
from uuid import UUID

from supabase import Client

from recipe_planner.domain.recipes import Recipe, RecipeFilters
from recipe_planner.services.recipes import RecipeRepository


@dataclass
class SupabaseRecipeRepository(RecipeRepository):
    """Supabase-backed repository for recipes."""

    client: Client

    def list_all(self) -> list[Recipe]:
        """Return all recipes, oldest first."""
        response = (
            self.client.table("recipes")
            .select("*")
            .order("created_at", desc=False)
            .execute()
        )
        return [_parse_recipe(row) for row in response.data or []]

    def list_by_meal_type(self, meal_type: str) -> list[Recipe]:
        """Return recipes tagged with a meal type, oldest first."""
        response = (
            self.client.table("recipes")
            .select("*")
            .contains("meal_types", [meal_type])
            .order("created_at", desc=False)
            .execute()
        )
        return [_parse_recipe(row) for row in response.data or []]

    def search(self, filters: RecipeFilters, limit: int, offset: int) -> list[Recipe]:
        """Return recipes matching filters, newest first."""
        query = self.client.table("recipes").select("*")
        if filters.favorites_only:
            query = query.eq("is_favorite", True)
        if filters.cuisine:
            query = query.eq("cuisine", filters.cuisine)
        if filters.meal_type:
            query = query.contains("meal_types", [filters.meal_type])
        if filters.search:
            query = query.ilike("name", f"%{filters.search}%")
        response = (
            query.order("created_at", desc=True)
            .range(offset, offset + limit - 1)
            .execute()
        )
        return [_parse_recipe(row) for row in response.data or []]

    def get(self, recipe_id: UUID) -> Recipe | None:
        """Return a recipe by id, if present."""
        response = (
            self.client.table("recipes")
            .select("*")
            .eq("id", str(recipe_id))
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return _parse_recipe(response.data[0])

    def create(self, payload: dict[str, object]) -> Recipe:
        """Create a recipe row and return it."""
        response = self.client.table("recipes").insert(payload).execute()
        if not response.data:
            raise RuntimeError("Failed to create recipe")
        return _parse_recipe(response.data[0])

    def update(self, recipe_id: UUID, payload: dict[str, object]) -> Recipe:
        """Update a recipe row and return it."""
        response = (
            self.client.table("recipes")
            .update(payload)
            .eq("id", str(recipe_id))
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to update recipe")
        return _parse_recipe(response.data[0])

    def delete(self, recipe_id: UUID) -> None:
        """Delete a recipe row."""
        self.client.table("recipes").delete().eq("id", str(recipe_id)).execute()


def _parse_recipe(row: dict[str, object]) -> Recipe:
    """Parse a recipe row into a domain model."""
    created_raw = row.get("created_at")
    created_at = (
        datetime.fromisoformat(created_raw)
        if isinstance(created_raw, str) and created_raw
        else None
    )
    return Recipe(
        id=UUID(str(row["id"])),
        link=str(row.get("link", "")),
        name=row.get("name"),
        cuisine=row.get("cuisine"),
        is_favorite=bool(row.get("is_favorite", False)),
        meal_types=tuple(row.get("meal_types") or ()),
        ingredients=tuple(row.get("ingredients") or ()),
        notes=row.get("notes"),
        description=row.get("description"),
        image_url=row.get("image_url"),
        created_at=created_at,
    )
