"""Services for the recipe catalog."""

import logging
from dataclasses import dataclass
from typing import Protocol
from uuid import UUID

from recipe_planner.domain.errors import NotFoundError, ValidationError
from recipe_planner.domain.recipes import (
    MEAL_TYPES,
    Recipe,
    RecipeFilters,
    ordered_meal_types,
)

logger = logging.getLogger(__name__)

_EDITABLE_FIELDS = (
    "link",
    "name",
    "cuisine",
    "ingredients",
    "meal_types",
    "notes",
    "description",
    "image_url",
)


class RecipeRepository(Protocol):
    """Persistence interface for recipes."""

    def list_all(self) -> list[Recipe]:
        """Return every recipe in catalog order (oldest first)."""

    def list_by_meal_type(self, meal_type: str) -> list[Recipe]:
        """Return recipes tagged with a meal type, in catalog order."""

    def search(self, filters: RecipeFilters, limit: int, offset: int) -> list[Recipe]:
        """Return recipes matching filters, newest first."""

    def get(self, recipe_id: UUID) -> Recipe | None:
        """Return a recipe by id, if present."""

    def create(self, payload: dict[str, object]) -> Recipe:
        """Create a recipe and return it."""

    def update(self, recipe_id: UUID, payload: dict[str, object]) -> Recipe:
        """Update a recipe and return it."""

    def delete(self, recipe_id: UUID) -> None:
        """Delete a recipe."""


@dataclass
class RecipeService:
    """Application service for catalog operations."""

    repository: RecipeRepository

    def get_recipe(self, recipe_id: UUID) -> Recipe:
        """Return a recipe or raise NotFoundError."""
        recipe = self.repository.get(recipe_id)
        if recipe is None:
            raise NotFoundError(f"Recipe not found: {recipe_id}")
        return recipe

    def find_recipe(self, recipe_id: UUID) -> Recipe | None:
        return self.repository.get(recipe_id)

    def add_recipe(self, payload: dict[str, object]) -> Recipe:
        """Validate and create a recipe. New recipes are never favorites."""
        cleaned = _clean_payload(payload)
        cleaned["is_favorite"] = False
        recipe = self.repository.create(cleaned)
        logger.info("Recipe created", extra={"recipe_id": str(recipe.id)})
        return recipe

    def update_recipe(self, recipe_id: UUID, payload: dict[str, object]) -> Recipe:
        """Replace the editable fields of a recipe."""
        self.get_recipe(recipe_id)
        return self.repository.update(recipe_id, _clean_payload(payload))

    def set_favorite(self, recipe_id: UUID, is_favorite: bool) -> Recipe:
        self.get_recipe(recipe_id)
        return self.repository.update(recipe_id, {"is_favorite": is_favorite})

    def toggle_favorite(self, recipe_id: UUID) -> Recipe:
        recipe = self.get_recipe(recipe_id)
        return self.repository.update(
            recipe_id, {"is_favorite": not recipe.is_favorite}
        )

    def delete_recipe(self, recipe_id: UUID) -> None:
        """Delete a recipe. Plans that reference it keep a stale entry."""
        self.get_recipe(recipe_id)
        self.repository.delete(recipe_id)
        logger.info("Recipe deleted", extra={"recipe_id": str(recipe_id)})

    def list_recipes(
        self,
        filters: RecipeFilters | None = None,
        limit: int = 50,
        offset: int = 0,
    ) -> list[Recipe]:
        """List recipes newest first with optional filters."""
        resolved = filters or RecipeFilters()
        if resolved.meal_type and resolved.meal_type not in MEAL_TYPES:
            raise ValidationError(f"Unknown meal type: {resolved.meal_type}")
        search = (resolved.search or "").strip() or None
        return self.repository.search(
            RecipeFilters(
                favorites_only=resolved.favorites_only,
                cuisine=resolved.cuisine or None,
                meal_type=resolved.meal_type or None,
                search=search,
            ),
            limit=limit,
            offset=offset,
        )

    def list_cuisines(self) -> list[str]:
        """Return the distinct cuisines in use, sorted."""
        cuisines = {recipe.cuisine for recipe in self.repository.list_all()}
        return sorted(cuisine for cuisine in cuisines if cuisine)

    def list_used_meal_types(self) -> list[str]:
        """Return the meal types used by at least one recipe, in display order."""
        used: set[str] = set()
        for recipe in self.repository.list_all():
            used.update(recipe.meal_types)
        return ordered_meal_types(used)


def _clean_payload(payload: dict[str, object]) -> dict[str, object]:
    link = str(payload.get("link") or "").strip()
    if not link:
        raise ValidationError("Link is required")
    meal_types = [str(value) for value in payload.get("meal_types") or []]
    unknown = [value for value in meal_types if value not in MEAL_TYPES]
    if unknown:
        raise ValidationError(f"Unknown meal types: {', '.join(unknown)}")
    cleaned = {key: payload.get(key) for key in _EDITABLE_FIELDS}
    cleaned["link"] = link
    cleaned["meal_types"] = ordered_meal_types(set(meal_types))
    cleaned["ingredients"] = [
        str(value) for value in payload.get("ingredients") or [] if str(value).strip()
    ]
    return cleaned
