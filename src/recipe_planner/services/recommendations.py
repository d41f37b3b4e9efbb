"""Rotating "most made" recommendations for the meal-plan wizard."""

from collections.abc import Sequence
from dataclasses import dataclass
from typing import TypeVar
from uuid import UUID

from recipe_planner.domain.recipes import SIDES, RankedRecipe, Recipe
from recipe_planner.services.meal_plans import MealPlanRepository
from recipe_planner.services.recipes import RecipeRepository
from recipe_planner.services.usage import UsageLedger

TOP_RECIPES_WINDOW = 6
TOP_SIDES_WINDOW = 4

T = TypeVar("T")


@dataclass
class RecommendationEngine:
    """Ranks recipes by usage and rotates the ranking by the total plan count.

    Nothing is cached: every call reads the current usage counts and plan
    count, so each newly created plan shifts the window shown next time.
    """

    recipe_repository: RecipeRepository
    plan_repository: MealPlanRepository
    usage_ledger: UsageLedger

    def get_top_made_recipes(self) -> list[RankedRecipe]:
        """Return up to six recipes from the rotated usage ranking."""
        return self._recommend(self.recipe_repository.list_all(), TOP_RECIPES_WINDOW)

    def get_recommended_sides(self) -> list[RankedRecipe]:
        """Return up to four side dishes from the rotated usage ranking."""
        sides = self.recipe_repository.list_by_meal_type(SIDES)
        return self._recommend(sides, TOP_SIDES_WINDOW)

    def _recommend(self, recipes: list[Recipe], window: int) -> list[RankedRecipe]:
        ranked = rank_by_usage(recipes, self.usage_ledger.count_all())
        return rotate(ranked, self.plan_repository.count(), window)


def rank_by_usage(
    recipes: list[Recipe], counts: dict[UUID, int]
) -> list[RankedRecipe]:
    """Sort recipes by usage count, descending; ties keep catalog order."""
    ranked = [
        RankedRecipe(recipe=recipe, usage_count=counts.get(recipe.id, 0))
        for recipe in recipes
    ]
    return sorted(ranked, key=lambda item: item.usage_count, reverse=True)


def rotate(items: Sequence[T], total_plans: int, window: int) -> list[T]:
    """Rotate ``items`` left by ``total_plans * window`` and take ``window`` items."""
    offset = (total_plans * window) % max(len(items), 1)
    rotated = [*items[offset:], *items[:offset]]
    return rotated[:window]
