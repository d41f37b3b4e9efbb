"""Dependency container wiring for the application."""

from dataclasses import dataclass

from supabase import create_client

from recipe_planner.adapters.supabase_meal_plan_repository import (
    SupabaseMealPlanRepository,
)
from recipe_planner.adapters.supabase_recipe_repository import (
    SupabaseRecipeRepository,
)
from recipe_planner.adapters.supabase_restaurant_repository import (
    SupabaseRestaurantRepository,
)
from recipe_planner.adapters.supabase_usage_repository import SupabaseUsageRepository
from recipe_planner.config import Settings
from recipe_planner.services.meal_plans import (
    MealPlanAssembler,
    MealPlanMutator,
    MealPlanReader,
    MealPlanRepository,
)
from recipe_planner.services.recipes import RecipeRepository, RecipeService
from recipe_planner.services.recommendations import RecommendationEngine
from recipe_planner.services.restaurants import (
    RestaurantRepository,
    RestaurantService,
)
from recipe_planner.services.usage import UsageLedger, UsageRepository


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    recipe_service: RecipeService
    restaurant_service: RestaurantService
    usage_ledger: UsageLedger
    recommendation_engine: RecommendationEngine
    meal_plan_assembler: MealPlanAssembler
    meal_plan_mutator: MealPlanMutator
    meal_plan_reader: MealPlanReader


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    supabase_client = create_client(
        resolved_settings.supabase_url, resolved_settings.supabase_service_key
    )
    return wire_container(
        settings=resolved_settings,
        recipe_repository=SupabaseRecipeRepository(supabase_client),
        restaurant_repository=SupabaseRestaurantRepository(supabase_client),
        plan_repository=SupabaseMealPlanRepository(supabase_client),
        usage_repository=SupabaseUsageRepository(supabase_client),
    )


def wire_container(
    settings: Settings,
    recipe_repository: RecipeRepository,
    plan_repository: MealPlanRepository,
    usage_repository: UsageRepository,
    restaurant_repository: RestaurantRepository,
) -> AppContainer:
    """Build services on top of the given repositories."""
    usage_ledger = UsageLedger(
        repository=usage_repository, recipe_repository=recipe_repository
    )
    return AppContainer(
        settings=settings,
        recipe_service=RecipeService(recipe_repository),
        restaurant_service=RestaurantService(restaurant_repository),
        usage_ledger=usage_ledger,
        recommendation_engine=RecommendationEngine(
            recipe_repository=recipe_repository,
            plan_repository=plan_repository,
            usage_ledger=usage_ledger,
        ),
        meal_plan_assembler=MealPlanAssembler(
            repository=plan_repository, recipe_repository=recipe_repository
        ),
        meal_plan_mutator=MealPlanMutator(
            repository=plan_repository, usage_ledger=usage_ledger
        ),
        meal_plan_reader=MealPlanReader(
            repository=plan_repository, recipe_repository=recipe_repository
        ),
    )
