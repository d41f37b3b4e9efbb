"""FastAPI application factory."""

import logging
from uuid import UUID

from fastapi import FastAPI, Query, Request, status
from fastapi.responses import JSONResponse, Response

from recipe_planner.api.models import (
    AssignDayPayload,
    FavoritePayload,
    PlanCreatePayload,
    PlanPatchPayload,
    RecipePayload,
    RestaurantPayload,
)
from recipe_planner.app_logging import configure_logging
from recipe_planner.config import today_in
from recipe_planner.containers import AppContainer
from recipe_planner.domain.errors import NotFoundError, ValidationError
from recipe_planner.domain.meal_plans import MealPlan, MealPlanDetail, PlanEntryDetail
from recipe_planner.domain.recipes import RankedRecipe, Recipe, RecipeFilters, is_side
from recipe_planner.domain.restaurants import Restaurant, RestaurantFilters
from recipe_planner.domain.usage import UsageRecord
from recipe_planner.domain.wizard import (
    QUERY_NUM_DAYS,
    QUERY_RECIPE_IDS,
    QUERY_SIDE_IDS,
    QUERY_START_DATE,
    WizardDraft,
    new_draft,
)
from recipe_planner.services import wizard
from recipe_planner.services.wizard import WizardState


def create_app(container: AppContainer) -> FastAPI:  # noqa: PLR0915
    """Create a FastAPI app configured with dependencies."""
    configure_logging()
    logger = logging.getLogger(__name__)

    app = FastAPI()
    app.state.container = container

    @app.exception_handler(NotFoundError)
    async def not_found_handler(request: Request, exc: NotFoundError) -> JSONResponse:
        return JSONResponse(
            status_code=status.HTTP_404_NOT_FOUND, content={"detail": str(exc)}
        )

    @app.exception_handler(ValidationError)
    async def validation_handler(
        request: Request, exc: ValidationError
    ) -> JSONResponse:
        return JSONResponse(
            status_code=422,
            content={"detail": str(exc)},
        )

    @app.exception_handler(Exception)
    async def unexpected_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.exception("Unhandled error", extra={"path": request.url.path})
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"detail": _format_error(container, exc)},
        )

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    # Recipes

    @app.get("/recipes")
    async def list_recipes(  # noqa: PLR0913
        request: Request,
        favorites_only: bool = False,
        cuisine: str | None = None,
        meal_type: str | None = None,
        search: str | None = None,
        limit: int = 50,
        offset: int = 0,
    ) -> dict[str, object]:
        """Return recipes, newest first."""
        state_container: AppContainer = request.app.state.container
        recipes = state_container.recipe_service.list_recipes(
            RecipeFilters(
                favorites_only=favorites_only,
                cuisine=cuisine,
                meal_type=meal_type,
                search=search,
            ),
            limit=limit,
            offset=offset,
        )
        return {"recipes": [_recipe_json(recipe) for recipe in recipes]}

    @app.post("/recipes", status_code=status.HTTP_201_CREATED)
    async def add_recipe(payload: RecipePayload, request: Request) -> dict[str, object]:
        state_container: AppContainer = request.app.state.container
        recipe = state_container.recipe_service.add_recipe(payload.model_dump())
        return _recipe_json(recipe)

    @app.get("/recipes/cuisines")
    async def list_cuisines(request: Request) -> dict[str, object]:
        state_container: AppContainer = request.app.state.container
        return {"cuisines": state_container.recipe_service.list_cuisines()}

    @app.get("/recipes/meal-types")
    async def list_meal_types(request: Request) -> dict[str, object]:
        state_container: AppContainer = request.app.state.container
        return {"meal_types": state_container.recipe_service.list_used_meal_types()}

    @app.get("/recipes/{recipe_id}")
    async def get_recipe(recipe_id: UUID, request: Request) -> dict[str, object]:
        state_container: AppContainer = request.app.state.container
        return _recipe_json(state_container.recipe_service.get_recipe(recipe_id))

    @app.put("/recipes/{recipe_id}")
    async def update_recipe(
        recipe_id: UUID, payload: RecipePayload, request: Request
    ) -> dict[str, object]:
        state_container: AppContainer = request.app.state.container
        recipe = state_container.recipe_service.update_recipe(
            recipe_id, payload.model_dump()
        )
        return _recipe_json(recipe)

    @app.post("/recipes/{recipe_id}/favorite")
    async def favorite_recipe(
        recipe_id: UUID, payload: FavoritePayload, request: Request
    ) -> dict[str, object]:
        state_container: AppContainer = request.app.state.container
        service = state_container.recipe_service
        if payload.is_favorite is None:
            recipe = service.toggle_favorite(recipe_id)
        else:
            recipe = service.set_favorite(recipe_id, payload.is_favorite)
        return _recipe_json(recipe)

    @app.delete("/recipes/{recipe_id}", status_code=status.HTTP_204_NO_CONTENT)
    async def delete_recipe(recipe_id: UUID, request: Request) -> Response:
        state_container: AppContainer = request.app.state.container
        state_container.recipe_service.delete_recipe(recipe_id)
        return Response(status_code=status.HTTP_204_NO_CONTENT)

    @app.get("/recipes/{recipe_id}/usage")
    async def recipe_usage(recipe_id: UUID, request: Request) -> dict[str, object]:
        state_container: AppContainer = request.app.state.container
        return {
            "recipe_id": str(recipe_id),
            "usage_count": state_container.usage_ledger.count_by_recipe(recipe_id),
        }

    # Restaurants

    @app.get("/restaurants")
    async def list_restaurants(  # noqa: PLR0913
        request: Request,
        favorites_only: bool = False,
        cuisine: str | None = None,
        suburb: str | None = None,
        meal_type: str | None = None,
        search: str | None = None,
        limit: int = 50,
        offset: int = 0,
    ) -> dict[str, object]:
        """Return restaurants, newest first."""
        state_container: AppContainer = request.app.state.container
        restaurants = state_container.restaurant_service.list_restaurants(
            RestaurantFilters(
                favorites_only=favorites_only,
                cuisine=cuisine,
                suburb=suburb,
                meal_type=meal_type,
                search=search,
            ),
            limit=limit,
            offset=offset,
        )
        return {"restaurants": [_restaurant_json(item) for item in restaurants]}

    @app.post("/restaurants", status_code=status.HTTP_201_CREATED)
    async def add_restaurant(
        payload: RestaurantPayload, request: Request
    ) -> dict[str, object]:
        state_container: AppContainer = request.app.state.container
        restaurant = state_container.restaurant_service.add_restaurant(
            payload.to_payload()
        )
        return _restaurant_json(restaurant)

    @app.get("/restaurants/cuisines")
    async def list_restaurant_cuisines(request: Request) -> dict[str, object]:
        state_container: AppContainer = request.app.state.container
        return {"cuisines": state_container.restaurant_service.list_cuisines()}

    @app.get("/restaurants/suburbs")
    async def list_restaurant_suburbs(request: Request) -> dict[str, object]:
        state_container: AppContainer = request.app.state.container
        return {"suburbs": state_container.restaurant_service.list_suburbs()}

    @app.get("/restaurants/meal-types")
    async def list_restaurant_meal_types(request: Request) -> dict[str, object]:
        state_container: AppContainer = request.app.state.container
        service = state_container.restaurant_service
        return {"meal_types": service.list_used_meal_types()}

    @app.get("/restaurants/{restaurant_id}")
    async def get_restaurant(
        restaurant_id: UUID, request: Request
    ) -> dict[str, object]:
        state_container: AppContainer = request.app.state.container
        service = state_container.restaurant_service
        return _restaurant_json(service.get_restaurant(restaurant_id))

    @app.put("/restaurants/{restaurant_id}")
    async def update_restaurant(
        restaurant_id: UUID, payload: RestaurantPayload, request: Request
    ) -> dict[str, object]:
        state_container: AppContainer = request.app.state.container
        restaurant = state_container.restaurant_service.update_restaurant(
            restaurant_id, payload.to_payload()
        )
        return _restaurant_json(restaurant)

    @app.post("/restaurants/{restaurant_id}/favorite")
    async def toggle_restaurant_favorite(
        restaurant_id: UUID, request: Request
    ) -> dict[str, object]:
        state_container: AppContainer = request.app.state.container
        service = state_container.restaurant_service
        return _restaurant_json(service.toggle_favorite(restaurant_id))

    @app.delete(
        "/restaurants/{restaurant_id}", status_code=status.HTTP_204_NO_CONTENT
    )
    async def delete_restaurant(restaurant_id: UUID, request: Request) -> Response:
        state_container: AppContainer = request.app.state.container
        state_container.restaurant_service.delete_restaurant(restaurant_id)
        return Response(status_code=status.HTTP_204_NO_CONTENT)

    # Recommendations

    @app.get("/recommendations/recipes")
    async def top_made_recipes(request: Request) -> dict[str, object]:
        """Return the current rotation of most-made recipes."""
        state_container: AppContainer = request.app.state.container
        ranked = state_container.recommendation_engine.get_top_made_recipes()
        return {"recipes": [_ranked_json(item) for item in ranked]}

    @app.get("/recommendations/sides")
    async def recommended_sides(request: Request) -> dict[str, object]:
        """Return the current rotation of most-made sides."""
        state_container: AppContainer = request.app.state.container
        ranked = state_container.recommendation_engine.get_recommended_sides()
        return {"sides": [_ranked_json(item) for item in ranked]}

    # Wizard

    @app.post("/meal-plans/new", status_code=status.HTTP_201_CREATED)
    async def start_wizard(request: Request) -> dict[str, object]:
        """Start a new draft and point the caller at the first step."""
        state_container: AppContainer = request.app.state.container
        settings = state_container.settings
        draft = new_draft(
            today_in(settings.timezone), num_days=settings.default_plan_days
        )
        state = wizard.start(draft)
        return {
            "wizard_id": draft.wizard_session_id,
            "step": state.step,
            "query": draft.to_query(),
        }

    @app.get("/meal-plans/new/{wizard_id}/{step}")
    async def wizard_step(  # noqa: PLR0913
        wizard_id: str,
        step: str,
        request: Request,
        num_days: str | None = Query(default=None, alias=QUERY_NUM_DAYS),
        start_date: str | None = Query(default=None, alias=QUERY_START_DATE),
        recipe_ids: str | None = Query(default=None, alias=QUERY_RECIPE_IDS),
        side_ids: str | None = Query(default=None, alias=QUERY_SIDE_IDS),
    ) -> dict[str, object]:
        """Return everything a wizard step needs to render."""
        state_container: AppContainer = request.app.state.container
        draft = _draft_from_query(
            state_container, wizard_id, num_days, start_date, recipe_ids, side_ids
        )
        return _wizard_view(state_container, wizard.at_step(step, draft))

    @app.post("/meal-plans/new/{wizard_id}/{step}/next")
    async def wizard_next(  # noqa: PLR0913
        wizard_id: str,
        step: str,
        request: Request,
        num_days: str | None = Query(default=None, alias=QUERY_NUM_DAYS),
        start_date: str | None = Query(default=None, alias=QUERY_START_DATE),
        recipe_ids: str | None = Query(default=None, alias=QUERY_RECIPE_IDS),
        side_ids: str | None = Query(default=None, alias=QUERY_SIDE_IDS),
    ) -> dict[str, object]:
        """Advance to the next step when the current step's gate passes."""
        state_container: AppContainer = request.app.state.container
        draft = _draft_from_query(
            state_container, wizard_id, num_days, start_date, recipe_ids, side_ids
        )
        state = wizard.advance(wizard.at_step(step, draft))
        return _wizard_view(state_container, state)

    @app.post("/meal-plans/new/{wizard_id}/{step}/back")
    async def wizard_back(  # noqa: PLR0913
        wizard_id: str,
        step: str,
        request: Request,
        num_days: str | None = Query(default=None, alias=QUERY_NUM_DAYS),
        start_date: str | None = Query(default=None, alias=QUERY_START_DATE),
        recipe_ids: str | None = Query(default=None, alias=QUERY_RECIPE_IDS),
        side_ids: str | None = Query(default=None, alias=QUERY_SIDE_IDS),
    ) -> dict[str, object]:
        state_container: AppContainer = request.app.state.container
        draft = _draft_from_query(
            state_container, wizard_id, num_days, start_date, recipe_ids, side_ids
        )
        state = wizard.back(wizard.at_step(step, draft))
        return _wizard_view(state_container, state)

    @app.post(
        "/meal-plans/new/{wizard_id}/create", status_code=status.HTTP_201_CREATED
    )
    async def wizard_create(  # noqa: PLR0913
        wizard_id: str,
        request: Request,
        num_days: str | None = Query(default=None, alias=QUERY_NUM_DAYS),
        start_date: str | None = Query(default=None, alias=QUERY_START_DATE),
        recipe_ids: str | None = Query(default=None, alias=QUERY_RECIPE_IDS),
        side_ids: str | None = Query(default=None, alias=QUERY_SIDE_IDS),
    ) -> dict[str, object]:
        """Create the plan described by the draft on the review step."""
        state_container: AppContainer = request.app.state.container
        draft = _draft_from_query(
            state_container, wizard_id, num_days, start_date, recipe_ids, side_ids
        )
        wizard.ensure_complete(draft)
        plan = state_container.meal_plan_assembler.create_plan(draft)
        return {"plan_id": str(plan.id)}

    # Meal plans

    @app.post("/meal-plans", status_code=status.HTTP_201_CREATED)
    async def create_plan(
        payload: PlanCreatePayload, request: Request
    ) -> dict[str, object]:
        state_container: AppContainer = request.app.state.container
        draft = WizardDraft(
            wizard_session_id="direct",
            num_days=payload.num_days,
            start_date=payload.start_date,
            recipe_ids=tuple(dict.fromkeys(payload.recipe_ids)),
            side_ids=tuple(dict.fromkeys(payload.side_ids)),
        )
        plan = state_container.meal_plan_assembler.create_plan(draft)
        return _plan_json(plan)

    @app.get("/meal-plans")
    async def list_plans(
        request: Request, status_filter: str | None = Query(None, alias="status")
    ) -> dict[str, object]:
        state_container: AppContainer = request.app.state.container
        plans = state_container.meal_plan_reader.list_plans(status=status_filter)
        return {"plans": [_plan_json(plan) for plan in plans]}

    @app.get("/meal-plans/{plan_id}")
    async def get_plan(plan_id: UUID, request: Request) -> dict[str, object]:
        state_container: AppContainer = request.app.state.container
        detail = state_container.meal_plan_reader.get_plan_detail(plan_id)
        return _plan_detail_json(detail)

    @app.patch("/meal-plans/{plan_id}")
    async def patch_plan(
        plan_id: UUID, payload: PlanPatchPayload, request: Request
    ) -> dict[str, object]:
        state_container: AppContainer = request.app.state.container
        entries = None
        if payload.entries is not None:
            entries = [entry.to_entry() for entry in payload.entries]
        plan = state_container.meal_plan_mutator.patch_plan(
            plan_id, entries=entries, status=payload.status
        )
        return _plan_json(plan)

    @app.put("/meal-plans/{plan_id}/entries/{recipe_id}/day")
    async def assign_day(
        plan_id: UUID, recipe_id: UUID, payload: AssignDayPayload, request: Request
    ) -> dict[str, object]:
        state_container: AppContainer = request.app.state.container
        plan = state_container.meal_plan_mutator.assign_day(
            plan_id, recipe_id, payload.day, is_side=payload.is_side
        )
        return _plan_json(plan)

    @app.post(
        "/meal-plans/{plan_id}/entries/{recipe_id}/made",
        status_code=status.HTTP_201_CREATED,
    )
    async def mark_as_made(
        plan_id: UUID, recipe_id: UUID, request: Request
    ) -> dict[str, object]:
        state_container: AppContainer = request.app.state.container
        record = state_container.meal_plan_mutator.mark_as_made(plan_id, recipe_id)
        return _usage_json(record)

    @app.delete("/meal-plans/{plan_id}", status_code=status.HTTP_204_NO_CONTENT)
    async def delete_plan(plan_id: UUID, request: Request) -> Response:
        state_container: AppContainer = request.app.state.container
        state_container.meal_plan_mutator.delete_plan(plan_id)
        return Response(status_code=status.HTTP_204_NO_CONTENT)

    return app


def _draft_from_query(  # noqa: PLR0913
    state_container: AppContainer,
    wizard_id: str,
    num_days: str | None,
    start_date: str | None,
    recipe_ids: str | None,
    side_ids: str | None,
) -> WizardDraft:
    """Rebuild the draft carried in the wizard URL."""
    return WizardDraft.from_query(
        wizard_id,
        {
            QUERY_NUM_DAYS: num_days,
            QUERY_START_DATE: start_date,
            QUERY_RECIPE_IDS: recipe_ids,
            QUERY_SIDE_IDS: side_ids,
        },
        today=today_in(state_container.settings.timezone),
    )


def _wizard_view(
    state_container: AppContainer, state: WizardState
) -> dict[str, object]:
    """Render a wizard step, including its recommendations."""
    draft = state.draft
    view: dict[str, object] = {
        "wizard_id": draft.wizard_session_id,
        "step": state.step,
        "prev_step": state.prev_step,
        "next_step": state.next_step,
        "can_advance": state.can_advance,
        "error": wizard.step_error(state.step, draft),
        "query": draft.to_query(),
        "num_days": draft.num_days,
        "start_date": draft.start_date.isoformat() if draft.start_date else None,
        "end_date": draft.end_date.isoformat() if draft.end_date else None,
        "date_range": draft.date_range_display,
        "recipe_ids": [str(value) for value in draft.recipe_ids],
        "side_ids": [str(value) for value in draft.side_ids],
    }
    engine = state_container.recommendation_engine
    if state.step == wizard.STEP_RECIPES:
        view["recommendations"] = [
            _ranked_json(item) for item in engine.get_top_made_recipes()
        ]
    elif state.step == wizard.STEP_SIDES:
        view["recommendations"] = [
            _ranked_json(item) for item in engine.get_recommended_sides()
        ]
    elif state.step == wizard.STEP_REVIEW:
        service = state_container.recipe_service
        view["recipes"] = [
            _selection_json(value, service.find_recipe(value))
            for value in draft.recipe_ids
        ]
        view["sides"] = [
            _selection_json(value, service.find_recipe(value))
            for value in draft.side_ids
        ]
    return view


def _format_error(state_container: AppContainer, exc: Exception) -> str:
    """Return a user-facing error message with local debug info."""
    fallback = "Something went wrong. Please try again."
    if state_container.settings.environment == "local":
        detail = f"{type(exc).__name__}: {exc}".strip()
        if detail:
            return f"{fallback} (debug: {detail})"
    return fallback


def _recipe_json(recipe: Recipe) -> dict[str, object]:
    return {
        "id": str(recipe.id),
        "link": recipe.link,
        "name": recipe.name,
        "cuisine": recipe.cuisine,
        "is_favorite": recipe.is_favorite,
        "meal_types": list(recipe.meal_types),
        "is_side": is_side(recipe),
        "ingredients": list(recipe.ingredients),
        "notes": recipe.notes,
        "description": recipe.description,
        "image_url": recipe.image_url,
    }


def _restaurant_json(restaurant: Restaurant) -> dict[str, object]:
    return {
        "id": str(restaurant.id),
        "link": restaurant.link,
        "name": restaurant.name,
        "suburb": restaurant.suburb,
        "cuisine": restaurant.cuisine,
        "is_favorite": restaurant.is_favorite,
        "meal_types": list(restaurant.meal_types),
        "dishes": [
            {"name": dish.name, "rating": dish.rating} for dish in restaurant.dishes
        ],
    }


def _ranked_json(item: RankedRecipe) -> dict[str, object]:
    return {**_recipe_json(item.recipe), "usage_count": item.usage_count}


def _selection_json(recipe_id: UUID, recipe: Recipe | None) -> dict[str, object]:
    return {
        "recipe_id": str(recipe_id),
        "recipe": _recipe_json(recipe) if recipe else None,
    }


def _plan_json(plan: MealPlan) -> dict[str, object]:
    return {
        "id": str(plan.id),
        "start_date": plan.start_date.isoformat(),
        "end_date": plan.end_date.isoformat(),
        "num_days": plan.num_days,
        "status": plan.status,
        "entries": [
            {
                "recipe_id": str(entry.recipe_id),
                "assigned_day": entry.assigned_day,
                "is_side": entry.is_side,
            }
            for entry in plan.entries
        ],
    }


def _entry_detail_json(detail: PlanEntryDetail) -> dict[str, object]:
    return {
        "recipe_id": str(detail.entry.recipe_id),
        "assigned_day": detail.entry.assigned_day,
        "is_side": detail.entry.is_side,
        "recipe": _recipe_json(detail.recipe) if detail.recipe else None,
    }


def _plan_detail_json(detail: MealPlanDetail) -> dict[str, object]:
    days = sorted(day for day in detail.by_day if day is not None)
    return {
        **_plan_json(detail.plan),
        "date_range": detail.date_range,
        "mains": [_entry_detail_json(item) for item in detail.mains],
        "sides": [_entry_detail_json(item) for item in detail.sides],
        "days": [
            {
                "day": day,
                "entries": [_entry_detail_json(item) for item in detail.by_day[day]],
            }
            for day in days
        ],
        "unassigned": [
            _entry_detail_json(item) for item in detail.by_day.get(None, [])
        ],
    }


def _usage_json(record: UsageRecord) -> dict[str, object]:
    return {
        "id": str(record.id),
        "recipe_id": str(record.recipe_id),
        "meal_plan_id": str(record.meal_plan_id) if record.meal_plan_id else None,
        "made_at": record.made_at.isoformat(),
    }
