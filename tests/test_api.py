"""Tests for the HTTP API."""

from uuid import uuid4

from fastapi.testclient import TestClient

from recipe_planner.api.app import create_app
from tests.conftest import (
    InMemoryMealPlanRepository,
    InMemoryRecipeRepository,
    InMemoryUsageRepository,
    make_recipe,
)


def test_health(container) -> None:
    client = TestClient(create_app(container))

    response = client.get("/health")

    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_recipe_crud(container) -> None:
    client = TestClient(create_app(container))

    created = client.post(
        "/recipes",
        json={
            "link": "https://example.com/ramen",
            "name": "Ramen",
            "cuisine": "Japanese",
            "meal_types": ["dinner"],
        },
    )
    assert created.status_code == 201
    recipe_id = created.json()["id"]
    assert created.json()["is_side"] is False

    favorite = client.post(f"/recipes/{recipe_id}/favorite", json={})
    assert favorite.json()["is_favorite"] is True

    listed = client.get("/recipes", params={"favorites_only": "true"})
    assert [item["name"] for item in listed.json()["recipes"]] == ["Ramen"]
    assert client.get("/recipes/cuisines").json() == {"cuisines": ["Japanese"]}
    assert client.get("/recipes/meal-types").json() == {"meal_types": ["dinner"]}

    deleted = client.delete(f"/recipes/{recipe_id}")
    assert deleted.status_code == 204
    assert client.get(f"/recipes/{recipe_id}").status_code == 404


def test_recipe_validation_error(container) -> None:
    client = TestClient(create_app(container))

    response = client.post(
        "/recipes", json={"link": "https://example.com/x", "meal_types": ["brunch"]}
    )

    assert response.status_code == 422
    assert "brunch" in response.json()["detail"]


def test_wizard_flow_creates_plan(
    container,
    recipe_repository: InMemoryRecipeRepository,
    plan_repository: InMemoryMealPlanRepository,
    usage_repository: InMemoryUsageRepository,
) -> None:
    main_a, main_b = make_recipe("A"), make_recipe("B")
    side = make_recipe("Slaw", meal_types=("sides",))
    recipe_repository.add(main_a, main_b, side)
    client = TestClient(create_app(container))

    started = client.post("/meal-plans/new")
    assert started.status_code == 201
    wizard_id = started.json()["wizard_id"]
    assert started.json()["step"] == "days"
    assert started.json()["query"]["numDays"] == "7"

    query = {"numDays": "5", "startDate": "2024-06-01"}
    days = client.post(f"/meal-plans/new/{wizard_id}/days/next", params=query)
    assert days.status_code == 200
    assert days.json()["step"] == "recipes"
    assert days.json()["date_range"] == "Jun 1 – Jun 5, 2024"
    recommended = [item["name"] for item in days.json()["recommendations"]]
    assert recommended == ["A", "B", "Slaw"]

    blocked = client.post(f"/meal-plans/new/{wizard_id}/recipes/next", params=query)
    assert blocked.status_code == 422
    assert blocked.json()["detail"] == "Select at least one recipe"

    query["recipeIds"] = f"{main_a.id},{main_b.id}"
    sides = client.post(f"/meal-plans/new/{wizard_id}/recipes/next", params=query)
    assert sides.json()["step"] == "sides"
    assert [item["name"] for item in sides.json()["recommendations"]] == ["Slaw"]
    assert sides.json()["recommendations"][0]["is_side"] is True

    query["sideIds"] = str(side.id)
    review = client.post(f"/meal-plans/new/{wizard_id}/sides/next", params=query)
    assert review.json()["step"] == "review"
    assert review.json()["can_advance"] is False
    assert [item["recipe"]["name"] for item in review.json()["recipes"]] == ["A", "B"]

    back = client.post(f"/meal-plans/new/{wizard_id}/review/back", params=query)
    assert back.json()["step"] == "sides"
    assert back.json()["side_ids"] == [str(side.id)]

    created = client.post(f"/meal-plans/new/{wizard_id}/create", params=query)
    assert created.status_code == 201
    plan_id = created.json()["plan_id"]

    detail = client.get(f"/meal-plans/{plan_id}").json()
    assert detail["end_date"] == "2024-06-05"
    assert detail["status"] == "active"
    assert len(detail["mains"]) == 2
    assert len(detail["sides"]) == 1
    assert len(detail["unassigned"]) == 3
    assert detail["days"] == []
    assert plan_repository.count() == 1
    assert usage_repository.records == []


def test_wizard_step_rejects_bad_query(container) -> None:
    client = TestClient(create_app(container))

    unknown_step = client.get("/meal-plans/new/abc12345/dessert")
    bad_date = client.get(
        "/meal-plans/new/abc12345/days", params={"startDate": "June 1"}
    )
    bad_ids = client.get(
        "/meal-plans/new/abc12345/recipes", params={"recipeIds": "not-a-uuid"}
    )

    assert unknown_step.status_code == 422
    assert bad_date.status_code == 422
    assert bad_ids.status_code == 422


def test_wizard_step_clamps_num_days(container) -> None:
    client = TestClient(create_app(container))

    response = client.get(
        "/meal-plans/new/abc12345/days",
        params={"numDays": "30", "startDate": "2024-06-01"},
    )

    assert response.status_code == 200
    assert response.json()["num_days"] == 14
    assert response.json()["end_date"] == "2024-06-14"


def test_plan_editing_endpoints(
    container, recipe_repository: InMemoryRecipeRepository
) -> None:
    main = make_recipe("A")
    recipe_repository.add(main)
    client = TestClient(create_app(container))
    plan = client.post(
        "/meal-plans",
        json={"start_date": "2024-06-01", "num_days": 3, "recipe_ids": [str(main.id)]},
    ).json()

    assigned = client.put(
        f"/meal-plans/{plan['id']}/entries/{main.id}/day", json={"day": 2}
    )
    assert assigned.json()["entries"][0]["assigned_day"] == 2

    out_of_range = client.put(
        f"/meal-plans/{plan['id']}/entries/{main.id}/day", json={"day": 4}
    )
    assert out_of_range.status_code == 422

    made = client.post(f"/meal-plans/{plan['id']}/entries/{main.id}/made")
    assert made.status_code == 201
    assert made.json()["meal_plan_id"] == plan["id"]
    usage = client.get(f"/recipes/{main.id}/usage").json()
    assert usage["usage_count"] == 1

    completed = client.patch(f"/meal-plans/{plan['id']}", json={"status": "completed"})
    assert completed.json()["status"] == "completed"
    assert client.patch(f"/meal-plans/{plan['id']}", json={}).status_code == 422

    listed = client.get("/meal-plans", params={"status": "completed"}).json()
    assert [item["id"] for item in listed["plans"]] == [plan["id"]]

    assert client.delete(f"/meal-plans/{plan['id']}").status_code == 204
    assert client.get(f"/meal-plans/{plan['id']}").status_code == 404
    assert client.get(f"/recipes/{main.id}/usage").json()["usage_count"] == 1


def test_missing_plan_returns_404(container) -> None:
    client = TestClient(create_app(container))

    response = client.post(f"/meal-plans/{uuid4()}/entries/{uuid4()}/made")

    assert response.status_code == 404


def test_rejected_plan_patch_keeps_entries(
    container, recipe_repository: InMemoryRecipeRepository
) -> None:
    main = make_recipe("A")
    recipe_repository.add(main)
    client = TestClient(create_app(container))
    plan = client.post(
        "/meal-plans",
        json={"start_date": "2024-06-01", "num_days": 3, "recipe_ids": [str(main.id)]},
    ).json()

    response = client.patch(
        f"/meal-plans/{plan['id']}",
        json={
            "status": "archived",
            "entries": [{"recipe_id": str(main.id), "assigned_day": 2}],
        },
    )

    assert response.status_code == 422
    detail = client.get(f"/meal-plans/{plan['id']}").json()
    assert detail["status"] == "active"
    assert detail["entries"][0]["assigned_day"] is None


def test_wizard_create_requires_recipes(
    container, plan_repository: InMemoryMealPlanRepository
) -> None:
    client = TestClient(create_app(container))

    response = client.post(
        "/meal-plans/new/abc12345/create",
        params={"numDays": "3", "startDate": "2024-06-01"},
    )

    assert response.status_code == 422
    assert response.json()["detail"] == "Select at least one recipe"
    assert plan_repository.count() == 0


def test_restaurant_endpoints(container) -> None:
    client = TestClient(create_app(container))

    created = client.post(
        "/restaurants",
        json={
            "link": "https://example.com/laksa-king",
            "name": "Laksa King",
            "suburb": "Flemington",
            "cuisine": "Malaysian",
            "meal_types": ["lunch"],
            "dishes": [{"name": "Curry Laksa", "rating": 5}],
        },
    )
    assert created.status_code == 201
    restaurant_id = created.json()["id"]
    assert created.json()["dishes"] == [{"name": "Curry Laksa", "rating": 5}]

    favorite = client.post(f"/restaurants/{restaurant_id}/favorite")
    assert favorite.json()["is_favorite"] is True

    listed = client.get("/restaurants", params={"suburb": "Flemington"}).json()
    assert [item["name"] for item in listed["restaurants"]] == ["Laksa King"]
    assert client.get("/restaurants/suburbs").json() == {"suburbs": ["Flemington"]}
    assert client.get("/restaurants/cuisines").json() == {"cuisines": ["Malaysian"]}
    assert client.get("/restaurants/meal-types").json() == {"meal_types": ["lunch"]}

    bad_rating = client.put(
        f"/restaurants/{restaurant_id}",
        json={
            "link": "https://example.com/laksa-king",
            "suburb": "Flemington",
            "dishes": [{"name": "Curry Laksa", "rating": 9}],
        },
    )
    assert bad_rating.status_code == 422

    assert client.delete(f"/restaurants/{restaurant_id}").status_code == 204
    assert client.get(f"/restaurants/{restaurant_id}").status_code == 404
