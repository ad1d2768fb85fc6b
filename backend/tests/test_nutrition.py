from gympro.services.nutrition_service import COMMON_FOODS, search_foods

PLAN = {
    "name": "Cutting day",
    "date": "2026-03-02",
    "targetCalories": 2000,
    "meals": [
        {
            "type": "BREAKFAST",
            "name": "Oats",
            "items": [
                {"name": "Oatmeal", "calories": 154, "protein": 5, "carbs": 27, "fat": 2.6},
                {"name": "Banana", "calories": 105, "protein": 1.3, "carbs": 27, "fat": 0.4},
            ],
        },
        {
            "type": "LUNCH",
            "name": "Chicken bowl",
            "items": [{"name": "Chicken Breast", "calories": 165, "protein": 31, "fat": 3.6}],
        },
    ],
}


async def _create_plan(client, owner, body=PLAN):
    resp = await client.post("/api/nutrition/meal-plans", headers=owner["headers"], json=body)
    assert resp.status_code == 201, resp.text
    return resp.json()["data"]


def test_search_foods_is_case_insensitive():
    names = [f["name"] for f in search_foods("RICE")]
    assert names == ["White Rice", "Brown Rice"]
    assert search_foods("zzz") == []
    assert len(COMMON_FOODS) == 30


async def test_create_plan_keeps_meal_order(client, user):
    plan = await _create_plan(client, user)
    assert plan["targetCalories"] == 2000
    assert [m["type"] for m in plan["meals"]] == ["BREAKFAST", "LUNCH"]
    assert [i["name"] for i in plan["meals"][0]["items"]] == ["Oatmeal", "Banana"]


async def test_daily_summary_totals(client, user):
    await _create_plan(client, user)

    resp = await client.get("/api/nutrition/daily-summary", headers=user["headers"], params={"date": "2026-03-02"})
    assert resp.status_code == 200
    summary = resp.json()["data"]
    assert summary["totalCalories"] == 424
    assert summary["totalProtein"] == 37.3
    assert summary["totalCarbs"] == 54.0
    assert summary["totalFat"] == 6.6
    assert summary["targetCalories"] == 2000
    assert summary["mealPlan"]["name"] == "Cutting day"


async def test_daily_summary_without_plan_is_zero(client, user):
    resp = await client.get("/api/nutrition/daily-summary", headers=user["headers"], params={"date": "2026-01-01"})
    summary = resp.json()["data"]
    assert summary["mealPlan"] is None
    assert summary["totalCalories"] == 0
    assert summary["meals"] == []


async def test_add_meal_appends_to_plan(client, user):
    plan = await _create_plan(client, user)

    resp = await client.post("/api/nutrition/meals", headers=user["headers"], json={
        "mealPlanId": plan["id"],
        "type": "SNACK",
        "name": "Shake",
        "items": [{"name": "Whey Protein", "calories": 120, "protein": 24}],
    })
    assert resp.status_code == 201, resp.text
    assert resp.json()["data"]["sortOrder"] == 2

    resp = await client.get(f"/api/nutrition/meal-plans/{plan['id']}", headers=user["headers"])
    assert [m["name"] for m in resp.json()["data"]["meals"]] == ["Oats", "Chicken bowl", "Shake"]


async def test_update_replaces_meals(client, user):
    plan = await _create_plan(client, user)
    resp = await client.put(f"/api/nutrition/meal-plans/{plan['id']}", headers=user["headers"], json={
        "meals": [{"type": "DINNER", "name": "Salmon", "items": [{"name": "Salmon", "calories": 208}]}],
    })
    assert resp.status_code == 200, resp.text
    updated = resp.json()["data"]
    assert updated["name"] == "Cutting day"
    assert [m["name"] for m in updated["meals"]] == ["Salmon"]


async def test_plans_are_private(client, user, create_user):
    plan = await _create_plan(client, user)
    other = await create_user("other@example.com")

    resp = await client.get(f"/api/nutrition/meal-plans/{plan['id']}", headers=other["headers"])
    assert resp.status_code == 403
    resp = await client.delete(f"/api/nutrition/meal-plans/{plan['id']}", headers=other["headers"])
    assert resp.status_code == 403
    resp = await client.post("/api/nutrition/meals", headers=other["headers"], json={
        "mealPlanId": plan["id"], "type": "SNACK", "name": "Sneaky",
    })
    assert resp.status_code == 403

    resp = await client.delete(f"/api/nutrition/meal-plans/{plan['id']}", headers=user["headers"])
    assert resp.status_code == 200


async def test_invalid_meal_type_rejected(client, user):
    body = {**PLAN, "meals": [{"type": "BRUNCH", "name": "Late"}]}
    resp = await client.post("/api/nutrition/meal-plans", headers=user["headers"], json=body)
    assert resp.status_code == 422


async def test_food_search(client, user):
    resp = await client.get("/api/nutrition/food-search", headers=user["headers"], params={"q": "egg"})
    assert resp.status_code == 200
    assert [f["name"] for f in resp.json()["data"]] == ["Eggs"]

    resp = await client.get("/api/nutrition/food-search", headers=user["headers"], params={"q": "e"})
    assert resp.status_code == 422
    assert resp.json()["error"] == "Search query must be at least 2 characters"

    resp = await client.get("/api/nutrition/food-search", params={"q": "egg"})
    assert resp.status_code == 401
