from datetime import date, timedelta

import pytest

from gympro.api.endpoints.achievements import progress_percent
from gympro.db.seed import DEFAULT_ACHIEVEMENTS, seed_achievements


@pytest.fixture
async def achievements(db):
    await seed_achievements(db)


async def _complete_workout(client, owner, calories=300):
    resp = await client.post("/api/workouts/sessions", headers=owner["headers"], json={})
    session_id = resp.json()["data"]["id"]
    resp = await client.patch(
        f"/api/workouts/sessions/{session_id}/complete",
        headers=owner["headers"],
        json={"caloriesBurned": calories},
    )
    assert resp.status_code == 200, resp.text


def test_progress_percent():
    assert progress_percent(0, 5) == 0
    assert progress_percent(2, 3) == 67
    assert progress_percent(12, 5) == 100
    assert progress_percent(3, 0) == 100


async def test_first_workout_unlocks_once(client, user, achievements):
    await _complete_workout(client, user)

    resp = await client.get("/api/achievements", headers=user["headers"])
    assert resp.status_code == 200
    data = resp.json()["data"]
    assert data["totalCount"] == len(DEFAULT_ACHIEVEMENTS)
    assert data["unlockedCount"] == 1

    first, second, third = data["achievements"][:3]
    assert (first["name"], first["isUnlocked"], first["progressPercent"]) == ("First Workout", True, 100)
    assert (second["name"], second["progressPercent"]) == ("Calorie Crusher", 30)
    assert (third["name"], third["progressPercent"]) == ("Getting Started", 20)
    unlocked_at = first["unlockedAt"]

    await _complete_workout(client, user)

    mine = (await client.get("/api/achievements/mine", headers=user["headers"])).json()["data"]
    assert [a["name"] for a in mine] == ["First Workout"]
    assert mine[0]["unlockedAt"] == unlocked_at
    assert mine[0]["progress"] == 2


async def test_streak_from_workout_activity(client, user, achievements):
    today = date.today()
    for offset in (2, 1, 0):
        resp = await client.post("/api/activity/log", headers=user["headers"], json={
            "type": "WORKOUT", "value": 1, "date": (today - timedelta(days=offset)).isoformat(),
        })
        assert resp.status_code == 201

    mine = (await client.get("/api/achievements/mine", headers=user["headers"])).json()["data"]
    assert [a["name"] for a in mine] == ["3-Day Streak"]


async def test_posts_and_custom_workouts_count_toward_progress(client, user, achievements):
    await client.post("/api/posts", headers=user["headers"], json={"content": "Hello gym"})
    await client.post("/api/custom-workouts", headers=user["headers"], json={
        "name": "Core", "exercises": [{"exerciseName": "Plank", "sets": 3}],
    })

    data = (await client.get("/api/achievements", headers=user["headers"])).json()["data"]
    progress = {a["name"]: a["progress"] for a in data["achievements"]}
    assert progress["Community Star"] == 1
    assert progress["Custom Creator"] == 1
    assert data["unlockedCount"] == 0


async def test_new_user_sees_zero_progress(client, user, achievements):
    data = (await client.get("/api/achievements", headers=user["headers"])).json()["data"]
    assert data["unlockedCount"] == 0
    assert all(a["progress"] == 0 and a["unlockedAt"] is None for a in data["achievements"])
    assert (await client.get("/api/achievements/mine", headers=user["headers"])).json()["data"] == []
