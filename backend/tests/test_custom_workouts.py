PUSH_DAY = {
    "name": "Push Day",
    "description": "Chest, shoulders, triceps",
    "exercises": [
        {"exerciseName": "Bench Press", "sets": 4, "reps": 8, "weight": 60},
        {"exerciseName": "Overhead Press", "sets": 3, "reps": 10, "restSeconds": 90},
        {"exerciseName": "Dips", "sets": 3},
    ],
}


async def _create(client, owner, body=PUSH_DAY):
    resp = await client.post("/api/custom-workouts", headers=owner["headers"], json=body)
    assert resp.status_code == 201, resp.text
    return resp.json()["data"]


async def test_create_keeps_exercise_order(client, user):
    workout = await _create(client, user)
    assert workout["isPublic"] is False
    names = [e["exerciseName"] for e in workout["exercises"]]
    assert names == ["Bench Press", "Overhead Press", "Dips"]
    assert [e["sortOrder"] for e in workout["exercises"]] == [0, 1, 2]

    resp = await client.get("/api/custom-workouts", headers=user["headers"])
    [summary] = resp.json()["data"]["data"]
    assert summary["exerciseCount"] == 3


async def test_workout_needs_at_least_one_valid_exercise(client, user):
    resp = await client.post("/api/custom-workouts", headers=user["headers"], json={**PUSH_DAY, "exercises": []})
    assert resp.status_code == 422

    bad = {**PUSH_DAY, "exercises": [{"exerciseName": "Squat", "sets": 0}]}
    resp = await client.post("/api/custom-workouts", headers=user["headers"], json=bad)
    assert resp.status_code == 422
    assert "exercises.0.sets:" in resp.json()["error"]


async def test_update_replaces_exercises(client, user):
    workout = await _create(client, user)

    resp = await client.put(f"/api/custom-workouts/{workout['id']}", headers=user["headers"], json={
        "name": "Push Day v2",
        "exercises": [{"exerciseName": "Push-ups", "sets": 5, "reps": 20}],
    })
    assert resp.status_code == 200, resp.text
    updated = resp.json()["data"]
    assert updated["name"] == "Push Day v2"
    assert updated["description"] == PUSH_DAY["description"]
    assert [e["exerciseName"] for e in updated["exercises"]] == ["Push-ups"]


async def test_private_workouts_are_hidden_from_others(client, user, create_user):
    workout = await _create(client, user)
    other = await create_user("other@example.com")

    resp = await client.get(f"/api/custom-workouts/{workout['id']}", headers=other["headers"])
    assert resp.status_code == 404

    await client.put(f"/api/custom-workouts/{workout['id']}", headers=user["headers"], json={"isPublic": True})
    resp = await client.get(f"/api/custom-workouts/{workout['id']}", headers=other["headers"])
    assert resp.status_code == 200

    resp = await client.put(f"/api/custom-workouts/{workout['id']}", headers=other["headers"], json={"name": "Mine"})
    assert resp.status_code == 403
    resp = await client.delete(f"/api/custom-workouts/{workout['id']}", headers=other["headers"])
    assert resp.status_code == 403


async def test_delete_custom_workout(client, user):
    workout = await _create(client, user)
    resp = await client.delete(f"/api/custom-workouts/{workout['id']}", headers=user["headers"])
    assert resp.status_code == 200
    resp = await client.get(f"/api/custom-workouts/{workout['id']}", headers=user["headers"])
    assert resp.status_code == 404
