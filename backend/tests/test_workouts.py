from gympro.api.endpoints.workouts import slugify


async def _category(client, admin, name="Strength Training"):
    resp = await client.post("/api/workouts/categories", headers=admin["headers"], json={"name": name})
    assert resp.status_code == 201, resp.text
    return resp.json()["data"]


async def _video(client, admin, category_id, **overrides):
    body = {
        "title": "Full Body Blast",
        "description": "Thirty minutes of compound lifts",
        "videoUrl": "https://videos.example.com/full-body.mp4",
        "duration": 1800,
        "difficulty": "INTERMEDIATE",
        "categoryId": category_id,
        "equipmentNeeded": ["dumbbells", "mat"],
        "caloriesBurned": 300,
        **overrides,
    }
    resp = await client.post("/api/workouts/videos", headers=admin["headers"], json=body)
    assert resp.status_code == 201, resp.text
    return resp.json()["data"]


def test_slugify():
    assert slugify("  Yoga & Flexibility ") == "yoga-flexibility"
    assert slugify("HIIT_Cardio  Burn") == "hiit-cardio-burn"


async def test_categories_are_ordered_and_counted(client, admin):
    first = await _category(client, admin)
    second = await _category(client, admin, "Yoga & Flexibility")
    assert (first["sortOrder"], second["sortOrder"]) == (0, 1)
    assert second["slug"] == "yoga-flexibility"

    await _video(client, admin, first["id"])
    hidden = await _video(client, admin, first["id"], title="Draft")
    await client.put(f"/api/workouts/videos/{hidden['id']}", headers=admin["headers"], json={"isPublished": False})

    resp = await client.get("/api/workouts/categories")
    counts = {c["slug"]: c["videoCount"] for c in resp.json()["data"]}
    assert counts == {"strength-training": 1, "yoga-flexibility": 0}

    resp = await client.get("/api/workouts/categories/strength-training")
    assert [v["title"] for v in resp.json()["data"]["videos"]] == ["Full Body Blast"]

    resp = await client.post("/api/workouts/categories", headers=admin["headers"], json={"name": "Strength training"})
    assert resp.status_code == 409


async def test_category_with_videos_cannot_be_deleted(client, admin):
    category = await _category(client, admin)
    await _video(client, admin, category["id"])
    resp = await client.delete(f"/api/workouts/categories/{category['id']}", headers=admin["headers"])
    assert resp.status_code == 400


async def test_video_filters_and_view_count(client, admin):
    category = await _category(client, admin)
    video = await _video(client, admin, category["id"])
    await _video(client, admin, category["id"], title="Gentle Start", difficulty="BEGINNER")

    resp = await client.get("/api/workouts/videos", params={"difficulty": "BEGINNER"})
    assert [v["title"] for v in resp.json()["data"]["data"]] == ["Gentle Start"]

    resp = await client.get("/api/workouts/videos", params={"search": "compound"})
    assert [v["title"] for v in resp.json()["data"]["data"]] == ["Full Body Blast"]

    await client.get(f"/api/workouts/videos/{video['id']}")
    resp = await client.get(f"/api/workouts/videos/{video['id']}")
    assert resp.json()["data"]["viewCount"] == 1
    assert resp.json()["data"]["category"]["slug"] == "strength-training"

    related = await client.get(f"/api/workouts/videos/{video['id']}/related")
    assert [v["title"] for v in related.json()["data"]] == ["Gentle Start"]


async def test_only_admins_publish_videos(client, user, admin):
    category = await _category(client, admin)
    resp = await client.post("/api/workouts/videos", headers=user["headers"], json={
        "title": "Mine", "videoUrl": "https://videos.example.com/x.mp4", "duration": 60,
        "difficulty": "BEGINNER", "categoryId": category["id"],
    })
    assert resp.status_code == 403


async def test_session_lifecycle_and_history(client, user, admin):
    category = await _category(client, admin)
    video = await _video(client, admin, category["id"])

    resp = await client.post("/api/workouts/sessions", headers=user["headers"], json={"videoId": video["id"]})
    assert resp.status_code == 201, resp.text
    session = resp.json()["data"]
    assert session["completedAt"] is None
    assert session["video"]["title"] == "Full Body Blast"

    resp = await client.patch(
        f"/api/workouts/sessions/{session['id']}/complete",
        headers=user["headers"],
        json={"duration": 1500, "caloriesBurned": 250},
    )
    assert resp.status_code == 200, resp.text
    assert resp.json()["data"]["completedAt"] is not None

    resp = await client.patch(f"/api/workouts/sessions/{session['id']}/complete", headers=user["headers"])
    assert resp.status_code == 400
    assert resp.json()["error"] == "Session already completed"

    await client.post("/api/workouts/sessions", headers=user["headers"], json={})

    history = (await client.get("/api/workouts/history", headers=user["headers"])).json()["data"]
    assert history == {"totalWorkouts": 2, "completedWorkouts": 1, "totalDuration": 1500, "totalCalories": 250}

    sessions = (await client.get("/api/workouts/sessions", headers=user["headers"])).json()["data"]
    assert sessions["total"] == 2


async def test_sessions_are_private(client, user, create_user):
    resp = await client.post("/api/workouts/sessions", headers=user["headers"], json={})
    session_id = resp.json()["data"]["id"]

    other = await create_user("other@example.com")
    resp = await client.patch(f"/api/workouts/sessions/{session_id}/complete", headers=other["headers"])
    assert resp.status_code == 404


async def test_session_references_are_checked(client, user, create_user):
    resp = await client.post("/api/workouts/sessions", headers=user["headers"], json={"videoId": "missing"})
    assert resp.status_code == 404

    other = await create_user("other@example.com")
    resp = await client.post("/api/custom-workouts", headers=other["headers"], json={
        "name": "Secret", "exercises": [{"exerciseName": "Plank", "sets": 3}],
    })
    private_id = resp.json()["data"]["id"]
    resp = await client.post("/api/workouts/sessions", headers=user["headers"], json={"customWorkoutId": private_id})
    assert resp.status_code == 404


async def test_video_update_rejects_null_for_required_fields(client, admin):
    category = await _category(client, admin)
    video = await _video(client, admin, category["id"])

    for body in ({"title": None}, {"duration": None}, {"isPublished": None}, {"categoryId": None}):
        resp = await client.put(f"/api/workouts/videos/{video['id']}", headers=admin["headers"], json=body)
        assert resp.status_code == 422, body

    resp = await client.put(
        f"/api/workouts/videos/{video['id']}", headers=admin["headers"], json={"caloriesBurned": None},
    )
    assert resp.status_code == 200
    assert resp.json()["data"]["caloriesBurned"] is None
    assert resp.json()["data"]["title"] == "Full Body Blast"
