from datetime import date, timedelta

from gympro.api.endpoints.activity import week_start


def test_week_starts_on_monday():
    assert week_start(date(2026, 3, 4)) == date(2026, 3, 2)
    assert week_start(date(2026, 3, 2)) == date(2026, 3, 2)
    assert week_start(date(2026, 3, 8)) == date(2026, 3, 2)


async def test_log_defaults_to_today(client, user):
    resp = await client.post("/api/activity/log", headers=user["headers"], json={
        "type": "STEPS", "value": 4000, "unit": "steps",
    })
    assert resp.status_code == 201, resp.text
    log = resp.json()["data"]
    assert log["date"] == date.today().isoformat()
    assert log["userId"] == user["id"]


async def test_log_drops_time_component(client, user):
    resp = await client.post("/api/activity/log", headers=user["headers"], json={
        "type": "WATER", "value": 2, "date": "2026-02-10T18:45:00",
    })
    assert resp.status_code == 201, resp.text
    assert resp.json()["data"]["date"] == "2026-02-10"


async def test_log_validation(client, user):
    resp = await client.post("/api/activity/log", headers=user["headers"], json={"type": "SLEEP", "value": 8})
    assert resp.status_code == 422

    resp = await client.post("/api/activity/log", headers=user["headers"], json={"type": "STEPS", "value": 0})
    assert resp.status_code == 422
    assert resp.json()["error"].startswith("value:")


async def test_summary_totals_today_and_week(client, user):
    today = date.today()
    for value in (3000, 2500):
        await client.post("/api/activity/log", headers=user["headers"], json={"type": "STEPS", "value": value})
    await client.post("/api/activity/log", headers=user["headers"], json={"type": "WATER", "value": 1.5})
    # last week never counts
    await client.post("/api/activity/log", headers=user["headers"], json={
        "type": "STEPS", "value": 9999, "date": (week_start(today) - timedelta(days=1)).isoformat(),
    })

    resp = await client.get("/api/activity/summary", headers=user["headers"])
    assert resp.status_code == 200
    summary = resp.json()["data"]
    assert summary["today"] == {"STEPS": 5500, "WORKOUT": 0, "CALORIES_BURNED": 0, "WATER": 1.5}
    assert summary["weekly"]["STEPS"] == 5500
    assert summary["weeklyDaily"][today.isoformat()]["STEPS"] == 5500
    assert len(summary["weeklyDaily"]) == 1


async def test_history_is_filtered_and_private(client, user, create_user):
    await client.post("/api/activity/log", headers=user["headers"], json={"type": "STEPS", "value": 100})
    await client.post("/api/activity/log", headers=user["headers"], json={"type": "WATER", "value": 1})

    resp = await client.get("/api/activity/history", headers=user["headers"], params={"type": "WATER"})
    page = resp.json()["data"]
    assert page["total"] == 1
    assert page["data"][0]["type"] == "WATER"

    other = await create_user("other@example.com")
    resp = await client.get("/api/activity/history", headers=other["headers"])
    assert resp.json()["data"]["total"] == 0
