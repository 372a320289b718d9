"""Tests for the JSON API blueprints."""

from __future__ import annotations

from datetime import date

import pytest


def _create(client, **overrides):
    payload = {"name": "Meditate", "category": "Personal Development", "frequency": "daily"}
    payload.update(overrides)
    response = client.post("/api/habits", json=payload)
    assert response.status_code == 201, response.get_json()
    return response.get_json()


class TestHabitEndpoints:
    def test_create_and_fetch(self, client):
        created = _create(client, reminderTime="07:30", customSchedule=None)
        assert created["frequency"] == "daily"
        assert created["reminderTime"] == "07:30"
        assert created["isActive"] is True

        response = client.get(f"/api/habits/{created['id']}")
        assert response.status_code == 200
        assert response.get_json()["name"] == "Meditate"

    @pytest.mark.parametrize(
        "payload",
        [
            {"name": "", "category": "x", "frequency": "daily"},
            {"name": "Run", "category": "x", "frequency": "monthly"},
            {"name": "Run", "category": "x", "frequency": "daily", "reminderTime": "25:00"},
            {"category": "x", "frequency": "daily"},
        ],
    )
    def test_create_validation_errors(self, client, payload):
        response = client.post("/api/habits", json=payload)
        assert response.status_code == 400
        body = response.get_json()
        assert body["message"] == "Invalid request data"
        assert body["errors"]

    def test_missing_habit_is_404(self, client):
        response = client.get("/api/habits/does-not-exist")
        assert response.status_code == 404
        assert response.get_json() == {"message": "Habit not found"}

    def test_list_includes_derived_stats(self, client):
        habit = _create(client)
        today = date.today().isoformat()
        client.post(f"/api/habits/{habit['id']}/completions", json={"date": today})

        (item,) = client.get("/api/habits").get_json()

        assert item["completedToday"] is True
        assert item["scheduledToday"] is True
        assert item["streak"]["currentStreak"] == 1
        assert item["completions"][0]["date"] == today

    def test_patch_and_delete(self, client):
        habit = _create(client)

        patched = client.patch(f"/api/habits/{habit['id']}", json={"name": "Breathe", "frequency": "weekly"})
        assert patched.status_code == 200
        assert patched.get_json()["name"] == "Breathe"
        assert patched.get_json()["frequency"] == "weekly"
        assert patched.get_json()["category"] == "Personal Development"

        assert client.delete(f"/api/habits/{habit['id']}").status_code == 204
        assert client.get("/api/habits").get_json() == []
        assert client.delete("/api/habits/unknown").status_code == 404

    def test_patch_rejects_null_name(self, client):
        habit = _create(client)
        response = client.patch(f"/api/habits/{habit['id']}", json={"name": None})
        assert response.status_code == 400
        assert "name" in response.get_json()["errors"]


class TestCompletionEndpoints:
    def test_add_list_remove(self, client):
        habit = _create(client)
        url = f"/api/habits/{habit['id']}/completions"
        for day in ("2024-03-01", "2024-03-02", "2024-03-03"):
            response = client.post(url, json={"date": day, "notes": "done"})
            assert response.status_code == 201

        body = response.get_json()
        assert body["date"] == "2024-03-03"
        assert body["streak"] == {"currentStreak": 3, "longestStreak": 3, "lastCompletedDate": "2024-03-03"}

        listed = client.get(url, query_string={"startDate": "2024-03-02"}).get_json()
        assert [c["date"] for c in listed] == ["2024-03-03", "2024-03-02"]

        assert client.delete(f"{url}/2024-03-02").status_code == 204
        assert client.delete(f"{url}/2024-03-02").status_code == 404

    def test_duplicate_is_conflict(self, client):
        habit = _create(client)
        url = f"/api/habits/{habit['id']}/completions"
        assert client.post(url, json={"date": "2024-03-01"}).status_code == 201
        assert client.post(url, json={"date": "2024-03-01"}).status_code == 409

    @pytest.mark.parametrize("value", ["03/01/2024", "2024-3-1", 20240301, None])
    def test_malformed_date(self, client, value):
        habit = _create(client)
        response = client.post(f"/api/habits/{habit['id']}/completions", json={"date": value})
        assert response.status_code == 400

    def test_malformed_date_in_path(self, client):
        habit = _create(client)
        response = client.delete(f"/api/habits/{habit['id']}/completions/yesterday")
        assert response.status_code == 400
        assert response.get_json()["field"] == "date"

    def test_calendar(self, client):
        habit = _create(client, frequency="weekly")
        client.post(f"/api/habits/{habit['id']}/completions", json={"date": "2024-03-04"})

        body = client.get(f"/api/habits/{habit['id']}/calendar", query_string={"month": "2024-03"}).get_json()

        assert body["month"] == "2024-03"
        assert len(body["days"]) == 31
        assert body["days"][3] == {"date": "2024-03-04", "status": "completed"}

    def test_calendar_bad_month(self, client):
        habit = _create(client)
        response = client.get(f"/api/habits/{habit['id']}/calendar", query_string={"month": "March"})
        assert response.status_code == 400

    def test_calendar_year_zero(self, client):
        habit = _create(client)
        response = client.get(f"/api/habits/{habit['id']}/calendar", query_string={"month": "0000-01"})
        assert response.status_code == 400
        assert response.get_json()["field"] == "month"


class TestAnalyticsEndpoints:
    def test_daily_stats_requires_range(self, client):
        response = client.get("/api/analytics/daily-stats", query_string={"startDate": "2024-01-01"})
        assert response.status_code == 400
        assert response.get_json()["message"] == "startDate and endDate are required"

    def test_daily_stats_empty(self, client):
        response = client.get(
            "/api/analytics/daily-stats",
            query_string={"startDate": "2024-01-01", "endDate": "2024-01-03"},
        )
        assert response.status_code == 200
        assert response.get_json() == [
            {"date": f"2024-01-0{i}", "totalHabits": 0, "completedHabits": 0, "completionRate": 0}
            for i in (1, 2, 3)
        ]

    def test_daily_stats_bad_date(self, client):
        response = client.get(
            "/api/analytics/daily-stats",
            query_string={"startDate": "2024-01-01", "endDate": "soon"},
        )
        assert response.status_code == 400
        assert response.get_json()["field"] == "endDate"

    def test_today_summary(self, client):
        _create(client)
        body = client.get("/api/analytics/today").get_json()
        assert body == {"total": 1, "completed": 0, "completionRate": 0, "longestStreak": 0}


class TestNotificationEndpoints:
    def test_create_list_mark_read(self, client):
        response = client.post(
            "/api/notifications",
            json={"title": "Reminder", "message": "Time to stretch", "type": "reminder"},
        )
        assert response.status_code == 201
        created = response.get_json()
        assert created["isRead"] is False

        assert client.patch(f"/api/notifications/{created['id']}/read").status_code == 204
        (listed,) = client.get("/api/notifications", query_string={"limit": "5"}).get_json()
        assert listed["isRead"] is True

    def test_invalid_type(self, client):
        response = client.post(
            "/api/notifications", json={"title": "x", "message": "y", "type": "push"}
        )
        assert response.status_code == 400

    def test_bad_limit(self, client):
        assert client.get("/api/notifications", query_string={"limit": "ten"}).status_code == 400

    def test_mark_missing(self, client):
        assert client.patch("/api/notifications/999/read").status_code == 404
