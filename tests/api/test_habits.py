from datetime import datetime, timedelta, timezone
from unittest.mock import patch

from tests.api.base import *  # noqa: F401,F403

from app.services import habits


class HabitApiTests(ApiTestBase):
    def _create(self, **extra):
        payload = {"title": "Read Quran", "description": "One page after fajr", **extra}
        response = self.client.post("/api/habits", headers=self.headers, json=payload)
        self.assertEqual(response.status_code, 201)
        return response.json()["data"]

    def test_create_and_list_with_stats(self):
        habit = self._create()
        self._create(title="Walk", description="Around the block after asr", cadence="weekly")

        listed = self.client.get("/api/habits", params={"include_stats": "true"}, headers=self.headers)
        self.assertEqual(listed.status_code, 200)
        body = listed.json()
        self.assertEqual(body["pagination"]["total"], 2)
        stats = {row["title"]: row["stats"] for row in body["data"]}
        self.assertEqual(stats["Read Quran"]["current_streak"], 0)
        self.assertFalse(stats["Read Quran"]["completed_today"])

        weekly = self.client.get("/api/habits", params={"cadence": "weekly"}, headers=self.headers)
        self.assertEqual([row["title"] for row in weekly.json()["data"]], ["Walk"])

        searched = self.client.get("/api/habits", params={"search": "FAJR"}, headers=self.headers)
        self.assertEqual([row["id"] for row in searched.json()["data"]], [habit["id"]])

    def test_checkin_accumulates_and_updates_streak(self):
        habit = self._create(target_value=2)
        today = datetime.now(timezone.utc).date()

        yesterday = self.client.post(
            f"/api/habits/{habit['id']}/checkin",
            headers=self.headers,
            json={"log_date": (today - timedelta(days=1)).isoformat(), "value": 2},
        )
        self.assertEqual(yesterday.status_code, 201)

        first = self.client.post(f"/api/habits/{habit['id']}/checkin", headers=self.headers, json={})
        self.assertEqual(first.status_code, 201)
        self.assertEqual(first.json()["data"]["stats"]["current_streak"], 2)
        self.assertFalse(first.json()["data"]["stats"]["completed_today"])

        second = self.client.post(
            f"/api/habits/{habit['id']}/checkin", headers=self.headers, json={"value": 1, "mood_rating": 4}
        )
        self.assertEqual(second.status_code, 200)
        data = second.json()["data"]
        self.assertEqual(data["value"], 2)
        self.assertEqual(data["mood_rating"], 4)
        self.assertTrue(data["stats"]["completed_today"])
        self.assertEqual(data["stats"]["total_completions"], 2)

    def test_checkin_racing_a_concurrent_insert_adds_to_it(self):
        habit = self._create(target_value=3)
        find_checkin = habits._find_checkin
        raced = []

        def find_then_insert_rival(db, habit_id, log_date):
            if raced:
                return find_checkin(db, habit_id, log_date)
            raced.append(True)
            with self.SessionLocal() as rival:
                rival.add(HabitLog(user_id=self.user_id, habit_id=habit_id, log_date=log_date, value=1))
                rival.commit()
            return None

        with patch("app.services.habits._find_checkin", side_effect=find_then_insert_rival):
            response = self.client.post(f"/api/habits/{habit['id']}/checkin", headers=self.headers, json={"value": 2})
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["data"]["value"], 3)
        with self.SessionLocal() as db:
            self.assertEqual(db.query(HabitLog).count(), 1)

    def test_future_checkin_is_rejected(self):
        habit = self._create()
        tomorrow = datetime.now(timezone.utc).date() + timedelta(days=1)
        response = self.client.post(
            f"/api/habits/{habit['id']}/checkin", headers=self.headers, json={"log_date": tomorrow.isoformat()}
        )
        self.assertEqual(response.status_code, 400)

    def test_update_and_archive(self):
        habit = self._create()
        patched = self.client.patch(f"/api/habits/{habit['id']}", headers=self.headers, json={"title": "Read two pages"})
        self.assertEqual(patched.status_code, 200)
        self.assertEqual(patched.json()["data"]["title"], "Read two pages")

        archived = self.client.delete(f"/api/habits/{habit['id']}", headers=self.headers)
        self.assertEqual(archived.status_code, 200)

        active = self.client.get("/api/habits", params={"is_active": "true"}, headers=self.headers)
        inactive = self.client.get("/api/habits", params={"is_active": "false"}, headers=self.headers)
        self.assertEqual(active.json()["pagination"]["total"], 0)
        self.assertEqual(inactive.json()["pagination"]["total"], 1)

        checkin = self.client.post(f"/api/habits/{habit['id']}/checkin", headers=self.headers, json={})
        self.assertEqual(checkin.status_code, 400)

    def test_single_habit_includes_stats_and_is_owner_scoped(self):
        habit = self._create()
        got = self.client.get(f"/api/habits/{habit['id']}", headers=self.headers)
        self.assertEqual(got.status_code, 200)
        self.assertIn("stats", got.json()["data"])

        foreign = self.client.get(f"/api/habits/{habit['id']}", headers=self._auth_headers(uuid4()))
        self.assertEqual(foreign.status_code, 404)

    def test_invalid_filter_value_is_rejected(self):
        response = self.client.get("/api/habits", params={"cadence": "hourly"}, headers=self.headers)
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()["details"][0]["field"], "cadence")
