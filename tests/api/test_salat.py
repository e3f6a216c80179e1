from unittest.mock import patch

from tests.api.base import *  # noqa: F401,F403

from app.services import salat_logs


class SalatApiTests(ApiTestBase):
    def _log(self, prayer_name: str, prayer_date: str, **extra):
        return self.client.post(
            "/api/faith/salat",
            headers=self.headers,
            json={"prayer_name": prayer_name, "prayer_date": prayer_date, **extra},
        )

    def test_logging_same_prayer_twice_updates_the_entry(self):
        created = self._log("fajr", "2026-10-01", is_congregation=True)
        self.assertEqual(created.status_code, 201)
        self.assertEqual(created.json()["message"], "Prayer logged successfully")

        updated = self._log("fajr", "2026-10-01", status="qada")
        self.assertEqual(updated.status_code, 200)
        self.assertEqual(updated.json()["message"], "Prayer log updated successfully")
        self.assertEqual(updated.json()["data"]["id"], created.json()["data"]["id"])
        self.assertEqual(updated.json()["data"]["status"], "qada")

        with self.SessionLocal() as db:
            self.assertEqual(db.query(SalatLog).count(), 1)

    def test_log_racing_a_concurrent_insert_updates_that_row(self):
        find_log = salat_logs._find_log
        raced = []

        def find_then_insert_rival(db, user, prayer_name, prayer_date):
            if raced:
                return find_log(db, user, prayer_name, prayer_date)
            raced.append(True)
            with self.SessionLocal() as rival:
                rival.add(SalatLog(user_id=user.user_id, prayer_name=prayer_name, prayer_date=prayer_date, status="qada"))
                rival.commit()
            return None

        with patch("app.services.salat_logs._find_log", side_effect=find_then_insert_rival):
            response = self._log("fajr", "2026-10-01", is_congregation=True)
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["data"]["status"], "completed")
        self.assertTrue(response.json()["data"]["is_congregation"])
        with self.SessionLocal() as db:
            self.assertEqual(db.query(SalatLog).count(), 1)

    def test_daily_view_reports_unlogged_prayers_as_missed(self):
        self._log("fajr", "2026-10-01")
        self._log("asr", "2026-10-01", status="qada")

        response = self.client.get("/api/faith/salat", params={"date": "2026-10-01"}, headers=self.headers)
        self.assertEqual(response.status_code, 200)
        statuses = {row["prayer_name"]: row["status"] for row in response.json()["data"]}
        self.assertEqual(
            statuses,
            {"fajr": "completed", "dhuhr": "missed", "asr": "qada", "maghrib": "missed", "isha": "missed"},
        )
        self.assertEqual([row["prayer_name"] for row in response.json()["data"]], ["fajr", "dhuhr", "asr", "maghrib", "isha"])

    def test_range_listing_is_ordered_and_scoped_to_user(self):
        self._log("fajr", "2026-10-01")
        self._log("dhuhr", "2026-10-02")
        self._log("asr", "2026-10-02")
        self._log("isha", "2026-10-05")

        response = self.client.get(
            "/api/faith/salat",
            params={"start_date": "2026-10-01", "end_date": "2026-10-02"},
            headers=self.headers,
        )
        self.assertEqual(response.status_code, 200)
        body = response.json()
        self.assertEqual(body["pagination"]["total"], 3)
        self.assertEqual(
            [(row["prayer_date"], row["prayer_name"]) for row in body["data"]],
            [("2026-10-02", "asr"), ("2026-10-02", "dhuhr"), ("2026-10-01", "fajr")],
        )

        other = self.client.get("/api/faith/salat", headers=self._auth_headers(uuid4()))
        self.assertEqual(other.json()["pagination"]["total"], 0)

    def test_reversed_range_is_rejected(self):
        response = self.client.get(
            "/api/faith/salat",
            params={"start_date": "2026-10-05", "end_date": "2026-10-01"},
            headers=self.headers,
        )
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()["error"], "Invalid query parameters")

    def test_include_stats_adds_streak_and_monthly_summary(self):
        self._log("fajr", "2026-10-01")
        response = self.client.get("/api/faith/salat", params={"include_stats": "true"}, headers=self.headers)
        self.assertEqual(response.status_code, 200)
        stats = response.json()["statistics"]
        self.assertEqual(
            set(stats["streak"]),
            {"current_streak", "longest_streak", "total_prayers", "completion_rate"},
        )
        self.assertIsInstance(stats["monthly"], list)

    def test_unknown_prayer_is_rejected(self):
        response = self._log("duha", "2026-10-01")
        self.assertEqual(response.status_code, 422)

    def test_requires_session(self):
        response = self.client.get("/api/faith/salat")
        self.assertEqual(response.status_code, 401)
