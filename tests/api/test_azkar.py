from unittest.mock import patch

from tests.api.base import *  # noqa: F401,F403


class AzkarApiTests(ApiTestBase):
    def setUp(self):
        super().setUp()
        with self.SessionLocal() as db:
            morning = Azkar(
                type="morning",
                title_english="Morning remembrance",
                text_arabic="أَصْبَحْنَا وَأَصْبَحَ الْمُلْكُ لِلَّهِ",
                text_english="We have entered the morning",
                repetition_count=1,
            )
            evening = Azkar(
                type="evening",
                title_english="Evening remembrance",
                text_arabic="أَمْسَيْنَا وَأَمْسَى الْمُلْكُ لِلَّهِ",
                text_english="We have entered the evening",
                repetition_count=3,
            )
            db.add_all([morning, evening])
            db.commit()
            self.morning_id = morning.id
            self.evening_id = evening.id

    def test_azkar_list_is_public_and_filterable(self):
        response = self.client.get("/api/faith/azkar", params={"type": "morning"})
        self.assertEqual(response.status_code, 200)
        body = response.json()
        self.assertEqual(body["pagination"]["total"], 1)
        self.assertEqual(body["data"][0]["title_english"], "Morning remembrance")

    def test_types_action_lists_distinct_types(self):
        response = self.client.get("/api/faith/azkar", params={"action": "types"})
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["data"], ["evening", "morning"])

    def test_unknown_action_is_rejected(self):
        response = self.client.get("/api/faith/azkar", params={"action": "everything"})
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()["detail"], "Invalid action")

    def test_reminders_action_requires_session(self):
        response = self.client.get("/api/faith/azkar", params={"action": "reminders"})
        self.assertEqual(response.status_code, 401)

    def test_azkar_limit_is_capped_at_fifty(self):
        response = self.client.get("/api/faith/azkar", params={"limit": 60})
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()["error"], "Invalid pagination")

    def test_reminder_lifecycle(self):
        created = self.client.post(
            "/api/faith/azkar",
            params={"action": "reminder"},
            headers=self.headers,
            json={"azkar_id": str(self.morning_id), "reminder_time": "7:05", "days_of_week": [5, 1, 1]},
        )
        self.assertEqual(created.status_code, 201)
        reminder = created.json()["data"]
        self.assertEqual(reminder["reminder_time"], "07:05")
        self.assertEqual(reminder["days_of_week"], [1, 5])

        duplicate = self.client.post(
            "/api/faith/azkar",
            params={"action": "reminder"},
            headers=self.headers,
            json={"azkar_id": str(self.morning_id), "reminder_time": "07:05"},
        )
        self.assertEqual(duplicate.status_code, 409)

        listed = self.client.get("/api/faith/azkar", params={"action": "reminders"}, headers=self.headers)
        self.assertEqual(listed.status_code, 200)
        rows = listed.json()["data"]
        self.assertEqual(len(rows), 1)
        self.assertEqual(rows[0]["azkar"]["title_english"], "Morning remembrance")

        other_user = self.client.get(
            "/api/faith/azkar", params={"action": "reminders"}, headers=self._auth_headers(uuid4())
        )
        self.assertEqual(other_user.json()["data"], [])

        removed = self.client.delete(f"/api/faith/azkar/reminders/{reminder['id']}", headers=self.headers)
        self.assertEqual(removed.status_code, 200)
        again = self.client.delete(f"/api/faith/azkar/reminders/{reminder['id']}", headers=self.headers)
        self.assertEqual(again.status_code, 404)

    def test_public_actions_ignore_a_stale_token(self):
        stale = {"Authorization": "Bearer not-a-jwt"}
        for action in ("types", "azkar"):
            with self.subTest(action=action):
                response = self.client.get("/api/faith/azkar", params={"action": action}, headers=stale)
                self.assertEqual(response.status_code, 200)

        reminders = self.client.get("/api/faith/azkar", params={"action": "reminders"}, headers=stale)
        self.assertEqual(reminders.status_code, 401)

    def test_reminder_racing_a_concurrent_insert_is_a_conflict(self):
        raced = []

        def insert_rival_then_report_free(db, user, payload):
            raced.append(True)
            with self.SessionLocal() as rival:
                rival.add(
                    AzkarReminder(user_id=user.user_id, azkar_id=payload.azkar_id, reminder_time=payload.reminder_time)
                )
                rival.commit()
            return False

        with patch("app.services.azkar._reminder_exists", side_effect=insert_rival_then_report_free):
            response = self.client.post(
                "/api/faith/azkar",
                params={"action": "reminder"},
                headers=self.headers,
                json={"azkar_id": str(self.evening_id), "reminder_time": "18:30"},
            )
        self.assertTrue(raced)
        self.assertEqual(response.status_code, 409)
        with self.SessionLocal() as db:
            self.assertEqual(db.query(AzkarReminder).count(), 1)

    def test_reminder_for_unknown_azkar_is_rejected(self):
        response = self.client.post(
            "/api/faith/azkar",
            params={"action": "reminder"},
            headers=self.headers,
            json={"azkar_id": str(uuid4()), "reminder_time": "06:00"},
        )
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()["detail"], "Invalid azkar ID")

    def test_reminder_with_bad_time_reports_field(self):
        response = self.client.post(
            "/api/faith/azkar",
            params={"action": "reminder"},
            headers=self.headers,
            json={"azkar_id": str(self.evening_id), "reminder_time": "25:00"},
        )
        self.assertEqual(response.status_code, 400)
        self.assertEqual([item["field"] for item in response.json()["details"]], ["reminder_time"])

    def test_write_requires_session(self):
        response = self.client.post(
            "/api/faith/azkar",
            params={"action": "reminder"},
            json={"azkar_id": str(self.evening_id), "reminder_time": "06:00"},
        )
        self.assertEqual(response.status_code, 401)
