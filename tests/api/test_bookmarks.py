from unittest.mock import patch

from tests.api.base import *  # noqa: F401,F403

from app.services import bookmarks


class BookmarkApiTests(ApiTestBase):
    def setUp(self):
        super().setUp()
        with self.SessionLocal() as db:
            verse = QuranVerse(
                surah_number=112,
                ayah_number=1,
                juz_number=30,
                surah_name_english="Al-Ikhlas",
                ayah_text_arabic="قُلْ هُوَ ٱللَّهُ أَحَدٌ",
                ayah_text_english="Say, He is Allah, the One",
            )
            dua = Dua(title="Entering the home", category="home", dua_arabic="بِسْمِ اللَّهِ وَلَجْنَا")
            db.add_all([verse, dua])
            db.commit()
            self.verse_id = verse.id
            self.dua_id = dua.id

    def test_bookmark_is_upserted_per_reference(self):
        payload = {"bookmark_type": "quran", "reference_id": str(self.verse_id), "notes": "memorize", "tags": ["daily"]}
        created = self.client.post("/api/faith/bookmarks", headers=self.headers, json=payload)
        self.assertEqual(created.status_code, 201)
        self.assertEqual(created.json()["data"]["tags"], ["daily"])

        updated = self.client.post(
            "/api/faith/bookmarks", headers=self.headers, json={**payload, "notes": "memorized"}
        )
        self.assertEqual(updated.status_code, 200)
        self.assertEqual(updated.json()["data"]["id"], created.json()["data"]["id"])
        self.assertEqual(updated.json()["data"]["notes"], "memorized")

    def test_upsert_racing_a_concurrent_insert_keeps_one_bookmark(self):
        find_bookmark = bookmarks._find_bookmark
        raced = []

        def find_then_insert_rival(db, user, payload):
            if raced:
                return find_bookmark(db, user, payload)
            raced.append(True)
            with self.SessionLocal() as rival:
                rival.add(
                    FaithBookmark(user_id=user.user_id, bookmark_type=payload.bookmark_type, reference_id=payload.reference_id)
                )
                rival.commit()
            return None

        payload = {"bookmark_type": "dua", "reference_id": str(self.dua_id), "notes": "before sleep"}
        with patch("app.services.bookmarks._find_bookmark", side_effect=find_then_insert_rival):
            response = self.client.post("/api/faith/bookmarks", headers=self.headers, json=payload)
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["data"]["notes"], "before sleep")
        with self.SessionLocal() as db:
            self.assertEqual(db.query(FaithBookmark).count(), 1)

    def test_bookmark_for_missing_content_is_404(self):
        response = self.client.post(
            "/api/faith/bookmarks",
            headers=self.headers,
            json={"bookmark_type": "hadith", "reference_id": str(self.verse_id)},
        )
        self.assertEqual(response.status_code, 404)

    def test_list_filters_by_type_set(self):
        self.client.post(
            "/api/faith/bookmarks",
            headers=self.headers,
            json={"bookmark_type": "quran", "reference_id": str(self.verse_id)},
        )
        self.client.post(
            "/api/faith/bookmarks",
            headers=self.headers,
            json={"bookmark_type": "dua", "reference_id": str(self.dua_id)},
        )

        both = self.client.get("/api/faith/bookmarks", params={"bookmark_type": "quran,dua"}, headers=self.headers)
        self.assertEqual(both.status_code, 200)
        self.assertEqual(both.json()["pagination"]["total"], 2)

        only_dua = self.client.get("/api/faith/bookmarks", params={"bookmark_type": "dua"}, headers=self.headers)
        self.assertEqual([row["bookmark_type"] for row in only_dua.json()["data"]], ["dua"])

        invalid = self.client.get("/api/faith/bookmarks", params={"bookmark_type": "video"}, headers=self.headers)
        self.assertEqual(invalid.status_code, 400)
        self.assertEqual(invalid.json()["details"][0]["field"], "bookmark_type.0")

    def test_delete_is_scoped_to_owner(self):
        created = self.client.post(
            "/api/faith/bookmarks",
            headers=self.headers,
            json={"bookmark_type": "quran", "reference_id": str(self.verse_id)},
        )
        bookmark_id = created.json()["data"]["id"]

        foreign = self.client.delete(f"/api/faith/bookmarks/{bookmark_id}", headers=self._auth_headers(uuid4()))
        self.assertEqual(foreign.status_code, 404)

        removed = self.client.delete(f"/api/faith/bookmarks/{bookmark_id}", headers=self.headers)
        self.assertEqual(removed.status_code, 200)
        listed = self.client.get("/api/faith/bookmarks", headers=self.headers)
        self.assertEqual(listed.json()["pagination"]["total"], 0)
