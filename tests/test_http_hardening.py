import os
import unittest

from fastapi.testclient import TestClient

os.environ.setdefault("DATABASE_URL", "sqlite+pysqlite:///:memory:")
os.environ.setdefault("REDIS_URL", "redis://localhost:6379/0")

from app.main import app
from app.core.http_hardening import request_id_from_header


class HttpHardeningTests(unittest.TestCase):
    def setUp(self):
        self.client = TestClient(app)

    def tearDown(self):
        self.client.close()

    def test_health_has_security_headers_and_request_id(self):
        response = self.client.get("/health")
        self.assertEqual(response.status_code, 200)

        self.assertEqual(response.headers.get("x-content-type-options"), "nosniff")
        self.assertEqual(response.headers.get("x-frame-options"), "DENY")
        self.assertEqual(response.headers.get("referrer-policy"), "no-referrer")
        self.assertEqual(response.headers.get("cache-control"), "no-store")

        request_id = response.headers.get("x-request-id")
        self.assertIsNotNone(request_id)
        self.assertRegex(str(request_id), r"^[A-Za-z0-9._-]{1,128}$")

    def test_valid_request_id_is_preserved(self):
        external_request_id = "release-check-2026_10_18"
        response = self.client.get("/health", headers={"X-Request-ID": external_request_id})
        self.assertEqual(response.headers.get("x-request-id"), external_request_id)

    def test_invalid_request_id_is_replaced(self):
        self.assertNotEqual(request_id_from_header("bad id with spaces"), "bad id with spaces")
        self.assertRegex(request_id_from_header(None), r"^[0-9a-f]{32}$")

    def test_error_response_keeps_security_headers_and_request_id(self):
        # No bearer token => 401 from dependency, middleware headers must still be present.
        response = self.client.get("/api/habits")
        self.assertEqual(response.status_code, 401)
        self.assertEqual(response.headers.get("x-content-type-options"), "nosniff")
        self.assertTrue(bool(response.headers.get("x-request-id")))

    def test_query_errors_are_rendered_as_json(self):
        response = self.client.get("/api/faith", params={"limit": 500})
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()["error"], "Invalid pagination")
        self.assertEqual(response.headers.get("x-frame-options"), "DENY")

    def test_request_lines_are_logged(self):
        with self.assertLogs("app.http", level="INFO") as captured:
            self.client.get("/health", headers={"X-Request-ID": "log-check"})
        self.assertTrue(any("request_id=log-check" in line for line in captured.output))

    def test_invalid_session_token_is_rejected(self):
        response = self.client.get("/api/habits", headers={"Authorization": "Bearer not-a-jwt"})
        self.assertEqual(response.status_code, 401)
        self.assertEqual(response.json()["detail"], "Invalid session token")


if __name__ == "__main__":
    unittest.main()
