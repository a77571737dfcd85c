"""HTTP tests for the root route, /health and the error envelope for unknown routes."""

import unittest
from unittest.mock import patch

from support import ApiTestCase


class TestRoot(ApiTestCase):
    def test_root(self) -> None:
        response = self.client.get("/")
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json(), {"status": 200, "message": "TekyoFlow API"})

    def test_unknown_route_uses_error_envelope(self) -> None:
        response = self.client.get("/api/nope")
        self.assertEqual(response.status_code, 404)
        self.assertEqual(response.json(), {"status": 404, "message": "Not Found"})


class TestHealth(ApiTestCase):
    def test_connected(self) -> None:
        response = self.client.get("/api/health")
        self.assertEqual(response.status_code, 200)
        self.assertEqual(
            response.json(),
            {
                "status": "ok",
                "environment": "dev",
                "version": "0.1.0",
                "database": "connected",
            },
        )

    @patch("tekyoflow.api.v1.health.check_db_connected", return_value=False)
    def test_disconnected(self, _check: object) -> None:
        response = self.client.get("/api/health")
        self.assertEqual(response.json()["database"], "disconnected")


if __name__ == "__main__":
    unittest.main()
