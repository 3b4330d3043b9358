from unittest import mock

from django.db import DatabaseError
from django.test import TestCase
from django.urls import reverse


class HealthzTests(TestCase):
    def test_healthy(self) -> None:
        response = self.client.get(reverse("healthz"))

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json(), {"status": "healthy", "database": "connected"})

    def test_database_down(self) -> None:
        with mock.patch("apps.core.views.connection.cursor", side_effect=DatabaseError("down")):
            response = self.client.get(reverse("healthz"))

        self.assertEqual(response.status_code, 503)
        self.assertEqual(response.json()["status"], "unhealthy")

    def test_only_get(self) -> None:
        self.assertEqual(self.client.post(reverse("healthz")).status_code, 405)
