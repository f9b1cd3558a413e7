from django.contrib.auth.models import User
from django.test import TestCase
from rest_framework.test import APIClient

from .helpers import make_user


class ClientAuthApiTests(TestCase):
    def setUp(self):
        self.client = APIClient()

    def test_signup_creates_user_and_logs_in(self):
        res = self.client.post(
            "/api/auth/signup",
            {"username": "joao", "password": "Password123!", "name": "João Silva", "email": "joao@example.com"},
            format="json",
        )

        self.assertEqual(res.status_code, 201)
        self.assertEqual(User.objects.get(username="joao").first_name, "João Silva")
        self.assertEqual(self.client.get("/api/bookings/").status_code, 200)

    def test_signup_requires_all_fields_and_unique_identity(self):
        make_user("joao")
        res = self.client.post("/api/auth/signup", {"username": "x"}, format="json")
        self.assertEqual(res.status_code, 400)

        res = self.client.post(
            "/api/auth/signup",
            {"username": "joao", "password": "p", "name": "J", "email": "other@example.com"},
            format="json",
        )
        self.assertEqual(res.status_code, 400)

    def test_login_and_logout(self):
        make_user("maria")

        bad = self.client.post("/api/auth/login", {"username": "maria", "password": "wrong"}, format="json")
        self.assertEqual(bad.status_code, 400)

        ok = self.client.post("/api/auth/login", {"username": "maria", "password": "testpass123"}, format="json")
        self.assertEqual(ok.status_code, 200)
        self.assertEqual(self.client.get("/api/bookings/").status_code, 200)

        self.client.post("/api/auth/logout")
        self.assertEqual(self.client.get("/api/bookings/").status_code, 403)
