"""Shared fixtures for database-backed and HTTP tests."""

import unittest
from datetime import UTC, datetime, timedelta

from fastapi.testclient import TestClient

from scribe.core.config import get_settings
from scribe.core.database import SessionLocal, engine
from scribe.core.security import TokenService
from scribe.main import app
from scribe.models import Base
from scribe.services.users import create_user

DEFAULT_PASSWORD = "password123"


def reset_database() -> None:
    """Drop and recreate every table on the shared in-memory engine."""
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)


def token_service(**kwargs) -> TokenService:
    """TokenService signed with the app's secret; kwargs override lifetime/clock."""
    return TokenService(secret=get_settings().JWT_SECRET.get_secret_value(), **kwargs)


def expired_token(user_id: int) -> str:
    """Token with a valid signature that expired an hour ago."""
    issued = datetime.now(UTC) - timedelta(hours=2)
    return token_service(lifetime=timedelta(hours=1), clock=lambda: issued).issue(user_id)


def bearer(token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {token}"}


class DatabaseTestCase(unittest.TestCase):
    """Fresh schema and an open session per test."""

    def setUp(self) -> None:
        reset_database()
        self.db = SessionLocal()

    def tearDown(self) -> None:
        self.db.close()


class ApiTestCase(unittest.TestCase):
    """Fresh schema and a TestClient per test, with helpers to create accounts."""

    api = get_settings().API_PREFIX

    def setUp(self) -> None:
        reset_database()
        self.client = TestClient(app)

    def tearDown(self) -> None:
        app.dependency_overrides.clear()
        self.client.close()

    def register(self, username: str, email: str | None = None, password: str = DEFAULT_PASSWORD) -> tuple[dict, str]:
        """Register through the API; returns (user, token)."""
        resp = self.client.post(
            f"{self.api}/auth/register",
            json={
                "username": username,
                "email": email or f"{username.lower()}@example.com",
                "password": password,
            },
        )
        self.assertEqual(resp.status_code, 201, resp.text)
        data = resp.json()["data"]
        return data["user"], data["token"]

    def make_admin(self, username: str = "admin") -> tuple[int, str]:
        """Create an admin directly in the store (no API grants the role); returns (id, token)."""
        db = SessionLocal()
        try:
            user = create_user(
                db, username, f"{username}@example.com", DEFAULT_PASSWORD, role="admin"
            )
            user_id = user.id
        finally:
            db.close()
        return user_id, token_service().issue(user_id)

    def create_post(self, token: str, **fields) -> dict:
        body = {
            "title": "Hello World",
            "description": "This is a sufficiently long body.",
            "category": "Technology",
        }
        body.update(fields)
        resp = self.client.post(f"{self.api}/blogs", json=body, headers=bearer(token))
        self.assertEqual(resp.status_code, 201, resp.text)
        return resp.json()["data"]
