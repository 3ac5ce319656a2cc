"""Tests for the session dependency (token lookup and verification)."""

import unittest
from datetime import timedelta
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock
import sys
from pathlib import Path

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent.parent))

from fastapi.testclient import TestClient

from adapter.fake.score_repository import FakeScoreRepository
from api.dependencies import get_score_repo, get_token_service, get_user_repo
from api.main import app
from api.security import authenticate
from domain.model.errors import UnauthenticatedError
from services.token_service import TokenService

RESULT = {"subject": "OS", "score": 7, "totalQuestions": 10}


def _tamper(token: str) -> str:
    header, payload, signature = token.split(".")
    i = len(signature) // 2
    flipped = "A" if signature[i] != "A" else "B"
    return ".".join([header, payload, signature[:i] + flipped + signature[i + 1:]])


def _fake_request(headers=None, body=None, query=None, method="POST"):
    request = MagicMock()
    request.method = method
    request.headers = {"content-type": "application/json", **(headers or {})}
    request.json = AsyncMock(return_value=body)
    request.query_params = query or {}
    request.state = SimpleNamespace()
    return request


class TestAuthenticate(unittest.IsolatedAsyncioTestCase):
    """authenticate() without the HTTP stack."""

    def setUp(self):
        self.tokens = TokenService(secret_key="security-test-secret", ttl=timedelta(hours=2))
        self.token = self.tokens.issue("user-1", "ada@x.com")

    async def test_header_token_attaches_identity(self):
        request = _fake_request(headers={"authorization": f"Bearer {self.token}"})

        claims = await authenticate(request, self.tokens)

        self.assertEqual(claims.user_id, "user-1")
        self.assertIs(request.state.identity, claims)

    async def test_body_token(self):
        claims = await authenticate(_fake_request(body={"token": self.token}), self.tokens)
        self.assertEqual(claims.email, "ada@x.com")

    async def test_query_token(self):
        request = _fake_request(query={"token": self.token}, method="GET")
        claims = await authenticate(request, self.tokens)
        self.assertEqual(claims.user_id, "user-1")

    async def test_no_token_anywhere(self):
        with self.assertRaises(UnauthenticatedError):
            await authenticate(_fake_request(body={}), self.tokens)

    async def test_tampered_token(self):
        request = _fake_request(headers={"authorization": f"Bearer {_tamper(self.token)}"})
        with self.assertRaises(UnauthenticatedError):
            await authenticate(request, self.tokens)

    async def test_expired_token(self):
        expired = TokenService(secret_key="security-test-secret", ttl=timedelta(seconds=-1))
        request = _fake_request(headers={"authorization": f"Bearer {expired.issue('user-1', 'ada@x.com')}"})
        with self.assertRaises(UnauthenticatedError):
            await authenticate(request, self.tokens)

    async def test_does_not_touch_storage(self):
        """Claims are trusted as issued; no repository is involved."""
        request = _fake_request(headers={"authorization": f"Bearer {self.token}"})
        claims = await authenticate(request, self.tokens)
        self.assertEqual(claims.user_id, "user-1")


class TestRequireIdentityOverHttp(unittest.TestCase):
    """The same checks through a protected route."""

    def setUp(self):
        self.client = TestClient(app)
        self.tokens = TokenService(secret_key="security-test-secret", ttl=timedelta(hours=2))
        self.token = self.tokens.issue("user-1", "ada@x.com")
        self.scores = FakeScoreRepository()
        app.dependency_overrides[get_token_service] = lambda: self.tokens
        app.dependency_overrides[get_score_repo] = lambda: self.scores

        def no_storage():
            raise AssertionError("session check must not read the user directory")

        app.dependency_overrides[get_user_repo] = no_storage

    def tearDown(self):
        app.dependency_overrides.clear()

    def test_bearer_header(self):
        response = self.client.post(
            "/api/leaderboard", json=RESULT, headers={"Authorization": f"Bearer {self.token}"},
        )
        self.assertEqual(response.status_code, 201)

    def test_token_in_body(self):
        response = self.client.post("/api/leaderboard", json={**RESULT, "token": self.token})
        self.assertEqual(response.status_code, 201)

    def test_token_in_query(self):
        response = self.client.post(f"/api/leaderboard?token={self.token}", json=RESULT)
        self.assertEqual(response.status_code, 201)

    def test_header_takes_priority(self):
        response = self.client.post(
            "/api/leaderboard",
            json={**RESULT, "token": "garbage"},
            headers={"Authorization": f"Bearer {self.token}"},
        )
        self.assertEqual(response.status_code, 201)

    def test_missing_token(self):
        response = self.client.post("/api/leaderboard", json=RESULT)

        self.assertEqual(response.status_code, 401)
        self.assertEqual(response.json()["detail"], "No token provided")
        self.assertEqual(self.scores.store, {})

    def test_tampered_token(self):
        response = self.client.post(
            "/api/leaderboard", json=RESULT, headers={"Authorization": f"Bearer {_tamper(self.token)}"},
        )

        self.assertEqual(response.status_code, 401)
        self.assertEqual(response.json()["detail"], "Invalid token")
        self.assertEqual(response.headers["www-authenticate"], "Bearer")


if __name__ == '__main__':
    unittest.main()
