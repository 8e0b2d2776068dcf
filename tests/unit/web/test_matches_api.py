#!/usr/bin/env python3
"""
Unit tests for the /api/matches endpoints.

The match service runs over in-memory stores; authentication runs against
an in-memory SQLite session table.
"""

import unittest
from datetime import datetime, timezone, timedelta

from fastapi.testclient import TestClient

from core.matching import MatchOrchestrator
from core.matching.models import MatchStatus
from database.repositories import SessionRepository
from tests import create_session_factory, create_sqlite_engine, make_profile
from tests.mocks.matching_fakes import InMemoryMatchingStore
from web.backend.app import create_app
from web.backend.dependencies import get_current_user_id, get_db, get_match_service
from web.backend.services.match_service import MatchService


def founder(user_id, role, **overrides):
    fields = dict(
        roles=[role], industries=["Fintech"], commitment="full_time",
        idea_stage="have_idea", country="Kazakhstan", city="Almaty", languages=["English"],
        full_name=f"Founder {user_id}",
    )
    fields.update(overrides)
    return make_profile(user_id, **fields)


class MatchesApiTestCase(unittest.TestCase):
    """App wired to an in-memory store with the caller fixed to "me"."""

    def setUp(self):
        self.store = InMemoryMatchingStore([
            founder("me", "technical"),
            founder("u1", "business"),
            founder("u2", "design"),
        ])
        self.app = create_app()
        self.app.dependency_overrides[get_match_service] = lambda: MatchService(
            MatchOrchestrator(profiles=self.store, connections=self.store, matches=self.store)
        )
        self.app.dependency_overrides[get_current_user_id] = lambda: "me"
        self.client = TestClient(self.app, raise_server_exceptions=False)

    def tearDown(self):
        self.app.dependency_overrides.clear()


class TestRefreshEndpoint(MatchesApiTestCase):

    def test_returns_ranked_matches(self):
        response = self.client.get("/api/matches")

        self.assertEqual(response.status_code, 200)
        data = response.json()
        self.assertTrue(data["success"])
        self.assertEqual(data["count"], 2)
        self.assertEqual([m["user_id"] for m in data["matches"]], ["u1", "u2"])

        top = data["matches"][0]
        self.assertEqual(top["score"], 95)
        self.assertEqual(top["breakdown"], {
            "roles": 30, "industry": 20, "commitment": 20,
            "stage": 10, "location": 10, "languages": 5,
        })
        self.assertEqual(top["reasons"][0], "Technical + Business: ideal co-founder pairing")
        self.assertEqual(top["full_name"], "Founder u1")
        self.assertNotIn("is_actively_looking", top)
        self.assertNotIn("email", top)

    def test_persists_matches(self):
        self.client.get("/api/matches")
        self.assertEqual(set(self.store.matches), {("me", "u1"), ("me", "u2")})

    def test_empty_result_is_success(self):
        self.store.add_connection("me", "u1")
        self.store.add_match("me", "u2", MatchStatus.PASSED.value)

        response = self.client.get("/api/matches")

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json(), {"success": True, "count": 0, "matches": []})

    def test_profile_missing_returns_404(self):
        self.app.dependency_overrides[get_current_user_id] = lambda: "newcomer"

        response = self.client.get("/api/matches")

        self.assertEqual(response.status_code, 404)
        data = response.json()
        self.assertFalse(data["success"])
        self.assertEqual(data["error"], "Profile not found. Please complete onboarding first.")
        self.assertEqual(data["type"], "ProfileNotFoundException")

    def test_store_failure_returns_500(self):
        self.store.failing_reads.add("list_candidates")

        response = self.client.get("/api/matches")

        self.assertEqual(response.status_code, 500)
        self.assertEqual(response.json()["type"], "UpstreamUnavailableException")

    def test_partial_persistence_failure_still_returns_200(self):
        self.store.failing_pairs.add(("me", "u2"))

        response = self.client.get("/api/matches")

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["count"], 2)
        self.assertEqual(set(self.store.matches), {("me", "u1")})

    def test_unexpected_error_returns_500(self):
        def broken_service():
            raise RuntimeError("boom")
        self.app.dependency_overrides[get_match_service] = broken_service

        response = self.client.get("/api/matches")

        self.assertEqual(response.status_code, 500)
        self.assertEqual(response.json()["error"], "Internal server error")


class TestSavedMatchesEndpoint(MatchesApiTestCase):

    def setUp(self):
        super().setUp()
        self.store.add_match("me", "u1", MatchStatus.PENDING.value, score=80)
        self.store.add_match("me", "u2", MatchStatus.PASSED.value, score=60)
        self.store.matches[("me", "u1")].last_computed_at = datetime(2026, 3, 1, 12, 0, tzinfo=timezone.utc)

    def test_all(self):
        response = self.client.get("/api/matches/saved")

        self.assertEqual(response.status_code, 200)
        data = response.json()
        self.assertEqual(data["count"], 2)
        self.assertEqual(data["active_count"], 1)
        self.assertEqual(data["passed_count"], 1)
        self.assertEqual(data["last_computed_at"], "2026-03-01T12:00:00+00:00")
        self.assertEqual([m["profile"]["user_id"] for m in data["matches"]], ["u1", "u2"])
        self.assertEqual(data["matches"][0]["status"], "pending")

    def test_status_filters(self):
        active = self.client.get("/api/matches/saved", params={"status": "active"}).json()
        self.assertEqual([m["profile"]["user_id"] for m in active["matches"]], ["u1"])

        passed = self.client.get("/api/matches/saved", params={"status": "passed"}).json()
        self.assertEqual([m["profile"]["user_id"] for m in passed["matches"]], ["u2"])
        self.assertEqual(passed["count"], 1)
        self.assertEqual((passed["active_count"], passed["passed_count"]), (1, 1))

    def test_invalid_status_rejected(self):
        response = self.client.get("/api/matches/saved", params={"status": "deleted"})
        self.assertEqual(response.status_code, 422)


class TestStatusEndpoints(MatchesApiTestCase):

    def test_pass_and_undo(self):
        self.store.add_match("me", "u1", MatchStatus.PENDING.value)

        response = self.client.post("/api/matches/u1/pass")
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json(), {"success": True, "user_id": "u1", "status": "passed"})

        refreshed = self.client.get("/api/matches").json()
        self.assertEqual([m["user_id"] for m in refreshed["matches"]], ["u2"])

        response = self.client.post("/api/matches/u1/undo")
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["status"], "active")

    def test_pass_unknown_match_returns_404(self):
        response = self.client.post("/api/matches/u2/pass")
        self.assertEqual(response.status_code, 404)
        self.assertEqual(response.json()["type"], "MatchNotFoundException")

    def test_pass_self_returns_404(self):
        response = self.client.post("/api/matches/me/pass")
        self.assertEqual(response.status_code, 404)

    def test_undo_pending_returns_409(self):
        self.store.add_match("me", "u1", MatchStatus.PENDING.value)
        response = self.client.post("/api/matches/u1/undo")
        self.assertEqual(response.status_code, 409)
        self.assertEqual(response.json()["type"], "InvalidMatchStatusException")


class TestFactorsAndHealth(MatchesApiTestCase):

    def test_factors(self):
        response = self.client.get("/api/matches/factors")

        self.assertEqual(response.status_code, 200)
        data = response.json()
        self.assertEqual(data["total_max"], 100)
        self.assertEqual(
            [(f["key"], f["max_points"]) for f in data["factors"]],
            [("roles", 30), ("industry", 20), ("commitment", 20), ("stage", 10), ("location", 10), ("languages", 10)],
        )

    def test_health(self):
        response = self.client.get("/health")
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["status"], "healthy")


class TestAuthentication(unittest.TestCase):
    """Bearer token resolution against the user_sessions table."""

    def setUp(self):
        self.engine = create_sqlite_engine()
        self.session_factory = create_session_factory(self.engine)

        session = self.session_factory()
        repo = SessionRepository(session)
        now = datetime.now(timezone.utc)
        repo.add_session("me", "good-token", expires_at=now + timedelta(days=1))
        repo.add_session("me", "old-token", expires_at=now - timedelta(days=1))
        repo.add_session("newcomer", "newcomer-token")
        session.commit()
        session.close()

        def override_get_db():
            db = self.session_factory()
            try:
                yield db
            finally:
                db.close()

        self.store = InMemoryMatchingStore([founder("me", "technical"), founder("u1", "business")])
        self.app = create_app()
        self.app.dependency_overrides[get_db] = override_get_db
        self.app.dependency_overrides[get_match_service] = lambda: MatchService(
            MatchOrchestrator(profiles=self.store, connections=self.store, matches=self.store)
        )
        self.client = TestClient(self.app, raise_server_exceptions=False)

    def tearDown(self):
        self.app.dependency_overrides.clear()
        self.engine.dispose()

    def test_missing_header_returns_401(self):
        response = self.client.get("/api/matches")
        self.assertEqual(response.status_code, 401)
        self.assertEqual(response.headers["www-authenticate"], "Bearer")
        self.assertEqual(response.json()["type"], "UnauthenticatedException")

    def test_unknown_token_returns_401(self):
        response = self.client.get("/api/matches", headers={"Authorization": "Bearer nope"})
        self.assertEqual(response.status_code, 401)

    def test_expired_token_returns_401(self):
        response = self.client.get("/api/matches", headers={"Authorization": "Bearer old-token"})
        self.assertEqual(response.status_code, 401)

    def test_valid_token(self):
        response = self.client.get("/api/matches", headers={"Authorization": "Bearer good-token"})
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["matches"][0]["user_id"], "u1")

    def test_session_without_profile_returns_404(self):
        response = self.client.get("/api/matches", headers={"Authorization": "Bearer newcomer-token"})
        self.assertEqual(response.status_code, 404)

    def test_factors_requires_no_auth(self):
        response = self.client.get("/api/matches/factors")
        self.assertEqual(response.status_code, 200)


if __name__ == '__main__':
    unittest.main()
