"""
tests/test_api_routes.py — FastAPI Route Integration Tests
============================================================

The engine dependency is overridden with the in-memory conftest engine.
"""

from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from darkroom.api.deps import get_engine
from darkroom.services.challenge_service import record_winner, start_challenge
from darkroom.services.stats_service import record_message, record_reaction

GUILD = 100


@pytest.fixture
def client(db_engine):
    """Create a FastAPI TestClient bound to the test database."""
    from darkroom.api.main import app

    app.dependency_overrides[get_engine] = lambda: db_engine
    yield TestClient(app, raise_server_exceptions=False)
    app.dependency_overrides.clear()


# ===========================================================================
# Health endpoint
# ===========================================================================
class TestHealthEndpoint:
    def test_health_returns_ok(self, client):
        resp = client.get("/api/health")
        assert resp.status_code == 200
        assert resp.json() == {"status": "ok"}


# ===========================================================================
# Public endpoints
# ===========================================================================
class TestLeaderboard:
    def test_empty(self, client):
        resp = client.get(f"/api/spaces/{GUILD}/leaderboard")
        assert resp.status_code == 200
        assert resp.json() == {"space_id": str(GUILD), "users": []}

    def test_ranked(self, client, db_engine):
        record_message(db_engine, 1, GUILD)
        record_message(db_engine, 2, GUILD)
        record_message(db_engine, 2, GUILD)
        record_reaction(db_engine, 1, GUILD)

        users = client.get(f"/api/spaces/{GUILD}/leaderboard").json()["users"]
        assert [u["user_id"] for u in users] == ["2", "1"]
        assert users[1] == {"rank": 2, "user_id": "1", "message_count": 1, "reaction_count": 1}

    def test_limit_validated(self, client):
        assert client.get(f"/api/spaces/{GUILD}/leaderboard?limit=0").status_code == 422


class TestChallenge:
    def test_no_active_challenge(self, client):
        resp = client.get(f"/api/spaces/{GUILD}/challenge")
        assert resp.status_code == 404

    def test_active_challenge(self, client, db_engine):
        start_challenge(db_engine, GUILD, 700, "Reflections")
        data = client.get(f"/api/spaces/{GUILD}/challenge").json()
        assert data["theme"] == "Reflections"
        assert data["channel_id"] == "700"
        assert data["days_left"] == 7


class TestWinners:
    def test_winners(self, client, db_engine):
        c = start_challenge(db_engine, GUILD, 700, "Reflections")
        record_winner(db_engine, c.id, 1, 9, 5_000_000)

        (w,) = client.get("/api/winners").json()["winners"]
        assert w["user_id"] == "1"
        assert w["theme"] == "Reflections"
        assert w["prize_amount"] == "5000000"
        assert w["paid"] is True
