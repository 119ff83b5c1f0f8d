"""Unit tests for the game API.

Tests cover:
- health check and adventure listing
- state snapshot and action dispatch (including 404 for unknown actions)
- admin commands
- server-sent event framing
"""

import pytest
from fastapi.testclient import TestClient

from delve.api.game import event_stream
from delve.engine.broadcast import BroadcastBus
from delve.main import app


@pytest.fixture
def client(monkeypatch):
    """TestClient running the app lifespan with instant enemy turns."""
    monkeypatch.setenv("DELVE_THINKING_DELAY", "0")
    monkeypatch.setenv("DELVE_HIT_DELAY", "0")
    monkeypatch.delenv("DELVE_ADVENTURE", raising=False)
    monkeypatch.delenv("DELVE_ADVENTURES_DIR", raising=False)

    with TestClient(app) as client:
        yield client


def enter_combat(client: TestClient) -> dict:
    for name in ["START", "Approach", "Enter Combat"]:
        response = client.post(f"/api/game/action/{name}")
        assert response.status_code == 200
    return response.json()


class TestRoot:
    """Tests for app-level endpoints."""

    def test_health_check(self, client) -> None:
        response = client.get("/")

        assert response.status_code == 200
        assert response.json()["status"] == "ok"

    def test_list_adventures(self, client) -> None:
        response = client.get("/api/adventures")

        ids = [a["id"] for a in response.json()["adventures"]]
        assert "dungeon-delve" in ids


class TestGameState:
    """Tests for state and action endpoints."""

    def test_initial_state(self, client) -> None:
        response = client.get("/api/game/state")

        assert response.status_code == 200
        assert response.headers["content-type"].startswith("application/json")
        data = response.json()
        assert data["kind"] == "narrative"
        assert data["actions"] == ["START"]

    def test_action_returns_new_state(self, client) -> None:
        response = client.post("/api/game/action/START")

        assert response.status_code == 200
        data = response.json()
        assert data["output_text"].startswith("You awaken")
        assert data["actions"] == ["Approach"]

    def test_unknown_action_is_404(self, client) -> None:
        response = client.post("/api/game/action/Dance")

        assert response.status_code == 404
        assert "Dance" in response.json()["detail"]

    def test_action_not_offered_yet_is_404(self, client) -> None:
        response = client.post("/api/game/action/Approach")

        assert response.status_code == 404

    def test_walkthrough_enters_combat(self, client) -> None:
        data = enter_combat(client)

        assert data["kind"] == "combat"
        names = {c["name"] for c in data["combat"]["turn_order"]}
        assert names == {"Hero", "Companion", "Goblin", "Orc"}


class TestAdmin:
    """Tests for admin endpoints."""

    def test_reset(self, client) -> None:
        enter_combat(client)

        response = client.post("/api/game/admin/reset")

        assert response.json() == {"success": True, "message": "Game reset"}
        assert client.get("/api/game/state").json()["actions"] == ["START"]

    def test_heal(self, client) -> None:
        response = client.post("/api/game/admin/heal")

        assert response.json()["success"] is True
        party = client.get("/api/game/state").json()["party"]
        assert [c["health"] for c in party] == [120, 95]

    def test_reinforce_outside_combat(self, client) -> None:
        response = client.post("/api/game/admin/reinforce")

        assert response.status_code == 200
        assert response.json()["success"] is False

    def test_reinforce_in_combat(self, client) -> None:
        enter_combat(client)

        response = client.post("/api/game/admin/reinforce")

        assert response.json()["success"] is True
        enemies = client.get("/api/game/state").json()["combat"]["enemies"]
        assert "Goblin Reinforcement" in [e["name"] for e in enemies]


class TestEventStream:
    """Tests for server-sent event framing."""

    @pytest.mark.asyncio
    async def test_frames_each_snapshot(self) -> None:
        bus = BroadcastBus()
        subscription = bus.subscribe()
        bus.publish('{"kind": "narrative"}')
        bus.publish('{"kind": "combat"}')
        bus.close()

        frames = [frame async for frame in event_stream(subscription)]

        assert frames == [
            'data: {"kind": "narrative"}\n\n',
            'data: {"kind": "combat"}\n\n',
        ]
