"""Tests for the REST API surface."""

import pytest
from fastapi.testclient import TestClient

from geocache.api.app import create_app
from geocache.systems.persistence import COINS_SLOT, MemorySlotStorage
from tests.helpers.world_factory import make_session


@pytest.fixture
def storage():
    return MemorySlotStorage()


@pytest.fixture
def session(storage):
    return make_session(storage=storage, interaction_radius=2.0)


@pytest.fixture
def client(session):
    with TestClient(create_app(session=session)) as c:
        yield c


class TestState:

    def test_state(self, client):
        body = client.get("/api/v1/state").json()
        assert body["cell"] == {"i": 0, "j": 0}
        assert body["mode"] == "manual"
        assert body["wallet"] == []
        assert body["cache_count"] == 25
        assert body["path"] == []

    def test_state_with_path(self, client):
        client.post("/api/v1/move/north")
        body = client.get("/api/v1/state", params={"include_path": True}).json()
        assert len(body["path"]) == 2

    def test_nearby(self, client):
        body = client.get("/api/v1/cells/nearby").json()
        assert body["radius"] == 2
        assert len(body["cells"]) == 25
        first = body["cells"][0]
        assert first["cell"] == {"i": -2, "j": -2}
        assert first["bounds"] == {"lat_min": -2.0, "lng_min": -2.0, "lat_max": -1.0, "lng_max": -1.0}
        assert first["cache"]

    def test_config(self, client):
        body = client.get("/api/v1/config").json()
        assert body["tile_width"] == 1.0
        assert body["interaction_radius"] == 2.0

    def test_events(self, client):
        client.post("/api/v1/move/east")
        events = client.get("/api/v1/events").json()
        assert any(e["category"] == "move" for e in events)
        last = events[-1]["seq"]
        assert client.get("/api/v1/events", params={"since": last + 1}).json() == []


class TestCaches:

    def test_get_cache(self, client):
        body = client.get("/api/v1/caches/1/1").json()
        assert body["in_reach"] is True
        assert body["tokens"][0] == "coin-1:1#0"

    def test_get_missing_cache(self, client):
        assert client.get("/api/v1/caches/500/500").status_code == 404

    def test_collect_and_deposit(self, client):
        r = client.post("/api/v1/caches/0/0/collect", json={"token_id": "coin-0:0#0"})
        assert r.status_code == 200
        assert r.json()["wallet"] == ["coin-0:0#0"]

        r = client.post("/api/v1/caches/1/0/deposit", json={"token_id": "coin-0:0#0"})
        assert r.status_code == 200
        assert r.json()["wallet"] == []
        assert r.json()["cache"][-1] == "coin-0:0#0"

    def test_collect_twice(self, client):
        client.post("/api/v1/caches/0/0/collect", json={"token_id": "coin-0:0#0"})
        r = client.post("/api/v1/caches/0/0/collect", json={"token_id": "coin-0:0#0"})
        assert r.status_code == 404

    def test_deposit_not_held(self, client):
        r = client.post("/api/v1/caches/0/0/deposit", json={"token_id": "coin-0:0#0"})
        assert r.status_code == 409

    def test_too_far(self, client):
        r = client.post("/api/v1/caches/2/2/collect", json={"token_id": "coin-2:2#0"})
        assert r.status_code == 403
        assert client.get("/api/v1/state").json()["wallet"] == []


class TestMovement:

    def test_move(self, client):
        r = client.post("/api/v1/move/north")
        assert r.json() == {"lat": 1.5, "lng": 0.5}

    def test_bad_direction(self, client):
        assert client.post("/api/v1/move/up").status_code == 422

    def test_tracking_flow(self, client, session):
        assert client.post("/api/v1/position", json={"lat": 5.5, "lng": 5.5}).status_code == 409
        assert client.post("/api/v1/mode/tracked").json()["status"] == "ok"
        assert client.post("/api/v1/move/north").status_code == 409

        r = client.post("/api/v1/position", json={"lat": 5.5, "lng": 5.5})
        assert r.status_code == 202
        session.feed.wait_idle()
        assert client.get("/api/v1/state").json()["cell"] == {"i": 5, "j": 5}

        assert client.post("/api/v1/mode/manual").json()["status"] == "ok"
        assert client.post("/api/v1/mode/manual").json()["status"] == "noop"


class TestControl:

    def test_save_and_load(self, client, storage):
        assert client.post("/api/v1/control/save").json()["status"] == "ok"
        assert storage.read(COINS_SLOT) == "[]"
        client.post("/api/v1/caches/0/0/collect", json={"token_id": "coin-0:0#0"})
        assert client.post("/api/v1/control/load").json()["status"] == "ok"
        assert client.get("/api/v1/state").json()["wallet"] == []

    def test_load_nothing(self, client):
        assert client.post("/api/v1/control/load").json()["status"] == "noop"

    def test_reset(self, client):
        client.post("/api/v1/move/west")
        client.post("/api/v1/control/reset")
        assert client.get("/api/v1/state").json()["cell"] == {"i": 0, "j": 0}
