"""
Integration tests for the soccer service request flow: routing, handlers,
cache-aside and persistence wired together over in-memory backends.
"""

import pytest
from fastapi.testclient import TestClient

from shared.config import get_config
from shared.test_helpers import InMemoryMongo, SpyCacher, soccer_data_factory
from service_soccer.app.main import SERVICE_NAME, SERVICE_PORT, SoccerService


class TestSoccerFlow:
    """Test the full player and team lifecycle."""

    @pytest.fixture
    def events(self):
        return []

    @pytest.fixture
    def store(self, events):
        return InMemoryMongo(events)

    @pytest.fixture
    def cacher(self, events):
        return SpyCacher(events)

    @pytest.fixture
    def client(self, events, store, cacher):
        config = get_config(SERVICE_NAME, SERVICE_PORT, cache_enabled=False, api_key=None, cache_ttl=120)
        service = SoccerService(config, mongo=store, cacher=cacher)
        with TestClient(service.app) as client:
            # Forget the startup index creation
            events.clear()
            yield client

    def test_player_lifecycle(self, client, store, cacher):
        """Create, read, delete and read again."""
        response = client.post("/players", json={"FirstName": "Leo"})
        assert response.status_code == 201
        player_id = response.json()["Id"]
        key = f"players-{player_id}"
        assert cacher.entries[key]["FirstName"] == "Leo"
        assert cacher.ttls[key] == 120

        response = client.get(f"/players/{player_id}")
        assert response.status_code == 200
        assert response.json()["FirstName"] == "Leo"
        assert store.calls("find_one") == []

        response = client.delete(f"/players/{player_id}")
        assert response.status_code == 200
        assert response.json() == {"Status": 200, "Message": "Successfully deleted"}
        assert key not in cacher.entries

        response = client.get(f"/players/{player_id}")
        assert response.status_code == 404

        response = client.delete(f"/players/{player_id}")
        assert response.status_code == 404

    def test_delete_with_other_id_spelling_evicts_cache(self, client, cacher):
        """An upper-case id addresses the same player and the same cache entry."""
        player_id = client.post("/players", json={"FirstName": "Leo"}).json()["Id"]
        assert client.get(f"/players/{player_id}").status_code == 200

        response = client.delete(f"/players/{player_id.upper()}")
        assert response.status_code == 200

        assert cacher.entries == {}
        assert client.get(f"/players/{player_id}").status_code == 404

    def test_update_with_other_id_spelling_refreshes_cache(self, client, cacher):
        """A PUT through an upper-case id is visible through the canonical id."""
        player_id = client.post("/players", json={"FirstName": "Leo"}).json()["Id"]
        assert client.get(f"/players/{player_id}").status_code == 200

        response = client.put(f"/players/{player_id.upper()}", json={"FirstName": "Lionel"})
        assert response.status_code == 200

        data = client.get(f"/players/{player_id}").json()
        assert data["FirstName"] == "Lionel"
        assert data["Id"] == player_id
        assert list(cacher.entries) == [f"players-{player_id}"]

    def test_unknown_player(self, client):
        """Malformed and unknown ids are both 404."""
        response = client.get("/players/doesnotexist")
        assert response.status_code == 404
        assert response.json() == {"Status": 404, "Message": "Item not found"}

        response = client.get("/players/5f1b2c3d4e5f6a7b8c9d0e1f")
        assert response.status_code == 404

    def test_unparsable_body_touches_nothing(self, client, events):
        """A body that cannot be decoded never reaches the store or the cache."""
        response = client.post(
            "/players", content=b'{"FirstName": ', headers={"Content-Type": "application/json"}
        )

        assert response.status_code == 400
        assert events == []

    def test_update_writes_store_then_cache(self, client, events, cacher):
        """PUT replaces the document before refreshing the cache."""
        player_id = client.post("/players", json=soccer_data_factory.create_test_players()[1]).json()["Id"]
        events.clear()

        response = client.put(f"/players/{player_id}", json={"FirstName": "Keylor", "Age": 38})

        assert response.status_code == 200
        assert events == [
            ("store", "replace", events[0][2]),
            ("cache", "set", f"players-{player_id}"),
        ]
        assert cacher.entries[f"players-{player_id}"]["Age"] == 38
        assert client.get(f"/players/{player_id}").json()["Age"] == 38

    def test_store_outage_is_500_and_cache_untouched(self, client, store, cacher):
        """Driver failures map to 500 and leave the cache as it was."""
        store.fail_on.add("insert")

        response = client.post("/players", json={"FirstName": "Leo"})

        assert response.status_code == 500
        assert response.json()["Message"].startswith("Failed saving the item")
        assert cacher.entries == {}

    def test_cache_outage_is_invisible(self, client, cacher):
        """A failing cache only costs the store round trips."""
        cacher.fail_on.update({"get", "set", "delete"})

        player_id = client.post("/players", json={"FirstName": "Leo"}).json()["Id"]

        assert client.get(f"/players/{player_id}").status_code == 200
        assert client.delete(f"/players/{player_id}").status_code == 200
        assert client.get(f"/players/{player_id}").status_code == 404

    def test_duplicate_team_is_rejected(self, client):
        """Team ids are unique."""
        team = soccer_data_factory.create_test_teams()[0]

        assert client.post("/teams", json=team).status_code == 201
        assert client.post("/teams", json=team).status_code == 500

    def test_team_listing_pages(self, client):
        """Teams list in insertion order with limit and skip."""
        for team in soccer_data_factory.create_test_teams():
            client.post("/teams", json=team)

        response = client.get("/teams?limit=1&skip=1")

        assert response.status_code == 200
        assert [t["TeamId"] for t in response.json()] == ["alajuelense"]
