"""
Tests for the Soccer service.
"""

import pytest
from fastapi.testclient import TestClient

from shared.config import get_config
from shared.test_helpers import InMemoryMongo, SpyCacher, soccer_data_factory
from service_soccer.app.main import SERVICE_NAME, SERVICE_PORT, SoccerService


def make_service(**overrides):
    config = get_config(SERVICE_NAME, SERVICE_PORT, cache_enabled=False, **overrides)
    return SoccerService(config, mongo=InMemoryMongo(), cacher=SpyCacher())


@pytest.fixture
def service():
    return make_service(api_key=None)


@pytest.fixture
def client(service):
    with TestClient(service.app) as client:
        yield client


def test_root_endpoint(client):
    """Test root endpoint."""
    response = client.get("/")
    assert response.status_code == 200
    data = response.json()
    assert data["service"] == "soccer"
    assert data["version"] == "1.0.0"
    assert data["resources"] == ["teams", "players"]


def test_health_check(client):
    """Test health check endpoint."""
    response = client.get("/health")
    assert response.status_code == 200
    data = response.json()
    assert data["service"] == "soccer"
    assert data["status"] == "ok"
    assert data["dependencies"] == {"mongodb": "ok"}


def test_health_check_degraded():
    """Test health check when MongoDB is unreachable."""
    service = make_service(api_key=None)
    service.mongo.fail_on.add("health_check")

    with TestClient(service.app) as client:
        data = client.get("/health").json()

    assert data["status"] == "degraded"
    assert data["dependencies"]["mongodb"] == "error"


def test_metrics_endpoint(client):
    """Test metrics endpoint."""
    client.get("/teams")
    response = client.get("/metrics")
    assert response.status_code == 200
    assert "http_requests_total" in response.text
    assert "store_operations_total" in response.text


def test_startup_indexes_team_ids(service):
    """Test that starting the service indexes team ids."""
    with TestClient(service.app):
        assert service.mongo.started is True
        assert service.mongo.calls("create_index") == ["TeamId"]

    assert service.mongo.started is False


def test_request_id_is_echoed(client):
    """Test request correlation header."""
    response = client.get("/health", headers={"X-Request-ID": "req-123"})
    assert response.headers["X-Request-ID"] == "req-123"


def test_unknown_path_uses_status_envelope(client):
    """Test 404 for unrouted paths."""
    response = client.get("/coaches")
    assert response.status_code == 404
    assert response.json()["Status"] == 404


def test_team_crud(client):
    """Test creating, updating and reading back a team."""
    team = soccer_data_factory.create_test_teams()[0]

    response = client.post("/teams", json=team)
    assert response.status_code == 201
    assert response.json()["TeamId"] == "saprissa"

    response = client.put("/teams/saprissa", json={**team, "Founded": 1936})
    assert response.status_code == 200

    response = client.get("/teams/saprissa")
    assert response.status_code == 200
    assert response.json()["Founded"] == 1936

    response = client.get("/teams")
    assert [t["TeamId"] for t in response.json()] == ["saprissa"]


class TestApiKey:
    """Test cases for the X-API-KEY gate."""

    @pytest.fixture
    def client(self):
        service = make_service(api_key="test-api-key")
        with TestClient(service.app) as client:
            yield client

    def test_missing_key_is_unauthorized(self, client):
        response = client.get("/players")
        assert response.status_code == 401
        assert response.json() == {
            "Status": 401,
            "Message": "You are not authorized to access this resource."
        }

    def test_wrong_key_is_unauthorized(self, client):
        response = client.get("/players", headers={"X-API-KEY": "wrong"})
        assert response.status_code == 401

    def test_valid_key(self, client):
        response = client.get("/players", headers={"X-API-KEY": "test-api-key"})
        assert response.status_code == 200
        assert response.json() == []

    def test_health_and_metrics_stay_open(self, client):
        assert client.get("/health").status_code == 200
        assert client.get("/metrics").status_code == 200

    def test_rejections_are_timed_and_correlated(self):
        service = make_service(api_key="test-api-key")

        with TestClient(service.app) as client:
            response = client.get("/players", headers={"X-Request-ID": "req-401"})

        assert response.status_code == 401
        assert response.headers["X-Request-ID"] == "req-401"
        assert service.metrics.registry.get_sample_value(
            "http_requests_total", {"method": "GET", "endpoint": "/players", "status_code": "401"}
        ) == 1
