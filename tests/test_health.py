from fastapi.testclient import TestClient

from alert_relay.main import app


def test_health() -> None:
    client = TestClient(app)
    response = client.get("/api/v1/healthz")
    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_root_health() -> None:
    client = TestClient(app)
    response = client.get("/healthz")
    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_request_id_is_echoed() -> None:
    client = TestClient(app)
    response = client.get("/healthz", headers={"X-Request-ID": "req-123"})
    assert response.headers["X-Request-ID"] == "req-123"


def test_request_id_is_generated_when_missing() -> None:
    client = TestClient(app)
    response = client.get("/healthz")
    assert response.headers.get("X-Request-ID")


def test_request_id_falls_back_to_github_delivery() -> None:
    client = TestClient(app)
    response = client.get("/healthz", headers={"X-GitHub-Delivery": "72d3162e-cc78-11e3-81ab-4c9367dc0958"})
    assert response.headers["X-Request-ID"] == "72d3162e-cc78-11e3-81ab-4c9367dc0958"
