from fastapi.testclient import TestClient

from conftest import run_setup


def test_read_root(client: TestClient):
    resp = client.get("/")
    assert resp.status_code == 200
    data = resp.json()
    assert data["app_name"] == "Magazine API"
    assert data["version"] == "0.1"
    assert data["build_name"] == "First issue"
    assert isinstance(data["build_time"], int)
    assert data["setup_complete"] is False


def test_root_reports_setup_complete(client: TestClient):
    run_setup(client)
    assert client.get("/").json()["setup_complete"] is True


def test_health(client: TestClient):
    resp = client.get("/health")
    assert resp.status_code == 200
    assert resp.json()["ok"] is True
