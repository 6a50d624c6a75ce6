import os
import shutil
import sys
import tempfile
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

TMP_ROOT = Path(tempfile.mkdtemp(prefix="magazine-tests-"))
DATA_DIR = TMP_ROOT / "data"
UPLOAD_DIR = TMP_ROOT / "uploads"

os.environ["DB_PATH"] = str(DATA_DIR / "magazine.db")
os.environ["DATABASE_URL"] = f"sqlite:///{DATA_DIR / 'magazine.db'}"
os.environ["UPLOAD_DIR"] = str(UPLOAD_DIR)
os.environ["SECRET_KEY"] = "test-secret-key"
os.environ["SETUP_ENABLED"] = "true"
os.environ["LOGIN_URL"] = "/login"
os.environ["ENV_FILE"] = str(TMP_ROOT / ".env")

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

from magazine_api.main import app
from magazine_api.db import engine
from magazine_api.utils.rate_limit import reset_rate_limits

ADMIN_USER = "editor"
ADMIN_PASSWORD = "s3cret-pass"


def _wipe_state():
    engine.dispose()
    shutil.rmtree(DATA_DIR, ignore_errors=True)
    shutil.rmtree(UPLOAD_DIR, ignore_errors=True)
    reset_rate_limits()


@pytest.fixture(autouse=True)
def clean_state():
    _wipe_state()
    yield
    _wipe_state()


@pytest.fixture
def client():
    with TestClient(app) as c:
        yield c


def run_setup(client: TestClient, username: str = ADMIN_USER, password: str = ADMIN_PASSWORD):
    return client.post(
        "/setup",
        data={"username": username, "password": password, "confirm_password": password},
    )


def get_authenticated_client(client: TestClient) -> TestClient:
    resp = run_setup(client)
    assert resp.status_code == 200

    resp = client.post("/auth/login", json={"username": ADMIN_USER, "password": ADMIN_PASSWORD})
    assert resp.status_code == 200
    token = resp.json()["access_token"]

    client.headers.update({"Authorization": f"Bearer {token}"})
    return client


@pytest.fixture
def admin_client(client):
    return get_authenticated_client(client)
