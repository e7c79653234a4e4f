import io

import pytest
from fastapi.testclient import TestClient
from PIL import Image

from chamber.api import deps
from chamber.core.config import Settings
from chamber.main import create_app
from chamber.services.realtime import CONTENT_ROOMS

ADMIN_EMAIL = "admin@admin.com"
ADMIN_PASSWORD = "admin123"


class RecordingBroadcaster:
    def __init__(self):
        self.events = []

    def publish(self, event, data, rooms=CONTENT_ROOMS):
        self.events.append((event, data, tuple(rooms)))

    def names(self):
        return [event for event, _, _ in self.events]


@pytest.fixture
def settings(tmp_path):
    return Settings(
        DATABASE_URL=f"sqlite:///{tmp_path / 'test.db'}",
        UPLOAD_DIR=str(tmp_path / "uploads"),
        JWT_SECRET="test-secret",
        BCRYPT_ROUNDS=4,
        AUTH_RATE_LIMIT_MAX=1000,
        BOOTSTRAP_ADMIN_EMAIL=ADMIN_EMAIL,
        BOOTSTRAP_ADMIN_PASSWORD=ADMIN_PASSWORD,
    )


@pytest.fixture
def broadcaster():
    return RecordingBroadcaster()


@pytest.fixture
def app(settings, broadcaster):
    app = create_app(settings)
    app.dependency_overrides[deps.get_broadcaster] = lambda: broadcaster
    return app


@pytest.fixture
def client(app):
    with TestClient(app) as c:
        yield c


@pytest.fixture
def admin_headers(client):
    r = client.post("/api/auth/login", json={"email": ADMIN_EMAIL, "password": ADMIN_PASSWORD})
    assert r.status_code == 200, r.text
    return {"Authorization": f"Bearer {r.json()['token']}"}


@pytest.fixture
def user_headers(client):
    r = client.post(
        "/api/auth/register",
        json={"name": "Member", "email": "member@example.com", "password": "member-pass"},
    )
    assert r.status_code == 201, r.text
    return {"Authorization": f"Bearer {r.json()['token']}"}


def make_image(fmt="PNG", size=(64, 48), color=(200, 30, 30)) -> bytes:
    buf = io.BytesIO()
    Image.new("RGB", size, color).save(buf, format=fmt)
    return buf.getvalue()


@pytest.fixture
def png_bytes():
    return make_image()
