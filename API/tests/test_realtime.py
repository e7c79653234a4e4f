import asyncio

import pytest
from fastapi.testclient import TestClient

from chamber.main import create_app
from chamber.services.realtime import ADMIN_ROOMS, Broadcaster

from .conftest import ADMIN_EMAIL, ADMIN_PASSWORD


class FakeServer:
    """Stands in for socketio.AsyncServer, recording room and emit calls."""

    def __init__(self):
        self.sessions = {}
        self.rooms = {}
        self.emitted = []

    async def save_session(self, sid, session):
        self.sessions[sid] = session

    async def get_session(self, sid):
        return self.sessions[sid]

    async def enter_room(self, sid, room):
        self.rooms.setdefault(room, set()).add(sid)

    async def emit(self, event, data, to=None):
        self.emitted.append((event, data, to))


def _decode(token):
    if token == "admin-token":
        return {"userId": 1, "role": "admin"}
    if token == "user-token":
        return {"userId": 2, "role": "user"}
    raise ValueError("bad token")


@pytest.fixture
def broadcaster():
    b = Broadcaster(["http://localhost:3000"], _decode)
    b.sio = FakeServer()
    return b


def test_join_user_room(broadcaster):
    async def scenario():
        await broadcaster.on_connect("s1", {}, None)
        await broadcaster.on_join_user("s1")

    asyncio.run(scenario())
    assert broadcaster.sio.rooms == {"user": {"s1"}}


def test_admin_room_requires_admin_token(broadcaster):
    async def scenario():
        await broadcaster.on_connect("anon", {}, None)
        await broadcaster.on_connect("member", {}, {"token": "user-token"})
        await broadcaster.on_connect("bad", {}, {"token": "forged"})
        await broadcaster.on_connect("chair", {}, {"token": "admin-token"})
        for sid in ("anon", "member", "bad", "chair"):
            await broadcaster.on_join_admin(sid)

    asyncio.run(scenario())
    assert broadcaster.sio.rooms == {"admin": {"chair"}}
    rejected = [to for event, _, to in broadcaster.sio.emitted if event == "join-error"]
    assert rejected == ["anon", "member", "bad"]


def test_emit_targets_rooms(broadcaster):
    asyncio.run(broadcaster.emit("notice-created", {"id": 1}))
    asyncio.run(broadcaster.emit("admin-password-changed", {"id": 1}, ADMIN_ROOMS))
    assert broadcaster.sio.emitted == [
        ("notice-created", {"id": 1}, ["user", "admin"]),
        ("admin-password-changed", {"id": 1}, ["admin"]),
    ]


def test_publish_outside_worker_thread_does_not_raise(broadcaster):
    broadcaster.publish("notice-created", {"id": 1})
    assert broadcaster.sio.emitted == []


def test_rest_create_reaches_socket_server(settings, monkeypatch):
    app = create_app(settings)
    sio = app.state.chamber.broadcaster.sio
    emitted = []

    async def fake_emit(event, data, to=None, **kwargs):
        emitted.append((event, data["id"], to))

    monkeypatch.setattr(sio, "emit", fake_emit)
    with TestClient(app) as client:
        token = client.post(
            "/api/auth/login", json={"email": ADMIN_EMAIL, "password": ADMIN_PASSWORD}
        ).json()["token"]
        r = client.post(
            "/api/notices",
            headers={"Authorization": f"Bearer {token}"},
            json={"title": "Live", "content": "Pushed to sockets"},
        )
    assert r.status_code == 201
    assert emitted == [("notice-created", r.json()["notice"]["id"], ["user", "admin"])]
