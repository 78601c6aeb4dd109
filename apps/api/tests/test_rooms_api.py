"""API tests for the room endpoints, including the auth gate."""
from __future__ import annotations

from datetime import datetime, timedelta, timezone
from types import SimpleNamespace

import pytest
from sqlalchemy.exc import OperationalError

from room_discovery.repositories import rooms as rooms_repo
from room_discovery.services import tokens


@pytest.mark.asyncio
async def test_end_to_end_room_flow(client, auth_headers):
    created = await client.post("/room", json={"title": "Show", "hostId": "ann-id"}, headers=auth_headers)
    assert created.status_code == 201
    room = created.json()
    assert room["status"] == "created"
    assert room["guestIds"] == []
    assert room["hlsPlaybackUrl"].endswith(f"/{room['roomId']}/index.m3u8")
    room_id = room["roomId"]

    joined = await client.post(f"/room/{room_id}/join", json={"userId": "bob-id"}, headers=auth_headers)
    assert joined.status_code == 200
    assert joined.json() == {
        "role": "guest",
        "roomId": room_id,
        "webrtcRoomId": room["webrtcRoomId"],
        "hlsUrl": room["hlsPlaybackUrl"],
        "chatRoomId": room["chatChannelId"],
    }

    started = await client.post(f"/room/{room_id}/start", headers=auth_headers)
    assert started.status_code == 200
    assert started.json() == {"roomId": room_id, "status": "live"}

    fetched = await client.get(f"/room/{room_id}", headers=auth_headers)
    assert fetched.status_code == 200
    body = fetched.json()
    assert body["status"] == "live"
    assert body["guestIds"] == ["bob-id"]
    assert body["hostId"] == "ann-id"
    assert body["title"] == "Show"


@pytest.mark.asyncio
async def test_start_twice_then_stop(client, auth_headers):
    room_id = (await client.post("/room", json={"title": "Show", "hostId": "ann-id"}, headers=auth_headers)).json()[
        "roomId"
    ]

    first = await client.post(f"/room/{room_id}/start", headers=auth_headers)
    second = await client.post(f"/room/{room_id}/start", headers=auth_headers)
    stopped = await client.post(f"/room/{room_id}/stop", headers=auth_headers)

    assert first.json()["status"] == "live"
    assert second.status_code == 200
    assert second.json()["status"] == "live"
    assert stopped.json() == {"roomId": room_id, "status": "ended"}
    assert (await client.get(f"/room/{room_id}", headers=auth_headers)).json()["status"] == "ended"


@pytest.mark.asyncio
async def test_host_join_reports_host_role(client, auth_headers):
    room_id = (await client.post("/room", json={"title": "Show", "hostId": "ann-id"}, headers=auth_headers)).json()[
        "roomId"
    ]

    joined = await client.post(f"/room/{room_id}/join", json={"userId": "ann-id"}, headers=auth_headers)

    assert joined.json()["role"] == "host"
    assert (await client.get(f"/room/{room_id}", headers=auth_headers)).json()["guestIds"] == []


@pytest.mark.asyncio
@pytest.mark.parametrize(
    ("method", "path"),
    [
        ("get", "/room/missing"),
        ("post", "/room/missing/start"),
        ("post", "/room/missing/stop"),
    ],
)
async def test_unknown_room_is_404(client, auth_headers, method, path):
    response = await client.request(method.upper(), path, headers=auth_headers)

    assert response.status_code == 404
    assert response.json() == {"error": {"code": "NOT_FOUND", "message": "room not found"}}


@pytest.mark.asyncio
async def test_join_unknown_room_is_404(client, auth_headers):
    response = await client.post("/room/missing/join", json={"userId": "bob-id"}, headers=auth_headers)

    assert response.status_code == 404


@pytest.mark.asyncio
async def test_create_room_requires_title_and_host(client, auth_headers):
    response = await client.post("/room", json={"title": "  "}, headers=auth_headers)

    assert response.status_code == 400
    error = response.json()["error"]
    assert error["code"] == "INVALID_INPUT"
    assert set(error["fields"]) == {"title", "hostId"}


@pytest.mark.asyncio
async def test_join_requires_user_id(client, auth_headers):
    room_id = (await client.post("/room", json={"title": "Show", "hostId": "ann-id"}, headers=auth_headers)).json()[
        "roomId"
    ]

    response = await client.post(f"/room/{room_id}/join", json={}, headers=auth_headers)

    assert response.status_code == 400
    assert response.json()["error"]["fields"] == ["userId"]


@pytest.mark.asyncio
async def test_missing_token_is_unauthenticated(client):
    response = await client.post("/room", json={"title": "Show", "hostId": "ann-id"})

    assert response.status_code == 401
    assert response.json()["error"]["code"] == "UNAUTHENTICATED"
    assert response.headers["WWW-Authenticate"] == "Bearer"


@pytest.mark.asyncio
async def test_bad_token_is_rejected(client):
    response = await client.get("/room/anything", headers={"Authorization": "Bearer not-a-token"})

    assert response.status_code == 401
    assert response.json()["error"]["code"] == "INVALID_TOKEN"


@pytest.mark.asyncio
async def test_expired_token_is_rejected(client, settings):
    user = SimpleNamespace(id="ann-id", email="ann@x.com", name="Ann")
    expired = tokens.issue_token(user, settings, now=datetime.now(timezone.utc) - timedelta(days=2))

    response = await client.get("/room/anything", headers={"Authorization": f"Bearer {expired.token}"})

    assert response.status_code == 401
    assert response.json()["error"]["code"] == "INVALID_TOKEN"


@pytest.mark.asyncio
async def test_storage_failure_hides_details(client, auth_headers, monkeypatch):
    async def unreachable(*args, **kwargs):
        raise OperationalError("SELECT rooms", {}, ConnectionRefusedError("db host 10.0.0.5 refused"))

    monkeypatch.setattr(rooms_repo, "get_by_room_id", unreachable)

    response = await client.get("/room/some-room", headers=auth_headers)

    assert response.status_code == 500
    assert response.json() == {"error": {"code": "STORAGE_ERROR", "message": "Internal server error"}}
