import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.exc import OperationalError

from room_discovery.db.session import get_session
from room_discovery.main import create_app


@pytest.mark.asyncio
async def test_health_endpoint(client) -> None:
    response = await client.get("/health")

    assert response.status_code == 200
    assert response.json() == {
        "status": "ok",
        "database": "connected",
        "service": "room-discovery",
        "version": "1.0.0",
    }


@pytest.mark.asyncio
async def test_health_head(client) -> None:
    response = await client.head("/health")

    assert response.status_code == 200


class UnreachableSession:
    async def execute(self, *args, **kwargs):
        raise OperationalError("SELECT 1", {}, ConnectionRefusedError("connection refused"))


@pytest.mark.asyncio
async def test_health_reports_unreachable_store(settings) -> None:
    app = create_app(settings)

    async def broken_session():
        yield UnreachableSession()

    app.dependency_overrides[get_session] = broken_session
    transport = ASGITransport(app=app)

    async with AsyncClient(transport=transport, base_url="http://testserver") as client:
        response = await client.get("/health")

    assert response.status_code == 503
    body = response.json()
    assert body["status"] == "error"
    assert body["database"] == "disconnected"
