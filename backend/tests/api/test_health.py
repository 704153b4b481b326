import pytest

from dynaform.api.health import healthz

pytestmark = pytest.mark.integration


@pytest.mark.anyio
async def test_healthz():
    assert healthz() == {"status": "ok"}


@pytest.mark.anyio
async def test_health_reports_service(client):
    res = await client.get("/health")
    assert res.status_code == 200
    assert res.json() == {"status": "ok", "service": "dynaform"}


@pytest.mark.anyio
async def test_readyz_db_ok(client):
    res = await client.get("/readyz")
    assert res.status_code == 200
    assert res.json() == {"status": "ready"}


@pytest.mark.anyio
async def test_readyz_fails_when_db_unavailable(client):
    from dynaform.main import app
    from dynaform.db.database import get_db

    class BrokenSession:
        async def execute(self, *args, **kwargs):
            raise ConnectionError("database is down")

    async def _broken_db():
        yield BrokenSession()

    original = app.dependency_overrides[get_db]
    app.dependency_overrides[get_db] = _broken_db
    try:
        res = await client.get("/readyz")
    finally:
        app.dependency_overrides[get_db] = original

    assert res.status_code == 503
    assert res.json()["message"] == "Not ready"


@pytest.mark.anyio
async def test_unknown_route_uses_error_shape(client):
    res = await client.get("/nope")
    assert res.status_code == 404
    body = res.json()
    assert body["statusCode"] == 404
    assert "message" in body


@pytest.mark.anyio
async def test_request_id_is_echoed(client):
    res = await client.get("/form-fields/config", headers={"X-Request-ID": "abc123"})
    assert res.headers["X-Request-ID"] == "abc123"
