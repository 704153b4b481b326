import pytest

from dynaform.db import crud
from dynaform.db.crud import UniqueConstraintViolation

pytestmark = pytest.mark.integration


def _submission(**overrides):
    payload = {
        "fullName": "Jo",
        "email": "jo@x.com",
        "gender": "Female",
        "loveReactFlag": False,
    }
    payload.update(overrides)
    return payload


@pytest.mark.anyio
async def test_submit_creates_user(client):
    res = await client.post("/users", json=_submission())
    assert res.status_code == 201, res.text
    body = res.json()
    assert body["fullName"] == "Jo"
    assert body["email"] == "jo@x.com"
    assert body["gender"] == "Female"
    assert body["loveReactFlag"] is False
    assert body["id"] > 0


@pytest.mark.anyio
async def test_submit_under_api_prefix(client):
    res = await client.post("/api/users", json=_submission())
    assert res.status_code == 201


@pytest.mark.anyio
async def test_love_react_flag_defaults_to_false(client):
    payload = _submission()
    del payload["loveReactFlag"]
    res = await client.post("/users", json=payload)
    assert res.status_code == 201
    assert res.json()["loveReactFlag"] is False


@pytest.mark.anyio
async def test_duplicate_email_is_conflict(client):
    assert (await client.post("/users", json=_submission())).status_code == 201

    res = await client.post("/users", json=_submission(fullName="Someone Else"))
    assert res.status_code == 409
    body = res.json()
    assert body["message"] == "Email already exists"
    assert body["statusCode"] == 409


@pytest.mark.anyio
async def test_invalid_payload_is_400_not_conflict(client):
    assert (await client.post("/users", json=_submission())).status_code == 201

    res = await client.post("/users", json=_submission(email="not-an-email"))
    assert res.status_code == 400
    body = res.json()
    assert "errors" in body
    assert any(e["field"] == "email" for e in body["errors"])


@pytest.mark.anyio
@pytest.mark.parametrize("overrides", [
    {"gender": "Unknown"},
    {"fullName": ""},
    {"fullName": "x" * 101},
    {"email": "a" * 45 + "@x.com"},
])
async def test_submission_constraints(client, overrides):
    res = await client.post("/users", json=_submission(**overrides))
    assert res.status_code == 400


@pytest.mark.anyio
async def test_list_users_newest_first(client):
    first = (await client.post("/users", json=_submission(email="a@x.com"))).json()
    second = (await client.post("/users", json=_submission(email="b@x.com"))).json()

    res = await client.get("/users")
    assert res.status_code == 200
    assert [u["id"] for u in res.json()] == [second["id"], first["id"]]


@pytest.mark.anyio
async def test_update_user(client):
    user = (await client.post("/users", json=_submission())).json()

    res = await client.put(f"/users/{user['id']}", json={"loveReactFlag": True, "gender": "Others"})
    assert res.status_code == 200
    body = res.json()
    assert body["loveReactFlag"] is True
    assert body["gender"] == "Others"
    assert body["email"] == "jo@x.com"


@pytest.mark.anyio
async def test_update_to_existing_email_is_conflict(client):
    await client.post("/users", json=_submission(email="a@x.com"))
    other = (await client.post("/users", json=_submission(email="b@x.com"))).json()

    res = await client.put(f"/users/{other['id']}", json={"email": "a@x.com"})
    assert res.status_code == 409
    assert res.json()["message"] == "Email already exists"


@pytest.mark.anyio
async def test_update_keeping_own_email_is_allowed(client):
    user = (await client.post("/users", json=_submission())).json()

    res = await client.put(f"/users/{user['id']}", json={"email": "jo@x.com", "fullName": "Joanna"})
    assert res.status_code == 200
    assert res.json()["fullName"] == "Joanna"


@pytest.mark.anyio
async def test_delete_user(client):
    user = (await client.post("/users", json=_submission())).json()

    res = await client.delete(f"/users/{user['id']}")
    assert res.status_code == 200
    assert res.json() == {
        "message": f"User with ID {user['id']} has been deleted successfully",
        "id": user["id"],
    }

    res = await client.get(f"/users/{user['id']}")
    assert res.status_code == 404
    assert res.json()["message"] == f"User with ID {user['id']} not found"


@pytest.mark.anyio
async def test_crud_reports_unique_violation(test_session):
    await crud.create_user(test_session, full_name="Jo", email="jo@x.com", gender="Female")
    await test_session.commit()

    with pytest.raises(UniqueConstraintViolation) as exc_info:
        await crud.create_user(test_session, full_name="Jo", email="jo@x.com", gender="Male")
    assert exc_info.value.column == "email"
