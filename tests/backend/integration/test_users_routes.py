import json
import uuid

import pytest
from tortoise.exceptions import OperationalError

from accounthub.api.v1.routers import users as users_router


pytestmark = pytest.mark.asyncio


async def _headers(create_user, auth_header_factory):
    user, password = await create_user()
    return user, await auth_header_factory(user.username, password)


async def test_user_data_by_id_and_username(client, create_user, auth_header_factory):
    me, headers = await _headers(create_user, auth_header_factory)
    other, _ = await create_user()

    by_id = await client.get("/userData", params={"_id": str(other.id)}, headers=headers)
    assert by_id.status_code == 200
    assert by_id.json()["username"] == other.username

    by_name = await client.get("/userData", params={"username": other.username}, headers=headers)
    assert by_name.status_code == 200
    assert by_name.json()["_id"] == str(other.id)


async def test_user_data_not_found_and_missing_selector(client, create_user, auth_header_factory):
    _, headers = await _headers(create_user, auth_header_factory)

    missing = await client.get("/userData", params={"username": "nobody"}, headers=headers)
    assert missing.status_code == 404
    assert missing.json()["detail"]["code"] == "USER_NOT_FOUND"

    bad_id = await client.get("/userData", params={"_id": "not-a-uuid"}, headers=headers)
    assert bad_id.status_code == 404

    no_selector = await client.get("/userData", headers=headers)
    assert no_selector.status_code == 400


async def test_user_routes_require_bearer(client):
    assert (await client.get("/userData", params={"username": "x"})).status_code == 401
    assert (await client.get("/users")).status_code == 401


async def test_users_by_id_list(client, create_user, auth_header_factory):
    me, headers = await _headers(create_user, auth_header_factory)
    a, _ = await create_user()
    b, _ = await create_user()
    await create_user()

    repeated = await client.get(
        "/users", params=[("_id", str(a.id)), ("_id", str(b.id))], headers=headers
    )
    assert repeated.status_code == 200
    assert {u["_id"] for u in repeated.json()} == {str(a.id), str(b.id)}

    comma = await client.get("/users", params={"_id": f"{a.id},{b.id},junk"}, headers=headers)
    assert {u["_id"] for u in comma.json()} == {str(a.id), str(b.id)}


async def test_users_without_filters_returns_everyone(client, create_user, auth_header_factory):
    me, headers = await _headers(create_user, auth_header_factory)
    other, _ = await create_user()
    resp = await client.get("/users", headers=headers)
    assert {u["_id"] for u in resp.json()} == {str(me.id), str(other.id)}


async def test_users_filters_are_combined(client, create_user, auth_header_factory):
    me, headers = await _headers(create_user, auth_header_factory)
    admin, _ = await create_user(roles=["admin"])

    # username matches but roles does not: no result, every filter must hold
    resp = await client.get(
        "/users", params={"username": me.username, "roles": "admin"}, headers=headers
    )
    assert resp.status_code == 200
    assert resp.json() == []

    resp = await client.get("/users", params={"roles": "admin"}, headers=headers)
    assert [u["_id"] for u in resp.json()] == [str(admin.id)]


async def test_users_select_json(client, create_user, auth_header_factory):
    me, headers = await _headers(create_user, auth_header_factory)
    other, _ = await create_user()

    select = json.dumps({"username": [me.username, other.username], "email": other.email})
    resp = await client.get("/users", params={"select": select}, headers=headers)
    assert resp.status_code == 200
    assert [u["_id"] for u in resp.json()] == [str(other.id)]


async def test_users_select_rejects_bad_input(client, create_user, auth_header_factory):
    _, headers = await _headers(create_user, auth_header_factory)

    not_json = await client.get("/users", params={"select": "{oops"}, headers=headers)
    assert not_json.status_code == 400

    unknown = await client.get("/users", params={"select": json.dumps({"password": "x"})}, headers=headers)
    assert unknown.status_code == 400
    assert "password" in unknown.json()["detail"]["message"]


async def test_unknown_ids_give_empty_list(client, create_user, auth_header_factory):
    _, headers = await _headers(create_user, auth_header_factory)
    resp = await client.get("/users", params={"_id": str(uuid.uuid4())}, headers=headers)
    assert resp.status_code == 200
    assert resp.json() == []


async def test_online_users_reads_app_registry(client, create_user, auth_header_factory, fake_socket):
    from accounthub.main import app

    me, headers = await _headers(create_user, auth_header_factory)
    await app.state.clients.attach(fake_socket("s1"), me.to_public())

    resp = await client.get("/onlineUsers", headers=headers)
    assert resp.status_code == 200
    assert resp.json() == {"userIds": [str(me.id)]}


async def test_query_failure_is_reported_as_database_error(client, create_user, auth_header_factory, monkeypatch):
    _, headers = await _headers(create_user, auth_header_factory)

    async def broken(filters):
        raise OperationalError("connection lost")
    monkeypatch.setattr(users_router, "query_users", broken)

    resp = await client.get("/users", headers=headers)
    assert resp.status_code == 500
    assert resp.json() == {"detail": {"code": "DATABASE_ERROR", "message": "connection lost"}}
