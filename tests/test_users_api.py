import pytest

from models.db_models import AuthMode, User
from tests.utils import reload


@pytest.mark.asyncio
async def test_list_users_envelope_and_page_meta(client, make_user):
    for name in ("Ana", "Bruno", "Carla"):
        await make_user(name=name)

    resp = await client.get("/users", params={"page": 2, "limit": 2, "sort_by": "name", "order": "asc"})
    assert resp.status_code == 200
    body = resp.json()
    assert body["ok"] is True
    assert body["error"] is None
    page = body["data"]
    assert [u["name"] for u in page["items"]] == ["Carla"]
    assert page["total_elements"] == 3
    assert page["total_pages"] == 2
    assert page["has_prev_page"] is True
    assert page["has_next_page"] is False
    assert page["prev_page"] == 1
    assert page["next_page"] is None
    assert page["ordered"] == "ASC"
    assert all("password" not in u for u in page["items"])


@pytest.mark.asyncio
async def test_list_users_rejects_unknown_sort_field(client):
    resp = await client.get("/users", params={"sort_by": "nope"})
    assert resp.status_code == 400
    assert resp.json()["error"]["code"] == "invalid_argument"


@pytest.mark.asyncio
async def test_list_users_rejects_zero_limit(client):
    resp = await client.get("/users", params={"limit": 0})
    assert resp.status_code == 422
    assert resp.json()["ok"] is False


@pytest.mark.asyncio
async def test_get_user_hides_password(client, make_user):
    user = await make_user(name="Visible")

    resp = await client.get(f"/users/{user.id}")
    assert resp.status_code == 200
    data = resp.json()["data"]
    assert data["name"] == "Visible"
    assert "password" not in data


@pytest.mark.asyncio
async def test_get_user_not_found(client):
    resp = await client.get("/users/does-not-exist")
    assert resp.status_code == 404
    body = resp.json()
    assert body["ok"] is False
    assert body["error"]["code"] == "not_found"


@pytest.mark.asyncio
async def test_get_user_by_email_hides_password(client, make_user):
    await make_user(email="lookup@mail.com")

    resp = await client.get("/users/by-email", params={"email": "lookup@mail.com"})
    assert resp.status_code == 200
    data = resp.json()["data"]
    assert data["email"] == "lookup@mail.com"
    assert data["payments"] == []
    assert "password" not in data


@pytest.mark.asyncio
async def test_update_form_user_phone(client, session, make_user):
    user = await make_user(phone="111-1111")
    user_id = user.id

    resp = await client.put(f"/users/{user_id}", json={"phone": "555-1234"})
    assert resp.status_code == 200
    data = resp.json()["data"]
    assert data["message"] == "User Updated Successfully"
    assert data["user"]["phone"] == "555-1234"
    assert "password" not in data["user"]

    stored = await reload(session, User, user_id)
    assert stored.phone == "555-1234"
    assert stored.auth == AuthMode.FORM.value


@pytest.mark.asyncio
async def test_update_banned_user_is_forbidden(client, make_user):
    user = await make_user(banned=True, ban_reason="Spam")

    resp = await client.put(f"/users/{user.id}", json={"phone": "555-1234"})
    assert resp.status_code == 403
    assert resp.json()["error"]["message"] == "Your account has been banned. Reason: Spam"


@pytest.mark.asyncio
async def test_update_rejects_non_profile_fields(client, make_user):
    user = await make_user()

    resp = await client.put(f"/users/{user.id}", json={"banned": False, "auth": "google"})
    assert resp.status_code == 422


@pytest.mark.asyncio
async def test_delete_user_then_missing(client, session, make_user):
    user = await make_user(name="Bye")
    user_id = user.id

    resp = await client.delete(f"/users/{user_id}")
    assert resp.status_code == 200
    assert resp.json()["data"]["user"]["id"] == user_id
    assert await reload(session, User, user_id) is None

    resp = await client.delete(f"/users/{user_id}")
    assert resp.status_code == 404
    assert resp.json()["error"]["code"] == "not_found"


@pytest.mark.asyncio
async def test_health_and_request_id(client):
    resp = await client.get("/health")
    assert resp.status_code == 200
    assert resp.json() == {"ok": True, "data": {"status": "ok"}, "error": None}
    assert resp.headers.get("X-Request-ID")


@pytest.mark.asyncio
async def test_update_rejects_password_over_72_bytes(client, session, make_user):
    user = await make_user()
    user_id = user.id
    old_hash = user.password

    resp = await client.put(f"/users/{user_id}", json={"password": "ñ" * 72})
    assert resp.status_code == 422
    body = resp.json()
    assert body["error"]["code"] == "validation_error"
    assert "72 bytes" in body["error"]["message"]
    stored = await reload(session, User, user_id)
    assert stored.password == old_hash


@pytest.mark.asyncio
async def test_list_users_cannot_sort_by_password(client, make_user):
    await make_user()

    resp = await client.get("/users", params={"sort_by": "password"})
    assert resp.status_code == 400
    assert resp.json()["error"]["code"] == "invalid_argument"
