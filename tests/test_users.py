import pytest

from app.models.session import Session
from app.seed import SEED_ADMIN_ID, SEED_DRIVER_ID

NEW_DRIVER = {
    "first_name": "Erika",
    "last_name": "Muster",
    "username": "emuster",
    "password": "geheim123",
    "confirm_password": "geheim123",
}


@pytest.mark.asyncio
async def test_create_driver_and_log_in(client, admin_headers, login):
    response = await client.post("/api/v1/admin/users", json=NEW_DRIVER, headers=admin_headers)

    assert response.status_code == 201
    body = response.json()
    assert body["data"]["role"] == "driver"
    assert body["data"]["status"] == "active"
    assert "password_hash" not in body["data"]
    assert body["message"] == "Erika Muster has been added as a new driver"

    headers = await login(client, "emuster", "geheim123")
    assert headers["Authorization"].startswith("Bearer ")


@pytest.mark.asyncio
async def test_create_user_duplicate_username(client, admin_headers):
    await client.post("/api/v1/admin/users", json=NEW_DRIVER, headers=admin_headers)
    response = await client.post("/api/v1/admin/users", json=NEW_DRIVER, headers=admin_headers)

    assert response.status_code == 409
    assert response.json()["data"]["code"] == "DuplicateUsername"


@pytest.mark.asyncio
@pytest.mark.parametrize("field, value", [
    ("username", "ab"),
    ("password", "12345"),
    ("first_name", "   "),
    ("confirm_password", "different1"),
])
async def test_create_user_validation(client, admin_headers, field, value):
    response = await client.post(
        "/api/v1/admin/users", json={**NEW_DRIVER, field: value}, headers=admin_headers
    )
    assert response.status_code == 422


@pytest.mark.asyncio
async def test_list_users_filtered_by_role(client, admin_headers):
    response = await client.get("/api/v1/admin/users", params={"role": "driver"}, headers=admin_headers)

    assert response.status_code == 200
    assert [u["id"] for u in response.json()["data"]] == [SEED_DRIVER_ID]


@pytest.mark.asyncio
async def test_driver_cannot_manage_users(client, driver_headers):
    response = await client.get("/api/v1/admin/users", headers=driver_headers)
    assert response.status_code == 403


@pytest.mark.asyncio
async def test_update_user_password_only_when_given(client, admin_headers, login):
    response = await client.put(
        f"/api/v1/admin/users/{SEED_DRIVER_ID}",
        json={"first_name": "Moritz"},
        headers=admin_headers,
    )
    assert response.json()["data"]["first_name"] == "Moritz"
    await login(client, "fahrer", "fahrer123")

    await client.put(
        f"/api/v1/admin/users/{SEED_DRIVER_ID}",
        json={"password": "neuespasswort"},
        headers=admin_headers,
    )
    await login(client, "fahrer", "neuespasswort")


@pytest.mark.asyncio
async def test_toggle_status(client, admin_headers):
    response = await client.post(f"/api/v1/admin/users/{SEED_DRIVER_ID}/toggle-status", headers=admin_headers)
    assert response.json()["data"]["status"] == "inactive"
    assert response.json()["message"] == "User status changed to inactive"

    response = await client.post(f"/api/v1/admin/users/{SEED_DRIVER_ID}/toggle-status", headers=admin_headers)
    assert response.json()["data"]["status"] == "active"


@pytest.mark.asyncio
async def test_delete_user_with_entries_conflicts(client, admin_headers, add_entries):
    await add_entries(1)

    response = await client.delete(f"/api/v1/admin/users/{SEED_DRIVER_ID}", headers=admin_headers)

    assert response.status_code == 409
    assert response.json()["data"]["code"] == "ReferentialDeleteConflict"


@pytest.mark.asyncio
async def test_delete_user_removes_sessions(client, admin_headers, add_driver, count_rows, login):
    await add_driver("kurzzeit", password="secret123")
    await login(client, "kurzzeit", "secret123")
    sessions_before = await count_rows(Session)

    response = await client.get("/api/v1/admin/users", headers=admin_headers)
    user_id = next(u["id"] for u in response.json()["data"] if u["username"] == "kurzzeit")
    response = await client.delete(f"/api/v1/admin/users/{user_id}", headers=admin_headers)

    assert response.status_code == 200
    assert await count_rows(Session) == sessions_before - 1


@pytest.mark.asyncio
async def test_admin_cannot_delete_self(client, admin_headers):
    response = await client.delete(f"/api/v1/admin/users/{SEED_ADMIN_ID}", headers=admin_headers)
    assert response.status_code == 409


@pytest.mark.asyncio
@pytest.mark.parametrize("method, path", [
    ("put", f"/api/v1/admin/users/{SEED_DRIVER_ID}"),
    ("post", f"/api/v1/admin/users/{SEED_DRIVER_ID}/toggle-status"),
    ("delete", f"/api/v1/admin/users/{SEED_DRIVER_ID}"),
])
async def test_driver_cannot_change_users(client, driver_headers, method, path):
    kwargs = {"json": {"first_name": "Hacker"}} if method == "put" else {}
    response = await client.request(method.upper(), path, headers=driver_headers, **kwargs)
    assert response.status_code == 403


@pytest.mark.asyncio
@pytest.mark.parametrize("field, value", [
    ("username", "   "),
    ("username", "  ab  "),
    ("first_name", ""),
    ("last_name", "  "),
])
async def test_update_user_rejects_blank_fields(client, admin_headers, field, value):
    response = await client.put(
        f"/api/v1/admin/users/{SEED_DRIVER_ID}", json={field: value}, headers=admin_headers
    )
    assert response.status_code == 422


@pytest.mark.asyncio
async def test_update_user_strips_names(client, admin_headers):
    response = await client.put(
        f"/api/v1/admin/users/{SEED_DRIVER_ID}",
        json={"username": "  mfahrer  ", "first_name": " Moritz "},
        headers=admin_headers,
    )
    data = response.json()["data"]
    assert data["username"] == "mfahrer"
    assert data["first_name"] == "Moritz"
