import pytest

from app.seed import SEED_VEHICLES


@pytest.mark.asyncio
async def test_driver_sees_only_active_vehicles_by_plate(client, driver_headers):
    response = await client.get("/api/v1/vehicles", headers=driver_headers)

    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "success"
    plates = [v["license_plate"] for v in body["data"]]
    assert plates == ["B-FL 1001", "B-FL 1002", "B-FL 2001"]
    assert all(v["status"] == "active" for v in body["data"])


@pytest.mark.asyncio
async def test_get_vehicles_item_format(client, driver_headers):
    response = await client.get("/api/v1/vehicles", headers=driver_headers)

    vehicle = response.json()["data"][0]
    assert set(vehicle) == {"id", "license_plate", "model", "status"}


@pytest.mark.asyncio
async def test_vehicles_require_login(client):
    response = await client.get("/api/v1/vehicles")
    assert response.status_code == 401


@pytest.mark.asyncio
async def test_admin_lists_all_vehicles(client, admin_headers):
    response = await client.get("/api/v1/admin/vehicles", headers=admin_headers)

    assert response.status_code == 200
    assert len(response.json()["data"]) == len(SEED_VEHICLES)


@pytest.mark.asyncio
async def test_driver_cannot_manage_vehicles(client, driver_headers):
    response = await client.get("/api/v1/admin/vehicles", headers=driver_headers)
    assert response.status_code == 403


@pytest.mark.asyncio
async def test_create_vehicle(client, admin_headers):
    response = await client.post(
        "/api/v1/admin/vehicles",
        json={"license_plate": "b-fl 3001", "model": "Ford Transit"},
        headers=admin_headers,
    )

    assert response.status_code == 201
    body = response.json()
    assert body["data"]["license_plate"] == "B-FL 3001"
    assert body["data"]["status"] == "active"
    assert body["message"] == "B-FL 3001 has been added successfully"


@pytest.mark.asyncio
async def test_create_vehicle_duplicate_plate(client, admin_headers):
    response = await client.post(
        "/api/v1/admin/vehicles",
        json={"license_plate": "B-FL 1001", "model": "VW Crafter"},
        headers=admin_headers,
    )

    assert response.status_code == 409
    assert response.json()["data"]["code"] == "DuplicateLicensePlate"


@pytest.mark.asyncio
async def test_update_vehicle_status(client, admin_headers, driver_headers):
    vehicle_id = SEED_VEHICLES[0]["id"]
    response = await client.put(
        f"/api/v1/admin/vehicles/{vehicle_id}",
        json={"status": "inactive"},
        headers=admin_headers,
    )
    assert response.status_code == 200
    assert response.json()["data"]["status"] == "inactive"

    response = await client.get("/api/v1/vehicles", headers=driver_headers)
    assert vehicle_id not in [v["id"] for v in response.json()["data"]]


@pytest.mark.asyncio
async def test_update_unknown_vehicle(client, admin_headers):
    response = await client.put("/api/v1/admin/vehicles/nope", json={"model": "X"}, headers=admin_headers)
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_delete_unreferenced_vehicle(client, admin_headers):
    vehicle_id = SEED_VEHICLES[3]["id"]
    response = await client.delete(f"/api/v1/admin/vehicles/{vehicle_id}", headers=admin_headers)

    assert response.status_code == 200
    response = await client.get("/api/v1/admin/vehicles", headers=admin_headers)
    assert vehicle_id not in [v["id"] for v in response.json()["data"]]


@pytest.mark.asyncio
async def test_delete_vehicle_with_entries_conflicts(client, admin_headers, add_entries):
    vehicle_id = SEED_VEHICLES[0]["id"]
    await add_entries(2, vehicle_id=vehicle_id)

    response = await client.delete(f"/api/v1/admin/vehicles/{vehicle_id}", headers=admin_headers)

    assert response.status_code == 409
    body = response.json()
    assert body["data"]["code"] == "ReferentialDeleteConflict"
    assert body["data"]["title"] == "Delete Failed"
