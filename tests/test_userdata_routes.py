import pytest
from route_fixtures import auth


@pytest.mark.asyncio
async def test_get_user_data_creates_empty_ledger(api_client) -> None:
    response = await api_client.get("/api/userdata", headers=auth())

    assert response.status_code == 200
    data = response.json()["data"]
    assert data["userId"] == "route-user"
    assert data["currentOdometer"] == 0
    assert data["activeTrip"] is None
    assert "activeTripDetails" not in data


@pytest.mark.asyncio
async def test_get_user_data_embeds_active_trip(api_client) -> None:
    started = await api_client.post(
        "/api/trips",
        json={"purpose": "Delivery run", "startOdometer": 4200},
        headers=auth(),
    )
    trip_id = started.json()["data"]["id"]

    data = (await api_client.get("/api/userdata", headers=auth())).json()["data"]

    assert data["currentOdometer"] == 4200
    assert data["activeTrip"] == trip_id
    assert data["activeTripDetails"]["id"] == trip_id
    assert data["activeTripDetails"]["purpose"] == "Delivery run"
    assert data["activeTripDetails"]["status"] == "active"


@pytest.mark.asyncio
async def test_get_user_data_reports_dangling_pointer(api_client) -> None:
    await api_client.put(
        "/api/userdata/active-trip",
        json={"tripId": "665f1c2b9d1e8a0012345678"},
        headers=auth(),
    )

    data = (await api_client.get("/api/userdata", headers=auth())).json()["data"]

    assert data["activeTrip"] == "665f1c2b9d1e8a0012345678"
    assert data["activeTripDetails"] is None


@pytest.mark.asyncio
async def test_put_user_data_merges_fields(api_client) -> None:
    trip_id = "665f1c2b9d1e8a0012345678"
    first = await api_client.put(
        "/api/userdata",
        json={"currentOdometer": 500, "activeTrip": trip_id},
        headers=auth(),
    )
    assert first.status_code == 200
    assert first.json()["data"]["activeTrip"] == trip_id

    odometer_only = await api_client.put(
        "/api/userdata",
        json={"currentOdometer": 650},
        headers=auth(),
    )
    data = odometer_only.json()["data"]
    assert data["currentOdometer"] == 650
    assert data["activeTrip"] == trip_id

    cleared = await api_client.put(
        "/api/userdata",
        json={"activeTrip": None},
        headers=auth(),
    )
    data = cleared.json()["data"]
    assert data["currentOdometer"] == 650
    assert data["activeTrip"] is None


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "body",
    [{}, {"currentOdometer": -5}, {"currentOdometer": "9"}, {"currentOdometer": 10**400}],
)
async def test_put_odometer_requires_valid_reading(api_client, body) -> None:
    response = await api_client.put("/api/userdata/odometer", json=body, headers=auth())

    assert response.status_code == 400
    assert response.json()["error"] == "Valid odometer reading is required"


@pytest.mark.asyncio
async def test_put_odometer_overwrites_total(api_client) -> None:
    response = await api_client.put(
        "/api/userdata/odometer",
        json={"currentOdometer": 250.5},
        headers=auth(),
    )

    assert response.status_code == 200
    assert response.json()["data"]["currentOdometer"] == 250.5


@pytest.mark.asyncio
async def test_active_trip_pointer_set_and_clear(api_client) -> None:
    missing = await api_client.put(
        "/api/userdata/active-trip",
        json={},
        headers=auth(),
    )
    assert missing.status_code == 400

    malformed = await api_client.put(
        "/api/userdata/active-trip",
        json={"tripId": "nope"},
        headers=auth(),
    )
    assert malformed.status_code == 400

    trip_id = "665f1c2b9d1e8a0012345678"
    set_response = await api_client.put(
        "/api/userdata/active-trip",
        json={"tripId": trip_id},
        headers=auth(),
    )
    assert set_response.json()["data"]["activeTrip"] == trip_id

    cleared = await api_client.delete("/api/userdata/active-trip", headers=auth())
    assert cleared.status_code == 200
    assert cleared.json()["data"]["activeTrip"] is None
