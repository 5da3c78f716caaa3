import pytest
from beanie import PydanticObjectId

from core.exceptions import ValidationError
from db.models import Trip, UserOdometer
from odometer.services import Finalize, OdometerLedgerService, RaiseFloor, SetLive

USER = "user-1"


async def _seed(current: float, active: PydanticObjectId | None = None) -> None:
    await UserOdometer(userId=USER, currentOdometer=current, activeTripId=active).insert()


@pytest.mark.asyncio
async def test_get_or_create_makes_empty_ledger(beanie_db) -> None:
    ledger = await OdometerLedgerService.get_or_create(USER)

    assert ledger.currentOdometer == 0
    assert ledger.activeTripId is None
    again = await OdometerLedgerService.get_or_create(USER)
    assert again.id == ledger.id
    assert await UserOdometer.find(UserOdometer.userId == USER).count() == 1


@pytest.mark.asyncio
async def test_raise_floor_never_lowers_total(beanie_db) -> None:
    trip_id = PydanticObjectId()
    await _seed(100)

    ledger = await OdometerLedgerService.apply(
        RaiseFloor(user_id=USER, trip_id=trip_id, value=80),
    )

    assert ledger.currentOdometer == 100
    assert ledger.activeTripId == trip_id


@pytest.mark.asyncio
async def test_raise_floor_lifts_lower_total(beanie_db) -> None:
    trip_id = PydanticObjectId()
    await _seed(50)

    ledger = await OdometerLedgerService.apply(
        RaiseFloor(user_id=USER, trip_id=trip_id, value=80),
    )

    assert ledger.currentOdometer == 80
    assert ledger.activeTripId == trip_id


@pytest.mark.asyncio
async def test_raise_floor_creates_missing_ledger(beanie_db) -> None:
    trip_id = PydanticObjectId()

    ledger = await OdometerLedgerService.apply(
        RaiseFloor(user_id=USER, trip_id=trip_id, value=1200),
    )

    assert ledger.currentOdometer == 1200
    assert ledger.activeTripId == trip_id


@pytest.mark.asyncio
async def test_set_live_overwrites_total_and_keeps_pointer(beanie_db) -> None:
    trip_id = PydanticObjectId()
    await _seed(500, trip_id)

    ledger = await OdometerLedgerService.apply(SetLive(user_id=USER, value=103))

    assert ledger.currentOdometer == 103
    assert ledger.activeTripId == trip_id


@pytest.mark.asyncio
async def test_finalize_increments_and_clears_pointer(beanie_db) -> None:
    await _seed(112, PydanticObjectId())

    ledger = await OdometerLedgerService.apply(Finalize(user_id=USER, increment_by=12))

    assert ledger.currentOdometer == 124
    assert ledger.activeTripId is None


@pytest.mark.asyncio
async def test_sync_active_trip_repairs_drift(beanie_db) -> None:
    stale = PydanticObjectId()
    current = PydanticObjectId()
    await _seed(10, stale)

    assert await OdometerLedgerService.sync_active_trip(USER, current) is True
    ledger = await OdometerLedgerService.get_or_create(USER)
    assert ledger.activeTripId == current
    assert ledger.currentOdometer == 10

    assert await OdometerLedgerService.sync_active_trip(USER, current) is False


@pytest.mark.asyncio
async def test_update_state_merges_only_given_fields(beanie_db) -> None:
    trip_id = PydanticObjectId()
    await _seed(40, trip_id)

    ledger = await OdometerLedgerService.update_state(USER, current_odometer=75)
    assert ledger.currentOdometer == 75
    assert ledger.activeTripId == trip_id

    ledger = await OdometerLedgerService.update_state(USER, active_trip_id=None)
    assert ledger.currentOdometer == 75
    assert ledger.activeTripId is None

    ledger = await OdometerLedgerService.set_active_trip(USER, str(trip_id))
    assert ledger.activeTripId == trip_id

    ledger = await OdometerLedgerService.clear_active_trip(USER)
    assert ledger.activeTripId is None


@pytest.mark.asyncio
@pytest.mark.parametrize("value", [-1, None, "100", float("nan"), True])
async def test_set_odometer_rejects_invalid_values(beanie_db, value) -> None:
    with pytest.raises(ValidationError, match="Valid odometer reading is required"):
        await OdometerLedgerService.set_odometer(USER, value)


@pytest.mark.asyncio
async def test_set_active_trip_rejects_malformed_id(beanie_db) -> None:
    with pytest.raises(ValidationError, match="Invalid trip id"):
        await OdometerLedgerService.set_active_trip(USER, "not-an-id")


@pytest.mark.asyncio
async def test_active_trip_for_resolves_only_own_trip(beanie_db) -> None:
    mine = Trip(userId=USER, purpose="Commute", startOdometer=0)
    theirs = Trip(userId="someone-else", purpose="Commute", startOdometer=0)
    await mine.insert()
    await theirs.insert()

    ledger = await OdometerLedgerService.set_active_trip(USER, str(mine.id))
    assert (await OdometerLedgerService.active_trip_for(ledger)).id == mine.id

    ledger = await OdometerLedgerService.set_active_trip(USER, str(theirs.id))
    assert await OdometerLedgerService.active_trip_for(ledger) is None
