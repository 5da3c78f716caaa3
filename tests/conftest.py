import sys
from collections.abc import AsyncIterator
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]

if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

import pytest
from beanie import init_beanie
from httpx import ASGITransport, AsyncClient
from mongomock_motor import AsyncMongoMockClient
from network_blocker import install_network_blocker
from route_fixtures import StaticNamer

from app import app  # noqa: E402
from core.http.circuit_breaker import nominatim_breaker  # noqa: E402
from db.models import ALL_DOCUMENT_MODELS  # noqa: E402
from trips.dependencies import get_trip_lifecycle  # noqa: E402
from trips.services import TripLifecycleService  # noqa: E402
from trips.services.user_locks import UserLockRegistry  # noqa: E402


@pytest.fixture(autouse=True)
def _default_test_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("NOMINATIM_BASE_URL", "http://nominatim.test")
    monkeypatch.setenv("GEOCODE_USER_AGENT", "trip-meter-tests/1.0")
    install_network_blocker(monkeypatch)
    nominatim_breaker.reset()


@pytest.fixture
async def beanie_db():
    client = AsyncMongoMockClient()
    database = client["test_db"]
    await init_beanie(database=database, document_models=ALL_DOCUMENT_MODELS)
    return database


@pytest.fixture
async def api_client(beanie_db) -> AsyncIterator[AsyncClient]:
    lifecycle = TripLifecycleService(namer=StaticNamer(), locks=UserLockRegistry())
    app.dependency_overrides[get_trip_lifecycle] = lambda: lifecycle
    transport = ASGITransport(app=app)
    try:
        async with AsyncClient(transport=transport, base_url="http://test") as client:
            yield client
    finally:
        app.dependency_overrides.clear()
