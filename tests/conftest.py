"""Shared fixtures: a controllable clock and a seeded in-memory service stack."""

from datetime import datetime, timedelta, timezone

import pytest
import pytest_asyncio

from app.core.config import Settings
from app.db.persistence import MemoryPersistence
from app.services import build_services
from app.services.bootstrap_service import DEMO_USER_UUID, bootstrap
from app.services.store_service import CredentialStore

ADMIN_UUID = "admin-test-0001"
DASHBOARD_UUID = "dash-test-0001"


class FakeClock:
    """Callable clock that only moves when told to."""

    def __init__(self, start: datetime = datetime(2026, 1, 1, 12, 0, tzinfo=timezone.utc)):
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, seconds: float = 0, minutes: float = 0) -> None:
        self.now += timedelta(seconds=seconds, minutes=minutes)


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def settings():
    return Settings(
        admin_uuid=ADMIN_UUID,
        dashboard_uuid=DASHBOARD_UUID,
        storage_backend="memory",
        seed_demo_content=True,
        _env_file=None,
    )


@pytest.fixture
def store():
    """Empty store over process memory."""
    return CredentialStore(MemoryPersistence())


@pytest_asyncio.fixture
async def services(settings, clock):
    """Service stack seeded with the demo riddles and demo user."""
    container = build_services(MemoryPersistence(), settings, clock=clock)
    await bootstrap(container.store, settings)
    return container


@pytest.fixture
def user_uuid():
    return DEMO_USER_UUID
