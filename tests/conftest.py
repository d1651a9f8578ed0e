import os

# Settings read the environment; keep a developer's shell from leaking into tests.
for _var in list(os.environ):
    if _var.startswith(("RIDEFLOW_", "REDIS_")):
        del os.environ[_var]

from datetime import UTC, datetime, timedelta
from typing import TYPE_CHECKING

import pytest

from rideflow.db.backends import InMemoryBackend
from rideflow.db.record_store import RecordStore
from rideflow.db.repositories import DriverRepository, RideRepository
from tests.factories import RecordFactory

if TYPE_CHECKING:
    from faker.proxy import Faker


class FakeClock:
    """Deterministic clock advancing one second per reading."""

    def __init__(self, start: datetime | None = None) -> None:
        self.current = start or datetime(2024, 5, 1, 12, 0, tzinfo=UTC)

    def __call__(self) -> datetime:
        now = self.current
        self.current = now + timedelta(seconds=1)
        return now


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def record_factory() -> RecordFactory:
    """Factory for ride and driver drafts with seeded Faker."""
    return RecordFactory(seed=42)


@pytest.fixture
def fake(record_factory: RecordFactory) -> "Faker":
    return record_factory.fake


@pytest.fixture
def memory_backend() -> InMemoryBackend:
    return InMemoryBackend()


@pytest.fixture
def store(memory_backend: InMemoryBackend) -> RecordStore:
    return RecordStore(memory_backend)


@pytest.fixture
def ride_repo(store: RecordStore, clock: FakeClock) -> RideRepository:
    return RideRepository(store, clock=clock)


@pytest.fixture
def driver_repo(store: RecordStore, clock: FakeClock) -> DriverRepository:
    return DriverRepository(store, clock=clock)


@pytest.fixture
def temp_sqlite_db(tmp_path):
    """Temporary SQLite database for persistence tests."""
    return tmp_path / "test_rideflow.db"
