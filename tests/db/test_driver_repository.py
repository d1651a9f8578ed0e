"""Tests for driver repository CRUD operations."""

import json
from datetime import UTC, datetime

import pytest

from rideflow.core.exceptions import ValidationError
from rideflow.db.repositories import DriverRepository, highest_rated_first
from rideflow.db.repositories.driver_repository import DEFAULT_DRIVERS
from rideflow.db.utils import epoch_millis
from rideflow.models import DriverStatus

SAM = {
    "name": "Sam",
    "phone": "555",
    "vehicle": "Car",
    "plate": "ABC",
    "rating": 4.5,
    "status": "available",
}


@pytest.mark.unit
class TestCreateDriver:
    def test_create_scenario(self, driver_repo, clock, memory_backend):
        """A new driver gets a DRV-<millis> id and is stored."""
        expected_millis = epoch_millis(clock.current)

        driver = driver_repo.create(SAM)

        assert driver.id == f"DRV-{expected_millis}"
        assert driver.rating == 4.5
        assert driver.status == DriverStatus.AVAILABLE
        [stored] = json.loads(memory_backend.get("rideflow_drivers"))
        assert stored["rating"] == 4.5
        assert stored["createdAt"].startswith("2024-05-01T12:00:00")

    def test_rating_out_of_range_leaves_collection_unchanged(self, driver_repo, memory_backend):
        """An out-of-range rating raises before any write."""
        driver_repo.create(SAM)
        before = memory_backend.get("rideflow_drivers")

        with pytest.raises(ValidationError) as exc_info:
            driver_repo.create({**SAM, "rating": 6})

        assert exc_info.value.details["errors"][0]["field"] == "rating"
        assert memory_backend.get("rideflow_drivers") == before
        assert len(driver_repo.list_all()) == 1

    @pytest.mark.parametrize("rating", [1, 1.0, 5, 5.0])
    def test_rating_bounds_inclusive(self, driver_repo, rating):
        """Ratings of exactly one and five are accepted."""
        assert driver_repo.create({**SAM, "rating": rating}).rating == rating

    def test_rating_below_minimum_rejected(self, driver_repo):
        """A rating below one is rejected."""
        with pytest.raises(ValidationError):
            driver_repo.create({**SAM, "rating": 0.9})

    @pytest.mark.parametrize("field", ["name", "phone", "vehicle", "plate"])
    def test_required_fields(self, driver_repo, memory_backend, field):
        """Blank required fields are rejected."""
        with pytest.raises(ValidationError):
            driver_repo.create({**SAM, field: ""})

        assert memory_backend.get("rideflow_drivers") is None

    def test_status_defaults_to_available(self, driver_repo):
        """Drivers without a status are available."""
        draft = {k: v for k, v in SAM.items() if k != "status"}

        assert driver_repo.create(draft).status == DriverStatus.AVAILABLE

    def test_same_millisecond_ids_stay_unique(self, store):
        """Drivers created in one millisecond get consecutive ids."""
        frozen = datetime(2024, 5, 1, 12, 0, tzinfo=UTC)
        repo = DriverRepository(store, clock=lambda: frozen)

        ids = [repo.create(SAM).id for _ in range(3)]

        millis = epoch_millis(frozen)
        assert ids == [f"DRV-{millis}", f"DRV-{millis + 1}", f"DRV-{millis + 2}"]

    def test_unreadable_driver_kept_and_id_not_reused(self, driver_repo, clock, memory_backend):
        """An entry that fails validation is written back and its id stays taken."""
        taken = f"DRV-{epoch_millis(clock.current)}"
        legacy = {**SAM, "id": taken, "rating": 9, "createdAt": "2024-05-01T11:00:00Z"}
        memory_backend.set("rideflow_drivers", json.dumps([legacy]))

        driver = driver_repo.create(SAM)

        assert driver.id != taken
        stored = json.loads(memory_backend.get("rideflow_drivers"))
        assert stored[0] == legacy
        assert [entry["id"] for entry in stored] == [taken, driver.id]



@pytest.mark.unit
class TestUpdateDriver:
    def test_merge_patch(self, driver_repo):
        """Patched fields change and the rest are kept."""
        driver = driver_repo.create(SAM)

        updated = driver_repo.update(driver.id, {"status": "busy", "rating": 4.8})

        assert updated.status == DriverStatus.BUSY
        assert updated.rating == 4.8
        assert updated.name == "Sam"
        assert updated.created_at == driver.created_at

    def test_no_updated_at(self, driver_repo, memory_backend):
        """Driver updates do not stamp updatedAt."""
        driver = driver_repo.create(SAM)
        driver_repo.update(driver.id, {"vehicle": "Van"})

        [stored] = json.loads(memory_backend.get("rideflow_drivers"))
        assert stored["vehicle"] == "Van"
        assert "updatedAt" not in stored

    def test_missing_driver_returns_none(self, driver_repo):
        """Updating an unknown driver returns None."""
        driver_repo.create(SAM)

        assert driver_repo.update("DRV-0", {"status": "offline"}) is None

    def test_rating_patch_validated(self, driver_repo):
        """An out-of-range rating patch leaves the driver unchanged."""
        driver = driver_repo.create(SAM)

        with pytest.raises(ValidationError):
            driver_repo.update(driver.id, {"rating": 7})

        assert driver_repo.get_by_id(driver.id).rating == 4.5

    def test_undeclared_fields_survive_update(self, driver_repo, memory_backend):
        """Keys the driver model does not declare are kept through a status change."""
        driver = driver_repo.create(SAM)
        [stored] = json.loads(memory_backend.get("rideflow_drivers"))
        memory_backend.set(
            "rideflow_drivers", json.dumps([{**stored, "licenseExpiry": "2026-01-31"}])
        )

        driver_repo.update(driver.id, {"status": "offline"})

        [stored] = json.loads(memory_backend.get("rideflow_drivers"))
        assert stored["licenseExpiry"] == "2026-01-31"
        assert stored["status"] == "offline"



@pytest.mark.unit
class TestDeleteDriver:
    def test_delete_is_idempotent(self, driver_repo):
        """Deleting a driver twice succeeds both times."""
        driver = driver_repo.create(SAM)

        assert driver_repo.delete(driver.id) is True
        assert driver_repo.delete(driver.id) is True
        assert driver_repo.get_by_id(driver.id) is None
        assert driver_repo.list_all() == []


@pytest.mark.unit
class TestListAndSeed:
    def test_highest_rated_first(self, driver_repo, record_factory):
        """highest_rated_first sorts by descending rating."""
        for rating in (3.2, 4.9, 1.5, 4.1):
            driver_repo.create(record_factory.driver_draft(rating=rating))

        ratings = [d.rating for d in highest_rated_first(driver_repo.list_all())]

        assert ratings == [4.9, 4.1, 3.2, 1.5]

    def test_list_keeps_insertion_order(self, driver_repo, record_factory):
        """list_all returns drivers in creation order."""
        created = [driver_repo.create(record_factory.driver_draft()) for _ in range(4)]

        assert [d.id for d in driver_repo.list_all()] == [d.id for d in created]

    def test_seed_empty_roster(self, driver_repo):
        """Seeding an empty roster adds the demo drivers."""
        seeded = driver_repo.seed_defaults()

        assert [d.name for d in seeded] == [d["name"] for d in DEFAULT_DRIVERS]
        assert len({d.id for d in seeded}) == 3
        assert driver_repo.list_all() == seeded

    def test_seed_skips_existing_roster(self, driver_repo):
        """Seeding does nothing once drivers exist."""
        driver_repo.create(SAM)

        assert driver_repo.seed_defaults() == []
        assert len(driver_repo.list_all()) == 1
