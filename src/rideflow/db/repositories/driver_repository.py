"""Driver repository for CRUD operations."""

from collections.abc import Iterable, Mapping
from typing import Any

from ...models.driver import Driver, DriverDraft, DriverPatch
from ..utils import epoch_millis
from .base_repository import BaseRecordRepository, coerce, entry_id

DRIVERS_COLLECTION = "drivers"

# Demo roster inserted into an empty driver collection
DEFAULT_DRIVERS: list[dict[str, Any]] = [
    {
        "name": "Alex Rivera",
        "phone": "+1 (555) 123-4567",
        "vehicle": "Tesla Model 3",
        "plate": "NRD-2024",
        "rating": 4.9,
        "status": "available",
    },
    {
        "name": "Jordan Chen",
        "phone": "+1 (555) 234-5678",
        "vehicle": "BMW X5",
        "plate": "LUX-8901",
        "rating": 4.8,
        "status": "busy",
    },
    {
        "name": "Sam Rodriguez",
        "phone": "+1 (555) 345-6789",
        "vehicle": "Mercedes S-Class",
        "plate": "PRE-5432",
        "rating": 5.0,
        "status": "available",
    },
]


class DriverRepository(BaseRecordRepository[Driver]):
    """Repository for driver CRUD operations.

    Unlike rides, driver updates do not record an `updatedAt` timestamp.
    """

    collection = DRIVERS_COLLECTION
    model_class = Driver
    patch_class = DriverPatch
    log_field = "driver_id"

    def create(self, draft: DriverDraft | Mapping[str, Any]) -> Driver:
        """Register a driver as `DRV-<epoch millis>`.

        Raises:
            ValidationError: If a required field is empty or the rating is
                outside [1, 5]. The collection is left unchanged.
            StorageError: If the driver could not be saved.
        """
        driver_draft = coerce(DriverDraft, draft)
        now = self.clock()

        entries = self._read()
        taken = {entry_id(entry) for entry in entries}
        millis = epoch_millis(now)
        while f"DRV-{millis}" in taken:
            millis += 1

        driver = Driver(
            id=f"DRV-{millis}",
            created_at=now,
            **driver_draft.model_dump(),
        )
        return self._append(driver, entries)

    def list_all(self) -> list[Driver]:
        return self._load()

    def seed_defaults(self) -> list[Driver]:
        """Insert the demo roster if no drivers exist yet."""
        if self._load():
            return []
        return [self.create(draft) for draft in DEFAULT_DRIVERS]


def highest_rated_first(drivers: Iterable[Driver]) -> list[Driver]:
    return sorted(drivers, key=lambda driver: driver.rating, reverse=True)
