"""Ride repository for CRUD operations."""

import re
from collections.abc import Iterable, Mapping
from typing import Any

from ...core.exceptions import ValidationError
from ...fare import fare_for
from ...models.ride import Ride, RideDraft, RidePatch, RideStats, RideStatus
from .base_repository import BaseRecordRepository, coerce, entry_id

RIDES_COLLECTION = "rides"
RIDE_COUNTER = "ride_counter"
RIDE_COUNTER_START = 1001

ALL_RIDES = "all"

RIDE_ID_PATTERN = re.compile(r"RIDE-(\d+)")


def _ride_number(entry: Any) -> int | None:
    match = RIDE_ID_PATTERN.fullmatch(entry_id(entry) or "")
    return int(match.group(1)) if match else None


class RideRepository(BaseRecordRepository[Ride]):
    """Repository for ride CRUD operations."""

    collection = RIDES_COLLECTION
    model_class = Ride
    patch_class = RidePatch
    log_field = "ride_id"

    def create(self, draft: RideDraft | Mapping[str, Any]) -> Ride:
        """Book a ride as `RIDE-<n>` in pending status.

        Raises:
            ValidationError: If pickup, dropoff or ride type is missing or
                any field is out of range. Nothing is persisted.
            StorageError: If the ride could not be saved.
        """
        ride_draft = coerce(RideDraft, draft)
        entries = self._read()

        number = self._next_ride_number(entries)
        self.store.bump_counter(RIDE_COUNTER, RIDE_COUNTER_START)

        price = ride_draft.price
        if price is None:
            price = fare_for(ride_draft.ride_type)

        ride = Ride(
            id=f"RIDE-{number}",
            pickup=ride_draft.pickup,
            dropoff=ride_draft.dropoff,
            ride_type=ride_draft.ride_type,
            passengers=ride_draft.passengers,
            price=price,
            special_requests=ride_draft.special_requests,
            notes=ride_draft.notes,
            status=RideStatus.PENDING,
            created_at=self.clock(),
        )
        return self._append(ride, entries)

    def _next_ride_number(self, entries: list[Any]) -> int:
        """Counter value for the next ride, moved past the highest stored `RIDE-<n>`.

        A missing or corrupt counter reads as the initial value; if that is
        not above every stored ride number the repaired value is persisted.
        """
        number = self.store.next_counter(RIDE_COUNTER, RIDE_COUNTER_START)
        highest = max(
            (n for n in map(_ride_number, entries) if n is not None),
            default=0,
        )
        if number <= highest:
            number = highest + 1
            self.store.set_counter(RIDE_COUNTER, number)
        return number

    def _stamp(self, changes: dict[str, Any]) -> dict[str, Any]:
        return {**changes, "updated_at": self.clock()}

    def list_by_status(self, status_filter: RideStatus | str = ALL_RIDES) -> list[Ride]:
        """Rides with the given status, or every ride for "all"."""
        rides = self._load()
        if status_filter == ALL_RIDES:
            return rides

        try:
            status = RideStatus(status_filter)
        except ValueError as e:
            raise ValidationError(
                f"Unknown ride status filter: {status_filter}",
                {"filter": str(status_filter)},
            ) from e
        return [ride for ride in rides if ride.status == status]

    def stats(self) -> RideStats:
        rides = self._load()
        return RideStats(
            total=len(rides),
            active=sum(1 for ride in rides if ride.is_active),
            completed=sum(1 for ride in rides if ride.status == RideStatus.COMPLETED),
        )


def newest_first(rides: Iterable[Ride]) -> list[Ride]:
    return sorted(rides, key=lambda ride: ride.created_at, reverse=True)
