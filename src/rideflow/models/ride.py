"""Ride record, draft and patch models."""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum

from pydantic import Field

from .base import PatchModel, RecordModel, StoredRecord


class RideType(str, Enum):
    ECONOMY = "economy"
    COMFORT = "comfort"
    PREMIUM = "premium"
    XL = "xl"


class RideStatus(str, Enum):
    """Ride status. Any value may follow any other; transitions are not guarded."""

    PENDING = "pending"
    CONFIRMED = "confirmed"
    IN_PROGRESS = "in-progress"
    COMPLETED = "completed"


ACTIVE_STATUSES = frozenset(
    {RideStatus.PENDING, RideStatus.CONFIRMED, RideStatus.IN_PROGRESS}
)


class RideDraft(RecordModel):
    """Caller input for booking a ride."""

    pickup: str = Field(min_length=1)
    dropoff: str = Field(min_length=1)
    ride_type: RideType
    passengers: int = Field(default=1, gt=0)
    # Defaults to the ride type's fare when omitted
    price: float | None = Field(default=None, ge=0)
    special_requests: str | None = None
    notes: str | None = None


class Ride(StoredRecord):
    id: str
    pickup: str = Field(min_length=1)
    dropoff: str = Field(min_length=1)
    ride_type: RideType
    passengers: int = Field(default=1, gt=0)
    price: float = Field(ge=0)
    special_requests: str | None = None
    notes: str | None = None
    status: RideStatus = RideStatus.PENDING
    created_at: datetime
    updated_at: datetime | None = None

    @property
    def is_active(self) -> bool:
        return self.status in ACTIVE_STATUSES


class RidePatch(PatchModel):
    """Partial ride update. `id` and `created_at` cannot be patched."""

    pickup: str | None = Field(default=None, min_length=1)
    dropoff: str | None = Field(default=None, min_length=1)
    ride_type: RideType | None = None
    passengers: int | None = Field(default=None, gt=0)
    price: float | None = Field(default=None, ge=0)
    special_requests: str | None = None
    notes: str | None = None
    status: RideStatus | None = None


@dataclass(frozen=True)
class RideStats:
    total: int
    active: int
    completed: int
