"""Pydantic models for ride and driver records."""

from .driver import Driver, DriverDraft, DriverPatch, DriverStatus
from .ride import Ride, RideDraft, RidePatch, RideStats, RideStatus, RideType

__all__ = [
    "Driver",
    "DriverDraft",
    "DriverPatch",
    "DriverStatus",
    "Ride",
    "RideDraft",
    "RidePatch",
    "RideStats",
    "RideStatus",
    "RideType",
]
