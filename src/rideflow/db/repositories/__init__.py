"""Repository layer for record CRUD operations."""

from .base_repository import BaseRecordRepository
from .driver_repository import DriverRepository, highest_rated_first
from .ride_repository import RideRepository, newest_first

__all__ = [
    "BaseRecordRepository",
    "DriverRepository",
    "RideRepository",
    "highest_rated_first",
    "newest_first",
]
