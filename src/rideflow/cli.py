"""Command-line front end for booking rides and managing drivers.

Usage:
    rideflow ride book --pickup "Main St" --dropoff "Airport" --type economy
    rideflow ride list --status pending
    rideflow ride update RIDE-1001 --status confirmed
    rideflow driver add --name "Sam" --phone 555 --vehicle Car --plate ABC --rating 4.5
    rideflow driver seed
    rideflow reset
"""

import argparse
import json
import logging
import sys
from collections.abc import Callable
from dataclasses import asdict
from typing import Any

from .core.exceptions import NotFoundError, StorageError, ValidationError
from .db import get_record_store
from .db.record_store import RecordStore
from .db.repositories import (
    DriverRepository,
    RideRepository,
    highest_rated_first,
    newest_first,
)
from .db.repositories.driver_repository import DRIVERS_COLLECTION
from .db.repositories.ride_repository import ALL_RIDES, RIDE_COUNTER, RIDES_COLLECTION
from .fare import RIDE_TYPE_FARES, fare_for, format_currency
from .models import DriverStatus, RideStatus, RideType
from .ride_logging import log_context, setup_logging
from .settings import get_settings

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_NOT_FOUND = 1
EXIT_INVALID = 2
EXIT_STORAGE = 3

RIDE_TYPES = [t.value for t in RideType]
RIDE_STATUSES = [s.value for s in RideStatus]
DRIVER_STATUSES = [s.value for s in DriverStatus]


class Context:
    """Repositories shared by every command of one invocation."""

    def __init__(self, store: RecordStore) -> None:
        self.store = store
        self.rides = RideRepository(store)
        self.drivers = DriverRepository(store)


Handler = Callable[[argparse.Namespace, Context], Any]


def _emit(data: Any) -> None:
    print(json.dumps(data, indent=2))


def _patch_from(args: argparse.Namespace, mapping: dict[str, str]) -> dict[str, Any]:
    patch = {}
    for arg_name, field in mapping.items():
        value = getattr(args, arg_name, None)
        if value is not None:
            patch[field] = value
    return patch


# Ride commands


def book_ride(args: argparse.Namespace, ctx: Context) -> None:
    ride = ctx.rides.create(
        {
            "pickup": args.pickup,
            "dropoff": args.dropoff,
            "ride_type": args.type,
            "passengers": args.passengers,
            "special_requests": args.requests,
            "notes": args.notes,
        }
    )
    _emit(ride.to_record())


def list_rides(args: argparse.Namespace, ctx: Context) -> None:
    rides = newest_first(ctx.rides.list_by_status(args.status))
    _emit([ride.to_record() for ride in rides])


def show_ride(args: argparse.Namespace, ctx: Context) -> None:
    ride = ctx.rides.get_by_id(args.id)
    if ride is None:
        raise NotFoundError(f"Ride {args.id} not found")
    _emit(ride.to_record())


def update_ride(args: argparse.Namespace, ctx: Context) -> None:
    patch = _patch_from(
        args,
        {
            "pickup": "pickup",
            "dropoff": "dropoff",
            "type": "ride_type",
            "passengers": "passengers",
            "price": "price",
            "requests": "special_requests",
            "notes": "notes",
            "status": "status",
        },
    )
    # A new ride type re-prices the ride unless a price was given
    if "ride_type" in patch and "price" not in patch:
        patch["price"] = fare_for(patch["ride_type"])

    ride = ctx.rides.update(args.id, patch)
    if ride is None:
        raise NotFoundError(f"Ride {args.id} not found")
    _emit(ride.to_record())


def delete_ride(args: argparse.Namespace, ctx: Context) -> None:
    _emit({"id": args.id, "deleted": ctx.rides.delete(args.id)})


def ride_stats(args: argparse.Namespace, ctx: Context) -> None:
    _emit(asdict(ctx.rides.stats()))


def list_fares(args: argparse.Namespace, ctx: Context) -> None:
    _emit({ride_type.value: format_currency(fare) for ride_type, fare in RIDE_TYPE_FARES.items()})


# Driver commands


def add_driver(args: argparse.Namespace, ctx: Context) -> None:
    driver = ctx.drivers.create(
        {
            "name": args.name,
            "phone": args.phone,
            "vehicle": args.vehicle,
            "plate": args.plate,
            "rating": args.rating,
            "status": args.status,
        }
    )
    _emit(driver.to_record())


def list_drivers(args: argparse.Namespace, ctx: Context) -> None:
    drivers = highest_rated_first(ctx.drivers.list_all())
    _emit([driver.to_record() for driver in drivers])


def update_driver(args: argparse.Namespace, ctx: Context) -> None:
    patch = _patch_from(
        args,
        {
            "name": "name",
            "phone": "phone",
            "vehicle": "vehicle",
            "plate": "plate",
            "rating": "rating",
            "status": "status",
        },
    )
    driver = ctx.drivers.update(args.id, patch)
    if driver is None:
        raise NotFoundError(f"Driver {args.id} not found")
    _emit(driver.to_record())


def delete_driver(args: argparse.Namespace, ctx: Context) -> None:
    _emit({"id": args.id, "deleted": ctx.drivers.delete(args.id)})


def seed_drivers(args: argparse.Namespace, ctx: Context) -> None:
    _emit([driver.to_record() for driver in ctx.drivers.seed_defaults()])


def reset(args: argparse.Namespace, ctx: Context) -> None:
    ctx.store.clear([RIDES_COLLECTION, DRIVERS_COLLECTION, RIDE_COUNTER])
    _emit({"reset": True})


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="rideflow",
        description="Book rides and manage drivers in a local record store.",
    )
    entities = parser.add_subparsers(dest="entity", required=True)

    ride = entities.add_parser("ride", help="Ride bookings")
    ride_actions = ride.add_subparsers(dest="action", required=True)

    book = ride_actions.add_parser("book", help="Book a new ride")
    book.add_argument("--pickup", required=True)
    book.add_argument("--dropoff", required=True)
    book.add_argument("--type", required=True, choices=RIDE_TYPES)
    book.add_argument("--passengers", type=int, default=1)
    book.add_argument("--requests", help="Special requests")
    book.add_argument("--notes")
    book.set_defaults(handler=book_ride)

    listing = ride_actions.add_parser("list", help="List rides, newest first")
    listing.add_argument("--status", default=ALL_RIDES, choices=[ALL_RIDES, *RIDE_STATUSES])
    listing.set_defaults(handler=list_rides)

    show = ride_actions.add_parser("show", help="Show one ride")
    show.add_argument("id")
    show.set_defaults(handler=show_ride)

    update = ride_actions.add_parser("update", help="Edit a ride")
    update.add_argument("id")
    update.add_argument("--pickup")
    update.add_argument("--dropoff")
    update.add_argument("--type", choices=RIDE_TYPES)
    update.add_argument("--passengers", type=int)
    update.add_argument("--price", type=float)
    update.add_argument("--requests")
    update.add_argument("--notes")
    update.add_argument("--status", choices=RIDE_STATUSES)
    update.set_defaults(handler=update_ride)

    delete = ride_actions.add_parser("delete", help="Delete a ride")
    delete.add_argument("id")
    delete.set_defaults(handler=delete_ride)

    stats = ride_actions.add_parser("stats", help="Total, active and completed counts")
    stats.set_defaults(handler=ride_stats)

    fares = ride_actions.add_parser("fares", help="Fare per ride type")
    fares.set_defaults(handler=list_fares)

    driver = entities.add_parser("driver", help="Driver roster")
    driver_actions = driver.add_subparsers(dest="action", required=True)

    add = driver_actions.add_parser("add", help="Add a driver")
    add.add_argument("--name", required=True)
    add.add_argument("--phone", required=True)
    add.add_argument("--vehicle", required=True)
    add.add_argument("--plate", required=True)
    add.add_argument("--rating", type=float, required=True)
    add.add_argument("--status", default=DriverStatus.AVAILABLE.value, choices=DRIVER_STATUSES)
    add.set_defaults(handler=add_driver)

    driver_list = driver_actions.add_parser("list", help="List drivers, highest rated first")
    driver_list.set_defaults(handler=list_drivers)

    driver_update = driver_actions.add_parser("update", help="Edit a driver")
    driver_update.add_argument("id")
    driver_update.add_argument("--name")
    driver_update.add_argument("--phone")
    driver_update.add_argument("--vehicle")
    driver_update.add_argument("--plate")
    driver_update.add_argument("--rating", type=float)
    driver_update.add_argument("--status", choices=DRIVER_STATUSES)
    driver_update.set_defaults(handler=update_driver)

    driver_delete = driver_actions.add_parser("delete", help="Delete a driver")
    driver_delete.add_argument("id")
    driver_delete.set_defaults(handler=delete_driver)

    seed = driver_actions.add_parser("seed", help="Add the demo drivers to an empty roster")
    seed.set_defaults(handler=seed_drivers)

    reset_parser = entities.add_parser("reset", help="Delete all rides, drivers and the ride counter")
    reset_parser.set_defaults(handler=reset, action=None)

    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)

    settings = get_settings()
    setup_logging(
        level=settings.logging.level,
        json_output=settings.logging.format == "json",
        environment=settings.logging.environment,
    )

    command = " ".join(part for part in (args.entity, args.action) if part)
    handler: Handler = args.handler

    with log_context(command=command):
        ctx = Context(get_record_store(settings))
        try:
            handler(args, ctx)
        except ValidationError as e:
            print(f"error: {e.message}", file=sys.stderr)
            for err in e.details.get("errors", []):
                print(f"  {err['field']}: {err['message']}", file=sys.stderr)
            return EXIT_INVALID
        except NotFoundError as e:
            print(f"error: {e.message}", file=sys.stderr)
            return EXIT_NOT_FOUND
        except StorageError as e:
            logger.error("Command failed: %s", e.message)
            print(f"error: {e.message}", file=sys.stderr)
            return EXIT_STORAGE

    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
