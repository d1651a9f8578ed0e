from .models.ride import RideType

# Flat fare per ride type, charged once at booking time
RIDE_TYPE_FARES: dict[RideType, float] = {
    RideType.ECONOMY: 15.00,
    RideType.COMFORT: 25.00,
    RideType.PREMIUM: 45.00,
    RideType.XL: 35.00,
}


def fare_for(ride_type: RideType | str) -> float:
    """Return the booking fare for a ride type.

    Raises:
        ValueError: If `ride_type` is not a known ride type.
    """
    return RIDE_TYPE_FARES[RideType(ride_type)]


def format_currency(amount: float) -> str:
    return f"${amount:.2f}"
