"""Ride and driver record-keeping on a local key-value store."""

__version__ = "0.1.0"
