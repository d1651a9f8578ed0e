"""Logging module with structured formatters, PII filtering, and context management."""

from .context import ContextFilter, current_log_context, log_context
from .filters import PIIFilter
from .formatters import DevFormatter, JSONFormatter
from .setup import setup_logging

__all__ = [
    "setup_logging",
    "log_context",
    "JSONFormatter",
    "DevFormatter",
    "PIIFilter",
    "current_log_context",
    "ContextFilter",
]
