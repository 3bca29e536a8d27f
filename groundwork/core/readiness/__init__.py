"""Database readiness checks and baseline schema bootstrap."""

from .availability import AvailabilityChecker
from .initializer import SchemaInitializer, find_missing_tables
from .timeouts import ReadinessTimeouts

__all__ = [
    "AvailabilityChecker",
    "ReadinessTimeouts",
    "SchemaInitializer",
    "find_missing_tables",
]
