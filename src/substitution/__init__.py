"""WebUntis substitution monitor client.

Fetches a school's public substitution board, filters it by class and
prepares it for display.
"""

from src.substitution.errors import (
    ApiError,
    ConfigurationError,
    ParseError,
    RetrievalError,
    TransportError,
)
from src.substitution.models import QueryOptions, SchoolIdentity, TimetablePayload
from src.substitution.service import RetrievalResult, retrieve_timetable

__all__ = [
    "retrieve_timetable",
    "RetrievalResult",
    "SchoolIdentity",
    "QueryOptions",
    "TimetablePayload",
    "RetrievalError",
    "ConfigurationError",
    "TransportError",
    "ApiError",
    "ParseError",
]
