"""Timetable retrieval: build the request, fetch, validate and filter.

retrieve_timetable() is the entry point for the terminal tool and for any
program embedding the client. It never raises for retrieval failures; the
error is returned on the result, with its details already logged.
"""

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

import requests
from pydantic import ValidationError

from src.substitution.errors import (
    ApiError,
    ConfigurationError,
    RetrievalError,
    TransientError,
    TransportError,
)
from src.substitution.filtering import apply_filter
from src.substitution.logging import get_logger, query_context
from src.substitution.models import QueryOptions, SchoolIdentity, TimetablePayload
from src.substitution.request import DEFAULT_BASE_URL, build_request
from src.substitution.transport import fetch_timetable

log = get_logger(__name__)


@dataclass(frozen=True)
class RetrievalResult:
    """Outcome of one retrieval: a filtered payload or the error, never both."""

    payload: TimetablePayload | None = None
    error: RetrievalError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None and self.payload is not None

    @property
    def transient(self) -> bool:
        return isinstance(self.error, TransientError)


def _log_failure(error: RetrievalError) -> None:
    if isinstance(error, TransportError):
        log.error(
            "retrieval_failed",
            error_type="transport",
            status=error.status,
            body=error.body_text,
            cause=repr(error.__cause__) if error.__cause__ else None,
        )
    elif isinstance(error, ApiError):
        log.error(
            "retrieval_failed", error_type="api", code=error.code, message=error.message
        )
    elif isinstance(error, ConfigurationError):
        log.error("retrieval_failed", error_type="configuration", error=str(error))
    else:
        log.error("retrieval_failed", error_type="parse", error=str(error))


async def retrieve_timetable(
    identity: SchoolIdentity | Mapping[str, Any] | None,
    options: QueryOptions | Mapping[str, Any] | None = None,
    *,
    base_url: str = DEFAULT_BASE_URL,
    session: requests.Session | None = None,
    timeout: float | None = None,
) -> RetrievalResult:
    """Fetch the substitution board and filter its rows by class.

    Args:
        identity: School identity (or a mapping with school_name, format_name,
            department_ids).
        options: Query options (or a mapping). None means today, all classes.
        base_url: WebUntis host.
        session: Optional requests session.
        timeout: Transport timeout in seconds; None leaves it to requests.

    Returns:
        RetrievalResult with the filtered payload, or with the error on failure.
    """
    try:
        options = QueryOptions.model_validate(options if options is not None else {})
        request = build_request(identity, options, base_url=base_url)
    except ConfigurationError as e:
        _log_failure(e)
        return RetrievalResult(error=e)
    except ValidationError as e:
        error = ConfigurationError(f"Invalid query options: {e}")
        _log_failure(error)
        return RetrievalResult(error=error)

    groups = sorted(options.filter_groups) if options.filter_groups else []
    with query_context(
        school=request.body["schoolName"], date=request.body["date"]
    ):
        log.info(
            "retrieval_started",
            query_date=request.query_date.isoformat(),
            weekday=request.query_date.strftime("%A"),
            number_of_days=options.number_of_days,
            filter_groups=groups or "all",
            url=request.url,
        )
        log.debug("request_payload", payload=request.json_body())

        try:
            payload = await fetch_timetable(
                request.url, request.json_body(), session=session, timeout=timeout
            )
        except RetrievalError as e:
            _log_failure(e)
            return RetrievalResult(error=e)

        filtered = apply_filter(payload, options.filter_groups)
        log.info(
            "retrieval_succeeded",
            rows=len(payload.rows),
            rows_after_filter=len(filtered.rows),
            absent_elements=len(filtered.absent_elements),
            last_update=filtered.last_update,
        )
        return RetrievalResult(payload=filtered)
