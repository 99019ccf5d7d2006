"""Request construction for the WebUntis substitution monitor.

The monitor endpoint expects a fixed block of display/behaviour flags with
every request. Their meaning is defined by WebUntis, not by this client, so
they are sent verbatim. The values match what the public monitor page sends
for a class-grouped substitution board.
"""

from collections.abc import Mapping
from dataclasses import dataclass
from datetime import date
from types import MappingProxyType
from typing import Any
from urllib.parse import quote

from pydantic import ValidationError

from src.substitution.dates import apply_offset, encode_date
from src.substitution.errors import ConfigurationError
from src.substitution.models import QueryOptions, SchoolIdentity

DEFAULT_BASE_URL = "https://nessa.webuntis.com"
CONTEXT_PATH = "/WebUntis"
# "monitor/activity/data" would return the regular timetable instead
ENDPOINT = "monitor/substitution/data"

DEFAULT_FLAGS: Mapping[str, Any] = MappingProxyType(
    {
        "strikethrough": True,
        "mergeBlocks": True,
        "showOnlyFutureSub": False,
        "showBreakSupervisions": True,
        "showTeacher": True,
        "showClass": False,
        "showHour": True,
        "showInfo": True,
        "showRoom": True,
        "showSubject": True,
        "groupBy": 1,  # by class
        "hideAbsent": True,
        "departmentElementType": 1,
        "hideCancelWithSubstitution": True,
        "hideCancelCausedByEvent": False,
        "showTime": False,
        "showSubstText": True,
        "showAbsentElements": (2,),  # teachers
        "showAffectedElements": (),
        "showUnitTime": True,
        "showMessages": True,
        "showStudentgroup": False,
        "enableSubstitutionFrom": False,
        "showSubstitutionFrom": 0,
        "showTeacherOnEvent": False,
        "showAbsentTeacher": False,
        "strikethroughAbsentTeacher": True,
        "activityTypeIds": (),
        "showEvent": True,
        "showCancel": True,
        "showOnlyCancel": False,
        "showSubstTypeColor": False,
        "showExamSupervision": False,
        "showUnheraldedExams": False,
    }
)

JSON_HEADERS: Mapping[str, str] = MappingProxyType(
    {
        "Content-Type": "application/json",
        "Accept": "*/*",
        "X-Requested-With": "XMLHttpRequest",
    }
)


@dataclass(frozen=True)
class OutboundRequest:
    """A fully built monitor request. ``body`` is a read-only mapping."""

    url: str
    body: Mapping[str, Any]
    query_date: date

    def json_body(self) -> dict[str, Any]:
        """Plain JSON-serialisable copy of the body."""
        return {
            key: list(value) if isinstance(value, tuple) else value
            for key, value in self.body.items()
        }


def build_url(school_name: str, base_url: str = DEFAULT_BASE_URL) -> str:
    """Monitor endpoint URL with the school name as percent-encoded query parameter."""
    # Same safe set as JavaScript's encodeURIComponent
    school = quote(school_name, safe="-_.!~*'()")
    return f"{base_url.rstrip('/')}{CONTEXT_PATH}/{ENDPOINT}?school={school}"


def build_request(
    identity: SchoolIdentity | Mapping[str, Any] | None,
    options: QueryOptions | Mapping[str, Any] | None = None,
    *,
    base_url: str = DEFAULT_BASE_URL,
    today: date | None = None,
) -> OutboundRequest:
    """Build the URL and JSON body for one monitor query. Performs no I/O.

    Body precedence, later wins: DEFAULT_FLAGS < identity < date fields.

    Args:
        identity: School identity, or a mapping validated into one.
        options: Query options, or a mapping validated into one. None means defaults.
        base_url: WebUntis host, without the /WebUntis context path.
        today: Reference date used when options carry no target date.

    Raises:
        ConfigurationError: If the identity or the options are missing or malformed.
    """
    if identity is None:
        raise ConfigurationError("School identity is required")
    try:
        identity = SchoolIdentity.model_validate(identity)
        options = QueryOptions.model_validate(options if options is not None else {})
    except ValidationError as e:
        raise ConfigurationError(f"Invalid school identity or query options: {e}") from e

    base = options.target_date or today or date.today()
    try:
        query_date = apply_offset(base, options.date_offset)
    except OverflowError as e:
        raise ConfigurationError(
            f"Date offset {options.date_offset} leaves the supported date range"
        ) from e

    body = {
        **DEFAULT_FLAGS,
        **identity.to_body(),
        "date": encode_date(query_date),
        "dateOffset": options.date_offset,
        "numberOfDays": options.number_of_days,
    }
    return OutboundRequest(
        url=build_url(identity.school_name, base_url),
        body=MappingProxyType(body),
        query_date=query_date,
    )
