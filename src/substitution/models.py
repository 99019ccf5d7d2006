"""Pydantic models for the WebUntis substitution monitor.

Wire models accept the service's camelCase keys and keep any key they do not
know about, so fields the client never interprets survive a round trip to the
caller. All models use Pydantic v2.
"""

from datetime import date, datetime
from typing import Any

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    PositiveInt,
    StrictInt,
    field_validator,
)

class SchoolIdentity(BaseModel):
    """Which monitor board to query. Supplied by the caller, never hardcoded."""

    model_config = ConfigDict(frozen=True)

    school_name: str = Field(min_length=1)
    format_name: str = Field(min_length=1)
    department_ids: tuple[StrictInt, ...]

    def to_body(self) -> dict[str, Any]:
        return {
            "schoolName": self.school_name,
            "formatName": self.format_name,
            "departmentIds": list(self.department_ids),
        }


class QueryOptions(BaseModel):
    """Per-call query options.

    ``target_date`` of None means "today" at the moment the request is built.
    ``filter_groups`` of None or empty means no filtering.
    """

    model_config = ConfigDict(frozen=True)

    target_date: date | None = None
    date_offset: int = 0
    number_of_days: PositiveInt = 1
    filter_groups: frozenset[str] | None = None

    @field_validator("target_date", mode="before")
    @classmethod
    def _calendar_part(cls, value: Any) -> Any:
        # Pydantic rejects datetimes with a time component for date fields
        if isinstance(value, datetime):
            return value.date()
        return value


class Row(BaseModel):
    """One line of the substitution table.

    ``data`` holds the cells as sent upstream, starting with hour, subject,
    room, teacher, info; extra columns are kept. Cancellation is encoded
    upstream as a style tag on cell "1", see presentation.is_cancelled().
    """

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    group: str | None = None
    data: list[Any] | None = Field(default_factory=list)
    cell_classes: dict[str, list[str]] | None = Field(default=None, alias="cellClasses")


class Absence(BaseModel):
    model_config = ConfigDict(extra="allow")

    type: str | None = None


class AbsentElement(BaseModel):
    """An absent teacher/room. Never filtered by class."""

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    element_name: str | None = Field(default=None, alias="elementName")
    absences: list[Absence] = Field(default_factory=list)


class TimetablePayload(BaseModel):
    """The ``payload`` object of a successful response.

    Multi-day responses are passed through as-is; ``rows`` is not split per day.
    """

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    rows: list[Row] = Field(default_factory=list)
    absent_elements: list[AbsentElement] = Field(
        default_factory=list, alias="absentElements"
    )
    last_update: int | float | str | None = Field(default=None, alias="lastUpdate")


class ApiErrorDetail(BaseModel):
    model_config = ConfigDict(extra="allow")

    code: int | None = None
    message: str | None = None


class ResultEnvelope(BaseModel):
    """Decoded response body: either ``payload`` or ``error`` is set."""

    model_config = ConfigDict(extra="allow")

    payload: TimetablePayload | None = None
    error: ApiErrorDetail | None = None


class PresentedRow(BaseModel):
    """Display-ready facts for one row. Empty cells are already placeholders."""

    model_config = ConfigDict(frozen=True)

    hour: str
    subject: str
    room: str
    teacher: str
    cleaned_info: str = ""
    is_cancelled: bool = False


class ClassGroup(BaseModel):
    """All rows of one class, in original order."""

    model_config = ConfigDict(frozen=True)

    name: str
    rows: tuple[Row, ...]
