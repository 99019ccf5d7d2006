"""Grouping and display preparation for monitor rows.

Produces the structure the console renderer consumes: rows bucketed per
class in a stable order, with info text stripped of markup and the upstream
cancellation style decoded into a flag. Row objects are never modified.
"""

import re
from collections.abc import Iterable

from src.substitution.models import (
    AbsentElement,
    ClassGroup,
    PresentedRow,
    Row,
)

UNKNOWN_GROUP = "Unknown group"
UNKNOWN_ELEMENT = "Unknown"
PLACEHOLDER = "N/A"

# WebUntis marks a cancelled lesson with this CSS class on the subject cell
CANCEL_STYLE = "cancelStyle"
SUBJECT_CELL = "1"

_TAG_RE = re.compile(r"<[^>]*>")

DISPLAY_CELLS = 5  # hour, subject, room, teacher, info


def strip_markup(text: str | None) -> str:
    """Remove ``<...>`` tags: "Room <b>changed</b>" -> "Room changed"."""
    if not text:
        return ""
    return _TAG_RE.sub("", text)


def is_cancelled(row: Row) -> bool:
    if not row.cell_classes:
        return False
    return CANCEL_STYLE in (row.cell_classes.get(SUBJECT_CELL) or ())


def group_by_class(rows: Iterable[Row]) -> list[ClassGroup]:
    """Bucket rows by group name, buckets sorted by name, rows in original order.

    Rows without a group go to the UNKNOWN_GROUP bucket, which sorts by its
    literal text like any other name.
    """
    buckets: dict[str, list[Row]] = {}
    for row in rows:
        buckets.setdefault(row.group or UNKNOWN_GROUP, []).append(row)
    return [ClassGroup(name=name, rows=tuple(buckets[name])) for name in sorted(buckets)]


def derive_presentation(row: Row) -> PresentedRow:
    cells = [None if v is None else str(v) for v in (row.data or [])[:DISPLAY_CELLS]]
    cells += [None] * (DISPLAY_CELLS - len(cells))
    hour, subject, room, teacher, info = cells
    return PresentedRow(
        hour=hour or PLACEHOLDER,
        subject=subject or PLACEHOLDER,
        room=room or PLACEHOLDER,
        teacher=teacher or PLACEHOLDER,
        cleaned_info=strip_markup(info),
        is_cancelled=is_cancelled(row),
    )


def summarize_absences(elements: Iterable[AbsentElement]) -> list[tuple[str, str]]:
    """(name, type of the first absence) per absent element, with placeholders."""
    summary: list[tuple[str, str]] = []
    for element in elements:
        first_type = element.absences[0].type if element.absences else None
        summary.append((element.element_name or UNKNOWN_ELEMENT, first_type or PLACEHOLDER))
    return summary
