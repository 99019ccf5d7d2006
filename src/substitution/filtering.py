"""Client-side class/course filtering of monitor rows."""

from collections.abc import Collection, Iterable

from src.substitution.models import Row, TimetablePayload


def parse_group_input(raw: str) -> frozenset[str]:
    """Split comma-separated user input ("11a, 12,13") into group identifiers.

    Blank input yields an empty set, which means "all groups".
    """
    return frozenset(part.strip() for part in raw.split(",") if part.strip())


def filter_rows(rows: Iterable[Row], filter_groups: Collection[str] | None) -> list[Row]:
    """Keep rows whose group is in ``filter_groups``, preserving order.

    No filter (None or empty) returns every row. Matching is exact string
    equality, so "11A" does not match "11a".
    """
    rows = list(rows)
    if not filter_groups:
        return rows
    if isinstance(filter_groups, str):
        # Single group name
        filter_groups = {filter_groups}
    return [row for row in rows if row.group in filter_groups]


def apply_filter(
    payload: TimetablePayload, filter_groups: Collection[str] | None
) -> TimetablePayload:
    """Return a copy of ``payload`` with filtered rows.

    Absent elements are copied through untouched: absences concern teachers,
    not a single class.
    """
    return payload.model_copy(
        update={
            "rows": filter_rows(payload.rows, filter_groups),
            "absent_elements": list(payload.absent_elements),
        }
    )
