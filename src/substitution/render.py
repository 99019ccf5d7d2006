"""Text and JSON rendering of a retrieved timetable for the terminal."""

import json
from collections.abc import Collection

from src.substitution.models import TimetablePayload
from src.substitution.presentation import (
    derive_presentation,
    group_by_class,
    summarize_absences,
)


def render_table(
    payload: TimetablePayload, filter_groups: Collection[str] | None = None
) -> str:
    """Render rows per class, followed by the unfiltered absence list."""
    if not payload.rows:
        return "No timetable entries for this day or the selected classes."

    lines = [f"Last updated: {payload.last_update}"]
    if filter_groups:
        lines.append(f"(filtered for: {', '.join(sorted(filter_groups))})")

    for group in group_by_class(payload.rows):
        lines.append("")
        lines.append(f"--- Class: {group.name} ---")
        for row in group.rows:
            view = derive_presentation(row)
            line = f"  {view.hour} | {view.subject} | {view.room} | {view.teacher}"
            if view.cleaned_info:
                line += f" | Info: {view.cleaned_info}"
            if view.is_cancelled:
                line += " (CANCELLED)"
            lines.append(line)

    absences = summarize_absences(payload.absent_elements)
    if absences:
        lines.append("")
        lines.append("--- Absent teachers/elements (unfiltered) ---")
        lines.extend(f"- {name} ({kind})" for name, kind in absences)

    return "\n".join(lines)


def render_json(payload: TimetablePayload) -> str:
    """Dump the payload with upstream (camelCase) keys, unknown fields included."""
    return json.dumps(payload.model_dump(mode="json", by_alias=True), indent=2, ensure_ascii=False)
