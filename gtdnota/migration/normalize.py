"""
Normalization helpers applied while migrating legacy documents.
"""

import logging
from typing import Any, Dict, Iterable, Optional

from ..models import normalize_string_line_endings
from ..recurrence import RecurrencePattern


def normalize_notes_line_endings(entries: Iterable[Any]) -> None:
    """Normalize the notes field of every legacy entry in place."""
    for entry in entries:
        if entry.notes is not None:
            entry.notes = normalize_string_line_endings(entry.notes)


def populate_project_ids(projects: Dict[str, Any]) -> None:
    """Set each map-keyed project's id from its key."""
    for key, project in projects.items():
        project.id = key


def populate_context_names(contexts: Dict[str, Any]) -> None:
    """Set each map-keyed context's name from its key."""
    for key, context in contexts.items():
        context.name = key


def coerce_recurrence_pattern(value: Any) -> Optional[Any]:
    """
    Drop recurrence patterns this version does not understand.

    An unknown pattern means the nota simply does not recur; old documents
    keep loading instead of failing on a value they could not have known.
    """
    if value is None or isinstance(value, RecurrencePattern):
        return value
    try:
        return RecurrencePattern(value)
    except ValueError:
        logging.warning(f"Ignoring unknown recurrence pattern: {value!r}")
        return None
