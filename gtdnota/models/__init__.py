"""Data models for gtdnota."""

from ..recurrence import RecurrencePattern
from .nota import (
    Nota,
    NotaKind,
    NotaStatus,
    TASK_STATUSES,
    local_date_today,
    normalize_string_line_endings,
)

__all__ = [
    "Nota",
    "NotaKind",
    "NotaStatus",
    "RecurrencePattern",
    "TASK_STATUSES",
    "local_date_today",
    "normalize_string_line_endings",
]
