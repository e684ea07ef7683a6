"""
Input validation for gtdnota workflow operations.

Every helper raises NotaValidationError with the message shown to the user,
so callers can pass the error straight through.
"""

from datetime import date, datetime
from typing import Optional

from .errors import NotaValidationError
from .models import NotaStatus, RecurrencePattern
from .store import ItemStore

DATE_FORMAT = "%Y-%m-%d"

# Status order used in error messages.
STATUS_HINT = "inbox, next_action, waiting_for, later, calendar, someday, done, reference, trash, project, context"

_CONFIG_HINTS = {
    RecurrencePattern.weekly: 'weekday names (e.g., "Monday,Wednesday,Friday")',
    RecurrencePattern.monthly: 'day numbers (e.g., "1,15,25")',
    RecurrencePattern.yearly: 'month-day pairs (e.g., "1-1,12-25")',
}


def normalize_id(nota_id: str) -> str:
    """Strip surrounding whitespace from a user-supplied id."""
    return nota_id.strip()


def parse_status(value: str) -> NotaStatus:
    try:
        return NotaStatus(value)
    except ValueError:
        raise NotaValidationError(f"Invalid status '{value}'. Valid statuses: {STATUS_HINT}") from None


def parse_date(value: str) -> date:
    """
    Parse a YYYY-MM-DD date.

    Raises:
        NotaValidationError: If the value is not a valid calendar date
    """
    try:
        return datetime.strptime(value, DATE_FORMAT).date()
    except ValueError:
        raise NotaValidationError(
            f"Invalid date format '{value}'. Use YYYY-MM-DD (e.g., '2025-03-15')"
        ) from None


def parse_optional_date(value: Optional[str]) -> Optional[date]:
    if value is None:
        return None
    return parse_date(value)


def parse_recurrence_pattern(value: str) -> RecurrencePattern:
    try:
        return RecurrencePattern.parse(value)
    except ValueError as e:
        raise NotaValidationError(str(e)) from None


def require_recurrence_config(pattern: RecurrencePattern, config: Optional[str]) -> None:
    """Weekly, monthly and yearly patterns need a configuration string; daily does not."""
    if config is None and pattern.requires_config:
        raise NotaValidationError(
            f"Recurrence pattern '{pattern.value}' requires recurrence_config with {_CONFIG_HINTS[pattern]}"
        )


def format_invalid_project_error(project_id: str, store: ItemStore) -> str:
    """
    Describe a dangling project reference.

    Lists the existing projects, or explains how to create the first one.
    """
    projects = store.projects()
    if not projects:
        return (
            f"Project '{project_id}' does not exist. No projects have been created yet. "
            "Create a project first using inbox() with status='project'."
        )
    return f"Project '{project_id}' does not exist.\nAvailable projects: {', '.join(projects)}"


def format_invalid_context_error(context_id: str, store: ItemStore) -> str:
    """
    Describe a dangling context reference.

    Lists the existing contexts, or explains how to create the first one.
    """
    contexts = store.contexts()
    if not contexts:
        return (
            f"Context '{context_id}' does not exist. No contexts have been created yet. "
            "Create a context first using inbox() with status='context'."
        )
    return f"Context '{context_id}' does not exist.\nAvailable contexts: {', '.join(contexts)}"


def check_project_ref(project_id: Optional[str], store: ItemStore) -> None:
    if not store.validate_project_ref(project_id):
        raise NotaValidationError(format_invalid_project_error(project_id, store))


def check_context_ref(context_id: Optional[str], store: ItemStore) -> None:
    if not store.validate_context_ref(context_id):
        raise NotaValidationError(format_invalid_context_error(context_id, store))
