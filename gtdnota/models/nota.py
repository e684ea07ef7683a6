"""
Nota model for gtdnota.

A nota unifies tasks, projects and contexts under one schema. Its status is
both its workflow stage and its kind: status "project" and "context" mark
projects and contexts, every other status marks a task at that stage.
"""

from datetime import date
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from ..recurrence import RecurrencePattern, next_occurrence


def local_date_today() -> date:
    """Return today's date in the local timezone."""
    return date.today()


def normalize_string_line_endings(value: str) -> str:
    """
    Collapse CRLF and lone CR sequences to LF.

    Documents that went through editors or tools with inconsistent escaping
    can carry CR bytes inside notes.
    """
    return value.replace("\r\n", "\n").replace("\r", "\n")


class NotaKind(str, Enum):
    """The kind of entity a nota represents, derived from its status."""

    task = "task"
    project = "project"
    context = "context"


class NotaStatus(str, Enum):
    """
    Workflow status of a nota.

    Members are declared in the order their sections appear in the
    serialized document.
    """

    inbox = "inbox"
    next_action = "next_action"
    waiting_for = "waiting_for"
    later = "later"
    calendar = "calendar"
    someday = "someday"
    done = "done"
    reference = "reference"
    context = "context"
    project = "project"
    trash = "trash"

    @classmethod
    def parse(cls, value: str) -> "NotaStatus":
        """
        Parse a status name. Matching is exact and case-sensitive.

        Raises:
            ValueError: With a message listing every valid status
        """
        try:
            return cls(value)
        except ValueError:
            valid = ", ".join(status.value for status in cls)
            raise ValueError(
                f"Invalid status '{value}'. Valid options are: {valid}"
            ) from None

    @property
    def kind(self) -> NotaKind:
        return _KIND_BY_STATUS[self]


_KIND_BY_STATUS = {
    NotaStatus.inbox: NotaKind.task,
    NotaStatus.next_action: NotaKind.task,
    NotaStatus.waiting_for: NotaKind.task,
    NotaStatus.later: NotaKind.task,
    NotaStatus.calendar: NotaKind.task,
    NotaStatus.someday: NotaKind.task,
    NotaStatus.done: NotaKind.task,
    NotaStatus.reference: NotaKind.task,
    NotaStatus.context: NotaKind.context,
    NotaStatus.project: NotaKind.project,
    NotaStatus.trash: NotaKind.task,
}

# Statuses that only tasks occupy, in section order.
TASK_STATUSES = tuple(s for s in NotaStatus if s.kind is NotaKind.task)


class Nota(BaseModel):
    """
    A task, project or context in the GTD system.
    """

    model_config = ConfigDict(validate_assignment=True)

    id: str = Field(
        ...,
        description="Unique identifier across all notas (e.g., 'meeting-prep', 'Office')"
    )

    title: str = Field(
        default="",
        description="Title describing the nota"
    )

    status: NotaStatus = Field(
        default=NotaStatus.inbox,
        description="Workflow status; 'project' and 'context' also define the kind"
    )

    project: Optional[str] = Field(
        default=None,
        description="ID of the project nota this nota belongs to"
    )

    context: Optional[str] = Field(
        default=None,
        description="ID of the context nota where this nota applies"
    )

    notes: Optional[str] = Field(
        default=None,
        description="Additional notes in Markdown format"
    )

    start_date: Optional[date] = Field(
        default=None,
        description="Start date; required for calendar notas"
    )

    created_at: date = Field(
        default_factory=local_date_today,
        description="Date when the nota was created"
    )

    updated_at: date = Field(
        default_factory=local_date_today,
        description="Date when the nota was last changed"
    )

    recurrence_pattern: Optional[RecurrencePattern] = Field(
        default=None,
        description="How the nota repeats after completion"
    )

    recurrence_config: Optional[str] = Field(
        default=None,
        description="Comma-separated weekdays, month days or month-day pairs"
    )

    @field_validator("notes", mode="before")
    @classmethod
    def _normalize_notes(cls, value: Any) -> Any:
        if isinstance(value, str):
            return normalize_string_line_endings(value)
        return value

    @property
    def kind(self) -> NotaKind:
        return self.status.kind

    def is_task(self) -> bool:
        return self.kind is NotaKind.task

    def is_project(self) -> bool:
        return self.kind is NotaKind.project

    def is_context(self) -> bool:
        return self.kind is NotaKind.context

    def is_recurring(self) -> bool:
        return self.recurrence_pattern is not None

    def touch(self) -> None:
        """Mark the nota as changed today."""
        self.updated_at = local_date_today()

    def calculate_next_occurrence(self, from_date: date) -> Optional[date]:
        """
        Calculate the next occurrence date of a recurring nota.

        Args:
            from_date: The date to calculate from (the current start date or today)

        Returns:
            The next occurrence, or None if the nota is not recurring or its
            configuration yields no date
        """
        if self.recurrence_pattern is None:
            return None
        return next_occurrence(self.recurrence_pattern, self.recurrence_config, from_date)
