"""
Legacy schema types for gtdnota.

These are the historical shapes of tasks, projects and contexts. They exist
only as targets for decoding old documents and are converted to Nota right
away; nothing ever writes them back out.
"""

from datetime import date
from typing import Any, Dict, List, Optional

from pydantic import AliasChoices, BaseModel, Field, RootModel, field_validator, model_validator

from ..models import NotaStatus, RecurrencePattern, local_date_today
from .normalize import coerce_recurrence_pattern


class LegacyTask(BaseModel):
    """
    A task from a per-status list such as ``[[inbox]]``.

    Membership in the list is the status, so a stored ``status`` key is
    discarded and the status is stamped by the migration engine.
    """

    id: str = Field(
        ...,
        description="Task identifier (e.g., '#1', 'meeting-prep')"
    )

    title: str = Field(
        ...,
        description="Task title"
    )

    status: NotaStatus = Field(
        default=NotaStatus.inbox,
        description="Stamped from the list the task was read from"
    )

    project: Optional[str] = None
    context: Optional[str] = None
    notes: Optional[str] = None
    start_date: Optional[date] = None

    created_at: date = Field(
        ...,
        description="Date when the task was created"
    )

    updated_at: date = Field(
        ...,
        description="Date when the task was last updated"
    )

    recurrence_pattern: Optional[RecurrencePattern] = None
    recurrence_config: Optional[str] = None

    @model_validator(mode="before")
    @classmethod
    def _discard_stored_status(cls, data: Any) -> Any:
        if isinstance(data, dict) and "status" in data:
            data = {key: value for key, value in data.items() if key != "status"}
        return data

    @field_validator("recurrence_pattern", mode="before")
    @classmethod
    def _lenient_pattern(cls, value: Any) -> Any:
        return coerce_recurrence_pattern(value)


class LegacyProject(BaseModel):
    """
    A project from ``[[projects]]``, ``[projects.<id>]`` or ``[[project]]``.

    Accepts ``name`` for ``title`` and ``description`` for ``notes``, and
    tolerates the defunct project ``status`` field from the oldest files.
    """

    id: str = Field(
        default="",
        description="Project identifier; filled from the map key for map-keyed projects"
    )

    title: str = Field(
        ...,
        validation_alias=AliasChoices("title", "name"),
        description="Project title"
    )

    notes: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("notes", "description"),
        description="Project notes"
    )

    project: Optional[str] = None
    context: Optional[str] = None
    start_date: Optional[date] = None
    created_at: date = Field(default_factory=local_date_today)
    updated_at: date = Field(default_factory=local_date_today)

    status: Optional[Any] = Field(
        default=None,
        description="Defunct project status (e.g., 'active'); read and dropped"
    )

    recurrence_pattern: Optional[RecurrencePattern] = None
    recurrence_config: Optional[str] = None

    @field_validator("recurrence_pattern", mode="before")
    @classmethod
    def _lenient_pattern(cls, value: Any) -> Any:
        return coerce_recurrence_pattern(value)


class LegacyContext(BaseModel):
    """
    A context from ``[contexts.<name>]`` or ``[[context]]``.

    The name is the context's id; ``id`` is accepted as an alias.
    """

    name: str = Field(
        default="",
        validation_alias=AliasChoices("name", "id"),
        description="Context name (e.g., 'Office'); filled from the map key for map-keyed contexts"
    )

    title: Optional[str] = Field(
        default=None,
        description="Display title; the name is used when absent"
    )

    notes: Optional[str] = None
    status: Optional[Any] = None
    project: Optional[str] = None
    context: Optional[str] = None
    start_date: Optional[date] = None
    created_at: Optional[date] = None
    updated_at: Optional[date] = None
    recurrence_pattern: Optional[RecurrencePattern] = None
    recurrence_config: Optional[str] = None

    @field_validator("recurrence_pattern", mode="before")
    @classmethod
    def _lenient_pattern(cls, value: Any) -> Any:
        return coerce_recurrence_pattern(value)


class ProjectMap(RootModel[Dict[str, LegacyProject]]):
    """Projects keyed by id (``[projects.<id>]``), the version 2 layout."""


class ProjectList(RootModel[List[LegacyProject]]):
    """Projects as an array carrying their own ids (``[[projects]]``), the version 1 layout."""
