"""
Historical document shapes for gtdnota.

Every shape a document has ever been written in is parsed into one of the
variant types below. The migration engine then handles each variant in a
single normalization function.

Versions:

- 1: projects as an array (``[[projects]]``) with an ``id`` in each entry
- 2: projects and contexts as tables keyed by id (``[projects.<id>]``,
  ``[contexts.<name>]``), tasks in per-status arrays
- 3: tasks in per-status arrays, projects and contexts in ``[[project]]``
  and ``[[context]]`` arrays; this is what the encoder writes today
- 4, 5: a single ``[[notas]]`` array of status-tagged entries
"""

from typing import Any, Dict, Iterator, List, Mapping, Optional, Tuple, Union

from pydantic import BaseModel, Field, ValidationError, field_validator

from ..errors import DocumentDecodeError
from ..models import Nota, NotaStatus, TASK_STATUSES
from ..store import CURRENT_FORMAT_VERSION
from .legacy_types import LegacyContext, LegacyProject, LegacyTask, ProjectList, ProjectMap
from .normalize import coerce_recurrence_pattern

ProjectsFormat = Union[ProjectMap, ProjectList]

UNIFIED_FORMAT_VERSION = 4


class BaseDocument(BaseModel):
    """Fields every document shape shares."""

    format_version: int = Field(
        default=0,
        description="Version tag as written in the document; 0 when absent"
    )

    task_counter: int = Field(default=0, ge=0)
    project_counter: int = Field(default=0, ge=0)


class UnifiedDocument(BaseDocument):
    """Versions 4 and 5: one ``[[notas]]`` array, already in the current schema."""

    notas: List[Nota] = Field(
        ...,
        description="All notas, each tagged with its status"
    )

    @field_validator("notas", mode="before")
    @classmethod
    def _lenient_patterns(cls, value: Any) -> Any:
        if not isinstance(value, list):
            return value
        entries = []
        for entry in value:
            if isinstance(entry, dict) and "recurrence_pattern" in entry:
                entry = dict(entry)
                entry["recurrence_pattern"] = coerce_recurrence_pattern(entry["recurrence_pattern"])
            entries.append(entry)
        return entries


class StatusArraysDocument(BaseDocument):
    """
    Versions 1 to 3: tasks in nine per-status arrays.

    Projects may be an array or a table (``projects``) and may also appear
    in a ``[[project]]`` array; contexts may be a table (``contexts``) or a
    ``[[context]]`` array.
    """

    inbox: List[LegacyTask] = Field(default_factory=list)
    next_action: List[LegacyTask] = Field(default_factory=list)
    waiting_for: List[LegacyTask] = Field(default_factory=list)
    later: List[LegacyTask] = Field(default_factory=list)
    calendar: List[LegacyTask] = Field(default_factory=list)
    someday: List[LegacyTask] = Field(default_factory=list)
    done: List[LegacyTask] = Field(default_factory=list)
    reference: List[LegacyTask] = Field(default_factory=list)
    trash: List[LegacyTask] = Field(default_factory=list)

    projects: Optional[ProjectsFormat] = None
    contexts: Dict[str, LegacyContext] = Field(default_factory=dict)
    project: List[LegacyProject] = Field(default_factory=list)
    context: List[LegacyContext] = Field(default_factory=list)

    @field_validator("projects", mode="before")
    @classmethod
    def _select_projects_variant(cls, value: Any) -> Any:
        if isinstance(value, dict):
            return ProjectMap.model_validate(value)
        if isinstance(value, list):
            return ProjectList.model_validate(value)
        return value

    def task_lists(self) -> Iterator[Tuple[NotaStatus, List[LegacyTask]]]:
        """Yield each per-status task list with the status it stands for."""
        for status in TASK_STATUSES:
            yield status, getattr(self, status.value)


Document = Union[UnifiedDocument, StatusArraysDocument]

LEGACY_KEYS = tuple(s.value for s in TASK_STATUSES) + ("projects", "contexts", "project", "context")


def detect_format_version(raw: Mapping[str, Any]) -> int:
    """
    Work out which historical version a raw document was written in.

    A declared ``format_version`` wins; otherwise the version is inferred
    from the shape.
    """
    declared = raw.get("format_version")
    if isinstance(declared, int) and not isinstance(declared, bool) and declared > 0:
        return declared
    if raw.get("notas"):
        return UNIFIED_FORMAT_VERSION
    projects = raw.get("projects")
    if isinstance(projects, list):
        return 1
    if isinstance(projects, dict) or isinstance(raw.get("contexts"), dict):
        return 2
    return CURRENT_FORMAT_VERSION


def parse_document(raw: Mapping[str, Any]) -> Document:
    """
    Parse a raw decoded mapping into its document variant.

    Raises:
        DocumentDecodeError: If the mapping matches no supported shape
    """
    try:
        if raw.get("notas"):
            return UnifiedDocument.model_validate(raw)
        return StatusArraysDocument.model_validate(raw)
    except ValidationError as e:
        raise DocumentDecodeError(f"Document does not match any supported format: {e}") from e
