"""
Document migration for gtdnota.

Reads every historical document shape and brings it to the current schema.
"""

from .formats import (
    Document,
    StatusArraysDocument,
    UnifiedDocument,
    detect_format_version,
    parse_document,
)
from .legacy_types import LegacyContext, LegacyProject, LegacyTask, ProjectList, ProjectMap
from .migrate import migrate_document, migrate_projects_to_latest, migrate_raw_document
from .normalize import normalize_string_line_endings

__all__ = [
    "Document",
    "StatusArraysDocument",
    "UnifiedDocument",
    "detect_format_version",
    "parse_document",
    "LegacyContext",
    "LegacyProject",
    "LegacyTask",
    "ProjectList",
    "ProjectMap",
    "migrate_document",
    "migrate_projects_to_latest",
    "migrate_raw_document",
    "normalize_string_line_endings",
]
