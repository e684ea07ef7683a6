"""
Migration engine for gtdnota.

Turns a raw decoded document in any historical shape into an ItemStore in
the current schema. Migrations are one way: the store always reports the
current format version, and old shapes are never written back.
"""

import logging
from functools import singledispatch
from typing import Any, Dict, List, Mapping, Optional

from ..models import Nota
from ..store import CURRENT_FORMAT_VERSION, ItemStore
from .conversions import nota_from_context, nota_from_project, nota_from_task
from .formats import (
    LEGACY_KEYS,
    Document,
    ProjectList,
    ProjectMap,
    ProjectsFormat,
    StatusArraysDocument,
    UnifiedDocument,
    detect_format_version,
    parse_document,
)
from .legacy_types import LegacyContext, LegacyProject
from .normalize import normalize_notes_line_endings, populate_context_names, populate_project_ids

# Describes what changed on the way up from each version.
MIGRATION_STEPS = {
    1: "index projects array by id",
    2: "split project and context tables into per-status arrays",
}


def migration_steps(version: int) -> List[str]:
    """List the migration steps a document of the given version goes through."""
    return [step for since, step in sorted(MIGRATION_STEPS.items()) if version <= since]


def migrate_projects_v1_to_v2(projects: List[LegacyProject]) -> Dict[str, LegacyProject]:
    """Index a version 1 project array by each entry's id; later entries win."""
    return {project.id: project for project in projects}


def migrate_projects_to_latest(projects: Optional[ProjectsFormat]) -> Dict[str, LegacyProject]:
    """Bring either project layout to the id-keyed form."""
    if projects is None:
        return {}
    if isinstance(projects, ProjectMap):
        return dict(projects.root)
    if isinstance(projects, ProjectList):
        return migrate_projects_v1_to_v2(projects.root)
    raise TypeError(f"Unsupported projects layout: {type(projects).__name__}")


@singledispatch
def migrate_document(document: Document) -> ItemStore:
    """
    Normalize a parsed document into an ItemStore.

    Args:
        document: One of the document variants from parse_document

    Returns:
        Store in the current schema with a freshly built index
    """
    raise TypeError(f"Unsupported document type: {type(document).__name__}")


@migrate_document.register
def _migrate_unified(document: UnifiedDocument) -> ItemStore:
    return ItemStore(
        document.notas,
        task_counter=document.task_counter,
        project_counter=document.project_counter,
    )


@migrate_document.register
def _migrate_status_arrays(document: StatusArraysDocument) -> ItemStore:
    projects = migrate_projects_to_latest(document.projects)
    for project in document.project:
        projects[project.id] = project

    contexts: Dict[str, LegacyContext] = dict(document.contexts)
    for context in document.context:
        contexts[context.name] = context

    populate_project_ids(projects)
    populate_context_names(contexts)

    notas: List[Nota] = []
    for status, tasks in document.task_lists():
        normalize_notes_line_endings(tasks)
        for task in tasks:
            task.status = status
            notas.append(nota_from_task(task))

    normalize_notes_line_endings(projects.values())
    normalize_notes_line_endings(contexts.values())
    notas.extend(nota_from_project(project) for project in projects.values())
    notas.extend(nota_from_context(context) for context in contexts.values())

    return ItemStore(
        notas,
        task_counter=document.task_counter,
        project_counter=document.project_counter,
    )


def migrate_raw_document(raw: Mapping[str, Any]) -> ItemStore:
    """
    Detect, parse and migrate a raw decoded document.

    Raises:
        DocumentDecodeError: If the document matches no supported shape
    """
    version = detect_format_version(raw)
    document = parse_document(raw)

    if isinstance(document, UnifiedDocument):
        ignored = [key for key in LEGACY_KEYS if raw.get(key)]
        if ignored:
            logging.warning(f"Ignoring legacy sections next to [[notas]]: {', '.join(ignored)}")
    elif version < CURRENT_FORMAT_VERSION:
        for step in migration_steps(version):
            logging.info(f"Migrating format version {version}: {step}")

    store = migrate_document(document)
    logging.info(f"Loaded {len(store)} notas from format version {version}")
    return store
