"""
One-way conversions from legacy types to Nota.

Used only while migrating old documents.
"""

from ..models import Nota, NotaStatus, local_date_today
from .legacy_types import LegacyContext, LegacyProject, LegacyTask


def nota_from_task(task: LegacyTask) -> Nota:
    """Convert a legacy task; every field maps one to one."""
    return Nota(
        id=task.id,
        title=task.title,
        status=task.status,
        project=task.project,
        context=task.context,
        notes=task.notes,
        start_date=task.start_date,
        created_at=task.created_at,
        updated_at=task.updated_at,
        recurrence_pattern=task.recurrence_pattern,
        recurrence_config=task.recurrence_config,
    )


def nota_from_project(project: LegacyProject) -> Nota:
    """Convert a legacy project; the status is always 'project'."""
    return Nota(
        id=project.id,
        title=project.title,
        status=NotaStatus.project,
        project=project.project,
        context=project.context,
        notes=project.notes,
        start_date=project.start_date,
        created_at=project.created_at,
        updated_at=project.updated_at,
        recurrence_pattern=project.recurrence_pattern,
        recurrence_config=project.recurrence_config,
    )


def nota_from_context(context: LegacyContext) -> Nota:
    """Convert a legacy context; the status is always 'context' and the title defaults to the name."""
    today = local_date_today()
    return Nota(
        id=context.name,
        title=context.title if context.title is not None else context.name,
        status=NotaStatus.context,
        project=context.project,
        context=context.context,
        notes=context.notes,
        start_date=context.start_date,
        created_at=context.created_at or today,
        updated_at=context.updated_at or today,
        recurrence_pattern=context.recurrence_pattern,
        recurrence_config=context.recurrence_config,
    )
