"""
List filters and plain-text rendering of notas.
"""

from datetime import date
from typing import List

from .models import Nota, NotaStatus


def apply_date_filter(notas: List[Nota], filter_date: date) -> List[Nota]:
    """Hide calendar notas that start after the given date; other notas always pass."""
    return [
        nota for nota in notas
        if nota.status != NotaStatus.calendar
        or nota.start_date is None
        or nota.start_date <= filter_date
    ]


def apply_keyword_filter(notas: List[Nota], keyword: str) -> List[Nota]:
    """Keep notas whose id, title or notes contain the keyword, ignoring case."""
    needle = keyword.lower()
    return [
        nota for nota in notas
        if needle in nota.id.lower()
        or needle in nota.title.lower()
        or (nota.notes is not None and needle in nota.notes.lower())
    ]


def apply_project_filter(notas: List[Nota], project_id: str) -> List[Nota]:
    return [nota for nota in notas if nota.project == project_id]


def apply_context_filter(notas: List[Nota], context_id: str) -> List[Nota]:
    return [nota for nota in notas if nota.context == context_id]


def format_notas(notas: List[Nota], exclude_notes: bool = False) -> str:
    """
    Render notas as a human-readable list.

    Args:
        notas: Notas to render, in display order
        exclude_notes: Leave out the notes line to keep the output short

    Returns:
        "No items found" for an empty list, otherwise a header line followed
        by one block per nota
    """
    if not notas:
        return "No items found"

    lines = [f"Found {len(notas)} item(s):", ""]
    for nota in notas:
        lines.append(f"- [{nota.id}] {nota.title} (status: {nota.status.value}, type: {nota.kind.value})")
        if nota.project is not None:
            lines.append(f"  Project: {nota.project}")
        if nota.context is not None:
            lines.append(f"  Context: {nota.context}")
        if not exclude_notes and nota.notes is not None:
            lines.append(f"  Notes: {nota.notes}")
        if nota.start_date is not None:
            lines.append(f"  Start date: {nota.start_date.isoformat()}")
        lines.append(f"  Created: {nota.created_at.isoformat()}")
        lines.append(f"  Updated: {nota.updated_at.isoformat()}")

    return "\n".join(lines) + "\n"
