"""
GTD workflow operations.

GtdService owns the in-memory store for one document. Each operation
validates its input, mutates the store under a lock and saves the document.
Operations return a human-readable summary and raise NotaValidationError with
the user-facing message when the input is rejected.
"""

import logging
import threading
from typing import List, Optional, Sequence, Tuple, Union

from .errors import ItemNotFoundError, NotaValidationError
from .formatting import (
    apply_context_filter,
    apply_date_filter,
    apply_keyword_filter,
    apply_project_filter,
    format_notas,
)
from .models import Nota, NotaStatus, local_date_today
from .serializer import encode_document
from .storage import Storage
from .store import ItemStore
from .validation import (
    check_context_ref,
    check_project_ref,
    normalize_id,
    parse_date,
    parse_optional_date,
    parse_recurrence_pattern,
    parse_status,
    require_recurrence_config,
)


class GtdService:
    """
    Workflow handlers over a single document.
    """

    def __init__(self, storage: Storage, store: Optional[ItemStore] = None):
        """
        Initialize the service.

        Args:
            storage: Persistence for the document
            store: Preloaded store; loaded from storage when omitted
        """
        self.storage = storage
        self.store = store if store is not None else storage.load()
        self._lock = threading.Lock()
        self._save_lock = threading.Lock()

    def _save(self, message: str) -> None:
        # Encoding under the save lock keeps a later snapshot from being
        # overwritten by an earlier one.
        with self._save_lock:
            with self._lock:
                text = encode_document(self.store)
            self.storage.write_with_message(text, message)

    def next_task_id(self) -> str:
        with self._lock:
            return self.store.generate_task_id()

    def next_project_id(self) -> str:
        with self._lock:
            return self.store.generate_project_id()

    def inbox(self, id: Optional[str], title: str, status: str = "inbox",
              project: Optional[str] = None, context: Optional[str] = None,
              notes: Optional[str] = None, start_date: Optional[str] = None,
              recurrence: Optional[str] = None,
              recurrence_config: Optional[str] = None) -> str:
        """
        Capture a new nota.

        Args:
            id: Unique id; generated from the task or project counter when None
            title: Short description
            status: Initial status name
            project: Id of an existing project nota
            context: Id of an existing context nota
            notes: Markdown notes
            start_date: YYYY-MM-DD; required for calendar
            recurrence: daily, weekly, monthly or yearly
            recurrence_config: Required for weekly, monthly and yearly

        Returns:
            Confirmation naming the id and kind of the new nota
        """
        with self._lock:
            if id is not None:
                existing = self.store.status_of(id)
                if existing is not None:
                    raise NotaValidationError(
                        f"Duplicate ID error: ID '{id}' already exists (status: {existing.value}). "
                        "Each item must have a unique ID. Please choose a different ID."
                    )

            nota_status = parse_status(status)

            if nota_status == NotaStatus.calendar and start_date is None:
                raise NotaValidationError(
                    "Calendar status validation failed: status=calendar requires start_date parameter. "
                    "Please provide a date in YYYY-MM-DD format."
                )

            parsed_start_date = parse_optional_date(start_date)
            check_project_ref(project, self.store)
            check_context_ref(context, self.store)

            pattern = None
            if recurrence is not None:
                pattern = parse_recurrence_pattern(recurrence)
                require_recurrence_config(pattern, recurrence_config)

            # Counters advance only once the capture is known to succeed.
            if id is None:
                generate = (self.store.generate_project_id if nota_status == NotaStatus.project
                            else self.store.generate_task_id)
                id = generate()
                while self.store.contains_id(id):
                    id = generate()

            today = local_date_today()
            nota = Nota(
                id=id,
                title=title,
                status=nota_status,
                project=project,
                context=context,
                notes=notes,
                start_date=parsed_start_date,
                created_at=today,
                updated_at=today,
                recurrence_pattern=pattern,
                recurrence_config=recurrence_config,
            )
            self.store.add(nota)

        logging.info(f"Added {nota.kind.value} {id} with status {nota_status.value}")
        self._save(f"Add item {id}")
        return f"Item created with ID: {id} (type: {nota.kind.value})"

    def list_items(self, status: Optional[str] = None, date: Optional[str] = None,
                   exclude_notes: bool = False, keyword: Optional[str] = None,
                   project: Optional[str] = None, context: Optional[str] = None) -> str:
        """
        List notas, narrowed by any combination of filters.

        Args:
            status: Only notas with this status
            date: YYYY-MM-DD; hide calendar notas starting after it
            exclude_notes: Leave notes out of the output
            keyword: Case-insensitive match on id, title or notes
            project: Only notas linked to this project id
            context: Only notas linked to this context id

        Returns:
            The rendered list
        """
        status_filter = parse_status(status) if status is not None else None
        date_filter = parse_date(date) if date is not None else None

        with self._lock:
            notas = self.store.list_all(status_filter)

        if date_filter is not None:
            notas = apply_date_filter(notas, date_filter)
        if keyword is not None:
            notas = apply_keyword_filter(notas, keyword)
        if project is not None:
            notas = apply_project_filter(notas, project)
        if context is not None:
            notas = apply_context_filter(notas, context)

        return format_notas(notas, exclude_notes)

    def update(self, id: str, title: Optional[str] = None, status: Optional[str] = None,
               project: Optional[str] = None, context: Optional[str] = None,
               notes: Optional[str] = None, start_date: Optional[str] = None) -> str:
        """
        Change fields of an existing nota.

        Omitted arguments leave the field unchanged; an empty string clears
        project, context, notes or start_date. The updated nota moves to the
        end of the document order.

        Raises:
            ItemNotFoundError: If no nota has this id
            NotaValidationError: If any new value is invalid
        """
        with self._lock:
            nota = self.store.find_by_id(id)
            if nota is None:
                raise ItemNotFoundError(
                    f"Item not found: Item '{id}' does not exist. Use list_items() to see available items."
                )
            old_status = nota.status

            if title is not None:
                nota.title = title

            if status is not None:
                nota.status = parse_status(status)

            if project is not None:
                if project:
                    check_project_ref(project, self.store)
                nota.project = project or None

            if context is not None:
                if context:
                    check_context_ref(context, self.store)
                nota.context = context or None

            if notes is not None:
                nota.notes = notes or None

            if start_date is not None:
                nota.start_date = parse_date(start_date) if start_date else None

            if nota.status == NotaStatus.calendar and nota.start_date is None:
                raise NotaValidationError(
                    "Calendar status validation failed: status=calendar requires start_date. "
                    "Please provide a start_date or change to a different status."
                )

            if nota.status != old_status and self.store.is_referenced(id):
                if nota.status == NotaStatus.trash:
                    raise NotaValidationError(
                        f"Cannot move '{id}' to trash: still referenced by other items"
                    )
                if nota.kind is not old_status.kind:
                    raise NotaValidationError(
                        f"Cannot change '{id}' from {old_status.kind.value} to {nota.kind.value}: "
                        "still referenced by other items"
                    )

            nota.touch()
            self.store.update(id, nota)

        self._save(f"Update item {id}")
        return f"Item {id} updated successfully"

    def change_status(self, ids: Union[str, Sequence[str]], new_status: str,
                      start_date: Optional[str] = None) -> str:
        """
        Move one or more notas to a new status.

        Each id is handled on its own. Unknown ids, calendar moves without a
        date, and moves that would take a referenced nota to trash or to
        another kind are reported as failures while the rest go through.
        Completing a recurring nota creates its next occurrence.

        Args:
            ids: One id or a list of ids
            new_status: Target status name
            start_date: YYYY-MM-DD, applied to every moved nota

        Returns:
            Summary of the moved notas and of the failures

        Raises:
            NotaValidationError: If the status or date is invalid, or no nota
                could be moved
        """
        if isinstance(ids, str):
            ids = [ids]
        if not ids:
            raise NotaValidationError("No IDs provided. Please specify at least one item ID.")

        nota_status = parse_status(new_status)
        parsed_start_date = parse_optional_date(start_date)
        is_trash = nota_status == NotaStatus.trash

        successes: List[Tuple[str, NotaStatus, Optional[str]]] = []
        failures: List[str] = []

        with self._lock:
            for nota_id in (normalize_id(i) for i in ids):
                nota = self.store.find_by_id(nota_id)
                if nota is None:
                    failures.append(f"{nota_id}: not found")
                    continue

                old_status = nota.status

                if (nota_status == NotaStatus.calendar and parsed_start_date is None
                        and nota.start_date is None):
                    failures.append(f"{nota_id}: calendar status requires a start_date")
                    continue

                if ((is_trash or nota_status.kind is not old_status.kind)
                        and nota_status != old_status and self.store.is_referenced(nota_id)):
                    failures.append(f"{nota_id}: still referenced by other items")
                    continue

                nota.status = nota_status
                if parsed_start_date is not None:
                    nota.start_date = parsed_start_date
                nota.touch()

                next_info = None
                if nota_status == NotaStatus.done and nota.is_recurring():
                    next_info = self._spawn_next_occurrence(nota, old_status)

                self.store.update(nota_id, nota)
                successes.append((nota_id, old_status, next_info))

        if successes:
            subject = successes[0][0] if len(successes) == 1 else f"{len(successes)} items"
            self._save(f"Change {subject} status to {nota_status.value}")

        lines = []
        if successes:
            action = "deleted" if is_trash else "changed status"
            plural = "" if len(successes) == 1 else "s"
            lines.append(f"Successfully {action} for {len(successes)} item{plural}:")
            for nota_id, old_status, next_info in successes:
                if is_trash:
                    lines.append(f"- {nota_id} (moved to trash)")
                else:
                    lines.append(f"- {nota_id}: {old_status.value} → {nota_status.value}")
                    if next_info is not None:
                        lines.append(f"  {next_info}")

        if failures:
            if lines:
                lines.append("")
            plural = "" if len(failures) == 1 else "s"
            lines.append(f"Failed to change status for {len(failures)} item{plural}:")
            lines.extend(f"- {failure}" for failure in failures)

        response = "\n".join(lines)
        if not successes:
            raise NotaValidationError(response)
        return response

    def _spawn_next_occurrence(self, nota: Nota, old_status: NotaStatus) -> Optional[str]:
        """Add the next occurrence of a completed recurring nota; caller holds the lock."""
        from_date = nota.start_date or local_date_today()
        next_date = nota.calculate_next_occurrence(from_date)
        if next_date is None:
            return None

        next_id = f"{nota.id}-{next_date.strftime('%Y%m%d')}"
        if self.store.contains_id(next_id):
            return None

        today = local_date_today()
        next_nota = nota.model_copy(update={
            "id": next_id,
            "status": old_status,
            "start_date": next_date,
            "created_at": today,
            "updated_at": today,
        })
        self.store.add(next_nota)
        logging.info(f"Created next occurrence {next_id} on {next_date.isoformat()}")
        return f"Next occurrence created: {next_id} on {next_date.isoformat()}"

    def empty_trash(self) -> str:
        """Permanently delete every trashed nota."""
        with self._lock:
            count = self.store.empty_trash()

        self._save("Empty trash")
        logging.info(f"Emptied trash: {count} notas removed")
        return f"Deleted {count} task(s) from trash"

    def shutdown(self) -> bool:
        return self.storage.shutdown()
