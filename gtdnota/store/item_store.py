"""
In-memory item store for gtdnota.

The store keeps every nota in insertion order, which keeps the serialized
document stable under version control, and maintains an id -> status index
for constant-time duplicate and existence checks. The index is derived from
the sequence and is updated by every mutating method.

The store is a low-level container. It does not enforce id uniqueness,
calendar dates or reference validity; callers check those first so they can
report errors with full context.
"""

from types import MappingProxyType
from typing import Dict, Iterable, Iterator, List, Mapping, Optional, Tuple

from ..models import Nota, NotaStatus, local_date_today

CURRENT_FORMAT_VERSION = 3


class ItemStore:
    """
    Ordered collection of notas with a duplicate-detection index.
    """

    def __init__(self, notas: Iterable[Nota] = (), task_counter: int = 0,
                 project_counter: int = 0):
        """
        Initialize the store.

        Args:
            notas: Initial notas, kept in the given order
            task_counter: Last number handed out by generate_task_id
            project_counter: Last number handed out by generate_project_id
        """
        self.format_version = CURRENT_FORMAT_VERSION
        self.task_counter = task_counter
        self.project_counter = project_counter
        self._notas: List[Nota] = list(notas)
        self._index: Dict[str, NotaStatus] = {}
        self._rebuild_index()

    def _rebuild_index(self) -> None:
        self._index = {nota.id: nota.status for nota in self._notas}

    def _position(self, nota_id: str) -> Optional[int]:
        for pos, nota in enumerate(self._notas):
            if nota.id == nota_id:
                return pos
        return None

    @property
    def notas(self) -> Tuple[Nota, ...]:
        """All notas in insertion order."""
        return tuple(nota.model_copy() for nota in self._notas)

    @property
    def index(self) -> Mapping[str, NotaStatus]:
        """Read-only view of the id -> status index."""
        return MappingProxyType(self._index)

    def __len__(self) -> int:
        return len(self._notas)

    def __iter__(self) -> Iterator[Nota]:
        return iter(self.notas)

    def generate_task_id(self) -> str:
        """Hand out the next auto-generated task id (e.g., '#3')."""
        self.task_counter += 1
        return f"#{self.task_counter}"

    def generate_project_id(self) -> str:
        """Hand out the next auto-generated project id (e.g., 'project-2')."""
        self.project_counter += 1
        return f"project-{self.project_counter}"

    def contains_id(self, nota_id: str) -> bool:
        return nota_id in self._index

    def status_of(self, nota_id: str) -> Optional[NotaStatus]:
        return self._index.get(nota_id)

    def add(self, nota: Nota) -> None:
        """
        Append a nota.

        Callers must check contains_id first; adding an existing id leaves
        two notas with the same id in the sequence.
        """
        self._notas.append(nota.model_copy())
        self._index[nota.id] = nota.status

    def find_by_id(self, nota_id: str) -> Optional[Nota]:
        """
        Find a nota by id.

        Returns:
            A copy of the nota, or None if no nota has this id
        """
        pos = self._position(nota_id)
        if pos is None:
            return None
        return self._notas[pos].model_copy()

    def find_project(self, project_id: str) -> Optional[Nota]:
        nota = self.find_by_id(project_id)
        if nota is not None and nota.is_project():
            return nota
        return None

    def find_context(self, context_id: str) -> Optional[Nota]:
        nota = self.find_by_id(context_id)
        if nota is not None and nota.is_context():
            return nota
        return None

    def remove(self, nota_id: str) -> Optional[Nota]:
        """
        Remove a nota.

        Returns:
            The removed nota, or None if no nota has this id
        """
        pos = self._position(nota_id)
        if pos is None:
            return None
        nota = self._notas.pop(pos)
        self._index.pop(nota_id, None)
        return nota

    def update(self, nota_id: str, nota: Nota) -> Optional[Nota]:
        """
        Replace a nota.

        The replacement is appended, so the updated nota moves to the end of
        the insertion order.

        Returns:
            The previous value, or None if no nota has this id
        """
        pos = self._position(nota_id)
        if pos is None:
            return None
        old = self._notas.pop(pos)
        self._index.pop(nota_id, None)
        self._notas.append(nota.model_copy())
        self._index[nota.id] = nota.status
        return old

    def move_status(self, nota_id: str, new_status: NotaStatus) -> Optional[Nota]:
        """
        Change the status of a nota in place and refresh its updated_at.

        A nota that other notas still reference is never moved to trash or
        to a status of another kind.

        Returns:
            A copy of the moved nota, or None if no nota has this id or the
            move was refused; the store is unchanged in both cases
        """
        pos = self._position(nota_id)
        if pos is None:
            return None
        nota = self._notas[pos]
        if self.is_referenced(nota_id) and (new_status == NotaStatus.trash
                                            or new_status.kind is not nota.kind):
            return None
        nota.status = new_status
        nota.updated_at = local_date_today()
        self._index[nota_id] = new_status
        return nota.model_copy()

    def is_referenced(self, nota_id: str) -> bool:
        """Check whether any nota names this id as its project or context."""
        return any(
            nota.project == nota_id or nota.context == nota_id
            for nota in self._notas
        )

    def validate_project_ref(self, project_id: Optional[str]) -> bool:
        """An absent reference is valid; a present one must name a project nota."""
        if project_id is None:
            return True
        return self.find_project(project_id) is not None

    def validate_context_ref(self, context_id: Optional[str]) -> bool:
        """An absent reference is valid; a present one must name a context nota."""
        if context_id is None:
            return True
        return self.find_context(context_id) is not None

    def validate_references(self, nota: Nota) -> bool:
        return (self.validate_project_ref(nota.project)
                and self.validate_context_ref(nota.context))

    def list_all(self, status: Optional[NotaStatus] = None) -> List[Nota]:
        """List notas, optionally restricted to one status, in insertion order."""
        if status is None:
            return [nota.model_copy() for nota in self._notas]
        return self.by_status(status)

    def by_status(self, status: NotaStatus) -> List[Nota]:
        return [nota.model_copy() for nota in self._notas if nota.status == status]

    def projects(self) -> Dict[str, Nota]:
        return {nota.id: nota.model_copy() for nota in self._notas if nota.is_project()}

    def contexts(self) -> Dict[str, Nota]:
        return {nota.id: nota.model_copy() for nota in self._notas if nota.is_context()}

    def task_count(self) -> int:
        return sum(1 for nota in self._notas if nota.is_task())

    def remove_by_status(self, status: NotaStatus) -> int:
        """
        Remove every nota with the given status.

        Returns:
            Number of notas removed
        """
        kept = [nota for nota in self._notas if nota.status != status]
        removed = len(self._notas) - len(kept)
        self._notas = kept
        self._rebuild_index()
        return removed

    def empty_trash(self) -> int:
        """Permanently remove every trashed nota."""
        return self.remove_by_status(NotaStatus.trash)
