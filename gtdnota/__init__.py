"""
gtdnota: a Getting Things Done item store.

Tasks, projects and contexts live in one TOML document that reads every
historical format version and writes the current one.
"""

__version__ = "0.1.0"
__author__ = "gtdnota Project"

# Import main components
from .errors import DocumentDecodeError, GtdError, ItemNotFoundError, NotaValidationError, StorageError
from .models import Nota, NotaKind, NotaStatus, RecurrencePattern
from .recurrence import next_occurrence
from .serializer import decode_document, encode_document
from .service import GtdService
from .storage import Storage
from .store import ItemStore
from .versioning import VersionManager

__all__ = [
    "DocumentDecodeError",
    "GtdError",
    "ItemNotFoundError",
    "NotaValidationError",
    "StorageError",
    "Nota",
    "NotaKind",
    "NotaStatus",
    "RecurrencePattern",
    "next_occurrence",
    "decode_document",
    "encode_document",
    "GtdService",
    "Storage",
    "ItemStore",
    "VersionManager"
]
