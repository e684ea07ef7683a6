"""
Exception types for gtdnota.

Validation errors carry a user-facing message composed at the boundary
above the item store. Decode and storage errors come from the persistence
layer and must never be mistaken for an empty store.
"""


class GtdError(Exception):
    """Base class for all gtdnota errors."""


class NotaValidationError(GtdError):
    """Invalid input: bad status, bad date, dangling reference, duplicate id and so on."""


class ItemNotFoundError(NotaValidationError):
    """No nota exists with the requested id."""


class DocumentDecodeError(GtdError):
    """The document exists but matches no supported format."""


class StorageError(GtdError):
    """The document could not be read or written."""


class VersionControlError(GtdError):
    """A git operation failed."""
