"""Git synchronization of the document file."""

from .manager import VersionManager

__all__ = ["VersionManager"]
