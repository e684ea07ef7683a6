"""In-memory item store."""

from .item_store import CURRENT_FORMAT_VERSION, ItemStore

__all__ = ["CURRENT_FORMAT_VERSION", "ItemStore"]
