"""
File persistence for gtdnota.

Storage is the only component that touches the document file. Saves rewrite
the whole document through a temporary file in the same directory, so a
crash mid-write leaves either the old or the new document, never a mix.
"""

import logging
import os
import tempfile
from pathlib import Path
from typing import Optional, Union

from .errors import StorageError
from .serializer import decode_document, encode_document
from .store import ItemStore
from .versioning import VersionManager


class Storage:
    """
    Loads and saves the document file, optionally syncing it with git.
    """

    def __init__(self, file_path: Union[str, Path], sync_git: bool = False,
                 version_manager: Optional[VersionManager] = None):
        """
        Initialize storage.

        Args:
            file_path: Path to the TOML document
            sync_git: Commit (and push) the document after every save
            version_manager: Git helper to use; one is created for the file
                when sync is enabled and none is given
        """
        self.file_path = Path(file_path)
        self.sync_git = sync_git
        self.version_manager = version_manager
        if sync_git and version_manager is None:
            self.version_manager = VersionManager(self.file_path)

    def load(self) -> ItemStore:
        """
        Load the document.

        Returns:
            The decoded store, or an empty store if the file does not exist

        Raises:
            DocumentDecodeError: If the file exists but cannot be decoded
            StorageError: If the file cannot be read
        """
        if not self.file_path.exists():
            logging.info(f"No document at {self.file_path}; starting with an empty store")
            return ItemStore()

        try:
            text = self.file_path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            raise StorageError(f"Failed to read {self.file_path}: {e}") from e

        store = decode_document(text)
        logging.info(f"Loaded {len(store)} notas from {self.file_path}")
        return store

    def write(self, text: str) -> None:
        """
        Replace the document with already-encoded text.

        Raises:
            StorageError: If the file cannot be written
        """
        directory = self.file_path.parent
        tmp_path = None
        try:
            directory.mkdir(parents=True, exist_ok=True)
            with tempfile.NamedTemporaryFile(
                mode="w",
                encoding="utf-8",
                newline="\n",
                dir=directory,
                prefix=f".{self.file_path.name}.",
                suffix=".tmp",
                delete=False,
            ) as tmp:
                tmp_path = Path(tmp.name)
                tmp.write(text)
                tmp.flush()
                os.fsync(tmp.fileno())
            os.replace(tmp_path, self.file_path)
        except OSError as e:
            if tmp_path is not None and tmp_path.exists():
                tmp_path.unlink()
            raise StorageError(f"Failed to save: {e}") from e

        logging.debug(f"Wrote {len(text)} characters to {self.file_path}")

    def save(self, store: ItemStore) -> None:
        """Encode and write the whole store."""
        self.write(encode_document(store))

    def write_with_message(self, text: str, message: str) -> bool:
        """
        Write already-encoded text, then sync it with git when enabled.

        Returns:
            True if the sync succeeded or sync is disabled. A failed sync is
            logged and leaves the written file in place.
        """
        self.write(text)
        if not self.sync_git or self.version_manager is None:
            return True

        synced = self.version_manager.sync(self.file_path, message)
        if not synced:
            logging.warning(f"Git sync failed for '{message}'; the document was saved locally")
        return synced

    def save_with_message(self, store: ItemStore, message: str) -> bool:
        """Encode and write the store, then sync it with git when enabled."""
        return self.write_with_message(encode_document(store), message)

    def shutdown(self) -> bool:
        """Push outstanding commits when git sync is enabled."""
        if not self.sync_git or self.version_manager is None:
            return True
        if not self.version_manager.push_enabled:
            return True

        pushed = self.version_manager.push()
        if not pushed:
            logging.warning("Shutdown git push failed")
        return pushed
