from __future__ import annotations

import logging
import os
from abc import ABC, abstractmethod

from .errors import NoteWriteError

logger = logging.getLogger("wallabag_notes")


class NoteStore(ABC):
    """Path-addressed note storage. Paths are vault-relative and use `/`."""

    @abstractmethod
    def exists(self, path: str) -> bool:
        pass

    @abstractmethod
    def is_file(self, path: str) -> bool:
        pass

    @abstractmethod
    def read(self, path: str) -> str:
        pass

    @abstractmethod
    def create(self, path: str, content: str) -> None:
        """Create a new note; fails if something is already at `path`."""
        pass

    @abstractmethod
    def modify(self, path: str, content: str) -> None:
        """Replace the whole content of an existing note."""
        pass

    @abstractmethod
    def folder_exists(self, path: str) -> bool:
        pass

    @abstractmethod
    def make_folder(self, path: str) -> None:
        pass

    def ensure_folder(self, path: str) -> None:
        if not self.folder_exists(path):
            logger.info("Creating note folder %s", path)
            self.make_folder(path)


class FileSystemNoteStore(NoteStore):
    """Notes as UTF-8 files below a vault directory."""

    def __init__(self, root: str):
        self.root = os.path.abspath(os.path.expanduser(root))

    def _full_path(self, path: str) -> str:
        full = os.path.abspath(os.path.join(self.root, *path.split("/")))
        if os.path.commonpath([self.root, full]) != self.root:
            raise NoteWriteError(f"Path escapes the vault: {path}")
        return full

    def exists(self, path: str) -> bool:
        return os.path.exists(self._full_path(path))

    def is_file(self, path: str) -> bool:
        return os.path.isfile(self._full_path(path))

    def read(self, path: str) -> str:
        with open(self._full_path(path), "r", encoding="utf-8") as f:
            return f.read()

    def create(self, path: str, content: str) -> None:
        full = self._full_path(path)
        try:
            with open(full, "x", encoding="utf-8", newline="") as f:
                f.write(content)
        except OSError as e:
            raise NoteWriteError(f"Failed to create {path}: {e}") from e
        logger.debug("Created %s", full)

    def modify(self, path: str, content: str) -> None:
        full = self._full_path(path)
        if not os.path.isfile(full):
            raise NoteWriteError(f"Cannot modify {path}: not an existing note")
        try:
            with open(full, "w", encoding="utf-8", newline="") as f:
                f.write(content)
        except OSError as e:
            raise NoteWriteError(f"Failed to write {path}: {e}") from e
        logger.debug("Overwrote %s", full)

    def folder_exists(self, path: str) -> bool:
        return os.path.isdir(self._full_path(path))

    def make_folder(self, path: str) -> None:
        try:
            os.makedirs(self._full_path(path), exist_ok=True)
        except OSError as e:
            raise NoteWriteError(f"Failed to create folder {path}: {e}") from e
