"""Queues of input streams and input file names awaiting processing.

A queue holds either open streams or file names, never both at once.
"""

from __future__ import annotations

import os
import stat
from typing import Any


class QueueError(ValueError):
    """Raised when an input cannot be added to or removed from a queue."""


class InputQueue:
    """Inputs waiting for an operation, processed from the front."""

    def __init__(self):
        self._files: list[Any] = []
        self._filenames: list[str] = []

    @property
    def files(self) -> list:
        """A copy of the queued streams, front first."""
        return list(self._files)

    @property
    def filenames(self) -> list[str]:
        """A copy of the queued file names, front first."""
        return list(self._filenames)

    @property
    def files_count(self) -> int:
        return len(self._files)

    @property
    def filenames_count(self) -> int:
        return len(self._filenames)

    def __len__(self) -> int:
        return len(self._files) + len(self._filenames)

    def __bool__(self) -> bool:
        return bool(self._files or self._filenames)

    def add_file(self, stream) -> None:
        """Queue an open stream; it must stay open until processed or removed."""
        if stream is None:
            raise QueueError("No stream given")
        if self._filenames:
            raise QueueError("Cannot queue streams while file names are queued")
        self._files.append(stream)

    def remove_file(self, stream) -> bool:
        """Drop a queued stream; returns whether it was queued."""
        if stream is None:
            raise QueueError("No stream given")
        for index, queued in enumerate(self._files):
            if queued is stream:
                del self._files[index]
                return True
        return False

    def pop_file(self):
        """Remove and return the front stream, or None when there is none."""
        if not self._files:
            return None
        return self._files.pop(0)

    def clear_files(self) -> None:
        """Empty the stream queue without touching the streams."""
        self._files.clear()

    def add_filename(self, path) -> None:
        """Queue an existing, non-directory file by name."""
        if path is None:
            raise QueueError("No file name given")
        name = os.fspath(path)
        if not name or name == "-":
            raise QueueError(f"Invalid file name {name!r}")
        if self._files:
            raise QueueError("Cannot queue file names while streams are queued")
        try:
            st = os.stat(name)
        except OSError as exc:
            raise QueueError(f"File {name} not found") from exc
        if stat.S_ISDIR(st.st_mode):
            raise QueueError(f"{name} is a directory")
        self._filenames.append(name)

    def remove_filename(self, path) -> bool:
        """Drop the first queued entry with this name; returns whether it was queued."""
        if path is None:
            raise QueueError("No file name given")
        name = os.fspath(path)
        if not name:
            raise QueueError("Empty file name")
        try:
            self._filenames.remove(name)
        except ValueError:
            return False
        return True

    def pop_filename(self) -> str | None:
        """Remove and return the front file name, or None when there is none."""
        if not self._filenames:
            return None
        return self._filenames.pop(0)

    def clear_filenames(self) -> None:
        """Empty the file name queue."""
        self._filenames.clear()