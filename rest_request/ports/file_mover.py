"""File port: move a downloaded temporary file into place."""
from __future__ import annotations

from pathlib import Path
from typing import Protocol, runtime_checkable


class FileMoveError(Exception):
    """Raised when the source cannot be moved to the destination."""


@runtime_checkable
class FileMover(Protocol):
    def move(self, source: Path, destination: Path) -> None:
        """Move source to destination; raise FileMoveError on failure."""
        ...
