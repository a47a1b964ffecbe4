"""Local filesystem implementation of the FileMover port."""
from __future__ import annotations

import shutil
from pathlib import Path

from rest_request.ports.file_mover import FileMoveError, FileMover


class LocalFileMover(FileMover):
    def move(self, source: Path, destination: Path) -> None:
        if not source.exists():
            raise FileMoveError(f"source {source} does not exist")
        if destination.exists():
            raise FileMoveError(f"destination {destination} already exists")
        try:
            shutil.move(str(source), str(destination))
        except OSError as exc:
            raise FileMoveError(f"cannot move {source} to {destination}: {exc}") from exc
