"""Filesystem writer applying the existence policies."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from pathlib import Path

from kubescaffold.errors import AlreadyExistsError, FilesystemWriteError
from kubescaffold.model.file import IfExistsAction


class WriteAction(str, Enum):
    CREATED = "created"
    OVERWRITTEN = "overwritten"
    SKIPPED = "skipped"


@dataclass(frozen=True)
class RenderedFile:
    """A file the writer handled, and what it did with it."""

    path: Path
    content: bytes
    action: WriteAction

    @property
    def written(self) -> bool:
        return self.action is not WriteAction.SKIPPED


class FileWriter:
    """Writes rendered content to disk one file at a time.

    Writes are not transactional across files: a failure on one file leaves
    every earlier file in place.
    """

    def write(self, path: str | Path, content: bytes, policy: IfExistsAction) -> RenderedFile:
        """Write *content* to *path* according to *policy*.

        Parent directories are created automatically.

        Raises:
            AlreadyExistsError: *policy* is ``ERROR`` and *path* exists.
            FilesystemWriteError: Any I/O failure, with the ``OSError`` chained.
        """
        target = Path(path)
        try:
            target.parent.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise FilesystemWriteError(f"failed to create directory {target.parent}: {exc}") from exc

        try:
            if policy is IfExistsAction.ERROR:
                return self._create_exclusive(target, content)
            exists = target.exists()
            if exists and policy is IfExistsAction.SKIP:
                return RenderedFile(target, content, WriteAction.SKIPPED)
            target.write_bytes(content)
        except FileExistsError as exc:
            raise AlreadyExistsError(f"failed to create {target}: file already exists") from exc
        except OSError as exc:
            raise FilesystemWriteError(f"failed to write {target}: {exc}") from exc

        action = WriteAction.OVERWRITTEN if exists else WriteAction.CREATED
        return RenderedFile(target, content, action)

    @staticmethod
    def _create_exclusive(target: Path, content: bytes) -> RenderedFile:
        # "x" mode makes the existence check and the create a single step.
        with target.open("xb") as fh:
            fh.write(content)
        return RenderedFile(target, content, WriteAction.CREATED)
