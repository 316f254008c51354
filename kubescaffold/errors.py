"""Error taxonomy for the scaffolding engine.

Every failure raised by the engine derives from :class:`ScaffoldError`.  The
executor annotates the first failing unit's declared path on the error before
re-raising it, so callers always know which template stopped the run without
the error changing type.
"""

from __future__ import annotations


class ScaffoldError(Exception):
    """Base class for every error raised while scaffolding a project."""

    def __init__(self, message: str, template_path: str | None = None) -> None:
        self.message = message
        self.template_path = template_path
        super().__init__(message)

    def __str__(self) -> str:
        if self.template_path:
            return f"{self.template_path}: {self.message}"
        return self.message


class ConfigPersistError(ScaffoldError):
    """Raised when the project configuration cannot be saved."""


class PathResolutionError(ScaffoldError):
    """Raised when a template's output path cannot be resolved."""


class ContentResolutionError(ScaffoldError):
    """Raised when a template body references a field the universe lacks."""

    def __init__(
        self,
        message: str,
        field: str | None = None,
        template_path: str | None = None,
    ) -> None:
        self.field = field
        super().__init__(message, template_path=template_path)


class AlreadyExistsError(ScaffoldError):
    """Raised when an ``ERROR`` policy unit finds its file already present."""


class FilesystemWriteError(ScaffoldError):
    """Raised on I/O failures while writing a rendered file."""


class BoilerplateReadError(ScaffoldError):
    """Raised when the just-written boilerplate cannot be read back.

    The engine wrote the file moments earlier, so this signals an internal
    inconsistency and is never retried.
    """


class UnsupportedVersionError(ScaffoldError):
    """Raised for a project version with no registered catalog."""

    def __init__(self, version: str) -> None:
        self.version = version
        super().__init__(f"unknown project version {version!r}")
