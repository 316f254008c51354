"""kubescaffold configuration.

Two typed models live here.  ``ProjectConfig`` is the persisted description of
a project (the ``PROJECT`` file at the repository root) and ``ScaffoldSettings``
carries the per-run knobs that feed the templates (image name, dependency
pins, license and owner).  Both are Pydantic v2 models so they are validated
at construction time.
"""

from __future__ import annotations

import os
from datetime import datetime, timezone
from enum import Enum
from pathlib import Path
from typing import Any, Literal

import yaml
from pydantic import BaseModel, Field, field_validator

from kubescaffold.errors import ConfigPersistError, UnsupportedVersionError

PROJECT_FILE = "PROJECT"

DEFAULT_IMAGE = "controller:latest"
DEFAULT_CONTROLLER_RUNTIME_VERSION = "v0.4.0"
DEFAULT_CONTROLLER_TOOLS_VERSION = "v0.2.4"
DEFAULT_BOILERPLATE_PATH = "hack/boilerplate.go.txt"


class ProjectVersion(str, Enum):
    """Project layouts the scaffolder knows how to generate."""

    V1 = "1"
    V2 = "2"


class Resource(BaseModel):
    """A group/version/kind already declared in the project."""

    group: str
    version: str
    kind: str


class ProjectConfig(BaseModel):
    """Persisted project settings.

    ``version`` is kept as a plain string so that a ``PROJECT`` file written by
    a newer tool still loads; it is only resolved into a
    :class:`ProjectVersion` when a catalog has to be chosen.
    """

    version: str = Field(default=ProjectVersion.V2.value)
    domain: str = Field(default="my.domain")
    repo: str = Field(default="", description="Go import path of the project")
    multigroup: bool = Field(default=False, description="v2 only: one API directory per group")
    resources: list[Resource] = Field(default_factory=list)

    @field_validator("version", mode="before")
    @classmethod
    def _version_as_string(cls, value: Any) -> Any:
        # An unquoted ``version: 2`` in YAML arrives as an int.
        if isinstance(value, int):
            return str(value)
        return value

    @property
    def project_version(self) -> ProjectVersion:
        """The layout version, raising ``UnsupportedVersionError`` if unknown."""
        try:
            return ProjectVersion(self.version)
        except ValueError:
            raise UnsupportedVersionError(self.version) from None

    def to_document(self) -> dict[str, Any]:
        """Return the mapping written to the ``PROJECT`` file."""
        doc: dict[str, Any] = {
            "domain": self.domain,
            "repo": self.repo,
            "version": self.version,
        }
        if self.multigroup:
            doc["multigroup"] = True
        if self.resources:
            doc["resources"] = [r.model_dump() for r in self.resources]
        return doc


class ScaffoldSettings(BaseModel):
    """Per-run values threaded into the template catalogs.

    None of these are persisted: they describe how this particular run should
    render the build files, not the project itself.
    """

    image: str = Field(default=DEFAULT_IMAGE, min_length=1)
    controller_runtime_version: str = Field(default=DEFAULT_CONTROLLER_RUNTIME_VERSION)
    controller_tools_version: str = Field(default=DEFAULT_CONTROLLER_TOOLS_VERSION)
    license: Literal["apache2", "none"] = Field(default="apache2")
    owner: str = Field(default="")
    year: int = Field(default_factory=lambda: datetime.now(timezone.utc).year, ge=1970)
    boilerplate_path: str = Field(default=DEFAULT_BOILERPLATE_PATH, min_length=1)

    @classmethod
    def from_env(cls, **overrides: Any) -> "ScaffoldSettings":
        """Build settings from environment variables.

        Recognised variables (all optional):
            KUBESCAFFOLD_IMAGE, KUBESCAFFOLD_CONTROLLER_RUNTIME_VERSION,
            KUBESCAFFOLD_CONTROLLER_TOOLS_VERSION, KUBESCAFFOLD_LICENSE,
            KUBESCAFFOLD_OWNER, KUBESCAFFOLD_BOILERPLATE_PATH.

        Keyword *overrides* whose value is not ``None`` win over the
        environment.
        """
        kwargs: dict[str, Any] = {}
        env_map = {
            "KUBESCAFFOLD_IMAGE": "image",
            "KUBESCAFFOLD_CONTROLLER_RUNTIME_VERSION": "controller_runtime_version",
            "KUBESCAFFOLD_CONTROLLER_TOOLS_VERSION": "controller_tools_version",
            "KUBESCAFFOLD_LICENSE": "license",
            "KUBESCAFFOLD_OWNER": "owner",
            "KUBESCAFFOLD_BOILERPLATE_PATH": "boilerplate_path",
        }
        for var, name in env_map.items():
            if os.environ.get(var):
                kwargs[name] = os.environ[var]

        kwargs.update({k: v for k, v in overrides.items() if v is not None})
        return cls(**kwargs)


class ConfigStore:
    """Reads and writes a :class:`ProjectConfig` as the ``PROJECT`` YAML file."""

    def __init__(self, config: ProjectConfig, path: str | Path = PROJECT_FILE) -> None:
        self.config = config
        self.path = Path(path)

    def save(self) -> Path:
        """Persist the configuration.

        Returns:
            The path that was written.

        Raises:
            ConfigPersistError: If the file or its directory cannot be written.
        """
        content = yaml.safe_dump(self.config.to_document(), sort_keys=False)
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self.path.write_text(content, encoding="utf-8")
        except OSError as exc:
            raise ConfigPersistError(
                f"failed to save project configuration to {self.path}: {exc}"
            ) from exc
        return self.path

    @classmethod
    def load(cls, path: str | Path = PROJECT_FILE) -> "ConfigStore":
        """Load a previously saved ``PROJECT`` file.

        Raises:
            FileNotFoundError: If *path* does not exist.
            pydantic.ValidationError: If the document does not describe a project.
        """
        raw = Path(path).read_text(encoding="utf-8")
        data = yaml.safe_load(raw) or {}
        if not isinstance(data, dict):
            raise ValueError(f"{path} does not contain a mapping")
        return cls(ProjectConfig.model_validate(data), path)


__all__ = [
    "ConfigStore",
    "ProjectConfig",
    "ProjectVersion",
    "Resource",
    "ScaffoldSettings",
]
