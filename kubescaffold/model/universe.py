"""The rendering context shared by every template in a batch."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any

from kubescaffold.config import ProjectConfig


@dataclass(frozen=True)
class Universe:
    """Immutable bag of values a batch is rendered against.

    A universe is built once per executor invocation.  When the boilerplate
    header becomes available a *new* universe is built with
    :meth:`with_boilerplate`; the old one keeps its empty header.
    """

    config: ProjectConfig
    boilerplate: str = ""

    @classmethod
    def new(cls, config: ProjectConfig, boilerplate: str = "") -> "Universe":
        if config is None:
            raise ValueError("a universe requires a project configuration")
        # Private copy so later edits to the caller's config cannot leak in.
        return cls(config=config.model_copy(deep=True), boilerplate=boilerplate)

    def with_boilerplate(self, boilerplate: str) -> "Universe":
        return Universe.new(self.config, boilerplate)

    @property
    def repo(self) -> str:
        return self.config.repo

    @property
    def domain(self) -> str:
        return self.config.domain

    @property
    def project_name(self) -> str:
        """DNS-label form of the last segment of the repository path."""
        base = self.config.repo.rstrip("/").rsplit("/", 1)[-1]
        return re.sub(r"[^a-z0-9]+", "-", base.lower()).strip("-")

    def template_vars(self) -> dict[str, Any]:
        """Variables every template may reference.

        Empty string fields are left out rather than rendered blank.  In
        particular ``boilerplate`` is only present once it has been loaded, so
        a template that depends on the header fails to render against an early
        universe instead of silently emitting an empty header.
        """
        variables: dict[str, Any] = {
            "project_version": self.config.version,
            "multigroup": self.config.multigroup,
            "resources": [r.model_dump() for r in self.config.resources],
        }
        for name, value in (
            ("repo", self.config.repo),
            ("domain", self.config.domain),
            ("project_name", self.project_name),
            ("boilerplate", self.boilerplate),
        ):
            if value:
                variables[name] = value
        return variables
