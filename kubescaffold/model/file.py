"""Template units: the things a batch is made of.

The executor only ever talks to the :class:`TemplateUnit` protocol.  Two
concrete kinds ship with the engine:

* :class:`Template` -- a literal body with ``{{ placeholders }}``.  Catalog
  entries subclass it as dataclasses; their fields become extra template
  variables, so per-entry parameters such as the image name are passed in by
  whoever builds the catalog rather than read from globals.
* :class:`RawFile` -- content the caller already rendered.  Only its path is
  expanded; the bytes pass through untouched.
"""

from __future__ import annotations

from dataclasses import dataclass, fields, is_dataclass
from enum import Enum
from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

if TYPE_CHECKING:
    from kubescaffold.machinery.renderer import TemplateRenderer
    from kubescaffold.model.universe import Universe


class IfExistsAction(str, Enum):
    """What the writer does when the output file is already on disk."""

    OVERWRITE = "overwrite"
    SKIP = "skip"
    ERROR = "error"


@runtime_checkable
class TemplateUnit(Protocol):
    """Capability set required by the scaffold executor."""

    path: str

    def resolve_path(self, universe: Universe, renderer: TemplateRenderer) -> str: ...

    def resolve_content(self, universe: Universe, renderer: TemplateRenderer) -> bytes: ...

    def existence_policy(self) -> IfExistsAction: ...


class Template:
    """Base class for catalog entries rendered from a literal body."""

    path: str = ""
    template_body: str = ""
    if_exists_action: IfExistsAction = IfExistsAction.SKIP

    def template_vars(self) -> dict[str, Any]:
        """Per-unit variables, taken from the subclass's dataclass fields."""
        if not is_dataclass(self):
            return {}
        return {f.name: getattr(self, f.name) for f in fields(self)}

    def context(self, universe: Universe) -> dict[str, Any]:
        return {**universe.template_vars(), **self.template_vars()}

    def resolve_path(self, universe: Universe, renderer: TemplateRenderer) -> str:
        return renderer.render_path(self.path, self.context(universe))

    def resolve_content(self, universe: Universe, renderer: TemplateRenderer) -> bytes:
        text = renderer.render_content(self.template_body, self.context(universe))
        return text.encode("utf-8")

    def existence_policy(self) -> IfExistsAction:
        return self.if_exists_action

    def __repr__(self) -> str:
        return f"{type(self).__name__}(path={self.path!r})"


@dataclass
class RawFile:
    """Already-rendered content written verbatim."""

    path: str
    content: bytes
    if_exists_action: IfExistsAction = IfExistsAction.SKIP

    def resolve_path(self, universe: Universe, renderer: TemplateRenderer) -> str:
        return renderer.render_path(self.path, universe.template_vars())

    def resolve_content(self, universe: Universe, renderer: TemplateRenderer) -> bytes:
        if isinstance(self.content, str):
            return self.content.encode("utf-8")
        return bytes(self.content)

    def existence_policy(self) -> IfExistsAction:
        return self.if_exists_action
