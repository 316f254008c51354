"""Jinja2 rendering of template paths and bodies.

Provides the TemplateRenderer class which resolves a template unit against a
universe into an output path and byte content.  Rendering is strict: a
placeholder that names a variable the universe (or the unit) does not provide
is an error, never an empty string.  Resolution reads nothing but its inputs,
so the same unit and universe always produce the same bytes.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from pathlib import PurePosixPath
from typing import Any

from jinja2 import Environment, StrictUndefined, TemplateError, TemplateSyntaxError, UndefinedError

from kubescaffold.errors import ContentResolutionError, PathResolutionError
from kubescaffold.model.file import TemplateUnit
from kubescaffold.model.universe import Universe

_UNDEFINED_NAME = re.compile(r"'([^']+)' is undefined")

# Raised by expressions inside a template, e.g. ``{{ 1 // 0 }}`` or ``{{ repo + 1 }}``.
_EVALUATION_ERRORS = (TemplateError, TypeError, ValueError, ArithmeticError)


@dataclass(frozen=True)
class ResolvedFile:
    """Output of resolving one unit: a root-relative path and its bytes."""

    path: str
    content: bytes


# ---------------------------------------------------------------------------
# TemplateRenderer
# ---------------------------------------------------------------------------


class TemplateRenderer:
    """Renders template paths and bodies with a strict Jinja2 environment."""

    def __init__(self) -> None:
        self.env = Environment(
            autoescape=False,
            undefined=StrictUndefined,
            keep_trailing_newline=True,
        )

    # -- String rendering --------------------------------------------------

    def render_string(self, template_string: str, context: dict[str, Any]) -> str:
        """Render an inline template string with the provided context.

        Jinja2 errors propagate unchanged; :meth:`render_path` and
        :meth:`render_content` translate them into scaffold errors.
        """
        template = self.env.from_string(template_string)
        return template.render(**context)

    def render_path(self, path_template: str, context: dict[str, Any]) -> str:
        """Expand *path_template* into a normalised root-relative path.

        Raises:
            PathResolutionError: If a placeholder is undefined, the template is
                malformed or fails to evaluate, or the result is empty,
                absolute, or escapes the project root.
        """
        try:
            rendered = self.render_string(path_template, context)
        except UndefinedError as exc:
            name = _undefined_name(exc)
            raise PathResolutionError(
                f"path {path_template!r} references missing field {name!r}"
            ) from exc
        except TemplateSyntaxError as exc:
            raise PathResolutionError(f"malformed path template {path_template!r}: {exc}") from exc
        except _EVALUATION_ERRORS as exc:
            raise PathResolutionError(
                f"failed to render path {path_template!r}: {type(exc).__name__}: {exc}"
            ) from exc

        rendered = rendered.strip()
        if not rendered:
            raise PathResolutionError(f"path {path_template!r} resolved to an empty string")
        path = PurePosixPath(rendered)
        if path.is_absolute():
            raise PathResolutionError(f"path {rendered!r} must be relative to the project root")
        if ".." in path.parts:
            raise PathResolutionError(f"path {rendered!r} escapes the project root")
        return str(path)

    def render_content(self, template_body: str, context: dict[str, Any]) -> str:
        """Substitute *context* into *template_body*.

        Raises:
            ContentResolutionError: If a placeholder is undefined or the body
                is malformed or fails to evaluate.
        """
        try:
            return self.render_string(template_body, context)
        except UndefinedError as exc:
            name = _undefined_name(exc)
            raise ContentResolutionError(
                f"template references missing field {name!r}", field=name
            ) from exc
        except TemplateSyntaxError as exc:
            raise ContentResolutionError(f"malformed template body: {exc}") from exc
        except _EVALUATION_ERRORS as exc:
            raise ContentResolutionError(
                f"failed to render template body: {type(exc).__name__}: {exc}"
            ) from exc

    # -- Unit resolution ---------------------------------------------------

    def resolve(self, unit: TemplateUnit, universe: Universe) -> ResolvedFile:
        """Resolve *unit* against *universe* into a :class:`ResolvedFile`."""
        path = unit.resolve_path(universe, self)
        content = unit.resolve_content(universe, self)
        return ResolvedFile(path=path, content=content)


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------

def _undefined_name(exc: UndefinedError) -> str | None:
    match = _UNDEFINED_NAME.search(str(exc))
    return match.group(1) if match else None
