"""Template catalogs, keyed by project version.

Adding a layout version means adding a :class:`ProjectVersion` member and a
catalog function to :data:`CATALOGS`; the machinery never changes.
"""

from __future__ import annotations

from typing import Callable

from kubescaffold.catalog.project import bootstrap_catalog
from kubescaffold.catalog.v1 import v1_catalog
from kubescaffold.catalog.v2 import v2_catalog
from kubescaffold.config import ProjectVersion, ScaffoldSettings
from kubescaffold.errors import UnsupportedVersionError
from kubescaffold.model.file import Template

CatalogFactory = Callable[[ScaffoldSettings], list[Template]]

CATALOGS: dict[ProjectVersion, CatalogFactory] = {
    ProjectVersion.V1: v1_catalog,
    ProjectVersion.V2: v2_catalog,
}


def select_catalog(version: ProjectVersion, settings: ScaffoldSettings) -> list[Template]:
    """Build the second-batch catalog for *version*.

    Raises:
        UnsupportedVersionError: If no catalog is registered for *version*.
    """
    try:
        factory = CATALOGS[version]
    except KeyError:
        raise UnsupportedVersionError(str(version)) from None
    return factory(settings)


__all__ = [
    "CATALOGS",
    "CatalogFactory",
    "bootstrap_catalog",
    "select_catalog",
    "v1_catalog",
    "v2_catalog",
]
