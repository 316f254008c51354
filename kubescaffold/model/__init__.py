"""Value types shared by the scaffolding machinery and the catalogs."""

from kubescaffold.model.file import IfExistsAction, RawFile, Template, TemplateUnit
from kubescaffold.model.universe import Universe

__all__ = [
    "IfExistsAction",
    "RawFile",
    "Template",
    "TemplateUnit",
    "Universe",
]
