"""kubescaffold -- scaffolds the boilerplate tree of a Kubernetes controller project.

The engine renders an ordered batch of template units against an immutable
universe and writes each file under its existence policy.  ``init`` runs it
twice: once to write the boilerplate header (and files that do not need it),
then, after reading the header back, once more with the catalog for the
project's layout version.

Quick usage::

    from kubescaffold import ConfigStore, InitScaffolder, ProjectConfig, ScaffoldSettings

    config = ProjectConfig(version="2", domain="example.com", repo="example.com/guestbook")
    store = ConfigStore(config, "guestbook/PROJECT")
    files = InitScaffolder(store, ScaffoldSettings(owner="Example Inc."), "guestbook").scaffold()
"""

from kubescaffold.bootstrap import BootstrapState, InitScaffolder
from kubescaffold.config import ConfigStore, ProjectConfig, ProjectVersion, Resource, ScaffoldSettings
from kubescaffold.machinery import FileWriter, RenderedFile, Scaffold, TemplateRenderer, WriteAction
from kubescaffold.model import IfExistsAction, RawFile, Template, TemplateUnit, Universe

__version__ = "0.1.0"

__all__ = [
    "BootstrapState",
    "ConfigStore",
    "FileWriter",
    "IfExistsAction",
    "InitScaffolder",
    "ProjectConfig",
    "ProjectVersion",
    "RawFile",
    "RenderedFile",
    "Resource",
    "Scaffold",
    "ScaffoldSettings",
    "Template",
    "TemplateRenderer",
    "TemplateUnit",
    "Universe",
    "WriteAction",
]
