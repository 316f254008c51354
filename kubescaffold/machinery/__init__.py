"""Scaffolding machinery: resolve template units and write them to disk.

Quick usage::

    from kubescaffold.machinery import Scaffold
    from kubescaffold.model import Universe

    Scaffold(root).execute(Universe.new(config), GitIgnore(), Makefile(image=...))
"""

from kubescaffold.machinery.renderer import ResolvedFile, TemplateRenderer
from kubescaffold.machinery.scaffold import Scaffold
from kubescaffold.machinery.writer import FileWriter, RenderedFile, WriteAction

__all__ = [
    "FileWriter",
    "RenderedFile",
    "ResolvedFile",
    "Scaffold",
    "TemplateRenderer",
    "WriteAction",
]
