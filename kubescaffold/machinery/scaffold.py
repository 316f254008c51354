"""Batch execution: resolve then write each unit, in order, failing fast."""

from __future__ import annotations

from pathlib import Path

from kubescaffold.errors import ScaffoldError
from kubescaffold.machinery.renderer import TemplateRenderer
from kubescaffold.machinery.writer import FileWriter, RenderedFile
from kubescaffold.model.file import TemplateUnit
from kubescaffold.model.universe import Universe


class Scaffold:
    """Executes batches of template units under a project root.

    Each :meth:`execute` call is independent: the only state it uses is the
    universe it is handed.  Units run strictly in declared order; the first
    failure stops the batch and nothing already written is rolled back.
    """

    def __init__(
        self,
        root: str | Path = ".",
        renderer: TemplateRenderer | None = None,
        writer: FileWriter | None = None,
    ) -> None:
        self.root = Path(root)
        self.renderer = renderer or TemplateRenderer()
        self.writer = writer or FileWriter()

    def execute(self, universe: Universe, *units: TemplateUnit) -> list[RenderedFile]:
        """Resolve and write *units* against *universe*.

        Returns:
            One :class:`RenderedFile` per unit, in order.

        Raises:
            ScaffoldError: The first failure, with ``template_path`` set to the
                failing unit's declared path.  Units after it are never
                attempted.
        """
        rendered: list[RenderedFile] = []
        for unit in units:
            try:
                resolved = self.renderer.resolve(unit, universe)
                rendered.append(
                    self.writer.write(
                        self.root / resolved.path,
                        resolved.content,
                        unit.existence_policy(),
                    )
                )
            except ScaffoldError as exc:
                if exc.template_path is None:
                    exc.template_path = unit.path
                raise
        return rendered
