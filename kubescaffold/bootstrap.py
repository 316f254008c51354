"""Project initialisation: the two-phase bootstrap.

Persists the project configuration, renders the boilerplate header together
with the static project files, reads the header back from disk and renders the
version-specific catalog against a fresh universe that carries it.

Quick usage::

    from kubescaffold.bootstrap import InitScaffolder
    from kubescaffold.config import ConfigStore, ProjectConfig, ScaffoldSettings

    store = ConfigStore(ProjectConfig(repo="example.com/memcached"), root / "PROJECT")
    InitScaffolder(store, ScaffoldSettings(owner="Example Inc."), root).scaffold()
"""

from __future__ import annotations

from enum import Enum
from pathlib import Path

from kubescaffold.catalog import bootstrap_catalog, select_catalog
from kubescaffold.config import ConfigStore, ProjectConfig, ScaffoldSettings
from kubescaffold.errors import BoilerplateReadError
from kubescaffold.machinery.scaffold import Scaffold
from kubescaffold.machinery.writer import RenderedFile
from kubescaffold.model.universe import Universe
from kubescaffold.utils import console


class BootstrapState(str, Enum):
    """Progress of an :class:`InitScaffolder` run."""

    START = "start"
    CONFIG_PERSISTED = "config-persisted"
    BOILERPLATE_RENDERED = "boilerplate-rendered"
    BOILERPLATE_LOADED = "boilerplate-loaded"
    CATALOG_RENDERED = "catalog-rendered"
    DONE = "done"


class InitScaffolder:
    """Drives a full ``init`` run for one project directory.

    Any error stops the run in whatever state it reached and propagates
    unchanged; files already written stay on disk.  Re-running is safe because
    every shipped catalog unit either skips or overwrites.

    Attributes:
        store: Persists the project configuration, once, before rendering.
        settings: Image, dependency pins, license and owner for this run.
        root: Directory the tree is generated into.
        state: The last state reached.
        boilerplate: The header text read back in the second phase.
    """

    def __init__(
        self,
        store: ConfigStore,
        settings: ScaffoldSettings | None = None,
        root: str | Path = ".",
        scaffold: Scaffold | None = None,
    ) -> None:
        self.store = store
        self.settings = settings or ScaffoldSettings()
        self.root = Path(root)
        self.machinery = scaffold or Scaffold(self.root)
        self.state = BootstrapState.START
        self.boilerplate = ""

    @property
    def config(self) -> ProjectConfig:
        return self.store.config

    def new_universe(self, boilerplate: str = "") -> Universe:
        return Universe.new(self.config, boilerplate)

    def scaffold(self) -> list[RenderedFile]:
        """Run every phase and return the files handled, in write order."""
        console.print("Writing scaffold for you to edit...")

        self.store.save()
        self.state = BootstrapState.CONFIG_PERSISTED

        # Boilerplate is still empty for this batch, as required.
        rendered = self.machinery.execute(
            self.new_universe(),
            *bootstrap_catalog(self.settings),
        )
        self.state = BootstrapState.BOILERPLATE_RENDERED

        self.boilerplate = self._read_boilerplate(rendered[0].path)
        self.state = BootstrapState.BOILERPLATE_LOADED

        catalog = select_catalog(self.config.project_version, self.settings)
        rendered += self.machinery.execute(self.new_universe(self.boilerplate), *catalog)
        self.state = BootstrapState.CATALOG_RENDERED

        self.state = BootstrapState.DONE
        return rendered

    @staticmethod
    def _read_boilerplate(path: Path) -> str:
        try:
            text = path.read_bytes().decode("utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            raise BoilerplateReadError(f"failed to read boilerplate {path}: {exc}") from exc
        if not text.strip():
            raise BoilerplateReadError(f"boilerplate {path} is empty")
        return text
