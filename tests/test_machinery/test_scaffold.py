"""Tests for kubescaffold.machinery.scaffold -- the batch executor.

Covers:
- Units written under the root, in declared order
- Fail-fast: nothing after the first failure is attempted
- Failing unit's declared path annotated on the error, type preserved
- Independence of successive invocations
"""

from __future__ import annotations

from dataclasses import dataclass
from unittest.mock import MagicMock

import pytest

from kubescaffold.errors import (
    AlreadyExistsError,
    ContentResolutionError,
    PathResolutionError,
    ScaffoldError,
)
from kubescaffold.machinery.renderer import TemplateRenderer
from kubescaffold.machinery.scaffold import Scaffold
from kubescaffold.machinery.writer import FileWriter, WriteAction
from kubescaffold.model.file import IfExistsAction, RawFile, Template
from kubescaffold.model.universe import Universe

pytestmark = pytest.mark.unit


# ---------------------------------------------------------------------------
# Test units
# ---------------------------------------------------------------------------


@dataclass
class Note(Template):
    name: str = "first"

    path = "notes/{{ name }}.txt"
    template_body = "{{ name }} note for {{ repo }}\n"


class NeedsHeader(Template):
    path = "cmd/main.go"
    template_body = "{{ boilerplate }}\n\npackage main\n"


class BadPath(Template):
    path = "apis/{{ group }}/types.go"
    template_body = "package apis\n"


class Arithmetic(Template):
    path = "out/ratio.txt"
    template_body = "{{ 1 // 0 }}\n"


class Lockfile(Template):
    path = "go.sum"
    if_exists_action = IfExistsAction.ERROR
    template_body = "locked\n"


@pytest.fixture
def scaffold(project_root) -> Scaffold:
    return Scaffold(project_root)


# ---------------------------------------------------------------------------
# Successful batches
# ---------------------------------------------------------------------------


class TestExecute:
    def test_writes_units_in_order(self, scaffold, universe, project_root):
        rendered = scaffold.execute(universe, Note("a"), Note("b"), RawFile("bin/tool", b"\x7fELF"))
        assert [r.path for r in rendered] == [
            project_root / "notes" / "a.txt",
            project_root / "notes" / "b.txt",
            project_root / "bin" / "tool",
        ]
        assert (project_root / "notes" / "a.txt").read_text() == (
            "a note for github.com/example/memcached-operator\n"
        )
        assert (project_root / "bin" / "tool").read_bytes() == b"\x7fELF"

    def test_empty_batch(self, scaffold, universe):
        assert scaffold.execute(universe) == []

    def test_reports_skipped_files(self, scaffold, universe, project_root):
        (project_root / "notes").mkdir()
        (project_root / "notes" / "first.txt").write_text("edited by hand\n")
        rendered = scaffold.execute(universe, Note())
        assert rendered[0].action is WriteAction.SKIPPED
        assert (project_root / "notes" / "first.txt").read_text() == "edited by hand\n"

    def test_invocations_are_independent(self, scaffold, universe, loaded_universe, project_root):
        with pytest.raises(ContentResolutionError):
            scaffold.execute(universe, NeedsHeader())
        scaffold.execute(loaded_universe, NeedsHeader())
        assert (project_root / "cmd" / "main.go").read_text().startswith("/*\nCopyright 2026")

    def test_defaults_to_current_directory(self):
        scaffold = Scaffold()
        assert str(scaffold.root) == "."
        assert isinstance(scaffold.renderer, TemplateRenderer)
        assert isinstance(scaffold.writer, FileWriter)


# ---------------------------------------------------------------------------
# Failing batches
# ---------------------------------------------------------------------------


class TestFailFast:
    def test_content_failure_stops_the_batch(self, scaffold, universe, project_root):
        with pytest.raises(ContentResolutionError) as exc_info:
            scaffold.execute(universe, Note("before"), NeedsHeader(), Note("after"))
        assert exc_info.value.template_path == "cmd/main.go"
        assert exc_info.value.field == "boilerplate"
        assert (project_root / "notes" / "before.txt").exists()
        assert not (project_root / "cmd" / "main.go").exists()
        assert not (project_root / "notes" / "after.txt").exists()

    def test_path_failure_reports_declared_path(self, scaffold, universe):
        with pytest.raises(PathResolutionError) as exc_info:
            scaffold.execute(universe, BadPath())
        assert exc_info.value.template_path == "apis/{{ group }}/types.go"
        assert str(exc_info.value).startswith("apis/{{ group }}/types.go: ")

    def test_evaluation_failure_reports_declared_path(self, scaffold, universe, project_root):
        with pytest.raises(ContentResolutionError) as exc_info:
            scaffold.execute(universe, Arithmetic(), Note("after"))
        assert exc_info.value.template_path == "out/ratio.txt"
        assert isinstance(exc_info.value.__cause__, ZeroDivisionError)
        assert not (project_root / "notes" / "after.txt").exists()

    def test_conflict_stops_the_batch(self, scaffold, universe, project_root):
        (project_root / "go.sum").write_text("existing\n")
        with pytest.raises(AlreadyExistsError) as exc_info:
            scaffold.execute(universe, Note("before"), Lockfile(), Note("after"))
        assert exc_info.value.template_path == "go.sum"
        assert (project_root / "go.sum").read_text() == "existing\n"
        assert (project_root / "notes" / "before.txt").exists()
        assert not (project_root / "notes" / "after.txt").exists()

    def test_units_after_failure_are_never_resolved(self, project_root, universe):
        later = MagicMock()
        later.path = "later.txt"
        with pytest.raises(ScaffoldError):
            Scaffold(project_root).execute(universe, BadPath(), later)
        later.resolve_path.assert_not_called()
        later.resolve_content.assert_not_called()

    def test_existing_annotation_is_kept(self, project_root):
        error = ContentResolutionError("boom", template_path="inner/path")
        unit = MagicMock()
        unit.path = "outer/path"
        unit.resolve_path.side_effect = error
        with pytest.raises(ContentResolutionError) as exc_info:
            Scaffold(project_root).execute(MagicMock(spec=Universe), unit)
        assert exc_info.value.template_path == "inner/path"
