"""Tests for kubescaffold.catalog -- the shipped template catalogs.

Covers:
- Version dispatch through the catalog registry
- Exact path sets of the bootstrap, v1 and v2 batches
- Existence policies of shipped units
- Settings threaded into the units that need them
- Boilerplate header rendering
- Which units depend on the loaded boilerplate
"""

from __future__ import annotations

import pytest

from kubescaffold.catalog import CATALOGS, bootstrap_catalog, select_catalog, v1_catalog, v2_catalog
from kubescaffold.catalog.project import LICENSES, Boilerplate, boilerplate_unit
from kubescaffold.config import ProjectVersion, ScaffoldSettings
from kubescaffold.errors import ContentResolutionError, UnsupportedVersionError
from kubescaffold.model.file import IfExistsAction

pytestmark = pytest.mark.unit

BOOTSTRAP_PATHS = [
    "hack/boilerplate.go.txt",
    ".gitignore",
    "config/rbac/auth_proxy_role.yaml",
    "config/rbac/auth_proxy_role_binding.yaml",
]

V1_PATHS = [
    "config/rbac/kustomization.yaml",
    "config/default/manager_image_patch.yaml",
    "config/default/manager_prometheus_metrics_patch.yaml",
    "config/default/manager_auth_proxy_patch.yaml",
    "config/rbac/auth_proxy_service.yaml",
    "config/manager/manager.yaml",
    "Makefile",
    "Gopkg.toml",
    "Dockerfile",
    "config/default/kustomization.yaml",
    "config/manager/kustomization.yaml",
    "pkg/apis/apis.go",
    "pkg/controller/controller.go",
    "pkg/webhook/webhook.go",
    "cmd/manager/main.go",
]

V2_PATHS = [
    "config/default/manager_auth_proxy_patch.yaml",
    "config/rbac/auth_proxy_service.yaml",
    "config/rbac/auth_proxy_client_clusterrole.yaml",
    "config/manager/manager.yaml",
    "main.go",
    "go.mod",
    "Makefile",
    "Dockerfile",
    "config/default/kustomization.yaml",
    "config/default/manager_webhook_patch.yaml",
    "config/rbac/role_binding.yaml",
    "config/rbac/leader_election_role.yaml",
    "config/rbac/leader_election_role_binding.yaml",
    "config/rbac/kustomization.yaml",
    "config/manager/kustomization.yaml",
    "config/webhook/kustomization.yaml",
    "config/webhook/kustomizeconfig.yaml",
    "config/webhook/service.yaml",
    "config/default/webhookcainjection_patch.yaml",
    "config/prometheus/kustomization.yaml",
    "config/prometheus/monitor.yaml",
    "config/certmanager/certificate.yaml",
    "config/certmanager/kustomization.yaml",
    "config/certmanager/kustomizeconfig.yaml",
]


def resolved_paths(units, universe, renderer) -> list[str]:
    return [unit.resolve_path(universe, renderer) for unit in units]


def render(unit, universe, renderer) -> str:
    return unit.resolve_content(universe, renderer).decode("utf-8")


def by_path(units, path):
    return next(unit for unit in units if unit.path == path)


# ---------------------------------------------------------------------------
# Registry
# ---------------------------------------------------------------------------


class TestRegistry:
    def test_every_version_has_a_catalog(self):
        assert set(CATALOGS) == set(ProjectVersion)

    def test_select_v1(self, settings):
        assert [u.path for u in select_catalog(ProjectVersion.V1, settings)] == V1_PATHS

    def test_select_v2(self, settings):
        assert [u.path for u in select_catalog(ProjectVersion.V2, settings)] == V2_PATHS

    def test_select_unknown_version(self, settings):
        with pytest.raises(UnsupportedVersionError) as exc_info:
            select_catalog("3", settings)
        assert exc_info.value.version == "3"

    def test_catalogs_are_built_fresh(self, settings):
        assert select_catalog(ProjectVersion.V2, settings) is not select_catalog(
            ProjectVersion.V2, settings
        )


# ---------------------------------------------------------------------------
# Path sets
# ---------------------------------------------------------------------------


class TestPaths:
    def test_bootstrap_paths(self, settings, universe, renderer):
        assert resolved_paths(bootstrap_catalog(settings), universe, renderer) == BOOTSTRAP_PATHS

    @pytest.mark.parametrize("factory, expected", [(v1_catalog, V1_PATHS), (v2_catalog, V2_PATHS)])
    def test_catalog_paths(self, factory, expected, settings, loaded_universe, renderer):
        assert resolved_paths(factory(settings), loaded_universe, renderer) == expected

    @pytest.mark.parametrize("expected", [V1_PATHS, V2_PATHS])
    def test_no_duplicates_within_a_run(self, expected):
        run = BOOTSTRAP_PATHS + expected
        assert len(run) == len(set(run))

    def test_boilerplate_path_follows_settings(self, universe, renderer):
        settings = ScaffoldSettings(boilerplate_path="hack/header.txt")
        assert bootstrap_catalog(settings)[0].resolve_path(universe, renderer) == "hack/header.txt"


# ---------------------------------------------------------------------------
# Existence policies
# ---------------------------------------------------------------------------


class TestPolicies:
    @pytest.mark.parametrize("factory", [bootstrap_catalog, v1_catalog, v2_catalog])
    def test_no_shipped_unit_errors_on_existing_files(self, factory, settings):
        assert all(u.existence_policy() is not IfExistsAction.ERROR for u in factory(settings))

    def test_bootstrap_units_skip(self, settings):
        assert {u.existence_policy() for u in bootstrap_catalog(settings)} == {IfExistsAction.SKIP}

    def test_v1_overwrites(self, settings):
        overwritten = {
            u.path for u in v1_catalog(settings)
            if u.existence_policy() is IfExistsAction.OVERWRITE
        }
        assert overwritten == {"Makefile", "config/manager/manager.yaml"}

    def test_v2_overwrites(self, settings):
        overwritten = {
            u.path for u in v2_catalog(settings)
            if u.existence_policy() is IfExistsAction.OVERWRITE
        }
        assert overwritten == {"Makefile", "config/manager/manager.yaml", "go.mod"}


# ---------------------------------------------------------------------------
# Settings threading
# ---------------------------------------------------------------------------


class TestSettings:
    @pytest.fixture
    def custom(self) -> ScaffoldSettings:
        return ScaffoldSettings(
            image="quay.io/example/memcached:v0.0.1",
            controller_runtime_version="v0.5.0",
            controller_tools_version="v0.2.5",
            year=2026,
        )

    def test_v2_image(self, custom, loaded_universe, renderer):
        units = v2_catalog(custom)
        assert "IMG ?= quay.io/example/memcached:v0.0.1\n" in render(
            by_path(units, "Makefile"), loaded_universe, renderer
        )
        assert "image: quay.io/example/memcached:v0.0.1\n" in render(
            by_path(units, "config/manager/manager.yaml"), loaded_universe, renderer
        )

    def test_v2_dependency_pins(self, custom, loaded_universe, renderer):
        units = v2_catalog(custom)
        go_mod = render(by_path(units, "go.mod"), loaded_universe, renderer)
        assert go_mod.startswith("module github.com/example/memcached-operator\n")
        assert "sigs.k8s.io/controller-runtime v0.5.0\n" in go_mod
        assert "controller-gen@v0.2.5" in render(by_path(units, "Makefile"), loaded_universe, renderer)

    def test_v1_image(self, custom, loaded_universe, renderer):
        makefile = render(by_path(v1_catalog(custom), "Makefile"), loaded_universe, renderer)
        assert "IMG ?= quay.io/example/memcached:v0.0.1\n" in makefile

    def test_makefile_recipes_use_tabs(self, settings, loaded_universe, renderer):
        for factory in (v1_catalog, v2_catalog):
            makefile = render(by_path(factory(settings), "Makefile"), loaded_universe, renderer)
            assert "\n\tgo build" in makefile
            assert "\n    go " not in makefile

    def test_kustomize_uses_project_name(self, settings, loaded_universe, renderer):
        for factory in (v1_catalog, v2_catalog):
            text = render(
                by_path(factory(settings), "config/default/kustomization.yaml"),
                loaded_universe,
                renderer,
            )
            assert "namespace: memcached-operator-system\n" in text
            assert "namePrefix: memcached-operator-\n" in text


# ---------------------------------------------------------------------------
# Boilerplate
# ---------------------------------------------------------------------------


class TestBoilerplate:
    def test_owner_and_apache_license(self, settings, universe, renderer):
        text = render(boilerplate_unit(settings), universe, renderer)
        assert text == "/*\nCopyright 2026 Example Inc.\n\n" + LICENSES["apache2"] + "*/"

    def test_no_owner_no_license(self, universe, renderer):
        assert render(Boilerplate(license="none"), universe, renderer) == "/*\n*/"

    def test_owner_only(self, universe, renderer):
        unit = Boilerplate(license="none", owner="Example Inc.", year=2026)
        assert render(unit, universe, renderer) == "/*\nCopyright 2026 Example Inc.\n*/"

    def test_owner_gets_closing_period(self, universe, renderer):
        unit = Boilerplate(license="none", owner="Jane Doe", year=2026)
        assert render(unit, universe, renderer) == "/*\nCopyright 2026 Jane Doe.\n*/"

    def test_unknown_license(self, universe, renderer):
        with pytest.raises(ContentResolutionError) as exc_info:
            render(Boilerplate(license="mit"), universe, renderer)
        assert exc_info.value.field == "license"

    def test_unknown_license_does_not_affect_path(self, universe, renderer):
        assert Boilerplate(license="mit").resolve_path(universe, renderer) == (
            "hack/boilerplate.go.txt"
        )

    def test_renders_without_loaded_boilerplate(self, settings, universe, renderer):
        for unit in bootstrap_catalog(settings):
            render(unit, universe, renderer)


# ---------------------------------------------------------------------------
# Boilerplate dependency
# ---------------------------------------------------------------------------


class TestBoilerplateDependency:
    @pytest.mark.parametrize("factory", [v1_catalog, v2_catalog])
    def test_go_sources_start_with_header(self, factory, settings, loaded_universe, renderer):
        for unit in factory(settings):
            if unit.path.endswith(".go"):
                assert render(unit, loaded_universe, renderer).startswith(
                    loaded_universe.boilerplate + "\n\n"
                )

    @pytest.mark.parametrize("factory", [v1_catalog, v2_catalog])
    def test_go_sources_refuse_empty_header(self, factory, settings, universe, renderer):
        for unit in factory(settings):
            if unit.path.endswith(".go"):
                with pytest.raises(ContentResolutionError) as exc_info:
                    render(unit, universe, renderer)
                assert exc_info.value.field == "boilerplate"

    @pytest.mark.parametrize("factory", [v1_catalog, v2_catalog])
    def test_other_files_do_not_need_header(self, factory, settings, universe, renderer):
        for unit in factory(settings):
            if not unit.path.endswith(".go"):
                render(unit, universe, renderer)
