"""Shared pytest fixtures for the kubescaffold test suite.

Provides reusable fixtures for:
- Temporary project roots
- Version 1 and version 2 project configurations
- Deterministic scaffold settings (fixed year and owner)
- Config stores and universes built from them
- A strict template renderer
"""

from __future__ import annotations

from pathlib import Path

import pytest

from kubescaffold.config import ConfigStore, ProjectConfig, ScaffoldSettings
from kubescaffold.machinery.renderer import TemplateRenderer
from kubescaffold.model.universe import Universe

REPO = "github.com/example/memcached-operator"

BOILERPLATE_TEXT = "/*\nCopyright 2026 Example Inc.\n*/"


# ---------------------------------------------------------------------------
# Paths & Directories
# ---------------------------------------------------------------------------

@pytest.fixture
def project_root(tmp_path: Path) -> Path:
    """Empty directory a project is generated into (auto-cleanup)."""
    root = tmp_path / "memcached-operator"
    root.mkdir()
    yield root


# ---------------------------------------------------------------------------
# Configuration
# ---------------------------------------------------------------------------

@pytest.fixture
def project_config() -> ProjectConfig:
    """A version 2 project configuration."""
    return ProjectConfig(version="2", domain="example.com", repo=REPO)


@pytest.fixture
def v1_config() -> ProjectConfig:
    """A version 1 project configuration."""
    return ProjectConfig(version="1", domain="example.com", repo=REPO)


@pytest.fixture
def settings() -> ScaffoldSettings:
    """Settings with a fixed year so rendered headers are stable."""
    return ScaffoldSettings(owner="Example Inc.", year=2026)


@pytest.fixture
def store(project_config: ProjectConfig, project_root: Path) -> ConfigStore:
    """A config store writing the v2 configuration into the project root."""
    return ConfigStore(project_config, project_root / "PROJECT")


# ---------------------------------------------------------------------------
# Universes
# ---------------------------------------------------------------------------

@pytest.fixture
def universe(project_config: ProjectConfig) -> Universe:
    """A universe before the boilerplate has been loaded."""
    return Universe.new(project_config)


@pytest.fixture
def loaded_universe(project_config: ProjectConfig) -> Universe:
    """A universe carrying a boilerplate header."""
    return Universe.new(project_config, BOILERPLATE_TEXT)


# ---------------------------------------------------------------------------
# Machinery
# ---------------------------------------------------------------------------

@pytest.fixture
def renderer() -> TemplateRenderer:
    """A fresh strict renderer."""
    return TemplateRenderer()
