"""Shared test fixtures for the modmigrate test suite."""

from __future__ import annotations

import pytest

from modmigrate.config import MigrationSettings
from modmigrate.context import MigrationContext
from modmigrate.ledger import MigrationLedger
from modmigrate.lifecycle import RenderLifecycle
from modmigrate.registry import VersionRegistry
from tests.helpers import MODULE


@pytest.fixture
def settings() -> MigrationSettings:
    """Settings with a low oldest version and roomy max version for hand-built definitions."""
    return MigrationSettings(oldest_version="0.1", max_version="9.0")


@pytest.fixture
def registry(settings: MigrationSettings) -> VersionRegistry:
    """Empty registry bounded by the settings' max version."""
    return VersionRegistry(settings.max_version)


@pytest.fixture
def ledger() -> MigrationLedger:
    return MigrationLedger()


@pytest.fixture
def lifecycle() -> RenderLifecycle:
    """Lifecycle already inside a single "the_content" pass."""
    lifecycle = RenderLifecycle()
    lifecycle.enter("the_content")
    return lifecycle


@pytest.fixture
def known_module_types() -> list[str]:
    """Mutable list backing the renderer's known module types."""
    return [MODULE, "disq_post_grid_child", "disq_cpt_grid_child"]


@pytest.fixture
def make_context(registry, lifecycle, known_module_types, settings):
    """Factory building a context once the test has registered its definitions."""

    def _make(**overrides) -> MigrationContext:
        return MigrationContext(
            registry,
            lifecycle,
            lambda: list(known_module_types),
            overrides.get("settings", settings),
        )

    return _make
