"""Render-time migration of page-builder module attributes.

Saved modules record the schema version they were authored under. During
rendering, a MigrationContext rewrites their attributes and body so the
current renderer sees the newest schema, without touching stored content.
"""

from __future__ import annotations

from modmigrate.config import MigrationSettings
from modmigrate.context import MigrationContext
from modmigrate.definitions import NO_VALUE, MigrationDefinition, SimpleMigration
from modmigrate.lifecycle import PhaseState, RenderLifecycle
from modmigrate.loader import DefinitionLoader, default_registry
from modmigrate.registry import ALL_VERSIONS, VersionRegistry

__all__ = [
    "ALL_VERSIONS",
    "NO_VALUE",
    "DefinitionLoader",
    "MigrationContext",
    "MigrationDefinition",
    "MigrationSettings",
    "PhaseState",
    "RenderLifecycle",
    "SimpleMigration",
    "VersionRegistry",
    "default_registry",
]
