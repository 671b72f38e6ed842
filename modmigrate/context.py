"""Migration context: the caches and entry points of one render job.

A render job creates one MigrationContext and routes every module render
through it. The context owns the ledger, the render-pass gate, the
rename memo and a scoped copy of the version registry, so nothing is
shared between concurrent renders.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from types import MappingProxyType
from typing import Any

from modmigrate.attributes import AttributeMigrationEngine
from modmigrate.config import MigrationSettings
from modmigrate.content import ContentMigrationEngine
from modmigrate.errors import MigrationError
from modmigrate.gate import KnownModuleTypes, RenderPassGate
from modmigrate.ledger import MigrationLedger
from modmigrate.lifecycle import RenderLifecycle
from modmigrate.registry import VersionRegistry
from modmigrate.resolver import FieldRenameResolver

logger = logging.getLogger(__name__)


class MigrationContext:
    """Per-render-job migration state and the renderer's entry points."""

    def __init__(
        self,
        registry: VersionRegistry,
        lifecycle: RenderLifecycle,
        known_module_types: KnownModuleTypes,
        settings: MigrationSettings | None = None,
    ):
        self.settings = settings or MigrationSettings()

        # Rendering has begun: no more registrations
        registry.freeze()
        self.registry = registry.scoped()

        self.lifecycle = lifecycle
        self.ledger = MigrationLedger()
        self.gate = RenderPassGate(lifecycle, known_module_types, self.settings.watched_phases)
        self.resolver = FieldRenameResolver(
            self.registry, self.ledger, self.settings.excluded_name_changes
        )
        self.attributes = AttributeMigrationEngine(
            self.registry,
            self.ledger,
            self.settings.oldest_version,
            self.settings.version_attribute,
        )
        self.content = ContentMigrationEngine(
            self.registry, self.settings.oldest_version, self.settings.version_attribute
        )

        # Set while migrating global preset attributes rather than post attributes
        self.global_presets = False

    def resolve_fields(self, module_type: str, fields: Mapping[str, Any]) -> dict[str, Any]:
        """Add skip descriptors for legacy field names of a module type."""
        return self.resolver.resolve(module_type, fields)

    def migrate_attrs(
        self,
        module_type: str,
        module_address: str,
        attrs: Mapping[str, Any],
        body: str = "",
        unprocessed_attrs: Mapping[str, Any] | None = None,
        global_presets: bool = False,
    ) -> dict[str, Any]:
        """Migrate a module's attributes for the current render pass.

        Args:
            module_type: Module type being rendered
            module_address: Location of the module on the page
            attrs: Saved attributes (not modified)
            body: Module body text
            unprocessed_attrs: Raw attributes before renderer defaults
            global_presets: Whether ``attrs`` are global preset attributes

        Returns:
            Migrated attributes, or an unmigrated copy when the gate denies
            the pass or a transform fails
        """
        if not self.gate.should_run(module_type):
            return dict(attrs)

        self.global_presets = global_presets
        try:
            return self.attributes.migrate(
                module_type, module_address, attrs, body, unprocessed_attrs
            )
        except MigrationError as e:
            logger.error(f"Attribute migration failed for {module_address}: {e}", exc_info=True)
            if self.settings.strict:
                raise
            return dict(attrs)
        finally:
            self.global_presets = False

    def migrate_content(self, module_type: str, attrs: Mapping[str, Any], body: str) -> str:
        """Migrate a module's body for the current render pass."""
        if not self.gate.should_run(module_type):
            return body

        try:
            return self.content.migrate(module_type, attrs, body)
        except MigrationError as e:
            logger.error(f"Content migration failed for {module_type}: {e}", exc_info=True)
            if self.settings.strict:
                raise
            return body

    @property
    def name_changes(self) -> MappingProxyType[str, dict[str, str]]:
        """Read-only view of field renames applied per module address."""
        return MappingProxyType(self.ledger.name_changes)

    def name_changes_for(self, module_address: str) -> MappingProxyType[str, str]:
        return self.ledger.name_changes_for(module_address)

    def reset(self) -> None:
        """Clear the ledger, gate slot and lookup memos."""
        self.ledger.reset()
        self.gate.reset()
        self.resolver.reset()
        self.registry = self.registry.scoped()
        self.resolver.registry = self.registry
        self.attributes.registry = self.registry
        self.content.registry = self.registry
