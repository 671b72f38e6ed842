"""Attribute migration engine.

Applies every definition newer than a module's declared version, in
ascending version order, to an in-memory copy of its saved attributes.
The version stamp advances to a definition's version only when that
definition changed at least one attribute.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from modmigrate.definitions import NO_VALUE, MigrationDefinition
from modmigrate.errors import TransformError
from modmigrate.ledger import MigrationLedger
from modmigrate.registry import VersionRegistry
from modmigrate.versions import version_lt

logger = logging.getLogger(__name__)


class AttributeMigrationEngine:
    """Rewrite saved module attributes to the newest schema."""

    def __init__(
        self,
        registry: VersionRegistry,
        ledger: MigrationLedger,
        oldest_version: str,
        version_attribute: str,
    ):
        self.registry = registry
        self.ledger = ledger
        self.oldest_version = oldest_version
        self.version_attribute = version_attribute

    def declared_version(self, attrs: Mapping[str, Any]) -> str:
        """Version saved on the module, or the oldest known version."""
        return str(attrs.get(self.version_attribute) or "") or self.oldest_version

    def migrate(
        self,
        module_type: str,
        module_address: str,
        attrs: Mapping[str, Any],
        body: str = "",
        unprocessed_attrs: Mapping[str, Any] | None = None,
    ) -> dict[str, Any]:
        """Migrate one module instance's attributes.

        Args:
            module_type: Module type being rendered
            module_address: Location of the module on the page
            attrs: Saved attributes (not modified)
            body: Module body text, passed to transforms
            unprocessed_attrs: Raw attributes before renderer defaults;
                defaults to a copy of ``attrs``

        Returns:
            Migrated copy of ``attrs``

        Raises:
            TransformError: If a definition's transform raises
        """
        migrated = dict(attrs)
        # Ledger writes are held back until every definition has applied
        pending = MigrationLedger()
        unprocessed = dict(attrs if unprocessed_attrs is None else unprocessed_attrs)
        declared = self.declared_version(migrated)

        for old_name, change in self.ledger.renames_for(module_type).items():
            if version_lt(declared, change.version):
                pending.record_name_change(module_address, old_name, change.new_name)
                if change.new_name in migrated:
                    unprocessed[change.new_name] = migrated[change.new_name]
                elif old_name in migrated:
                    unprocessed[change.new_name] = migrated[old_name]

        for definition in self.registry.get_applicable(declared):
            if module_type not in definition.affected_modules():
                continue

            changed = self._apply(
                definition, module_type, module_address, migrated, unprocessed, body, pending
            )

            if changed > 0:
                migrated[self.version_attribute] = definition.version
                logger.debug(
                    f"Applied migration {definition.version} to {module_type} "
                    f"at {module_address} ({changed} attrs)"
                )

        self.ledger.merge(pending)
        return migrated

    def _apply(
        self,
        definition: MigrationDefinition,
        module_type: str,
        module_address: str,
        attrs: dict[str, Any],
        unprocessed: dict[str, Any],
        body: str,
        pending: MigrationLedger,
    ) -> int:
        """Run one definition over ``attrs`` in place. Returns the change count."""
        changed = 0

        for field_name, affected in definition.field_map().items():
            for saved_field_name, modules in affected.items():
                renamed = saved_field_name != field_name

                # Old field missing and the definition does not add missing fields
                if not definition.add_missing_fields and saved_field_name not in attrs:
                    continue
                # This module type never saved its value under this name
                if module_type not in modules:
                    continue

                if renamed:
                    unprocessed[field_name] = attrs.get(saved_field_name, "")

                current_value = unprocessed.get(field_name, "")
                saved_value = attrs.get(field_name, "")

                try:
                    new_value = definition.transform(
                        field_name,
                        current_value,
                        module_type,
                        saved_value,
                        saved_field_name,
                        attrs,
                        body,
                        module_address,
                    )
                except Exception as e:
                    raise TransformError(definition.version, module_type, field_name) from e

                if new_value is NO_VALUE:
                    attrs.pop(field_name, None)
                    unprocessed.pop(field_name, None)
                    if renamed:
                        attrs.pop(saved_field_name, None)
                    continue

                if new_value != saved_value or (renamed and new_value != current_value):
                    pending.record_value_change(module_address, field_name, new_value)
                    attrs[field_name] = new_value
                    # Later definitions see this output as their carried-over value
                    unprocessed[field_name] = new_value
                    changed += 1

                # The old field's value now lives under the new name
                if renamed and saved_field_name in attrs:
                    attrs.setdefault(field_name, new_value)
                    del attrs[saved_field_name]

        return changed
