"""Field-rename resolution for the renderer's field declarations.

When a migration renames a field, the current schema no longer declares the
old name, so the renderer would discard its saved value before the
attribute engine can carry it over. The resolver adds a pass-through
descriptor for every old name a module type may still have saved.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from typing import Any

from modmigrate.ledger import FieldNameChange, MigrationLedger
from modmigrate.registry import ALL_VERSIONS, VersionRegistry

logger = logging.getLogger(__name__)

SKIP_FIELD: dict[str, str] = {"type": "skip"}


def inject_name_migrations(
    fields: Mapping[str, Any], renames: Mapping[str, FieldNameChange]
) -> dict[str, Any]:
    """Add a skip descriptor for each old field name missing from ``fields``."""
    augmented = dict(fields)
    for old_name in renames:
        if old_name not in augmented:
            augmented[old_name] = dict(SKIP_FIELD)
    return augmented


class FieldRenameResolver:
    """Per-module-type memo of the renames contributed by all definitions."""

    def __init__(
        self,
        registry: VersionRegistry,
        ledger: MigrationLedger,
        excluded_name_changes: Iterable[str] = (),
    ):
        self.registry = registry
        self.ledger = ledger
        self.excluded_name_changes = frozenset(excluded_name_changes)
        self._renames: dict[str, dict[str, FieldNameChange]] = {}

    def resolve(self, module_type: str, fields: Mapping[str, Any]) -> dict[str, Any]:
        """Augment a module type's field declarations with legacy names.

        Args:
            module_type: Module type whose fields are being processed
            fields: Field descriptors of the current schema

        Returns:
            The descriptors, plus a skip descriptor per missing old name
        """
        renames = self.renames_for(module_type)
        if not renames:
            return dict(fields)
        return inject_name_migrations(fields, renames)

    def renames_for(self, module_type: str) -> dict[str, FieldNameChange]:
        """Old name -> rename for a module type, computed once."""
        if module_type in self._renames:
            return self._renames[module_type]

        renames: dict[str, FieldNameChange] = {}
        for definition in self.registry.get_applicable(ALL_VERSIONS):
            if module_type not in definition.affected_modules():
                continue

            for new_name, affected in definition.field_map().items():
                for old_name, modules in affected.items():
                    if old_name == new_name or module_type not in modules:
                        continue
                    if old_name not in renames:
                        renames[old_name] = FieldNameChange(new_name, definition.version)

        for old_name, change in renames.items():
            if old_name in self.excluded_name_changes:
                continue
            self.ledger.record_field_name_change(
                module_type, old_name, change.new_name, change.version
            )

        if renames:
            logger.debug(f"Resolved {len(renames)} renamed fields for {module_type}")

        self._renames[module_type] = renames
        return renames

    def reset(self) -> None:
        self._renames.clear()
