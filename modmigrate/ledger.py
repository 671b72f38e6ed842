"""Migration ledger: renames and value changes applied during one render job.

The legacy builder UI reads ``name_changes`` to find out which saved field
names were remapped for a module address.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any


@dataclass(frozen=True)
class FieldNameChange:
    """A field rename declared by a migration."""

    new_name: str
    version: str


@dataclass
class MigrationLedger:
    """Memoized record of renames and value changes.

    - field_name_changes: module type -> old name -> FieldNameChange
    - name_changes: module address -> old name -> new name
    - value_changes: module address -> field name -> migrated value
    """

    field_name_changes: dict[str, dict[str, FieldNameChange]] = field(default_factory=dict)
    name_changes: dict[str, dict[str, str]] = field(default_factory=dict)
    value_changes: dict[str, dict[str, Any]] = field(default_factory=dict)

    def record_field_name_change(
        self, module_type: str, old_name: str, new_name: str, version: str
    ) -> None:
        """Record a rename for a module type. First recording wins."""
        renames = self.field_name_changes.setdefault(module_type, {})
        renames.setdefault(old_name, FieldNameChange(new_name=new_name, version=version))

    def record_name_change(self, module_address: str, old_name: str, new_name: str) -> None:
        self.name_changes.setdefault(module_address, {})[old_name] = new_name

    def record_value_change(self, module_address: str, field_name: str, value: Any) -> None:
        self.value_changes.setdefault(module_address, {})[field_name] = value

    def merge(self, other: MigrationLedger) -> None:
        """Fold another ledger's records into this one."""
        for module_type, renames in other.field_name_changes.items():
            for old_name, change in renames.items():
                self.record_field_name_change(
                    module_type, old_name, change.new_name, change.version
                )
        for module_address, names in other.name_changes.items():
            self.name_changes.setdefault(module_address, {}).update(names)
        for module_address, values in other.value_changes.items():
            self.value_changes.setdefault(module_address, {}).update(values)

    def renames_for(self, module_type: str) -> dict[str, FieldNameChange]:
        return self.field_name_changes.get(module_type, {})

    def name_changes_for(self, module_address: str) -> MappingProxyType[str, str]:
        """Read-only view of the renames applied to one module instance."""
        return MappingProxyType(self.name_changes.get(module_address, {}))

    def to_dict(self) -> dict[str, Any]:
        return {
            "field_name_changes": {
                module_type: {
                    old: {"new_name": change.new_name, "version": change.version}
                    for old, change in renames.items()
                }
                for module_type, renames in self.field_name_changes.items()
            },
            "name_changes": {addr: dict(names) for addr, names in self.name_changes.items()},
            "value_changes": {addr: dict(vals) for addr, vals in self.value_changes.items()},
        }

    def reset(self) -> None:
        """Clear every recorded change."""
        self.field_name_changes.clear()
        self.name_changes.clear()
        self.value_changes.clear()
