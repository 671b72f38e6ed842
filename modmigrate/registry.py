"""Version registry: ordered association of schema versions to definitions.

Definitions are registered once at process start. Lookups are memoized per
declared version string because the same version recurs across many module
instances on one page.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable

from pydantic import TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from modmigrate.definitions import FieldMap, MigrationDefinition
from modmigrate.errors import RegistrationError, RegistryFrozenError
from modmigrate.versions import is_valid_version, parse_version, version_gte

logger = logging.getLogger(__name__)

ALL_VERSIONS = "all"

_FIELD_MAP_ADAPTER: TypeAdapter[FieldMap] = TypeAdapter(FieldMap)


class VersionRegistry:
    """Registered migration definitions keyed by version."""

    def __init__(self, max_version: str = "4.24.1"):
        if not is_valid_version(max_version):
            raise RegistrationError(f"Invalid max version '{max_version}'")
        self.max_version = max_version
        self._definitions: dict[str, MigrationDefinition] = {}
        self._by_version: dict[str, tuple[MigrationDefinition, ...]] = {}
        self._frozen = False

    @property
    def frozen(self) -> bool:
        return self._frozen

    def register(self, version: str, definition: MigrationDefinition) -> None:
        """Register a definition under its version.

        Args:
            version: Schema version the definition introduces
            definition: The definition; its ``version`` must match

        Raises:
            RegistryFrozenError: If rendering has already begun
            RegistrationError: If the definition is misconfigured
        """
        if self._frozen:
            raise RegistryFrozenError(
                f"Cannot register migration {version}: registry is frozen"
            )
        if not is_valid_version(version):
            raise RegistrationError(f"Invalid migration version '{version}'")
        if definition.version != version:
            raise RegistrationError(
                f"Migration {definition!r} registered under mismatched version '{version}'"
            )
        if version in self._definitions:
            raise RegistrationError(f"Migration version '{version}' already registered")
        if parse_version(version) > parse_version(self.max_version):
            raise RegistrationError(
                f"Migration version '{version}' exceeds max version '{self.max_version}'"
            )
        if not definition.affected_modules():
            raise RegistrationError(f"Migration {version} affects no modules")

        try:
            _FIELD_MAP_ADAPTER.validate_python(dict(definition.field_map()))
        except (PydanticValidationError, TypeError, ValueError) as e:
            raise RegistrationError(f"Migration {version} has a malformed field map: {e}") from e

        self._definitions[version] = definition
        self._by_version.clear()
        logger.debug(f"Registered migration: {version} ({type(definition).__name__})")

    def register_all(self, definitions: Iterable[MigrationDefinition]) -> None:
        for definition in definitions:
            self.register(definition.version, definition)

    def freeze(self) -> None:
        """Reject further registrations. Called when rendering begins."""
        self._frozen = True

    def get_applicable(self, declared_version: str) -> tuple[MigrationDefinition, ...]:
        """Get definitions to apply to content at ``declared_version``.

        Args:
            declared_version: Version saved on the content, or ALL_VERSIONS

        Returns:
            Every definition for ALL_VERSIONS, otherwise the strictly newer
            definitions in ascending version order. The tuple is shared by
            every caller asking for the same version.
        """
        if declared_version in self._by_version:
            return self._by_version[declared_version]

        selected = tuple(self.select(declared_version))
        self._by_version[declared_version] = selected
        return selected

    def select(self, declared_version: str) -> list[MigrationDefinition]:
        """Same selection as get_applicable, bypassing the memo."""
        if declared_version == ALL_VERSIONS:
            return list(self._definitions.values())

        if version_gte(declared_version, self.max_version):
            return []

        declared = parse_version(declared_version)
        newer = [
            definition
            for version, definition in self._definitions.items()
            if parse_version(version) > declared
        ]
        return sorted(newer, key=lambda d: parse_version(d.version))

    def scoped(self) -> VersionRegistry:
        """Frozen copy sharing the definitions with a fresh lookup memo.

        Each render job gets its own copy so lookup caches are never shared
        between concurrent renders.
        """
        copy = VersionRegistry(self.max_version)
        copy._definitions = dict(self._definitions)
        copy._frozen = True
        return copy

    def __len__(self) -> int:
        return len(self._definitions)

    def __contains__(self, version: object) -> bool:
        return version in self._definitions

    def clear(self) -> None:
        """Clear all registrations. Useful for testing."""
        self._definitions.clear()
        self._by_version.clear()
        self._frozen = False
        logger.debug("Cleared all migration registrations")
