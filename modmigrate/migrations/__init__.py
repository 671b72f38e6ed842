"""Built-in migration definitions, keyed by the version they introduce."""

from __future__ import annotations

from modmigrate.definitions import MigrationDefinition
from modmigrate.migrations.post_element import PostElementMigration


def builtin_migrations() -> list[MigrationDefinition]:
    """Fresh instances of every built-in definition, oldest first."""
    return [PostElementMigration()]


__all__ = ["PostElementMigration", "builtin_migrations"]
