"""Loader for migration definitions shipped outside this package.

Scans plugin directories for Python files. Each file exposes a
``register_migrations(registry)`` function that registers its definitions:

    from modmigrate.definitions import SimpleMigration

    def register_migrations(registry):
        registry.register("4.24.1", SimpleMigration("4.24.1", [...], {...}))

Plugins must load before rendering begins; the registry is frozen once
the first MigrationContext is created.
"""

from __future__ import annotations

import importlib.util
import logging
import sys
from pathlib import Path
from typing import Any

from modmigrate.config import MigrationSettings
from modmigrate.errors import RegistryFrozenError
from modmigrate.migrations import builtin_migrations
from modmigrate.registry import VersionRegistry

logger = logging.getLogger(__name__)

REGISTER_HOOK = "register_migrations"


class DefinitionLoader:
    """Discover and load migration definitions from directories."""

    @classmethod
    def load_all(cls, registry: VersionRegistry, plugin_dirs: list[str]) -> dict[str, Any]:
        """Load definitions from every plugin directory.

        Args:
            registry: Registry to register definitions in
            plugin_dirs: Directory paths to scan

        Returns:
            Dict with the number of loaded definitions and error messages

        Raises:
            RegistryFrozenError: If rendering has already begun
        """
        if registry.frozen:
            raise RegistryFrozenError("Cannot load migration plugins after rendering began")

        stats: dict[str, Any] = {"definitions": 0, "errors": []}

        for dir_path in plugin_dirs:
            path = Path(dir_path)
            if not path.exists():
                logger.warning(f"Plugin directory not found: {dir_path}")
                continue

            if not path.is_dir():
                logger.warning(f"Plugin path is not a directory: {dir_path}")
                continue

            loaded = cls.load_from_directory(registry, str(path))
            stats["definitions"] += loaded["definitions"]
            stats["errors"].extend(loaded["errors"])

        logger.info(f"Loaded {stats['definitions']} migration definitions")
        return stats

    @classmethod
    def load_from_directory(cls, registry: VersionRegistry, directory: str) -> dict[str, Any]:
        """Load all plugin files in one directory."""
        stats: dict[str, Any] = {"definitions": 0, "errors": []}

        # All .py files except __init__.py and _private modules, in a stable order
        py_files = sorted(f for f in Path(directory).glob("*.py") if not f.name.startswith("_"))

        logger.debug(f"Found {len(py_files)} plugin files in {directory}")

        for py_file in py_files:
            before = len(registry)
            try:
                cls.load_plugin_file(registry, str(py_file))
            except RegistryFrozenError:
                raise
            except Exception as e:
                error_msg = f"Failed to load {py_file.name}: {e}"
                logger.error(error_msg)
                stats["errors"].append(error_msg)
            stats["definitions"] += len(registry) - before

        return stats

    @classmethod
    def load_plugin_file(cls, registry: VersionRegistry, file_path: str) -> None:
        """Execute one plugin file and call its registration hook.

        Raises:
            FileNotFoundError: If the file does not exist
            ValueError: If the path is not a Python file
            ImportError: If the file cannot be loaded or has no hook
        """
        path = Path(file_path)
        if not path.exists():
            raise FileNotFoundError(f"Plugin file not found: {file_path}")

        if not path.is_file() or path.suffix != ".py":
            raise ValueError(f"Not a Python file: {file_path}")

        module_name = f"modmigrate_plugin_{path.stem}"
        spec = importlib.util.spec_from_file_location(module_name, path)
        if spec is None or spec.loader is None:
            raise ImportError(f"Cannot load spec for {file_path}")

        module = importlib.util.module_from_spec(spec)
        sys.modules[module_name] = module
        spec.loader.exec_module(module)

        hook = getattr(module, REGISTER_HOOK, None)
        if not callable(hook):
            raise ImportError(f"Plugin {path.name} defines no {REGISTER_HOOK}() function")

        hook(registry)
        logger.debug(f"Loaded plugin: {path.name}")


def default_registry(settings: MigrationSettings | None = None) -> VersionRegistry:
    """Registry holding the built-in definitions plus configured plugins."""
    settings = settings or MigrationSettings()
    registry = VersionRegistry(settings.max_version)
    registry.register_all(builtin_migrations())
    if settings.plugin_dirs:
        DefinitionLoader.load_all(registry, settings.plugin_dirs)
    return registry
