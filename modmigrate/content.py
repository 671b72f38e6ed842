"""Content migration engine: rewrite a module's free-text body.

Body migrations are rare, so nothing here is cached; every call selects
its definitions afresh.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from modmigrate.errors import TransformError
from modmigrate.registry import VersionRegistry

logger = logging.getLogger(__name__)


class ContentMigrationEngine:
    """Apply body transforms of definitions newer than the declared version."""

    def __init__(self, registry: VersionRegistry, oldest_version: str, version_attribute: str):
        self.registry = registry
        self.oldest_version = oldest_version
        self.version_attribute = version_attribute

    def migrate(self, module_type: str, attrs: Mapping[str, Any], body: str) -> str:
        """Migrate one module instance's body.

        Args:
            module_type: Module type being rendered
            attrs: Module attributes (not modified)
            body: Body text as saved

        Returns:
            The migrated body
        """
        stamped = dict(attrs)
        declared = str(stamped.get(self.version_attribute) or "") or self.oldest_version

        for definition in self.registry.select(declared):
            targets = list(definition.affected_body_modules())
            if module_type not in targets:
                continue

            migrated = False
            # One transform call per declared target, even when only one matched
            for _target in targets:
                try:
                    new_body = definition.transform_body(module_type, stamped, body)
                except Exception as e:
                    raise TransformError(definition.version, module_type, "<body>") from e
                if new_body != body:
                    body = new_body
                    migrated = True

            if migrated:
                stamped[self.version_attribute] = definition.version
                logger.debug(f"Applied body migration {definition.version} to {module_type}")

        return body
