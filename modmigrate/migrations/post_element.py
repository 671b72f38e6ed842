"""Post element migration: the "image" element became "featured_image"."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any

from modmigrate.definitions import MigrationDefinition


class PostElementMigration(MigrationDefinition):
    """Rename the post grid "image" element to "featured_image"."""

    version = "4.24"

    def affected_modules(self) -> Sequence[str]:
        return ("disq_post_grid_child", "disq_cpt_grid_child")

    def field_map(self) -> Mapping[str, Mapping[str, Sequence[str]]]:
        return {"element": {"element": list(self.affected_modules())}}

    def transform(
        self,
        field_name: str,
        current_value: Any,
        module_type: str,
        saved_value: Any,
        saved_field_name: str,
        attrs: dict[str, Any],
        body: str,
        module_address: str,
    ) -> Any:
        return "featured_image" if saved_value == "image" else saved_value
