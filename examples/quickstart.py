"""Quickstart: migrate one post grid module through a render pass.

Run from the project root:
    python examples/quickstart.py
"""

from __future__ import annotations

import logging

from modmigrate import MigrationContext, MigrationSettings, RenderLifecycle, default_registry

logging.basicConfig(level=logging.DEBUG, format="%(name)s %(levelname)s %(message)s")

settings = MigrationSettings(plugin_dirs=["plugins"])
registry = default_registry(settings)

lifecycle = RenderLifecycle()
context = MigrationContext(
    registry, lifecycle, lambda: ["disq_post_grid_child", "disq_cpt_grid_child"], settings
)

saved = {"element": "image", "title_heading_level": "3"}

with lifecycle.phase("the_content"):
    fields = context.resolve_fields("disq_post_grid_child", {"element": {}, "title_tag": {}})
    attrs = context.migrate_attrs("disq_post_grid_child", "0.0.1", saved)

print(f"Declared fields: {sorted(fields)}")
print(f"Saved:    {saved}")
print(f"Rendered: {attrs}")
print(f"Renames:  {dict(context.name_changes_for('0.0.1'))}")
