"""Example plugin: heading tag rename for the post grid modules.

Older post grid children saved the title heading as ``title_heading_level``
("1".."6"). The current renderer reads ``title_tag`` ("h1".."h6").

Place migration plugins in a directory listed in MODMIGRATE_PLUGIN_DIRS;
each file defines ``register_migrations(registry)``.
"""

from __future__ import annotations

from modmigrate.definitions import NO_VALUE, SimpleMigration

MODULES = ["disq_post_grid_child", "disq_cpt_grid_child"]


def heading_tag(field_name, current_value, module_type, saved_value, saved_field_name, *rest):
    level = str(current_value).strip()
    if not level:
        return NO_VALUE
    return level if level.startswith("h") else f"h{level}"


def register_migrations(registry):
    registry.register(
        "4.24.1",
        SimpleMigration(
            "4.24.1",
            MODULES,
            {"title_tag": {"title_heading_level": MODULES}},
            transform=heading_tag,
        ),
    )
