"""Configuration settings for the migration engine.

Uses Pydantic Settings for validation and environment variable support.
All settings can be overridden via MODMIGRATE_* environment variables.
"""

from pydantic import Field
from pydantic_settings import BaseSettings


class MigrationSettings(BaseSettings):
    """Global configuration for render-time attribute migrations."""

    # Versions
    oldest_version: str = "3.0.47"  # assumed when content declares no version
    max_version: str = "4.24.1"  # content at or above this is never migrated
    version_attribute: str = "_schema_version"

    # Render-pass gate: phases checked for re-entrant firing
    watched_phases: list[str] = Field(
        default=[
            "the_content",
            "admin_enqueue_scripts",
            "et_pb_get_backbone_templates",
            "wp_ajax_et_pb_execute_content_shortcodes",
            "wp_ajax_et_fb_get_saved_layouts",
            "wp_ajax_et_fb_retrieve_builder_data",
        ]
    )

    # Old field names never reported to the legacy builder UI
    excluded_name_changes: list[str] = Field(default_factory=list)

    # Extra definitions
    plugin_dirs: list[str] = Field(default_factory=list)

    # Re-raise transform failures instead of rendering unmigrated attrs
    strict: bool = False

    model_config = {"env_prefix": "MODMIGRATE_"}
