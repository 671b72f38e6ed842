"""Binding the migration entry points into a renderer's filter chains.

The renderer passes values through named filter chains while it builds a
module. Three chains carry migration work:

- ``module_processed_fields``: ``(fields, module_type) -> fields``
- ``module_shortcode_attributes``:
  ``(attrs, unprocessed_attrs, module_type, module_address, body, global_presets) -> attrs``
- ``module_content``: ``(body, attrs, unprocessed_attrs, module_type) -> body``

Usage:
    filters = RenderFilters()
    context = MigrationContext(registry, lifecycle, known_module_types)
    binding = install(filters, context)
    attrs = filters.apply("module_shortcode_attributes", attrs, raw, "disq_post_grid_child", "0.1")
    tear_down(filters, binding)
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any

from modmigrate.context import MigrationContext

logger = logging.getLogger(__name__)

PROCESSED_FIELDS = "module_processed_fields"
SHORTCODE_ATTRIBUTES = "module_shortcode_attributes"
MODULE_CONTENT = "module_content"

DEFAULT_PRIORITY = 10


class RenderFilters:
    """Named chains of value filters, run in priority order."""

    def __init__(self):
        self._filters: dict[str, list[tuple[int, int, Callable]]] = {}
        self._sequence = 0

    def add_filter(self, name: str, callback: Callable, priority: int = DEFAULT_PRIORITY) -> None:
        self._sequence += 1
        chain = self._filters.setdefault(name, [])
        chain.append((priority, self._sequence, callback))
        chain.sort(key=lambda entry: (entry[0], entry[1]))
        logger.debug(f"Added filter to {name} at priority {priority}")

    def remove_filter(self, name: str, callback: Callable) -> bool:
        """Remove a callback from a chain. Returns whether it was present."""
        chain = self._filters.get(name, [])
        kept = [entry for entry in chain if entry[2] != callback]
        removed = len(kept) != len(chain)
        if kept:
            self._filters[name] = kept
        else:
            self._filters.pop(name, None)
        return removed

    def has_filter(self, name: str, callback: Callable | None = None) -> bool:
        chain = self._filters.get(name, [])
        if callback is None:
            return bool(chain)
        return any(entry[2] == callback for entry in chain)

    def apply(self, name: str, value: Any, *args: Any) -> Any:
        """Pass ``value`` through every callback of a chain."""
        for _priority, _seq, callback in self._filters.get(name, []):
            value = callback(value, *args)
        return value


class MigrationFilters:
    """Filter callbacks routing the renderer's chains into a context."""

    def __init__(self, context: MigrationContext):
        self.context = context

    def on_processed_fields(self, fields: dict[str, Any], module_type: str) -> dict[str, Any]:
        return self.context.resolve_fields(module_type, fields)

    def on_shortcode_attributes(
        self,
        attrs: dict[str, Any],
        unprocessed_attrs: dict[str, Any],
        module_type: str,
        module_address: str,
        body: str = "",
        global_presets: bool = False,
    ) -> dict[str, Any]:
        return self.context.migrate_attrs(
            module_type,
            module_address,
            attrs,
            body,
            unprocessed_attrs=unprocessed_attrs,
            global_presets=global_presets,
        )

    def on_module_content(
        self, body: str, attrs: dict[str, Any], unprocessed_attrs: dict[str, Any], module_type: str
    ) -> str:
        return self.context.migrate_content(module_type, attrs, body)

    def bindings(self) -> list[tuple[str, Callable]]:
        return [
            (PROCESSED_FIELDS, self.on_processed_fields),
            (SHORTCODE_ATTRIBUTES, self.on_shortcode_attributes),
            (MODULE_CONTENT, self.on_module_content),
        ]


def install(filters: RenderFilters, context: MigrationContext) -> MigrationFilters:
    """Hook a context's entry points into the renderer's filter chains."""
    binding = MigrationFilters(context)
    for name, callback in binding.bindings():
        filters.add_filter(name, callback)
    logger.debug("Installed migration filters")
    return binding


def tear_down(filters: RenderFilters, binding: MigrationFilters) -> None:
    """Remove filters added by install. Used between tests."""
    for name, callback in binding.bindings():
        filters.remove_filter(name, callback)
    logger.debug("Removed migration filters")
