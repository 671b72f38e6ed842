"""Tests for field-rename resolution and skip-descriptor injection."""

from __future__ import annotations

from modmigrate.definitions import SimpleMigration
from modmigrate.ledger import FieldNameChange
from modmigrate.resolver import SKIP_FIELD, FieldRenameResolver, inject_name_migrations
from tests.helpers import MODULE


def test_inject_adds_skip_for_missing_old_names():
    fields = {"new_x": {"type": "text"}}
    renames = {"old_x": FieldNameChange("new_x", "1.0")}

    augmented = inject_name_migrations(fields, renames)

    assert augmented == {"new_x": {"type": "text"}, "old_x": SKIP_FIELD}
    assert fields == {"new_x": {"type": "text"}}


def test_inject_keeps_declared_old_names():
    fields = {"old_x": {"type": "text"}}

    augmented = inject_name_migrations(fields, {"old_x": FieldNameChange("new_x", "1.0")})

    assert augmented["old_x"] == {"type": "text"}


class TestFieldRenameResolver:
    def test_resolve_injects_and_records(self, registry, ledger):
        registry.register("1.0", SimpleMigration("1.0", [MODULE], {"new_x": {"old_x": [MODULE]}}))
        resolver = FieldRenameResolver(registry, ledger)

        fields = resolver.resolve(MODULE, {"new_x": {"type": "text"}})

        assert fields["old_x"] == {"type": "skip"}
        assert ledger.field_name_changes == {MODULE: {"old_x": FieldNameChange("new_x", "1.0")}}

    def test_module_without_renames_unchanged(self, registry, ledger):
        registry.register("1.0", SimpleMigration("1.0", [MODULE], {"new_x": {"old_x": [MODULE]}}))
        resolver = FieldRenameResolver(registry, ledger)

        fields = resolver.resolve("other_module", {"a": {}})

        assert fields == {"a": {}}
        assert ledger.field_name_changes == {}

    def test_identity_rename_ignored(self, registry, ledger):
        registry.register("1.0", SimpleMigration("1.0", [MODULE], {"f": {"f": [MODULE]}}))

        fields = FieldRenameResolver(registry, ledger).resolve(MODULE, {"f": {}})

        assert fields == {"f": {}}

    def test_rename_for_other_module_ignored(self, registry, ledger):
        registry.register(
            "1.0",
            SimpleMigration("1.0", [MODULE, "other"], {"new_x": {"old_x": ["other"]}}),
        )

        fields = FieldRenameResolver(registry, ledger).resolve(MODULE, {})

        assert fields == {}

    def test_memo_computed_once_per_module_type(self, registry, ledger):
        registry.register("1.0", SimpleMigration("1.0", [MODULE], {"new_x": {"old_x": [MODULE]}}))
        resolver = FieldRenameResolver(registry, ledger)

        first = resolver.renames_for(MODULE)
        resolver.resolve(MODULE, {})
        resolver.resolve(MODULE, {})

        assert resolver.renames_for(MODULE) is first

    def test_first_rename_of_old_name_wins(self, registry, ledger):
        registry.register("1.0", SimpleMigration("1.0", [MODULE], {"a": {"old_x": [MODULE]}}))
        registry.register("2.0", SimpleMigration("2.0", [MODULE], {"b": {"old_x": [MODULE]}}))

        FieldRenameResolver(registry, ledger).resolve(MODULE, {})

        assert ledger.field_name_changes[MODULE]["old_x"] == FieldNameChange("a", "1.0")

    def test_excluded_names_injected_but_not_recorded(self, registry, ledger):
        registry.register(
            "1.0",
            SimpleMigration("1.0", [MODULE], {"new_x": {"old_x": [MODULE], "old_y": [MODULE]}}),
        )
        resolver = FieldRenameResolver(registry, ledger, excluded_name_changes=["old_y"])

        fields = resolver.resolve(MODULE, {})

        assert set(fields) == {"old_x", "old_y"}
        assert set(ledger.field_name_changes[MODULE]) == {"old_x"}

    def test_reset_clears_memo(self, registry, ledger):
        registry.register("1.0", SimpleMigration("1.0", [MODULE], {"new_x": {"old_x": [MODULE]}}))
        resolver = FieldRenameResolver(registry, ledger)
        first = resolver.renames_for(MODULE)

        resolver.reset()

        assert resolver.renames_for(MODULE) is not first
