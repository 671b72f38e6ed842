"""Tests for the content (body) migration engine."""

from __future__ import annotations

import pytest

from modmigrate.content import ContentMigrationEngine
from modmigrate.errors import TransformError
from tests.helpers import MODULE, RecordingMigration


@pytest.fixture
def engine(registry, settings) -> ContentMigrationEngine:
    return ContentMigrationEngine(registry, settings.oldest_version, settings.version_attribute)


def body_migration(version, body_modules, body_fn=None) -> RecordingMigration:
    return RecordingMigration(
        version,
        [MODULE],
        {"f": {"f": [MODULE]}},
        body_modules=body_modules,
        body_fn=body_fn,
    )


def test_body_rewritten(registry, engine):
    registry.register(
        "1.0", body_migration("1.0", [MODULE], lambda m, a, b: b.replace("[old]", "[new]"))
    )

    assert engine.migrate(MODULE, {}, "a [old] b") == "a [new] b"


def test_module_not_targeted_untouched(registry, engine):
    migration = body_migration("1.0", ["other"], lambda m, a, b: "changed")
    registry.register("1.0", migration)

    assert engine.migrate(MODULE, {}, "body") == "body"
    assert migration.body_calls == []


def test_transform_runs_once_per_declared_target(registry, engine):
    migration = body_migration("1.0", [MODULE, "other", "third"], lambda m, a, b: b + "!")
    registry.register("1.0", migration)

    assert engine.migrate(MODULE, {}, "hi") == "hi!!!"
    assert len(migration.body_calls) == 3


def test_newer_content_untouched(registry, engine):
    registry.register("1.0", body_migration("1.0", [MODULE], lambda m, a, b: "changed"))

    assert engine.migrate(MODULE, {"_schema_version": "1.0"}, "body") == "body"


def test_later_definition_sees_advanced_stamp(registry, engine):
    registry.register("1.0", body_migration("1.0", [MODULE], lambda m, a, b: b + "1"))
    second = body_migration("2.0", [MODULE])
    registry.register("2.0", second)

    engine.migrate(MODULE, {}, "v")

    assert second.body_calls[0]["_schema_version"] == "1.0"


def test_unchanged_body_does_not_advance_stamp(registry, engine):
    registry.register("1.0", body_migration("1.0", [MODULE]))
    second = body_migration("2.0", [MODULE])
    registry.register("2.0", second)

    engine.migrate(MODULE, {}, "v")

    assert "_schema_version" not in second.body_calls[0]


def test_attrs_not_mutated(registry, engine):
    registry.register("1.0", body_migration("1.0", [MODULE], lambda m, a, b: "x"))
    attrs = {"f": "v"}

    engine.migrate(MODULE, attrs, "body")

    assert attrs == {"f": "v"}


def test_no_shared_memo_with_attribute_lookups(registry, engine):
    registry.register("1.0", body_migration("1.0", [MODULE], lambda m, a, b: "x"))
    registry.get_applicable("0.1")
    memo = registry._by_version["0.1"]

    engine.migrate(MODULE, {}, "body")

    assert registry._by_version == {"0.1": memo}


def test_body_transform_exception_wrapped(registry, engine):
    def boom(module_type, attrs, body):
        raise ValueError("bad body")

    registry.register("1.0", body_migration("1.0", [MODULE], boom))

    with pytest.raises(TransformError):
        engine.migrate(MODULE, {}, "body")
