"""Shared test doubles for modmigrate test suites.

Recording definitions capture every transform call so tests can assert on
the arguments the engines pass in.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any

from modmigrate.definitions import MigrationDefinition

MODULE = "M"


@dataclass
class TransformCall:
    """Arguments of one transform invocation."""

    field_name: str
    current_value: Any
    module_type: str
    saved_value: Any
    saved_field_name: str
    attrs: dict[str, Any]
    body: str
    module_address: str


class RecordingMigration(MigrationDefinition):
    """Definition whose transform is a callable, recording each call."""

    def __init__(
        self,
        version: str,
        modules: Sequence[str],
        fields: Mapping[str, Mapping[str, Sequence[str]]],
        fn: Callable[[TransformCall], Any] | None = None,
        add_missing_fields: bool = False,
        body_modules: Sequence[str] = (),
        body_fn: Callable[[str, dict[str, Any], str], str] | None = None,
    ):
        self.version = version
        self.add_missing_fields = add_missing_fields
        self._modules = tuple(modules)
        self._fields = fields
        self._fn = fn or (lambda call: call.saved_value)
        self._body_modules = tuple(body_modules)
        self._body_fn = body_fn
        self.calls: list[TransformCall] = []
        self.body_calls: list[dict[str, Any]] = []

    def affected_modules(self) -> Sequence[str]:
        return self._modules

    def field_map(self) -> Mapping[str, Mapping[str, Sequence[str]]]:
        return self._fields

    def transform(self, field_name, current_value, module_type, saved_value,
                  saved_field_name, attrs, body, module_address) -> Any:
        call = TransformCall(
            field_name=field_name,
            current_value=current_value,
            module_type=module_type,
            saved_value=saved_value,
            saved_field_name=saved_field_name,
            attrs=dict(attrs),
            body=body,
            module_address=module_address,
        )
        self.calls.append(call)
        return self._fn(call)

    def affected_body_modules(self) -> Sequence[str]:
        return self._body_modules

    def transform_body(self, module_type: str, attrs: dict[str, Any], body: str) -> str:
        self.body_calls.append(dict(attrs))
        if self._body_fn is None:
            return body
        return self._body_fn(module_type, attrs, body)


@dataclass
class CountingModuleTypes:
    """Known-module-types collaborator that counts lookups."""

    types: list[str] = field(default_factory=list)
    lookups: int = 0

    def __call__(self) -> list[str]:
        self.lookups += 1
        return list(self.types)
