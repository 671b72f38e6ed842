"""Migration definitions: versioned field-rename and value-transform rules.

A definition declares which module types it affects, which fields it
renames, and how a field's value is recomputed. Definitions are built once
at process start and registered by value in a VersionRegistry.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Callable, Mapping, Sequence
from typing import Any


class _NoValue:
    """Sentinel returned by a transform to drop an attribute."""

    _instance: _NoValue | None = None

    def __new__(cls) -> _NoValue:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "NO_VALUE"

    def __bool__(self) -> bool:
        return False


NO_VALUE = _NoValue()

# new field name -> {old field name -> module types using that old name}
FieldMap = dict[str, dict[str, list[str]]]

Transform = Callable[..., Any]
BodyTransform = Callable[[str, dict[str, Any], str], str]


class MigrationDefinition(ABC):
    """Base class for a versioned migration.

    Subclasses set ``version`` and implement ``affected_modules``,
    ``field_map`` and ``transform``. Body migrations are optional:
    override ``affected_body_modules`` and ``transform_body``.
    """

    version: str = ""

    # Run the transform even when the old field is absent from the attrs
    add_missing_fields: bool = False

    @abstractmethod
    def affected_modules(self) -> Sequence[str]:
        """Module types this definition applies to."""
        ...

    @abstractmethod
    def field_map(self) -> Mapping[str, Mapping[str, Sequence[str]]]:
        """Fields to migrate.

        Keys are new field names. Each value maps an old field name to the
        module types that saved their value under that old name. An entry
        whose old name equals the new name is a value-only migration.
        """
        ...

    @abstractmethod
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
        """Compute the new value of ``field_name``.

        Args:
            field_name: Field name in the current schema
            current_value: Carried-over value (the old field's value on a rename)
            module_type: Module type being rendered
            saved_value: Value currently saved under ``field_name`` ("" if unset)
            saved_field_name: Field name the value was saved under
            attrs: Attributes as migrated so far
            body: Module body text
            module_address: Location of the module on the page

        Returns:
            The new value, or NO_VALUE to drop the attribute
        """
        ...

    def affected_body_modules(self) -> Sequence[str]:
        """Module types whose body this definition rewrites."""
        return ()

    def transform_body(self, module_type: str, attrs: dict[str, Any], body: str) -> str:
        return body

    def __repr__(self) -> str:
        return f"{type(self).__name__}(version={self.version!r})"


def passthrough(
    field_name: str,
    current_value: Any,
    module_type: str,
    saved_value: Any,
    saved_field_name: str,
    attrs: dict[str, Any],
    body: str,
    module_address: str,
) -> Any:
    """Carry a renamed field's value over unchanged."""
    if saved_field_name != field_name:
        return current_value
    return saved_value


class SimpleMigration(MigrationDefinition):
    """Migration definition assembled from plain values and callables.

    Usage:
        SimpleMigration(
            version="4.30",
            modules=["disq_post_grid_child"],
            fields={"title_tag": {"heading_level": ["disq_post_grid_child"]}},
        )
    """

    def __init__(
        self,
        version: str,
        modules: Sequence[str],
        fields: Mapping[str, Mapping[str, Sequence[str]]],
        transform: Transform | None = None,
        body_modules: Sequence[str] = (),
        transform_body: BodyTransform | None = None,
        add_missing_fields: bool = False,
    ):
        self.version = version
        self.add_missing_fields = add_missing_fields
        self._modules = tuple(modules)
        self._fields = fields  # validated on registration
        self._transform = transform or passthrough
        self._body_modules = tuple(body_modules)
        self._transform_body = transform_body

    def affected_modules(self) -> Sequence[str]:
        return self._modules

    def field_map(self) -> Mapping[str, Mapping[str, Sequence[str]]]:
        return self._fields

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
        return self._transform(
            field_name,
            current_value,
            module_type,
            saved_value,
            saved_field_name,
            attrs,
            body,
            module_address,
        )

    def affected_body_modules(self) -> Sequence[str]:
        return self._body_modules

    def transform_body(self, module_type: str, attrs: dict[str, Any], body: str) -> str:
        if self._transform_body is None:
            return body
        return self._transform_body(module_type, attrs, body)
