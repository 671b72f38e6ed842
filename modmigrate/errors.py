"""Structured error hierarchy for modmigrate."""


class MigrationError(Exception):
    """Base for all modmigrate errors."""

    pass


class RegistrationError(MigrationError):
    """A migration definition was rejected at registration time."""

    pass


class RegistryFrozenError(MigrationError):
    """Registry mutated after rendering began."""

    pass


class TransformError(MigrationError):
    """A migration definition's transform raised."""

    def __init__(self, version: str, module_type: str, field_name: str):
        self.version = version
        self.module_type = module_type
        self.field_name = field_name
        super().__init__(
            f"Migration {version} failed on field '{field_name}' of module '{module_type}'"
        )
