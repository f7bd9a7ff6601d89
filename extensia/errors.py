"""
Extensia error types.

Lookups never raise: a missing addon, theme or extension is returned as None.
"""


class ExtensiaError(Exception):
    """Base class for all extensia errors."""


class ValidationError(ExtensiaError, ValueError):
    """A manifest entry is missing a required identity field."""

    def __init__(self, kind: str, field: str, detail: str = ""):
        self.kind = kind
        self.field = field
        message = f"{kind} is missing required field '{field}'"
        if detail:
            message = f"{message}: {detail}"
        super().__init__(message)


class ScriptingDisabledError(ExtensiaError, PermissionError):
    """Addon scripts are disabled by configuration."""

    def __init__(self, addon_name: str = ""):
        self.addon_name = addon_name
        target = f"addon '{addon_name}'" if addon_name else "addons"
        super().__init__(f"Cannot enable {target}: external scripts are disabled in configuration")


class UnresolvedAddonError(ExtensiaError, LookupError):
    """An enabled addon identifier no longer resolves to an addon."""

    def __init__(self, identifier: str):
        self.identifier = identifier
        super().__init__(f"Enabled addon '{identifier}' does not resolve; refresh the enabled list first")


class DefaultThemeMissingError(ExtensiaError, LookupError):
    """Neither the requested theme nor the default theme is registered."""

    def __init__(self, requested: str, default: str):
        self.requested = requested
        self.default = default
        super().__init__(f"Theme '{requested}' not found and default theme '{default}' is not registered")


class DuplicateExtensionError(ExtensiaError, ValueError):
    """An extension with the same namespace is already registered."""

    def __init__(self, namespace: str):
        self.namespace = namespace
        super().__init__(f"Extension '{namespace}' already installed")
