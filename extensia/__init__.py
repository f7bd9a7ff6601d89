"""
Extensia

Registry for optional extension packages: addons that inject scripts and
styles per page, and themes that swap the page stylesheet.
"""

from extensia.core import (
    Addon,
    Extension,
    Hook,
    MemoryDocument,
    MemoryStore,
    PageContext,
    Registry,
    Theme,
)
from extensia.errors import (
    DefaultThemeMissingError,
    DuplicateExtensionError,
    ExtensiaError,
    ScriptingDisabledError,
    UnresolvedAddonError,
    ValidationError,
)
from extensia.version import __version__

__all__ = [
    'Addon',
    'DefaultThemeMissingError',
    'DuplicateExtensionError',
    'ExtensiaError',
    'Extension',
    'Hook',
    'MemoryDocument',
    'MemoryStore',
    'PageContext',
    'Registry',
    'ScriptingDisabledError',
    'Theme',
    'UnresolvedAddonError',
    'ValidationError',
    '__version__',
]
