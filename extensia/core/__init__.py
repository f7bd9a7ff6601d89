"""
Extensia core: manifest model, registry and persistence.
"""

from extensia.core.addon import Addon
from extensia.core.context import PageContext
from extensia.core.document import Document, Element, MemoryDocument
from extensia.core.extension import Extension, Loaded, Skipped
from extensia.core.hook import Hook
from extensia.core.registry import Registry
from extensia.core.state import JsonFileStore, KeyValueStore, MemoryStore
from extensia.core.theme import Theme

__all__ = [
    'Addon',
    'Document',
    'Element',
    'Extension',
    'Hook',
    'JsonFileStore',
    'KeyValueStore',
    'Loaded',
    'MemoryDocument',
    'MemoryStore',
    'PageContext',
    'Registry',
    'Skipped',
    'Theme',
]
