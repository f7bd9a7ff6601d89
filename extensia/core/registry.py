"""
Extensia Registry

Owns every loaded extension and the set of enabled addons, resolves
qualified names, and keeps the key-value store in sync.

Identifiers:
    "name"              -> looked up in the built-in namespace only
    "namespace:name"    -> looked up in that namespace
    anything else       -> resolves to nothing
"""

from __future__ import annotations

import threading
from typing import Callable, Optional, TypeVar

from extensia.core.addon import Addon, ContextLike
from extensia.core.document import Document
from extensia.core.extension import Extension
from extensia.core.state import ENABLED_ADDONS_KEY, EXTENSIONS_KEY, KeyValueStore
from extensia.core.theme import Theme
from extensia.errors import (
    DefaultThemeMissingError,
    DuplicateExtensionError,
    UnresolvedAddonError,
    ValidationError,
)
from extensia.obs import logger
from extensia.settings import Settings, get_settings

T = TypeVar("T")


class Registry:
    """
    Store of all extensions and enabled addons.

    Handles:
    - Registering extensions by namespace
    - Qualified addon/theme lookup
    - Enabling/disabling addons for a page context
    - Persisting extensions and the enabled list

    Every mutation and the write that follows it happen under one lock.
    """

    def __init__(
        self,
        store: KeyValueStore,
        document: Document,
        settings: Optional[Settings] = None,
    ):
        """
        Initialize the registry. Call initialize() to rehydrate from the store.

        Args:
            store: Key-value store for extensions and enabled addons
            document: Page document hooks and themes are injected into
            settings: Runtime settings, defaults to the global settings
        """
        self.store = store
        self.document = document
        self.settings = settings or get_settings()
        self.extensions: list[Extension] = []
        self._enabled_addons: list[str] = []
        self._lock = threading.RLock()

    # --- Persistence ---

    @logger.instrument("Rehydrating extensions from store...")
    def initialize(self) -> None:
        """
        Load stored extensions and the enabled addon list.

        The enabled list is not pruned here; extensions installed after
        initialization may still provide the addons it names.
        """
        with self._lock:
            stored = self.store.get_item(EXTENSIONS_KEY)

            if not isinstance(stored, list):
                logger.info("  No stored extensions, starting empty")
                self.save()
                return

            for data in stored:
                self.load(data)

            enabled = self.store.get_item(ENABLED_ADDONS_KEY)
            self._enabled_addons = [a for a in enabled if isinstance(a, str)] if isinstance(enabled, list) else []

            logger.info(f"  Loaded {len(self.extensions)} extension(s), {len(self._enabled_addons)} enabled addon(s)")

    load_from_store = initialize

    def save(self) -> None:
        """Rewrite both store entries from the in-memory state."""
        with self._lock:
            self.refresh_enabled_addons_list()
            self.store.set_item(EXTENSIONS_KEY, [e.to_dict() for e in self.extensions])
            self.store.set_item(ENABLED_ADDONS_KEY, list(self._enabled_addons))

    # --- Extensions ---

    def register(self, data: dict) -> Extension:
        """
        Register an extension from its manifest.

        Raises:
            DuplicateExtensionError: the namespace is already registered
            ValidationError: the manifest has no meta.namespace
        """
        with self._lock:
            meta = data.get("meta") if isinstance(data, dict) else None
            namespace = meta.get("namespace") if isinstance(meta, dict) else None
            if isinstance(namespace, str) and self.get_extension_by_namespace(namespace) is not None:
                raise DuplicateExtensionError(namespace)

            extension = Extension(data, self.settings)
            self.extensions.append(extension)
            logger.info(f"Registered extension {extension.namespace} ({len(extension.addons)} addons, {len(extension.themes)} themes)")
            return extension

    def load(self, data: dict) -> Optional[Extension]:
        """
        Register an extension from its manifest.

        Returns:
            The new extension, or None if the manifest has no namespace or the
            namespace is already registered
        """
        try:
            return self.register(data)
        except DuplicateExtensionError as e:
            logger.debug(str(e))
        except ValidationError as e:
            logger.warning(f"Rejected extension manifest: {e}")
        return None

    def install(self, data: dict, strict: bool = False) -> Optional[Extension]:
        """
        Register an extension and persist it.

        With strict, a duplicate or invalid manifest raises instead of
        returning None.
        """
        with self._lock:
            extension = self.register(data) if strict else self.load(data)
            if extension is not None:
                self.save()
            return extension

    def get_extension_by_namespace(self, namespace: str) -> Optional[Extension]:
        for extension in self.extensions:
            if extension.namespace == namespace:
                return extension
        return None

    def remove_extension_by_namespace(self, namespace: str, context: ContextLike) -> None:
        """Disable every addon of the extension, then unregister it and persist."""
        with self._lock:
            for extension in self.extensions:
                if extension.namespace != namespace:
                    continue
                for addon in extension.addons:
                    addon.disable(context, self.document)

            before = len(self.extensions)
            self.extensions = [e for e in self.extensions if e.namespace != namespace]
            if len(self.extensions) != before:
                logger.info(f"Removed extension {namespace}")
            self.save()

    # --- Lookup ---

    def _resolve(self, identifier: str, lookup: Callable[[Extension, str], Optional[T]]) -> Optional[T]:
        if not isinstance(identifier, str):
            return None

        parts = identifier.split(":")

        if len(parts) == 1:
            builtin = self.get_extension_by_namespace(self.settings.builtin_namespace)
            return lookup(builtin, identifier) if builtin is not None else None

        if len(parts) != 2:
            return None

        namespace, name = parts
        for extension in self.extensions:
            if extension.namespace != namespace:
                continue
            found = lookup(extension, name)
            if found is not None:
                return found

        return None

    def get_addon_by_name(self, identifier: str) -> Optional[Addon]:
        """Resolve a qualified addon identifier."""
        return self._resolve(identifier, Extension.get_addon_by_name)

    def get_theme_by_name(self, identifier: str) -> Optional[Theme]:
        """Resolve a qualified theme identifier."""
        return self._resolve(identifier, Extension.get_theme_by_name)

    def addons(self) -> list[tuple[str, Addon]]:
        """Every addon with its qualified identifier, in registration order."""
        return [
            (f"{extension.namespace}:{addon.name}", addon)
            for extension in self.extensions
            for addon in extension.addons
        ]

    def themes(self) -> list[Theme]:
        """Every theme of every extension, in registration order."""
        return [theme for extension in self.extensions for theme in extension.themes]

    # --- Enabled addons ---

    @property
    def enabled_addons(self) -> list[str]:
        return list(self._enabled_addons)

    def qualify(self, identifier: str) -> Optional[str]:
        """Canonical "namespace:name" form of an addon identifier, or None if it does not resolve."""
        if self.get_addon_by_name(identifier) is None:
            return None
        if ":" in identifier:
            return identifier
        return f"{self.settings.builtin_namespace}:{identifier}"

    def is_enabled(self, identifier: str) -> bool:
        qualified = self.qualify(identifier)
        return qualified is not None and any(self.qualify(a) == qualified for a in self._enabled_addons)

    def refresh_enabled_addons_list(self) -> None:
        """Rewrite enabled identifiers in canonical form, dropping duplicates and any that no longer resolve."""
        with self._lock:
            kept, dropped = [], []
            for identifier in self._enabled_addons:
                qualified = self.qualify(identifier)
                if qualified is None:
                    dropped.append(identifier)
                elif qualified not in kept:
                    kept.append(qualified)
            if dropped:
                logger.info(f"Pruned stale enabled addons: {', '.join(sorted(set(dropped)))}")
            self._enabled_addons = kept

    def add_addon(self, identifier: str) -> None:
        """Mark an addon as enabled (persisted). Does not inject its hooks."""
        with self._lock:
            qualified = self.qualify(identifier)
            if qualified is not None and not self.is_enabled(qualified):
                self._enabled_addons.append(qualified)
            self.refresh_enabled_addons_list()
            self.save()

    def remove_addon(self, identifier: str) -> None:
        """Mark an addon as disabled (persisted). Does not remove its hooks."""
        with self._lock:
            qualified = self.qualify(identifier) or identifier
            self._enabled_addons = [a for a in self._enabled_addons if (self.qualify(a) or a) != qualified]
            self.refresh_enabled_addons_list()
            self.save()

    def enable_addons(self, context: ContextLike) -> None:
        """
        Enable every addon on the enabled list, in order. An addon listed
        under more than one identifier is enabled once.

        Raises:
            UnresolvedAddonError: an identifier does not resolve (the list was
                not refreshed)
            ScriptingDisabledError: configuration forbids addon scripts
        """
        with self._lock:
            enabled = []
            for identifier in self._enabled_addons:
                addon = self.get_addon_by_name(identifier)
                if addon is None:
                    raise UnresolvedAddonError(identifier)
                if any(addon is a for a in enabled):
                    continue
                addon.enable(context, self.document, self.settings.script_enable)
                enabled.append(addon)

    def disable_addons(self, context: ContextLike) -> None:
        """Unload every enabled addon's hooks, e.g. before leaving a page."""
        with self._lock:
            for identifier in self._enabled_addons:
                addon = self.get_addon_by_name(identifier)
                if addon is not None:
                    addon.disable(context, self.document)

    def enable_addon(self, identifier: str, context: ContextLike) -> Optional[Addon]:
        """
        Inject an addon's hooks and add it to the enabled list.

        Returns:
            The addon, or None if the identifier does not resolve
        """
        with self._lock:
            addon = self.get_addon_by_name(identifier)
            if addon is None:
                return None
            if not self.is_enabled(identifier):
                addon.enable(context, self.document, self.settings.script_enable)
                self.add_addon(identifier)
            return addon

    def disable_addon(self, identifier: str, context: ContextLike) -> Optional[Addon]:
        """
        Remove an addon's hooks and drop it from the enabled list.

        Returns:
            The addon, or None if the identifier does not resolve
        """
        with self._lock:
            addon = self.get_addon_by_name(identifier)
            if addon is None:
                return None
            addon.disable(context, self.document)
            self.remove_addon(identifier)
            return addon

    # --- Themes ---

    def load_theme(self, name: Optional[str] = None) -> Theme:
        """
        Activate a theme, falling back to the default theme.

        Raises:
            DefaultThemeMissingError: neither theme resolves
        """
        default = self.settings.default_theme
        name = name or default

        theme = self.get_theme_by_name(name)
        if theme is None:
            if name != default:
                logger.warning(f"Theme {name} not found, falling back to {default}")
            theme = self.get_theme_by_name(default)
        if theme is None:
            raise DefaultThemeMissingError(name, default)

        theme.load(self.document)
        return theme
