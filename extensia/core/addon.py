"""
Addons

An addon is a named bundle of hooks: one per page context plus a global hook
loaded on every page.

Manifest format:

    {
        "name": "addon-name",
        "title": "Addon Title",
        "description": "What the addon does",
        "live": {...},          # hook for the live page
        "editor": {...},        # hook for the editor page
        "history": {...},       # hook for the history page
        "settings": {...},      # hook for the settings page
        "global": {...},        # hook for every page
        "requirements": ["namespace:addon-name>=1.0.0"]   # carried, not enforced
    }
"""

from __future__ import annotations

from typing import Optional, Union

from extensia.core.context import PageContext
from extensia.core.document import Document
from extensia.core.hook import Hook, string_list, string_or
from extensia.errors import ScriptingDisabledError, ValidationError
from extensia.obs import logger

ContextLike = Union[PageContext, str, None]


class Addon:
    """A unit of injectable behaviour owned by one extension."""

    def __init__(self, meta: dict, root: str = ""):
        if not isinstance(meta, dict) or not isinstance(meta.get("name"), str):
            raise ValidationError("addon", "name")
        self.root = root
        self.name: str = meta["name"]
        self.title: str = string_or(meta.get("title"), self.name)
        self.description: str = string_or(meta.get("description"))
        requirements = meta.get("requirements")
        if isinstance(requirements, str):
            requirements = [requirements]
        self.requirements: list[str] = string_list(requirements)

        self.hooks: dict[PageContext, Hook] = {
            context: Hook.from_dict(meta.get(context.value), root)
            for context in PageContext
        }
        self.global_hook = Hook.from_dict(meta.get("global"), root)

    def __repr__(self) -> str:
        return f"Addon(name={self.name!r}, root={self.root!r})"

    @property
    def live_hook(self) -> Hook:
        return self.hooks[PageContext.LIVE]

    @property
    def editor_hook(self) -> Hook:
        return self.hooks[PageContext.EDITOR]

    @property
    def history_hook(self) -> Hook:
        return self.hooks[PageContext.HISTORY]

    @property
    def settings_hook(self) -> Hook:
        return self.hooks[PageContext.SETTINGS]

    def hook_of_this_page(self, context: ContextLike) -> Optional[Hook]:
        """Hook for the given page context, or None if the context is unknown."""
        page = PageContext.parse(context)
        if page is None:
            return None
        return self.hooks[page]

    def enable(self, context: ContextLike, document: Document, scripts_enabled: bool) -> None:
        """
        Load the global hook and the hook for the current page.

        Raises:
            ScriptingDisabledError: configuration forbids addon scripts
        """
        if not scripts_enabled:
            raise ScriptingDisabledError(self.name)

        self.global_hook.load(document)

        hook = self.hook_of_this_page(context)
        if hook is not None:
            hook.load(document)

        logger.info(f"Enabled addon {self.name} on page {context}")

    def disable(self, context: ContextLike, document: Document) -> None:
        """Unload the global hook and the hook for the current page."""
        self.global_hook.unload(document)

        hook = self.hook_of_this_page(context)
        if hook is not None:
            hook.unload(document)

        logger.info(f"Disabled addon {self.name} on page {context}")

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "title": self.title,
            "description": self.description,
            "live": self.live_hook.to_dict(),
            "editor": self.editor_hook.to_dict(),
            "history": self.history_hook.to_dict(),
            "settings": self.settings_hook.to_dict(),
            "global": self.global_hook.to_dict(),
            "requirements": list(self.requirements),
        }
