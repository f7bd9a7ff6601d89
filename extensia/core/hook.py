"""
Addon Hooks

A hook is the set of stylesheets and scripts an addon injects into one page
context (or into every page, for the global hook).

Manifest format:

    {
        "styles": ["style.css"],
        "scripts": ["script.js"]
    }
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Optional

from extensia.core.document import Document, Element
from extensia.obs import logger


def string_list(value: Any) -> list[str]:
    if not isinstance(value, (list, tuple)):
        return []
    return [item for item in value if isinstance(item, str)]


def string_or(value: Any, default: str = "") -> str:
    """The value if it is a non-empty string, else the default."""
    return value if isinstance(value, str) and value else default


@dataclass
class Hook:
    """Style and script resources for one page context."""

    styles: list[str] = field(default_factory=list)
    scripts: list[str] = field(default_factory=list)
    root: str = ""

    # Elements currently attached to the document by this hook
    loaded_elements: list[Element] = field(default_factory=list, repr=False, compare=False)

    def load(self, document: Document) -> None:
        """Inject every stylesheet, then every script, into the document."""
        for style in self.styles:
            self.loaded_elements.append(document.add_stylesheet(self.root + style))
        for script in self.scripts:
            self.loaded_elements.append(document.add_script(self.root + script))

        if self.loaded_elements:
            logger.debug(f"  Hook under {self.root!r} injected {len(self.loaded_elements)} element(s)")

    def unload(self, document: Document) -> None:
        """
        Remove every element this hook injected.

        Not guaranteed to undo everything: a script that already ran may have
        changed the page in ways removing its element does not revert.
        """
        for element in self.loaded_elements:
            document.remove(element)
        self.loaded_elements = []

    @property
    def is_empty(self) -> bool:
        return not self.styles and not self.scripts

    def to_dict(self) -> dict:
        return {
            "styles": list(self.styles),
            "scripts": list(self.scripts),
        }

    @classmethod
    def from_dict(cls, data: Optional[dict], root: str = "") -> Hook:
        if not isinstance(data, dict):
            return cls(root=root)
        return cls(
            styles=string_list(data.get("styles")),
            scripts=string_list(data.get("scripts")),
            root=root,
        )
