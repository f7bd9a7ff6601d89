"""
Themes

A theme is a single stylesheet. Only one theme is active at a time: loading
a theme retargets the page's shared theme link.

Manifest format:

    {
        "name": "theme-name",
        "title": "Theme Title",
        "description": "What the theme looks like",
        "style": "style.css"
    }
"""

from __future__ import annotations

from dataclasses import dataclass

from extensia.core.document import Document
from extensia.core.hook import string_or
from extensia.errors import ValidationError
from extensia.obs import logger


@dataclass
class Theme:
    """A named stylesheet variant."""

    name: str
    style: str
    title: str = ""
    description: str = ""
    root: str = ""

    def __post_init__(self):
        if not self.title:
            self.title = self.name

    @property
    def href(self) -> str:
        return self.root + self.style

    def load(self, document: Document) -> None:
        """Make this theme the active one."""
        document.set_theme(self.href)
        logger.info(f"Loaded theme {self.name} from {self.href}")

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "title": self.title,
            "description": self.description,
            "style": self.style,
        }

    @classmethod
    def from_dict(cls, data: dict, root: str = "") -> Theme:
        if not isinstance(data, dict) or not isinstance(data.get("name"), str):
            raise ValidationError("theme", "name")
        if not isinstance(data.get("style"), str):
            raise ValidationError("theme", "style", f"theme '{data['name']}'")

        return cls(
            name=data["name"],
            style=data["style"],
            title=string_or(data.get("title")),
            description=string_or(data.get("description")),
            root=root,
        )
