"""
Extensions

An extension is the unit of installation: a namespace plus the addons and
themes it ships. Names inside an extension only mean something once they are
qualified with the namespace ("namespace:name").

Manifest format:

    {
        "meta": {
            "namespace": "extension-namespace",
            "author": "Extension Author",
            "version": "0.0.1",
            "url": "..."            # may be empty
        },
        "addons": [ ... ],
        "themes": [ ... ]
    }

Broken addon or theme entries do not fail the whole extension. Each entry
is recorded in ``Extension.report`` as either Loaded or Skipped.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Union

from extensia.core.addon import Addon
from extensia.core.hook import string_or
from extensia.core.theme import Theme
from extensia.errors import ValidationError
from extensia.obs import logger
from extensia.settings import Settings, get_settings


@dataclass(frozen=True)
class Loaded:
    kind: str
    index: int
    entity: Union[Addon, Theme]


@dataclass(frozen=True)
class Skipped:
    kind: str
    index: int
    reason: str


EntryResult = Union[Loaded, Skipped]


class Extension:
    """A namespace-scoped bundle of addons and themes."""

    def __init__(self, data: dict, settings: Optional[Settings] = None):
        settings = settings or get_settings()

        if not isinstance(data, dict) or not isinstance(data.get("meta"), dict):
            raise ValidationError("extension", "meta")
        meta = data["meta"]
        if not isinstance(meta.get("namespace"), str):
            raise ValidationError("extension", "meta.namespace")

        self.namespace: str = meta["namespace"]
        self.author: str = string_or(meta.get("author"))
        self.version: str = string_or(meta.get("version"))
        self.url: str = string_or(meta.get("url"))

        self.addon_root = settings.addon_root_for(self.namespace)
        self.theme_root = settings.theme_root_for(self.namespace)

        self.addons: list[Addon] = []
        self.themes: list[Theme] = []
        self.report: list[EntryResult] = []

        for index, entry in enumerate(_entries(data.get("addons"))):
            self._record(self._build_addon(index, entry))

        for index, entry in enumerate(_entries(data.get("themes"))):
            self._record(self._build_theme(index, entry))

    @classmethod
    def from_manifest(cls, data: dict, settings: Optional[Settings] = None) -> Extension:
        return cls(data, settings)

    def __repr__(self) -> str:
        return f"Extension(namespace={self.namespace!r}, addons={len(self.addons)}, themes={len(self.themes)})"

    def _build_addon(self, index: int, entry) -> EntryResult:
        if not isinstance(entry, dict):
            return Skipped("addon", index, f"expected an object, got {type(entry).__name__}")
        try:
            return Loaded("addon", index, Addon(entry, self.addon_root))
        except ValidationError as e:
            return Skipped("addon", index, str(e))

    def _build_theme(self, index: int, entry) -> EntryResult:
        if not isinstance(entry, dict):
            return Skipped("theme", index, f"expected an object, got {type(entry).__name__}")
        try:
            return Loaded("theme", index, Theme.from_dict(entry, self.theme_root))
        except ValidationError as e:
            return Skipped("theme", index, str(e))

    def _record(self, result: EntryResult) -> None:
        self.report.append(result)

        if isinstance(result, Skipped):
            logger.warning(f"  Skipped {result.kind} #{result.index} in {self.namespace}: {result.reason}")
        elif result.kind == "addon":
            self.addons.append(result.entity)
        else:
            self.themes.append(result.entity)

    @property
    def skipped(self) -> list[Skipped]:
        return [r for r in self.report if isinstance(r, Skipped)]

    def get_addon_by_name(self, name: str) -> Optional[Addon]:
        """Find an addon in this extension by its unqualified name."""
        for addon in self.addons:
            if addon.name == name:
                return addon
        return None

    def get_theme_by_name(self, name: str) -> Optional[Theme]:
        """Find a theme in this extension by its unqualified name."""
        for theme in self.themes:
            if theme.name == name:
                return theme
        return None

    def to_dict(self) -> dict:
        return {
            "meta": {
                "namespace": self.namespace,
                "author": self.author,
                "version": self.version,
                "url": self.url,
            },
            "addons": [addon.to_dict() for addon in self.addons],
            "themes": [theme.to_dict() for theme in self.themes],
        }


def _entries(value) -> list:
    if not isinstance(value, (list, tuple)):
        return []
    return list(value)
