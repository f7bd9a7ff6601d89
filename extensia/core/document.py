"""
Document Contract

The host page is an external collaborator. Hooks and themes only talk to it
through the Document protocol: add a stylesheet link to the head, add a
script to the body, remove an element, and retarget the active theme link.

MemoryDocument keeps elements in memory and can render them as HTML, which
is what the web API serves.
"""

from __future__ import annotations

import itertools
from dataclasses import dataclass, field
from html import escape
from typing import Optional, Protocol, runtime_checkable


@dataclass(eq=False)
class Element:
    """A stylesheet link or script element created on behalf of a hook."""

    tag: str
    attrs: dict[str, str] = field(default_factory=dict)
    id: int = 0

    @property
    def url(self) -> str:
        return self.attrs.get("href") or self.attrs.get("src", "")

    def to_html(self) -> str:
        attrs = "".join(f' {k}="{escape(v)}"' for k, v in self.attrs.items())
        if self.tag == "script":
            return f"<script{attrs}></script>"
        return f"<{self.tag}{attrs}>"


@runtime_checkable
class Document(Protocol):

    def add_stylesheet(self, href: str) -> Element:
        ...

    def add_script(self, src: str) -> Element:
        ...

    def remove(self, element: Element) -> None:
        ...

    def set_theme(self, href: str) -> None:
        ...


class MemoryDocument:
    """
    In-memory page document.

    Elements are appended to head (stylesheets) or body (scripts) in call
    order. Removing an element that is no longer attached is a no-op, the
    same as removing a detached DOM node.
    """

    def __init__(self, theme_element_id: str = "echo-live-theme"):
        self.theme_element_id = theme_element_id
        self.head: list[Element] = []
        self.body: list[Element] = []
        self.theme_href: Optional[str] = None
        self._ids = itertools.count(1)

    def add_stylesheet(self, href: str) -> Element:
        element = Element("link", {"rel": "stylesheet", "href": href}, next(self._ids))
        self.head.append(element)
        return element

    def add_script(self, src: str) -> Element:
        element = Element("script", {"src": src}, next(self._ids))
        self.body.append(element)
        return element

    def remove(self, element: Element) -> None:
        for container in (self.head, self.body):
            if element in container:
                container.remove(element)
                return

    def set_theme(self, href: str) -> None:
        self.theme_href = href

    @property
    def stylesheets(self) -> list[str]:
        return [e.url for e in self.head]

    @property
    def scripts(self) -> list[str]:
        return [e.url for e in self.body]

    def render_head(self) -> str:
        parts = []
        if self.theme_href is not None:
            parts.append(
                f'<link rel="stylesheet" id="{escape(self.theme_element_id)}" href="{escape(self.theme_href)}">'
            )
        parts.extend(e.to_html() for e in self.head)
        return "\n".join(parts)

    def render_body(self) -> str:
        return "\n".join(e.to_html() for e in self.body)

    def clear(self) -> None:
        self.head.clear()
        self.body.clear()
        self.theme_href = None
