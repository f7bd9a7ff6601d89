"""
Page contexts an addon can hook into.
"""

from __future__ import annotations

from enum import Enum
from typing import Optional, Union


class PageContext(str, Enum):
    """The kind of host page currently displayed."""
    LIVE = "live"
    EDITOR = "editor"
    HISTORY = "history"
    SETTINGS = "settings"

    @classmethod
    def parse(cls, value: Union[PageContext, str, None]) -> Optional[PageContext]:
        """Return the matching context, or None for anything unrecognised."""
        if value is None:
            return None
        if isinstance(value, cls):
            return value
        try:
            return cls(value)
        except ValueError:
            return None
