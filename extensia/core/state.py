"""
Extensia State Persistence

The registry persists two entries in a key-value store:

    "extensions":    list of serialized extensions
    "enabledAddons": list of qualified addon identifiers

JsonFileStore keeps them in a single JSON file; MemoryStore is used for
tests and for hosts that manage durability themselves.
"""

from __future__ import annotations

import copy
import json
from pathlib import Path
from typing import Any, Optional, Protocol, runtime_checkable

from extensia.obs import logger

EXTENSIONS_KEY = "extensions"
ENABLED_ADDONS_KEY = "enabledAddons"


@runtime_checkable
class KeyValueStore(Protocol):

    def get_item(self, key: str) -> Any:
        ...

    def set_item(self, key: str, value: Any) -> None:
        ...


class MemoryStore:
    """Dictionary-backed store. Values are deep-copied in and out."""

    def __init__(self, data: Optional[dict] = None):
        self.data: dict[str, Any] = copy.deepcopy(data) if data else {}

    def get_item(self, key: str) -> Any:
        return copy.deepcopy(self.data.get(key))

    def set_item(self, key: str, value: Any) -> None:
        self.data[key] = copy.deepcopy(value)


class JsonFileStore:
    """
    Store backed by one JSON file.

    The file is read once, on first access. Every write rewrites the whole
    file.
    """

    def __init__(self, state_file: Path):
        self.state_file = Path(state_file)
        self._data: Optional[dict[str, Any]] = None

    @logger.instrument("Loading state from {self.state_file}...")
    def load(self) -> dict[str, Any]:
        """Load state from disk, or start empty if the file is missing or unreadable."""
        if not self.state_file.exists():
            logger.info("  No existing state file, using defaults")
            self._data = {}
            return self._data

        try:
            data = json.loads(self.state_file.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            logger.error(f"  Failed to load state: {e}")
            data = {}

        if not isinstance(data, dict):
            logger.error(f"  Ignoring state file with unexpected top-level {type(data).__name__}")
            data = {}

        self._data = data
        logger.info(f"  Loaded keys: {', '.join(sorted(data)) or '(none)'}")
        return self._data

    @logger.instrument("Saving state to {self.state_file}...")
    def save(self, data: Optional[dict[str, Any]] = None) -> None:
        """Persist state to disk. Writes the given data, or the current state."""
        data = self.data if data is None else data
        try:
            self.state_file.parent.mkdir(parents=True, exist_ok=True)
            self.state_file.write_text(json.dumps(data, indent=2), encoding="utf-8")
        except OSError as e:
            logger.error(f"  Failed to save state: {e}")
            raise

    @property
    def data(self) -> dict[str, Any]:
        if self._data is None:
            self.load()
        return self._data

    def get_item(self, key: str) -> Any:
        return copy.deepcopy(self.data.get(key))

    def set_item(self, key: str, value: Any) -> None:
        """Write the updated state, then adopt it. A failed write leaves the state unchanged."""
        data = {**self.data, key: copy.deepcopy(value)}
        self.save(data)
        self._data = data
