import pytest

from extensia.core.document import MemoryDocument
from extensia.core.registry import Registry
from extensia.core.state import MemoryStore
from extensia.settings import Settings


@pytest.fixture
def settings(tmp_path):
    """Settings isolated from the environment and any .env file."""
    return Settings(_env_file=None, state_file=tmp_path / "state.json")


@pytest.fixture
def document():
    return MemoryDocument()


@pytest.fixture
def store():
    return MemoryStore()


@pytest.fixture
def registry(store, document, settings):
    registry = Registry(store, document, settings)
    registry.initialize()
    return registry


@pytest.fixture
def builtin_manifest():
    """The host's own extension with the default theme."""
    return {
        "meta": {"namespace": "echo-live", "author": "Echo Live", "version": "1.0.0"},
        "addons": [
            {"name": "clock", "global": {"scripts": ["addons/clock.js"]}},
        ],
        "themes": [
            {"name": "vanilla", "style": "themes/vanilla.css"},
            {"name": "dark", "title": "Dark", "style": "themes/dark.css"},
        ],
    }


@pytest.fixture
def acme_manifest():
    return {
        "meta": {"namespace": "acme", "author": "Acme", "version": "0.1.0", "url": "https://acme.example"},
        "addons": [
            {
                "name": "x",
                "title": "X Ray",
                "description": "Shows everything",
                "live": {"styles": ["s.css"]},
                "editor": {"styles": ["editor.css"], "scripts": ["editor.js"]},
                "global": {"scripts": ["global.js"]},
                "requirements": ["echo-live:clock"],
            },
            {"name": "y", "history": {"scripts": ["history.js"]}},
        ],
        "themes": [
            {"name": "neon", "description": "Bright", "style": "neon.css"},
        ],
    }
