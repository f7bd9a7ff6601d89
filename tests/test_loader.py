import json

import pytest

from extensia.loader import discover_extensions, install_builtin, install_directory, load_manifest


@pytest.fixture
def extensions_dir(tmp_path, acme_manifest):
    root = tmp_path / "extensions"
    (root / "acme").mkdir(parents=True)
    (root / "acme" / "manifest.json").write_text(json.dumps(acme_manifest))
    (root / "broken").mkdir()
    (root / "broken" / "manifest.json").write_text("{oops")
    (root / "empty").mkdir()
    (root / "README.txt").write_text("not an extension")
    return root


def test_discover_extensions(extensions_dir):
    assert [p.name for p in discover_extensions(extensions_dir)] == ["acme", "broken"]


def test_discover_missing_directory(tmp_path):
    assert discover_extensions(tmp_path / "nope") == []


def test_load_manifest(extensions_dir, tmp_path):
    assert load_manifest(extensions_dir / "acme")["meta"]["namespace"] == "acme"
    assert load_manifest(extensions_dir / "broken") is None

    listing = tmp_path / "list.json"
    listing.write_text("[]")
    assert load_manifest(listing) is None


def test_install_directory(registry, extensions_dir, store):
    installed = install_directory(registry, extensions_dir)

    assert [e.namespace for e in installed] == ["acme"]
    assert registry.get_addon_by_name("acme:x") is not None
    assert install_directory(registry, extensions_dir) == []
    assert len(store.get_item("extensions")) == 1


def test_install_builtin(registry):
    extension = install_builtin(registry)

    assert extension.namespace == registry.settings.builtin_namespace
    assert registry.get_theme_by_name("vanilla").href == "res/themes/vanilla/style.css"
    assert install_builtin(registry) is None
