import threading

import pytest

from extensia.core.registry import Registry
from extensia.core.state import ENABLED_ADDONS_KEY, EXTENSIONS_KEY, MemoryStore
from extensia.errors import (
    DefaultThemeMissingError,
    DuplicateExtensionError,
    ScriptingDisabledError,
    UnresolvedAddonError,
    ValidationError,
)


def test_initialize_with_empty_store_persists_empty_state(registry, store):
    assert registry.extensions == []
    assert store.data == {EXTENSIONS_KEY: [], ENABLED_ADDONS_KEY: []}


def test_initialize_with_non_list_store_resets_it(document, settings):
    store = MemoryStore({EXTENSIONS_KEY: {"meta": {"namespace": "acme"}}, ENABLED_ADDONS_KEY: ["acme:x"]})
    registry = Registry(store, document, settings)
    registry.initialize()

    assert registry.extensions == []
    assert store.get_item(EXTENSIONS_KEY) == []
    assert store.get_item(ENABLED_ADDONS_KEY) == []


def test_load_returns_extension(registry, acme_manifest):
    extension = registry.load(acme_manifest)
    assert extension.namespace == "acme"
    assert registry.extensions == [extension]


def test_duplicate_namespace_is_noop(registry, acme_manifest):
    registry.load(acme_manifest)
    assert registry.load({"meta": {"namespace": "acme"}, "addons": [{"name": "other"}]}) is None
    assert len(registry.extensions) == 1
    assert registry.get_addon_by_name("acme:other") is None


@pytest.mark.parametrize("data", [None, "acme", {}, {"meta": {}}, {"meta": {"author": "x"}}, {"meta": {"namespace": 5}}])
def test_load_rejects_manifest_without_namespace(registry, data):
    assert registry.load(data) is None
    assert registry.extensions == []


def test_load_does_not_persist_but_install_does(registry, store, acme_manifest):
    registry.load(acme_manifest)
    assert store.get_item(EXTENSIONS_KEY) == []

    registry.install({"meta": {"namespace": "other"}})
    assert [e["meta"]["namespace"] for e in store.get_item(EXTENSIONS_KEY)] == ["acme", "other"]


def test_qualified_lookup(registry, acme_manifest, builtin_manifest):
    registry.load(acme_manifest)

    assert registry.get_addon_by_name("acme:x").name == "x"
    assert registry.get_addon_by_name("x") is None
    assert registry.get_addon_by_name("a:b:c") is None
    assert registry.get_addon_by_name("nowhere:x") is None

    registry.load(builtin_manifest)
    assert registry.get_addon_by_name("clock").name == "clock"
    assert registry.get_addon_by_name("echo-live:clock") is registry.get_addon_by_name("clock")
    assert registry.get_theme_by_name("vanilla").name == "vanilla"
    assert registry.get_theme_by_name("acme:neon").name == "neon"
    assert registry.get_theme_by_name("neon") is None


def test_unqualified_lookup_without_builtin(registry):
    assert registry.get_addon_by_name("clock") is None
    assert registry.get_theme_by_name("vanilla") is None


def test_acme_scenario(registry, document):
    registry.load({"meta": {"namespace": "acme"}, "addons": [{"name": "x", "live": {"styles": ["s.css"]}}]})

    addon = registry.get_addon_by_name("acme:x")
    assert addon.live_hook.styles == ["s.css"]

    addon.enable("live", document, registry.settings.script_enable)
    assert document.stylesheets == ["extensions/acme/s.css"]
    assert document.scripts == []


def test_refresh_prunes_and_is_idempotent(registry, acme_manifest):
    registry.load(acme_manifest)
    registry._enabled_addons = ["acme:x", "acme:gone", "bad:id:shape", "acme:y"]

    registry.refresh_enabled_addons_list()
    once = registry.enabled_addons
    registry.refresh_enabled_addons_list()

    assert once == ["acme:x", "acme:y"]
    assert registry.enabled_addons == once


def test_add_and_remove_addon(registry, store, acme_manifest):
    registry.load(acme_manifest)

    registry.add_addon("acme:x")
    registry.add_addon("acme:x")
    registry.add_addon("acme:missing")
    assert registry.enabled_addons == ["acme:x"]
    assert store.get_item(ENABLED_ADDONS_KEY) == ["acme:x"]

    registry.remove_addon("acme:x")
    assert registry.enabled_addons == []
    assert store.get_item(ENABLED_ADDONS_KEY) == []


def test_enable_addons_in_order(registry, document, acme_manifest):
    registry.load(acme_manifest)
    registry.add_addon("acme:y")
    registry.add_addon("acme:x")

    registry.enable_addons("history")

    # y's history script first, then x's global script
    assert document.scripts == ["extensions/acme/history.js", "extensions/acme/global.js"]


def test_enable_addons_with_stale_identifier_is_fatal(registry, acme_manifest):
    registry.load(acme_manifest)
    registry._enabled_addons = ["acme:gone"]

    with pytest.raises(UnresolvedAddonError):
        registry.enable_addons("live")


def test_enable_addons_refused_when_scripting_disabled(store, document, settings, acme_manifest):
    settings.script_enable = False
    registry = Registry(store, document, settings)
    registry.initialize()
    registry.load(acme_manifest)
    registry.add_addon("acme:x")

    with pytest.raises(ScriptingDisabledError):
        registry.enable_addons("live")
    assert document.head == []
    assert document.body == []


def test_enable_and_disable_addon(registry, document, acme_manifest):
    registry.load(acme_manifest)

    addon = registry.enable_addon("acme:x", "editor")
    assert addon.name == "x"
    assert registry.is_enabled("acme:x")
    assert document.stylesheets == ["extensions/acme/editor.css"]
    assert document.scripts == ["extensions/acme/global.js", "extensions/acme/editor.js"]

    # enabling twice does not inject twice
    registry.enable_addon("acme:x", "editor")
    assert len(document.body) == 2

    registry.disable_addon("acme:x", "editor")
    assert not registry.is_enabled("acme:x")
    assert document.head == []
    assert document.body == []

    assert registry.enable_addon("acme:missing", "editor") is None
    assert registry.disable_addon("acme:missing", "editor") is None


def test_enable_addon_refused_leaves_list_unchanged(registry, document, acme_manifest):
    registry.load(acme_manifest)
    registry.settings.script_enable = False

    with pytest.raises(ScriptingDisabledError):
        registry.enable_addon("acme:x", "live")
    assert registry.enabled_addons == []
    assert document.head == []


def test_remove_extension_disables_its_addons(registry, store, document, acme_manifest, builtin_manifest):
    registry.load(builtin_manifest)
    registry.load(acme_manifest)
    registry.enable_addon("acme:x", "live")
    registry.enable_addon("clock", "live")

    registry.remove_extension_by_namespace("acme", "live")

    assert registry.get_extension_by_namespace("acme") is None
    assert document.stylesheets == []
    assert document.scripts == ["res/addons/clock.js"]
    assert registry.enabled_addons == ["echo-live:clock"]
    assert [e["meta"]["namespace"] for e in store.get_item(EXTENSIONS_KEY)] == ["echo-live"]
    assert store.get_item(ENABLED_ADDONS_KEY) == ["echo-live:clock"]


def test_disable_addons(registry, document, acme_manifest):
    registry.load(acme_manifest)
    registry.enable_addon("acme:x", "live")
    registry.disable_addons("live")

    assert document.head == []
    assert document.body == []
    assert registry.enabled_addons == ["acme:x"]


def test_load_theme_falls_back_to_vanilla(registry, document, builtin_manifest, acme_manifest):
    registry.load(builtin_manifest)
    registry.load(acme_manifest)

    assert registry.load_theme("acme:neon").name == "neon"
    assert document.theme_href == "packs/acme/neon.css"

    assert registry.load_theme("nonexistent").name == "vanilla"
    assert document.theme_href == "res/themes/vanilla.css"

    assert registry.load_theme().name == "vanilla"


def test_load_theme_without_default_is_fatal(registry, document, acme_manifest):
    registry.load(acme_manifest)

    with pytest.raises(DefaultThemeMissingError):
        registry.load_theme("nonexistent")
    assert document.theme_href is None


def test_themes_and_addons_flattened_in_order(registry, builtin_manifest, acme_manifest):
    registry.load(acme_manifest)
    registry.load(builtin_manifest)

    assert [t.name for t in registry.themes()] == ["neon", "vanilla", "dark"]
    assert [identifier for identifier, _ in registry.addons()] == ["acme:x", "acme:y", "echo-live:clock"]


def test_rehydrate_from_store(store, document, settings, acme_manifest):
    first = Registry(store, document, settings)
    first.initialize()
    first.install(acme_manifest)
    first.add_addon("acme:x")

    second = Registry(store, document, settings)
    second.initialize()

    assert [e.namespace for e in second.extensions] == ["acme"]
    assert second.enabled_addons == ["acme:x"]
    assert second.get_addon_by_name("acme:x").to_dict() == first.get_addon_by_name("acme:x").to_dict()


def test_rehydrate_keeps_unresolved_until_refresh(document, settings, acme_manifest):
    store = MemoryStore({EXTENSIONS_KEY: [acme_manifest], ENABLED_ADDONS_KEY: ["acme:x", "gone:addon", 5]})
    registry = Registry(store, document, settings)
    registry.initialize()

    assert registry.enabled_addons == ["acme:x", "gone:addon"]
    registry.refresh_enabled_addons_list()
    assert registry.enabled_addons == ["acme:x"]


def test_rehydrate_survives_malformed_requirements(document, settings, acme_manifest):
    bad = {"meta": {"namespace": "bad"}, "addons": [{"name": "a", "requirements": 5}]}
    store = MemoryStore({EXTENSIONS_KEY: [bad, acme_manifest], ENABLED_ADDONS_KEY: ["bad:a", "acme:x"]})
    registry = Registry(store, document, settings)
    registry.initialize()

    assert [e.namespace for e in registry.extensions] == ["bad", "acme"]
    assert registry.get_addon_by_name("bad:a").requirements == []
    registry.enable_addons("live")
    assert document.scripts == ["extensions/acme/global.js"]


def test_aliases_of_one_addon_inject_once(registry, store, document, builtin_manifest):
    registry.load(builtin_manifest)

    registry.enable_addon("clock", "live")
    registry.enable_addon("echo-live:clock", "live")

    assert document.scripts == ["res/addons/clock.js"]
    assert registry.enabled_addons == ["echo-live:clock"]
    assert store.get_item(ENABLED_ADDONS_KEY) == ["echo-live:clock"]
    assert registry.is_enabled("clock")
    assert registry.is_enabled("echo-live:clock")

    registry.disable_addon("clock", "live")
    assert document.scripts == []
    assert registry.enabled_addons == []


def test_refresh_canonicalises_and_dedupes(registry, builtin_manifest, acme_manifest):
    registry.load(builtin_manifest)
    registry.load(acme_manifest)
    registry._enabled_addons = ["clock", "acme:x", "echo-live:clock", "acme:x"]

    registry.refresh_enabled_addons_list()

    assert registry.enabled_addons == ["echo-live:clock", "acme:x"]


def test_enable_addons_enables_aliased_addon_once(registry, document, builtin_manifest):
    registry.load(builtin_manifest)
    registry._enabled_addons = ["clock", "echo-live:clock"]

    registry.enable_addons("live")

    assert document.scripts == ["res/addons/clock.js"]


def test_qualify(registry, builtin_manifest, acme_manifest):
    registry.load(builtin_manifest)
    registry.load(acme_manifest)

    assert registry.qualify("clock") == "echo-live:clock"
    assert registry.qualify("echo-live:clock") == "echo-live:clock"
    assert registry.qualify("acme:x") == "acme:x"
    assert registry.qualify("x") is None
    assert registry.qualify("acme:missing") is None


def test_strict_install_raises(registry, store, acme_manifest):
    registry.install(acme_manifest)

    with pytest.raises(DuplicateExtensionError):
        registry.install(acme_manifest, strict=True)
    with pytest.raises(ValidationError):
        registry.install({"meta": {"author": "x"}}, strict=True)

    assert [e.namespace for e in registry.extensions] == ["acme"]
    assert len(store.get_item(EXTENSIONS_KEY)) == 1


def test_concurrent_strict_installs_register_once(registry, acme_manifest):
    barrier = threading.Barrier(8)
    outcomes = []

    def install():
        barrier.wait()
        try:
            registry.install(acme_manifest, strict=True)
            outcomes.append("installed")
        except DuplicateExtensionError:
            outcomes.append("duplicate")

    threads = [threading.Thread(target=install) for _ in range(8)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert sorted(outcomes) == ["duplicate"] * 7 + ["installed"]
    assert len(registry.extensions) == 1
