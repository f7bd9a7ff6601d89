"""
Startup sequence: build the registry, restore state, enable addons.
"""

from __future__ import annotations

from typing import Optional, Union

from extensia.core.context import PageContext
from extensia.core.document import Document, MemoryDocument
from extensia.core.registry import Registry
from extensia.core.state import JsonFileStore, KeyValueStore
from extensia.loader import install_builtin, install_directory
from extensia.obs import logger
from extensia.settings import Settings, get_settings
from extensia.version import __version__


def bootstrap(
    settings: Optional[Settings] = None,
    store: Optional[KeyValueStore] = None,
    document: Optional[Document] = None,
    context: Union[PageContext, str] = PageContext.LIVE,
) -> Registry:
    """
    Build a registry and bring the page up to its persisted state.

    Stored extensions are restored, the built-in extension and anything under
    ``settings.extensions_dir`` are installed, and previously enabled addons
    are enabled for ``context`` when scripting is permitted.
    """
    settings = settings or get_settings()
    store = store if store is not None else JsonFileStore(settings.state_file)
    document = document if document is not None else MemoryDocument(settings.theme_element_id)
    logger.setLevel(settings.log_level.upper())

    logger.info(f"Starting extensia {__version__} on page {getattr(context, 'value', context)}")

    registry = Registry(store, document, settings)
    registry.initialize()

    install_builtin(registry)
    if settings.extensions_dir is not None:
        install_directory(registry, settings.extensions_dir)

    registry.refresh_enabled_addons_list()

    if settings.script_enable:
        registry.enable_addons(context)
    else:
        logger.warning("External scripts are not allowed by configuration, so no addons were enabled.")

    return registry


def main():
    import sys
    try:
        import uvicorn
        from extensia.web.app import create_app

        settings = get_settings()
        uvicorn.run(create_app(settings), host=settings.host, port=settings.port)
    except Exception as e:
        print(f"FATAL: Failed to start extensia: {e}", file=sys.stderr)
        import traceback
        traceback.print_exc()
        sys.exit(1)


if __name__ == '__main__':
    main()
