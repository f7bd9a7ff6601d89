"""
Extensia Application Factory

Creates the FastAPI application around a bootstrapped registry.
"""

from __future__ import annotations

from typing import Optional

from fastapi import FastAPI

from extensia.core.context import PageContext
from extensia.core.registry import Registry
from extensia.entrypoint import bootstrap
from extensia.settings import Settings, get_settings
from extensia.version import __version__
from extensia.web.api import create_api_router


def create_app(
    settings: Optional[Settings] = None,
    registry: Optional[Registry] = None,
    context: PageContext = PageContext.SETTINGS,
) -> FastAPI:
    """
    Create the Extensia FastAPI application.

    Args:
        settings: Runtime settings, defaults to the global settings
        registry: An already bootstrapped registry; built from settings if omitted
        context: Page context used when bootstrapping the registry

    Returns:
        Configured FastAPI application
    """
    settings = settings or get_settings()
    if registry is None:
        registry = bootstrap(settings, context=context)

    app = FastAPI(
        title=f"Extensia {__version__}",
        version=__version__,
        docs_url="/docs",
    )
    app.state.registry = registry
    app.include_router(create_api_router(registry))
    return app
