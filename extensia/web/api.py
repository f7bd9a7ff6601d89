"""
Extensia REST API

Endpoints for a settings UI to install and remove extensions, toggle
addons and switch themes.
"""

from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, HTTPException, status
from pydantic import BaseModel, Field

from extensia.core.context import PageContext
from extensia.core.registry import Registry
from extensia.errors import (
    DefaultThemeMissingError,
    DuplicateExtensionError,
    ScriptingDisabledError,
    ValidationError,
)
from extensia.obs import logger


# --- Request/Response Models ---

class ManifestMeta(BaseModel):
    namespace: str
    author: str = ""
    version: str = ""
    url: str = ""


class ManifestRequest(BaseModel):
    """Extension manifest to install. Entries are validated by the registry."""
    meta: ManifestMeta
    addons: list = Field(default_factory=list)
    themes: list = Field(default_factory=list)


class SkippedEntryResponse(BaseModel):
    kind: str
    index: int
    reason: str


class ExtensionResponse(BaseModel):
    namespace: str
    author: str
    version: str
    url: str
    addons: list[str]
    themes: list[str]
    skipped: list[SkippedEntryResponse] = Field(default_factory=list)


class AddonResponse(BaseModel):
    id: str
    name: str
    title: str
    description: str
    requirements: list[str]
    enabled: bool


class ThemeResponse(BaseModel):
    id: str
    name: str
    title: str
    description: str
    href: str


class PageResponse(BaseModel):
    theme: Optional[str]
    head: str
    body: str


# --- Helper Functions ---

def _extension_to_response(extension) -> ExtensionResponse:
    return ExtensionResponse(
        namespace=extension.namespace,
        author=extension.author,
        version=extension.version,
        url=extension.url,
        addons=[a.name for a in extension.addons],
        themes=[t.name for t in extension.themes],
        skipped=[
            SkippedEntryResponse(kind=s.kind, index=s.index, reason=s.reason)
            for s in extension.skipped
        ],
    )


def _theme_to_response(namespace: str, theme) -> ThemeResponse:
    return ThemeResponse(
        id=f"{namespace}:{theme.name}",
        name=theme.name,
        title=theme.title,
        description=theme.description,
        href=theme.href,
    )


# --- API Router Factory ---

def create_api_router(registry: Registry) -> APIRouter:
    """
    Create the API router with all endpoints.

    Args:
        registry: Registry instance shared by every endpoint

    Returns:
        Configured APIRouter
    """
    router = APIRouter(prefix="/api", tags=["api"])

    # --- Extension Endpoints ---

    @router.get("/extensions")
    def list_extensions() -> list[ExtensionResponse]:
        """List installed extensions."""
        return [_extension_to_response(e) for e in registry.extensions]

    @router.post("/extensions", status_code=status.HTTP_201_CREATED)
    def install_extension(request: ManifestRequest) -> ExtensionResponse:
        """Install an extension from its manifest."""
        try:
            extension = registry.install(request.model_dump(), strict=True)
        except DuplicateExtensionError as e:
            raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))
        except ValidationError as e:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=f"Invalid extension manifest: {e}")

        return _extension_to_response(extension)

    @router.get("/extensions/{namespace}")
    def get_extension(namespace: str) -> ExtensionResponse:
        """Get an extension by namespace."""
        extension = registry.get_extension_by_namespace(namespace)
        if extension is None:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Extension not found")
        return _extension_to_response(extension)

    @router.delete("/extensions/{namespace}")
    def remove_extension(namespace: str, context: PageContext = PageContext.SETTINGS) -> dict:
        """Disable an extension's addons and uninstall it."""
        if registry.get_extension_by_namespace(namespace) is None:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Extension not found")

        registry.remove_extension_by_namespace(namespace, context)
        return {"status": "ok", "message": f"Extension '{namespace}' removed"}

    # --- Addon Endpoints ---

    @router.get("/addons")
    def list_addons() -> list[AddonResponse]:
        """List every addon with its enabled state."""
        return [
            AddonResponse(
                id=identifier,
                name=addon.name,
                title=addon.title,
                description=addon.description,
                requirements=addon.requirements,
                enabled=registry.is_enabled(identifier),
            )
            for identifier, addon in registry.addons()
        ]

    @router.put("/addons/{identifier}/enable")
    def enable_addon(identifier: str, context: PageContext = PageContext.SETTINGS) -> dict:
        """Enable an addon on the given page."""
        try:
            addon = registry.enable_addon(identifier, context)
        except ScriptingDisabledError as e:
            logger.warning(f"Refused to enable {identifier}: {e}")
            raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=str(e))

        if addon is None:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Addon not found")

        return {"status": "ok", "enabled": True}

    @router.put("/addons/{identifier}/disable")
    def disable_addon(identifier: str, context: PageContext = PageContext.SETTINGS) -> dict:
        """Disable an addon on the given page."""
        addon = registry.disable_addon(identifier, context)
        if addon is None:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Addon not found")

        return {"status": "ok", "enabled": False}

    # --- Theme Endpoints ---

    @router.get("/themes")
    def list_themes() -> list[ThemeResponse]:
        """List every theme of every extension."""
        return [
            _theme_to_response(extension.namespace, theme)
            for extension in registry.extensions
            for theme in extension.themes
        ]

    @router.put("/themes/{identifier}/load")
    def load_theme(identifier: str) -> ThemeResponse:
        """Activate a theme, falling back to the default theme."""
        try:
            theme = registry.load_theme(identifier)
        except DefaultThemeMissingError as e:
            raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(e))

        namespace = next(
            e.namespace for e in registry.extensions if any(t is theme for t in e.themes)
        )
        return _theme_to_response(namespace, theme)

    # --- Page Endpoint ---

    @router.get("/page")
    def render_page() -> PageResponse:
        """Rendered head/body markup of the page document."""
        document = registry.document
        if not hasattr(document, "render_head"):
            raise HTTPException(status_code=status.HTTP_501_NOT_IMPLEMENTED, detail="Document cannot be rendered")

        return PageResponse(
            theme=getattr(document, "theme_href", None),
            head=document.render_head(),
            body=document.render_body(),
        )

    return router
