"""
Extensia Manifest Loader

Discovers extension directories on local disk and installs their manifests.

Each extension is a directory containing a manifest.json:

    extensions/
    └── acme/
        ├── manifest.json
        └── addon.js
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import TYPE_CHECKING, Optional

from extensia.builtin import BUILTIN_MANIFEST
from extensia.obs import logger

if TYPE_CHECKING:
    from extensia.core.extension import Extension
    from extensia.core.registry import Registry

MANIFEST_NAME = "manifest.json"


def discover_extensions(extensions_dir: Path) -> list[Path]:
    """
    Find extension directories, sorted by name.

    Args:
        extensions_dir: Root directory to scan

    Returns:
        Directories that contain a manifest.json
    """
    if not extensions_dir.exists():
        logger.info(f"Extensions directory does not exist: {extensions_dir}")
        return []

    found = []
    for item in sorted(extensions_dir.iterdir()):
        if not item.is_dir():
            continue
        if (item / MANIFEST_NAME).exists():
            found.append(item)
            logger.debug(f"Found extension directory: {item.name}")
        else:
            logger.debug(f"Skipping {item.name}: no {MANIFEST_NAME} found")

    return found


def load_manifest(path: Path) -> Optional[dict]:
    """
    Read a manifest from a file or an extension directory.

    Returns:
        The manifest, or None if it is missing, unreadable or not an object
    """
    if path.is_dir():
        path = path / MANIFEST_NAME

    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, ValueError) as e:
        logger.warning(f"Failed to read manifest from {path}: {e}")
        return None

    if not isinstance(data, dict):
        logger.warning(f"Manifest {path} is not a JSON object")
        return None

    return data


def install_builtin(registry: Registry) -> Optional[Extension]:
    """Register the host's own extension (idempotent)."""
    manifest = load_manifest(BUILTIN_MANIFEST)
    if manifest is None:
        return None
    manifest.setdefault("meta", {})["namespace"] = registry.settings.builtin_namespace
    return registry.install(manifest)


def install_directory(registry: Registry, extensions_dir: Path) -> list[Extension]:
    """
    Install every extension found under a directory.

    Extensions whose namespace is already registered are left untouched.

    Returns:
        The extensions that were newly installed
    """
    installed = []
    for extension_dir in discover_extensions(extensions_dir):
        manifest = load_manifest(extension_dir)
        if manifest is None:
            continue
        extension = registry.install(manifest)
        if extension is not None:
            installed.append(extension)

    logger.info(f"Installed {len(installed)} extension(s) from {extensions_dir}")
    return installed
