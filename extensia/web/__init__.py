"""
Extensia Web Module

REST API for managing extensions, addons and themes.
"""

from extensia.web.api import create_api_router
from extensia.web.app import create_app

__all__ = [
    "create_api_router",
    "create_app",
]
