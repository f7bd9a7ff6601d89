"""
Extensia Settings

Runtime configuration, read from ``EXTENSIA_*`` environment variables or a
``.env`` file next to the working directory.
"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


DEFAULT_STATE_FILE = Path("config") / "extensia.json"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix='EXTENSIA_', env_file='.env', extra='ignore')

    # Gates every addon enable call. Read each time, never cached by addons.
    script_enable: bool = True

    # The host application's own namespace and where its resources live
    builtin_namespace: str = "echo-live"
    builtin_root: str = "res/"

    # Third-party roots, suffixed with "<namespace>/"
    addon_root: str = "extensions/"
    theme_root: str = "packs/"

    default_theme: str = "vanilla"
    theme_element_id: str = "echo-live-theme"

    state_file: Path = Field(default=DEFAULT_STATE_FILE)
    extensions_dir: Optional[Path] = None

    log_level: str = "INFO"

    host: str = "127.0.0.1"
    port: int = 8080

    @field_validator('builtin_root', 'addon_root', 'theme_root')
    @classmethod
    def ensure_trailing_slash(cls, value: str) -> str:
        """Roots are concatenated with resource paths, so they must end in '/'."""
        if value and not value.endswith('/'):
            value += '/'
        return value

    def addon_root_for(self, namespace: str) -> str:
        if namespace == self.builtin_namespace:
            return self.builtin_root
        return f"{self.addon_root}{namespace}/"

    def theme_root_for(self, namespace: str) -> str:
        if namespace == self.builtin_namespace:
            return self.builtin_root
        return f"{self.theme_root}{namespace}/"


@lru_cache
def get_settings() -> Settings:
    """Get the global settings instance."""
    return Settings()
