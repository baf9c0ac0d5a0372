"""Runtime configuration."""

from .settings import DEFAULT_CONFIG_PATH, Settings, load_settings

__all__ = ["DEFAULT_CONFIG_PATH", "Settings", "load_settings"]
