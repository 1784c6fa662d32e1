"""Configuration loading and workspace lookups."""

from settings.config import (
    CONFIG_FILENAME,
    DEFAULT_NAMESPACE_PREFIX,
    ConfigError,
    NamespacesConfig,
    load_config,
)
from settings.workspace import find_workspace_config, find_workspace_folder

__all__ = [
    "CONFIG_FILENAME",
    "DEFAULT_NAMESPACE_PREFIX",
    "ConfigError",
    "NamespacesConfig",
    "find_workspace_config",
    "find_workspace_folder",
    "load_config",
]
