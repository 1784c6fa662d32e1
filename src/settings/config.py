from __future__ import annotations

import tomllib
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, field_validator

from syntax.parser import Language

CONFIG_FILENAME = "solidity-namespaces.toml"

DEFAULT_NAMESPACE_PREFIX = "myProject.storage"

_FORBIDDEN_PREFIX_CHARACTERS = frozenset("\"'`")


class NamespacesConfig(BaseModel):
    """Configuration for namespaced storage diagnostics."""

    model_config = ConfigDict(extra="forbid")

    namespace_prefix: str = Field(
        default=DEFAULT_NAMESPACE_PREFIX,
        description="Prefix of expected namespace ids (<prefix>.<ContractName>)",
    )
    compiler_version: str | None = Field(
        default=None,
        description="Pin the grammar version instead of inferring it from pragmas",
    )
    include: list[str] = Field(
        default_factory=list,
        description="Glob patterns for files to include (empty = all Solidity files)",
    )
    exclude: list[str] = Field(
        default_factory=list,
        description="Glob patterns for files to exclude",
    )
    nested_gitignore: bool = Field(
        default=False,
        description=(
            "Enable nested .gitignore composition (default: false for root-only)"
        ),
    )

    @field_validator("namespace_prefix")
    @classmethod
    def validate_namespace_prefix(cls, v: str) -> str:
        if not v:
            msg = "namespace_prefix must not be empty"
            raise ValueError(msg)
        if any(ch.isspace() or ch in _FORBIDDEN_PREFIX_CHARACTERS for ch in v):
            msg = f"namespace_prefix must not contain whitespace or quotes: {v!r}"
            raise ValueError(msg)
        return v

    @field_validator("compiler_version")
    @classmethod
    def validate_compiler_version(cls, v: str | None) -> str | None:
        if v is not None and v not in Language.supported_versions():
            msg = f"Unsupported compiler_version '{v}'"
            raise ValueError(msg)
        return v


class ConfigError(Exception):
    """Raised when config file exists but cannot be parsed."""


def load_config(root: Path) -> NamespacesConfig:
    """Load configuration from solidity-namespaces.toml if it exists."""
    config_path = Path(root) / CONFIG_FILENAME

    if not config_path.is_file():
        return NamespacesConfig()

    try:
        with config_path.open("rb") as f:
            data = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        msg = f"Invalid TOML in {config_path}: {e}"
        raise ConfigError(msg) from e

    try:
        return NamespacesConfig.model_validate(data)
    except Exception as e:
        msg = f"Invalid config in {config_path}: {e}"
        raise ConfigError(msg) from e


__all__ = [
    "CONFIG_FILENAME",
    "DEFAULT_NAMESPACE_PREFIX",
    "ConfigError",
    "NamespacesConfig",
    "load_config",
]
