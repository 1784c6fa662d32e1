from __future__ import annotations

import asyncio
from pathlib import Path

import pytest

from analysis.context import get_namespace_prefix
from analysis.document import TextDocument
from settings.config import (
    CONFIG_FILENAME,
    DEFAULT_NAMESPACE_PREFIX,
    ConfigError,
    load_config,
)
from settings.workspace import find_workspace_config, find_workspace_folder


def _write_config(repo_root: Path, toml_content: str) -> None:
    (repo_root / CONFIG_FILENAME).write_text(toml_content, encoding="utf-8")


def test_missing_config_uses_defaults(tmp_path: Path) -> None:
    config = load_config(tmp_path)

    assert config.namespace_prefix == DEFAULT_NAMESPACE_PREFIX
    assert config.compiler_version is None
    assert config.include == []
    assert config.exclude == []
    assert config.nested_gitignore is False


def test_valid_config_accepted(tmp_path: Path) -> None:
    _write_config(
        tmp_path,
        """
namespace_prefix = "acme.storage"
compiler_version = "0.8.24"
exclude = ["test/**"]
""".strip(),
    )

    config = load_config(tmp_path)

    assert config.namespace_prefix == "acme.storage"
    assert config.compiler_version == "0.8.24"
    assert config.exclude == ["test/**"]


def test_unknown_top_level_key_rejected(tmp_path: Path) -> None:
    _write_config(tmp_path, "bogus_key = true")

    with pytest.raises(ConfigError):
        load_config(tmp_path)


def test_invalid_toml_rejected(tmp_path: Path) -> None:
    _write_config(tmp_path, "namespace_prefix = ")

    with pytest.raises(ConfigError):
        load_config(tmp_path)


@pytest.mark.parametrize("prefix", ["", "my project", "acme.'storage'", 'acme"storage'])
def test_invalid_namespace_prefix_rejected(tmp_path: Path, prefix: str) -> None:
    _write_config(tmp_path, f"namespace_prefix = '''{prefix}'''")

    with pytest.raises(ConfigError):
        load_config(tmp_path)


def test_unsupported_compiler_version_rejected(tmp_path: Path) -> None:
    _write_config(tmp_path, 'compiler_version = "0.9.1"')

    with pytest.raises(ConfigError):
        load_config(tmp_path)


def test_workspace_folder_lookup(tmp_path: Path) -> None:
    first = tmp_path / "first"
    second = tmp_path / "second"
    (second / "contracts").mkdir(parents=True)
    first.mkdir()

    source = second / "contracts" / "Foo.sol"

    assert find_workspace_folder(source, [first, second]) == second
    assert find_workspace_folder(tmp_path / "Other.sol", [first, second]) is None
    assert find_workspace_folder(None, [first, second]) is None


def test_workspace_config_per_folder(tmp_path: Path) -> None:
    _write_config(tmp_path, 'namespace_prefix = "acme.storage"')
    source = tmp_path / "Foo.sol"
    source.write_text("contract Foo {}\n", encoding="utf-8")

    assert find_workspace_config(source, [tmp_path]).namespace_prefix == "acme.storage"
    assert find_workspace_config(source, []).namespace_prefix == DEFAULT_NAMESPACE_PREFIX


def test_namespace_prefix_from_document(tmp_path: Path) -> None:
    _write_config(tmp_path, 'namespace_prefix = "acme.storage"')
    source = tmp_path / "Foo.sol"
    source.write_text("contract Foo {}\n", encoding="utf-8")

    document = TextDocument.from_path(source)
    untitled = TextDocument(uri="untitled:Foo.sol", text="contract Foo {}\n")

    assert asyncio.run(get_namespace_prefix(document, (tmp_path,))) == "acme.storage"
    assert asyncio.run(get_namespace_prefix(untitled, (tmp_path,))) == DEFAULT_NAMESPACE_PREFIX
