from __future__ import annotations

import os
from typing import TYPE_CHECKING

import pytest

from scan.files import _build_gitignore_matcher, find_solidity_files

if TYPE_CHECKING:
    from pathlib import Path


def _touch(root: Path, relative: str) -> None:
    path = root / relative
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text("contract C {}\n", encoding="utf-8")


def _relative(root: Path, **kwargs: object) -> list[str]:
    return [path.relative_to(root).as_posix() for path in find_solidity_files(root, **kwargs)]  # type: ignore[arg-type]


def test_results_are_sorted_and_limited_to_solidity(tmp_path: Path) -> None:
    _touch(tmp_path, "contracts/b/Vault.sol")
    _touch(tmp_path, "contracts/a/Token.sol")
    _touch(tmp_path, "Root.sol")
    (tmp_path / "README.md").write_text("# readme\n", encoding="utf-8")

    assert _relative(tmp_path) == [
        "Root.sol",
        "contracts/a/Token.sol",
        "contracts/b/Vault.sol",
    ]


def test_dependency_directories_are_skipped(tmp_path: Path) -> None:
    _touch(tmp_path, "src/Token.sol")
    _touch(tmp_path, "lib/forge-std/src/Test.sol")
    _touch(tmp_path, "node_modules/@openzeppelin/contracts/Ownable.sol")

    assert _relative(tmp_path) == ["src/Token.sol"]


def test_root_gitignore_respected(tmp_path: Path) -> None:
    _touch(tmp_path, "src/Token.sol")
    _touch(tmp_path, "src/Ignored.sol")
    (tmp_path / ".gitignore").write_text("Ignored.sol\n", encoding="utf-8")

    assert _relative(tmp_path) == ["src/Token.sol"]


def test_nested_gitignore_only_when_enabled(tmp_path: Path) -> None:
    _touch(tmp_path, "src/Token.sol")
    _touch(tmp_path, "src/mocks/MockToken.sol")
    (tmp_path / "src" / ".gitignore").write_text("Mock*.sol\n", encoding="utf-8")

    assert _relative(tmp_path) == ["src/Token.sol", "src/mocks/MockToken.sol"]
    assert _relative(tmp_path, nested_gitignore=True) == ["src/Token.sol"]


def test_include_and_exclude_patterns(tmp_path: Path) -> None:
    _touch(tmp_path, "src/Token.sol")
    _touch(tmp_path, "src/Vault.sol")
    _touch(tmp_path, "test/Token.t.sol")

    assert _relative(tmp_path, include_patterns=["src/*"]) == ["src/Token.sol", "src/Vault.sol"]
    assert _relative(tmp_path, exclude_patterns=["test/*", "*/Vault.sol"]) == ["src/Token.sol"]


@pytest.mark.skipif(
    os.name == "nt",
    reason="Symlink semantics vary on Windows test runners.",
)
def test_find_solidity_files_skips_symlinked_dirs(tmp_path: Path) -> None:
    repo_root = tmp_path / "repo"
    _touch(repo_root, "src/Token.sol")

    external_root = tmp_path / "external"
    _touch(external_root, "Leak.sol")

    (repo_root / "linked").symlink_to(external_root, target_is_directory=True)

    results = _relative(repo_root)

    assert "src/Token.sol" in results
    assert "linked/Leak.sol" not in results


@pytest.mark.skipif(
    os.name == "nt",
    reason="Symlink semantics vary on Windows test runners.",
)
def test_nested_gitignore_skips_symlinked_gitignore(tmp_path: Path) -> None:
    repo_root = tmp_path / "repo"
    _touch(repo_root, "src/Token.sol")
    (repo_root / ".gitignore").write_text("out/\n", encoding="utf-8")

    external_root = tmp_path / "external"
    external_root.mkdir()
    (external_root / "outside.gitignore").write_text("src/Token.sol\n", encoding="utf-8")
    (repo_root / "linked.gitignore").symlink_to(external_root / "outside.gitignore")

    matcher = _build_gitignore_matcher(repo_root, nested_gitignore=True)
    assert matcher is not None
    assert matcher(str(repo_root / "src" / "Token.sol")) is False
