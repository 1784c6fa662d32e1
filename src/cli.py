"""Command-line interface for solidity-namespaces."""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from pathlib import Path
from typing import TYPE_CHECKING

import orjson
from pydantic import ValidationError

from analysis.context import AnalysisContext
from analysis.diagnostics import Severity
from analysis.document import TextDocument
from analysis.engine import analyze_document
from scan.files import find_solidity_files
from settings.config import ConfigError, NamespacesConfig, load_config
from syntax.parser import UnsupportedLanguageVersionError

if TYPE_CHECKING:
    from collections.abc import Sequence

    from analysis.diagnostics import DiagnosticRecord

logger = logging.getLogger(__name__)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="solidity-namespaces")
    subparsers = parser.add_subparsers(dest="command", required=True)

    check_parser = subparsers.add_parser(
        "check", help="Report namespaced storage diagnostics"
    )
    check_parser.add_argument(
        "root",
        nargs="?",
        default=".",
        help="Project root (default: .)",
    )
    check_parser.add_argument(
        "--prefix",
        default=None,
        help="Namespace prefix (default: config namespace_prefix)",
    )
    check_parser.add_argument(
        "--format",
        choices=("text", "jsonl"),
        default="text",
        help="Output format (default: text)",
    )
    check_parser.add_argument(
        "--verbose",
        action="store_true",
        help="Log debug output to stderr",
    )

    return parser


def _write_text(relative_path: str, record: DiagnosticRecord) -> None:
    start = record.range.start
    sys.stdout.write(
        f"{relative_path}:{start.line + 1}:{start.column + 1}: "
        f"{record.severity.value} [{record.code}] {record.message}\n"
    )


def _write_jsonl(relative_path: str, record: DiagnosticRecord) -> None:
    payload = {"path": relative_path, **record.model_dump(mode="json")}
    sys.stdout.write(orjson.dumps(payload, option=orjson.OPT_SORT_KEYS).decode() + "\n")


async def _check_files(
    root: Path, paths: Sequence[Path], prefix: str | None, output_format: str
) -> int:
    async def fixed_prefix(document: TextDocument, workspace_folders: Sequence[Path]) -> str:
        assert prefix is not None
        return prefix

    write = _write_jsonl if output_format == "jsonl" else _write_text
    has_errors = False
    for path in paths:
        document = TextDocument.from_path(path)
        if prefix is None:
            context = AnalysisContext(document=document, workspace_folders=(root,))
        else:
            context = AnalysisContext(
                document=document,
                workspace_folders=(root,),
                namespace_prefix_provider=fixed_prefix,
            )
        records = await analyze_document(context)
        relative_path = path.relative_to(root).as_posix()
        for record in records:
            write(relative_path, record)
            has_errors = has_errors or record.severity is Severity.ERROR
    sys.stdout.flush()
    return 1 if has_errors else 0


def _handle_check(root: Path, prefix: str | None, output_format: str) -> int:
    try:
        config = load_config(root)
    except ConfigError as exc:
        sys.stderr.write(f"error: {exc}\n")
        return 2

    if prefix is not None:
        try:
            NamespacesConfig(namespace_prefix=prefix)
        except ValidationError as exc:
            sys.stderr.write(f"error: invalid --prefix: {exc}\n")
            return 2

    paths = list(
        find_solidity_files(
            root,
            include_patterns=config.include,
            exclude_patterns=config.exclude,
            nested_gitignore=config.nested_gitignore,
        )
    )
    logger.debug("Checking %d Solidity file(s) under %s", len(paths), root)
    try:
        return asyncio.run(_check_files(root, paths, prefix, output_format))
    except UnsupportedLanguageVersionError as exc:
        sys.stderr.write(f"error: {exc}\n")
        return 2


def main(argv: list[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )

    root = Path(args.root).expanduser().resolve()

    if args.command == "check":
        return _handle_check(root, args.prefix, args.format)

    raise AssertionError


if __name__ == "__main__":
    raise SystemExit(main())
