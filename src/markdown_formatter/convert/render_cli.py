"""CLI entry point for rendering one Markdown document to one format."""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path
from typing import Sequence

from markdown_formatter.exports.errors import ExportError
from markdown_formatter.exports.output import InlineOutput, deliver
from markdown_formatter.exports.registry import (
    FORMATS,
    RenderOptions,
    normalize_format,
    produce,
)
from markdown_formatter.rendering.document_tree import NumberingPolicy


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="mdfmt render",
        description=(
            "Render a single Markdown document. Text formats print to "
            "stdout; binary formats print a summary unless --output is given."
        ),
    )
    parser.add_argument(
        "input",
        nargs="?",
        default="-",
        help="Markdown file to read, or '-' for stdin (default).",
    )
    parser.add_argument(
        "--format",
        "-f",
        dest="fmt",
        required=True,
        help="Target format ({0}).".format(", ".join(FORMATS)),
    )
    parser.add_argument(
        "--output",
        "-o",
        type=Path,
        help="Write the rendered output to this path.",
    )
    parser.add_argument(
        "--title",
        help="Document title used by formats that carry one.",
    )
    parser.add_argument(
        "--numbering",
        choices=[policy.value for policy in NumberingPolicy],
        default=NumberingPolicy.SHARED.value,
        help="How separate numbered lists are counted in DOCX output.",
    )
    parser.add_argument(
        "--harmonize",
        action="store_true",
        help="Rewrite md output with consistent list and code markers.",
    )
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(list(argv) if argv is not None else None)

    try:
        fmt = normalize_format(args.fmt)
    except ExportError as exc:
        parser.error(str(exc))

    try:
        markdown = _read_input(args.input)
    except OSError as exc:
        sys.stderr.write(f"Failed to read {args.input}: {exc}\n")
        return 1

    options = RenderOptions(
        numbering=NumberingPolicy.from_value(args.numbering),
        harmonize=args.harmonize,
    )
    try:
        buffer = produce(fmt, markdown, title=args.title, options=options)
        result = deliver(buffer, fmt=fmt, output_path=args.output)
    except ExportError as exc:
        sys.stderr.write(str(exc) + "\n")
        return 1

    if isinstance(result, InlineOutput):
        text = result.text
        sys.stdout.write(text if text.endswith("\n") else text + "\n")
    else:
        sys.stdout.write(json.dumps(result.to_payload(), indent=2) + "\n")
    return 0


def _read_input(source: str) -> str:
    if source == "-":
        return sys.stdin.read()
    return Path(source).expanduser().read_text(encoding="utf-8")


__all__ = ["main"]


if __name__ == "__main__":  # pragma: no cover - module CLI guard
    raise SystemExit(main())
