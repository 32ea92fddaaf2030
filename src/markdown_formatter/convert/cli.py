"""CLI entry point for batch Markdown conversion."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import Sequence

from markdown_formatter.core import config_templates
from markdown_formatter.core import workspace as workspace_mod
from markdown_formatter.core.config_templates import ConfigTemplateError
from markdown_formatter.core.logging import configure_logger
from markdown_formatter.core.workspace import WorkspaceError
from markdown_formatter.rendering.document_tree import NumberingPolicy

from .config import (
    CONFIG_FILENAME,
    CollisionPolicy,
    ConfigOverrides,
    ConvertConfigError,
    load_config,
)
from .executor import ExecutionSummary, run_conversion


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="mdfmt convert",
        description=(
            "Convert Markdown files into RTF, LaTeX, DOCX, XLSX, CSV, JSON, "
            "XML, HTML, PDF or plain text."
        ),
        epilog=(
            "Run `mdfmt convert config init` to scaffold the default "
            f"{CONFIG_FILENAME} template."
        ),
    )
    parser.add_argument(
        "paths",
        nargs="+",
        type=Path,
        help="Markdown files or directories to convert.",
    )
    parser.add_argument(
        "--config",
        type=Path,
        help=(
            "Path to a TOML config file (defaults to the workspace config "
            "directory)."
        ),
    )
    parser.add_argument(
        "--workspace",
        type=Path,
        help=(
            "Override the workspace root used to resolve default output and "
            "config paths."
        ),
    )
    parser.add_argument(
        "--output-dir",
        type=Path,
        help="Override the output directory for converted files.",
    )
    parser.add_argument(
        "--formats",
        nargs="+",
        help="Formats to produce for each source (e.g. docx pdf csv).",
    )
    parser.add_argument(
        "--overwrite",
        action="store_true",
        help="Overwrite existing outputs when name collisions occur.",
    )
    parser.add_argument(
        "--version-output",
        action="store_true",
        help="Version conflicting outputs using -01, -02 style suffixes.",
    )
    parser.add_argument(
        "--numbering",
        choices=[policy.value for policy in NumberingPolicy],
        help=(
            "How separate numbered lists are counted in DOCX output "
            "(defaults to shared)."
        ),
    )
    parser.add_argument(
        "--title",
        help="Document title (defaults to each source file's name).",
    )
    parser.add_argument(
        "--log-level",
        help="Set the logging level for the run (defaults to INFO).",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Mirror log records to stderr.",
    )
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    args_list = list(argv) if argv is not None else list(sys.argv[1:])

    if args_list[:1] == ["config"]:
        return _handle_config(args_list[1:])

    parser = _build_parser()
    args = parser.parse_args(args_list)

    if args.overwrite and args.version_output:
        parser.error("--overwrite and --version-output are mutually exclusive.")

    overrides = ConfigOverrides(
        formats=args.formats,
        output_dir=args.output_dir,
        collision=_collision_from_args(args),
        numbering=_numbering_from_args(args),
        title=args.title,
        log_level=args.log_level,
    )

    try:
        load_result = load_config(
            config_path=args.config,
            overrides=overrides,
            workspace_path=args.workspace,
        )
    except (ConvertConfigError, WorkspaceError) as exc:
        parser.error(str(exc))

    logger, log_path = configure_logger(
        "markdown_formatter.convert",
        log_dir=load_result.layout.path_for("logs"),
        level=load_result.config.log_level,
        verbose=args.verbose,
    )
    logger.debug("convert CLI invoked")

    summary = run_conversion(
        args.paths,
        config=load_result.config,
        logger=logger,
    )

    _print_summary(summary, log_path, load_result.config.output_dir)
    return summary.exit_code


def _print_summary(
    summary: ExecutionSummary, log_path: Path, output_dir: Path
) -> None:
    lines = [
        "convert summary:",
        "  converted: {0}".format(summary.success_count),
        "  skipped:   {0}".format(summary.skipped_count),
        "  failed:    {0}".format(summary.failure_count),
        "  output dir: {0}".format(output_dir),
        "  log file:   {0}".format(log_path),
    ]
    for outcome in summary.outcomes:
        if outcome.reason and outcome.error is not None:
            lines.append(
                "  error: {0} -> {1}: {2}".format(
                    outcome.source.name, outcome.format, outcome.reason
                )
            )
    sys.stdout.write("\n".join(str(line) for line in lines) + "\n")


def _collision_from_args(args: argparse.Namespace) -> CollisionPolicy | None:
    if args.overwrite:
        return CollisionPolicy.OVERWRITE
    if args.version_output:
        return CollisionPolicy.VERSION
    return None


def _numbering_from_args(args: argparse.Namespace) -> NumberingPolicy | None:
    if args.numbering is None:
        return None
    return NumberingPolicy.from_value(args.numbering)


def _handle_config(argv: Sequence[str]) -> int:
    parser = _build_config_parser()
    args = parser.parse_args(argv)

    return _handle_config_init(args)


def _build_config_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="mdfmt convert config",
        description="Manage configuration files for Markdown conversion.",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    init_parser = subparsers.add_parser(
        "init",
        help=f"Write the default {CONFIG_FILENAME} template.",
    )
    init_parser.add_argument(
        "--path",
        type=Path,
        help=(
            "Destination for the config TOML (defaults to the workspace "
            "config directory)."
        ),
    )
    init_parser.add_argument(
        "--workspace",
        type=Path,
        help=(
            "Workspace root override used when resolving the default config "
            "path."
        ),
    )
    init_parser.add_argument(
        "--force",
        action="store_true",
        help="Overwrite the destination if a config already exists.",
    )
    return parser


def _handle_config_init(args: argparse.Namespace) -> int:
    try:
        target = _resolve_config_target(args)
    except WorkspaceError as exc:
        sys.stderr.write(str(exc) + "\n")
        return 1

    template = config_templates.get_template("convert")
    try:
        written = template.write(target, overwrite=args.force)
    except ConfigTemplateError as exc:
        sys.stderr.write(str(exc) + "\n")
        return 1

    sys.stdout.write(f"Wrote convert config to {written}\n")
    return 0


def _resolve_config_target(args: argparse.Namespace) -> Path:
    if args.path is not None:
        candidate = args.path.expanduser()
        if not candidate.is_absolute():
            candidate = (Path.cwd() / candidate).resolve()
        return candidate

    layout = workspace_mod.ensure_workspace(path=args.workspace)
    return config_templates.get_template("convert").default_path(layout)


if __name__ == "__main__":  # pragma: no cover - module CLI guard
    raise SystemExit(main())
