"""`mdfmt init`: create the workspace directories (and optionally the config)."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import List, Sequence

from markdown_formatter.core import config_templates
from markdown_formatter.core import workspace as workspace_mod


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="mdfmt init",
        description=(
            "Create the markdown-formatter workspace with its config, logs "
            "and exports directories."
        ),
    )
    parser.add_argument(
        "--path",
        type=Path,
        help=(
            "Workspace root (defaults to MDFMT_DATA_HOME or "
            "~/.markdown-formatter)."
        ),
    )
    parser.add_argument(
        "--with-config",
        action="store_true",
        help="Also write formatter.toml into config/ when it is missing.",
    )
    parser.add_argument(
        "--quiet",
        action="store_true",
        help="Print nothing on success.",
    )
    return parser


def _status(created: bool) -> str:
    return "created" if created else "exists"


def _report(layout: workspace_mod.WorkspaceLayout) -> List[str]:
    lines = [
        "Workspace ready at {0} ({1})".format(
            layout.home, _status(layout.created.get("home", False))
        ),
        "Subdirectories:",
    ]
    width = max(len(name) for name in layout.directories)
    for name, directory in layout.items():
        status = _status(layout.created.get(name, False))
        lines.append(f"  {name.ljust(width)}  {directory} ({status})")
    return lines


def _seed_config(layout: workspace_mod.WorkspaceLayout) -> tuple[Path, bool]:
    template = config_templates.get_template("convert")
    target = template.default_path(layout)
    if target.exists():
        return target, False
    return template.write(target), True


def main(argv: Sequence[str] | None = None) -> int:
    args = _build_parser().parse_args(
        list(argv) if argv is not None else None
    )

    try:
        layout = workspace_mod.ensure_workspace(path=args.path)
        config = _seed_config(layout) if args.with_config else None
    except (
        workspace_mod.WorkspaceError,
        config_templates.ConfigTemplateError,
    ) as exc:
        sys.stderr.write(f"{exc}\n")
        return 1

    if args.quiet:
        return 0

    lines = _report(layout)
    if config is not None:
        path, created = config
        lines.append(f"Config: {path} ({_status(created)})")
    sys.stdout.write("\n".join(lines) + "\n")
    return 0


if __name__ == "__main__":  # pragma: no cover - module CLI guard
    raise SystemExit(main())
