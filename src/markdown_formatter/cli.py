"""`mdfmt` entry point: routes subcommands to their module ``main``."""

from __future__ import annotations

import sys
from dataclasses import dataclass
from importlib import import_module, metadata
from typing import Callable, Dict, List, Optional, Sequence, TextIO


@dataclass(frozen=True)
class CommandSpec:
    """An mdfmt subcommand backed by ``<module>.main(argv)``."""

    name: str
    summary: str
    module: str

    @property
    def prog(self) -> str:
        return f"mdfmt {self.name}"

    def run(self, argv: Sequence[str]) -> int:
        entry = getattr(import_module(self.module), "main")
        return _invoke_main(entry, self.prog, argv)


COMMANDS: Dict[str, CommandSpec] = {
    spec.name: spec
    for spec in (
        CommandSpec(
            "init",
            "Bootstrap the markdown-formatter workspace.",
            "markdown_formatter.workspace.cli",
        ),
        CommandSpec(
            "render",
            "Render one Markdown document to a single format.",
            "markdown_formatter.convert.render_cli",
        ),
        CommandSpec(
            "convert",
            "Batch-convert Markdown files into configured formats.",
            "markdown_formatter.convert.cli",
        ),
        CommandSpec(
            "formats",
            "List the supported export formats.",
            "markdown_formatter.exports.cli",
        ),
    )
}


def format_command_table() -> str:
    width = max(len(name) for name in COMMANDS)
    rows = [
        f"  {spec.name.ljust(width)}  {spec.summary}"
        for spec in COMMANDS.values()
    ]
    return "\n".join(["Available commands:", *rows])


def format_usage() -> str:
    return "\n".join(
        [
            "Usage: mdfmt <command> [args...]",
            "Run `mdfmt list` for commands or `mdfmt help <name>` for "
            "details.",
            "",
            format_command_table(),
        ]
    )


def _emit(text: str, stream: Optional[TextIO] = None) -> None:
    (stream or sys.stdout).write(text + "\n")


def _unknown(command: str) -> int:
    _emit(f"Unknown command '{command}'.", sys.stderr)
    _emit(format_command_table(), sys.stderr)
    return 2


def _version(_argv: Sequence[str]) -> int:
    try:
        _emit(metadata.version("markdown-formatter"))
    except metadata.PackageNotFoundError:
        _emit("unknown")
    return 0


def _usage(_argv: Sequence[str]) -> int:
    _emit(format_usage())
    return 0


def _list(_argv: Sequence[str]) -> int:
    _emit(format_command_table())
    return 0


def _help(argv: Sequence[str]) -> int:
    if not argv:
        return _usage(argv)
    spec = COMMANDS.get(argv[0])
    if spec is None:
        return _unknown(argv[0])
    _emit(f"{spec.name}: {spec.summary}")
    _emit(f"Run `{spec.prog} --help` for CLI-specific options.")
    return 0


_BUILTINS: Dict[str, Callable[[Sequence[str]], int]] = {
    "-h": _usage,
    "--help": _usage,
    "-V": _version,
    "--version": _version,
    "version": _version,
    "list": _list,
    "help": _help,
}


def main(argv: Optional[Sequence[str]] = None) -> int:
    args: List[str] = list(sys.argv[1:] if argv is None else argv)
    if not args:
        _usage(args)
        return 2

    head, tail = args[0], args[1:]
    if head in _BUILTINS:
        return _BUILTINS[head](tail)
    if head in COMMANDS:
        return COMMANDS[head].run(tail)
    return _unknown(head)


def _invoke_main(
    func: Callable[[List[str]], object], prog: str, argv: Sequence[str]
) -> int:
    """Call a subcommand ``main`` with ``sys.argv`` set for argparse."""

    args = list(argv)
    saved = sys.argv
    sys.argv = [prog, *args]
    try:
        result = func(args)
    except SystemExit as exc:
        return _exit_status(exc.code)
    finally:
        sys.argv = saved
    return result if isinstance(result, int) else 0


def _exit_status(code: object) -> int:
    if code is None:
        return 0
    if isinstance(code, int):
        return code
    if isinstance(code, str):
        _emit(code, sys.stderr)
    return 1


if __name__ == "__main__":  # pragma: no cover - manual invocation guard
    raise SystemExit(main())
