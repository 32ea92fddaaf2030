"""Reading, merging and writing ``formatter.toml`` style TOML files."""

from __future__ import annotations

import tomllib
from pathlib import Path
from typing import Any, Mapping, MutableMapping

__all__ = [
    "TomlConfigError",
    "load_toml",
    "merge_defaults",
    "write_toml_template",
]


class TomlConfigError(RuntimeError):
    """A TOML file could not be read, parsed, merged or written."""


def load_toml(path: Path) -> Mapping[str, Any]:
    """Parse the TOML document at ``path``.

    Missing files, undecodable bytes and syntax errors all surface as
    :class:`TomlConfigError`; command-level config loaders re-wrap it.
    """

    try:
        raw = path.read_bytes()
    except FileNotFoundError as exc:
        raise TomlConfigError(f"Config file not found: {path}") from exc
    try:
        return tomllib.loads(raw.decode("utf-8"))
    except (UnicodeDecodeError, tomllib.TOMLDecodeError) as exc:
        raise TomlConfigError(
            f"Failed to parse config TOML {path}: {exc}"
        ) from exc


def merge_defaults(
    base: MutableMapping[str, Any],
    override: Mapping[str, Any],
    *,
    path: str = "",
) -> None:
    """Overlay ``override`` onto ``base`` in place.

    Only keys already present in ``base`` are accepted, and a table in
    ``base`` may only be replaced by another table.
    """

    for key, value in override.items():
        dotted = path + key
        if key not in base:
            raise TomlConfigError(f"Unknown configuration key '{dotted}'.")
        current = base[key]
        if not isinstance(current, MutableMapping):
            base[key] = value
        elif isinstance(value, Mapping):
            merge_defaults(current, value, path=dotted + ".")
        else:
            raise TomlConfigError(
                f"Expected table for '{dotted}', "
                f"found {type(value).__name__}."
            )


def write_toml_template(
    path: Path,
    *,
    template: str,
    overwrite: bool = False,
    mode: int = 0o600,
) -> Path:
    """Write a TOML ``template`` to ``path`` and return the path.

    The template must parse; an existing file is kept unless ``overwrite``.
    """

    if path.exists() and not overwrite:
        raise TomlConfigError(f"Config already exists: {path}")
    try:
        tomllib.loads(template)
    except tomllib.TOMLDecodeError as exc:
        raise TomlConfigError(f"Template is not valid TOML: {exc}") from exc

    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(template, encoding="utf-8")
    try:
        path.chmod(mode)
    except PermissionError:  # pragma: no cover - depends on filesystem
        pass
    return path
