"""Settings for `mdfmt convert`.

Every setting lives in one ``formatter.toml`` table and can be overridden by
an ``MDFMT_*`` environment variable and then by a command-line flag. Values
are validated once, after the winning source has been picked.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, fields
from enum import Enum
from pathlib import Path
from typing import Any, Callable, Dict, Mapping, Optional, Sequence

from markdown_formatter.core import config as core_config
from markdown_formatter.core import workspace as workspace_mod
from markdown_formatter.exports.errors import UnsupportedFormatError
from markdown_formatter.exports.registry import normalize_format
from markdown_formatter.rendering.document_tree import NumberingPolicy

CONFIG_FILENAME = "formatter.toml"
CONFIG_ENV = "MDFMT_CONFIG"
ENV_PREFIX = "MDFMT_"


class ConvertConfigError(RuntimeError):
    """Raised when a conversion setting is missing, unknown or malformed."""


class CollisionPolicy(Enum):
    """What to do when the output file for a source already exists."""

    SKIP = "skip"
    OVERWRITE = "overwrite"
    VERSION = "version"

    @classmethod
    def from_value(cls, value: str) -> "CollisionPolicy":
        try:
            return cls(value.strip().lower())
        except ValueError:
            expected = ", ".join(member.value for member in cls)
            raise ConvertConfigError(
                f"Unknown collision policy '{value}'. "
                f"Expected one of: {expected}."
            ) from None


@dataclass(frozen=True)
class ConvertConfig:
    formats: tuple[str, ...]
    output_dir: Path
    collision: CollisionPolicy
    numbering: NumberingPolicy
    title: Optional[str]
    log_level: str


@dataclass(frozen=True)
class ConfigOverrides:
    """Values taken from command-line flags; ``None`` means not given."""

    formats: Optional[Sequence[str]] = None
    output_dir: Optional[Path] = None
    collision: Optional[CollisionPolicy] = None
    numbering: Optional[NumberingPolicy] = None
    title: Optional[str] = None
    log_level: Optional[str] = None


@dataclass(frozen=True)
class LoadResult:
    config: ConvertConfig
    layout: workspace_mod.WorkspaceLayout
    config_path: Optional[Path]


def _coerce_output_dir(value: object) -> Optional[Path]:
    if value is None or isinstance(value, Path):
        return value
    if isinstance(value, str):
        return Path(value.strip()).expanduser() if value.strip() else None
    raise ConvertConfigError("paths.output_dir must be a string.")


def _coerce_formats(value: object) -> tuple[str, ...]:
    if isinstance(value, str) or not isinstance(value, (list, tuple)):
        raise ConvertConfigError(
            "execution.formats must be a list of format names."
        )
    result: list[str] = []
    for item in value:
        if not isinstance(item, str) or not item.strip():
            raise ConvertConfigError("Formats must be non-empty strings.")
        try:
            name = normalize_format(item)
        except UnsupportedFormatError as exc:
            raise ConvertConfigError(str(exc)) from exc
        if name not in result:
            result.append(name)
    if not result:
        raise ConvertConfigError("At least one format must be configured.")
    return tuple(result)


def _coerce_collision(value: object) -> CollisionPolicy:
    if isinstance(value, CollisionPolicy):
        return value
    if isinstance(value, str):
        return CollisionPolicy.from_value(value)
    raise ConvertConfigError("execution.collision must be a string.")


def _coerce_numbering(value: object) -> NumberingPolicy:
    if isinstance(value, NumberingPolicy):
        return value
    if not isinstance(value, str):
        raise ConvertConfigError("rendering.numbering must be a string.")
    try:
        return NumberingPolicy.from_value(value)
    except ValueError as exc:
        raise ConvertConfigError(str(exc)) from exc


def _coerce_title(value: object) -> Optional[str]:
    if value is None:
        return None
    if not isinstance(value, str):
        raise ConvertConfigError("rendering.title must be a string.")
    return value.strip() or None


def _coerce_log_level(value: object) -> str:
    if not isinstance(value, str) or not value.strip():
        raise ConvertConfigError(
            "logging.level must be a non-empty string."
        )
    return value.strip().upper()


def _split_list(raw: str) -> list[str]:
    return raw.replace(",", " ").split()


@dataclass(frozen=True)
class _Setting:
    table: str
    key: str
    default: Any
    coerce: Callable[[object], Any]
    from_env: Callable[[str], Any] = str


# Keyed by ConvertConfig field name; the env variable is MDFMT_<FIELD>.
_SETTINGS: Dict[str, _Setting] = {
    "formats": _Setting(
        "execution",
        "formats",
        ("docx", "html", "txt"),
        _coerce_formats,
        from_env=_split_list,
    ),
    "output_dir": _Setting("paths", "output_dir", None, _coerce_output_dir),
    "collision": _Setting(
        "execution", "collision", "skip", _coerce_collision
    ),
    "numbering": _Setting(
        "rendering",
        "numbering",
        NumberingPolicy.SHARED.value,
        _coerce_numbering,
    ),
    "title": _Setting("rendering", "title", None, _coerce_title),
    "log_level": _Setting("logging", "level", "INFO", _coerce_log_level),
}


def load_config(
    *,
    config_path: Optional[Path] = None,
    overrides: Optional[ConfigOverrides] = None,
    env: Optional[Mapping[str, str]] = None,
    workspace_path: Optional[Path] = None,
) -> LoadResult:
    """Resolve settings with precedence flags > environment > TOML > defaults.

    A missing default ``formatter.toml`` is fine; a missing file named by
    ``config_path`` or ``MDFMT_CONFIG`` is an error.
    """

    overrides = overrides or ConfigOverrides()
    env_map = os.environ if env is None else env
    layout = workspace_mod.ensure_workspace(env=env_map, path=workspace_path)

    explicit = (
        config_path.expanduser()
        if config_path is not None
        else _env_path(env_map, CONFIG_ENV)
    )
    target = explicit or layout.path_for("config") / CONFIG_FILENAME

    table = _default_table()
    loaded_path: Optional[Path] = None
    if target.exists():
        try:
            core_config.merge_defaults(table, core_config.load_toml(target))
        except core_config.TomlConfigError as exc:
            raise ConvertConfigError(str(exc)) from exc
        loaded_path = target
    elif explicit is not None:
        raise ConvertConfigError(f"Config file not found: {target}")

    values: Dict[str, Any] = {}
    for field in fields(ConvertConfig):
        setting = _SETTINGS[field.name]
        raw_env = _env_string(env_map, ENV_PREFIX + field.name.upper())
        candidates = (
            getattr(overrides, field.name),
            None if raw_env is None else setting.from_env(raw_env),
            table[setting.table][setting.key],
        )
        chosen = next((c for c in candidates if c is not None), None)
        values[field.name] = setting.coerce(chosen)

    values["output_dir"] = _anchor(values["output_dir"], layout)
    return LoadResult(
        config=ConvertConfig(**values),
        layout=layout,
        config_path=loaded_path,
    )


def _default_table() -> Dict[str, Dict[str, Any]]:
    table: Dict[str, Dict[str, Any]] = {}
    for setting in _SETTINGS.values():
        default = setting.default
        if isinstance(default, tuple):
            default = list(default)
        table.setdefault(setting.table, {})[setting.key] = default
    return table


def _anchor(
    output_dir: Optional[Path], layout: workspace_mod.WorkspaceLayout
) -> Path:
    if output_dir is None:
        return layout.path_for("exports")
    if not output_dir.is_absolute():
        output_dir = layout.home / output_dir
    return output_dir.resolve()


def _env_string(env_map: Mapping[str, str], name: str) -> Optional[str]:
    value = (env_map.get(name) or "").strip()
    return value or None


def _env_path(env_map: Mapping[str, str], name: str) -> Optional[Path]:
    value = _env_string(env_map, name)
    return None if value is None else Path(value).expanduser()
