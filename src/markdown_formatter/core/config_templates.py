"""TOML templates shipped with markdown-formatter."""

from __future__ import annotations

from dataclasses import dataclass
from importlib import resources
from pathlib import Path
from typing import Iterable

from .config import TomlConfigError, write_toml_template
from .workspace import WorkspaceLayout

__all__ = [
    "ConfigTemplate",
    "ConfigTemplateError",
    "get_template",
    "iter_templates",
]


class ConfigTemplateError(RuntimeError):
    """Raised for unknown templates or templates that cannot be written."""


@dataclass(frozen=True)
class ConfigTemplate:
    """A packaged TOML file and the name it takes inside a workspace."""

    name: str
    package: str
    resource: str
    target_name: str
    description: str

    def read_text(self) -> str:
        source = resources.files(self.package).joinpath(self.resource)
        try:
            return source.read_text(encoding="utf-8")
        except FileNotFoundError as exc:  # pragma: no cover - package state
            raise ConfigTemplateError(
                f"Template '{self.name}' is missing {self.resource} "
                f"in {self.package}."
            ) from exc

    def default_path(self, layout: WorkspaceLayout) -> Path:
        return layout.path_for("config") / self.target_name

    def write(
        self, path: Path, *, overwrite: bool = False, mode: int = 0o600
    ) -> Path:
        try:
            return write_toml_template(
                path, template=self.read_text(), overwrite=overwrite, mode=mode
            )
        except TomlConfigError as exc:
            raise ConfigTemplateError(str(exc)) from exc


_REGISTRY = {
    template.name: template
    for template in (
        ConfigTemplate(
            name="convert",
            package="markdown_formatter.convert",
            resource="template.toml",
            target_name="formatter.toml",
            description="Defaults for `mdfmt convert` batch runs.",
        ),
    )
}


def get_template(name: str) -> ConfigTemplate:
    if name not in _REGISTRY:
        known = ", ".join(sorted(_REGISTRY))
        raise ConfigTemplateError(
            f"Unknown config template '{name}' (known: {known})."
        )
    return _REGISTRY[name]


def iter_templates() -> Iterable[ConfigTemplate]:
    return tuple(_REGISTRY.values())
