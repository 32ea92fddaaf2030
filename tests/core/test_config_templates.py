from __future__ import annotations

from pathlib import Path

import pytest

from markdown_formatter.core import config_templates
from markdown_formatter.core.config_templates import (
    ConfigTemplate,
    ConfigTemplateError,
)
from markdown_formatter.core.workspace import ensure_workspace


def test_get_template_returns_convert_template(tmp_path: Path) -> None:
    template = config_templates.get_template("convert")
    assert isinstance(template, ConfigTemplate)

    contents = template.read_text()
    assert "[execution]" in contents
    assert "formats" in contents

    target = tmp_path / "formatter.toml"
    written = template.write(target)
    assert written == target
    assert target.read_text(encoding="utf-8") == contents

    with pytest.raises(ConfigTemplateError):
        template.write(target)

    updated = template.write(target, overwrite=True)
    assert updated == target


def test_iter_templates_returns_registered_templates() -> None:
    names = {template.name for template in config_templates.iter_templates()}
    assert "convert" in names


@pytest.mark.parametrize("unknown", ["missing", "", "render"])
def test_get_template_unknown_raises(unknown: str) -> None:
    with pytest.raises(ConfigTemplateError):
        config_templates.get_template(unknown)


def test_default_path_targets_workspace_config_dir(tmp_path: Path) -> None:
    layout = ensure_workspace(path=tmp_path / "ws")

    target = config_templates.get_template("convert").default_path(layout)

    assert target == layout.path_for("config") / "formatter.toml"
