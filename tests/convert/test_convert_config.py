from __future__ import annotations

from pathlib import Path

import pytest

from markdown_formatter.convert import config as cfg
from markdown_formatter.rendering.document_tree import NumberingPolicy


def _write_config(workspace_root: Path, body: str) -> Path:
    config_dir = workspace_root / "config"
    config_dir.mkdir(parents=True, exist_ok=True)
    config_file = config_dir / cfg.CONFIG_FILENAME
    config_file.write_text(body.strip() + "\n", encoding="utf-8")
    return config_file


def test_load_config_defaults_use_workspace(tmp_path):
    workspace_root = tmp_path / "workspace"

    result = cfg.load_config(env={}, workspace_path=workspace_root)

    assert result.layout.home == workspace_root.resolve()
    assert result.config_path is None
    assert result.config.output_dir == result.layout.path_for("exports")
    assert result.config.formats == ("docx", "html", "txt")
    assert result.config.collision is cfg.CollisionPolicy.SKIP
    assert result.config.numbering is NumberingPolicy.SHARED
    assert result.config.title is None
    assert result.config.log_level == "INFO"


def test_load_config_reads_config_file(tmp_path):
    workspace_root = tmp_path / "ws"
    config_file = _write_config(
        workspace_root,
        """
        [paths]
        output_dir = "custom"

        [execution]
        formats = ["PDF", ".tex", "docx", "pdf"]
        collision = "version"

        [rendering]
        numbering = "restart"
        title = "  Notes  "

        [logging]
        level = "warning"
        """,
    )

    result = cfg.load_config(
        config_path=config_file,
        env={},
        workspace_path=workspace_root,
    )

    assert result.config_path == config_file
    assert result.config.output_dir == (workspace_root / "custom").resolve()
    assert result.config.formats == ("pdf", "latex", "docx")
    assert result.config.collision is cfg.CollisionPolicy.VERSION
    assert result.config.numbering is NumberingPolicy.RESTART
    assert result.config.title == "Notes"
    assert result.config.log_level == "WARNING"


def test_load_config_default_path_is_picked_up(tmp_path):
    workspace_root = tmp_path / "auto"
    config_file = _write_config(
        workspace_root,
        """
        [execution]
        formats = ["csv"]
        """,
    )

    result = cfg.load_config(env={}, workspace_path=workspace_root)

    assert result.config_path == config_file
    assert result.config.formats == ("csv",)


def test_load_config_env_overrides_file(tmp_path):
    workspace_root = tmp_path / "env-ws"
    config_file = _write_config(
        workspace_root,
        """
        [paths]
        output_dir = "file-out"

        [execution]
        formats = ["pdf"]
        collision = "skip"

        [logging]
        level = "info"
        """,
    )
    env_output = tmp_path / "env-out"
    env = {
        cfg.CONFIG_ENV: str(config_file),
        "MDFMT_OUTPUT_DIR": str(env_output),
        "MDFMT_FORMATS": "csv, json",
        "MDFMT_COLLISION": "overwrite",
        "MDFMT_NUMBERING": "restart",
        "MDFMT_TITLE": "From env",
        "MDFMT_LOG_LEVEL": "debug",
    }

    result = cfg.load_config(env=env, workspace_path=workspace_root)

    assert result.config_path == config_file
    assert result.config.output_dir == env_output.resolve()
    assert result.config.formats == ("csv", "json")
    assert result.config.collision is cfg.CollisionPolicy.OVERWRITE
    assert result.config.numbering is NumberingPolicy.RESTART
    assert result.config.title == "From env"
    assert result.config.log_level == "DEBUG"


def test_load_config_overrides_beat_env(tmp_path):
    workspace_root = tmp_path / "override-ws"
    env = {
        "MDFMT_FORMATS": "csv",
        "MDFMT_COLLISION": "overwrite",
        "MDFMT_NUMBERING": "restart",
        "MDFMT_LOG_LEVEL": "debug",
    }
    overrides = cfg.ConfigOverrides(
        formats=["rtf"],
        output_dir=Path("relative-out"),
        collision=cfg.CollisionPolicy.VERSION,
        numbering=NumberingPolicy.SHARED,
        title="CLI title",
        log_level="error",
    )

    result = cfg.load_config(
        overrides=overrides, env=env, workspace_path=workspace_root
    )

    assert result.config.formats == ("rtf",)
    expected_output = (workspace_root.resolve() / "relative-out").resolve()
    assert result.config.output_dir == expected_output
    assert result.config.collision is cfg.CollisionPolicy.VERSION
    assert result.config.numbering is NumberingPolicy.SHARED
    assert result.config.title == "CLI title"
    assert result.config.log_level == "ERROR"


def test_load_config_missing_explicit_file(tmp_path):
    with pytest.raises(cfg.ConvertConfigError, match="not found"):
        cfg.load_config(
            config_path=tmp_path / "missing.toml",
            env={},
            workspace_path=tmp_path / "ws",
        )


def test_load_config_missing_env_file(tmp_path):
    env = {cfg.CONFIG_ENV: str(tmp_path / "nope.toml")}

    with pytest.raises(cfg.ConvertConfigError):
        cfg.load_config(env=env, workspace_path=tmp_path / "ws")


@pytest.mark.parametrize(
    "body",
    [
        "[execution]\nunknown = 1\n",
        "[execution]\nformats = [\"odt\"]\n",
        "[execution]\nformats = []\n",
        "[execution]\nformats = \"docx\"\n",
        "[execution]\ncollision = \"sometimes\"\n",
        "[rendering]\nnumbering = \"sometimes\"\n",
        "[rendering]\ntitle = 3\n",
        "[logging]\nlevel = \"\"\n",
        "paths = 1\n",
        "[paths\n",
    ],
)
def test_load_config_rejects_invalid_files(tmp_path, body):
    workspace_root = tmp_path / "bad"
    config_file = _write_config(workspace_root, body)

    with pytest.raises(cfg.ConvertConfigError):
        cfg.load_config(
            config_path=config_file, env={}, workspace_path=workspace_root
        )


def test_collision_policy_from_value():
    assert cfg.CollisionPolicy.from_value(" Version ") is (
        cfg.CollisionPolicy.VERSION
    )
    with pytest.raises(cfg.ConvertConfigError):
        cfg.CollisionPolicy.from_value("merge")
