import sys
import types

import pytest

from markdown_formatter import cli


@pytest.fixture(autouse=True)
def reset_metadata(monkeypatch):
    """Ensure metadata.version is controllable during tests."""

    def fake_version(name: str) -> str:
        assert name == "markdown-formatter"
        return "0.0-test"

    monkeypatch.setattr(cli.metadata, "version", fake_version)
    yield


def test_version_command_handles_missing_package(monkeypatch, capsys):
    monkeypatch.setattr(
        cli.metadata,
        "version",
        lambda name: (_ for _ in ()).throw(cli.metadata.PackageNotFoundError()),
    )
    code = cli.main(["version"])
    captured = capsys.readouterr()
    assert code == 0
    assert captured.out.strip() == "unknown"


def test_no_args_prints_usage_and_returns_error(capsys):
    code = cli.main([])
    captured = capsys.readouterr()
    assert code == 2
    assert "Usage: mdfmt" in captured.out
    assert "Available commands:" in captured.out


@pytest.mark.parametrize("argv", [["--help"], ["-h"], ["help"]])
def test_help_shows_usage(argv, capsys):
    code = cli.main(argv)
    captured = capsys.readouterr()
    assert code == 0
    assert "Usage: mdfmt" in captured.out


def test_list_outputs_command_table(capsys):
    code = cli.main(["list"])
    captured = capsys.readouterr()
    assert code == 0
    assert "Available commands:" in captured.out
    for name in ("init", "render", "convert", "formats"):
        assert name in captured.out


def test_help_known_command(capsys):
    code = cli.main(["help", "render"])
    captured = capsys.readouterr()
    assert code == 0
    assert "render: Render one Markdown document" in captured.out
    assert "Run `mdfmt render --help`" in captured.out


def test_help_unknown_command(capsys):
    code = cli.main(["help", "does-not-exist"])
    captured = capsys.readouterr()
    assert code == 2
    assert "Unknown command" in captured.err
    assert "Available commands:" in captured.err


@pytest.mark.parametrize("argv", [["version"], ["--version"], ["-V"]])
def test_version_variants(argv, capsys):
    code = cli.main(argv)
    captured = capsys.readouterr()
    assert code == 0
    assert captured.out.strip() == "0.0-test"


def test_unknown_command_errors(capsys):
    code = cli.main(["bogus"])
    captured = capsys.readouterr()
    assert code == 2
    assert "Unknown command" in captured.err


def test_dispatch_invokes_module_main_with_passthrough(monkeypatch):
    before = list(sys.argv)
    captured: dict[str, list[str]] = {}

    def fake_import(module_name: str):
        assert module_name == "markdown_formatter.convert.render_cli"

        def stub_main(argv):
            captured["argv"] = list(argv)
            captured["sys_argv"] = list(sys.argv)
            return 7

        return types.SimpleNamespace(main=stub_main)

    monkeypatch.setattr(cli, "import_module", fake_import)
    code = cli.main(["render", "-f", "txt"])
    assert code == 7
    assert captured["argv"] == ["-f", "txt"]
    assert captured["sys_argv"] == ["mdfmt render", "-f", "txt"]
    assert list(sys.argv) == before


def test_dispatch_propagates_system_exit_code(monkeypatch):
    def fake_import(module_name: str):
        def stub_main(argv):
            raise SystemExit(5)

        return types.SimpleNamespace(main=stub_main)

    monkeypatch.setattr(cli, "import_module", fake_import)
    assert cli.main(["convert"]) == 5


def test_dispatch_handles_system_exit_message(monkeypatch, capsys):
    def fake_import(module_name: str):
        def stub_main(argv):
            raise SystemExit("boom")

        return types.SimpleNamespace(main=stub_main)

    monkeypatch.setattr(cli, "import_module", fake_import)
    code = cli.main(["convert"])
    captured = capsys.readouterr()
    assert code == 1
    assert captured.err.strip() == "boom"


def test_dispatch_treats_system_exit_none_as_success(monkeypatch):
    def fake_import(module_name: str):
        def stub_main(argv):
            raise SystemExit()

        return types.SimpleNamespace(main=stub_main)

    monkeypatch.setattr(cli, "import_module", fake_import)
    assert cli.main(["init"]) == 0


def test_dispatch_normalizes_non_int_return(monkeypatch):
    def fake_import(module_name: str):
        def stub_main(argv):
            return "done"

        return types.SimpleNamespace(main=stub_main)

    monkeypatch.setattr(cli, "import_module", fake_import)
    assert cli.main(["formats"]) == 0


def test_formats_command_runs_real_module(capsys):
    code = cli.main(["formats"])
    captured = capsys.readouterr()
    assert code == 0
    assert "Available formats:" in captured.out


def test_render_argparse_error_becomes_exit_code(capsys):
    code = cli.main(["render"])
    captured = capsys.readouterr()
    assert code == 2
    assert "--format" in captured.err


def test_init_command_creates_workspace(tmp_path, capsys):
    target = tmp_path / "home"

    code = cli.main(["init", "--path", str(target)])

    assert code == 0
    assert (target / "exports").is_dir()
    assert "Workspace ready" in capsys.readouterr().out
