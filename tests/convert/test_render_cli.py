from __future__ import annotations

import io
import json

import pytest

from markdown_formatter.convert import render_cli


def test_render_reads_stdin_and_prints_text(monkeypatch, capsys):
    monkeypatch.setattr("sys.stdin", io.StringIO("# Hi\n\n**b**"))

    code = render_cli.main(["-f", "txt"])

    assert code == 0
    assert capsys.readouterr().out == "Hi\n\nb\n"


def test_render_md_harmonize_flag(monkeypatch, capsys):
    monkeypatch.setattr("sys.stdin", io.StringIO("* a\n* b\n"))

    code = render_cli.main(["-f", "md", "--harmonize"])

    assert code == 0
    assert capsys.readouterr().out == "- a\n- b\n"


def test_render_file_to_latex(workspace, capsys):
    source = workspace.markdown("doc.md", "# Title\n\nSome *text*.")

    code = render_cli.main([str(source), "--format", "tex"])

    out = capsys.readouterr().out
    assert code == 0
    assert "\\section{Title}" in out
    assert "\\textit{text}" in out


def test_render_binary_without_output_prints_summary(workspace, capsys):
    source = workspace.markdown("doc.md", "# Title")

    code = render_cli.main([str(source), "-f", "docx"])

    payload = json.loads(capsys.readouterr().out)
    assert code == 0
    assert payload["format"] == "docx"
    assert payload["description"] == "DOCX document"
    assert payload["base64_preview"].endswith("...")


def test_render_with_output_saves_file(workspace, tmp_path, capsys):
    source = workspace.markdown("doc.md", "1. a\n\ntext\n\n1. b")
    target = tmp_path / "out" / "doc.docx"

    code = render_cli.main(
        [
            str(source),
            "-f",
            "docx",
            "-o",
            str(target),
            "--numbering",
            "restart",
        ]
    )

    payload = json.loads(capsys.readouterr().out)
    assert code == 0
    assert payload["saved"] is True
    assert payload["path"] == str(target)
    assert target.read_bytes().startswith(b"PK")


def test_render_rejects_unknown_format(capsys):
    with pytest.raises(SystemExit) as excinfo:
        render_cli.main(["-f", "odt"])

    assert excinfo.value.code == 2
    assert "Unsupported format" in capsys.readouterr().err


def test_render_empty_input_fails(monkeypatch, capsys):
    monkeypatch.setattr("sys.stdin", io.StringIO(""))

    code = render_cli.main(["-f", "txt"])

    assert code == 1
    assert "No Markdown text" in capsys.readouterr().err


def test_render_missing_file_fails(tmp_path, capsys):
    code = render_cli.main([str(tmp_path / "absent.md"), "-f", "txt"])

    assert code == 1
    assert "Failed to read" in capsys.readouterr().err
