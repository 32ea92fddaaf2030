from __future__ import annotations

from markdown_formatter.exports import cli


def test_formats_lists_every_registered_format(capsys):
    code = cli.main([])

    lines = capsys.readouterr().out.splitlines()
    assert code == 0
    assert lines[0] == "Available formats:"
    assert len(lines) == 12
    latex = next(line for line in lines if line.strip().startswith("latex"))
    assert ".tex" in latex
    assert "text" in latex
    docx = next(line for line in lines if line.strip().startswith("docx"))
    assert "binary" in docx
