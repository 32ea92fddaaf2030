from __future__ import annotations

from markdown_formatter.exports.harmonize import harmonize_markdown


def test_harmonize_uses_dash_bullets():
    assert harmonize_markdown("* a\n* b\n") == "- a\n- b\n"


def test_harmonize_increments_ordered_list_numbers():
    assert harmonize_markdown("1. one\n1. two\n1. three\n") == (
        "1. one\n2. two\n3. three\n"
    )


def test_harmonize_fences_code_with_backticks():
    assert harmonize_markdown("~~~\ncode\n~~~\n") == "```\ncode\n```\n"


def test_harmonize_keeps_tables_as_tables():
    result = harmonize_markdown("| a | b |\n|-|-|\n| 1 | 2 |\n")

    assert "| --- | --- |" in result
    assert result.count("\n") == 3
