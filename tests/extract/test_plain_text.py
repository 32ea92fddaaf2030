from __future__ import annotations

import pytest

from markdown_formatter.extract.plain_text import strip_markdown


def test_strip_markdown_empty():
    assert strip_markdown("") == ""


def test_strip_markdown_headings_and_emphasis():
    text = "# Title\n\n**bold** and *italic*"

    assert strip_markdown(text) == "Title\n\nbold and italic"


def test_strip_markdown_links_and_images():
    text = "[site](http://example.com) and ![alt](img.png)"

    assert strip_markdown(text) == "site and alt"


def test_strip_markdown_unwraps_fenced_code():
    assert strip_markdown("```python\nprint('hi')\n```") == "print('hi')"


def test_strip_markdown_table_keeps_cell_text():
    result = strip_markdown("| A | B |\n|---|---|\n| 1 | 2 |")

    assert "|" not in result
    assert "---" not in result
    assert result.split() == ["A", "B", "1", "2"]


@pytest.mark.parametrize(
    ("source", "expected"),
    [
        ("> quoted *text*", "quoted text"),
        ("~~old~~ `code` $x$", "old code x"),
        ("- [ ] task", "- task"),
        ("note[^1] here", "note here"),
        ("## Anchored {#intro}", "Anchored"),
        ("H~2~O and x^2^", "H2O and x2"),
        ("a <b>bold</b> tag", "a bold tag"),
        ("a \\# literal", "a # literal"),
        ("Setext\n======", "Setext"),
    ],
)
def test_strip_markdown_inline_constructs(source, expected):
    assert strip_markdown(source) == expected


def test_strip_markdown_collapses_blank_runs():
    assert strip_markdown("one\n\n\n\n\ntwo") == "one\n\ntwo"


@pytest.mark.parametrize(
    "source",
    [
        "# Title\n\n**bold** and *italic*",
        "***nested **emphasis** here***",
        "| a | **b** |\n|---|---|\n| `c` | ~~d~~ |",
        "> > deep *quote*\n\n---\n\ntext",
        "```\ncode **kept**\n```\n\n_tail_",
        "****x****",
        "\\\\*literal\\\\*",
    ],
)
def test_strip_markdown_is_idempotent(source):
    once = strip_markdown(source)

    assert strip_markdown(once) == once
