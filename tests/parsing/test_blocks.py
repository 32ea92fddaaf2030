from __future__ import annotations

import pytest

from markdown_formatter.parsing.blocks import (
    Blank,
    BlockKind,
    Blockquote,
    CodeFence,
    Heading,
    HorizontalRule,
    ListItem,
    Paragraph,
    TableRowGroup,
    segment,
)


def test_segment_empty_text_returns_no_blocks():
    assert segment("") == []


def test_segment_atx_heading_blank_and_paragraph():
    blocks = segment("# Title\n\nBody text")

    assert blocks == [
        Heading(level=1, text="Title"),
        Blank(),
        Paragraph(text="Body text"),
    ]


@pytest.mark.parametrize(
    ("source", "level", "text"),
    [
        ("## Second", 2, "Second"),
        ("### Third ###", 3, "Third"),
        ("#### Fourth", 4, "Fourth"),
    ],
)
def test_segment_atx_heading_levels(source, level, text):
    assert segment(source) == [Heading(level=level, text=text)]


def test_segment_deep_heading_degrades_to_paragraph():
    assert segment("##### too deep") == [Paragraph(text="##### too deep")]


def test_segment_setext_headings_consume_underline():
    blocks = segment("Title\n=====\nSub\n---\nafter")

    assert blocks == [
        Heading(level=1, text="Title"),
        Heading(level=2, text="Sub"),
        Paragraph(text="after"),
    ]


@pytest.mark.parametrize("rule", ["---", "***", "* * *", "___"])
def test_segment_horizontal_rules(rule):
    blocks = segment(f"before\n\n{rule}")

    assert blocks[-1] == HorizontalRule()
    assert blocks[-1].kind is BlockKind.HORIZONTAL_RULE


def test_segment_code_fence_keeps_content_verbatim():
    blocks = segment("```python\nx = 1\n# not a heading\n```\nafter")

    assert blocks == [
        CodeFence(lines=("x = 1", "# not a heading"), language="python"),
        Paragraph(text="after"),
    ]
    assert blocks[0].content == "x = 1\n# not a heading"


def test_segment_unterminated_fence_runs_to_end_of_input():
    blocks = segment("```\ncode line\n- not a list")

    assert len(blocks) == 1
    fence = blocks[0]
    assert isinstance(fence, CodeFence)
    assert fence.lines == ("code line", "- not a list")
    assert fence.closed is False


def test_segment_pipe_table_is_one_group():
    blocks = segment("| A | B |\n|---|---|\n| 1 | 2 |\n\nafter")

    group = blocks[0]
    assert isinstance(group, TableRowGroup)
    assert len(group.lines) == 3
    assert group.table.headers == ["A", "B"]
    assert group.table.rows == [["1", "2"]]
    assert blocks[1:] == [Blank(), Paragraph(text="after")]


def test_segment_pipe_lines_without_separator_become_paragraphs():
    blocks = segment("| just | text |\nnext | line")

    assert blocks == [
        Paragraph(text="| just | text |"),
        Paragraph(text="next | line"),
    ]


def test_segment_blockquote_depth():
    blocks = segment("> one\n> > two\n>>> three")

    assert blocks == [
        Blockquote(depth=1, text="one"),
        Blockquote(depth=2, text="two"),
        Blockquote(depth=3, text="three"),
    ]


def test_segment_list_items_and_indent_levels():
    blocks = segment("- item\n    - nested\n1. first\n  2. second\n\t+ tabbed")

    assert blocks == [
        ListItem(ordered=False, indent=0, text="item"),
        ListItem(ordered=False, indent=1, text="nested"),
        ListItem(ordered=True, indent=0, text="first", ordinal="1."),
        ListItem(ordered=True, indent=0, text="second", ordinal="2."),
        ListItem(ordered=False, indent=1, text="tabbed"),
    ]


def test_segment_hard_break_marks_paragraph():
    blocks = segment("line one  \nline two")

    assert blocks == [
        Paragraph(text="line one", hard_break=True),
        Paragraph(text="line two", hard_break=False),
    ]


def test_segment_normalizes_carriage_returns():
    assert segment("a\r\nb\rc") == [
        Paragraph(text="a"),
        Paragraph(text="b"),
        Paragraph(text="c"),
    ]


def test_segment_preserves_source_order():
    text = "# H\n> quote\n- item\nplain\n```\ncode\n```\n---"

    kinds = [block.kind for block in segment(text)]

    assert kinds == [
        BlockKind.HEADING,
        BlockKind.BLOCKQUOTE,
        BlockKind.LIST_ITEM,
        BlockKind.PARAGRAPH,
        BlockKind.CODE_FENCE,
        BlockKind.HORIZONTAL_RULE,
    ]
