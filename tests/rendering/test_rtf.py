from __future__ import annotations

import re

import pytest

from markdown_formatter.exports.documents import rtf_document
from markdown_formatter.rendering.rtf import encode_rtf_text, render_rtf

_ESCAPED_RE = re.compile(r"\\[\\{}]")


def _unescaped_braces(text: str) -> tuple[int, int]:
    bare = _ESCAPED_RE.sub("", text)
    return bare.count("{"), bare.count("}")


@pytest.mark.parametrize(
    ("text", "expected"),
    [
        ("plain", "plain"),
        ("a{b}\\", "a\\{b\\}\\\\"),
        ("é", "\\u233?"),
        ("\ufffd", "\\u-3?"),
        ("\U0001F600", "\\u-10179?\\u-8704?"),
    ],
)
def test_encode_rtf_text(text, expected):
    assert encode_rtf_text(text) == expected


def test_render_rtf_heading():
    assert render_rtf("# Head") == "{\\pard\\b\\fs40\\sb400\\sa200 Head\\par}\n"


def test_render_rtf_paragraph_with_spans():
    result = render_rtf("**b** *i* `c` ~~s~~ $m$")

    assert result == (
        "{\\pard\\sa150 {\\b b} {\\i i} {\\f1\\highlight3 c} "
        "{\\strike s} {\\i\\cf4\\f2 m}\\par}\n"
    )


def test_render_rtf_list_items():
    result = render_rtf("- x\n    - y\n3. z")

    assert result.splitlines() == [
        "{\\pard\\li360\\fi-360 \\'b7\\tab x\\par}",
        "{\\pard\\li720\\fi-360 \\'b7\\tab y\\par}",
        "{\\pard\\li360\\fi-360 3.\\tab z\\par}",
    ]


def test_render_rtf_table_rows():
    result = render_rtf("| A | B |\n|---|---|\n| 1 | 2 |")

    rows = [line for line in result.splitlines() if line.startswith("\\trowd")]
    assert len(rows) == 2
    assert "\\clcbpat5" in rows[0]
    assert "\\clcbpat5" not in rows[1]
    assert "\\cellx3000" in rows[0] and "\\cellx6000" in rows[0]
    assert "{\\b A}\\cell " in rows[0]
    assert result.endswith("\\pard\\sa200\\par\n")


def test_render_rtf_code_quote_rule_and_blank():
    result = render_rtf("```\na{\nb\n```\n> > q\n\n***")

    assert "{\\pard\\f1\\fs20\\highlight3 a\\{\\line\nb\\par}" in result
    assert "{\\pard\\li1440\\cf2\\i\\sa100 q\\par}" in result
    assert "\\pard\\sa100\\par\n" in result
    assert result.endswith("\\brdrb\\brdrs\\brdrw10\\brdrcf6\\par\n")


def test_render_rtf_hard_break():
    assert render_rtf("end  ") == "{\\pard\\sa150 end\\line\\par}\n"


def test_rtf_document_wraps_body_with_header_and_title():
    document = rtf_document("Braces {x} and \\ slash", title="Café")

    assert document.startswith("{\\rtf1\\ansi")
    assert "{\\fonttbl" in document and "{\\colortbl" in document
    assert "{\\pard\\qc\\b\\fs48\\sa300 Caf\\u233?\\par}" in document
    assert document.endswith("}")
    opened, closed = _unescaped_braces(document)
    assert opened == closed


def test_rtf_document_without_title():
    document = rtf_document("text")

    assert "\\qc" not in document
    assert "{\\pard\\sa150 text\\par}" in document
