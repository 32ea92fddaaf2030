"""Rich Text Format body renderer.

Produces the body fragment only. The caller wraps it with a document header
that declares the font table (``f0`` body, ``f1`` monospace, ``f2`` math),
the colour table (``cf2`` muted grey, ``highlight3`` code shading, ``cf4``
math colour, ``clcbpat5`` header shading, ``brdrcf6`` rule colour) and the
character set; see :func:`markdown_formatter.exports.documents.rtf_document`.
"""

from __future__ import annotations

from typing import Iterable, List

from markdown_formatter.parsing.blocks import (
    Blank,
    Blockquote,
    CodeFence,
    Heading,
    HorizontalRule,
    ListItem,
    Paragraph,
    TableRowGroup,
)
from markdown_formatter.parsing.inline import InlineToken, TokenKind

from .base import BlockRenderer

__all__ = [
    "CELL_WIDTH",
    "RtfRenderer",
    "encode_rtf_text",
    "render_rtf",
]

CELL_WIDTH = 3000
INDENT_STEP = 720
LIST_INDENT_STEP = 360

# (font size in half-points, space before, space after) per heading level.
_HEADING_STYLES = {
    1: (40, 400, 200),
    2: (32, 300, 150),
    3: (28, 250, 100),
    4: (26, 200, 100),
}

_CELL_BORDERS = (
    "\\clbrdrt\\brdrs\\brdrw10\\clbrdrl\\brdrs\\brdrw10"
    "\\clbrdrb\\brdrs\\brdrw10\\clbrdrr\\brdrs\\brdrw10"
)

_TOKEN_WRAPPERS = {
    TokenKind.BOLD: "{{\\b {0}}}",
    TokenKind.ITALIC: "{{\\i {0}}}",
    TokenKind.BOLD_ITALIC: "{{\\b\\i {0}}}",
    TokenKind.STRIKETHROUGH: "{{\\strike {0}}}",
    TokenKind.CODE: "{{\\f1\\highlight3 {0}}}",
    TokenKind.MATH_INLINE: "{{\\i\\cf4\\f2 {0}}}",
    TokenKind.MATH_BLOCK: "{{\\i\\cf4\\f2 {0}}}",
}


def encode_rtf_text(text: str) -> str:
    """Escape RTF control characters and encode non-ASCII as ``\\uN?``."""

    parts: List[str] = []
    for char in text:
        code = ord(char)
        if char in "\\{}":
            parts.append("\\" + char)
        elif code < 128:
            parts.append(char)
        elif code <= 0xFFFF:
            parts.append(_unicode_escape(code))
        else:
            # Astral characters are written as a UTF-16 surrogate pair.
            offset = code - 0x10000
            parts.append(_unicode_escape(0xD800 + (offset >> 10)))
            parts.append(_unicode_escape(0xDC00 + (offset & 0x3FF)))
    return "".join(parts)


def _unicode_escape(code_unit: int) -> str:
    # RTF \u takes a signed 16-bit value.
    signed = code_unit - 0x10000 if code_unit > 0x7FFF else code_unit
    return f"\\u{signed}?"


class RtfRenderer(BlockRenderer[str, str, str]):
    """Render Markdown blocks to RTF paragraph and table groups."""

    def finish(self, fragments: List[str]) -> str:
        return "".join(fragments)

    def render_token(self, token: InlineToken) -> str:
        if token.kind is TokenKind.LINE_BREAK:
            return "\\line "
        encoded = encode_rtf_text(token.text)
        wrapper = _TOKEN_WRAPPERS.get(token.kind)
        if wrapper is None:
            return encoded
        return wrapper.format(encoded)

    def inline_rtf(self, text: str) -> str:
        return "".join(self.inline(text))

    def visit_heading(self, block: Heading) -> Iterable[str]:
        size, before, after = _HEADING_STYLES[min(block.level, 4)]
        yield (
            f"{{\\pard\\b\\fs{size}\\sb{before}\\sa{after} "
            f"{self.inline_rtf(block.text)}\\par}}\n"
        )

    def visit_horizontal_rule(self, block: HorizontalRule) -> Iterable[str]:
        yield "\\pard\\sb200\\sa200\\brdrb\\brdrs\\brdrw10\\brdrcf6\\par\n"

    def visit_code_fence(self, block: CodeFence) -> Iterable[str]:
        body = "\\line\n".join(encode_rtf_text(line) for line in block.lines)
        yield f"{{\\pard\\f1\\fs20\\highlight3 {body}\\par}}\n"

    def visit_blockquote(self, block: Blockquote) -> Iterable[str]:
        indent = block.depth * INDENT_STEP
        yield (
            f"{{\\pard\\li{indent}\\cf2\\i\\sa100 "
            f"{self.inline_rtf(block.text)}\\par}}\n"
        )

    def visit_list_item(self, block: ListItem) -> Iterable[str]:
        indent = (block.indent + 1) * LIST_INDENT_STEP
        marker = block.ordinal if block.ordered else "\\'b7"
        yield (
            f"{{\\pard\\li{indent}\\fi-{LIST_INDENT_STEP} {marker}\\tab "
            f"{self.inline_rtf(block.text)}\\par}}\n"
        )

    def visit_table(self, block: TableRowGroup) -> Iterable[str]:
        table = block.table
        if not table:
            return
        yield self._table_row(table.headers, header=True)
        for row in table.rows:
            yield self._table_row(row, header=False)
        yield "\\pard\\sa200\\par\n"

    def visit_paragraph(self, block: Paragraph) -> Iterable[str]:
        trailer = "\\line" if block.hard_break else ""
        body = self.inline_rtf(block.text)
        yield f"{{\\pard\\sa150 {body}{trailer}\\par}}\n"

    def visit_blank(self, block: Blank) -> Iterable[str]:
        yield "\\pard\\sa100\\par\n"

    def _table_row(self, cells: List[str], *, header: bool) -> str:
        shading = "\\clcbpat5" if header else ""
        definition = "".join(
            f"{shading}{_CELL_BORDERS}\\cellx{(column + 1) * CELL_WIDTH}"
            for column in range(len(cells))
        )
        rendered = []
        for cell in cells:
            content = self.inline_rtf(cell)
            if header:
                content = f"{{\\b {content}}}"
            rendered.append(f"{content}\\cell ")
        return (
            f"\\trowd\\trgaph108\\trleft-108{definition}"
            f"\\pard\\intbl\\ql {''.join(rendered)}\\row\n"
        )


def render_rtf(text: str) -> str:
    """Render ``text`` to an RTF body fragment."""

    return RtfRenderer().render(text)
