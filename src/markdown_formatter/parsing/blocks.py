"""Line-oriented block segmenter.

:func:`segment` classifies each source line, with one line of lookahead,
into a tagged :data:`Block` value. Rules are tried in a fixed priority
order and the first one that claims the line wins; the paragraph rule
accepts anything, so malformed constructs degrade to paragraphs instead of
raising.

Priority order:

1. horizontal rule
2. code fence (toggles fence state; content buffered verbatim)
3. setext heading (consumes the underline)
4. pipe table (consumes following lines containing ``|``)
5. blank line
6. ATX heading (levels 1-4)
7. blockquote
8. bulleted / numbered list item
9. paragraph
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from typing import Callable, List, Optional, Sequence, Tuple, Union

from markdown_formatter.extract.tables import (
    Table,
    is_separator_row,
    parse_markdown_table,
)

__all__ = [
    "Block",
    "BlockKind",
    "Blank",
    "Blockquote",
    "CodeFence",
    "Heading",
    "HorizontalRule",
    "ListItem",
    "Paragraph",
    "TableRowGroup",
    "segment",
]


class BlockKind(Enum):
    HEADING = "heading"
    HORIZONTAL_RULE = "horizontal_rule"
    CODE_FENCE = "code_fence"
    BLOCKQUOTE = "blockquote"
    LIST_ITEM = "list_item"
    TABLE = "table"
    PARAGRAPH = "paragraph"
    BLANK = "blank"


@dataclass(frozen=True)
class Heading:
    level: int
    text: str
    kind: BlockKind = BlockKind.HEADING


@dataclass(frozen=True)
class HorizontalRule:
    kind: BlockKind = BlockKind.HORIZONTAL_RULE


@dataclass(frozen=True)
class CodeFence:
    """Verbatim fenced content; never passed to the inline tokenizer."""

    lines: Tuple[str, ...]
    language: str = ""
    closed: bool = True
    kind: BlockKind = BlockKind.CODE_FENCE

    @property
    def content(self) -> str:
        return "\n".join(self.lines)


@dataclass(frozen=True)
class Blockquote:
    depth: int
    text: str
    kind: BlockKind = BlockKind.BLOCKQUOTE


@dataclass(frozen=True)
class ListItem:
    ordered: bool
    indent: int
    text: str
    ordinal: Optional[str] = None
    kind: BlockKind = BlockKind.LIST_ITEM


@dataclass(frozen=True)
class TableRowGroup:
    lines: Tuple[str, ...]
    kind: BlockKind = BlockKind.TABLE

    @property
    def table(self) -> Table:
        return parse_markdown_table("\n".join(self.lines))


@dataclass(frozen=True)
class Paragraph:
    text: str
    hard_break: bool = False
    kind: BlockKind = BlockKind.PARAGRAPH


@dataclass(frozen=True)
class Blank:
    kind: BlockKind = BlockKind.BLANK


Block = Union[
    Heading,
    HorizontalRule,
    CodeFence,
    Blockquote,
    ListItem,
    TableRowGroup,
    Paragraph,
    Blank,
]

# A rule inspects ``lines[index]`` (and at most ``lines[index + 1]``) and
# returns the blocks it produces plus the number of lines consumed, or
# ``None`` to pass the line on to the next rule.
RuleResult = Optional[Tuple[List[Block], int]]
Rule = Callable[[Sequence[str], int], RuleResult]

_RULE_RE = re.compile(r"^([*_-])(?:[ \t]*\1){2,}[ \t]*$")
_FENCE = "```"
_SETEXT_H1_RE = re.compile(r"^={3,}\s*$")
_SETEXT_H2_RE = re.compile(r"^-{3,}\s*$")
_ATX_RE = re.compile(r"^(#{1,4})[ \t]+(.*?)(?:[ \t]+#+)?[ \t]*$")
_QUOTE_MARKER_RE = re.compile(r">[ ]?")
_BULLET_RE = re.compile(r"^([ \t]*)[-*+][ \t]+(.*)$")
_ORDERED_RE = re.compile(r"^([ \t]*)(\d+\.)[ \t]+(.*)$")
_HARD_BREAK_SUFFIX = "  "


def segment(text: str) -> List[Block]:
    """Split ``text`` into blocks in source-line order."""

    if not text:
        return []
    lines = text.replace("\r\n", "\n").replace("\r", "\n").split("\n")

    blocks: List[Block] = []
    index = 0
    while index < len(lines):
        fence = _open_fence(lines[index])
        if fence is not None:
            block, consumed = _collect_fence(lines, index, fence)
            blocks.append(block)
            index += consumed
            continue
        produced, consumed = _classify(lines, index)
        blocks.extend(produced)
        index += consumed
    return blocks


def _classify(lines: Sequence[str], index: int) -> Tuple[List[Block], int]:
    for rule in _RULES:
        result = rule(lines, index)
        if result is not None:
            return result
    return _paragraph(lines, index)


def _open_fence(line: str) -> Optional[str]:
    stripped = line.strip()
    if stripped.startswith(_FENCE):
        return stripped[len(_FENCE):].strip()
    return None


def _collect_fence(
    lines: Sequence[str], index: int, language: str
) -> Tuple[CodeFence, int]:
    buffered: List[str] = []
    cursor = index + 1
    while cursor < len(lines):
        if lines[cursor].strip().startswith(_FENCE):
            return (
                CodeFence(lines=tuple(buffered), language=language),
                cursor - index + 1,
            )
        buffered.append(lines[cursor])
        cursor += 1
    # Unterminated fence: keep everything buffered up to end of input.
    return (
        CodeFence(lines=tuple(buffered), language=language, closed=False),
        cursor - index,
    )


def _horizontal_rule(lines: Sequence[str], index: int) -> RuleResult:
    if _RULE_RE.match(lines[index].strip()):
        return [HorizontalRule()], 1
    return None


def _setext_heading(lines: Sequence[str], index: int) -> RuleResult:
    current = lines[index].strip()
    if not current or index + 1 >= len(lines):
        return None
    underline = lines[index + 1].strip()
    if _SETEXT_H1_RE.match(underline):
        return [Heading(level=1, text=current)], 2
    if _SETEXT_H2_RE.match(underline):
        return [Heading(level=2, text=current)], 2
    return None


def _table(lines: Sequence[str], index: int) -> RuleResult:
    current = lines[index].strip()
    if not current.startswith("|"):
        return None
    collected: List[str] = []
    cursor = index
    while cursor < len(lines) and "|" in lines[cursor].strip():
        collected.append(lines[cursor])
        cursor += 1
    if len(collected) >= 2 and is_separator_row(collected[1]):
        return [TableRowGroup(lines=tuple(collected))], len(collected)
    # Not a real table: every collected line falls back to a paragraph.
    return [_paragraph_block(line) for line in collected], len(collected)


def _blank(lines: Sequence[str], index: int) -> RuleResult:
    if not lines[index].strip():
        return [Blank()], 1
    return None


def _atx_heading(lines: Sequence[str], index: int) -> RuleResult:
    match = _ATX_RE.match(lines[index].strip())
    if match is None:
        return None
    return [Heading(level=len(match.group(1)), text=match.group(2))], 1


def _blockquote(lines: Sequence[str], index: int) -> RuleResult:
    stripped = lines[index].strip()
    if not stripped.startswith(">"):
        return None
    depth = 0
    position = 0
    while True:
        marker = _QUOTE_MARKER_RE.match(stripped, position)
        if marker is None:
            break
        depth += 1
        position = marker.end()
    return [Blockquote(depth=depth, text=stripped[position:].strip())], 1


def _list_item(lines: Sequence[str], index: int) -> RuleResult:
    line = lines[index].expandtabs(4)
    bullet = _BULLET_RE.match(line)
    if bullet is not None:
        item = ListItem(
            ordered=False,
            indent=len(bullet.group(1)) // 4,
            text=bullet.group(2).strip(),
        )
        return [item], 1
    ordered = _ORDERED_RE.match(line)
    if ordered is not None:
        item = ListItem(
            ordered=True,
            indent=len(ordered.group(1)) // 4,
            text=ordered.group(3).strip(),
            ordinal=ordered.group(2),
        )
        return [item], 1
    return None


def _paragraph(lines: Sequence[str], index: int) -> Tuple[List[Block], int]:
    return [_paragraph_block(lines[index])], 1


def _paragraph_block(line: str) -> Paragraph:
    return Paragraph(
        text=line.strip(),
        hard_break=line.endswith(_HARD_BREAK_SUFFIX),
    )


_RULES: Tuple[Rule, ...] = (
    _horizontal_rule,
    _setext_heading,
    _table,
    _blank,
    _atx_heading,
    _blockquote,
    _list_item,
)
