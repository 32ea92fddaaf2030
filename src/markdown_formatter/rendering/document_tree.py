"""Word-processor document-tree renderer.

Emits an abstract sequence of paragraph and table nodes that an office
document packer (see :mod:`markdown_formatter.exports.packaging`) turns into
a binary file. Spacing and indents are expressed in twips, run sizes in
half-points and colours as ``RRGGBB`` hex strings.

Numbered list items carry a :class:`NumberingRef` handed out by a
:class:`NumberingScope`. The scope is an explicit value owned by the caller
of :func:`render_document_tree`; nothing is shared between calls unless the
caller passes the same scope in again.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Iterable, List, Optional, Tuple, Union

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
    "DocumentTree",
    "DocumentTreeRenderer",
    "NumberingPolicy",
    "NumberingRef",
    "NumberingScope",
    "ParagraphNode",
    "ParagraphRole",
    "TableCellNode",
    "TableNode",
    "TextRun",
    "render_document_tree",
]

MONOSPACE_FONT = "Consolas"
MATH_FONT = "Cambria Math"
MUTED_COLOR = "666666"
MATH_COLOR = "4F46E5"
CODE_SHADING = "F0F0F0"
HEADER_SHADING = "E5E7EB"
BORDER_COLOR = "CCCCCC"
CODE_SIZE = 20

# (run size in half-points, space before, space after) per heading level.
_HEADING_STYLES = {
    1: (40, 400, 200),
    2: (32, 300, 150),
    3: (28, 250, 100),
    4: (26, 200, 100),
}
_QUOTE_INDENT = 720
_LIST_INDENT = 360


class NumberingPolicy(Enum):
    """How numbered lists separated by other content are counted."""

    SHARED = "shared"
    RESTART = "restart"

    @classmethod
    def from_value(cls, value: str) -> "NumberingPolicy":
        normalized = value.strip().lower()
        for member in cls:
            if member.value == normalized:
                return member
        expected = ", ".join(member.value for member in cls)
        raise ValueError(
            f"Unknown numbering policy '{value}'. Expected one of: {expected}."
        )


@dataclass(frozen=True)
class NumberingRef:
    reference: str
    level: int


class NumberingScope:
    """Hands out numbering references for ordered list items.

    Under :attr:`NumberingPolicy.SHARED` every numbered item in the scope
    uses one reference, so separate numbered lists continue each other's
    counters. Under :attr:`NumberingPolicy.RESTART` a new reference is
    opened for the first numbered item after any interruption.
    """

    def __init__(
        self,
        policy: NumberingPolicy = NumberingPolicy.SHARED,
        *,
        prefix: str = "numbered-list",
    ) -> None:
        self.policy = policy
        self.prefix = prefix
        self._references: List[str] = []
        self._interrupted = True

    @property
    def references(self) -> Tuple[str, ...]:
        return tuple(self._references)

    def reference_for(self, level: int) -> NumberingRef:
        if not self._references or (
            self._interrupted and self.policy is NumberingPolicy.RESTART
        ):
            self._references.append(
                f"{self.prefix}-{len(self._references) + 1}"
            )
        self._interrupted = False
        return NumberingRef(reference=self._references[-1], level=level)

    def interrupt(self) -> None:
        self._interrupted = True


@dataclass(frozen=True)
class TextRun:
    text: str
    bold: bool = False
    italic: bool = False
    strike: bool = False
    font: Optional[str] = None
    size: Optional[int] = None
    color: Optional[str] = None
    shading: Optional[str] = None
    line_break: bool = False


class ParagraphRole(Enum):
    BODY = "body"
    HEADING = "heading"
    QUOTE = "quote"
    BULLET = "bullet"
    NUMBERED = "numbered"
    CODE = "code"
    RULE = "rule"
    BLANK = "blank"


@dataclass(frozen=True)
class ParagraphNode:
    runs: Tuple[TextRun, ...] = ()
    role: ParagraphRole = ParagraphRole.BODY
    heading_level: Optional[int] = None
    indent_left: int = 0
    indent_hanging: int = 0
    list_level: int = 0
    spacing_before: int = 0
    spacing_after: int = 0
    shading: Optional[str] = None
    border_bottom: Optional[str] = None
    numbering: Optional[NumberingRef] = None

    @property
    def text(self) -> str:
        return "".join(
            "\n" if run.line_break else run.text for run in self.runs
        )


@dataclass(frozen=True)
class TableCellNode:
    runs: Tuple[TextRun, ...]
    header: bool = False
    shading: Optional[str] = None

    @property
    def text(self) -> str:
        return "".join(run.text for run in self.runs)


@dataclass(frozen=True)
class TableNode:
    rows: Tuple[Tuple[TableCellNode, ...], ...]
    border_color: str = BORDER_COLOR

    @property
    def column_count(self) -> int:
        return max((len(row) for row in self.rows), default=0)


Node = Union[ParagraphNode, TableNode]


@dataclass(frozen=True)
class DocumentTree:
    nodes: Tuple[Node, ...] = ()
    numbering_references: Tuple[str, ...] = field(default_factory=tuple)

    @property
    def paragraphs(self) -> List[ParagraphNode]:
        return [node for node in self.nodes if isinstance(node, ParagraphNode)]

    @property
    def tables(self) -> List[TableNode]:
        return [node for node in self.nodes if isinstance(node, TableNode)]


class DocumentTreeRenderer(
    BlockRenderer[TextRun, Node, DocumentTree]
):
    """Render Markdown blocks into :class:`DocumentTree` nodes."""

    def __init__(self, scope: Optional[NumberingScope] = None) -> None:
        self.scope = scope if scope is not None else NumberingScope()

    def finish(self, fragments: List[Node]) -> DocumentTree:
        return DocumentTree(
            nodes=tuple(fragments),
            numbering_references=self.scope.references,
        )

    def render_token(self, token: InlineToken) -> TextRun:
        kind = token.kind
        if kind is TokenKind.LINE_BREAK:
            return TextRun(text="", line_break=True)
        if kind is TokenKind.BOLD:
            return TextRun(token.text, bold=True)
        if kind is TokenKind.ITALIC:
            return TextRun(token.text, italic=True)
        if kind is TokenKind.BOLD_ITALIC:
            return TextRun(token.text, bold=True, italic=True)
        if kind is TokenKind.STRIKETHROUGH:
            return TextRun(token.text, strike=True)
        if kind is TokenKind.CODE:
            return TextRun(
                token.text, font=MONOSPACE_FONT, shading=CODE_SHADING
            )
        if token.is_math:
            return TextRun(
                token.text, italic=True, font=MATH_FONT, color=MATH_COLOR
            )
        return TextRun(token.text)

    def visit_heading(self, block: Heading) -> Iterable[Node]:
        self.scope.interrupt()
        size, before, after = _HEADING_STYLES[min(block.level, 4)]
        runs = tuple(
            _with(run, bold=True, size=size) for run in self.inline(block.text)
        )
        yield ParagraphNode(
            runs=runs,
            role=ParagraphRole.HEADING,
            heading_level=min(block.level, 4),
            spacing_before=before,
            spacing_after=after,
        )

    def visit_horizontal_rule(self, block: HorizontalRule) -> Iterable[Node]:
        self.scope.interrupt()
        yield ParagraphNode(
            role=ParagraphRole.RULE,
            spacing_before=200,
            spacing_after=200,
            border_bottom=BORDER_COLOR,
        )

    def visit_code_fence(self, block: CodeFence) -> Iterable[Node]:
        self.scope.interrupt()
        runs: List[TextRun] = []
        for index, line in enumerate(block.lines):
            if index:
                runs.append(TextRun(text="", line_break=True))
            runs.append(TextRun(line, font=MONOSPACE_FONT, size=CODE_SIZE))
        yield ParagraphNode(
            runs=tuple(runs),
            role=ParagraphRole.CODE,
            shading=CODE_SHADING,
            spacing_after=150,
        )

    def visit_blockquote(self, block: Blockquote) -> Iterable[Node]:
        self.scope.interrupt()
        runs = tuple(
            _with(run, italic=True, color=run.color or MUTED_COLOR)
            for run in self.inline(block.text)
        )
        yield ParagraphNode(
            runs=runs,
            role=ParagraphRole.QUOTE,
            indent_left=block.depth * _QUOTE_INDENT,
            spacing_after=100,
        )

    def visit_list_item(self, block: ListItem) -> Iterable[Node]:
        numbering = None
        role = ParagraphRole.BULLET
        if block.ordered:
            numbering = self.scope.reference_for(block.indent)
            role = ParagraphRole.NUMBERED
        yield ParagraphNode(
            runs=tuple(self.inline(block.text)),
            role=role,
            list_level=block.indent,
            indent_left=(block.indent + 1) * _LIST_INDENT,
            indent_hanging=_LIST_INDENT,
            numbering=numbering,
        )

    def visit_table(self, block: TableRowGroup) -> Iterable[Node]:
        self.scope.interrupt()
        table = block.table
        if not table:
            return
        rows = [
            tuple(
                TableCellNode(
                    runs=tuple(
                        _with(run, bold=True) for run in self.inline(cell)
                    ),
                    header=True,
                    shading=HEADER_SHADING,
                )
                for cell in table.headers
            )
        ]
        for row in table.rows:
            rows.append(
                tuple(
                    TableCellNode(runs=tuple(self.inline(cell)))
                    for cell in row
                )
            )
        yield TableNode(rows=tuple(rows))

    def visit_paragraph(self, block: Paragraph) -> Iterable[Node]:
        self.scope.interrupt()
        runs = self.inline(block.text)
        if block.hard_break:
            runs.append(TextRun(text="", line_break=True))
        yield ParagraphNode(runs=tuple(runs), spacing_after=150)

    def visit_blank(self, block: Blank) -> Iterable[Node]:
        yield ParagraphNode(role=ParagraphRole.BLANK, spacing_after=100)


def _with(run: TextRun, **changes: object) -> TextRun:
    if run.line_break:
        return run
    return replace(run, **changes)


def render_document_tree(
    text: str,
    *,
    numbering: NumberingPolicy = NumberingPolicy.SHARED,
    scope: Optional[NumberingScope] = None,
) -> DocumentTree:
    """Render ``text`` into a :class:`DocumentTree`.

    ``numbering`` picks the policy for a fresh scope; pass ``scope`` to keep
    counting across several documents instead.
    """

    if scope is None:
        scope = NumberingScope(numbering)
    return DocumentTreeRenderer(scope).render(text)
