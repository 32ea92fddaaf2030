"""Shared block/inline traversal for the format renderers.

Each concrete renderer subclasses :class:`BlockRenderer` and supplies one
``visit_*`` method per block kind plus :meth:`BlockRenderer.render_token`.
The methods are abstract, so a renderer that forgets a block kind fails at
instantiation instead of silently dropping content.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Callable, Dict, Generic, Iterable, List, TypeVar

from markdown_formatter.parsing.blocks import (
    Blank,
    Block,
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
from markdown_formatter.parsing.inline import InlineToken, tokenize

__all__ = ["BlockRenderer"]

Span = TypeVar("Span")
Fragment = TypeVar("Fragment")
Output = TypeVar("Output")


class BlockRenderer(ABC, Generic[Span, Fragment, Output]):
    """Walk segmented blocks and collect per-block fragments.

    ``Span`` is what one inline token renders to, ``Fragment`` what one block
    renders to, and ``Output`` the combined result of a whole document.

    Renderer instances keep per-call state in :meth:`reset`, so one instance
    can render several documents one after another.
    """

    def render(self, text: str) -> Output:
        self.reset()
        fragments: List[Fragment] = []
        for block in segment(text):
            fragments.extend(self.visit(block))
        fragments.extend(self.close())
        return self.finish(fragments)

    def visit(self, block: Block) -> Iterable[Fragment]:
        handler = self._dispatch()[block.kind]
        return handler(block)

    def inline(self, text: str) -> List[Span]:
        return [self.render_token(token) for token in tokenize(text)]

    def reset(self) -> None:
        """Clear per-document state before a render."""

    def close(self) -> Iterable[Fragment]:
        """Fragments to append after the last block (e.g. open lists)."""

        return ()

    @abstractmethod
    def finish(self, fragments: List[Fragment]) -> Output:
        """Combine the collected fragments into the renderer's output."""

    @abstractmethod
    def render_token(self, token: InlineToken) -> Span:
        """Render one inline token."""

    @abstractmethod
    def visit_heading(self, block: Heading) -> Iterable[Fragment]: ...

    @abstractmethod
    def visit_horizontal_rule(
        self, block: HorizontalRule
    ) -> Iterable[Fragment]: ...

    @abstractmethod
    def visit_code_fence(self, block: CodeFence) -> Iterable[Fragment]: ...

    @abstractmethod
    def visit_blockquote(self, block: Blockquote) -> Iterable[Fragment]: ...

    @abstractmethod
    def visit_list_item(self, block: ListItem) -> Iterable[Fragment]: ...

    @abstractmethod
    def visit_table(self, block: TableRowGroup) -> Iterable[Fragment]: ...

    @abstractmethod
    def visit_paragraph(self, block: Paragraph) -> Iterable[Fragment]: ...

    @abstractmethod
    def visit_blank(self, block: Blank) -> Iterable[Fragment]: ...

    def _dispatch(self) -> Dict[BlockKind, Callable[..., Iterable[Fragment]]]:
        return {
            BlockKind.HEADING: self.visit_heading,
            BlockKind.HORIZONTAL_RULE: self.visit_horizontal_rule,
            BlockKind.CODE_FENCE: self.visit_code_fence,
            BlockKind.BLOCKQUOTE: self.visit_blockquote,
            BlockKind.LIST_ITEM: self.visit_list_item,
            BlockKind.TABLE: self.visit_table,
            BlockKind.PARAGRAPH: self.visit_paragraph,
            BlockKind.BLANK: self.visit_blank,
        }
