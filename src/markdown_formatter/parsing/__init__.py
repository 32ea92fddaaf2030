"""Markdown block segmentation and inline tokenization."""

from __future__ import annotations

from .blocks import (
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
from .inline import InlineToken, TokenKind, tokenize

__all__ = [
    "Blank",
    "Block",
    "BlockKind",
    "Blockquote",
    "CodeFence",
    "Heading",
    "HorizontalRule",
    "ListItem",
    "Paragraph",
    "TableRowGroup",
    "segment",
    "InlineToken",
    "TokenKind",
    "tokenize",
]
