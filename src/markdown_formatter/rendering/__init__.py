"""Format renderers over the block segmenter and inline tokenizer."""

from __future__ import annotations

from .base import BlockRenderer
from .document_tree import (
    DocumentTree,
    DocumentTreeRenderer,
    NumberingPolicy,
    NumberingRef,
    NumberingScope,
    ParagraphNode,
    ParagraphRole,
    TableCellNode,
    TableNode,
    TextRun,
    render_document_tree,
)
from .latex import LatexRenderer, escape_latex, render_latex
from .plain_text import render_plain_text
from .rtf import RtfRenderer, encode_rtf_text, render_rtf

__all__ = [
    "BlockRenderer",
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
    "LatexRenderer",
    "escape_latex",
    "render_latex",
    "render_plain_text",
    "RtfRenderer",
    "encode_rtf_text",
    "render_rtf",
]
