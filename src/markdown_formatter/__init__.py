"""Convert Markdown into RTF, LaTeX, DOCX, XLSX, CSV, JSON, XML, HTML and PDF."""

from __future__ import annotations

from .exports import (
    FORMATS,
    ExportError,
    MissingInputError,
    RenderOptions,
    UnsupportedFormatError,
    deliver,
    produce,
)
from .extract import extract_table_rows, strip_markdown, table_data
from .parsing import segment, tokenize
from .rendering import (
    NumberingPolicy,
    render_document_tree,
    render_latex,
    render_plain_text,
    render_rtf,
)

__all__ = [
    "FORMATS",
    "ExportError",
    "MissingInputError",
    "RenderOptions",
    "UnsupportedFormatError",
    "deliver",
    "produce",
    "extract_table_rows",
    "strip_markdown",
    "table_data",
    "segment",
    "tokenize",
    "NumberingPolicy",
    "render_document_tree",
    "render_latex",
    "render_plain_text",
    "render_rtf",
]
