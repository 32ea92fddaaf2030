"""Export formats built on the renderers and extractors."""

from __future__ import annotations

from .documents import latex_document, rtf_document
from .errors import (
    DependencyError,
    ExportError,
    MissingInputError,
    OutputWriteError,
    RenderBackendError,
    UnsupportedFormatError,
)
from .harmonize import harmonize_markdown
from .html import build_page_css, generate_html, render_html, render_pdf
from .output import (
    BinarySummary,
    InlineOutput,
    OutputResult,
    SavedOutput,
    deliver,
)
from .packaging import package_docx, package_xlsx
from .registry import (
    FORMATS,
    FormatSpec,
    RenderOptions,
    iter_formats,
    normalize_format,
    produce,
)
from .structured import generate_csv, generate_json, generate_xml

__all__ = [
    "latex_document",
    "rtf_document",
    "DependencyError",
    "ExportError",
    "MissingInputError",
    "OutputWriteError",
    "RenderBackendError",
    "UnsupportedFormatError",
    "harmonize_markdown",
    "build_page_css",
    "generate_html",
    "render_html",
    "render_pdf",
    "BinarySummary",
    "InlineOutput",
    "OutputResult",
    "SavedOutput",
    "deliver",
    "package_docx",
    "package_xlsx",
    "FORMATS",
    "FormatSpec",
    "RenderOptions",
    "iter_formats",
    "normalize_format",
    "produce",
    "generate_csv",
    "generate_json",
    "generate_xml",
]
