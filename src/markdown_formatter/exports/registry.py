"""Format registry: one synchronous "produce buffer" call per format."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Callable, Dict, Optional, Tuple, Union

from markdown_formatter.extract.tables import table_data
from markdown_formatter.rendering.document_tree import (
    NumberingPolicy,
    render_document_tree,
)
from markdown_formatter.rendering.plain_text import render_plain_text

from .documents import latex_document, rtf_document
from .errors import MissingInputError, UnsupportedFormatError
from .harmonize import harmonize_markdown
from .html import generate_html, render_pdf
from .packaging import package_docx, package_xlsx
from .structured import (
    DEFAULT_TITLE,
    generate_csv,
    generate_json,
    generate_xml,
)

__all__ = [
    "FORMATS",
    "FormatSpec",
    "RenderOptions",
    "iter_formats",
    "normalize_format",
    "produce",
]

Buffer = Union[str, bytes]


@dataclass(frozen=True)
class RenderOptions:
    """Per-call knobs shared by the format producers."""

    numbering: NumberingPolicy = NumberingPolicy.SHARED
    paper_size: str = "a4"
    harmonize: bool = False
    now: Optional[Callable[[], datetime]] = field(default=None, compare=False)


@dataclass(frozen=True)
class FormatSpec:
    name: str
    extension: str
    binary: bool
    description: str
    producer: Callable[[str, Optional[str], RenderOptions], Buffer]


def _plain(
    markdown: str, title: Optional[str], options: RenderOptions
) -> Buffer:
    return render_plain_text(markdown)


def _markdown(
    markdown: str, title: Optional[str], options: RenderOptions
) -> Buffer:
    if options.harmonize:
        return harmonize_markdown(markdown)
    return markdown


def _rtf(
    markdown: str, title: Optional[str], options: RenderOptions
) -> Buffer:
    return rtf_document(markdown, title=title)


def _latex(
    markdown: str, title: Optional[str], options: RenderOptions
) -> Buffer:
    return latex_document(markdown, title=title)


def _docx(
    markdown: str, title: Optional[str], options: RenderOptions
) -> Buffer:
    tree = render_document_tree(markdown, numbering=options.numbering)
    return package_docx(tree, title=title)


def _xlsx(
    markdown: str, title: Optional[str], options: RenderOptions
) -> Buffer:
    return package_xlsx(table_data(markdown))


def _csv(
    markdown: str, title: Optional[str], options: RenderOptions
) -> Buffer:
    return generate_csv(markdown)


def _json(
    markdown: str, title: Optional[str], options: RenderOptions
) -> Buffer:
    return generate_json(
        markdown, title=title or DEFAULT_TITLE, now=options.now
    )


def _xml(
    markdown: str, title: Optional[str], options: RenderOptions
) -> Buffer:
    return generate_xml(
        markdown, title=title or DEFAULT_TITLE, now=options.now
    )


def _html(
    markdown: str, title: Optional[str], options: RenderOptions
) -> Buffer:
    return generate_html(markdown, title=title)


def _pdf(
    markdown: str, title: Optional[str], options: RenderOptions
) -> Buffer:
    return render_pdf(markdown, title=title, paper_size=options.paper_size)


FORMATS: Dict[str, FormatSpec] = {
    spec.name: spec
    for spec in (
        FormatSpec(
            "txt", "txt", False, "Plain text with Markdown removed", _plain
        ),
        FormatSpec(
            "md", "md", False, "Markdown, optionally harmonized", _markdown
        ),
        FormatSpec(
            "rtf", "rtf", False, "Rich Text Format document", _rtf
        ),
        FormatSpec(
            "latex", "tex", False, "LaTeX source document", _latex
        ),
        FormatSpec(
            "docx", "docx", True, "Word document", _docx
        ),
        FormatSpec(
            "xlsx", "xlsx", True, "Excel workbook of tables and prose", _xlsx
        ),
        FormatSpec(
            "csv", "csv", False, "Table rows as CSV", _csv
        ),
        FormatSpec(
            "json", "json", False, "Structured JSON export", _json
        ),
        FormatSpec(
            "xml", "xml", False, "Structured XML export", _xml
        ),
        FormatSpec(
            "html", "html", False, "Standalone HTML page", _html
        ),
        FormatSpec(
            "pdf", "pdf", True, "PDF rendered with WeasyPrint", _pdf
        ),
    )
}

_ALIASES = {
    "tex": "latex",
    "text": "txt",
    "markdown": "md",
    "htm": "html",
}


def normalize_format(value: str) -> str:
    """Map a format name or file extension onto a registered format."""

    candidate = value.strip().lower().lstrip(".")
    candidate = _ALIASES.get(candidate, candidate)
    if candidate not in FORMATS:
        expected = ", ".join(FORMATS)
        raise UnsupportedFormatError(
            f"Unsupported format '{value}'. Expected one of: {expected}."
        )
    return candidate


def iter_formats() -> Tuple[FormatSpec, ...]:
    return tuple(FORMATS.values())


def produce(
    fmt: str,
    markdown: Optional[str],
    *,
    title: Optional[str] = None,
    options: Optional[RenderOptions] = None,
) -> Buffer:
    """Render ``markdown`` into the buffer for ``fmt``.

    Text formats return ``str``; ``docx``, ``xlsx`` and ``pdf`` return
    ``bytes``. Missing input is rejected before any rendering starts.
    """

    if not markdown:
        raise MissingInputError("No Markdown text was supplied.")
    spec = FORMATS[normalize_format(fmt)]
    return spec.producer(markdown, title, options or RenderOptions())
