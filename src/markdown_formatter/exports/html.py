"""HTML and PDF exports.

HTML goes through markdown-it-py (CommonMark plus tables, strikethrough and
dollar math) with Pygments highlighting for fenced code, wrapped in a
Jinja2 page template. PDF feeds that page to WeasyPrint with an ``@page``
stylesheet; WeasyPrint is imported lazily so the rest of the package works
without its system libraries.
"""

from __future__ import annotations

import re
from functools import lru_cache
from pathlib import Path
from typing import Any, Optional, Tuple

from jinja2 import Environment, Template
from markdown_it import MarkdownIt
from mdit_py_plugins.dollarmath import dollarmath_plugin
from pygments import highlight as pygments_highlight
from pygments.formatters import HtmlFormatter
from pygments.lexers import get_lexer_by_name
from pygments.util import ClassNotFound

from .errors import DependencyError, RenderBackendError
from .structured import DEFAULT_TITLE

__all__ = [
    "KATEX_CSS_URL",
    "PAPER_SIZES",
    "build_markdown_it",
    "build_page_css",
    "generate_html",
    "highlight_css",
    "render_html",
    "render_pdf",
]

PAPER_SIZES = {"letter": "Letter", "a4": "A4", "legal": "Legal", "a5": "A5"}
KATEX_CSS_URL = "https://cdn.jsdelivr.net/npm/katex@0.16.9/dist/katex.min.css"

_CSS_UNIT_RE = re.compile(r"^(?:\d+\.?\d*|\d*\.\d+)(?:in|cm|mm|pt)$")

_PAGE_TEMPLATE = """<!DOCTYPE html>
<html lang="en">
<head>
  <meta charset="UTF-8">
  <meta name="viewport" content="width=device-width, initial-scale=1.0">
  <title>{{ title }}</title>
  <link rel="stylesheet" href="{{ katex_css }}">
  <style>
    body { font-family: system-ui, -apple-system, sans-serif; max-width: 800px; margin: 40px auto; padding: 20px; line-height: 1.6; color: #1a1a1a; }
    h1, h2, h3 { color: #111; margin-top: 2em; page-break-after: avoid; }
    pre { background: #f4f4f4; padding: 15px; border-radius: 5px; overflow-x: auto; }
    code { font-family: monospace; background: #eee; padding: 2px 4px; border-radius: 3px; }
    pre code { background: none; padding: 0; }
    table { border-collapse: collapse; width: 100%; margin: 1em 0; }
    th, td { border: 1px solid #ddd; padding: 12px; text-align: left; }
    th { background: #f8f8f8; }
    blockquote { border-left: 4px solid #ddd; margin: 0; padding-left: 1em; color: #666; }
{{ highlight_css | safe }}
  </style>
</head>
<body>
{{ body | safe }}
</body>
</html>
"""


def highlight_css(style_name: str = "default") -> str:
    formatter = HtmlFormatter(style=style_name)
    return formatter.get_style_defs("pre code")


def _highlight(code: str, language: str, _attrs: str) -> str:
    if not language:
        return ""
    try:
        lexer = get_lexer_by_name(language)
    except ClassNotFound:
        # markdown-it escapes the code itself when highlighting returns "".
        return ""
    return pygments_highlight(code, lexer, HtmlFormatter(nowrap=True))


def build_markdown_it() -> MarkdownIt:
    md = MarkdownIt(
        "commonmark",
        options_update={"html": False, "highlight": _highlight},
    )
    md.enable(["table", "strikethrough"])
    dollarmath_plugin(md, double_inline=True)
    return md


def render_html(markdown: str) -> str:
    """Render ``markdown`` to an HTML body fragment."""

    return build_markdown_it().render(markdown)


def generate_html(
    markdown: str,
    *,
    title: Optional[str] = None,
    style_name: str = "default",
) -> str:
    """Render ``markdown`` to a standalone HTML page."""

    return _page_template().render(
        title=title or DEFAULT_TITLE,
        katex_css=KATEX_CSS_URL,
        highlight_css=highlight_css(style_name),
        body=render_html(markdown),
    )


def _validate_unit(value: str) -> str:
    candidate = value.strip()
    if not _CSS_UNIT_RE.match(candidate):
        raise ValueError(
            f"Invalid CSS size '{value}'. Use units in, mm, cm, pt "
            "(e.g., '1in', '10mm')."
        )
    return candidate


def build_page_css(
    *,
    paper_size: str = "a4",
    orientation: str = "portrait",
    margin: str = "2cm",
) -> str:
    size_keyword = PAPER_SIZES.get(paper_size.lower())
    if not size_keyword:
        raise ValueError(
            f"Unsupported paper size: {paper_size}. Choose from "
            f"{sorted(PAPER_SIZES)}"
        )
    if orientation not in {"portrait", "landscape"}:
        raise ValueError("orientation must be 'portrait' or 'landscape'")
    return (
        "@page {\n"
        f"  size: {size_keyword} {orientation};\n"
        f"  margin: {_validate_unit(margin)};\n"
        "}\n"
    )


def render_pdf(
    markdown: str,
    *,
    title: Optional[str] = None,
    paper_size: str = "a4",
    base_url: Optional[str] = None,
) -> bytes:
    """Render ``markdown`` to PDF bytes with WeasyPrint."""

    html_doc = generate_html(markdown, title=title)
    page_css = build_page_css(paper_size=paper_size)
    html_cls, css_cls = _load_weasyprint()
    try:
        document = html_cls(
            string=html_doc,
            base_url=base_url or Path.cwd().as_uri(),
        )
        pdf = document.write_pdf(stylesheets=[css_cls(string=page_css)])
    except Exception as exc:
        raise RenderBackendError(f"PDF rendering failed: {exc}") from exc
    if pdf is None:
        raise RenderBackendError("PDF rendering produced no output.")
    return bytes(pdf)


def _load_weasyprint() -> Tuple[Any, Any]:
    try:
        from weasyprint import CSS, HTML
    except (ImportError, OSError) as exc:
        raise DependencyError(
            "WeasyPrint is required for PDF output. Install system libraries "
            "(Cairo, Pango) and the 'weasyprint' package."
        ) from exc
    return HTML, CSS


@lru_cache(maxsize=1)
def _page_template() -> Template:
    env = Environment(autoescape=True)
    return env.from_string(_PAGE_TEMPLATE)
