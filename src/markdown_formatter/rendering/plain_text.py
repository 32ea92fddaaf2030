"""Flat-text renderer built on the plain-text stripper."""

from __future__ import annotations

from markdown_formatter.extract.plain_text import strip_markdown

__all__ = ["render_plain_text"]


def render_plain_text(text: str) -> str:
    """Render ``text`` as Markdown-free plain text."""

    return strip_markdown(text)
