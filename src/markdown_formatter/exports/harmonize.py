"""Markdown harmonization through mdformat.

The output uses ``-`` bullets, backtick-fenced code, consecutive ordered-list
numbers and one space after each list marker. Line wrapping is left alone.
GitHub tables, strikethrough and task lists survive through the ``gfm``
extension.
"""

from __future__ import annotations

import mdformat

__all__ = ["harmonize_markdown"]

_OPTIONS = {"number": True, "wrap": "keep", "end_of_line": "lf"}
_EXTENSIONS = ("gfm",)


def harmonize_markdown(markdown: str) -> str:
    return mdformat.text(markdown, options=_OPTIONS, extensions=_EXTENSIONS)
