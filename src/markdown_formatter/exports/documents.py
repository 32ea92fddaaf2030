"""Standalone document wrappers for the RTF and LaTeX body fragments."""

from __future__ import annotations

from functools import lru_cache

from jinja2 import Environment, StrictUndefined, Template

from markdown_formatter.rendering.latex import escape_latex, render_latex
from markdown_formatter.rendering.rtf import encode_rtf_text, render_rtf

__all__ = [
    "LATEX_PREAMBLE",
    "RTF_HEADER",
    "latex_document",
    "rtf_document",
]

RTF_HEADER = (
    "{\\rtf1\\ansi\\ansicpg1252\\deff0\\nouicompat"
    "{\\fonttbl{\\f0\\fswiss\\fcharset0 Calibri;}"
    "{\\f1\\fmodern\\fcharset0 Consolas;}"
    "{\\f2\\froman\\fcharset0 Cambria Math;}}\n"
    "{\\colortbl ;\\red0\\green0\\blue0;\\red102\\green102\\blue102;"
    "\\red240\\green240\\blue240;\\red79\\green70\\blue229;"
    "\\red229\\green231\\blue235;\\red204\\green204\\blue204;}\n"
    "\\viewkind4\\uc1\\f0\\fs24 "
)

LATEX_PREAMBLE = r"""\documentclass{article}
\usepackage[utf8]{inputenc}
\usepackage{amsmath}
\usepackage[normalem]{ulem}
\usepackage{hyperref}
<% if title %>
\title{<< title >>}
<% endif %>
\begin{document}
<% if title %>
\maketitle
<% endif %>

<< body >>
\end{document}
"""


def rtf_document(markdown: str, *, title: str | None = None) -> str:
    """Render ``markdown`` into a complete RTF document."""

    parts = [RTF_HEADER]
    if title:
        parts.append(
            f"{{\\pard\\qc\\b\\fs48\\sa300 {encode_rtf_text(title)}\\par}}\n"
        )
    parts.append(render_rtf(markdown))
    parts.append("}")
    return "".join(parts)


def latex_document(markdown: str, *, title: str | None = None) -> str:
    """Render ``markdown`` into a compilable LaTeX source file."""

    return _latex_template().render(
        title=escape_latex(title) if title else "",
        body=render_latex(markdown).rstrip("\n"),
    )


@lru_cache(maxsize=1)
def _latex_template() -> Template:
    # Jinja's default delimiters collide with LaTeX braces and percent signs.
    env = Environment(
        block_start_string="<%",
        block_end_string="%>",
        variable_start_string="<<",
        variable_end_string=">>",
        comment_start_string="<#",
        comment_end_string="#>",
        trim_blocks=True,
        lstrip_blocks=True,
        keep_trailing_newline=True,
        autoescape=False,
        undefined=StrictUndefined,
    )
    return env.from_string(LATEX_PREAMBLE)
