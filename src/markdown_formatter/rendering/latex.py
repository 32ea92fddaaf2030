"""LaTeX body renderer.

Escaping is applied per inline token: only plain text (and the content of
formatting spans) goes through :func:`escape_latex`, so emitted commands,
math bodies and verbatim code are never escaped a second time. Markdown
punctuation with no LaTeX meaning (``*``, backticks, ``|`` and ``#``) is
dropped from plain text.
"""

from __future__ import annotations

from typing import Iterable, List, Tuple

from markdown_formatter.parsing.blocks import (
    Blank,
    Blockquote,
    CodeFence,
    Heading,
    HorizontalRule,
    ListItem,
    Paragraph,
    TableRowGroup,
)
from markdown_formatter.parsing.inline import InlineToken, TokenKind

from .base import BlockRenderer

__all__ = [
    "LatexRenderer",
    "escape_latex",
    "render_latex",
]

_SECTIONS = {
    1: "section",
    2: "subsection",
    3: "subsubsection",
}

_ESCAPES = {
    ord("\\"): r"\textbackslash{}",
    ord("~"): r"\textasciitilde{}",
    ord("^"): r"\textasciicircum{}",
    ord("&"): r"\&",
    ord("%"): r"\%",
    ord("$"): r"\$",
    ord("#"): r"\#",
    ord("_"): r"\_",
    ord("{"): r"\{",
    ord("}"): r"\}",
}
_TEXT_CLEANUP = {ord(char): None for char in "*`|#"}

_VERBATIM_BEGIN = r"\begin{verbatim}"
_VERBATIM_END = r"\end{verbatim}"
_VERB_DELIMITERS = "|!+=@/"

_WRAPPERS = {
    TokenKind.BOLD: r"\textbf{{{0}}}",
    TokenKind.ITALIC: r"\textit{{{0}}}",
    TokenKind.BOLD_ITALIC: r"\textbf{{\textit{{{0}}}}}",
    TokenKind.STRIKETHROUGH: r"\sout{{{0}}}",
    TokenKind.CODE: r"\texttt{{{0}}}",
}


def escape_latex(text: str) -> str:
    """Backslash-escape LaTeX special characters in ``text``."""

    return text.translate(_ESCAPES)


class LatexRenderer(BlockRenderer[str, str, str]):
    """Render Markdown blocks to a LaTeX body fragment."""

    def reset(self) -> None:
        # Open list environments as (environment, indent level).
        self._lists: List[Tuple[str, int]] = []

    def close(self) -> Iterable[str]:
        return self._close_lists()

    def finish(self, fragments: List[str]) -> str:
        if not fragments:
            return ""
        return "\n".join(fragments) + "\n"

    def render_token(self, token: InlineToken) -> str:
        kind = token.kind
        if kind is TokenKind.LINE_BREAK:
            return r"\\" + "\n"
        if kind is TokenKind.MATH_INLINE:
            return f"${token.text}$"
        if kind is TokenKind.MATH_BLOCK:
            return (
                "\n\\begin{equation}\n"
                f"{token.text.strip()}\n"
                "\\end{equation}\n"
            )
        if kind is TokenKind.TEXT:
            return escape_latex(token.text.translate(_TEXT_CLEANUP))
        return _WRAPPERS[kind].format(escape_latex(token.text))

    def inline_latex(self, text: str) -> str:
        return "".join(self.inline(text))

    def visit_heading(self, block: Heading) -> Iterable[str]:
        yield from self._close_lists()
        body = self.inline_latex(block.text)
        command = _SECTIONS.get(block.level)
        if command is None:
            yield body
            return
        yield f"\\{command}{{{body}}}"

    def visit_horizontal_rule(self, block: HorizontalRule) -> Iterable[str]:
        yield from self._close_lists()
        yield r"\noindent\rule{\linewidth}{0.4pt}"

    def visit_code_fence(self, block: CodeFence) -> Iterable[str]:
        yield from self._close_lists()
        yield _VERBATIM_BEGIN
        for line in block.lines:
            if _VERBATIM_END in line:
                # The line would close the environment; set it with \verb.
                yield _VERBATIM_END
                yield _verb_line(line)
                yield _VERBATIM_BEGIN
            else:
                yield line
        yield _VERBATIM_END

    def visit_blockquote(self, block: Blockquote) -> Iterable[str]:
        yield from self._close_lists()
        depth = max(block.depth, 1)
        yield from [r"\begin{quote}"] * depth
        yield self.inline_latex(block.text)
        yield from [r"\end{quote}"] * depth

    def visit_list_item(self, block: ListItem) -> Iterable[str]:
        environment = "enumerate" if block.ordered else "itemize"
        while self._lists and _closes(
            self._lists[-1], environment, block.indent
        ):
            yield self._pop_list()
        if not self._lists or self._lists[-1][1] < block.indent:
            self._lists.append((environment, block.indent))
            yield f"\\begin{{{environment}}}"
        yield f"\\item {self.inline_latex(block.text)}"

    def visit_table(self, block: TableRowGroup) -> Iterable[str]:
        yield from self._close_lists()
        table = block.table
        if not table:
            return
        columns = "|".join("l" for _ in range(table.column_count))
        yield f"\\begin{{tabular}}{{|{columns}|}}"
        yield r"\hline"
        headers = [
            f"\\textbf{{{self.inline_latex(cell)}}}" for cell in table.headers
        ]
        yield " & ".join(headers) + r" \\ \hline"
        for row in table.rows:
            cells = [self.inline_latex(cell) for cell in row]
            yield " & ".join(cells) + r" \\ \hline"
        yield r"\end{tabular}"

    def visit_paragraph(self, block: Paragraph) -> Iterable[str]:
        yield from self._close_lists()
        body = self.inline_latex(block.text)
        if block.hard_break:
            body += r" \\"
        yield body

    def visit_blank(self, block: Blank) -> Iterable[str]:
        yield from self._close_lists()
        yield ""

    def _close_lists(self) -> List[str]:
        closing = []
        while self._lists:
            closing.append(self._pop_list())
        return closing

    def _pop_list(self) -> str:
        environment, _ = self._lists.pop()
        return f"\\end{{{environment}}}"


def _closes(current: Tuple[str, int], environment: str, indent: int) -> bool:
    open_environment, open_indent = current
    if open_indent > indent:
        return True
    return open_indent == indent and open_environment != environment


def _verb_line(line: str) -> str:
    delimiter = next((c for c in _VERB_DELIMITERS if c not in line), None)
    if delimiter is None:
        return f"\\noindent\\texttt{{{escape_latex(line)}}}"
    return f"\\noindent\\verb{delimiter}{line}{delimiter}"


def render_latex(text: str) -> str:
    """Render ``text`` to a LaTeX body fragment."""

    return LatexRenderer().render(text)
