"""Inline span tokenizer.

Splits one block's text into an ordered sequence of :class:`InlineToken`
values using a single fixed-priority alternation. Longer and outer
delimiters are tried first so ``***x***`` is read as one bold-italic span
rather than ``*`` + ``**x**`` + ``*``.

The token sequence is a non-overlapping, order-preserving partition of the
input: joining every token's ``raw`` text reproduces the input exactly, and
joining every token's ``text`` reproduces it minus the delimiters.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from typing import Iterator, List

__all__ = [
    "InlineToken",
    "TokenKind",
    "tokenize",
]


class TokenKind(Enum):
    TEXT = "text"
    BOLD = "bold"
    ITALIC = "italic"
    BOLD_ITALIC = "bold-italic"
    STRIKETHROUGH = "strikethrough"
    CODE = "code"
    MATH_INLINE = "math-inline"
    MATH_BLOCK = "math-block"
    LINE_BREAK = "line-break"


@dataclass(frozen=True)
class InlineToken:
    """One inline span; ``text`` excludes delimiters, ``raw`` includes them."""

    kind: TokenKind
    text: str
    raw: str

    @property
    def is_math(self) -> bool:
        return self.kind in (TokenKind.MATH_INLINE, TokenKind.MATH_BLOCK)


# Group order is the priority order; the first alternative that matches at a
# position wins.
_SPAN_RE = re.compile(
    r"(?P<math_block>\$\$(?P<math_block_body>.+?)\$\$)"
    r"|(?P<math_inline>\$(?P<math_inline_body>[^$]+?)\$)"
    r"|(?P<bold_italic>\*\*\*(?P<bi_star>[^*]+)\*\*\*|___(?P<bi_under>[^_]+)___)"
    r"|(?P<bold>\*\*(?P<b_star>[^*]+)\*\*|__(?P<b_under>[^_]+)__)"
    r"|(?P<italic>\*(?P<i_star>[^*]+)\*|_(?P<i_under>[^_]+)_)"
    r"|(?P<strike>~~(?P<s_body>[^~]+)~~)"
    r"|(?P<code>`(?P<c_body>[^`]+)`)"
    r"|(?P<line_break><br\s*/?>)",
    re.IGNORECASE,
)

_GROUPS = (
    ("math_block", TokenKind.MATH_BLOCK, ("math_block_body",)),
    ("math_inline", TokenKind.MATH_INLINE, ("math_inline_body",)),
    ("bold_italic", TokenKind.BOLD_ITALIC, ("bi_star", "bi_under")),
    ("bold", TokenKind.BOLD, ("b_star", "b_under")),
    ("italic", TokenKind.ITALIC, ("i_star", "i_under")),
    ("strike", TokenKind.STRIKETHROUGH, ("s_body",)),
    ("code", TokenKind.CODE, ("c_body",)),
    ("line_break", TokenKind.LINE_BREAK, ()),
)


def tokenize(text: str) -> List[InlineToken]:
    """Return the inline tokens for ``text``.

    Unmatched stretches become ``text`` tokens; empty text tokens are never
    emitted, so ``""`` yields ``[]``.
    """

    return list(_iter_tokens(text))


def _iter_tokens(text: str) -> Iterator[InlineToken]:
    position = 0
    for match in _SPAN_RE.finditer(text):
        start, end = match.span()
        if start > position:
            plain = text[position:start]
            yield InlineToken(TokenKind.TEXT, plain, plain)
        yield _token_for(match)
        position = end
    if position < len(text):
        plain = text[position:]
        yield InlineToken(TokenKind.TEXT, plain, plain)


def _token_for(match: re.Match[str]) -> InlineToken:
    for group, kind, bodies in _GROUPS:
        raw = match.group(group)
        if raw is None:
            continue
        body = ""
        for name in bodies:
            value = match.group(name)
            if value is not None:
                body = value
                break
        return InlineToken(kind, body, raw)
    raise AssertionError(f"unhandled inline match: {match.group(0)!r}")
