"""Plain-text stripper.

Removes Markdown syntax with an ordered series of regular-expression passes.
Block-level removals run before inline ones: table separator rows go before
pipes turn into spaces, and fenced code is unwrapped before generic backtick
stripping.

The full pass sequence is repeated until the text stops changing, which
makes :func:`strip_markdown` idempotent. Every pass either shortens the text
or removes a pipe, so the repetition always terminates.
"""

from __future__ import annotations

import re
from typing import Callable, Tuple, Union

__all__ = [
    "EMPHASIS_PASSES",
    "strip_markdown",
]

# Nested emphasis levels unwrapped within one pipeline pass.
EMPHASIS_PASSES = 3

Replacement = Union[str, Callable[[re.Match[str]], str]]

_FENCED_CODE_RE = re.compile(r"```[\s\S]*?```")
_FENCE_OPEN_RE = re.compile(r"```\w*\n?")

_BLOCK_PASSES: Tuple[Tuple[re.Pattern[str], Replacement], ...] = (
    # Table separator rows.
    (re.compile(r"^\|?[ \t:-]+\|[ \t:|-]*$", re.MULTILINE), ""),
    # Horizontal rules, then setext underlines.
    (re.compile(r"^[ \t]*([*_-])\1{2,}[ \t]*$", re.MULTILINE), ""),
    (re.compile(r"^[ \t]*[=-]{3,}[ \t]*$", re.MULTILINE), ""),
    # Blockquote markers, then ATX heading markers.
    (re.compile(r"^[ \t]*(?:>[ \t]?)+", re.MULTILINE), ""),
    (re.compile(r"^#{1,6}[ \t]+", re.MULTILINE), ""),
)

_EMPHASIS_PASSES: Tuple[Tuple[re.Pattern[str], Replacement], ...] = (
    (re.compile(r"[*_]{3}([^*_]+)[*_]{3}"), r"\1"),
    (re.compile(r"[*_]{2}([^*_]+)[*_]{2}"), r"\1"),
    (re.compile(r"[*_]([^*_]+)[*_]"), r"\1"),
    (re.compile(r"~~([^~]+)~~"), r"\1"),
)

_INLINE_PASSES: Tuple[Tuple[re.Pattern[str], Replacement], ...] = (
    # Math delimiters.
    (re.compile(r"\$\$(.*?)\$\$", re.DOTALL), r"\1"),
    (re.compile(r"\$(.*?)\$"), r"\1"),
    # Images, inline links, reference links.
    (re.compile(r"!\[([^\]]*)\]\([^)]+\)"), r"\1"),
    (re.compile(r"\[([^\]]+)\]\([^)]+\)"), r"\1"),
    (re.compile(r"\[([^\]]+)\]\[[^\]]*\]"), r"\1"),
    # Task checkboxes, footnote references, heading anchors.
    (re.compile(r"\[[ xX]\]\s+"), ""),
    (re.compile(r"\[\^[^\]]+\]"), ""),
    (re.compile(r"\{#[^}]+\}"), ""),
    # Subscript / superscript markers.
    (re.compile(r"[~^]([^~^\s]+)[~^]"), r"\1"),
    # Inline code and HTML tags.
    (re.compile(r"`([^`]+)`"), r"\1"),
    (re.compile(r"<[^>]*>"), ""),
    # Leftover pipes, then backslash escapes.
    (re.compile(r"\|"), " "),
    (re.compile(r"\\([\\`*_{}\[\]()#+\-.!|~^])"), r"\1"),
)

_EXCESS_NEWLINES_RE = re.compile(r"\n{3,}")


def strip_markdown(text: str) -> str:
    """Return ``text`` with Markdown syntax removed."""

    if not text:
        return ""
    current = text
    while True:
        stripped = _strip_once(current)
        if stripped == current:
            return stripped
        current = stripped


def _strip_once(text: str) -> str:
    clean = _FENCED_CODE_RE.sub(_unwrap_fence, text)
    clean = _apply(clean, _BLOCK_PASSES)
    for _ in range(EMPHASIS_PASSES):
        clean = _apply(clean, _EMPHASIS_PASSES)
    clean = _apply(clean, _INLINE_PASSES)
    lines = "\n".join(line.strip() for line in clean.split("\n"))
    return _EXCESS_NEWLINES_RE.sub("\n\n", lines).strip()


def _unwrap_fence(match: re.Match[str]) -> str:
    body = _FENCE_OPEN_RE.sub("", match.group(0))
    return body.replace("```", "").strip()


def _apply(
    text: str, passes: Tuple[Tuple[re.Pattern[str], Replacement], ...]
) -> str:
    for pattern, replacement in passes:
        text = pattern.sub(replacement, text)
    return text
