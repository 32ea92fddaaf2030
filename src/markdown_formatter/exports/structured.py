"""Structured text exports: CSV, JSON and XML."""

from __future__ import annotations

import json
import re
from datetime import datetime, timezone
from typing import Callable, Optional
from xml.sax.saxutils import escape

from markdown_formatter.extract.plain_text import strip_markdown
from markdown_formatter.extract.tables import extract_table_rows, rows_to_csv

__all__ = [
    "DEFAULT_TITLE",
    "generate_csv",
    "generate_json",
    "generate_xml",
    "serialize_timestamp",
]

DEFAULT_TITLE = "document"

_PARAGRAPH_BREAK_RE = re.compile(r"\n[ \t]*\n")


def generate_csv(text: str) -> str:
    """Return the document's table rows as CSV; prose is excluded."""

    return rows_to_csv(extract_table_rows(text))


def generate_json(
    text: str,
    *,
    title: str = DEFAULT_TITLE,
    now: Optional[Callable[[], datetime]] = None,
) -> str:
    normalized = text.replace("\r\n", "\n")
    blocks = [
        stripped
        for stripped in (
            strip_markdown(block)
            for block in _PARAGRAPH_BREAK_RE.split(normalized)
        )
        if stripped
    ]
    payload = {
        "title": title,
        "export_timestamp": serialize_timestamp(_current(now)),
        "content": strip_markdown(normalized),
        "structured_content": blocks,
    }
    return json.dumps(payload, indent=2, ensure_ascii=False)


def generate_xml(
    text: str,
    *,
    title: str = DEFAULT_TITLE,
    now: Optional[Callable[[], datetime]] = None,
) -> str:
    """Return an XML ``<document>`` with the stripped text in CDATA."""

    content = strip_markdown(text.replace("\r\n", "\n"))
    # "]]>" cannot appear inside one CDATA section, so split it across two.
    cdata = content.replace("]]>", "]]]]><![CDATA[>")
    timestamp = serialize_timestamp(_current(now))
    lines = [
        '<?xml version="1.0" encoding="UTF-8"?>',
        "<document>",
        f"  <title>{escape(title)}</title>",
        f"  <content><![CDATA[{cdata}]]></content>",
        "  <metadata>",
        f"    <timestamp>{timestamp}</timestamp>",
        "  </metadata>",
        "</document>",
    ]
    return "\n".join(lines)


def serialize_timestamp(value: datetime) -> str:
    """ISO-8601 UTC timestamp with millisecond precision and a ``Z`` suffix."""

    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    timestamp = value.astimezone(timezone.utc)
    return timestamp.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def _current(now: Optional[Callable[[], datetime]]) -> datetime:
    if now is not None:
        return now()
    return datetime.now(timezone.utc)
