"""Pipe-table extraction.

These helpers read raw Markdown directly (they do not go through the block
segmenter) and feed the CSV, XLSX and table renderers.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Iterable, List

from .plain_text import strip_markdown

__all__ = [
    "Table",
    "extract_table_rows",
    "is_separator_row",
    "parse_markdown_table",
    "rows_to_csv",
    "split_row",
    "table_data",
]

_PIPE_SPAN_RE = re.compile(r"\|.*\|")
_SEPARATOR_CELL_RE = re.compile(r"^[\s:-]*$")
_PARAGRAPH_BREAK_RE = re.compile(r"\n[ \t]*\n")


@dataclass(frozen=True)
class Table:
    """Header cells plus body rows; empty headers mean "no table"."""

    headers: List[str] = field(default_factory=list)
    rows: List[List[str]] = field(default_factory=list)

    def __bool__(self) -> bool:
        return bool(self.headers)

    @property
    def column_count(self) -> int:
        return max([len(self.headers), *(len(row) for row in self.rows)])


def split_row(line: str) -> List[str]:
    """Split one pipe-delimited line into trimmed cells.

    The outer pipes are optional; interior empty cells are kept so column
    positions survive.
    """

    stripped = line.strip()
    if stripped.startswith("|"):
        stripped = stripped[1:]
    if stripped.endswith("|") and not stripped.endswith("\\|"):
        stripped = stripped[:-1]
    if not stripped.strip():
        return []
    return [cell.strip() for cell in stripped.split("|")]


def is_separator_row(line: str) -> bool:
    """True for rows such as ``|---|:--:|`` made only of dashes/colons."""

    if "|" not in line or "-" not in line:
        return False
    cells = split_row(line)
    return bool(cells) and all(_SEPARATOR_CELL_RE.match(cell) for cell in cells)


def parse_markdown_table(text: str) -> Table:
    """Parse a header row, a separator row and any number of body rows."""

    lines = [line for line in text.strip().split("\n") if line.strip()]
    if len(lines) < 2 or not is_separator_row(lines[1]):
        return Table()
    headers = split_row(lines[0])
    rows = [
        cells
        for cells in (
            split_row(line) for line in lines[2:] if not is_separator_row(line)
        )
        if cells
    ]
    return Table(headers=headers, rows=rows)


def extract_table_rows(text: str) -> List[List[str]]:
    """Return every pipe-delimited row in ``text`` with cells stripped.

    Separator rows are dropped and non-table content is ignored.
    """

    rows: List[List[str]] = []
    for line in text.replace("\r\n", "\n").split("\n"):
        match = _PIPE_SPAN_RE.search(line)
        if match is None:
            continue
        row = _clean_row(match.group(0))
        if row:
            rows.append(row)
    return rows


def table_data(text: str) -> List[List[str]]:
    """Flatten a document into spreadsheet rows.

    Each blank-line-delimited chunk that contains a pipe contributes its
    table rows; any other chunk becomes a single-cell row, so prose and
    tables keep their original document order.
    """

    data: List[List[str]] = []
    normalized = text.replace("\r\n", "\n")
    for chunk in _PARAGRAPH_BREAK_RE.split(normalized):
        lines = chunk.strip().split("\n")
        if any("|" in line for line in lines):
            for line in lines:
                row = _clean_row(line)
                if row:
                    data.append(row)
            continue
        cleaned = strip_markdown(chunk)
        if cleaned:
            data.append([cleaned])
    return data


def rows_to_csv(rows: Iterable[List[str]]) -> str:
    """Quote every cell, double embedded quotes, end each row with ``\\n``."""

    lines = []
    for row in rows:
        quoted = ['"{0}"'.format(cell.replace('"', '""')) for cell in row]
        lines.append(",".join(quoted) + "\n")
    return "".join(lines)


def _clean_row(line: str) -> List[str]:
    if is_separator_row(line):
        return []
    cells = split_row(line)
    if not any(cells):
        return []
    return [strip_markdown(cell) for cell in cells]
