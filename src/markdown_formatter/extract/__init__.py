"""Plain-text and table extraction straight from raw Markdown."""

from __future__ import annotations

from .plain_text import EMPHASIS_PASSES, strip_markdown
from .tables import (
    Table,
    extract_table_rows,
    is_separator_row,
    parse_markdown_table,
    rows_to_csv,
    split_row,
    table_data,
)

__all__ = [
    "EMPHASIS_PASSES",
    "strip_markdown",
    "Table",
    "extract_table_rows",
    "is_separator_row",
    "parse_markdown_table",
    "rows_to_csv",
    "split_row",
    "table_data",
]
