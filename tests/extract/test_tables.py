from __future__ import annotations

import pytest

from markdown_formatter.extract.tables import (
    Table,
    extract_table_rows,
    is_separator_row,
    parse_markdown_table,
    rows_to_csv,
    split_row,
    table_data,
)

SIMPLE_TABLE = "| A | B |\n|---|---|\n| 1 | 2 |"


def test_simple_table_to_csv():
    rows = extract_table_rows(SIMPLE_TABLE)

    assert rows == [["A", "B"], ["1", "2"]]
    assert rows_to_csv(rows) == '"A","B"\n"1","2"\n'


def test_rows_to_csv_doubles_embedded_quotes():
    assert rows_to_csv([['say "hi"', "x"]]) == '"say ""hi""","x"\n'


def test_rows_to_csv_empty():
    assert rows_to_csv([]) == ""


def test_extract_table_rows_ignores_prose():
    text = "Intro text\n\n| A |\n|---|\n| 1 |\n\nOutro"

    assert extract_table_rows(text) == [["A"], ["1"]]


def test_extract_table_rows_strips_cell_markdown():
    text = "| **A** | `b` |\n|:--|--:|\n| [link](http://x) | ~~c~~ |"

    assert extract_table_rows(text) == [["A", "b"], ["link", "c"]]


@pytest.mark.parametrize("body_rows", [0, 1, 4])
def test_extract_table_rows_counts_non_separator_rows(body_rows):
    lines = ["| h1 | h2 |", "| --- | --- |"]
    lines.extend(f"| r{i} | v{i} |" for i in range(body_rows))

    rows = extract_table_rows("\n".join(lines))

    assert len(rows) == body_rows + 1


@pytest.mark.parametrize(
    ("line", "expected"),
    [
        ("|---|---|", True),
        ("| :---: | ---: |", True),
        ("---|---", True),
        ("| a | b |", False),
        ("---", False),
        ("| |", False),
    ],
)
def test_is_separator_row(line, expected):
    assert is_separator_row(line) is expected


def test_split_row_keeps_interior_empty_cells():
    assert split_row("a | | c") == ["a", "", "c"]
    assert split_row("| a | b |") == ["a", "b"]
    assert split_row("|   |") == []


def test_parse_markdown_table_headers_and_rows():
    table = parse_markdown_table(SIMPLE_TABLE + "\n| 3 | 4 | 5 |")

    assert table.headers == ["A", "B"]
    assert table.rows == [["1", "2"], ["3", "4", "5"]]
    assert table.column_count == 3
    assert table


def test_parse_markdown_table_without_separator_is_empty():
    table = parse_markdown_table("| A | B |\n| 1 | 2 |")

    assert not table
    assert table == Table()


def test_table_data_keeps_document_order():
    text = "Intro **text**\n\n" + SIMPLE_TABLE + "\n\nOutro"

    assert table_data(text) == [
        ["Intro text"],
        ["A", "B"],
        ["1", "2"],
        ["Outro"],
    ]


def test_table_data_skips_empty_chunks():
    assert table_data("\n\n   \n\n") == []
