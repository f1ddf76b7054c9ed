"""Tests for relaxed CSV parsing and row-delimited formatting."""

import pytest

from unweaver.core.models import ROW_DELIMITER, Table
from unweaver.ingest.table import format_table_text, parse_table, split_table_line

pytestmark = pytest.mark.unit


class TestParseTable:
    def test_simple_table(self):
        table = parse_table("a,b\n1,2\n3,4")

        assert table.headers == ["a", "b"]
        assert table.rows == [["1", "2"], ["3", "4"]]
        assert table.total_rows == 2

    def test_header_only_is_empty_table(self):
        table = parse_table("a,b")

        assert table.headers == []
        assert table.rows == []
        assert table.total_rows == 0

    def test_empty_content(self):
        assert parse_table("") == Table()
        assert parse_table("\n   \n") == Table()

    def test_blank_lines_and_crlf_are_skipped(self):
        table = parse_table("a,b\r\n\r\n1,2\r\n   \r\n3,4\r\n")

        assert table.rows == [["1", "2"], ["3", "4"]]

    def test_ragged_rows_are_kept_as_is(self):
        table = parse_table("a,b,c\n1,2\n3,4,5,6")

        assert table.rows == [["1", "2"], ["3", "4", "5", "6"]]

    def test_row_order_preserved(self):
        table = parse_table("n\n3\n1\n2\n1")

        assert [r[0] for r in table.rows] == ["3", "1", "2", "1"]

    def test_cell_is_index_safe(self):
        table = parse_table("a,b,c\n1")

        row = table.rows[0]
        assert table.cell(row, 0) == "1"
        assert table.cell(row, 2) == ""
        assert table.cell(row, -1) == ""


class TestSplitTableLine:
    def test_quoted_comma_is_not_a_separator(self):
        assert split_table_line('"Smith, J",42') == ["Smith, J", "42"]

    def test_doubled_quotes_collapse(self):
        assert split_table_line('x,"said ""hi"""') == ["x", 'said "hi"']

    def test_backslash_quote_does_not_toggle(self):
        fields = split_table_line('"x \\" y, z",2')

        assert fields == ['x \\" y, z', "2"]

    def test_fields_are_trimmed(self):
        assert split_table_line("  a ,  b  ,c") == ["a", "b", "c"]

    def test_trailing_empty_field(self):
        assert split_table_line("1,2,") == ["1", "2", ""]


class TestFormatTableText:
    def test_rows_joined_with_delimiter(self):
        table = Table(
            headers=["id", "comment", "score"],
            rows=[["1", "Great course", "5"], ["2", "", "3"], ["3", "Too long", "2"]],
        )

        text = format_table_text(table, ["comment"], ["id"])

        assert text == f"[id]: 1\nGreat course\n\n{ROW_DELIMITER}\n\n[id]: 3\nToo long"

    def test_multiple_analyzed_columns_are_prefixed(self):
        table = Table(headers=["q1", "q2"], rows=[["yes", "no"]])

        assert format_table_text(table, ["q1", "q2"]) == "q1: yes\nq2: no"

    def test_unknown_columns_ignored(self):
        table = Table(headers=["q1"], rows=[["yes"]])

        assert format_table_text(table, ["q1", "missing"], ["nope"]) == "yes"
