"""Tests for heading analysis and segmentation suggestions."""

import pytest

from unweaver.core.models import DocumentKind, Granularity, empty_heading_index
from unweaver.chunking.headings import (
    analyze_heading_levels,
    parse_heading,
    suggest_segmentation,
    suggest_split_level,
)

pytestmark = pytest.mark.unit


MARKDOWN = """# Title

## A
text
## B
  ### B.1  
more
####### too deep
#NoSpace
"""


def _index(**levels):
    index = empty_heading_index()
    for key, titles in levels.items():
        index[int(key[1:])] = titles
    return index


class TestParseHeading:
    def test_levels_and_titles(self):
        assert parse_heading("# Title") == (1, "Title")
        assert parse_heading("   ### Deep  ") == (3, "Deep")
        assert parse_heading("###### Six") == (6, "Six")

    def test_non_headings(self):
        for line in ["####### Seven", "#NoSpace", "## ", "text # nope", ""]:
            assert parse_heading(line) is None

    def test_title_keeps_leading_hash(self):
        assert parse_heading("## #") == (2, "#")
        assert parse_heading("## #tag") == (2, "#tag")


class TestAnalyzeHeadingLevels:
    def test_titles_per_level(self, make_doc):
        index = analyze_heading_levels([make_doc(MARKDOWN)])

        assert index[1] == ["Title"]
        assert index[2] == ["A", "B"]
        assert index[3] == ["B.1"]
        assert index[4] == index[5] == index[6] == []

    def test_document_order_is_preserved(self, make_doc):
        docs = [
            make_doc("## first\n## second", doc_id="d1"),
            make_doc("## third", kind=DocumentKind.PLAIN, doc_id="d2"),
        ]

        assert analyze_heading_levels(docs)[2] == ["first", "second", "third"]

    def test_tabular_documents_are_ignored(self, make_doc):
        doc = make_doc("# a,b\n1,2", name="x.csv", kind=DocumentKind.TABULAR, headers=["# a", "b"])

        assert analyze_heading_levels([doc]) == empty_heading_index()


class TestSuggestSplitLevel:
    def test_single_title_prefers_level_two(self):
        assert suggest_split_level(_index(h1=["Title"], h2=["A", "B"])) == 2

    def test_shallowest_repeated_level(self):
        assert suggest_split_level(_index(h1=["a", "b"], h2=["c", "d"])) == 1
        assert suggest_split_level(_index(h2=["x"], h3=["y", "z"])) == 3

    def test_no_repeated_level_uses_shallowest_present(self):
        assert suggest_split_level(_index(h1=["Title"], h2=["only"])) == 1
        assert suggest_split_level(_index(h4=["solo"])) == 4

    def test_empty_index(self):
        assert suggest_split_level(empty_heading_index()) == 1


class TestSuggestSegmentation:
    def test_tabular_documents(self, make_doc):
        doc = make_doc("a,b\n1,2", name="x.csv", kind=DocumentKind.TABULAR, headers=["a", "b"])

        suggestion = suggest_segmentation([doc])

        assert suggestion.granularity == Granularity.ROW_COMBINED
        assert suggestion.hierarchical is True

    def test_several_unstructured_documents(self, make_doc):
        docs = [
            make_doc("plain one", kind=DocumentKind.PLAIN, doc_id="a"),
            make_doc("plain two", kind=DocumentKind.PLAIN, doc_id="b"),
        ]

        suggestion = suggest_segmentation(docs)

        assert suggestion.granularity == Granularity.FILE
        assert suggestion.hierarchical is False

    def test_structured_markdown(self, make_doc):
        suggestion = suggest_segmentation([make_doc(MARKDOWN)])

        assert suggestion.granularity == Granularity.PARAGRAPH
        assert suggestion.hierarchical is True
        assert suggestion.header_level == 2
        assert "level 2" in suggestion.reasoning

    def test_single_plain_document(self, make_doc):
        suggestion = suggest_segmentation([make_doc("just words", kind=DocumentKind.PLAIN)])

        assert suggestion.granularity == Granularity.PARAGRAPH
        assert suggestion.hierarchical is False
