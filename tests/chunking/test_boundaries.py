"""Tests for chunking boundaries and splitting strategies."""

import pytest

from unweaver.core.models import ROW_DELIMITER, Granularity
from unweaver.chunking.boundaries import (
    normalize_text,
    split_by_headings,
    split_by_lines,
    split_by_paragraphs,
    split_by_phrases,
    split_by_responses,
    split_by_sentences,
    split_by_turns,
    split_flat,
)

pytestmark = pytest.mark.unit


class TestBoundaries:
    """Test boundary detection and splitting strategies."""

    def test_paragraphs_split_on_blank_lines(self):
        text = "First para\nstill first\n\nSecond\n   \n\nThird"

        assert split_by_paragraphs(text) == ["First para\nstill first", "Second", "Third"]

    def test_paragraphs_treat_row_delimiter_as_break(self):
        text = f"one{ROW_DELIMITER}two"

        assert split_by_paragraphs(text) == ["one", "two"]

    def test_sentences_keep_punctuation_and_quotes(self):
        text = 'He left. "Really?" she asked! Then nothing'

        assert split_by_sentences(text) == [
            "He left.",
            '"Really?"',
            "she asked!",
            "Then nothing",
        ]

    def test_sentence_punctuation_runs(self):
        assert split_by_sentences("Wait... what?! Fine.") == ["Wait...", "what?!", "Fine."]

    def test_sentence_boundaries_do_not_overlap(self):
        text = "One. Two. Three."
        sentences = split_by_sentences(text)

        assert sentences == ["One.", "Two.", "Three."]
        for left, right in zip(sentences, sentences[1:]):
            assert not right.startswith(left)
            assert not left.endswith(right)

    def test_punctuation_only_text(self):
        assert split_by_sentences("...") == ["..."]

    def test_lines(self):
        assert split_by_lines("a\n\n b \nc") == ["a", "b", "c"]

    def test_lines_round_trip(self):
        text = "\n\nfirst line\nsecond line\nthird line\n\n"

        assert "\n".join(split_by_lines(text)) == text.strip("\n")

    def test_headings_keep_heading_with_body(self):
        text = "intro\n# A\ntext\n## B\nmore"

        assert split_by_headings(text) == ["intro", "# A\ntext", "## B\nmore"]

    def test_indented_heading_starts_section(self):
        assert split_by_headings("x\n  ## Indented\nbody") == ["x", "## Indented\nbody"]

    def test_turns_split_before_speakers(self):
        text = "Interviewer: Hi there\nhow are you\nP1: Fine thanks\nInterviewer: Good"

        assert split_by_turns(text) == [
            "Interviewer: Hi there\nhow are you",
            "P1: Fine thanks",
            "Interviewer: Good",
        ]

    def test_turns_fall_back_to_paragraphs(self):
        assert split_by_turns("just prose\n\nmore prose") == ["just prose", "more prose"]

    def test_phrases(self):
        assert split_by_phrases("red, green; blue,no-space") == ["red", "green", "blue,no-space"]

    def test_responses_split_on_row_delimiter(self):
        text = f"one\n\n{ROW_DELIMITER}\n\ntwo\nlines"

        assert split_by_responses(text) == ["one", "two\nlines"]

    def test_responses_list_like_text_splits_lines(self):
        assert split_by_responses("- a\n- b\n- c\n- d") == ["- a", "- b", "- c", "- d"]

    def test_responses_prose_splits_paragraphs(self):
        text = "p1 line\n\np2\n\np3"

        assert split_by_responses(text) == ["p1 line", "p2", "p3"]

    def test_responses_rare_blank_lines_still_split_lines(self):
        lines = [f"item {i}" for i in range(30)]
        text = "\n".join(lines[:10]) + "\n\n" + "\n".join(lines[10:20]) + "\n\n" + "\n".join(lines[20:])

        assert split_by_responses(text) == lines

    def test_unknown_flat_granularity_keeps_text(self):
        assert split_flat("  a\n\nb  ", Granularity.ROW_COMBINED) == ["a\n\nb"]

    def test_whole_replaces_row_delimiter(self):
        assert split_flat(f"a{ROW_DELIMITER}b", Granularity.WHOLE) == ["a\n\nb"]

    def test_file_keeps_content(self):
        assert split_flat(" a\n\nb ", Granularity.FILE) == ["a\n\nb"]

    def test_empty_text(self):
        for granularity in Granularity:
            assert split_flat("   \n\n ", granularity) == []

    def test_normalize_text(self):
        """Test line ending normalization."""
        assert normalize_text("Line 1\r\nLine 2\rLine 3") == "Line 1\nLine 2\nLine 3"
        assert normalize_text("a\n\n\n\nb") == "a\n\n\n\nb"
