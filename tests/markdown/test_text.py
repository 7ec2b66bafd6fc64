"""Tests for plain-text extraction, excerpts and reading time."""

import pytest

from folio.markdown.text import extract_plain_text, make_excerpt, reading_time


class TestExtractPlainText:
    def test_strips_markdown(self) -> None:
        assert extract_plain_text("# H\n**b** and `c` [t](u)") == "H b and  t"

    def test_fenced_code_is_removed(self) -> None:
        assert extract_plain_text("Intro\n```py\ncode\n```\nOutro") == "Intro Outro"

    def test_italic_and_deeper_headings(self) -> None:
        assert extract_plain_text("###### Deep\n*soft* words") == "Deep soft words"

    def test_empty(self) -> None:
        assert extract_plain_text("") == ""
        assert extract_plain_text(None) == ""

    @pytest.mark.parametrize("text", ["```", "**", "[x](", "*", "`", "#"])
    def test_malformed_input_does_not_raise(self, text: str) -> None:
        assert isinstance(extract_plain_text(text), str)


class TestMakeExcerpt:
    def test_short_text_is_unchanged(self) -> None:
        assert make_excerpt("Just a **line**.") == "Just a line."

    def test_cuts_on_word_boundary(self) -> None:
        text = " ".join(["word"] * 100)
        assert make_excerpt(text, length=20) == "word word word word..."

    def test_excerpt_fits_length_plus_ellipsis(self) -> None:
        text = " ".join(["lorem"] * 200)
        assert len(make_excerpt(text)) <= 163


class TestReadingTime:
    def test_rounds_up(self) -> None:
        assert reading_time(" ".join(["word"] * 400)) == 2
        assert reading_time(" ".join(["word"] * 401)) == 3

    def test_minimum_one_minute(self) -> None:
        assert reading_time("") == 1
        assert reading_time("   ") == 1
        assert reading_time("one") == 1

    def test_surrounding_whitespace_is_not_a_word(self) -> None:
        assert reading_time("  one two  ", words_per_minute=2) == 1
        assert reading_time("\n" + " ".join(["word"] * 400) + "\n") == 2

    def test_custom_speed(self) -> None:
        assert reading_time(" ".join(["word"] * 100), words_per_minute=50) == 2
