"""Unit tests for description text helpers."""

import pytest

from app.utils.text import first_sentence, shorten_extract, truncate_at_word


class TestFirstSentence:
    @pytest.mark.parametrize(
        "text,expected",
        [
            ("Warsaw is the capital of Poland. It is large.", "Warsaw is the capital of Poland."),
            ("Is Lyon big? Yes.", "Is Lyon big?"),
            ("Wow! A city.", "Wow!"),
            ("Kraków\nSecond line", "Kraków"),
            ("No terminator here", "No terminator here"),
            ("Ends with period.", "Ends with period."),
            ("St. Gallen is a city. More.", "St."),
        ],
    )
    def test_examples(self, text, expected):
        assert first_sentence(text) == expected


class TestTruncateAtWord:
    def test_short_text_unchanged(self):
        assert truncate_at_word("Short text", 250) == "Short text"

    def test_exact_length_unchanged(self):
        text = "a" * 250
        assert truncate_at_word(text, 250) == text

    def test_cuts_back_to_last_space(self):
        assert truncate_at_word("Warsaw is the capital of Poland", 12) == "Warsaw is..."

    def test_no_space_keeps_hard_cut(self):
        assert truncate_at_word("x" * 20, 10) == "x" * 10 + "..."

    def test_result_bound(self):
        text = " ".join(["word"] * 100)
        result = truncate_at_word(text, 250)

        assert len(result) <= 253
        assert result.endswith("...")


def test_shorten_extract():
    extract = "Gdańsk is a city on the Baltic coast of Poland. It has a port."
    assert shorten_extract(extract) == "Gdańsk is a city on the Baltic coast of Poland."
    assert shorten_extract(None) == ""
    assert shorten_extract("") == ""
