"""Text helpers for turning Wikipedia extracts into short descriptions."""

import re
from typing import Optional

# A sentence ends at . ? ! or a newline, followed by whitespace
_FIRST_SENTENCE = re.compile(r"^(.+?([.?!]|\n)\s)")


def first_sentence(text: str) -> str:
    """Return the first sentence of text, or its first line if none is found.

    Example:
        >>> first_sentence("Warsaw is the capital of Poland. It has 1.8M people.")
        'Warsaw is the capital of Poland.'
    """
    match = _FIRST_SENTENCE.match(text)
    if match:
        return match.group(0).strip()
    return text.split("\n")[0].strip()


def truncate_at_word(text: str, max_length: int, suffix: str = "...") -> str:
    """Cut text to max_length characters, then back to the last space.

    The suffix is appended after the cut, so the result may exceed
    max_length by len(suffix).

    Example:
        >>> truncate_at_word("Warsaw is the capital of Poland", 12)
        'Warsaw is...'
    """
    if len(text) <= max_length:
        return text

    truncated = text[:max_length].strip()
    last_space = truncated.rfind(" ")
    if last_space > 0:
        truncated = truncated[:last_space]
    return truncated + suffix


def shorten_extract(extract: Optional[str], max_length: int = 250) -> str:
    """First sentence of an extract, truncated to max_length at a word boundary."""
    if not extract:
        return ""
    return truncate_at_word(first_sentence(extract), max_length)
