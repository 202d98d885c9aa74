"""Text normalization applied before ignore-pattern alignment.

Case folding is not done here; it belongs to the comparison step.
"""
from __future__ import annotations

import re

_LINE_BREAKS = re.compile(r"[\n\r\t]")
_SPACE_RUNS = re.compile(r" {2,}")


def flatten_to_single_line(text: str) -> str:
    """Replace line breaks and tabs with spaces and collapse runs of spaces.

    Leading and trailing spaces are kept.
    """
    return _SPACE_RUNS.sub(" ", _LINE_BREAKS.sub(" ", text))


def normalize_text(text: str, single_line: bool = False) -> str:
    if single_line:
        return flatten_to_single_line(text)
    return text


def tokenize_words(text: str) -> list[str]:
    """Split on any whitespace, dropping empty tokens."""
    return text.split()
