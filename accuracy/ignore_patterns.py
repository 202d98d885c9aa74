"""Alignment of ground truth containing "unknown" markers against a transcription.

Labelers mark text they could not decipher with a literal marker such as
``|`` or ``[?]``. A marker standing on its own (whitespace or a string edge on
both sides) hides a whole word; a marker inside a word hides one character.
The aligner removes the markers from the ground truth and skips the matching
span of the transcription, walking both strings in lockstep.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Sequence


@dataclass(frozen=True)
class ProcessedPair:
    """Ground truth and transcription after ignored spans were removed.

    Attributes:
        ground_truth: Ground truth with every marker removed
        transcription: Transcription with the masked spans skipped
        ignored_count: Number of ignored ground-truth characters
    """
    ground_truth: str
    transcription: str
    ignored_count: int


def _is_boundary(text: str, index: int) -> bool:
    """True if ``index`` is outside ``text`` or points at whitespace."""
    return index < 0 or index >= len(text) or text[index].isspace()


def _match_at(text: str, pos: int, patterns: Sequence[str]) -> Optional[str]:
    for pattern in patterns:
        if text.startswith(pattern, pos):
            return pattern
    return None


def _skip_word(text: str, pos: int) -> int:
    """Advance past leading whitespace and then one run of non-whitespace."""
    while pos < len(text) and text[pos].isspace():
        pos += 1
    while pos < len(text) and not text[pos].isspace():
        pos += 1
    return pos


def count_ignored_chars(ground_truth: str, patterns: Sequence[str]) -> int:
    """Sum of occurrences times pattern length, independent of classification."""
    return sum(ground_truth.count(p) * len(p) for p in patterns if p)


def apply_ignore_patterns(ground_truth: str, transcription: str, patterns: Sequence[str]) -> ProcessedPair:
    """Strip ignore markers from ``ground_truth`` and skip the masked span in ``transcription``.

    Patterns are tried in the given order at every position and the first
    literal match wins. Characters that do not start a marker are copied from
    both strings in lockstep; once the transcription is exhausted only ground
    truth is copied. Skips stop silently at the end of the transcription.

    Args:
        ground_truth: Reference text, possibly containing markers
        transcription: Provider output to align against it
        patterns: Literal markers; empty strings are ignored

    Returns:
        ProcessedPair with both processed strings and the ignored character count
    """
    active = [p for p in patterns if p]
    if not active:
        return ProcessedPair(ground_truth, transcription, 0)

    gt_out: list[str] = []
    trans_out: list[str] = []
    gt_pos = 0
    trans_pos = 0
    gt_len = len(ground_truth)
    trans_len = len(transcription)

    while gt_pos < gt_len:
        pattern = _match_at(ground_truth, gt_pos, active)
        if pattern is None:
            gt_out.append(ground_truth[gt_pos])
            if trans_pos < trans_len:
                trans_out.append(transcription[trans_pos])
                trans_pos += 1
            gt_pos += 1
            continue

        end = gt_pos + len(pattern)
        standalone = _is_boundary(ground_truth, gt_pos - 1) and _is_boundary(ground_truth, end)
        gt_pos = end
        if standalone:
            trans_pos = _skip_word(transcription, trans_pos)
        elif trans_pos < trans_len:
            trans_pos += 1

    return ProcessedPair(
        ground_truth="".join(gt_out),
        transcription="".join(trans_out),
        ignored_count=count_ignored_chars(ground_truth, active),
    )
