"""Character-level distance metrics.

All functions are pure and operate on already-normalized, already
ignore-processed, lower-cased inputs.
"""
from __future__ import annotations

import Levenshtein


def levenshtein(a: str, b: str) -> int:
    """Unit-cost insertion/deletion/substitution distance over code points."""
    if a == b:
        return 0
    return int(Levenshtein.distance(a, b))


def similarity(a: str, b: str) -> float:
    """``1 - distance / max(len)``; two empty strings are identical."""
    longest = max(len(a), len(b))
    if longest == 0:
        return 1.0
    return 1.0 - levenshtein(a, b) / longest


def character_error_rate(original: str, transcribed: str) -> float:
    """CER with the original length as denominator; 0.0 for an empty original."""
    if not original:
        return 0.0
    return levenshtein(original, transcribed) / len(original)


def character_accuracy(original: str, transcribed: str) -> float:
    """Complement of CER, floored at 0.0 so long insertions cannot go negative."""
    if not original:
        return 1.0
    return max(0.0, 1.0 - character_error_rate(original, transcribed))
