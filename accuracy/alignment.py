"""Word-level alignment with backtrace-based edit classification."""
from __future__ import annotations

from dataclasses import dataclass
from typing import List, Sequence


@dataclass(frozen=True)
class WordAlignment:
    """Edit counts recovered from the word-level DP backtrace.

    Attributes:
        correct: Original words matched exactly
        substitutions: Original words replaced by a different word
        deletions: Original words missing from the transcription
        insertions: Extra transcribed words
        total_original_words: Length of the original word sequence
        total_transcribed_words: Length of the transcribed word sequence
        distance: Minimum word-level edit distance
    """
    correct: int
    substitutions: int
    deletions: int
    insertions: int
    total_original_words: int
    total_transcribed_words: int
    distance: int

    @property
    def edits(self) -> int:
        return self.substitutions + self.deletions + self.insertions

    @property
    def word_error_rate(self) -> float:
        """WER = (S + D + I) / N, 0.0 when there are no original words."""
        if self.total_original_words == 0:
            return 0.0
        return self.edits / self.total_original_words

    @property
    def word_accuracy(self) -> float:
        return 1.0 - self.word_error_rate

    @property
    def word_similarity(self) -> float:
        """Distance normalized by the longer sequence, unlike ``word_accuracy``."""
        longest = max(self.total_original_words, self.total_transcribed_words)
        if longest == 0:
            return 1.0
        return 1.0 - self.distance / longest


def _distance_table(orig: Sequence[str], trans: Sequence[str]) -> List[List[int]]:
    """Classic Wagner-Fischer table over tokens."""
    m, n = len(orig), len(trans)
    dp = [[0] * (n + 1) for _ in range(m + 1)]
    for i in range(m + 1):
        dp[i][0] = i
    for j in range(n + 1):
        dp[0][j] = j
    for i in range(1, m + 1):
        for j in range(1, n + 1):
            if orig[i - 1] == trans[j - 1]:
                dp[i][j] = dp[i - 1][j - 1]
            else:
                dp[i][j] = 1 + min(
                    dp[i - 1][j],      # deletion
                    dp[i][j - 1],      # insertion
                    dp[i - 1][j - 1],  # substitution
                )
    return dp


def word_distance(original_words: Sequence[str], transcribed_words: Sequence[str]) -> int:
    return _distance_table(original_words, transcribed_words)[-1][-1]


def align_words(original_words: Sequence[str], transcribed_words: Sequence[str]) -> WordAlignment:
    """Align two word sequences and classify every edit.

    The backtrace walks from the bottom-right cell to the origin. Equal words
    are counted as correct; otherwise a substitution is preferred over a
    deletion and a deletion over an insertion when several predecessors give
    the same cost.
    """
    dp = _distance_table(original_words, transcribed_words)
    m, n = len(original_words), len(transcribed_words)

    correct = substitutions = deletions = insertions = 0
    i, j = m, n
    while i > 0 or j > 0:
        if i > 0 and j > 0 and original_words[i - 1] == transcribed_words[j - 1]:
            correct += 1
            i -= 1
            j -= 1
        elif i > 0 and j > 0 and dp[i][j] == dp[i - 1][j - 1] + 1:
            substitutions += 1
            i -= 1
            j -= 1
        elif i > 0 and dp[i][j] == dp[i - 1][j] + 1:
            deletions += 1
            i -= 1
        else:
            insertions += 1
            j -= 1

    return WordAlignment(
        correct=correct,
        substitutions=substitutions,
        deletions=deletions,
        insertions=insertions,
        total_original_words=m,
        total_transcribed_words=n,
        distance=dp[m][n],
    )
