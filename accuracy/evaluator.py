"""Combines normalization, ignore-pattern alignment and the distance engines
into a single accuracy record per (ground truth, transcription) pair.
"""
from __future__ import annotations

from dataclasses import dataclass, asdict, field
from typing import Any, Dict, Iterable, Tuple

from .alignment import align_words
from .ignore_patterns import apply_ignore_patterns
from .metrics import character_accuracy, similarity
from .normalization import normalize_text, tokenize_words

# Persisted field names, in the order they are written to stored batches.
METRIC_FIELDS: Tuple[str, ...] = (
    "character_similarity",
    "character_accuracy",
    "word_similarity",
    "word_accuracy",
    "word_error_rate",
    "total_words_original",
    "total_words_transcribed",
    "correct_words",
    "substitutions",
    "deletions",
    "insertions",
    "ignored_chars_count",
)


@dataclass(frozen=True)
class EvaluationInput:
    ground_truth: str
    transcription: str
    ignore_patterns: Tuple[str, ...] = field(default_factory=tuple)
    single_line: bool = False


@dataclass(frozen=True)
class AccuracyMetrics:
    """Character and word accuracy for one evaluated pair."""
    character_similarity: float
    character_accuracy: float
    word_similarity: float
    word_accuracy: float
    word_error_rate: float
    total_words_original: int
    total_words_transcribed: int
    correct_words: int
    substitutions: int
    deletions: int
    insertions: int
    ignored_chars_count: int

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def evaluate(data: EvaluationInput) -> AccuracyMetrics:
    """Run the full metrics pipeline for one pair. Never raises on text content."""
    ground_truth = normalize_text(data.ground_truth, data.single_line)
    transcription = normalize_text(data.transcription, data.single_line)

    processed = apply_ignore_patterns(ground_truth, transcription, data.ignore_patterns)
    orig = processed.ground_truth.lower()
    trans = processed.transcription.lower()

    alignment = align_words(tokenize_words(orig), tokenize_words(trans))

    return AccuracyMetrics(
        character_similarity=similarity(orig, trans),
        character_accuracy=character_accuracy(orig, trans),
        word_similarity=alignment.word_similarity,
        word_accuracy=alignment.word_accuracy,
        word_error_rate=alignment.word_error_rate,
        total_words_original=alignment.total_original_words,
        total_words_transcribed=alignment.total_transcribed_words,
        correct_words=alignment.correct,
        substitutions=alignment.substitutions,
        deletions=alignment.deletions,
        insertions=alignment.insertions,
        ignored_chars_count=processed.ignored_count,
    )


def calculate_accuracy_metrics(
    ground_truth: str,
    transcription: str,
    ignore_patterns: Iterable[str] = (),
    single_line: bool = False,
) -> AccuracyMetrics:
    """Convenience wrapper building the ``EvaluationInput`` for the caller."""
    return evaluate(EvaluationInput(
        ground_truth=ground_truth,
        transcription=transcription,
        ignore_patterns=tuple(ignore_patterns),
        single_line=single_line,
    ))
