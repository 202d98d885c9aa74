"""Accuracy evaluation engine for OCR/HTR transcriptions.

Modules
-------
normalization:   Optional single-line flattening and word tokenization.
ignore_patterns: Removal of "unknown" markers with lockstep transcription skipping.
metrics:         Character distance, similarity and accuracy.
alignment:       Word-level DP alignment with edit classification.
evaluator:       The combined ``evaluate`` pipeline and the metrics record.
"""
from .alignment import WordAlignment, align_words, word_distance
from .evaluator import (
    METRIC_FIELDS, AccuracyMetrics, EvaluationInput,
    calculate_accuracy_metrics, evaluate,
)
from .ignore_patterns import ProcessedPair, apply_ignore_patterns
from .metrics import character_accuracy, levenshtein, similarity
from .normalization import normalize_text

__all__ = [
    "METRIC_FIELDS",
    "AccuracyMetrics",
    "EvaluationInput",
    "ProcessedPair",
    "WordAlignment",
    "align_words",
    "apply_ignore_patterns",
    "calculate_accuracy_metrics",
    "character_accuracy",
    "evaluate",
    "levenshtein",
    "normalize_text",
    "similarity",
    "word_distance",
]
