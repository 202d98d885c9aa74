"""Batch-level aggregation of evaluation results.

Averages are plain means across rows (every row weighs the same regardless
of its length), matching how per-row metrics are reported.
"""
from __future__ import annotations

import math
from dataclasses import dataclass, asdict
from pathlib import Path
from typing import Any, Dict, Iterable, List, Mapping, Sequence

import pandas as pd
from loguru import logger

from .records import EvalResult, EvalSummary
from .storage import load_summary

_AVERAGED = (
    "character_similarity",
    "character_accuracy",
    "word_similarity",
    "word_accuracy",
    "word_error_rate",
)
_TOTALED = (
    "total_words_original",
    "total_words_transcribed",
    "correct_words",
    "substitutions",
    "deletions",
    "insertions",
    "ignored_chars_count",
)


@dataclass
class Percentiles:
    p50: float
    p95: float
    p99: float


@dataclass
class SummaryStats:
    """Averages and totals over one batch of results."""
    total_evaluations: int
    average_character_similarity: float
    average_character_accuracy: float
    average_word_similarity: float
    average_word_accuracy: float
    average_word_error_rate: float
    total_words_original: int
    total_words_transcribed: int
    correct_words: int
    substitutions: int
    deletions: int
    insertions: int
    ignored_chars_count: int
    word_error_rate_percentiles: Percentiles

    def to_dict(self) -> Dict[str, Any]:
        d = asdict(self)
        pct = d.pop("word_error_rate_percentiles")
        d.update({f"word_error_rate_{k}": v for k, v in pct.items()})
        return d


def compute_percentiles(values: Sequence[float]) -> Percentiles:
    """Linear-interpolated p50/p95/p99; NaN for an empty input."""
    if not values:
        return Percentiles(float("nan"), float("nan"), float("nan"))
    vs = sorted(values)

    def _pct(p: float) -> float:
        k = (len(vs) - 1) * p
        f = math.floor(k)
        c = math.ceil(k)
        if f == c:
            return vs[int(k)]
        return vs[f] * (c - k) + vs[c] * (k - f)

    return Percentiles(p50=_pct(0.5), p95=_pct(0.95), p99=_pct(0.99))


def _mean(values: List[float]) -> float:
    if not values:
        return math.nan
    return sum(values) / len(values)


def summarize(results: Iterable[EvalResult]) -> SummaryStats:
    rows = list(results)
    averages = {name: _mean([getattr(r, name) for r in rows]) for name in _AVERAGED}
    totals = {name: sum(getattr(r, name) for r in rows) for name in _TOTALED}
    return SummaryStats(
        total_evaluations=len(rows),
        average_character_similarity=averages["character_similarity"],
        average_character_accuracy=averages["character_accuracy"],
        average_word_similarity=averages["word_similarity"],
        average_word_accuracy=averages["word_accuracy"],
        average_word_error_rate=averages["word_error_rate"],
        word_error_rate_percentiles=compute_percentiles([r.word_error_rate for r in rows]),
        **totals,
    )


def log_summary(stats: SummaryStats) -> None:
    if stats.total_evaluations == 0:
        logger.warning("No results to summarize")
        return
    pct = stats.word_error_rate_percentiles
    logger.info("=== SUMMARY STATISTICS ===")
    logger.info(f"Total Evaluations: {stats.total_evaluations}")
    logger.info(f"Average Character Similarity: {stats.average_character_similarity:.3f}")
    logger.info(f"Average Character Accuracy: {stats.average_character_accuracy:.3f}")
    logger.info(f"Average Word Similarity: {stats.average_word_similarity:.3f}")
    logger.info(f"Average Word Accuracy: {stats.average_word_accuracy:.3f}")
    logger.info(f"Average Word Error Rate: {stats.average_word_error_rate:.3f}")
    logger.info(f"Word Error Rate p50/p95/p99: {pct.p50:.3f} / {pct.p95:.3f} / {pct.p99:.3f}")
    if stats.ignored_chars_count:
        logger.info(f"Ignored Characters: {stats.ignored_chars_count}")


def log_result(result: EvalResult) -> None:
    logger.info(f"=== Results for {result.identifier} ===")
    if result.image_path:
        logger.info(f"Image: {result.image_path}")
    logger.info(f"Transcript: {result.transcript_path}")
    logger.info(
        f"char_sim={result.character_similarity:.3f} char_acc={result.character_accuracy:.3f} "
        f"word_sim={result.word_similarity:.3f} word_acc={result.word_accuracy:.3f} "
        f"wer={result.word_error_rate:.3f}"
    )
    logger.info(
        f"words orig={result.total_words_original} trans={result.total_words_transcribed} "
        f"correct={result.correct_words} S={result.substitutions} D={result.deletions} "
        f"I={result.insertions} ignored_chars={result.ignored_chars_count}"
    )


def results_frame(summary: EvalSummary) -> pd.DataFrame:
    """One row per result, columns named after the persisted fields."""
    return pd.DataFrame([r.to_dict() for r in summary.results])


def load_batches(paths: Iterable[str | Path]) -> Dict[str, EvalSummary]:
    """Load stored batches keyed by the path they were read from."""
    return {str(path): load_summary(path) for path in paths}


def summaries_frame(batches: Mapping[str, EvalSummary]) -> pd.DataFrame:
    """One row per batch with its configuration and averaged metrics."""
    records = []
    for name, summary in batches.items():
        stats = summarize(summary.results)
        records.append({
            "file": name,
            "provider": summary.config.provider,
            "model": summary.config.model,
            "timestamp": summary.config.timestamp,
            "ignore_patterns": " ".join(summary.config.ignore_patterns),
            "single_line": summary.config.single_line,
            **stats.to_dict(),
        })
    return pd.DataFrame(records)


def export_summaries_csv(batches: Mapping[str, EvalSummary], output_path: str | Path) -> Path:
    df = summaries_frame(batches)
    out = Path(output_path)
    out.parent.mkdir(parents=True, exist_ok=True)
    df.to_csv(out, index=False)
    logger.info(f"Wrote summary of {len(df)} batches to {out}")
    return out
