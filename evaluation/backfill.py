"""Recompute the metrics of a stored batch.

Used after the metric definitions change or to re-score an old batch with
different ignore markers: the ground truth is re-read from each record's
``transcript_path`` and compared against the stored provider response.
Identity fields are kept; only the metric fields are replaced.
"""
from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Sequence

from loguru import logger

from accuracy import calculate_accuracy_metrics
from core.error_handler import ErrorHandler
from core.exceptions import RecordError
from .pipeline import read_text_file
from .records import EvalResult, EvalSummary
from .storage import load_summary, save_summary


@dataclass
class BackfillReport:
    updated: int = 0
    failed: int = 0


def resolve_transcript_path(stored: str, base_dir: Optional[Path]) -> Path:
    """Locate the ground truth of a stored record.

    ``eval-external`` stores the path already joined onto its base directory,
    so the stored path is tried first. ``base_dir`` is only used for relative
    paths that do not exist as stored.
    """
    path = Path(stored)
    if path.exists() or base_dir is None or path.is_absolute():
        return path
    return base_dir / path


def _recompute(
    result: EvalResult,
    base_dir: Optional[Path],
    ignore_patterns: Sequence[str],
    single_line: bool,
) -> EvalResult:
    ground_truth = read_text_file(resolve_transcript_path(result.transcript_path, base_dir))
    metrics = calculate_accuracy_metrics(
        ground_truth,
        result.provider_response,
        ignore_patterns=ignore_patterns,
        single_line=single_line,
    )
    result.apply_metrics(metrics)
    return result


def backfill_summary(
    summary: EvalSummary,
    ignore_patterns: Optional[Sequence[str]] = None,
    single_line: Optional[bool] = None,
    base_dir: Optional[str | Path] = None,
) -> BackfillReport:
    """Update every record of ``summary`` in place.

    ``None`` overrides fall back to the values stored in the batch config;
    the config is updated to the values actually used.

    Raises:
        RecordError: if the batch has results but none could be recomputed.
            The summary is left untouched in that case.
    """
    patterns = list(summary.config.ignore_patterns if ignore_patterns is None else ignore_patterns)
    flatten = summary.config.single_line if single_line is None else single_line
    root = Path(base_dir) if base_dir is not None else None

    errors = ErrorHandler()
    report = BackfillReport()
    for result in summary.results:
        updated = errors.safe_execute(
            _recompute, result, root, patterns, flatten,
            context=f"backfill {result.identifier or result.transcript_path}",
        )
        if updated is not None:
            report.updated += 1
        else:
            report.failed += 1

    if summary.results and not report.updated:
        raise RecordError(f"none of the {report.failed} results could be recomputed")

    summary.config.ignore_patterns = patterns
    summary.config.single_line = flatten
    if report.failed:
        logger.warning(f"Backfilled {report.updated} results, {report.failed} kept their previous metrics")
    else:
        logger.info(f"Backfilled {report.updated} results")
    return report


def backfill_file(
    input_path: str | Path,
    output_path: Optional[str | Path] = None,
    ignore_patterns: Optional[Sequence[str]] = None,
    single_line: Optional[bool] = None,
    base_dir: Optional[str | Path] = None,
) -> BackfillReport:
    """Load, backfill and save a stored batch (in place without ``output_path``).

    Nothing is written when no record could be recomputed.
    """
    summary = load_summary(input_path)
    report = backfill_summary(summary, ignore_patterns, single_line, base_dir)
    out = save_summary(summary, output_path or input_path)
    logger.info(f"Backfilled results saved to: {out}")
    return report
