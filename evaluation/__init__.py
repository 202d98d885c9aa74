"""Batch evaluation: persisted records, external-model scoring, backfill and summaries.

Modules
-------
records:        Persisted config/result/batch dataclasses.
storage:        YAML load and save of evaluation batches.
pipeline:       CSV-driven evaluation of pre-computed transcriptions.
backfill:       Recompute stored batches with new settings.
summary:        Averages, percentiles and CSV export.
run_evaluation: Command-line entry point.
"""
from .records import EvalConfig, EvalResult, EvalSummary
from .storage import load_summary, save_summary
from .pipeline import ExternalEvaluator, run_external_evaluation
from .backfill import BackfillReport, backfill_file, backfill_summary
from .summary import SummaryStats, summarize

__all__ = [
    "EvalConfig",
    "EvalResult",
    "EvalSummary",
    "ExternalEvaluator",
    "BackfillReport",
    "SummaryStats",
    "backfill_file",
    "backfill_summary",
    "load_summary",
    "run_external_evaluation",
    "save_summary",
    "summarize",
]
