from __future__ import annotations
"""Command-line interface for transcription accuracy benchmarking.

Subcommands:
- eval-external: score an external model's transcriptions listed in a CSV
- backfill:      recompute the metrics of a stored batch (e.g. new ignore markers)
- summary:       print averages of stored batches, optionally exporting a CSV

Global options (--log-level, --debug, --evals-dir, --dir) are resolved by
``config.config.ConfigLoader`` together with the JSON file and environment.
"""
import argparse
import sys
from typing import List

from loguru import logger

from config.config import BenchConfig, load_config
from core.exceptions import ConfigurationError, HTRBenchError
from .backfill import backfill_file
from .pipeline import run_external_evaluation
from .summary import export_summaries_csv, load_batches, log_summary, summarize


def configure_logging(level: str) -> None:
    logger.remove()
    logger.add(sys.stderr, level=level)


def parse_args(argv: List[str] | None = None) -> argparse.Namespace:
    p = argparse.ArgumentParser(
        prog="htr-bench",
        description="Benchmark OCR/HTR transcriptions against ground truth "
                    "(global options: --log-level, --debug, --evals-dir, --dir)",
    )
    sub = p.add_subparsers(dest="command", required=True)

    ext = sub.add_parser("eval-external", help="Evaluate external model transcriptions against ground truth")
    ext.add_argument("--csv", "-c", dest="csv_path", required=True, help="CSV with columns transcript,transcription")
    ext.add_argument("--name", "-n", dest="model_name", required=True, help="Name of the external model (e.g. loghi, tesseract)")
    ext.add_argument("--rows", nargs="+", type=int, default=[], help="0-based data rows to process (default: all)")
    ext.add_argument("--ignore", action="append", dest="ignore_patterns", help="Ground-truth marker for unknown text (repeatable)")
    ext.add_argument("--single-line", dest="single_line", action="store_const", const=True, default=None,
                     help="Flatten line breaks before comparing")
    ext.add_argument("--no-progress", dest="show_progress", action="store_false", help="Disable the progress bar")

    bf = sub.add_parser("backfill", help="Recompute metrics of a stored evaluation batch")
    bf.add_argument("input", help="Stored evaluation YAML")
    bf.add_argument("--output", "-o", help="Write to this path instead of updating the input in place")
    bf.add_argument("--ignore", action="append", dest="ignore_patterns", help="Override stored ignore markers (repeatable)")
    flat = bf.add_mutually_exclusive_group()
    flat.add_argument("--single-line", dest="single_line", action="store_const", const=True, default=None)
    flat.add_argument("--multi-line", dest="single_line", action="store_const", const=False)

    sm = sub.add_parser("summary", help="Summarize stored evaluation batches")
    sm.add_argument("paths", nargs="+", help="Stored evaluation YAML files")
    sm.add_argument("--csv", dest="csv_out", help="Export one summary row per batch to this CSV")

    return p.parse_args(argv)


def _run_eval_external(ns: argparse.Namespace, settings: BenchConfig) -> None:
    patterns = ns.ignore_patterns if ns.ignore_patterns is not None else settings.ignore_patterns
    single_line = ns.single_line if ns.single_line is not None else settings.single_line
    run_external_evaluation(
        csv_path=ns.csv_path,
        model_name=ns.model_name,
        base_dir=settings.base_dir,
        evals_dir=settings.evals_dir,
        rows=ns.rows,
        ignore_patterns=patterns,
        single_line=single_line,
        show_progress=ns.show_progress,
    )


def _run_backfill(ns: argparse.Namespace, settings: BenchConfig) -> None:
    backfill_file(
        ns.input,
        output_path=ns.output,
        ignore_patterns=ns.ignore_patterns,
        single_line=ns.single_line,
        base_dir=settings.base_dir,
    )


def _run_summary(ns: argparse.Namespace, settings: BenchConfig) -> None:
    batches = load_batches(ns.paths)
    for path, summary in batches.items():
        logger.info(f"{path}: provider={summary.config.provider} model={summary.config.model} "
                    f"timestamp={summary.config.timestamp}")
        log_summary(summarize(summary.results))
    if ns.csv_out:
        export_summaries_csv(batches, ns.csv_out)


_COMMANDS = {
    "eval-external": _run_eval_external,
    "backfill": _run_backfill,
    "summary": _run_summary,
}


def main(argv: List[str] | None = None) -> int:
    raw_argv = list(sys.argv[1:] if argv is None else argv)
    try:
        settings, rest = load_config(raw_argv)
    except ConfigurationError as e:
        logger.error(f"Invalid configuration: {e}")
        return 1
    configure_logging(settings.effective_log_level)

    ns = parse_args(rest)
    logger.debug(f"Resolved configuration: {settings}")
    try:
        _COMMANDS[ns.command](ns, settings)
    except HTRBenchError as e:
        logger.error(f"{ns.command} failed: {e}")
        return 1
    return 0


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
