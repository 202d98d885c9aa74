"""Evaluation of pre-computed transcriptions against ground truth.

The input CSV has two columns, ``transcript,transcription``: the path of the
ground-truth transcript and the path of the text an external OCR/HTR model
produced for the same page. Paths are resolved against a base directory.

Design goals
------------
1. One bad row never aborts a batch: failures are logged and skipped.
2. Every stored batch carries the configuration needed to reproduce it.
3. Metrics come exclusively from the ``accuracy`` engine.
"""
from __future__ import annotations

import csv
from pathlib import Path
from typing import Iterable, List, Optional, Sequence, Tuple

from loguru import logger
from tqdm import tqdm

from accuracy import calculate_accuracy_metrics
from core.error_handler import ErrorHandler, as_result, log_execution_time
from core.exceptions import DatasetError
from .records import EvalConfig, EvalResult, EvalSummary
from .storage import save_summary
from .summary import log_result, log_summary, summarize

HEADER_FIRST_CELL = "transcript"
EXTERNAL_PROVIDER = "external"
EXTERNAL_PROMPT = "Evaluated from external source"


def read_text_file(path: Path) -> str:
    try:
        return path.read_text(encoding="utf-8")
    except FileNotFoundError as e:
        raise DatasetError(f"file not found: {path}") from e
    except UnicodeDecodeError as e:
        raise DatasetError(f"file is not valid UTF-8: {path}") from e


def read_csv_rows(csv_path: str | Path) -> List[List[str]]:
    """Read all CSV rows, dropping a leading ``transcript,...`` header."""
    p = Path(csv_path)
    try:
        with p.open("r", encoding="utf-8-sig", newline="") as f:
            records = [row for row in csv.reader(f)]
    except FileNotFoundError as e:
        raise DatasetError(f"failed to open CSV file: {p}") from e
    records = [row for row in records if row]
    if not records:
        raise DatasetError("CSV file is empty")
    if records[0][0].strip().lower() == HEADER_FIRST_CELL:
        records = records[1:]
    return records


def output_path_for(evals_dir: str | Path, model_name: str) -> Path:
    return Path(evals_dir) / f"{model_name.replace(':', '_')}.yaml"


class ExternalEvaluator:
    """Evaluates every selected CSV row and collects ``EvalResult`` records."""

    def __init__(
        self,
        base_dir: str | Path = "./",
        ignore_patterns: Sequence[str] = (),
        single_line: bool = False,
        show_progress: bool = True,
    ):
        self.base_dir = Path(base_dir)
        self.ignore_patterns = tuple(ignore_patterns)
        self.single_line = single_line
        self.show_progress = show_progress
        self._errors = ErrorHandler()

    def _resolve(self, raw: str) -> Path:
        return self.base_dir / raw.strip()

    @as_result
    def evaluate_row(self, row: Sequence[str]) -> EvalResult:
        transcript_path = self._resolve(row[0])
        transcription_path = self._resolve(row[1])

        ground_truth = read_text_file(transcript_path)
        transcription = read_text_file(transcription_path)

        metrics = calculate_accuracy_metrics(
            ground_truth,
            transcription,
            ignore_patterns=self.ignore_patterns,
            single_line=self.single_line,
        )
        return EvalResult.from_metrics(
            metrics,
            identifier=transcript_path.name,
            image_path="",
            transcript_path=str(transcript_path),
            public=False,
            provider_response=transcription,
        )

    def evaluate_rows(self, rows: Sequence[Sequence[str]], selected: Iterable[int] = ()) -> List[EvalResult]:
        wanted = set(selected) or set(range(len(rows)))
        results: List[EvalResult] = []
        for i, row in enumerate(tqdm(rows, desc="rows", disable=not self.show_progress)):
            if i not in wanted:
                logger.warning(f"Skipping row {i + 1}")
                continue
            if len(row) < 2:
                logger.warning(f"Insufficient columns in row {i + 1} (expected 2: transcript, transcription, got {len(row)})")
                continue
            outcome = self.evaluate_row(row)
            if outcome.is_failure():
                self._errors.handle(outcome.error, context=f"row {i + 1}")
                continue
            result = outcome.unwrap()
            log_result(result)
            results.append(result)
        return results

    @log_execution_time(level="INFO")
    def evaluate_csv(self, config: EvalConfig) -> List[EvalResult]:
        rows = read_csv_rows(config.csv_path)
        logger.info(f"Evaluating {len(rows)} rows from {config.csv_path}")
        results = self.evaluate_rows(rows, config.rows)
        if not results:
            raise DatasetError("no rows were successfully processed")
        return results


def run_external_evaluation(
    csv_path: str | Path,
    model_name: str,
    base_dir: str | Path = "./",
    evals_dir: str | Path = "evals",
    rows: Optional[Sequence[int]] = None,
    ignore_patterns: Sequence[str] = (),
    single_line: bool = False,
    show_progress: bool = True,
) -> Tuple[EvalSummary, Path]:
    """Evaluate an external model's transcriptions and store the batch as YAML."""
    config = EvalConfig(
        provider=EXTERNAL_PROVIDER,
        model=model_name,
        prompt=EXTERNAL_PROMPT,
        temperature=0.0,
        csv_path=str(csv_path),
        rows=list(rows or []),
        ignore_patterns=list(ignore_patterns),
        single_line=single_line,
    )
    evaluator = ExternalEvaluator(
        base_dir=base_dir,
        ignore_patterns=ignore_patterns,
        single_line=single_line,
        show_progress=show_progress,
    )
    results = evaluator.evaluate_csv(config)
    summary = EvalSummary(config=config, results=results)
    out = save_summary(summary, output_path_for(evals_dir, model_name))
    logger.info(f"External evaluation completed. Results saved to: {out}")
    log_summary(summarize(results))
    return summary, out
