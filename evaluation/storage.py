"""YAML persistence for evaluation batches."""
from __future__ import annotations

from pathlib import Path

import yaml
from loguru import logger

from core.exceptions import RecordError
from .records import EvalSummary


def save_summary(summary: EvalSummary, path: str | Path) -> Path:
    """Write ``summary`` as YAML, creating parent directories as needed."""
    p = Path(path)
    p.parent.mkdir(parents=True, exist_ok=True)
    with p.open("w", encoding="utf-8") as f:
        yaml.safe_dump(summary.to_dict(), f, sort_keys=False, allow_unicode=True)
    logger.debug(f"Saved {len(summary.results)} results to {p}")
    return p


def load_summary(path: str | Path) -> EvalSummary:
    p = Path(path)
    if not p.exists():
        raise RecordError(f"Evaluation file not found: {p}")
    try:
        data = yaml.safe_load(p.read_text(encoding="utf-8"))
    except yaml.YAMLError as e:
        raise RecordError(f"Failed to parse {p}: {e}") from e
    return EvalSummary.from_dict(data)
