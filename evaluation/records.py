"""Persisted evaluation records.

A stored batch is a YAML document with a ``config`` mapping and a list of
``results``. Field names are the literal keys written to disk; downstream
summary and CSV tooling keys off of them.
"""
from __future__ import annotations

import time
from dataclasses import dataclass, field, asdict, fields
from typing import Any, Dict, List

from accuracy import METRIC_FIELDS, AccuracyMetrics
from core.exceptions import RecordError

TIMESTAMP_FORMAT = "%Y-%m-%d_%H-%M-%S"

# Key used by batches written before providers were generalized.
_LEGACY_RESPONSE_KEY = "openai_response"


def timestamp_now() -> str:
    return time.strftime(TIMESTAMP_FORMAT)


def _coerce(value: Any, default: Any) -> Any:
    """Cast a loaded YAML value to the type of the field default."""
    if value is None:
        return default
    if isinstance(default, bool):
        if isinstance(value, str):
            return value.strip().lower() in {"1", "true", "yes", "y", "on"}
        return bool(value)
    if isinstance(default, int):
        return int(value)
    if isinstance(default, float):
        return float(value)
    if isinstance(default, str):
        return str(value)
    return value


@dataclass
class EvalConfig:
    """How a batch was produced.

    Attributes:
        provider: Provider name, ``external`` for pre-computed transcriptions
        model: Model identifier
        prompt: Prompt sent to the provider
        temperature: Sampling temperature used
        csv_path: CSV file listing the rows
        rows: 0-based data-row indices to process, empty for all rows
        timestamp: Run timestamp (``YYYY-MM-DD_HH-MM-SS``)
        ignore_patterns: Markers stripped from ground truth
        single_line: Whether line breaks were flattened before comparing
    """
    provider: str = ""
    model: str = ""
    prompt: str = ""
    temperature: float = 0.0
    csv_path: str = ""
    rows: List[int] = field(default_factory=list)
    timestamp: str = field(default_factory=timestamp_now)
    ignore_patterns: List[str] = field(default_factory=list)
    single_line: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "EvalConfig":
        if not isinstance(data, dict):
            raise RecordError("config must be a mapping")
        defaults = cls()
        kwargs: Dict[str, Any] = {}
        for f in fields(cls):
            if f.name not in data:
                continue
            value = data[f.name]
            if f.name == "rows":
                kwargs[f.name] = [int(r) for r in (value or [])]
            elif f.name == "ignore_patterns":
                kwargs[f.name] = [str(p) for p in (value or [])]
            else:
                kwargs[f.name] = _coerce(value, getattr(defaults, f.name))
        return cls(**kwargs)


@dataclass
class EvalResult:
    """One evaluated row: identity fields plus the accuracy metrics."""
    identifier: str = ""
    image_path: str = ""
    transcript_path: str = ""
    public: bool = False
    provider_response: str = ""
    character_similarity: float = 0.0
    character_accuracy: float = 0.0
    word_similarity: float = 0.0
    word_accuracy: float = 0.0
    word_error_rate: float = 0.0
    total_words_original: int = 0
    total_words_transcribed: int = 0
    correct_words: int = 0
    substitutions: int = 0
    deletions: int = 0
    insertions: int = 0
    ignored_chars_count: int = 0

    @classmethod
    def from_metrics(cls, metrics: AccuracyMetrics, **identity: Any) -> "EvalResult":
        return cls(**identity, **metrics.to_dict())

    def apply_metrics(self, metrics: AccuracyMetrics) -> None:
        """Overwrite the metric fields in place, keeping identity fields."""
        for name, value in metrics.to_dict().items():
            setattr(self, name, value)

    def metrics_dict(self) -> Dict[str, Any]:
        return {name: getattr(self, name) for name in METRIC_FIELDS}

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "EvalResult":
        if not isinstance(data, dict):
            raise RecordError("each result must be a mapping")
        if "provider_response" not in data and _LEGACY_RESPONSE_KEY in data:
            data = {**data, "provider_response": data[_LEGACY_RESPONSE_KEY]}
        defaults = cls()
        kwargs = {
            f.name: _coerce(data[f.name], getattr(defaults, f.name))
            for f in fields(cls)
            if f.name in data
        }
        return cls(**kwargs)


@dataclass
class EvalSummary:
    config: EvalConfig
    results: List[EvalResult] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "config": self.config.to_dict(),
            "results": [r.to_dict() for r in self.results],
        }

    @classmethod
    def from_dict(cls, data: Any) -> "EvalSummary":
        if not isinstance(data, dict):
            raise RecordError("stored batch must be a mapping")
        results = data.get("results")
        if not isinstance(results, list):
            raise RecordError("stored batch has no results list")
        try:
            return cls(
                config=EvalConfig.from_dict(data.get("config") or {}),
                results=[EvalResult.from_dict(r) for r in results],
            )
        except (TypeError, ValueError) as e:
            raise RecordError(f"invalid value in stored batch: {e}") from e
