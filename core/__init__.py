"""Core infrastructure: exceptions, result type and error handling helpers."""
from __future__ import annotations

from .exceptions import HTRBenchError, DatasetError, RecordError, ConfigurationError
from .result import Result, Success, Failure

__all__ = [
    "HTRBenchError",
    "DatasetError",
    "RecordError",
    "ConfigurationError",
    "Result",
    "Success",
    "Failure",
]
