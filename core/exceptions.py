"""Custom exception hierarchy for the benchmark tooling."""
from __future__ import annotations


class HTRBenchError(Exception):
    """Base exception for all benchmark errors."""
    pass


class DatasetError(HTRBenchError):
    """Raised when an evaluation CSV or one of its files cannot be used."""
    pass


class RecordError(HTRBenchError):
    """Raised when a stored evaluation batch cannot be read."""
    pass


class ConfigurationError(HTRBenchError):
    """Raised when configuration is invalid or missing."""
    pass
