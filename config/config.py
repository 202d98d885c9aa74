"""Layered configuration for the benchmark command line.

Precedence, lowest first:
1. Default values
2. JSON configuration file (``config/htr_bench.json``)
3. Environment variables
4. Command-line arguments

Unknown command-line arguments are handed back to the caller so subcommand
parsers can consume them.
"""
from __future__ import annotations

import argparse
import json
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

from core.exceptions import ConfigurationError

LOG_LEVELS = ("TRACE", "DEBUG", "INFO", "SUCCESS", "WARNING", "ERROR", "CRITICAL")
_TRUE_STRINGS = {"1", "true", "yes", "y", "on"}


@dataclass(frozen=True)
class BenchConfig:
    """Settings shared by every subcommand.

    Attributes:
        evals_dir: Directory where evaluation batches are written
        base_dir: Directory prepended to relative paths found in CSV files
        ignore_patterns: Default "unknown" markers applied to ground truth
        single_line: Flatten line breaks before comparing
        debug: Debug mode flag
        log_level: Logging verbosity level
    """
    evals_dir: str = "evals"
    base_dir: str = "./"
    ignore_patterns: Tuple[str, ...] = field(default_factory=tuple)
    single_line: bool = False
    debug: bool = False
    log_level: str = "INFO"

    def __post_init__(self):
        if self.log_level not in LOG_LEVELS:
            raise ConfigurationError(f"Invalid log_level: {self.log_level}")
        if any(not p for p in self.ignore_patterns):
            raise ConfigurationError("Ignore patterns must be non-empty strings")

    @property
    def effective_log_level(self) -> str:
        return "DEBUG" if self.debug else self.log_level


class ConfigLoader:
    """Builds a ``BenchConfig`` from defaults, file, environment and CLI."""

    def __init__(self, config_dir: Path = Path("config"), filename: str = "htr_bench.json"):
        self.config_path = config_dir / filename

    def load(self, argv: List[str]) -> Tuple[BenchConfig, List[str]]:
        config_dict = self._get_defaults()
        config_dict.update(self._load_json_config())
        config_dict.update(self._load_env_overrides())
        cli_overrides, unknown_args = self._parse_cli_args(argv)
        config_dict.update(cli_overrides)
        return self._build_config(config_dict), unknown_args

    def _get_defaults(self) -> Dict[str, Any]:
        return {
            "evals_dir": "evals",
            "base_dir": "./",
            "ignore_patterns": [],
            "single_line": False,
            "debug": False,
            "log_level": "INFO",
        }

    def _load_json_config(self) -> Dict[str, Any]:
        if not self.config_path.exists():
            return {}
        try:
            with open(self.config_path, 'r', encoding='utf-8') as f:
                data = json.load(f)
        except (json.JSONDecodeError, OSError) as e:
            raise ConfigurationError(f"Failed to load {self.config_path}: {e}") from e
        if not isinstance(data, dict):
            raise ConfigurationError(f"{self.config_path} must contain a JSON object")
        return data

    def _load_env_overrides(self) -> Dict[str, Any]:
        """Read overrides from the environment.

        Supported environment variables:
        - HTR_EVALS_DIR: Output directory for evaluation batches
        - HTR_BASE_DIR: Base directory for CSV paths
        - HTR_IGNORE_PATTERNS: Whitespace separated ignore markers
        - HTR_SINGLE_LINE: Flatten line breaks before comparing
        - DEBUG: Enable debug mode
        - LOG_LEVEL: Set logging level
        """
        overrides: Dict[str, Any] = {}

        evals_dir = os.getenv("HTR_EVALS_DIR")
        if evals_dir:
            overrides["evals_dir"] = evals_dir

        base_dir = os.getenv("HTR_BASE_DIR")
        if base_dir:
            overrides["base_dir"] = base_dir

        patterns = os.getenv("HTR_IGNORE_PATTERNS")
        if patterns:
            overrides["ignore_patterns"] = patterns.split()

        if self._env_bool("HTR_SINGLE_LINE"):
            overrides["single_line"] = True

        if self._env_bool("DEBUG"):
            overrides["debug"] = True

        log_level = os.getenv("LOG_LEVEL")
        if log_level:
            overrides["log_level"] = log_level.upper()

        return overrides

    def _parse_cli_args(self, argv: List[str]) -> Tuple[Dict[str, Any], List[str]]:
        parser = argparse.ArgumentParser(add_help=False, allow_abbrev=False)
        parser.add_argument("--log-level", type=str.upper)
        parser.add_argument("--debug", action="store_true")
        parser.add_argument("--evals-dir")
        parser.add_argument("--dir", dest="base_dir")

        known, unknown = parser.parse_known_args(argv)

        overrides: Dict[str, Any] = {}
        if known.log_level:
            overrides["log_level"] = known.log_level
        if known.debug:
            overrides["debug"] = True
        if known.evals_dir:
            overrides["evals_dir"] = known.evals_dir
        if known.base_dir:
            overrides["base_dir"] = known.base_dir
        return overrides, unknown

    def _build_config(self, config_dict: Dict[str, Any]) -> BenchConfig:
        patterns = config_dict.get("ignore_patterns") or []
        if isinstance(patterns, str):
            patterns = patterns.split()
        return BenchConfig(
            evals_dir=str(config_dict.get("evals_dir", "evals")),
            base_dir=str(config_dict.get("base_dir", "./")),
            ignore_patterns=tuple(str(p) for p in patterns),
            single_line=self._as_bool(config_dict.get("single_line", False)),
            debug=self._as_bool(config_dict.get("debug", False)),
            log_level=str(config_dict.get("log_level", "INFO")).upper(),
        )

    @staticmethod
    def _as_bool(value: Any) -> bool:
        """Strings are true for "1", "true", "yes", "y", "on" (case-insensitive)."""
        if isinstance(value, str):
            return value.strip().lower() in _TRUE_STRINGS
        return bool(value)

    @staticmethod
    def _env_bool(name: str, default: bool = False) -> bool:
        val = os.getenv(name)
        if val is None:
            return default
        return ConfigLoader._as_bool(val)


def load_config(argv: Optional[List[str]] = None) -> Tuple[BenchConfig, List[str]]:
    """Convenience function for creating a ConfigLoader and loading configuration."""
    return ConfigLoader().load(list(argv or []))


__all__ = ["BenchConfig", "ConfigLoader", "LOG_LEVELS", "load_config"]
