"""Main entry point for the transcription benchmark command line."""
from __future__ import annotations

from dotenv import load_dotenv

from evaluation.run_evaluation import main as run_cli


def main() -> int:
    """Application entry point."""
    load_dotenv()  # Searches for a .env file in the current and parent directories
    return run_cli()


__all__ = ["main"]

if __name__ == "__main__":
    raise SystemExit(main())
