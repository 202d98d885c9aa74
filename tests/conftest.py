from pathlib import Path

import pytest


@pytest.fixture
def dataset(tmp_path: Path):
    """A base directory with ground-truth/transcription pairs and a CSV listing them."""
    base = tmp_path / "data"
    (base / "gt").mkdir(parents=True)
    (base / "ocr").mkdir()

    def add(name: str, ground_truth: str, transcription: str) -> str:
        (base / "gt" / f"{name}.txt").write_text(ground_truth, encoding="utf-8")
        (base / "ocr" / f"{name}.txt").write_text(transcription, encoding="utf-8")
        return f"gt/{name}.txt,ocr/{name}.txt"

    lines = [
        "transcript,transcription",
        add("page1", "a b c", "a b c"),
        add("page2", "a b c", "a b d"),
        add("page3", "hello | world", "hello foo world"),
    ]
    csv_path = tmp_path / "pages.csv"
    csv_path.write_text("\n".join(lines) + "\n", encoding="utf-8")
    return base, csv_path
