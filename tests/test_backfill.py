from pathlib import Path

import pytest

from core.exceptions import RecordError
from evaluation.backfill import backfill_file, backfill_summary, resolve_transcript_path
from evaluation.pipeline import run_external_evaluation
from evaluation.storage import load_summary


@pytest.fixture
def stored(dataset, tmp_path):
    base, csv_path = dataset
    summary, out = run_external_evaluation(
        csv_path, "loghi", base_dir=base, evals_dir=tmp_path / "evals", show_progress=False,
    )
    return base, summary, out


def test_backfill_with_new_markers(stored):
    base, summary, _ = stored
    masked = summary.results[2]
    assert masked.word_accuracy < 1.0

    report = backfill_summary(summary, ignore_patterns=["|"], base_dir=base)

    assert (report.updated, report.failed) == (3, 0)
    assert masked.word_accuracy == 1.0
    assert masked.ignored_chars_count == 1
    assert masked.identifier == "page3.txt"
    assert summary.config.ignore_patterns == ["|"]


def test_backfill_falls_back_to_stored_settings(stored):
    base, summary, _ = stored
    before = [r.to_dict() for r in summary.results]

    backfill_summary(summary, base_dir=base)

    assert [r.to_dict() for r in summary.results] == before


def test_backfill_keeps_records_it_cannot_recompute(stored):
    base, summary, _ = stored
    (base / "gt" / "page1.txt").unlink()
    before = summary.results[0].to_dict()

    report = backfill_summary(summary, ignore_patterns=["|"], base_dir=base)

    assert (report.updated, report.failed) == (2, 1)
    assert summary.results[0].to_dict() == before


def test_backfill_file_in_place_and_to_output(stored, tmp_path):
    base, _, out = stored

    copy = tmp_path / "copy.yaml"
    backfill_file(out, output_path=copy, ignore_patterns=["|"], single_line=True, base_dir=base)

    assert load_summary(copy).config.single_line is True
    assert load_summary(out).config.single_line is False

    backfill_file(out, ignore_patterns=["|"], base_dir=base)

    assert load_summary(out).results[2].word_accuracy == 1.0


def test_backfill_fails_when_no_record_can_be_recomputed(stored, tmp_path):
    base, _, out = stored
    for name in ("page1", "page2", "page3"):
        (base / "gt" / f"{name}.txt").unlink()
    before = out.read_text(encoding="utf-8")

    with pytest.raises(RecordError):
        backfill_file(out, ignore_patterns=["|"], base_dir=base)

    assert out.read_text(encoding="utf-8") == before
    assert load_summary(out).config.ignore_patterns == []


def test_backfill_leaves_summary_untouched_when_all_fail(stored):
    base, summary, _ = stored
    for path in (base / "gt").iterdir():
        path.unlink()
    before = [r.to_dict() for r in summary.results]

    with pytest.raises(RecordError):
        backfill_summary(summary, ignore_patterns=["|"], base_dir=base)

    assert summary.config.ignore_patterns == []
    assert [r.to_dict() for r in summary.results] == before


def test_stored_relative_path_is_not_joined_twice(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    (tmp_path / "data" / "gt").mkdir(parents=True)
    (tmp_path / "data" / "gt" / "p.txt").write_text("x", encoding="utf-8")

    resolved = resolve_transcript_path("data/gt/p.txt", Path("data"))

    assert resolved == Path("data/gt/p.txt")


def test_base_dir_applies_to_paths_missing_as_stored(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)

    assert resolve_transcript_path("gt/p.txt", Path("data")) == Path("data/gt/p.txt")
    assert resolve_transcript_path("gt/p.txt", None) == Path("gt/p.txt")
