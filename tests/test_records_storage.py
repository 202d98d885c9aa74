import pytest

from accuracy import METRIC_FIELDS, calculate_accuracy_metrics
from core.exceptions import RecordError
from evaluation.records import EvalConfig, EvalResult, EvalSummary
from evaluation.storage import load_summary, save_summary


def _summary():
    config = EvalConfig(
        provider="external",
        model="loghi",
        csv_path="pages.csv",
        rows=[0, 2],
        timestamp="2024-05-01_12-00-00",
        ignore_patterns=["[?]"],
        single_line=True,
    )
    result = EvalResult.from_metrics(
        calculate_accuracy_metrics("Grüße aus Köln", "Grüße aus Koln"),
        identifier="page1.txt",
        transcript_path="gt/page1.txt",
        provider_response="Grüße aus Koln",
    )
    return EvalSummary(config=config, results=[result])


def test_result_dict_has_identity_and_metric_fields():
    result = _summary().results[0]

    d = result.to_dict()

    assert list(d)[:5] == ["identifier", "image_path", "transcript_path", "public", "provider_response"]
    assert tuple(list(d)[5:]) == METRIC_FIELDS
    assert tuple(result.metrics_dict()) == METRIC_FIELDS


def test_save_and_load_preserves_batch(tmp_path):
    summary = _summary()
    path = tmp_path / "nested" / "loghi.yaml"

    saved = save_summary(summary, path)
    loaded = load_summary(saved)

    assert saved == path
    assert loaded == summary
    assert "Grüße" in path.read_text(encoding="utf-8")


def test_apply_metrics_keeps_identity():
    result = _summary().results[0]

    result.apply_metrics(calculate_accuracy_metrics("x", "x"))

    assert result.identifier == "page1.txt"
    assert result.provider_response == "Grüße aus Koln"
    assert result.word_accuracy == 1.0
    assert result.total_words_original == 1


def test_legacy_response_key_is_read():
    result = EvalResult.from_dict({"identifier": "p", "openai_response": "old text", "word_accuracy": "0.5"})

    assert result.provider_response == "old text"
    assert result.word_accuracy == 0.5


def test_missing_fields_take_defaults():
    summary = EvalSummary.from_dict({"config": {"model": "m"}, "results": [{}]})

    assert summary.config.model == "m"
    assert summary.config.rows == []
    assert summary.config.single_line is False
    assert summary.results[0].correct_words == 0


def test_string_booleans_are_coerced():
    config = EvalConfig.from_dict({"single_line": "true"})

    assert config.single_line is True


@pytest.mark.parametrize(
    "data",
    [
        None,
        ["not", "a", "mapping"],
        {"config": {}},
        {"config": {}, "results": ["text"]},
        {"config": {}, "results": [{"correct_words": "many"}]},
    ],
)
def test_invalid_batches_raise_record_error(data):
    with pytest.raises(RecordError):
        EvalSummary.from_dict(data)


def test_load_missing_file(tmp_path):
    with pytest.raises(RecordError):
        load_summary(tmp_path / "absent.yaml")


def test_load_malformed_yaml(tmp_path):
    path = tmp_path / "bad.yaml"
    path.write_text("config: [unclosed\n", encoding="utf-8")

    with pytest.raises(RecordError):
        load_summary(path)
