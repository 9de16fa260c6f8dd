import json
from pathlib import Path

import pytest

from paramsheet.config import get_settings
from paramsheet.extraction.cells import is_likely_label
from paramsheet.extraction.options import ExtractionConfig
from paramsheet.extraction.vocabulary import default_vocabulary, load_vocabulary


def test_bundled_vocabulary_tables() -> None:
    vocabulary = default_vocabulary()

    assert len(vocabulary.synonyms) == 18
    assert "parameter" in vocabulary.stopwords
    assert {"unit", "einheit"} <= vocabulary.garbage_labels
    assert list(vocabulary.role_keywords) == ["param", "comment", "unit", "check"]
    assert vocabulary.rulebook_tokens == ("R", "RD", "O")
    assert vocabulary.landmarks.variant_list == "customer platform variants"


def _bundled_payload() -> dict:
    return json.loads(get_settings().vocabulary_path.read_text(encoding="utf-8"))


def _write(tmp_path: Path, payload: dict) -> Path:
    path = tmp_path / "vocabulary.json"
    path.write_text(json.dumps(payload), encoding="utf-8")
    return path


def test_custom_locale_changes_label_filtering(tmp_path: Path) -> None:
    payload = _bundled_payload()
    payload["garbage_labels"].append("grandezza")
    config = ExtractionConfig(vocabulary=load_vocabulary(_write(tmp_path, payload)))

    assert is_likely_label("Grandezza")
    assert not is_likely_label("Grandezza", config=config)


def test_missing_section_is_reported(tmp_path: Path) -> None:
    payload = _bundled_payload()
    del payload["landmarks"]

    with pytest.raises(ValueError, match="landmarks"):
        load_vocabulary(_write(tmp_path, payload))


def test_invalid_synonym_pattern(tmp_path: Path) -> None:
    payload = _bundled_payload()
    payload["synonyms"].append(["(unclosed", "x"])

    with pytest.raises(ValueError):
        load_vocabulary(_write(tmp_path, payload))


def test_missing_file(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError):
        load_vocabulary(tmp_path / "absent.json")
