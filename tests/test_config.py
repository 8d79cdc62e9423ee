"""Tests for user settings."""

import json
import logging

from prompt_bridge.config import DEFAULT_MAX_WORKERS, Settings, load_settings, save_settings
from prompt_bridge.scoring import DEFAULT_PENALTIES, ScoringPenalties


def test_missing_file_gives_defaults(tmp_path):
    settings = load_settings(tmp_path / "absent.json")

    assert settings == Settings()
    assert settings.penalties == DEFAULT_PENALTIES


def test_load_settings(tmp_path):
    path = tmp_path / "config.json"
    path.write_text(
        json.dumps({
            "default_target": "cursor",
            "author": "Jane Doe <jane@example.com>",
            "max_workers": 2,
            "penalties": {"lossy_warning": 15, "unknown": 1},
            "theme": "dark",
        }),
        encoding="utf-8",
    )

    settings = load_settings(path)

    assert settings.default_target == "cursor"
    assert settings.author == "Jane Doe <jane@example.com>"
    assert settings.max_workers == 2
    assert settings.penalties == ScoringPenalties(lossy_warning=15)


def test_invalid_worker_count_falls_back():
    assert Settings.from_dict({"max_workers": 0}).max_workers == DEFAULT_MAX_WORKERS
    assert Settings.from_dict({"max_workers": "many"}).max_workers == DEFAULT_MAX_WORKERS


def test_malformed_file_is_ignored(tmp_path, caplog):
    path = tmp_path / "config.json"
    path.write_text("{not json", encoding="utf-8")

    with caplog.at_level(logging.WARNING, logger="prompt_bridge.config"):
        settings = load_settings(path)

    assert settings == Settings()
    assert "Ignoring malformed settings" in caplog.text


def test_non_object_file_is_ignored(tmp_path):
    path = tmp_path / "config.json"
    path.write_text("[1, 2]", encoding="utf-8")

    assert load_settings(path) == Settings()


def test_save_and_reload(tmp_path):
    path = tmp_path / "nested" / "config.json"
    settings = Settings(default_target="kiro", author="Jane", max_workers=8, penalties=ScoringPenalties(validation_error=1))

    save_settings(settings, path)

    assert load_settings(path) == settings
