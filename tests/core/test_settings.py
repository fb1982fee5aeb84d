"""
Tests for engine settings.
"""

import json

import pytest
from pydantic import ValidationError

from lostworlds.core.settings import SETTINGS_ENV_VAR, EngineSettings, load_settings


def test_defaults_without_file(monkeypatch):
    monkeypatch.delenv(SETTINGS_ENV_VAR, raising=False)
    settings = load_settings()
    assert settings == EngineSettings()
    assert settings.history_limit == 10
    assert settings.preserve_turn_identity is True


def test_load_from_explicit_file(tmp_path):
    path = tmp_path / "settings.json"
    path.write_text(json.dumps({"history_limit": 3, "preserve_turn_identity": False}))

    settings = load_settings(path)

    assert settings.history_limit == 3
    assert settings.preserve_turn_identity is False
    assert settings.log_level == "INFO"


def test_load_from_environment(tmp_path, monkeypatch):
    path = tmp_path / "settings.json"
    path.write_text(json.dumps({"log_level": "DEBUG"}))
    monkeypatch.setenv(SETTINGS_ENV_VAR, str(path))

    assert load_settings().log_level == "DEBUG"


def test_missing_file_falls_back_to_defaults(tmp_path):
    assert load_settings(tmp_path / "nope.json") == EngineSettings()


def test_invalid_history_limit_is_rejected(tmp_path):
    path = tmp_path / "settings.json"
    path.write_text(json.dumps({"history_limit": 0}))

    with pytest.raises(ValidationError):
        load_settings(path)
