"""Tests for the JSON settings layer."""

import json

import pytest

from Calculator import config_manager


@pytest.fixture
def config_file(tmp_path, monkeypatch):
    path = tmp_path / "config.json"
    monkeypatch.setattr(config_manager, "config_json", path)
    return path


@pytest.fixture
def strings_file(tmp_path, monkeypatch):
    path = tmp_path / "ui_strings.json"
    monkeypatch.setattr(config_manager, "ui_strings", path)
    return path


def test_missing_file_gives_defaults(config_file):
    assert config_manager.load_setting_value("all") == config_manager.DEFAULT_SETTINGS


def test_corrupt_file_gives_defaults(config_file):
    config_file.write_text("{not json", encoding="utf-8")
    assert config_manager.load_setting_value("all") == config_manager.DEFAULT_SETTINGS


def test_stored_values_override_defaults(config_file):
    config_file.write_text(json.dumps({"darkmode": True}), encoding="utf-8")
    settings = config_manager.load_setting_value("all")
    assert settings["darkmode"] is True
    assert settings["max_digits"] == 16


def test_single_value(config_file):
    config_file.write_text(json.dumps({"max_digits": 12}), encoding="utf-8")
    assert config_manager.load_setting_value("max_digits") == 12
    assert config_manager.load_setting_value("unknown") == 0


def test_save_and_reload(config_file):
    settings = config_manager.load_setting_value("all")
    settings["darkmode"] = True
    assert config_manager.save_setting(settings) == settings
    assert config_manager.load_setting_value("darkmode") is True


def test_save_failure_returns_empty(tmp_path, monkeypatch):
    monkeypatch.setattr(config_manager, "config_json", tmp_path / "missing" / "config.json")
    assert config_manager.save_setting({"darkmode": True}) == {}


@pytest.mark.parametrize("stored, expected", [
    (10, 10),
    (1, 1),
    (0, 16),
    (-3, 16),
    ("abc", 16),
    (True, 16),
])
def test_get_max_digits(config_file, stored, expected):
    config_file.write_text(json.dumps({"max_digits": stored}), encoding="utf-8")
    assert config_manager.get_max_digits() == expected


def test_setting_descriptions(strings_file):
    strings_file.write_text(json.dumps({"darkmode": "Dark mode"}), encoding="utf-8")
    assert config_manager.load_setting_description("darkmode") == "Dark mode"
    assert config_manager.load_setting_description("max_digits") == "max_digits"
    assert config_manager.load_setting_description("all") == {"darkmode": "Dark mode"}


def test_shipped_files_cover_every_setting():
    with open(config_manager.config_json, encoding="utf-8") as f:
        shipped = json.load(f)
    with open(config_manager.ui_strings, encoding="utf-8") as f:
        descriptions = json.load(f)
    assert set(shipped) == set(config_manager.DEFAULT_SETTINGS)
    assert set(descriptions) == set(config_manager.DEFAULT_SETTINGS)
