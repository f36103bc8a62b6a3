"""Tests for preferences loading and saving."""

import json

import pytest

from perceptual.config import (
    Preferences,
    get_perceptual_root,
    get_preferences_path,
    load_preferences,
    save_preferences,
)


def test_root_from_env(tmp_path, monkeypatch):
    monkeypatch.setenv("PERCEPTUAL_HOME", str(tmp_path))
    assert get_perceptual_root() == tmp_path
    assert get_preferences_path() == tmp_path / "preferences.json"


def test_missing_file_gives_defaults(tmp_path):
    prefs = load_preferences(tmp_path / "nope.json")
    assert prefs == Preferences()


def test_round_trip(tmp_path):
    path = tmp_path / "sub" / "preferences.json"
    prefs = Preferences(range_db=60, boost_range_db=9, default_level=0.8, step=0.1,
                        allow_boost=False)
    assert save_preferences(prefs, path)
    assert load_preferences(path) == prefs


def test_default_path_uses_env(tmp_path, monkeypatch):
    monkeypatch.setenv("PERCEPTUAL_HOME", str(tmp_path))
    save_preferences(Preferences(range_db=40))
    assert load_preferences().range_db == 40.0


def test_partial_file_and_unknown_keys(tmp_path, caplog):
    path = tmp_path / "preferences.json"
    path.write_text(json.dumps({"range_db": 70, "colour": "blue"}), encoding="utf-8")
    prefs = load_preferences(path)
    assert prefs.range_db == 70.0
    assert prefs.boost_range_db == 6.0
    assert "colour" in caplog.text


def test_corrupt_file_gives_defaults(tmp_path, caplog):
    path = tmp_path / "preferences.json"
    path.write_text("{not json", encoding="utf-8")
    assert load_preferences(path) == Preferences()
    assert "could not read preferences" in caplog.text

    path.write_text("[1, 2]", encoding="utf-8")
    assert load_preferences(path) == Preferences()


@pytest.mark.parametrize("data", [
    {"range_db": 0},
    {"boost_range_db": -3},
    {"default_level": 2.5},
    {"step": 0},
    {"range_db": "wide"},
    {"range_db": None},
    {"step": float("nan")},
    {"allow_boost": "false"},
    {"allow_boost": 0},
])
def test_bad_values_raise(tmp_path, data):
    path = tmp_path / "preferences.json"
    path.write_text(json.dumps(data), encoding="utf-8")
    with pytest.raises(ValueError):
        load_preferences(path)
