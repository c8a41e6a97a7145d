"""Tests for layered configuration loading."""
import os

import pytest

from lfm.config import coerce_scalar, deep_merge, load_config


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for key in list(os.environ):
        if key.startswith("LFM__"):
            monkeypatch.delenv(key)
    monkeypatch.delenv("LFM_ENABLE_DOTENV", raising=False)


def test_defaults_without_env():
    cfg = load_config()
    assert cfg["matching"]["min_similarity"] == 0.3
    assert cfg["database"]["path"] == "data/db/lost_found.db"


def test_environment_overrides_nested_keys(monkeypatch):
    monkeypatch.setenv("LFM__MATCHING__MIN_SIMILARITY", "0.55")
    monkeypatch.setenv("LFM__LOGGING__PROGRESS_ENABLED", "false")
    monkeypatch.setenv("LFM__DATABASE__PATH", "/tmp/other.db")

    cfg = load_config()

    assert cfg["matching"]["min_similarity"] == 0.55
    assert cfg["logging"]["progress_enabled"] is False
    assert cfg["database"]["path"] == "/tmp/other.db"
    assert cfg["matching"]["diagnose_top_n"] == 5


def test_overrides_win_over_environment(monkeypatch):
    monkeypatch.setenv("LFM__MATCHING__MIN_SIMILARITY", "0.55")
    cfg = load_config({"matching": {"min_similarity": 0.7}})
    assert cfg["matching"]["min_similarity"] == 0.7


def test_dotenv_ignored_during_tests(tmp_path):
    env_file = tmp_path / ".env"
    env_file.write_text("LFM__MATCHING__DIAGNOSE_TOP_N=9\n", encoding="utf-8")
    assert load_config(dotenv_path=env_file)["matching"]["diagnose_top_n"] == 5


def test_dotenv_loaded_when_enabled(tmp_path, monkeypatch):
    monkeypatch.setenv("LFM_ENABLE_DOTENV", "1")
    env_file = tmp_path / ".env"
    env_file.write_text(
        "# local settings\n"
        "LFM__MATCHING__DIAGNOSE_TOP_N=9  # more rows\n"
        "LFM__DATABASE__PATH=\"data/#1.db\"\n"
        "UNRELATED=1\n",
        encoding="utf-8",
    )

    cfg = load_config(dotenv_path=env_file)

    assert cfg["matching"]["diagnose_top_n"] == 9
    assert cfg["database"]["path"] == "data/#1.db"
    assert "unrelated" not in cfg


def test_real_environment_beats_dotenv(tmp_path, monkeypatch):
    monkeypatch.setenv("LFM_ENABLE_DOTENV", "1")
    monkeypatch.setenv("LFM__MATCHING__DIAGNOSE_TOP_N", "2")
    env_file = tmp_path / ".env"
    env_file.write_text("LFM__MATCHING__DIAGNOSE_TOP_N=9\n", encoding="utf-8")

    assert load_config(dotenv_path=env_file)["matching"]["diagnose_top_n"] == 2


def test_defaults_not_mutated_between_calls():
    first = load_config()
    first["matching"]["min_similarity"] = 0.99
    assert load_config()["matching"]["min_similarity"] == 0.3


def test_deep_merge_nested():
    merged = deep_merge({"a": {"x": 1, "y": 2}, "b": 1}, {"a": {"y": 3}, "c": 4})
    assert merged == {"a": {"x": 1, "y": 3}, "b": 1, "c": 4}


@pytest.mark.parametrize("raw,expected", [
    ("true", True),
    ("No", False),
    ("42", 42),
    ("-7", -7),
    ("0.25", 0.25),
    ("1", 1),
    ("[1, 2]", [1, 2]),
    ('{"k": "v"}', {"k": "v"}),
    ("data/db/x.db", "data/db/x.db"),
    ("[not json", "[not json"),
])
def test_coerce_scalar(raw, expected):
    assert coerce_scalar(raw) == expected
