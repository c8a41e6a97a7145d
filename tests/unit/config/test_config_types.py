"""Tests for typed configuration dataclasses."""
from lfm.config import load_typed_config
from lfm.config_types import AppConfig, DatabaseConfig, LoggingConfig, MatchingConfig


def test_defaults():
    cfg = AppConfig()
    assert cfg.log_level == "INFO"
    assert cfg.matching.min_similarity == 0.3
    assert cfg.matching.diagnose_top_n == 5
    assert cfg.logging.progress_interval == 100
    assert cfg.database.path.endswith("lost_found.db")


def test_from_dict_partial_sections():
    cfg = AppConfig.from_dict({"matching": {"min_similarity": 0.5}, "database": {"path": "x.db"}})
    assert cfg.matching == MatchingConfig(min_similarity=0.5)
    assert cfg.logging == LoggingConfig()
    assert cfg.database == DatabaseConfig(path="x.db")


def test_dict_round_trip():
    cfg = AppConfig(log_level="DEBUG", matching=MatchingConfig(0.4, 3))
    assert AppConfig.from_dict(cfg.to_dict()) == cfg


def test_load_typed_config_applies_overrides(monkeypatch):
    monkeypatch.delenv("LFM__MATCHING__MIN_SIMILARITY", raising=False)
    cfg = load_typed_config({"matching": {"min_similarity": 0.45}})
    assert isinstance(cfg, AppConfig)
    assert cfg.matching.min_similarity == 0.45
    assert cfg.matching.diagnose_top_n == 5
