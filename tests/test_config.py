"""
Tests for fol_eq/config.py.
"""

import pytest

from fol_eq.config import (
    DEFAULT_CONFIG,
    ClosureStrategy,
    EngineConfig,
    parse_strategy,
    resolve_config,
)
from fol_eq.errors import ConfigError


class TestEngineConfig:
    def test_defaults(self):
        config = EngineConfig()
        assert config.strategy is ClosureStrategy.WORKLIST
        assert config.cache_closure is True
        config.validate()
        assert resolve_config(None) is DEFAULT_CONFIG
        assert resolve_config(config) is config

    def test_validate_collects_errors(self):
        with pytest.raises(ConfigError) as excinfo:
            EngineConfig(strategy="naive", cache_closure="yes").validate()
        message = str(excinfo.value)
        assert "strategy" in message
        assert "cache_closure" in message

    def test_from_dict(self):
        config = EngineConfig.from_dict({"strategy": "NAIVE", "cache_closure": "false"})
        assert config == EngineConfig(ClosureStrategy.NAIVE, False)

    def test_from_dict_rejects_unknown_keys(self):
        with pytest.raises(ConfigError, match="Unknown engine config keys: depth"):
            EngineConfig.from_dict({"depth": 3})

    def test_with_strategy(self):
        config = EngineConfig(cache_closure=False).with_strategy("naive")
        assert config == EngineConfig(ClosureStrategy.NAIVE, False)


class TestParseStrategy:
    def test_values(self):
        assert parse_strategy("worklist") is ClosureStrategy.WORKLIST
        assert parse_strategy(" Naive ") is ClosureStrategy.NAIVE
        assert parse_strategy(ClosureStrategy.NAIVE) is ClosureStrategy.NAIVE

    def test_unknown(self):
        with pytest.raises(ConfigError, match="expected one of: worklist, naive"):
            parse_strategy("egraph")


class TestFromFile:
    def test_engine_section(self, tmp_path):
        path = tmp_path / "fol_eq.yaml"
        path.write_text("engine:\n  strategy: naive\n  cache_closure: false\n")
        assert EngineConfig.from_file(path) == EngineConfig(ClosureStrategy.NAIVE, False)

    def test_empty_file_uses_defaults(self, tmp_path):
        path = tmp_path / "empty.yaml"
        path.write_text("")
        assert EngineConfig.from_file(path) == EngineConfig()

    def test_missing_section_uses_defaults(self, tmp_path):
        path = tmp_path / "other.yaml"
        path.write_text("logging:\n  level: debug\n")
        assert EngineConfig.from_file(path) == EngineConfig()

    def test_missing_file(self, tmp_path):
        with pytest.raises(ConfigError, match="not found"):
            EngineConfig.from_file(tmp_path / "nope.yaml")

    def test_malformed_yaml(self, tmp_path):
        path = tmp_path / "bad.yaml"
        path.write_text("engine: [\n")
        with pytest.raises(ConfigError, match="Error parsing YAML"):
            EngineConfig.from_file(path)

    def test_non_utf8_file(self, tmp_path):
        path = tmp_path / "latin1.yaml"
        path.write_bytes("engine:\n  strategy: na\xefve\n".encode("latin-1"))
        with pytest.raises(ConfigError, match="Error reading config file") as excinfo:
            EngineConfig.from_file(path)
        assert isinstance(excinfo.value.__cause__, UnicodeDecodeError)

    def test_directory(self, tmp_path):
        with pytest.raises(ConfigError, match="Error reading config file") as excinfo:
            EngineConfig.from_file(tmp_path)
        assert isinstance(excinfo.value.__cause__, OSError)

    def test_top_level_must_be_mapping(self, tmp_path):
        path = tmp_path / "list.yaml"
        path.write_text("- 1\n- 2\n")
        with pytest.raises(ConfigError, match="must be a mapping"):
            EngineConfig.from_file(path)


class TestFromEnv:
    def test_defaults(self, monkeypatch):
        monkeypatch.delenv("FOL_EQ_STRATEGY", raising=False)
        monkeypatch.delenv("FOL_EQ_CACHE", raising=False)
        assert EngineConfig.from_env() == EngineConfig()

    def test_overrides(self, monkeypatch):
        monkeypatch.setenv("FOL_EQ_STRATEGY", "naive")
        monkeypatch.setenv("FOL_EQ_CACHE", "0")
        assert EngineConfig.from_env() == EngineConfig(ClosureStrategy.NAIVE, False)

    def test_bad_bool(self, monkeypatch):
        monkeypatch.setenv("FOL_EQ_CACHE", "maybe")
        with pytest.raises(ConfigError, match="FOL_EQ_CACHE must be a boolean"):
            EngineConfig.from_env()
