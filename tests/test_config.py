"""Tests for configuration loading and validation."""

from pathlib import Path

import pytest

from hybrid_tailor.config import (
    AppConfig,
    CacheConfig,
    CompanyConfig,
    LLMConfig,
    PipelineConfig,
    load_config,
)


class TestLoadConfig:
    def test_defaults_without_file(self, tmp_path):
        config = load_config(tmp_path / "missing.yaml")
        assert config == AppConfig()
        assert config.pipeline.time_budget_seconds == 170.0
        assert config.pipeline.max_bullet_words == 35

    def test_reads_yaml_sections(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text(
            "llm:\n  model: claude-haiku-4-5-20251001\n  max_retries: 2\n"
            "pipeline:\n  time_budget_seconds: 60\n"
            "cache:\n  ttl_days: 7\n  db_path: /tmp/x/cache.db\n"
        )
        config = load_config(path)
        assert config.llm.model == "claude-haiku-4-5-20251001"
        assert config.llm.max_retries == 2
        assert config.llm.timeout == 60
        assert config.pipeline.time_budget_seconds == 60
        assert config.cache.ttl_days == 7
        assert config.cache.resolved_db_path == Path("/tmp/x/cache.db")

    def test_empty_file_gives_defaults(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text("")
        assert load_config(path) == AppConfig()

    def test_unknown_key_rejected(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text("pipeline:\n  budget: 10\n")
        with pytest.raises(TypeError):
            load_config(path)

    def test_repo_config_matches_defaults(self):
        root = Path(__file__).resolve().parent.parent
        assert load_config(root / "config.yaml") == AppConfig()


class TestConfigValidation:
    @pytest.mark.parametrize("value", [-1, 11])
    def test_max_retries_range(self, value):
        with pytest.raises(ValueError, match="max_retries"):
            LLMConfig(max_retries=value)

    def test_zero_retries_allowed(self):
        assert LLMConfig(max_retries=0).max_retries == 0

    def test_temperature_range(self):
        with pytest.raises(ValueError, match="temperature"):
            LLMConfig(temperature=1.5)

    def test_max_tokens_floor(self):
        with pytest.raises(ValueError, match="max_tokens"):
            LLMConfig(max_tokens=100)

    @pytest.mark.parametrize("value", [0.5, 901])
    def test_time_budget_range(self, value):
        with pytest.raises(ValueError, match="time_budget_seconds"):
            PipelineConfig(time_budget_seconds=value)

    def test_max_bullet_words_range(self):
        with pytest.raises(ValueError, match="max_bullet_words"):
            PipelineConfig(max_bullet_words=5)

    def test_keywords_per_item_range(self):
        with pytest.raises(ValueError, match="max_keywords_per_item"):
            PipelineConfig(max_keywords_per_item=-1)

    def test_lookup_timeout_must_be_positive(self):
        with pytest.raises(ValueError, match="lookup_timeout"):
            CompanyConfig(lookup_timeout=0)

    def test_ttl_days_range(self):
        with pytest.raises(ValueError, match="ttl_days"):
            CacheConfig(ttl_days=400)

    def test_yaml_values_are_validated(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text("llm:\n  timeout: 0\n")
        with pytest.raises(ValueError, match="timeout"):
            load_config(path)

    def test_configs_are_frozen(self):
        config = PipelineConfig()
        with pytest.raises(AttributeError):
            config.max_bullet_words = 50
