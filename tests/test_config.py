"""Tests for configuration loading and validation."""

import os

import pytest

from repo_statter.config import (
    CacheConfig,
    FileHeatConfig,
    RepoStatterConfig,
    WordCloudConfig,
    load_config,
)
from repo_statter.exceptions import ConfigurationError, InvalidConfigError


@pytest.fixture(autouse=True)
def isolated_environment(tmp_path, monkeypatch):
    """Keep real home/project config files and env vars out of these tests."""
    monkeypatch.setenv("HOME", str(tmp_path / "home"))
    monkeypatch.chdir(tmp_path)
    for key in list(os.environ):
        if key.startswith("REPO_STATTER_"):
            monkeypatch.delenv(key)


class TestDefaults:
    """Test default values."""

    def test_defaults(self):
        config = load_config()
        assert config == RepoStatterConfig()
        assert config.file_heat.recency_decay_days == 30.0
        assert config.file_heat.frequency_weight == 0.4
        assert config.file_heat.recency_weight == 0.6
        assert config.file_heat.max_files_displayed == 100
        assert config.word_cloud == WordCloudConfig(min_word_length=3, max_words=100, min_size=10, max_size=80)
        assert config.analysis.time_series_hourly_threshold_hours == 48.0
        assert config.analysis.bytes_per_line_estimate == 50


class TestValidation:
    """Test __post_init__ validation."""

    def test_weights_must_sum_to_one(self):
        with pytest.raises(InvalidConfigError):
            FileHeatConfig(frequency_weight=0.5, recency_weight=0.6)

    def test_decay_must_be_positive(self):
        with pytest.raises(InvalidConfigError):
            FileHeatConfig(recency_decay_days=0)

    def test_word_size_range(self):
        with pytest.raises(InvalidConfigError):
            WordCloudConfig(min_size=50, max_size=10)

    def test_cache_timeouts_positive_or_none(self):
        CacheConfig(idle_timeout_seconds=None, max_age_seconds=None)
        with pytest.raises(InvalidConfigError):
            CacheConfig(idle_timeout_seconds=0)

    def test_error_carries_details(self):
        with pytest.raises(InvalidConfigError) as exc_info:
            FileHeatConfig(max_files_displayed=0)
        assert exc_info.value.key == "file_heat.max_files_displayed"
        assert "reason=" in str(exc_info.value)


class TestLoading:
    """Test file, environment and override merging."""

    def test_project_file(self, tmp_path):
        (tmp_path / "repo-statter.toml").write_text("[file_heat]\nmax_files_displayed = 25\n")
        assert load_config().file_heat.max_files_displayed == 25

    def test_explicit_file_overrides_project_file(self, tmp_path):
        (tmp_path / "repo-statter.toml").write_text("[word_cloud]\nmax_words = 10\n")
        explicit = tmp_path / "custom.toml"
        explicit.write_text("[word_cloud]\nmax_words = 20\n")
        assert load_config(config_file=explicit).word_cloud.max_words == 20

    def test_env_overrides_files(self, tmp_path, monkeypatch):
        (tmp_path / "repo-statter.toml").write_text("[cache]\nenabled = true\n")
        monkeypatch.setenv("REPO_STATTER_CACHE_ENABLED", "false")
        monkeypatch.setenv("REPO_STATTER_CACHE_MAX_AGE_SECONDS", "none")
        config = load_config()
        assert config.cache.enabled is False
        assert config.cache.max_age_seconds is None

    def test_bad_env_value(self, monkeypatch):
        monkeypatch.setenv("REPO_STATTER_CACHE_ENABLED", "maybe")
        with pytest.raises(InvalidConfigError):
            load_config()

    def test_keyword_overrides(self):
        config = load_config(analysis={"max_commits": 10}, cache=CacheConfig(enabled=False))
        assert config.analysis.max_commits == 10
        assert config.cache.enabled is False

    def test_unknown_section(self, tmp_path):
        path = tmp_path / "bad.toml"
        path.write_text("[nonsense]\nx = 1\n")
        with pytest.raises(ConfigurationError):
            load_config(config_file=path)

    def test_unknown_key(self, tmp_path):
        path = tmp_path / "bad.toml"
        path.write_text("[cache]\nnot_a_field = 1\n")
        with pytest.raises(ConfigurationError):
            load_config(config_file=path)

    def test_missing_file(self, tmp_path):
        with pytest.raises(ConfigurationError):
            load_config(config_file=tmp_path / "missing.toml")

    def test_malformed_toml(self, tmp_path):
        path = tmp_path / "broken.toml"
        path.write_text("[cache\n")
        with pytest.raises(ConfigurationError):
            load_config(config_file=path)
