"""Tests for configuration loading."""

import os

import pytest

from syncscope.config import EstimationConfig, ProfilerConfig, default_config, load_config
from syncscope.exceptions import ConfigurationError, InvalidConfigError


@pytest.fixture(autouse=True)
def isolated(tmp_path, monkeypatch):
    """Run with no global/project config and no SYNCSCOPE_* variables."""
    monkeypatch.setenv("HOME", str(tmp_path / "home"))
    monkeypatch.chdir(tmp_path)
    for key in list(os.environ):
        if key.startswith("SYNCSCOPE_"):
            monkeypatch.delenv(key)


class TestDefaults:
    def test_default_values(self):
        assert default_config.primary_behaviour_type == "UdonBehaviour"
        assert default_config.sync_selector_names[0] == "syncMethod"
        assert default_config.estimation.continuous_rate_hz == 10.0
        assert default_config.estimation.base_bytes_per_update == 24.0

    def test_load_without_sources(self):
        assert load_config() == ProfilerConfig()


class TestValidation:
    def test_negative_rate(self):
        with pytest.raises(ValueError, match="manual_rate_hz"):
            EstimationConfig(manual_rate_hz=-1.0)

    def test_empty_name_list(self):
        with pytest.raises(ValueError, match="sync_selector_names"):
            ProfilerConfig(sync_selector_names=())

    def test_bad_verbosity(self):
        with pytest.raises(ValueError):
            ProfilerConfig(verbosity="loud")


class TestSources:
    def test_explicit_file_with_estimation_table(self, tmp_path):
        path = tmp_path / "custom.toml"
        path.write_text(
            'primary_behaviour_type = "NetBehaviour"\n'
            'sync_selector_names = ["mode"]\n'
            "\n"
            "[estimation]\n"
            "continuous_rate_hz = 20.0\n",
            encoding="utf-8",
        )
        config = load_config(config_file=path)
        assert config.primary_behaviour_type == "NetBehaviour"
        assert config.sync_selector_names == ("mode",)
        assert config.estimation.continuous_rate_hz == 20.0
        assert config.estimation.manual_rate_hz == 0.2

    def test_project_file_discovered(self, tmp_path):
        (tmp_path / "syncscope.toml").write_text('platform_type_prefix = "SDK"\n', encoding="utf-8")
        assert load_config().platform_type_prefix == "SDK"

    def test_env_overrides_file(self, tmp_path, monkeypatch):
        (tmp_path / "syncscope.toml").write_text('discovery_keyword = "net"\n', encoding="utf-8")
        monkeypatch.setenv("SYNCSCOPE_DISCOVERY_KEYWORD", "replic")
        assert load_config().discovery_keyword == "replic"

    def test_cli_overrides_win(self, monkeypatch):
        monkeypatch.setenv("SYNCSCOPE_VERBOSITY", "quiet")
        assert load_config(verbose=True).verbosity == "verbose"
        assert load_config(quiet=True).verbosity == "quiet"

    def test_missing_explicit_file(self, tmp_path):
        with pytest.raises(ConfigurationError, match="not found"):
            load_config(config_file=tmp_path / "nope.toml")

    def test_unknown_key(self, tmp_path):
        path = tmp_path / "c.toml"
        path.write_text("colour = 3\n", encoding="utf-8")
        with pytest.raises(ConfigurationError, match="Invalid configuration"):
            load_config(config_file=path)

    def test_invalid_estimation_value(self, tmp_path):
        path = tmp_path / "c.toml"
        path.write_text("[estimation]\nintensity_multiplier = 0\n", encoding="utf-8")
        with pytest.raises(InvalidConfigError):
            load_config(config_file=path)

    def test_bad_toml(self, tmp_path):
        path = tmp_path / "c.toml"
        path.write_text("this is = = not toml", encoding="utf-8")
        with pytest.raises(ConfigurationError, match="Invalid config file"):
            load_config(config_file=path)
