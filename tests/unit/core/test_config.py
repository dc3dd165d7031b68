"""
Unit Tests for Configuration.

Tests the settings file store and the environment settings.
"""

from datetime import datetime, timezone
from pathlib import Path

import pytest
import yaml

from sprout_track.core.config import ConfigStore, Settings, default_config_dir, get_settings, load_yaml_config
from sprout_track.core.config_schema import CachedSettings, OutputMode
from sprout_track.core.exceptions import ConfigurationError


class TestLoadYamlConfig:
    """Tests for reading the YAML file."""

    def test_missing_file_is_empty(self, tmp_path: Path) -> None:
        assert load_yaml_config(tmp_path / "nope.yaml") == {}

    def test_empty_file_is_empty(self, tmp_path: Path) -> None:
        path = tmp_path / "config.yaml"
        path.write_text("")
        assert load_yaml_config(path) == {}

    def test_non_mapping_is_rejected(self, tmp_path: Path) -> None:
        path = tmp_path / "config.yaml"
        path.write_text("- a\n- b\n")

        with pytest.raises(ConfigurationError, match="expected a mapping"):
            load_yaml_config(path)

    def test_syntax_error_is_configuration_error(self, tmp_path: Path) -> None:
        path = tmp_path / "config.yaml"
        path.write_text("server: [unclosed\n")

        with pytest.raises(ConfigurationError, match="Invalid configuration in"):
            load_yaml_config(path)


class TestConfigStore:
    """Tests for ConfigStore."""

    def test_defaults(self, config_store: ConfigStore) -> None:
        config = config_store.config

        assert config.server == ""
        assert config.token is None
        assert config.output_format == OutputMode.TABLE
        assert config.cached_settings is None

    def test_update_persists_immediately(self, config_store: ConfigStore) -> None:
        config_store.update(server="https://tracker.example.com", default_baby_id="b1")

        reloaded = ConfigStore(config_store.path).config
        assert reloaded.server == "https://tracker.example.com"
        assert reloaded.default_baby_id == "b1"

    def test_none_clears_key_from_file(self, config_store: ConfigStore) -> None:
        config_store.update(family_slug="smith")
        config_store.update(family_slug=None)

        data = yaml.safe_load(config_store.path.read_text())
        assert "family_slug" not in data

    def test_trailing_slash_is_stripped(self, config_store: ConfigStore) -> None:
        config_store.update(server="https://tracker.example.com//")
        assert config_store.config.server == "https://tracker.example.com"

    def test_output_format_round_trip(self, config_store: ConfigStore) -> None:
        config_store.update(output_format=OutputMode.JSON)

        data = yaml.safe_load(config_store.path.read_text())
        assert data["output_format"] == "json"
        assert ConfigStore(config_store.path).config.output_format == OutputMode.JSON

    def test_cached_settings_round_trip(self, config_store: ConfigStore) -> None:
        cached_at = datetime(2024, 1, 15, 14, 30, tzinfo=timezone.utc)
        config_store.update(cached_settings=CachedSettings(default_bottle_unit="ML", cached_at=cached_at))

        cached = ConfigStore(config_store.path).config.cached_settings
        assert cached.default_bottle_unit == "ML"
        assert cached.cached_at == cached_at

    def test_reset_clears_credentials(self, logged_in_store: ConfigStore) -> None:
        logged_in_store.reset()

        reloaded = ConfigStore(logged_in_store.path).config
        assert reloaded.server == ""
        assert reloaded.token is None
        assert reloaded.default_baby_id is None

    def test_unknown_key_is_rejected(self, tmp_path: Path) -> None:
        path = tmp_path / "config.yaml"
        path.write_text("server: http://x\nbogus: 1\n")

        with pytest.raises(ConfigurationError, match="Invalid configuration"):
            ConfigStore(path).config

    def test_wrong_type_is_rejected(self, tmp_path: Path) -> None:
        path = tmp_path / "config.yaml"
        path.write_text("output_format: fancy\n")

        with pytest.raises(ConfigurationError):
            ConfigStore(path).config

    def test_invalid_update_is_rejected(self, config_store: ConfigStore) -> None:
        with pytest.raises(ConfigurationError, match="Invalid configuration value"):
            config_store.update(output_format="fancy")

        assert not config_store.path.exists()


class TestToken:
    """Tests for the stored credential."""

    def test_set_and_clear(self, config_store: ConfigStore) -> None:
        expires = datetime(2024, 1, 15, 15, 0, tzinfo=timezone.utc)
        config_store.set_token("abc", expires)
        assert config_store.config.token == "abc"
        assert config_store.config.token_expires == expires

        config_store.clear_token()
        assert config_store.config.token is None
        assert config_store.config.token_expires is None

    def test_expiry(self, config_store: ConfigStore) -> None:
        config_store.set_token("abc", datetime(2024, 1, 15, 15, 0, tzinfo=timezone.utc))

        assert not config_store.is_token_expired(datetime(2024, 1, 15, 14, 59, tzinfo=timezone.utc))
        assert config_store.is_token_expired(datetime(2024, 1, 15, 15, 1, tzinfo=timezone.utc))

    def test_no_expiry_never_expires(self, config_store: ConfigStore) -> None:
        config_store.set_token("abc")
        assert not config_store.is_token_expired()


class TestSettings:
    """Tests for environment settings."""

    def test_env_prefix(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("SPROUT_TRACK_TIMEOUT", "5")
        monkeypatch.setenv("SPROUT_TRACK_LOG_LEVEL", "DEBUG")

        settings = Settings()

        assert settings.timeout == 5.0
        assert settings.log_level == "DEBUG"

    def test_log_level_is_case_insensitive(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("SPROUT_TRACK_LOG_LEVEL", "info")
        assert Settings().log_level == "INFO"

    def test_unknown_log_level_is_configuration_error(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("SPROUT_TRACK_LOG_LEVEL", "LOUD")

        with pytest.raises(ConfigurationError, match=r"Invalid SPROUT_TRACK_\* environment settings"):
            get_settings()

    def test_config_dir_override(self, isolated_config_dir: Path) -> None:
        assert default_config_dir(Settings()) == isolated_config_dir

    def test_default_store_path(self, isolated_config_dir: Path) -> None:
        assert ConfigStore.default(Settings()).path == isolated_config_dir / "config.yaml"
