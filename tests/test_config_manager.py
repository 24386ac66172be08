"""Tests for vibing_cli/storage/config_manager.py."""

import configparser

import pytest

from vibing_cli.exceptions import ConfigurationError
from vibing_cli.storage.config_manager import BASE_URL_ENV, ConfigManager


@pytest.fixture(autouse=True)
def no_env_url(monkeypatch):
    monkeypatch.delenv(BASE_URL_ENV, raising=False)


@pytest.fixture
def config_file(tmp_path):
    return tmp_path / "vibing-cli" / "config.ini"


class TestLoad:
    def test_missing_base_url_is_configuration_error(self, config_file):
        with pytest.raises(ConfigurationError):
            ConfigManager(config_file).load_config()

    def test_environment_alone_is_enough(self, config_file, monkeypatch):
        monkeypatch.setenv(BASE_URL_ENV, "http://localhost:3001/")
        config = ConfigManager(config_file).load_config()
        assert config.base_url == "http://localhost:3001"
        assert config.page_size == 10
        assert config.default_volume == 50

    def test_environment_overrides_file(self, config_file, monkeypatch):
        manager = ConfigManager(config_file)
        manager.save_new_config({"base_url": "http://from-file:3001"})
        monkeypatch.setenv(BASE_URL_ENV, "http://from-env:3001")
        assert manager.load_config().base_url == "http://from-env:3001"

    def test_cli_options_override_everything(self, config_file, monkeypatch):
        monkeypatch.setenv(BASE_URL_ENV, "http://from-env:3001")
        config = ConfigManager(config_file).load_config({"page_size": 25})
        assert config.page_size == 25

    def test_non_http_url_rejected(self, config_file, monkeypatch):
        monkeypatch.setenv(BASE_URL_ENV, "ftp://catalog")
        with pytest.raises(ConfigurationError):
            ConfigManager(config_file).load_config()

    @pytest.mark.parametrize("key, value", [("page_size", 0), ("default_volume", 101)])
    def test_out_of_range_settings_rejected(self, config_file, key, value):
        manager = ConfigManager(config_file)
        manager.save_new_config({"base_url": "http://localhost:3001", key: value})
        with pytest.raises(ConfigurationError):
            manager.load_config()

    def test_garbage_value_is_configuration_error(self, config_file):
        config_file.parent.mkdir(parents=True)
        config_file.write_text(
            "[DEFAULT]\nbase_url = http://localhost:3001\npage_size = lots\n"
        )
        with pytest.raises(ConfigurationError):
            ConfigManager(config_file).load_config()


class TestSaveAndMigrate:
    def test_round_trip(self, config_file):
        manager = ConfigManager(config_file)
        manager.save_new_config(
            {"base_url": "https://catalog.example", "default_volume": 30, "event_log": True}
        )
        config = manager.load_config()
        assert config.base_url == "https://catalog.example"
        assert config.default_volume == 30
        assert config.event_log is True

    def test_missing_keys_are_added(self, config_file):
        config_file.parent.mkdir(parents=True)
        config_file.write_text("[DEFAULT]\nbase_url = http://localhost:3001\n")

        ConfigManager(config_file).load_config()

        parser = configparser.ConfigParser()
        parser.read(config_file)
        assert parser["DEFAULT"]["page_size"] == "10"
        assert parser["DEFAULT"]["event_log"] == "false"
