"""
Tests for the INI configuration layer.
"""

import configparser

import pytest

from icloud_album.exceptions import ConfigurationError
from icloud_album.models.config import AlbumConfig
from icloud_album.models.retry import BackoffStrategy
from icloud_album.storage.config_manager import ConfigManager


@pytest.fixture
def config_file(tmp_path):
    return tmp_path / "icloud-album" / "config.ini"


def test_missing_file_gives_defaults(config_file):
    config = ConfigManager(config_file).load_config()

    assert config.max_workers == 4
    assert config.max_retries == 3
    assert config.backoff is BackoffStrategy.EXPONENTIAL_JITTER
    assert config.reuse_probe_response is True
    assert config.strict_asset_urls is False
    assert not config_file.exists()


def test_save_then_load_round_trip(config_file):
    manager = ConfigManager(config_file)
    manager.save_new_config({"max_workers": 8, "backoff": "linear"})

    config = ConfigManager(config_file).load_config()

    assert config.max_workers == 8
    assert config.backoff is BackoffStrategy.LINEAR
    assert config.config_path == str(config_file.parent)


def test_saved_file_lists_every_setting(config_file):
    ConfigManager(config_file).save_new_config()

    parser = configparser.ConfigParser(interpolation=None)
    parser.read(config_file, encoding="utf-8")

    assert set(parser["DEFAULT"]) == AlbumConfig.get_ini_keys()
    assert parser["DEFAULT"]["strict_asset_urls"] == "false"
    assert parser["DEFAULT"]["backoff"] == "exponential_jitter"


def test_string_values_are_converted(config_file):
    config_file.parent.mkdir(parents=True)
    config_file.write_text(
        "[DEFAULT]\n"
        "max_retries = 5\n"
        "base_delay = 0.25\n"
        "strict_asset_urls = true\n"
        "backoff = constant\n",
        encoding="utf-8",
    )

    config = ConfigManager(config_file).load_config()

    assert config.max_retries == 5
    assert config.base_delay == 0.25
    assert config.strict_asset_urls is True
    assert config.backoff is BackoffStrategy.CONSTANT


def test_missing_keys_are_migrated_into_the_file(config_file):
    config_file.parent.mkdir(parents=True)
    config_file.write_text("[DEFAULT]\nmax_workers = 2\n", encoding="utf-8")

    config = ConfigManager(config_file).load_config()

    assert config.max_workers == 2
    parser = configparser.ConfigParser(interpolation=None)
    parser.read(config_file, encoding="utf-8")
    assert parser["DEFAULT"]["max_workers"] == "2"
    assert set(parser["DEFAULT"]) == AlbumConfig.get_ini_keys()


def test_unknown_keys_are_ignored(config_file):
    config_file.parent.mkdir(parents=True)
    config_file.write_text("[DEFAULT]\nquality = 27\n", encoding="utf-8")

    config = ConfigManager(config_file).load_config()

    assert not hasattr(config, "quality")


def test_cli_options_override_file(config_file):
    ConfigManager(config_file).save_new_config({"max_workers": 8})

    config = ConfigManager(config_file).load_config({"max_workers": 16})

    assert config.max_workers == 16


@pytest.mark.parametrize(
    "line",
    [
        "max_workers = 99",
        "max_retries = -1",
        "request_timeout = 0",
        "backoff = fibonacci",
        "max_workers = many",
    ],
)
def test_invalid_values_raise_configuration_error(config_file, line):
    config_file.parent.mkdir(parents=True)
    config_file.write_text(f"[DEFAULT]\n{line}\n", encoding="utf-8")

    with pytest.raises(ConfigurationError):
        ConfigManager(config_file).load_config()


def test_unparseable_file_raises_configuration_error(config_file):
    config_file.parent.mkdir(parents=True)
    config_file.write_text("this is not ini\n", encoding="utf-8")

    with pytest.raises(ConfigurationError):
        ConfigManager(config_file).load_config()


def test_delay_bounds_are_validated():
    with pytest.raises(ValueError):
        AlbumConfig(base_delay=5.0, max_delay=1.0)


def test_retry_policy_reflects_settings():
    config = AlbumConfig(max_retries=6, base_delay=1.0, max_delay=9.0, backoff="linear")
    policy = config.retry_policy()

    assert policy.max_retries == 6
    assert policy.strategy is BackoffStrategy.LINEAR
    assert policy.max_delay == 9.0
