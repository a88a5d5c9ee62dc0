"""
Manages loading, validation, and migration of the INI configuration file.
"""

import configparser
import logging
from enum import Enum
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from icloud_album.exceptions import ConfigurationError
from icloud_album.models.config import AlbumConfig

log = logging.getLogger(__name__)


def _to_ini(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, Enum):
        return str(value.value)
    return str(value)


class ConfigManager:
    """Handles all operations related to the application's INI config file."""

    def __init__(self, config_file_path: Path):
        self.config_file_path = config_file_path
        self._parser = configparser.ConfigParser(interpolation=None)

    def load_config(self, cli_options: dict[str, Any] | None = None) -> AlbumConfig:
        """
        Loads configuration from the INI file, applies CLI overrides, and validates it.

        A missing file is not an error: built-in defaults are used.

        Args:
            cli_options: A dictionary of options provided via the command line.

        Returns:
            A validated AlbumConfig object.

        Raises:
            ConfigurationError: If the config file is unreadable or validation fails.
        """
        config_data: dict[str, Any] = {}
        if self.config_file_path.is_file():
            try:
                self._parser.read(self.config_file_path, encoding="utf-8")
            except configparser.Error as e:
                raise ConfigurationError(
                    f"Error parsing configuration file: {e}"
                ) from e

            if self._migrate_if_needed():
                log.info(
                    "[yellow]Configuration file was updated with new default values."
                    "[/yellow]"
                )
            config_data = self._get_config_as_dict()

        if cli_options:
            config_data.update(cli_options)

        try:
            return AlbumConfig(
                **config_data, config_path=str(self.config_file_path.parent)
            )
        except ValidationError as e:
            raise ConfigurationError(f"Configuration validation failed:\n{e}") from e

    def save_new_config(self, settings: dict[str, Any] | None = None) -> None:
        """
        Creates and saves a complete configuration file.

        Args:
            settings: Values overriding the model defaults.
        """
        settings = settings or {}
        try:
            validated = AlbumConfig(**settings)
        except ValidationError as e:
            raise ConfigurationError(f"Configuration validation failed:\n{e}") from e

        config = configparser.ConfigParser(interpolation=None)
        config["DEFAULT"] = {
            key: _to_ini(getattr(validated, key))
            for key in sorted(AlbumConfig.get_ini_keys())
        }

        try:
            self.config_file_path.parent.mkdir(parents=True, exist_ok=True)
            with open(self.config_file_path, "w", encoding="utf-8") as configfile:
                config.write(configfile)
        except OSError as e:
            raise ConfigurationError(f"Failed to save configuration file: {e}") from e

    def _get_config_as_dict(self) -> dict[str, Any]:
        """
        Reads the 'DEFAULT' section of the INI file into a dictionary.

        Values stay strings; pydantic converts them when the model is built.
        """
        section = self._parser["DEFAULT"]
        known = AlbumConfig.get_ini_keys()
        data: dict[str, Any] = {}
        for key, value in section.items():
            if key not in known:
                log.debug(f"Ignoring unknown configuration key '{key}'.")
                continue
            data[key] = value
        return data

    def _migrate_if_needed(self) -> bool:
        """Adds missing default values to an existing config file."""
        defaults = AlbumConfig()
        section = self._parser["DEFAULT"]
        needs_saving = False

        for key in sorted(AlbumConfig.get_ini_keys()):
            if key not in section:
                section[key] = _to_ini(getattr(defaults, key))
                needs_saving = True
                log.debug(
                    f"Migrating config: added missing key '{key}' with "
                    f"value '{section[key]}'."
                )

        if needs_saving:
            try:
                with open(self.config_file_path, "w", encoding="utf-8") as f:
                    self._parser.write(f)
            except OSError as e:
                log.error(f"Could not save migrated configuration file: {e}")
                return False

        return needs_saving

    def get_config_as_dict(self) -> dict[str, Any]:
        """Returns the file's settings, or an empty dict if no file exists."""
        if not self.config_file_path.is_file():
            return {}
        try:
            self._parser.read(self.config_file_path, encoding="utf-8")
        except configparser.Error as e:
            raise ConfigurationError(f"Error parsing configuration file: {e}") from e
        return self._get_config_as_dict()
