"""
Manages loading, validation, and migration of the INI configuration file.
"""

import configparser
import logging
import os
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from vibing_cli.exceptions import ConfigurationError
from vibing_cli.models.config import ClientConfig

log = logging.getLogger(__name__)

BASE_URL_ENV = "VIBING_API_URL"


class ConfigManager:
    """Handles all operations related to the application's INI config file."""

    def __init__(self, config_file_path: Path):
        self.config_file_path = config_file_path
        self._parser = configparser.ConfigParser()

    def load_config(self, cli_options: dict[str, Any] | None = None) -> ClientConfig:
        """
        Loads configuration from the INI file, the environment and CLI overrides,
        in increasing order of precedence, and validates it.

        A missing config file is not an error as long as the base URL comes from
        the environment.

        Raises:
            ConfigurationError: If the file cannot be parsed or validation fails.
        """
        config_data: dict[str, Any] = {}

        if self.config_file_path.is_file():
            try:
                self._parser.read(self.config_file_path, encoding="utf-8")
            except configparser.Error as e:
                raise ConfigurationError(f"Error parsing configuration file: {e}") from e

            if self._migrate_if_needed():
                log.info(
                    "[yellow]Configuration file was updated with new default values."
                    "[/yellow]"
                )
            config_data = self._get_config_as_dict()

        if env_url := os.getenv(BASE_URL_ENV):
            config_data["base_url"] = env_url

        if cli_options:
            config_data.update(cli_options)

        config_data.setdefault("base_url", "")

        try:
            return ClientConfig(
                **config_data, config_path=str(self.config_file_path.parent)
            )
        except ValidationError as e:
            raise ConfigurationError(f"Configuration validation failed:\n{e}") from e

    def save_new_config(self, settings: dict[str, Any]) -> None:
        """
        Creates and saves a new configuration file.

        Args:
            settings: A dictionary of settings to save. Missing keys get the model
                defaults.
        """
        config = configparser.ConfigParser()
        config["DEFAULT"] = {}

        defaults = ClientConfig.model_construct(base_url="")
        for key in sorted(ClientConfig.get_ini_keys()):
            value = settings.get(key, getattr(defaults, key, None))
            if isinstance(value, bool):
                config["DEFAULT"][key] = "true" if value else "false"
            elif value is not None:
                config["DEFAULT"][key] = str(value)

        try:
            self.config_file_path.parent.mkdir(parents=True, exist_ok=True)
            with open(self.config_file_path, "w", encoding="utf-8") as configfile:
                config.write(configfile)
        except OSError as e:
            raise ConfigurationError(f"Failed to save configuration file: {e}") from e

    def _get_config_as_dict(self) -> dict[str, Any]:
        """Reads the 'DEFAULT' section of the INI file into a dictionary."""
        section = self._parser["DEFAULT"]
        defaults = ClientConfig.model_construct(base_url="")
        try:
            return {
                "base_url": section.get("base_url", ""),
                "request_timeout": section.getfloat(
                    "request_timeout", defaults.request_timeout
                ),
                "page_size": section.getint("page_size", defaults.page_size),
                "default_volume": section.getint(
                    "default_volume", defaults.default_volume
                ),
                "download_dir": section.get("download_dir", defaults.download_dir),
                "event_log": section.getboolean("event_log", defaults.event_log),
            }
        except ValueError as e:
            raise ConfigurationError(f"Invalid value in configuration file: {e}") from e

    def _migrate_if_needed(self) -> bool:
        """Adds missing default values to an existing config file."""
        defaults = ClientConfig.model_construct(base_url="")
        config_section = self._parser["DEFAULT"]
        needs_saving = False

        for key in sorted(ClientConfig.get_ini_keys()):
            if key in config_section or key == "base_url":
                continue
            default_value = getattr(defaults, key)
            if isinstance(default_value, bool):
                config_section[key] = "true" if default_value else "false"
            else:
                config_section[key] = str(default_value)
            needs_saving = True
            log.debug(
                f"Migrating config: added missing key '{key}' with "
                f"value '{config_section[key]}'."
            )

        if needs_saving:
            try:
                with open(self.config_file_path, "w", encoding="utf-8") as f:
                    self._parser.write(f)
            except OSError as e:
                log.error(f"Could not save migrated configuration file: {e}")
                return False

        return needs_saving
