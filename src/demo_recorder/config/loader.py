"""
Config Loader - Resolve the recorder's settings from files and environment.

Sources, highest precedence first:
    1. Overrides from the command line
    2. A YAML file: --config, else $DEMO_RECORDER_CONFIG, else the first
       default location that exists
    3. DEMO_RECORDER__* environment variables (also read from .env)
    4. Model defaults
"""

import logging
import os
from pathlib import Path
from typing import Any, Dict, Optional, Union

import yaml
from dotenv import load_dotenv
from pydantic import ValidationError

from demo_recorder.config.settings import Settings
from demo_recorder.exceptions import ConfigurationError

logger = logging.getLogger(__name__)

CONFIG_ENV_VAR = "DEMO_RECORDER_CONFIG"
ENV_FILES = (Path(".env"), Path(".env.local"))


class ConfigLoader:
    """
    Builds a Settings instance from every configured source.

    Attributes:
        config_path: Explicitly requested YAML file, if any
        source: YAML file actually read by the last load(), if any
    """

    DEFAULT_CONFIG_PATHS = [
        Path("config.yaml"),
        Path("config.yml"),
        Path("config/default.yaml"),
        Path.home() / ".config" / "demo-recorder" / "config.yaml",
    ]

    def __init__(self, config_path: Optional[Union[str, Path]] = None):
        self.config_path = Path(config_path) if config_path else None
        self.source: Optional[Path] = None

    def find_config_file(self) -> Optional[Path]:
        """
        Pick the YAML file to read.

        A file named on the command line or in $DEMO_RECORDER_CONFIG must
        exist; the default locations are only used when present.
        """
        requested = self.config_path
        if requested is None and os.environ.get(CONFIG_ENV_VAR):
            requested = Path(os.environ[CONFIG_ENV_VAR])

        if requested is not None:
            if not requested.is_file():
                raise ConfigurationError(f"Config file not found: {requested}")
            return requested

        return next((p for p in self.DEFAULT_CONFIG_PATHS if p.is_file()), None)

    @staticmethod
    def read_yaml(path: Path) -> Dict[str, Any]:
        """Parse a YAML config file into a (possibly empty) mapping."""
        try:
            with open(path, "r", encoding="utf-8") as f:
                data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ConfigurationError(f"Invalid YAML in {path}: {e}")
        except OSError as e:
            raise ConfigurationError(f"Cannot read config file {path}: {e}")

        if data is None:
            return {}
        if not isinstance(data, dict):
            raise ConfigurationError(f"Config file {path} must contain a mapping")
        return data

    def load(
        self,
        env_file: Optional[Union[str, Path]] = None,
        overrides: Optional[Dict[str, Any]] = None,
    ) -> Settings:
        """
        Load settings.

        Args:
            env_file: .env file to read instead of the default ones
            overrides: Nested values that beat every other source

        Raises:
            ConfigurationError: If a file is missing or malformed, or a value
                fails validation
        """
        env_path = Path(env_file) if env_file else next((p for p in ENV_FILES if p.exists()), None)
        if env_path is not None:
            load_dotenv(env_path)

        self.source = self.find_config_file()
        file_values = self.read_yaml(self.source) if self.source else {}
        if self.source:
            logger.debug(f"Loaded config from {self.source}")

        try:
            # Environment variables only fill what the file leaves unset
            settings = Settings(**file_values)
            if overrides:
                settings = settings.merge_with(overrides)
        except ValidationError as e:
            raise ConfigurationError(f"Invalid configuration: {e}")

        return settings


def load_config(
    config_path: Optional[Union[str, Path]] = None,
    env_file: Optional[Union[str, Path]] = None,
    **overrides: Any,
) -> Settings:
    """
    Load settings in one call.

    Example:
        >>> settings = load_config(config_path="recorder.yaml")
        >>> settings = load_config(recording={"target_url": "http://localhost:5173"})
    """
    return ConfigLoader(config_path).load(env_file=env_file, overrides=overrides or None)
