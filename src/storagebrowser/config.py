"""
Loading the browser configuration from YAML.

The configuration lives in ``storagebrowser.yaml`` inside the platformdirs
user config directory unless an explicit path is given. Keys are upper case,
for example::

    USER: someone@example.com
    PASSWORD: secret
    ROOT_DIRECTORY_NAME: project
    PATH_SEPARATOR: /
    BASE_URL: https://storage.example.com/api
"""

import os
from dataclasses import dataclass
from typing import Any, Dict, Optional, Tuple

import platformdirs
import yaml

from storagebrowser.constants import (
    APP_NAME,
    CONFIG_FILE_NAME,
    DEFAULT_PATH_SEPARATOR,
    DEFAULT_REQUEST_TIMEOUT,
    PASSWORD_ENV_VAR,
    REQUIRED_CONFIG_KEYS,
)
from storagebrowser.exceptions import ConfigFileError, ConfigValidationError
from storagebrowser.log_utils import logger

CONFIG_DIR = platformdirs.user_config_dir(APP_NAME)
CONFIG_FILE = os.path.join(CONFIG_DIR, CONFIG_FILE_NAME)


@dataclass(frozen=True)
class BrowserConfig:
    """Settings a StorageBrowser is constructed with."""

    user: str
    password: str
    root_directory_name: str
    path_separator: str = DEFAULT_PATH_SEPARATOR
    base_url: Optional[str] = None
    request_timeout: float = DEFAULT_REQUEST_TIMEOUT
    log_level: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "BrowserConfig":
        """
        Build a BrowserConfig from a parsed configuration mapping.

        The password from the environment variable named by PASSWORD_ENV_VAR,
        when set, takes precedence over the PASSWORD key.

        Raises:
            ConfigValidationError: If the mapping is not a dict, a required key is
                missing or empty, or a value has the wrong type.
        """
        if not isinstance(data, dict):
            raise ConfigValidationError(
                "Configuration must be a mapping",
                details=f"got {type(data).__name__}",
            )

        values = dict(data)
        env_password = os.environ.get(PASSWORD_ENV_VAR)
        if env_password:
            values["PASSWORD"] = env_password

        missing = [key for key in REQUIRED_CONFIG_KEYS if not values.get(key)]
        if missing:
            raise ConfigValidationError(
                "Missing required configuration keys",
                details=", ".join(missing),
            )

        separator = values.get("PATH_SEPARATOR", DEFAULT_PATH_SEPARATOR)
        if not isinstance(separator, str) or not separator:
            raise ConfigValidationError("PATH_SEPARATOR must be a non-empty string")

        try:
            timeout = float(values.get("REQUEST_TIMEOUT", DEFAULT_REQUEST_TIMEOUT))
        except (TypeError, ValueError):
            raise ConfigValidationError(
                "REQUEST_TIMEOUT must be a number",
                details=str(values.get("REQUEST_TIMEOUT")),
            ) from None
        if timeout <= 0:
            raise ConfigValidationError("REQUEST_TIMEOUT must be positive")

        base_url = values.get("BASE_URL")
        log_level = values.get("LOG_LEVEL")
        return cls(
            user=str(values["USER"]),
            password=str(values["PASSWORD"]),
            root_directory_name=str(values["ROOT_DIRECTORY_NAME"]),
            path_separator=separator,
            base_url=str(base_url) if base_url else None,
            request_timeout=timeout,
            log_level=str(log_level) if log_level else None,
        )


def config_exists(directory: Optional[str] = None) -> Tuple[bool, Optional[str]]:
    """
    Return whether a configuration file exists and its path.

    If `directory` is provided, checks for CONFIG_FILE_NAME inside that directory;
    otherwise checks CONFIG_FILE.

    Returns:
        (bool, str|None): Whether a config file was found, and its path when it was.
    """
    config_path = os.path.join(directory, CONFIG_FILE_NAME) if directory else CONFIG_FILE
    if os.path.exists(config_path):
        return True, config_path
    return False, None


def load_config(path: Optional[str] = None) -> Optional[BrowserConfig]:
    """
    Load the configuration YAML.

    Parameters:
        path (str | None): Explicit configuration file to read. When None, CONFIG_FILE is used.

    Returns:
        BrowserConfig | None: The parsed configuration, or None if the file does not exist.

    Raises:
        ConfigFileError: If the file cannot be read or is not valid YAML.
        ConfigValidationError: If the content is not a valid configuration.
    """
    config_path = path or CONFIG_FILE
    if not os.path.exists(config_path):
        logger.debug(f"No configuration file at {config_path}")
        return None

    try:
        with open(config_path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except OSError as e:
        raise ConfigFileError(
            "Could not read configuration file", path=config_path, details=str(e)
        ) from e
    except yaml.YAMLError as e:
        raise ConfigFileError(
            "Invalid YAML in configuration file", path=config_path, details=str(e)
        ) from e

    logger.debug(f"Loaded configuration from {config_path}")
    return BrowserConfig.from_dict(data if data is not None else {})
