"""Config Loader - Loads client configuration from YAML files and the environment.

Handles loading YAML config files with ${ENV_VAR} substitution, installing
the default user config file, and applying QY_* environment overrides.
"""

from __future__ import annotations

import logging
import os
import re
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from iaas_client.errors import ConfigError
from iaas_client.models import Config

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_FILE_CONTENT = """\
# QingCloud services configuration

#qy_access_key_id: 'ACCESS_KEY_ID'
#qy_secret_access_key: 'SECRET_ACCESS_KEY'

host: 'api.qingcloud.com'
port: 443
protocol: 'https'
uri: '/iaas'
connection_retries: 3
connection_timeout: 30

# Valid log levels are "debug", "info", "warn", "error", and "fatal".
log_level: 'warn'
"""

DEFAULT_USER_CONFIG_PATH = Path("~/.qingcloud/config.yaml")

ENV_OVERRIDES = {
    "QY_ACCESS_KEY_ID": "qy_access_key_id",
    "QY_SECRET_ACCESS_KEY": "qy_secret_access_key",
    "QY_ZONE": "zone",
}

_ENV_PATTERN = re.compile(r"\$\{([^}]+)\}")


def default_config() -> Config:
    """Config built from the bundled default file content."""
    return config_from_content(DEFAULT_CONFIG_FILE_CONTENT)


def config_from_content(content: str, overrides: dict[str, Any] | None = None) -> Config:
    """Parse YAML content layered on top of the defaults.

    Raises:
        ConfigError: If the YAML is invalid or fails validation.
    """
    try:
        defaults = yaml.safe_load(DEFAULT_CONFIG_FILE_CONTENT) or {}
        raw_config = yaml.safe_load(content)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in config: {e}") from e

    if raw_config is None:
        raw_config = {}
    if not isinstance(raw_config, dict):
        raise ConfigError("Config must be a YAML mapping")

    # Substitute environment variables
    raw_config = _substitute_env_vars(raw_config)

    merged = {**defaults, **raw_config, **(overrides or {})}
    try:
        return Config.model_validate(merged)
    except ValidationError as e:
        raise ConfigError(f"Invalid config structure: {e}") from e


def load_config(config_path: Path) -> Config:
    """Load configuration from a YAML file with ${ENV_VAR} substitution."""
    config_path = config_path.expanduser()
    if not config_path.exists():
        raise ConfigError(f"Config file not found: {config_path}")

    try:
        content = config_path.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigError(f"Cannot read config file {config_path}: {e}") from e

    return config_from_content(content)


def install_default_user_config(path: Path = DEFAULT_USER_CONFIG_PATH) -> Path:
    """Write the default config file, creating parent directories."""
    path = path.expanduser()
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(DEFAULT_CONFIG_FILE_CONTENT, encoding="utf-8")
    return path


def load_user_config(path: Path = DEFAULT_USER_CONFIG_PATH) -> Config:
    """Load ~/.qingcloud/config.yaml, installing the default file when missing."""
    expanded = path.expanduser()
    if not expanded.exists():
        logger.warning('Installing default config file to "%s"', expanded)
        install_default_user_config(expanded)
    return load_config(expanded)


def config_from_env(base: Config | None = None) -> Config:
    """Apply QY_ACCESS_KEY_ID / QY_SECRET_ACCESS_KEY / QY_ZONE on top of base."""
    base = base or default_config()
    data = base.model_dump(by_alias=True)
    for env_name, key in ENV_OVERRIDES.items():
        value = os.environ.get(env_name)
        if value:
            data[key] = value
    try:
        return Config.model_validate(data)
    except ValidationError as e:
        raise ConfigError(f"Invalid config structure: {e}") from e


def _substitute_env_vars(data: Any) -> Any:
    """Recursively substitute ${ENV_VAR} patterns in strings within data."""
    if isinstance(data, str):
        return _substitute_string(data)
    elif isinstance(data, dict):
        return {k: _substitute_env_vars(v) for k, v in data.items()}
    elif isinstance(data, list):
        return [_substitute_env_vars(item) for item in data]
    return data


def _substitute_string(s: str) -> str:
    """Substitute ${ENV_VAR} patterns. Raises ConfigError if env var is not set."""

    def replacer(match: re.Match) -> str:
        var_name = match.group(1)
        value = os.environ.get(var_name)
        if value is None:
            raise ConfigError(f"Environment variable '{var_name}' is not set")
        return value

    return _ENV_PATTERN.sub(replacer, s)
