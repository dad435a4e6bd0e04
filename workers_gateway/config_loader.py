"""Configuration loading from YAML files with environment variable support.

Config lookup order:
1. the path passed in (``--config``), relative to the working directory
2. ``WORKERS_GATEWAY_CONFIG``, relative to the working directory
3. the ``configs/config_default.yaml`` shipped inside the package
"""

import logging
import os
import re
from importlib import resources
from pathlib import Path
from typing import Any, Mapping, Optional

import yaml
from dotenv import dotenv_values

from .core.exceptions import ConfigurationError

logger = logging.getLogger("workers-gateway")

CONFIG_ENV_VAR = "WORKERS_GATEWAY_CONFIG"
BUNDLED_CONFIG = "config_default.yaml"

# ${NAME} or $NAME
_PLACEHOLDER = re.compile(r"\$\{([^}]+)\}|\$([A-Za-z_][A-Za-z0-9_]*)")


def requested_config_path(path: Optional[str] = None) -> Optional[Path]:
    """The config file the caller asked for, or None for the bundled default."""
    raw = path or os.getenv(CONFIG_ENV_VAR)
    if not raw:
        return None
    return Path(raw).expanduser().absolute()


def bundled_config_text() -> str:
    return (
        resources.files("workers_gateway")
        .joinpath("configs", BUNDLED_CONFIG)
        .read_text(encoding="utf-8")
    )


def env_file_for(config_path: Optional[Path], env_path: Optional[str] = None) -> Path:
    """Pick the .env file used for placeholder substitution.

    An explicit ``env_path`` wins. ``config_<suffix>.yaml`` pairs with
    ``.env_<suffix>`` in the same directory, any other file with ``.env``
    there, and the bundled config with ``./.env``.
    """
    if env_path:
        return Path(env_path).expanduser().absolute()
    if config_path is None:
        return Path.cwd() / ".env"
    stem = config_path.stem
    if stem.startswith("config_"):
        return config_path.with_name(".env_" + stem[len("config_"):])
    return config_path.with_name(".env")


def read_env_file(env_file: Path) -> dict[str, str]:
    """Read KEY=VALUE pairs without touching os.environ."""
    if not env_file.is_file():
        return {}
    logger.info(f"Loading environment variables from {env_file}")
    return {key: value for key, value in dotenv_values(env_file).items() if value is not None}


def load_config(
    path: Optional[str] = None,
    env_path: Optional[str] = None,
    substitute_env: bool = True,
) -> dict:
    """Load the gateway configuration.

    Args:
        path: Config file path. Falls back to WORKERS_GATEWAY_CONFIG, then to
              the bundled default.
        env_path: Optional .env file for placeholder substitution.
        substitute_env: Whether to expand ${VAR} placeholders.

    Raises:
        RuntimeError: if a requested config file does not exist.
        ConfigurationError: if the YAML document is not a mapping.
    """
    config_path = requested_config_path(path)
    if config_path is None:
        logger.info("Loading bundled default configuration")
        raw = bundled_config_text()
    else:
        logger.info(f"Loading configuration from {config_path}")
        if not config_path.is_file():
            logger.error(f"Config file not found: {config_path}")
            raise RuntimeError(f"Config file not found: {config_path}")
        raw = config_path.read_text(encoding="utf-8")

    data = yaml.safe_load(raw) or {}
    if not isinstance(data, dict):
        raise ConfigurationError(
            f"Configuration must be a YAML mapping, got {type(data).__name__}"
        )

    if substitute_env:
        data = expand_placeholders(data, read_env_file(env_file_for(config_path, env_path)))
    return data


def expand_placeholders(value: Any, env_values: Optional[Mapping[str, str]] = None) -> Any:
    """Expand ${VAR} and $VAR in every string of a parsed config.

    ``env_values`` take priority over the process environment. Unset
    variables keep their literal placeholder and log a warning.
    """
    env_values = env_values or {}

    def lookup(match: "re.Match[str]") -> str:
        name = match.group(1) or match.group(2)
        found = env_values.get(name, os.getenv(name))
        if found is None:
            logger.warning(
                f"CONFIG ERROR: Environment variable '${name}' is not set; "
                f"keeping the literal placeholder"
            )
            return match.group(0)
        return found

    if isinstance(value, dict):
        return {key: expand_placeholders(item, env_values) for key, item in value.items()}
    if isinstance(value, list):
        return [expand_placeholders(item, env_values) for item in value]
    if isinstance(value, str):
        return _PLACEHOLDER.sub(lookup, value)
    return value
