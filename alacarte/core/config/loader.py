"""
Configuration loader — reads a-la-carte.yml into ``AppConfig``.

Lookup order, first hit wins:

    1. ``$A_LA_CARTE_CONFIG``
    2. explicit path (``--config``)
    3. ``$XDG_CONFIG_HOME/a-la-carte/a-la-carte.yml``
       (``~/.config/a-la-carte/a-la-carte.yml`` when unset)
    4. built-in defaults
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Mapping

import yaml
from pydantic import ValidationError

from alacarte.core.models.config import AppConfig

logger = logging.getLogger(__name__)

ENV_CONFIG_PATH = "A_LA_CARTE_CONFIG"
CONFIG_DIRNAME = "a-la-carte"
CONFIG_FILENAME = "a-la-carte.yml"


class ConfigError(Exception):
    """Raised when the application configuration is invalid or unreadable."""


def xdg_config_file(environ: Mapping[str, str] | None = None) -> Path:
    env = os.environ if environ is None else environ
    base = env.get("XDG_CONFIG_HOME") or str(Path.home() / ".config")
    return Path(base) / CONFIG_DIRNAME / CONFIG_FILENAME


def find_config_file(
    explicit: Path | None = None,
    environ: Mapping[str, str] | None = None,
) -> Path | None:
    """Return the config file to load, or ``None`` for defaults.

    The environment variable and the XDG location are only used when
    the file exists. An explicit path is always returned, so a missing
    ``--config`` file surfaces as an error.
    """
    env = os.environ if environ is None else environ

    env_path = env.get(ENV_CONFIG_PATH)
    if env_path and Path(env_path).is_file():
        return Path(env_path)

    if explicit is not None:
        return explicit

    candidate = xdg_config_file(env)
    if candidate.is_file():
        return candidate
    return None


def load_config(
    path: Path | None = None,
    environ: Mapping[str, str] | None = None,
) -> AppConfig:
    """Load and validate the application config.

    Args:
        path: Explicit config path (``--config``).
        environ: Environment mapping. Defaults to ``os.environ``.

    Returns:
        Validated ``AppConfig``; defaults when no file is found.

    Raises:
        ConfigError: If the chosen file is missing, unreadable or invalid.
    """
    found = find_config_file(path, environ)
    if found is None:
        logger.debug("No config file found, using defaults")
        return AppConfig()

    if not found.is_file():
        raise ConfigError(f"Config file not found: {found}")

    logger.debug("Loading config from %s", found)

    try:
        raw = found.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigError(f"Cannot read {found}: {e}") from e

    try:
        data = yaml.safe_load(raw)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {found}: {e}") from e

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ConfigError(f"Expected a YAML mapping in {found}, got {type(data).__name__}")

    try:
        config = AppConfig.model_validate(data)
    except ValidationError as e:
        raise ConfigError(f"Invalid configuration in {found}: {e}") from e

    config.config_path = str(found)
    logger.info("Loaded config from %s", found)
    return config
