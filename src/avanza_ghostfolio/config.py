"""Loading and saving of the per-user configuration file.

The config lives at ``~/.avanza-ghostfolio-cli/config.json`` unless
``AVANZA_GHOSTFOLIO_CONFIG`` or an explicit path says otherwise. It is created
with empty defaults on first load and rewritten in full on every save.

Example config file:

    {
      "ghostfolio": {
        "token": "eyJhbGciOi...",
        "base_url": "https://ghostfol.io",
        "account_mapping": {"Volvo B": "ISK"}
      },
      "avanza_to_ghostfolio_ticker": {}
    }
"""

from __future__ import annotations

import logging
import os
from pathlib import Path

from pydantic import ValidationError

from avanza_ghostfolio.exceptions import ConfigError
from avanza_ghostfolio.types import AppConfig

logger = logging.getLogger(__name__)

CONFIG_DIR_NAME = ".avanza-ghostfolio-cli"
CONFIG_FILE_NAME = "config.json"
CONFIG_PATH_ENV = "AVANZA_GHOSTFOLIO_CONFIG"


def default_config_path() -> Path:
    """Return the config path from the environment or the home directory."""
    override = os.environ.get(CONFIG_PATH_ENV)
    if override:
        return Path(override).expanduser()
    return Path.home() / CONFIG_DIR_NAME / CONFIG_FILE_NAME


def load_config(config_path: str | Path | None = None) -> AppConfig:
    """Read the config file, creating it with defaults when it does not exist.

    :param config_path: Path to the JSON config file (default location if None).
    :returns: Parsed AppConfig.
    :raises ConfigError: If the file cannot be read, parsed or created.
    """
    path = Path(config_path) if config_path is not None else default_config_path()
    logger.debug("Config path: %s", path)

    if not path.exists():
        config = AppConfig()
        save_config(config, path)
        logger.info("Created default config at %s", path)
        return config

    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigError(f"Failed to read config file {path}: {e}") from e

    try:
        return AppConfig.model_validate_json(raw)
    except ValidationError as e:
        raise ConfigError(f"Invalid config file {path}: {e}") from e


def save_config(config: AppConfig, config_path: str | Path | None = None) -> None:
    """Write the whole config to disk, creating the directory if needed.

    :param config: Config to persist.
    :param config_path: Destination path (default location if None).
    :raises ConfigError: If the file cannot be written.
    """
    path = Path(config_path) if config_path is not None else default_config_path()
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(config.model_dump_json(indent=2), encoding="utf-8")
    except OSError as e:
        raise ConfigError(f"Failed to write config file {path}: {e}") from e
    logger.debug("Saved config to %s", path)
