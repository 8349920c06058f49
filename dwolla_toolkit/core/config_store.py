"""Configuration and persistence for client settings."""

import json
import logging
import os
from pathlib import Path
from typing import Any

from .models import ClientSettings, ConfigError

logger = logging.getLogger(__name__)

SETTINGS_NAME = "settings"

CLIENT_ID_ENV = "DWOLLA_CLIENT_ID"
CLIENT_SECRET_ENV = "DWOLLA_CLIENT_SECRET"
SANDBOX_ENV = "DWOLLA_SANDBOX"


def get_base_dir() -> Path:
    """
    Get the base directory for storing configuration.

    The directory is determined by:
    1. Environment variable DWOLLA_TOOLKIT_HOME if set
    2. Otherwise, ~/.dwolla_toolkit

    The directory is created if it does not exist.

    Returns:
        Path to the base directory
    """
    env_home = os.environ.get("DWOLLA_TOOLKIT_HOME")
    if env_home:
        base_dir = Path(env_home)
    else:
        base_dir = Path.home() / ".dwolla_toolkit"

    base_dir.mkdir(parents=True, exist_ok=True)
    return base_dir


def config_path(name: str) -> Path:
    """Get the path for a named JSON file in the base directory."""
    return get_base_dir() / f"{name}.json"


def save_json(name: str, data: dict) -> Path:
    """
    Save a dictionary as JSON under the base directory.

    Args:
        name: File name without extension
        data: Dictionary to save

    Returns:
        Path to the saved file
    """
    path = config_path(name)
    path.parent.mkdir(parents=True, exist_ok=True)

    try:
        with open(path, "w") as f:
            json.dump(data, f, indent=2)
        logger.debug(f"Saved JSON to {path}")
        return path
    except OSError as e:
        raise ConfigError(f"Failed to save JSON to {path}: {e}") from e


def load_json(name: str) -> dict:
    """
    Load a dictionary from a JSON file under the base directory.

    Raises:
        ConfigError: If the file does not exist or JSON is invalid
    """
    path = config_path(name)

    if not path.exists():
        raise ConfigError(f"Configuration file not found: {path}")

    try:
        with open(path, "r") as f:
            data = json.load(f)
        logger.debug(f"Loaded JSON from {path}")
    except json.JSONDecodeError as e:
        raise ConfigError(f"Invalid JSON in {path}: {e}") from e
    except OSError as e:
        raise ConfigError(f"Failed to load JSON from {path}: {e}") from e

    if not isinstance(data, dict):
        raise ConfigError(f"Expected a JSON object in {path}")
    return data


def save_settings(settings: ClientSettings) -> Path:
    """Save ClientSettings to disk."""
    return save_json(SETTINGS_NAME, settings.to_dict())


def load_settings() -> ClientSettings:
    """
    Load ClientSettings from disk.

    Raises:
        ConfigError: If the file does not exist or is invalid
    """
    data = load_json(SETTINGS_NAME)
    try:
        return ClientSettings.from_dict(data)
    except (TypeError, ValueError) as e:
        raise ConfigError(f"Failed to parse settings: {e}") from e


def load_settings_or_default() -> ClientSettings:
    """Load saved settings, or defaults when nothing has been configured yet."""
    try:
        return load_settings()
    except ConfigError as e:
        logger.debug(f"Using default settings: {e}")
        return ClientSettings()


def sandbox_from_env(default: bool) -> bool:
    """Read DWOLLA_SANDBOX; '0', 'false', 'no' and 'off' select production."""
    value = os.environ.get(SANDBOX_ENV)
    if value is None or not value.strip():
        return default
    return value.strip().lower() not in ("0", "false", "no", "off")


def load_credentials(settings: ClientSettings | None = None) -> tuple[str, str]:
    """
    Resolve the client id and secret.

    The id comes from DWOLLA_CLIENT_ID, falling back to the saved settings.
    The secret only ever comes from DWOLLA_CLIENT_SECRET.

    Raises:
        ConfigError: If either value is missing
    """
    client_id = os.environ.get(CLIENT_ID_ENV) or (settings.client_id if settings else "")
    if not client_id:
        raise ConfigError(
            f"No client id configured. Set {CLIENT_ID_ENV} or run 'dwolla-toolkit configure'."
        )

    client_secret = os.environ.get(CLIENT_SECRET_ENV)
    if not client_secret:
        raise ConfigError(f"No client secret configured. Set {CLIENT_SECRET_ENV}.")

    return client_id, client_secret


def describe_settings(settings: ClientSettings) -> dict[str, Any]:
    """Settings as shown to the user."""
    data = settings.to_dict()
    data["mode"] = "sandbox" if settings.sandbox else "production"
    return data
