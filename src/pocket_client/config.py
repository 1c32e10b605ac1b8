"""Configuration loading and saving.

Config file location: ~/.config/pocket-client/config.toml

Schema:
    [auth]
    consumer_key = "..."
    redirect_uri = "https://localhost"

    [http]
    timeout = 5.0

The POCKET_CONSUMER_KEY environment variable overrides auth.consumer_key.
Access tokens are never written here.
"""

import os
import tomllib
from dataclasses import dataclass
from pathlib import Path

import tomli_w

from .constants import CONSUMER_KEY_ENV, DEFAULT_REDIRECT_URI, DEFAULT_TIMEOUT

CONFIG_DIR = Path.home() / ".config" / "pocket-client"
CONFIG_FILE = CONFIG_DIR / "config.toml"


@dataclass
class AppConfig:
    consumer_key: str
    redirect_uri: str = DEFAULT_REDIRECT_URI
    timeout: float = DEFAULT_TIMEOUT


def load_config(config_path: Path = CONFIG_FILE) -> AppConfig:
    """Load and validate config from TOML file."""
    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    with open(config_path, "rb") as f:
        data = tomllib.load(f)

    auth_data = data.get("auth", {})
    http_data = data.get("http", {})

    consumer_key = os.environ.get(CONSUMER_KEY_ENV) or auth_data.get(
        "consumer_key", ""
    )
    if not consumer_key:
        raise ValueError("Config missing required auth.consumer_key")

    return AppConfig(
        consumer_key=consumer_key,
        redirect_uri=auth_data.get("redirect_uri", DEFAULT_REDIRECT_URI),
        timeout=float(http_data.get("timeout", DEFAULT_TIMEOUT)),
    )


def save_config(config: AppConfig, config_path: Path = CONFIG_FILE) -> None:
    """Write config to TOML file with restricted permissions."""
    config_path.parent.mkdir(parents=True, exist_ok=True)

    data = {
        "auth": {
            "consumer_key": config.consumer_key,
            "redirect_uri": config.redirect_uri,
        },
        "http": {
            "timeout": config.timeout,
        },
    }

    with open(config_path, "wb") as f:
        tomli_w.dump(data, f)

    # File contains the consumer key
    os.chmod(config_path, 0o600)


def config_exists(config_path: Path = CONFIG_FILE) -> bool:
    """Check if config file exists."""
    return config_path.exists()
