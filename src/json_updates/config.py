"""Configuration for the json-updates gateway.

Reads from config/json-updates.ini if present, then a .env file, then
environment variables. Later sources override earlier ones.
Loaded once at startup; request handlers never touch the environment.
"""

from __future__ import annotations

import configparser
import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import dotenv_values

from json_updates.errors import ConfigError

_CONFIG_FILE = (
    Path(__file__).resolve().parent.parent.parent / "config" / "json-updates.ini"
)

DEFAULT_REDIRECT_URL = "https://github.com/pashutk/json-updates"

_REQUIRED = ("access_token", "mongo_uri", "mongo_db_name", "collections_prefix")
_INT_FIELDS = ("port", "mongo_timeout_ms")


@dataclass(frozen=True)
class GatewayConfig:
    """Gateway configuration. Immutable once loaded."""

    access_token: str
    mongo_uri: str
    mongo_db_name: str
    collections_prefix: str
    mongo_timeout_ms: int = 10000
    redirect_url: str = DEFAULT_REDIRECT_URL
    host: str = "0.0.0.0"
    port: int = 8000
    log_level: str = "INFO"


ENV_MAP = {
    "ACCESS_TOKEN": "access_token",
    "MONGO_URI": "mongo_uri",
    "MONGO_DB_NAME": "mongo_db_name",
    "MONGO_COLLECTIONS_PREFIX": "collections_prefix",
    "MONGO_TIMEOUT_MS": "mongo_timeout_ms",
    "JSON_UPDATES_REDIRECT_URL": "redirect_url",
    "JSON_UPDATES_HOST": "host",
    "JSON_UPDATES_PORT": "port",
    "JSON_UPDATES_LOG_LEVEL": "log_level",
}

_INI_MAP = {
    "mongo": [
        ("uri", "mongo_uri"),
        ("database", "mongo_db_name"),
        ("collections_prefix", "collections_prefix"),
        ("timeout_ms", "mongo_timeout_ms"),
    ],
    "gateway": [
        ("access_token", "access_token"),
        ("redirect_url", "redirect_url"),
        ("host", "host"),
        ("port", "port"),
        ("log_level", "log_level"),
    ],
}


def _read_ini(path: Path) -> dict[str, str]:
    kwargs: dict[str, str] = {}
    parser = configparser.ConfigParser()
    parser.read(path)
    for section, keys in _INI_MAP.items():
        if not parser.has_section(section):
            continue
        for ini_key, config_key in keys:
            val = parser.get(section, ini_key, fallback=None)
            if val is not None:
                kwargs[config_key] = val
    return kwargs


def load_config(
    config_path: Path | None = None,
    env_file: Path | str | None = ".env",
    environ: dict[str, str] | None = None,
) -> GatewayConfig:
    """Load config from INI file and .env, then override with environment variables.

    Raises ConfigError listing every missing required variable.
    """
    path = config_path or _CONFIG_FILE
    kwargs: dict[str, str] = {}

    if path.exists():
        kwargs.update(_read_ini(path))

    sources = []
    if env_file is not None:
        sources.append(dotenv_values(env_file))
    sources.append(os.environ if environ is None else environ)
    for source in sources:
        for env_key, config_key in ENV_MAP.items():
            val = source.get(env_key)
            if val is not None:
                kwargs[config_key] = val

    missing = [
        env_key
        for env_key, config_key in ENV_MAP.items()
        if config_key in _REQUIRED and not kwargs.get(config_key)
    ]
    if missing:
        raise ConfigError(f"Set {', '.join(missing)} env var!")

    values: dict = dict(kwargs)
    for key in _INT_FIELDS:
        if key in values:
            try:
                values[key] = int(values[key])
            except ValueError:
                raise ConfigError(f"{key} must be an integer, got {values[key]!r}") from None
    return GatewayConfig(**values)
