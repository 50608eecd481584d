"""Configuration loading utilities."""

import json
import os
from collections.abc import Mapping
from pathlib import Path

from loguru import logger
from pydantic import ValidationError
from pydantic.alias_generators import to_snake

from websearch.config.schema import Config

# Environment variable -> (section, key)
_ENV_KEYS: dict[str, tuple[str, str]] = {
    "WEBSEARCH_BROWSER": ("session", "browser"),
    "WEBSEARCH_HEADLESS": ("session", "headless"),
    "WEBSEARCH_DEBUG": ("session", "debug"),
    "WEBSEARCH_MAX_IMAGES": ("session", "maxImages"),
    "WEBSEARCH_TIMEOUT_MS": ("session", "timeoutMs"),
    "WEBSEARCH_DEBUG_TIMEOUT_MS": ("session", "debugTimeoutMs"),
    "WEBSEARCH_DEBUG_DIR": ("session", "debugDir"),
    "WEBSEARCH_HOST": ("server", "host"),
    "WEBSEARCH_PORT": ("server", "port"),
}

# Variables from the Selenium-based plugin, honored when the new name is unset.
_LEGACY_ENV_KEYS: dict[str, str] = {
    "ST_SELENIUM_BROWSER": "WEBSEARCH_BROWSER",
    "ST_SELENIUM_HEADLESS": "WEBSEARCH_HEADLESS",
    "ST_SELENIUM_DEBUG": "WEBSEARCH_DEBUG",
}

# WebDriver browser names, as ST_SELENIUM_BROWSER holds them -> Playwright browser kinds.
# There "chrome" meant any Chromium build, not the branded channel.
_WEBDRIVER_BROWSER_NAMES: dict[str, str] = {
    "chrome": "chromium",
    "firefox": "firefox",
    "microsoftedge": "msedge",
    "safari": "webkit",
}

# WebDriver names still accepted in the file and in WEBSEARCH_BROWSER.
_BROWSER_ALIASES: dict[str, str] = {
    "microsoftedge": "msedge",
    "safari": "webkit",
}

_SECTIONS = ("session", "server")


def get_config_path() -> Path:
    """Get the default configuration file path."""
    return Path.home() / ".websearch" / "config.json"


def load_config(
    config_path: Path | None = None,
    environ: Mapping[str, str] | None = None,
) -> Config:
    """
    Load configuration from file and environment.

    Values that fail validation are dropped and fall back to their defaults;
    the rest of the configuration is kept.

    Args:
        config_path: Optional path to config file. Uses default if not provided.
        environ: Environment mapping. Uses ``os.environ`` if not provided.

    Returns:
        Loaded configuration object.
    """
    path = config_path or get_config_path()
    env = os.environ if environ is None else environ

    data: dict = {}
    if path.exists():
        try:
            with open(path, encoding="utf-8") as f:
                data = json.load(f)
            if not isinstance(data, dict):
                raise ValueError("top-level value must be an object")
        except (json.JSONDecodeError, ValueError) as e:
            logger.warning("Failed to load config from {}: {}", path, e)
            logger.warning("Using default configuration.")
            data = {}

    data = _apply_env(_migrate_config(data), _migrate_env(env))

    while True:
        try:
            return Config.model_validate(data)
        except ValidationError as e:
            dropped = _drop_invalid_values(data, e)
            if not dropped:
                logger.warning("Invalid configuration, using defaults: {}", e)
                return Config()
            logger.warning("Ignoring invalid config values ({}), using their defaults", ", ".join(dropped))


def save_config(config: Config, config_path: Path | None = None) -> None:
    """
    Save configuration to file.

    Args:
        config: Configuration to save.
        config_path: Optional path to save to. Uses default if not provided.
    """
    path = config_path or get_config_path()
    path.parent.mkdir(parents=True, exist_ok=True)

    data = config.model_dump(mode="json", by_alias=True)

    with open(path, "w", encoding="utf-8") as f:
        json.dump(data, f, indent=2)


def _migrate_env(environ: Mapping[str, str]) -> dict[str, str]:
    """Return the recognized variables, with legacy names mapped to current ones."""
    env = {key: environ[key] for key in _ENV_KEYS if environ.get(key)}
    for legacy_key, key in _LEGACY_ENV_KEYS.items():
        if key in env or not environ.get(legacy_key):
            continue
        value = environ[legacy_key]
        if key == "WEBSEARCH_BROWSER":
            value = _WEBDRIVER_BROWSER_NAMES.get(value.strip().lower(), value)
        env[key] = value
    return env


def _apply_env(data: dict, env: Mapping[str, str]) -> dict:
    for env_key, (section, key) in _ENV_KEYS.items():
        if env_key in env:
            _section(data, section)[key] = env[env_key]
    session_cfg = _section(data, "session")
    if "browser" in session_cfg:
        session_cfg["browser"] = _normalize_browser_name(session_cfg["browser"])
    return data


def _migrate_config(data: dict) -> dict:
    """Migrate old config formats to current."""
    for name in _SECTIONS:
        _section(data, name)

    # Move top-level browser/headless/debug -> session.*
    session_cfg = data["session"]
    for key in ("browser", "headless", "debug"):
        if key in data and key not in session_cfg:
            session_cfg[key] = data.pop(key)

    # Rename session.timeout -> session.timeoutMs
    if "timeout" in session_cfg and "timeoutMs" not in session_cfg:
        session_cfg["timeoutMs"] = session_cfg.pop("timeout")

    return data


def _section(data: dict, name: str) -> dict:
    """Return ``data[name]``, replacing a missing or non-object value with ``{}``."""
    section = data.get(name)
    if isinstance(section, dict):
        return section
    if section is not None:
        logger.warning("Ignoring config section {!r}: expected an object, got {}", name, type(section).__name__)
    data[name] = {}
    return data[name]


def _drop_invalid_values(data: dict, error: ValidationError) -> list[str]:
    """Remove the values ``error`` points at; return their dotted locations."""
    dropped = []
    for item in error.errors():
        loc = item["loc"]
        if not loc:
            continue
        parent = data
        for part in loc[:-1]:
            parent = parent.get(part) if isinstance(parent, dict) else None
        if not isinstance(parent, dict):
            continue
        # loc carries the camelCase alias even when the file used the field name.
        for key in (loc[-1], to_snake(str(loc[-1]))):
            if key in parent:
                del parent[key]
                dropped.append(".".join(str(part) for part in loc))
                break
    return dropped


def _normalize_browser_name(value: object) -> object:
    if not isinstance(value, str):
        return value
    return _BROWSER_ALIASES.get(value.strip().lower(), value)
