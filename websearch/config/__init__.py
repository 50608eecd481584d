"""Configuration package."""

from websearch.config.loader import load_config, save_config
from websearch.config.schema import Config, ServerConfig, SessionConfig

__all__ = ["Config", "ServerConfig", "SessionConfig", "load_config", "save_config"]
