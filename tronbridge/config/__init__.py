"""Configuration module for tronbridge."""

from tronbridge.config.loader import load_config, get_config_path
from tronbridge.config.schema import Config

__all__ = ["Config", "load_config", "get_config_path"]
