"""Configuration management for podcastpro."""

from podcastpro.config.manager import ConfigManager
from podcastpro.config.schema import GenerationConfig, GlobalConfig, StoreConfig

__all__ = ["ConfigManager", "GlobalConfig", "StoreConfig", "GenerationConfig"]
