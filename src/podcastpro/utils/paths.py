"""Filesystem locations for podcastpro config and data."""

import os
from pathlib import Path

import platformdirs

APP_NAME = "podcastpro"


def get_config_dir() -> Path:
    """Get the configuration directory.

    Honours ``PODCASTPRO_CONFIG_DIR``, otherwise the platform user config dir.
    """
    override = os.getenv("PODCASTPRO_CONFIG_DIR")
    if override:
        return Path(override).expanduser()
    return Path(platformdirs.user_config_dir(APP_NAME))


def get_data_dir() -> Path:
    """Get the data directory holding the persisted collections.

    Honours ``PODCASTPRO_DATA_DIR``, otherwise the platform user data dir.
    """
    override = os.getenv("PODCASTPRO_DATA_DIR")
    if override:
        return Path(override).expanduser()
    return Path(platformdirs.user_data_dir(APP_NAME))


def get_config_file() -> Path:
    """Get path to config.yaml."""
    return get_config_dir() / "config.yaml"

