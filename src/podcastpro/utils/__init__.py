"""Utility functions and helpers for podcastpro."""

from podcastpro.utils.errors import (
    AuthError,
    ConfigError,
    ConflictError,
    InvalidConfigError,
    NotFoundError,
    PodcastProError,
    StorageError,
    ValidationError,
)
from podcastpro.utils.paths import (
    get_config_dir,
    get_config_file,
    get_data_dir,
)

__all__ = [
    # Errors
    "PodcastProError",
    "ValidationError",
    "ConflictError",
    "NotFoundError",
    "AuthError",
    "ConfigError",
    "InvalidConfigError",
    "StorageError",
    # Paths
    "get_config_dir",
    "get_data_dir",
    "get_config_file",
]
