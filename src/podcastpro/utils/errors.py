"""Custom exceptions for podcastpro."""


class PodcastProError(Exception):
    """Base exception for all podcastpro errors.

    Args:
        message: Human readable error message
        suggestion: Optional hint shown to the user by the CLI
    """

    def __init__(self, message: str = "", suggestion: str | None = None) -> None:
        super().__init__(message)
        self.suggestion = suggestion


class ValidationError(PodcastProError):
    """Missing or malformed required input."""

    pass


class ConflictError(PodcastProError):
    """A unique key is already taken (e.g. email)."""

    pass


class NotFoundError(PodcastProError):
    """An operation referenced an entity that does not exist."""

    def __init__(self, resource: str, resource_id: str, suggestion: str | None = None) -> None:
        super().__init__(f"{resource} '{resource_id}' not found", suggestion=suggestion)
        self.resource = resource
        self.resource_id = resource_id


class AuthError(PodcastProError):
    """Credential mismatch.

    The message is deliberately generic so it never reveals which field was wrong.
    """

    def __init__(self, message: str = "Invalid email or password") -> None:
        super().__init__(message)


class ConfigError(PodcastProError):
    """Configuration-related errors."""

    pass


class InvalidConfigError(ConfigError):
    """Invalid configuration data."""

    pass


class StorageError(PodcastProError):
    """Reading or writing the persisted collections failed."""

    pass
