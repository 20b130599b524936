"""API key validation utilities.

Validates the text-generation API key before any request is made, so a
misconfigured key turns into a fallback description instead of a failed call.
"""

import os
import re

# Checked in order; the first non-empty value wins
GEMINI_KEY_ENV_VARS = ("GOOGLE_API_KEY", "GEMINI_API_KEY", "API_KEY")


class APIKeyError(ValueError):
    """Raised when API key is invalid or missing."""

    pass


def validate_api_key(key: str | None, key_name: str) -> str:
    """Validate a Gemini API key and return it stripped.

    Args:
        key: The API key to validate (may be None)
        key_name: Environment variable name (for error messages)

    Returns:
        Validated and stripped API key

    Raises:
        APIKeyError: If key is missing, empty, or malformed
    """
    if key is None or not key.strip():
        raise APIKeyError(
            f"Gemini API key is required.\n"
            f"Set the {key_name} environment variable.\n"
            f"Example: export {key_name}='your-api-key-here'"
        )

    stripped = key.strip()
    if (stripped.startswith('"') and stripped.endswith('"')) or (
        stripped.startswith("'") and stripped.endswith("'")
    ):
        raise APIKeyError(
            f"Gemini API key should not be quoted.\n"
            f"Remove quotes from {key_name} environment variable."
        )

    if any(char in key for char in ["\n", "\r", "\0", "\t"]):
        raise APIKeyError(
            f"Gemini API key contains invalid characters.\n"
            f"Check your {key_name} environment variable."
        )

    if len(stripped) < 20:
        raise APIKeyError(
            f"Gemini API key appears invalid (too short).\n"
            f"Expected at least 20 characters, got {len(stripped)}."
        )

    if not re.match(r"^AIza[A-Za-z0-9_-]+$", stripped):
        raise APIKeyError(
            "Gemini API key format appears invalid.\n"
            "Gemini keys typically start with 'AIza' and contain only "
            "alphanumeric characters, underscores, and dashes."
        )

    return stripped


def get_validated_api_key(configured: str | None = None) -> str:
    """Get and validate the Gemini API key.

    Args:
        configured: Key from the config file, used before the environment

    Returns:
        Validated API key

    Raises:
        APIKeyError: If no key is available or it is malformed
    """
    if configured:
        return validate_api_key(configured, "generation.api_key")

    for env_var in GEMINI_KEY_ENV_VARS:
        value = os.environ.get(env_var)
        if value and value.strip():
            return validate_api_key(value, env_var)

    return validate_api_key(None, GEMINI_KEY_ENV_VARS[0])
