"""Tests for API key validation."""

import pytest

from podcastpro.utils.api_keys import APIKeyError, get_validated_api_key, validate_api_key

VALID_KEY = "AIzaSyD" + "X" * 32


@pytest.fixture
def no_env_keys(monkeypatch):
    for name in ("GOOGLE_API_KEY", "GEMINI_API_KEY", "API_KEY"):
        monkeypatch.delenv(name, raising=False)


class TestValidateAPIKey:
    """Tests for validate_api_key function."""

    def test_valid_key(self):
        assert validate_api_key(VALID_KEY, "GOOGLE_API_KEY") == VALID_KEY

    def test_none_key(self):
        """Test that None key raises APIKeyError."""
        with pytest.raises(APIKeyError, match="API key is required"):
            validate_api_key(None, "GOOGLE_API_KEY")

    def test_whitespace_only_key(self):
        with pytest.raises(APIKeyError, match="API key is required"):
            validate_api_key("   ", "GOOGLE_API_KEY")

    def test_key_is_stripped(self):
        """Test that surrounding whitespace is removed."""
        assert validate_api_key(f"  {VALID_KEY}  ", "GOOGLE_API_KEY") == VALID_KEY

    def test_too_short_key(self):
        with pytest.raises(APIKeyError, match="too short"):
            validate_api_key("AIzashort", "GOOGLE_API_KEY")

    def test_key_with_newline(self):
        """Test that key with embedded control characters is rejected."""
        with pytest.raises(APIKeyError, match="invalid characters"):
            validate_api_key("AIzaSyD\n" + "X" * 32, "GOOGLE_API_KEY")

    def test_quoted_key(self):
        with pytest.raises(APIKeyError, match="should not be quoted"):
            validate_api_key(f'"{VALID_KEY}"', "GOOGLE_API_KEY")

    def test_wrong_prefix(self):
        with pytest.raises(APIKeyError, match="format appears invalid"):
            validate_api_key("sk-ant-api03-" + "X" * 32, "GOOGLE_API_KEY")


class TestGetValidatedAPIKey:
    """Tests for get_validated_api_key lookup order."""

    def test_configured_key_wins(self, no_env_keys, monkeypatch):
        monkeypatch.setenv("GOOGLE_API_KEY", "AIzaEnv" + "Y" * 32)
        assert get_validated_api_key(VALID_KEY) == VALID_KEY

    def test_environment_order(self, no_env_keys, monkeypatch):
        """GOOGLE_API_KEY is preferred over the other variables."""
        google = "AIzaGoogle" + "G" * 30
        monkeypatch.setenv("API_KEY", VALID_KEY)
        monkeypatch.setenv("GOOGLE_API_KEY", google)

        assert get_validated_api_key() == google

    def test_falls_back_to_generic_variable(self, no_env_keys, monkeypatch):
        monkeypatch.setenv("API_KEY", VALID_KEY)
        assert get_validated_api_key() == VALID_KEY

    def test_missing_key(self, no_env_keys):
        with pytest.raises(APIKeyError, match="GOOGLE_API_KEY"):
            get_validated_api_key()
