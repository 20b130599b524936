"""Podcast description generator backed by Gemini (Google AI).

This sits outside the Store. Given a title and category it returns a short
description, and on any failure it returns a deterministic fallback
instead of raising.
"""

import logging
from typing import Any

import google.generativeai as genai
from google.generativeai import GenerativeModel

from podcastpro.config.schema import GenerationConfig
from podcastpro.utils.api_keys import APIKeyError, get_validated_api_key
from podcastpro.utils.retry import RetryConfig, RetryableError, classify_api_error, with_retry

logger = logging.getLogger(__name__)

PROMPT_TEMPLATE = (
    'Generate a catchy, professional podcast description (max 2 sentences) for a podcast '
    'titled "{title}" in the category "{category}". Do not use quotes.'
)


def fallback_description(category: str) -> str:
    """Deterministic description used whenever generation fails."""
    return f"A fascinating podcast about {category}."


class DescriptionGenerator:
    """Generates podcast descriptions with a single Gemini call.

    Example:
        >>> generator = DescriptionGenerator()
        >>> generator.generate("The Future of AI", "Technology")
        'Dive into how generative AI ...'
    """

    def __init__(
        self,
        config: GenerationConfig | None = None,
        model: Any | None = None,
        retry_config: RetryConfig | None = None,
    ) -> None:
        """Initialize the generator.

        The model is created lazily so a missing API key only matters when
        a description is actually requested.

        Args:
            config: Generation settings (model name, API key, attempts)
            model: Pre-built model object exposing ``generate_content``
            retry_config: Override retry timing (tests use fast settings)
        """
        self.config = config or GenerationConfig()
        self._model = model
        self.retry_config = retry_config or RetryConfig(
            max_attempts=self.config.max_attempts,
            max_wait_seconds=4,
            min_wait_seconds=0.5,
        )

    def generate(self, title: str, category: str) -> str:
        """Generate a description for a podcast.

        Args:
            title: Podcast title
            category: Podcast category

        Returns:
            Generated text, or the fallback description on any failure
        """
        try:
            model = self._get_model()
        except APIKeyError as e:
            logger.warning(f"Description generation unavailable: {e}")
            return fallback_description(category)

        prompt = PROMPT_TEMPLATE.format(title=title, category=category)

        try:
            text = self._generate_with_retry(model, prompt)
        except Exception as e:
            logger.warning("Gemini API error: %s", e)
            return fallback_description(category)

        if not text:
            logger.warning("Empty response from Gemini")
            return fallback_description(category)

        return text

    def _generate_with_retry(self, model: Any, prompt: str) -> str:
        @with_retry(config=self.retry_config, retry_on=(RetryableError,))
        def call() -> str:
            try:
                response = model.generate_content(
                    prompt,
                    generation_config={"temperature": self.config.temperature},
                )
            except Exception as e:
                raise classify_api_error(e) from e
            return (getattr(response, "text", "") or "").strip()

        return call()

    def _get_model(self) -> Any:
        if self._model is None:
            api_key = get_validated_api_key(self.config.api_key)
            genai.configure(api_key=api_key)
            self._model = GenerativeModel(self.config.model_name)
        return self._model
