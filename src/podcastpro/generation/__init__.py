"""Text generation helpers that live outside the Store."""

from podcastpro.generation.description import DescriptionGenerator, fallback_description

__all__ = ["DescriptionGenerator", "fallback_description"]
