"""podcastpro - social data layer for a short video podcast network."""

__version__ = "0.1.0"
