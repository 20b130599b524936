"""Configuration schema models using Pydantic."""

from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR"]


class StoreConfig(BaseModel):
    """Store persistence and account rules."""

    data_dir: Path | None = None  # If None, uses the platform data dir
    min_password_length: int = Field(default=4, ge=1)
    seed_demo_data: bool = True


class GenerationConfig(BaseModel):
    """Description generator configuration."""

    model_name: str = "gemini-2.0-flash"
    api_key: str | None = None  # If None, will use environment variable
    max_attempts: int = Field(default=2, ge=1)
    temperature: float = 0.8


class GlobalConfig(BaseModel):
    """Global podcastpro configuration."""

    version: str = "1"
    log_level: LogLevel = "WARNING"

    store: StoreConfig = Field(default_factory=StoreConfig)
    generation: GenerationConfig = Field(default_factory=GenerationConfig)
