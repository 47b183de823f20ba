"""
Application Configuration

This module provides type-safe configuration loading using Pydantic settings.
Environment variables are loaded from .env file and validated.

Usage:
    from kanji_card.config import settings

    # Access settings
    data_dir = settings.DATA_DIR
    text_model = settings.TEXT_MODEL
"""

from functools import lru_cache
from pathlib import Path
from typing import Any

import yaml
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Application
    APP_NAME: str = "Kanji Card"
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"

    # Storage
    # "file" persists one JSON document per record under DATA_DIR,
    # "memory" keeps everything in-process (tests, demos).
    STORAGE_BACKEND: str = "file"
    DATA_DIR: str = "data"

    # LLM providers (LiteLLM reads the keys from the environment as well)
    OPENAI_API_KEY: str = ""
    ANTHROPIC_API_KEY: str = ""

    # Format: provider/model-name
    TEXT_MODEL: str = "openai/gpt-4o-mini"
    VISION_MODEL: str = "openai/gpt-4o-mini"

    # Language the extracted words and stories are translated into
    TRANSLATION_LANGUAGE: str = "English"

    EXTRACTION_MAX_TOKENS: int = 4000
    STORY_MAX_TOKENS: int = 2000

    # Story generation when a set fills up (best-effort)
    STORY_GENERATION_ENABLED: bool = True

    @property
    def data_path(self) -> Path:
        """DATA_DIR as an expanded Path."""
        return Path(self.DATA_DIR).expanduser()


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


settings = get_settings()


@lru_cache()
def load_yaml_config() -> dict[str, Any]:
    """Load application configuration from config/default.yaml."""
    config_path = Path(__file__).parent.parent.parent.parent / "config" / "default.yaml"

    if not config_path.exists():
        return {}

    with open(config_path, encoding="utf-8") as f:
        return yaml.safe_load(f) or {}


yaml_config: dict[str, Any] = load_yaml_config()
