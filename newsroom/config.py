"""Application configuration via environment variables."""

from functools import lru_cache

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment."""

    # App
    debug: bool = False
    environment: str = "development"
    log_level: str = "INFO"

    # CORS
    cors_origins: list[str] = [
        "http://localhost:3000",
        "http://localhost:5173",
        "http://localhost:8000",
    ]

    # MongoDB (empty URI keeps articles in process memory)
    mongodb_uri: str = ""
    mongodb_database: str = "newsroom"
    mongodb_collection: str = "articles"

    # Machine translation: "openai", "libretranslate" or "none".
    # Empty picks openai when an API key is configured, otherwise none.
    translation_provider: str = ""
    translation_timeout: float = 30.0

    # OpenAI-compatible chat completions
    openai_api_key: str = ""
    openai_base_url: str = ""  # https://api.openai.com/v1 when empty
    openai_model: str = "gpt-4o-mini"

    # LibreTranslate
    libretranslate_url: str = ""  # https://libretranslate.example.com
    libretranslate_api_key: str = ""

    # Admin API key (protects write endpoints when set)
    admin_api_key: str = ""

    model_config = {"env_file": ".env", "extra": "ignore"}


@lru_cache
def get_settings() -> Settings:
    return Settings()
