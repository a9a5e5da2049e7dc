"""Application configuration using pydantic-settings."""

from functools import lru_cache
from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        env_prefix="EDGEFLOW_",
    )

    # Server settings
    host: str = "0.0.0.0"
    port: int = 8787
    reload: bool = False
    log_level: Literal["debug", "info", "warning", "error"] = "info"

    # Application settings
    app_name: str = "EdgeFlow"
    app_version: str = "0.1.0"
    debug: bool = False

    # CORS settings
    cors_origins: list[str] = ["*"]
    cors_allow_credentials: bool = False
    cors_allow_methods: list[str] = ["GET", "POST", "PUT", "DELETE", "OPTIONS"]
    cors_allow_headers: list[str] = ["Content-Type", "Authorization", "X-Workflow-ID"]

    # Execution settings
    max_execution_records: int = 100
    reject_cycles: bool = True
    http_timeout: float | None = None

    # Edge storage settings
    cache_default_ttl: int = 3600
    kv_list_limit: int = 100

    # AI completion settings (any OpenAI-compatible endpoint)
    ai_base_url: str = "https://dashscope.aliyuncs.com/compatible-mode/v1"
    ai_api_key: str | None = None
    ai_model: str = "qwen-turbo"
    ai_max_tokens: int = 2000
    ai_temperature: float = 0.7
    ai_system_prompt: str = "You are a professional data analysis and content processing assistant."


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


# Global settings instance
settings = get_settings()
