"""Configuration management using Pydantic Settings"""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration loaded from environment variables"""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # Service
    service_name: str = "future-letter"
    log_level: str = "INFO"

    # LLM polish (OPENAI_API_KEY / OPENAI_MODEL)
    openai_api_key: str = ""
    openai_model: str = "gpt-5-mini"
    openai_base_url: str | None = None
    llm_timeout_seconds: float = 8.0
    polish_timeout_seconds: float = 2.0
    polish_enabled: bool = True
    polish_strict: bool = False  # Surface upstream failures instead of falling back

    # In-memory stores
    polish_cache_ttl_seconds: float = 24 * 3600.0
    polish_cache_max_entries: int = 2048
    rate_limit_requests: int = 3
    rate_limit_window_seconds: float = 60.0
    rate_limit_max_clients: int = 10_000

    @property
    def resolved_model(self) -> str:
        return self.openai_model.strip() or "gpt-5-mini"


def load_settings() -> Settings:
    """Re-read settings so credentials are picked up at call time"""
    return Settings()


settings = Settings()
