"""Application configuration."""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    app_name: str = "MindCalm"
    debug: bool = False
    database_url: str = "sqlite:///./mindcalm.db"

    # AI providers
    ai_provider: str = "gemini"  # gemini | ollama
    gemini_api_key: str = ""
    gemini_model: str = "gemini-2.5-flash"
    ollama_base_url: str = "http://localhost:11434"
    ollama_model: str = "llama3.1"
    ai_timeout_seconds: float = 45.0

    # Used until the client stores a theme of its own
    default_theme: str = "light"


settings = Settings()
