"""
Configuration Settings.
"""

from pydantic_settings import BaseSettings
from typing import Optional


class Settings(BaseSettings):
    """Application settings."""

    # App info
    app_name: str = "Accio AI Playground"
    app_version: str = "1.0.0"
    debug: bool = True

    # Security
    secret_key: str = "your-secret-key-change-this-in-production"
    algorithm: str = "HS256"
    access_token_expire_minutes: int = 60 * 24 * 7  # 7 days

    # Storage
    storage_type: str = "local"
    local_storage_path: str = "./data"

    # LLM Provider settings
    llm_provider: str = "openrouter"  # "openrouter" or "openai"
    llm_api_key: Optional[str] = None
    llm_model: Optional[str] = None  # uses provider default if not set
    llm_base_url: Optional[str] = None  # uses provider default if not set
    llm_max_tokens: int = 2000
    llm_temperature: float = 0.7
    llm_timeout: float = 120.0
    llm_referer: Optional[str] = None  # falls back to the first CORS origin
    llm_app_title: str = "Accio AI Playground"

    # Legacy key (still accepted)
    openrouter_api_key: Optional[str] = None

    # Chat pipeline
    chat_message_max_length: int = 2000
    session_name_max_length: int = 100
    serialize_session_turns: bool = False

    # CORS
    cors_origins: list[str] = [
        "http://localhost:3000",
        "http://127.0.0.1:3000",
    ]

    # Logging configuration
    log_level: str = "INFO"  # DEBUG, INFO, WARNING, ERROR, CRITICAL
    log_file_path: str = "./logs/accio.log"
    log_file_enabled: bool = True
    log_console_enabled: bool = True
    log_json_format: bool = True  # JSON format for files, human-readable for console
    log_api_requests: bool = True
    log_llm_calls: bool = True  # Log every generation call with token usage

    class Config:
        env_file = ".env"
        case_sensitive = False

    @property
    def resolved_llm_api_key(self) -> Optional[str]:
        return self.llm_api_key or self.openrouter_api_key

    @property
    def resolved_llm_referer(self) -> str:
        if self.llm_referer:
            return self.llm_referer
        return self.cors_origins[0] if self.cors_origins else "http://localhost:3000"


settings = Settings()
