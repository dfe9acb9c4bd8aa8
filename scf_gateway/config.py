"""Configuration management using Pydantic Settings"""

from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration loaded from environment variables"""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # Storage
    storage_backend: Literal["memory", "database"] = "memory"
    database_url: str = "sqlite:///./scf.db"

    # External Services
    settlement_webhook_url: str = "http://localhost:8003/mock-settlement"

    # Service
    service_name: str = "scf-gateway"
    log_level: str = "INFO"
    seed_sample_data: bool = False

    # Portfolio
    default_currency: str = "USD"
    top_categories_limit: int = 3

    # HTTP Client
    http_timeout_seconds: float = 5.0
    webhook_max_retries: int = 5
    webhook_backoff_base: float = 1.0  # Exponential backoff base in seconds


settings = Settings()
