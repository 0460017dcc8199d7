"""
Settings - Application configuration using Pydantic Settings.

Loads from environment variables (prefix ``TASKFORGE_``) and .env files.
"""

from __future__ import annotations

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings."""

    # Task queue
    queue_max_concurrent: int = 5
    queue_max_retries: int = 3

    # Semantic cache
    cache_max_size: int = 1000
    cache_ttl_seconds: float = 24 * 60 * 60
    cache_similarity_threshold: float = 0.9
    cache_match_task_type: bool = False

    # Orchestrator
    reuse_threshold: float = 0.95
    enforce_deadlines: bool = True
    recent_task_history: int = 10
    max_tracked_users: int = 1000
    register_builtin_models: bool = True

    # Performance monitor
    monitor_max_metrics: int = 10_000
    monitor_window_seconds: float = 60 * 60
    monitor_retention_seconds: float = 24 * 60 * 60
    monitor_sweep_interval_seconds: float = 60 * 60
    alert_response_time_ms: float = 5000.0
    alert_error_rate: float = 0.1
    alert_cache_hit_rate: float = 0.3

    # Ollama model plugin
    ollama_enabled: bool = False
    ollama_url: str = "http://localhost:11434"
    ollama_model: str = "llama3.2"
    ollama_timeout_seconds: float = 120.0

    # API
    api_host: str = "0.0.0.0"
    api_port: int = 8000
    api_debug: bool = False
    api_cors_origins: list[str] = ["http://localhost:3000", "http://127.0.0.1:3000"]

    # Logging
    log_level: str = "INFO"

    model_config = SettingsConfigDict(
        env_prefix="TASKFORGE_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
