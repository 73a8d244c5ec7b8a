"""Configuration management using Pydantic settings."""

from functools import lru_cache
from typing import Literal

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # Application
    app_name: str = "DocVault"
    app_version: str = "1.0.0"
    debug: bool = True
    log_level: str = "INFO"
    log_format: str = "json"  # "json" for production, "console" for dev

    # Server
    host: str = "0.0.0.0"
    port: int = 8000
    public_base_url: str = "http://localhost:8000"
    cors_origins: list[str] = ["*"]

    # Database
    database_url: str = "sqlite:///./data/docvault.db"
    db_pool_size: int = 5
    db_pool_max_overflow: int = 10
    db_pool_timeout: int = 30

    # JWT
    jwt_secret_key: str = "dev-secret-key-change-in-production"
    jwt_algorithm: str = "HS256"
    jwt_expiration_hours: int = 24 * 7
    view_token_expiration_minutes: int = 15  # Inline preview links

    # Initial Admin (for seeding)
    admin_email: str = "admin@company.com"
    admin_password: str = "change-me-admin"
    admin_name: str = "Administrator"
    admin_department: str = "it"

    # Security
    password_min_length: int = 6
    bcrypt_rounds: int = 12

    # Redis / ARQ Task Queue
    redis_url: str = "redis://localhost:6379"
    use_arq_worker: bool = True  # Set False to bypass ARQ and use BackgroundTasks
    arq_job_timeout: int = 300
    arq_max_jobs: int = 4
    arq_health_check_interval: int = 60

    # Document Management
    upload_dir: str = "./data/uploads"
    max_upload_size_mb: int = 50
    extraction_backfill_batch: int = 200  # Documents per content backfill sweep

    # Folder hierarchy
    folder_max_depth: int = 256  # Upper bound for parent-chain walks

    # Chatbot
    chatbot_llm_enabled: bool = False
    ollama_base_url: str = "http://localhost:11434"
    chat_model: Literal["llama3.2", "qwen3", "gemma2"] = "llama3.2"
    chatbot_timeout_seconds: float = 30.0
    chatbot_max_tokens: int = 300
    chatbot_temperature: float = 0.7
    chatbot_max_results: int = 5
    chatbot_snippet_radius: int = 100

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        extra = "ignore"


@lru_cache
def get_settings() -> Settings:
    return Settings()
