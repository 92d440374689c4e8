"""Application configuration via environment variables."""

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    database_url: str = "sqlite:///./trade_journal.db"
    log_level: str = "INFO"
    cors_origins: list[str] = ["http://localhost:5173"]  # Vite dev server

    # Import pipeline
    dedup_batch_size: int = 10  # max keys per existence query against the trade store
    max_commit_records: int = 1000  # max records per atomic write
    max_upload_bytes: int = 10 * 1024 * 1024
    csv_format: str = "Ebinex"

    history_limit: int = 50

    model_config = {"env_prefix": "TJ_", "env_file": ".env"}


settings = Settings()
