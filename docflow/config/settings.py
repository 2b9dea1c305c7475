from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration loaded from environment variables.

    Built once at process start and passed to factories; frozen so the
    selected backends and endpoints stay fixed for the process lifetime.
    """

    model_config = SettingsConfigDict(env_file=".env", extra="ignore", frozen=True)

    app_env: str = "dev"
    log_level: str = "INFO"

    db_host: str = "host.docker.internal"
    db_port: int = 5432
    db_database: str = "docflow"
    db_username: str = "docflow"
    db_password: str = "secret"
    db_pool_timeout_seconds: float = 10.0

    storage_backend: str = "auto"
    storage_local_root: Path = Path("/app/files")
    storage_s3_bucket: str = ""
    storage_s3_prefix: str = "documents"
    storage_s3_region: str = ""
    storage_s3_endpoint_url: str = ""

    pdf_engine: str = "pdfplumber"

    summarization_provider: str = "openai"
    summarization_api_key: str = ""
    summarization_base_url: str = ""
    summarization_model_id: str = "gpt-4o-mini"
    summarization_timeout_seconds: int = 30
    summarization_max_tokens: int = 512
    summarization_max_input_chars: int = 48_000
    summarization_temperature: float = 0.2

    process_on_submit: bool = True
    processing_max_workers: int = 4
    stale_processing_seconds: int = 900
