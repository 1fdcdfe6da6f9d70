from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration loaded from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    app_env: str = "dev"
    log_level: str = "INFO"

    db_host: str = "host.docker.internal"
    db_port: int = 5432
    db_database: str = "catalog"
    db_username: str = "catalog"
    db_password: str = "secret"
    db_pool_min_size: int = 1
    db_pool_max_size: int = 10

    files_root: str = "/app/files/uploads"
    max_upload_bytes: int = 10 * 1024 * 1024

    dispatch_max_workers: int = 4
    worker_poll_interval_seconds: int = 5
    session_stale_after_seconds: int = 180

    pdf_engine: str = "pdfplumber"

    extraction_provider: str = "openai"
    extraction_timeout_seconds: int = 90
    extraction_openai_api_key: str = ""
    extraction_openai_model_name: str = "gpt-4o-mini"
    extraction_openai_temperature: float = 0.1
    extraction_openai_compatible_base_url: str = ""
    extraction_openai_compatible_api_key: str = ""
    extraction_openai_compatible_model_name: str = ""

    default_sales_channel: str = "dine-in"
    default_component_category: str = "General"

    api_host: str = "0.0.0.0"
    api_port: int = 9002

    poll_interval_seconds: float = 3.0
    poll_max_attempts: int = 40
