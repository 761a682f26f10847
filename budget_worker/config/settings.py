from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration loaded from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    app_env: str = "dev"
    log_level: str = "INFO"

    db_host: str = "host.docker.internal"
    db_port: int = 5432
    db_database: str = "budget"
    db_username: str = "budget"
    db_password: str = "secret"
    db_pool_min_size: int = 1
    db_pool_max_size: int = 10
    db_connect_timeout_seconds: int = 10

    files_root: str = "/app/files"
    job_poll_interval_seconds: int = 5

    pdf_engine: str = "pdfplumber"
    extraction_timeout_seconds: float = 60.0
    analysis_timeout_seconds: float = 120.0

    analysis_provider: str = "openai"
    analysis_temperature: float = 0.0

    analysis_openai_api_key: str = ""
    analysis_openai_model_name: str = "gpt-4o-mini"
    analysis_openai_timeout_seconds: int = 60

    analysis_openai_compatible_base_url: str = ""
    analysis_openai_compatible_api_key: str = ""
    analysis_openai_compatible_model_name: str = ""
    analysis_openai_compatible_timeout_seconds: int = 60

    analysis_openrouter_api_key: str = ""
    analysis_openrouter_model_name: str = ""
    analysis_openrouter_timeout_seconds: int = 60

    analysis_groq_api_key: str = ""
    analysis_groq_model_name: str = ""
    analysis_groq_timeout_seconds: int = 60

    analysis_together_api_key: str = ""
    analysis_together_model_name: str = ""
    analysis_together_timeout_seconds: int = 60

    analysis_deepseek_api_key: str = ""
    analysis_deepseek_model_name: str = ""
    analysis_deepseek_timeout_seconds: int = 60

    analysis_ollama_api_key: str = "ollama"
    analysis_ollama_model_name: str = ""
    analysis_ollama_timeout_seconds: int = 120
