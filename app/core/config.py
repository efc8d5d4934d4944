from pydantic_settings import BaseSettings, SettingsConfigDict

class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    app_env: str = "dev"
    app_name: str = "app-config-builder"
    api_host: str = "0.0.0.0"
    api_port: int = 5000
    log_level: str = "INFO"

    uploads_dir: str = "./uploads"
    output_dir: str = "./output"
    reference_db_name: str = "references.db"
    upload_chunk_size: int = 1024 * 1024

settings = Settings()
