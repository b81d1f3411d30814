from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    app_name: str = "Budget Time API"
    # Months past today that occurrence previews cover when the caller omits a horizon.
    default_horizon_months: int = Field(default=12, ge=0, le=120)
    log_level: str = "INFO"
    # Comma-separated origins for CORS.
    cors_allow_origins: str = "*"

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", extra="ignore")


settings = Settings()
