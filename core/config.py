from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # Database
    database_url: str

    # API
    api_port: int = 8000

    # Security
    actor_hmac_secret: str  # HMAC secret shared with the gateway that forwards actor headers

    # Moderation
    report_ban_hours: int = 24  # Ban length applied when a report is resolved with resolve_ban

    # Logging
    log_level: str = "INFO"

    # Environment
    environment: str = "development"

    @property
    def is_production(self) -> bool:
        return self.environment == "production"

    @property
    def is_development(self) -> bool:
        return self.environment == "development"


settings = Settings()
