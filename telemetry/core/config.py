# Pydantic settings

from pydantic_settings import BaseSettings, SettingsConfigDict
import os


class Settings(BaseSettings):
    """Application settings"""

    # App
    app_name: str = "Telemetry API"
    debug: bool = False

    # Logging
    log_level: str = "INFO"
    log_json: bool = True

    # Database - DATABASE_URL wins, otherwise built from the POSTGRES_* parts
    database_url: str | None = None
    postgres_user: str = "postgres"
    postgres_password: str = "postgres"
    postgres_host: str = "localhost"
    postgres_port: int = 5432
    postgres_db: str = "telemetry"
    postgres_sslmode: str = "disable"

    db_pool_size: int = 20
    db_max_overflow: int = 0

    # Deadline for a single storage statement
    query_timeout_seconds: float = 15.0

    model_config = SettingsConfigDict(
        # Use .env.local if it exists (for local dev), otherwise .env (for Docker)
        env_file=".env.local" if os.path.exists(".env.local") else ".env",
        case_sensitive=False
    )

    @property
    def async_database_url(self) -> str:
        """SQLAlchemy URL for the async engine"""
        if self.database_url:
            return _as_async_url(self.database_url)
        return (
            f"postgresql+psycopg://{self.postgres_user}:{self.postgres_password}"
            f"@{self.postgres_host}:{self.postgres_port}/{self.postgres_db}"
            f"?sslmode={self.postgres_sslmode}"
        )


def _as_async_url(url: str) -> str:
    # Plain postgres:// URLs (as handed out by most hosting providers) need the driver spelled out
    for prefix in ("postgres://", "postgresql://"):
        if url.startswith(prefix):
            return "postgresql+psycopg://" + url[len(prefix):]
    return url


settings = Settings()
