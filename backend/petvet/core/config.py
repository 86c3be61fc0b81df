"""Module: config."""

from pydantic_settings import BaseSettings, SettingsConfigDict

# Centralized runtime configuration loaded from environment variables.
class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    # Primary SQLAlchemy connection string for the backend database.
    database_url: str = "sqlite:///./petvet.db"

    # Signing key and cookie options for the session token.
    session_secret: str = "change-me-in-production"
    session_algorithm: str = "HS256"
    session_cookie_name: str = "session"
    session_max_age_seconds: int = 60 * 60 * 24 * 7
    session_cookie_secure: bool = False

    cors_origins: list[str] = [
        "http://localhost:3000",
        "http://127.0.0.1:3000",
    ]

    # External clinic directory scraped by the locator.
    directory_base_url: str = "https://www.vetlocator.com/"
    directory_radius: int = 10
    directory_timeout_seconds: float = 10.0
    directory_max_pages: int = 200

    log_level: str = "INFO"

# Global settings instance imported by app modules at runtime.
settings = Settings()
