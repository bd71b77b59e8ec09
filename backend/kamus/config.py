from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    app_name: str = "Kamus"
    environment: str = "dev"
    log_level: str = "INFO"

    database_url: str = "sqlite:///./kamus.db"

    # Signed session cookie
    session_secret: str = "change-me"
    session_cookie_name: str = "__session"
    session_max_age_minutes: int = 60 * 24 * 30
    session_cookie_secure: bool = False

    # Feed / queue page size
    page_size: int = 10

    # Google OAuth
    google_client_id: str | None = None
    google_client_secret: str | None = None
    oauth_redirect_base_url: str = "http://localhost:8000"

    # Emails seeded as ADMIN users on startup
    admin_emails: list[str] = []

    # Base URL for the API (used by the feed client)
    api_base_url: str = "http://localhost:8000"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
    )


settings = Settings()
