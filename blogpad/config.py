from pydantic_settings import BaseSettings, SettingsConfigDict
from functools import lru_cache


class Settings(BaseSettings):
    """
    Application configuration loaded from environment variables.
    Uses pydantic for validation and type safety.
    """
    environment: str = "development"
    debug: bool = True
    log_level: str = "INFO"

    database_url: str = "sqlite:///./blogpad.db"

    # Session lifetime in minutes
    session_expire_minutes: int = 10

    # Cookie security settings
    # secure=True enforces HTTPS only - must be True in production
    cookie_name: str = "session_id"
    cookie_secure: bool = False
    cookie_domain: str = "localhost"

    # HTTP-only prevents JavaScript access - always True for security
    cookie_httponly: bool = True
    cookie_samesite: str = "lax"

    # Frontend dev server allowed to send credentialed requests
    cors_origins: list[str] = ["http://localhost:5173"]

    # Editor side
    api_base_url: str = "http://localhost:8000"
    draft_path: str = ".blogpad/blockEditorDraft.json"
    draft_debounce_seconds: float = 1.0

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False)


@lru_cache
def get_settings() -> Settings:
    """
    Cached settings instance. Load once, reuse throughout application lifecycle.
    """
    return Settings()
