"""Application settings and configuration"""

from pathlib import Path

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment variables"""

    # Application
    APP_NAME: str = "StarLens"
    APP_VERSION: str = "1.0.0"
    DEBUG: bool = False
    USER_AGENT: str = "StarLens/1.0"

    # GitHub API
    GITHUB_API_BASE_URL: str = "https://api.github.com"
    GITHUB_API_VERSION: str = "2022-11-28"
    GITHUB_TIMEOUT_SECONDS: float = 30.0

    # Starred repositories endpoint. One page matches the shipped behavior;
    # raise STARRED_MAX_PAGES to follow `Link: rel="next"` headers.
    STARRED_PER_PAGE: int = 100
    STARRED_MAX_PAGES: int = 1

    # Notifications
    NOTIFICATION_TTL_MS: int = 3000

    # Theme preference
    THEME_STORE_PATH: Path = Path.home() / ".starlens" / "theme"
    DEFAULT_THEME: str = "dark"

    # Routing
    BASE_PATH: str = "/"

    class Config:
        env_file = ".env"
        case_sensitive = True
        extra = "ignore"  # Ignore extra fields in .env


settings = Settings()
