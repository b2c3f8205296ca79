from functools import lru_cache
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings


def get_project_root() -> Path:
    current_path = Path(__file__).parent
    while current_path != current_path.parent:
        if (current_path / "pyproject.toml").exists():
            return current_path
        current_path = current_path.parent
    return Path(".")


class Settings(BaseSettings):
    # Application Settings
    APP_NAME: str = Field(default="Image Hosting Service")
    DEBUG: bool = Field(default=False)
    HOST: str = Field(default="0.0.0.0")
    PORT: int = Field(default=8000)

    # CORS Settings
    ALLOWED_ORIGINS: list[str] = Field(default=["http://localhost:3000"])

    # DB Settings
    DATABASE_URL: str = Field(default="sqlite:///./storage/databases/images.db")

    # Storage Settings
    IMAGES_DIR: str = Field(default="./storage/images")
    PUBLIC_BASE_URL: str = Field(default="http://localhost:8000")
    SITE_URL: str = Field(default="http://localhost:8000")

    # Upload Settings
    MAX_FILE_SIZE: int = Field(default=10 * 1024 * 1024)  # 10MB
    ID_LENGTH: int = Field(default=6)
    ID_MAX_ATTEMPTS: int = Field(default=10)
    UPLOAD_RACE_RETRIES: int = Field(default=3)
    CACHE_MAX_AGE: int = Field(default=31536000)  # 1 year

    # Session Settings
    SESSION_COOKIE_NAME: str = Field(default="session")
    SESSION_TTL_SECONDS: int = Field(default=7 * 24 * 3600)
    COOKIE_SECURE: bool = Field(default=False)

    # OAuth Provider Settings
    OAUTH_CLIENT_ID: str = Field(default="")
    OAUTH_CLIENT_SECRET: str = Field(default="")
    OAUTH_AUTHORIZE_URL: str = Field(
        default="https://accounts.google.com/o/oauth2/v2/auth"
    )
    OAUTH_TOKEN_URL: str = Field(default="https://oauth2.googleapis.com/token")
    OAUTH_USERINFO_URL: str = Field(
        default="https://openidconnect.googleapis.com/v1/userinfo"
    )
    OAUTH_SCOPES: list[str] = Field(default=["openid", "email", "profile"])

    # Logging Settings
    LOG_LEVEL: str = Field(default="INFO")
    LOG_FILE: str = Field(default="./logs/image_hosting.log")

    model_config = {
        "env_file": get_project_root() / ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": True,
        "extra": "ignore",
    }

    @property
    def absolute_database_url(self) -> str:
        """Get absolute database URL based on project root."""
        if self.DATABASE_URL.startswith("sqlite:///./"):
            relative_path = self.DATABASE_URL.replace("sqlite:///./", "")
            absolute_path = get_project_root() / relative_path
            return f"sqlite:///{absolute_path}"
        return self.DATABASE_URL

    @property
    def absolute_images_dir(self) -> str:
        """Get absolute path for stored images directory."""
        return str(get_project_root() / self.IMAGES_DIR)

    @property
    def absolute_log_file(self) -> str:
        return str(get_project_root() / self.LOG_FILE)

    @property
    def max_file_size_mb(self) -> int:
        return self.MAX_FILE_SIZE // (1024 * 1024)


@lru_cache()
def get_settings() -> Settings:
    return Settings()
