from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict


def choose_env_file() -> str:
    return ".env.local" if Path(".env.local").exists() else ".env"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=choose_env_file(),
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",  # tolerate unrelated env vars
    )

    # CouchDB
    COUCHDB_HOST: str = "localhost"
    COUCHDB_PORT: int = 5984
    COUCHDB_USERNAME: str = "admin"
    COUCHDB_PASSWORD: str = ""
    COUCHDB_DATABASE: str = "blog_db"

    # Public base URL, used to build media links
    BLOG_API_URL: str = "http://localhost:8000"

    # Logging
    LOG_LEVEL: str = "INFO"

    # Shared key the identity gateway sends alongside caller headers
    BLOG_API_KEY: str = ""

    # Media
    MEDIA_FOLDER: str = "blog-images"
    MEDIA_MAX_BYTES: int = 5 * 1024 * 1024

    # Slugs
    SLUG_MAX_LENGTH: int = 80

    @property
    def couchdb_url(self) -> str:
        return f"http://{self.COUCHDB_USERNAME}:{self.COUCHDB_PASSWORD}@{self.COUCHDB_HOST}:{self.COUCHDB_PORT}"


# Global settings instance (evaluated at import, but reads env on construction)
settings = Settings()
