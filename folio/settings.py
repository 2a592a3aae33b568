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

    # Content
    CONTENT_DIR: str = "content/posts"
    DOCUMENT_SEPARATOR_PATTERN: str = r"<\|RELATED_DOC_SEP.*?\|>"
    WORDS_PER_MINUTE: int = 200
    DATE_MISMATCH_TOLERANCE_DAYS: int = 3
    LOAD_WORKERS: int = 1

    # Logging
    LOG_LEVEL: str = "INFO"

    # Our own API Key
    FOLIO_API_KEY: str = ""

    @property
    def content_path(self) -> Path:
        return Path(self.CONTENT_DIR)


# Global settings instance (evaluated at import, but reads env on construction)
settings = Settings()
