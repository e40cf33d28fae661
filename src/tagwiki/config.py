"""Application configuration."""

from pathlib import Path
from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    data_dir: Path = Path("data")
    page_extension: str = ".md"
    tag_match: Literal["substring", "token"] = "substring"
    incremental_index: bool = False
    static_dir: Path | None = None
    cors_origins: list[str] = ["*"]
    log_level: str = "INFO"
    host: str = "127.0.0.1"
    port: int = 3000
    debug: bool = False
    app_title: str = "TagWiki"

    model_config = SettingsConfigDict(
        env_prefix="TAGWIKI_",
        env_file=".env",
        env_file_encoding="utf-8",
    )


settings = Settings()
