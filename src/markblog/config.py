"""Application configuration."""

from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    posts_dir: Path = Path("posts")
    debug: bool = False
    site_title: str = "markblog"
    site_description: str = ""
    default_date: str = "2024-01-01"
    highlight_style: str = "default"
    guess_language: bool = True
    log_level: str = "INFO"

    model_config = SettingsConfigDict(
        env_prefix="MARKBLOG_",
        env_file=".env",
        env_file_encoding="utf-8",
    )


settings = Settings()
