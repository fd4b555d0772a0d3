from __future__ import annotations

from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_ASSETS_DIR = Path(__file__).resolve().parent / "assets"
DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/58.0.3029.110 Safari/537.3"
)


class Settings(BaseSettings):
    """Application configuration settings."""

    cinemeta_url: str = Field(
        default="https://v3-cinemeta.strem.io", validation_alias="CINEMETA_URL"
    )
    cinemeta_catalog_url: str = Field(
        default="https://cinemeta-catalogs.strem.io",
        validation_alias="CINEMETA_CATALOG_URL",
    )
    search_url: str = Field(
        default="https://www.google.com/search", validation_alias="RATINGS_SEARCH_URL"
    )
    ratings_selector: str = Field(
        default="div.Ap5OSd", validation_alias="RATINGS_SELECTOR"
    )
    user_agent: str = Field(
        default=DEFAULT_USER_AGENT, validation_alias="RATINGS_USER_AGENT"
    )
    request_timeout: float = Field(default=10.0, validation_alias="REQUEST_TIMEOUT")
    max_concurrency: int = Field(default=0, validation_alias="MAX_CONCURRENCY")
    assets_dir: Path = Field(default=DEFAULT_ASSETS_DIR, validation_alias="ASSETS_DIR")
    font_path: Path | None = Field(default=None, validation_alias="FONT_PATH")
    font_size: int = Field(default=28, validation_alias="FONT_SIZE")
    host: str = Field(default="0.0.0.0", validation_alias="HOST")
    port: int = Field(default=7000, validation_alias="PORT")

    @field_validator("cinemeta_url", "cinemeta_catalog_url", "search_url")
    @classmethod
    def _strip_trailing_slash(cls, value: str) -> str:
        return value.rstrip("/")

    @field_validator("max_concurrency")
    @classmethod
    def _check_concurrency(cls, value: int) -> int:
        if value < 0:
            raise ValueError("MAX_CONCURRENCY must not be negative")
        return value

    @field_validator("request_timeout")
    @classmethod
    def _check_timeout(cls, value: float) -> float:
        if value <= 0:
            raise ValueError("REQUEST_TIMEOUT must be positive")
        return value

    @field_validator("font_size")
    @classmethod
    def _check_font_size(cls, value: int) -> int:
        if value <= 0:
            raise ValueError("FONT_SIZE must be positive")
        return value

    model_config = SettingsConfigDict(case_sensitive=False)
