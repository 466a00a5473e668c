"""
Configuration for the directory resolution API.

Settings come from `DIRECTORY_*` environment variables or a `.env` file,
validated by pydantic-settings. The alias tables used during resolution are
code, not configuration: see `field_aliases.py`.
"""

import re
from functools import lru_cache
from pathlib import Path
from typing import List

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .db_connection import DEFAULT_DB_PATH

#document store ids are 20 character alphanumerics, some imports produced up to 28
DEFAULT_RAW_ID_PATTERN = r"^[A-Za-z0-9]{20,28}$"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="DIRECTORY_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    db_path: Path = Field(
        default=DEFAULT_DB_PATH,
        description="SQLite file holding the document collections",
    )
    log_level: str = Field(default="INFO", description="Root log level")
    log_colours: bool = Field(default=True, description="Colour level names on stderr")
    cors_origins: List[str] = Field(
        default=["http://127.0.0.1:3000", "http://localhost:3000"],
        description="Front end origins allowed to call the API",
    )
    raw_id_pattern: str = Field(
        default=DEFAULT_RAW_ID_PATTERN,
        description="Identifiers matching this are treated as legacy storage ids",
    )
    slug_index: bool = Field(
        default=True,
        description="Serve generated-slug lookups from a cached per-collection index",
    )
    slug_index_cache_size: int = Field(
        default=64,
        ge=1,
        description="Most slug indexes kept in memory at once",
    )
    base_url: str = Field(
        default="https://www.admissionglobal.com",
        description="Public site root, used for absolute redirect locations",
    )

    @field_validator("log_level", mode="before")
    @classmethod
    def upper_level(cls, v: str) -> str:
        return v.strip().upper() if isinstance(v, str) else v

    @field_validator("raw_id_pattern")
    @classmethod
    def compiles(cls, v: str) -> str:
        try:
            re.compile(v)
        except re.error as e:
            raise ValueError(f"raw_id_pattern is not a valid regex: {e}") from e
        return v

    @field_validator("base_url")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        return v.rstrip("/")


@lru_cache
def get_settings() -> Settings:
    """Settings are read once per process."""
    return Settings()
