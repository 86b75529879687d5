"""Configuration models for the deadline loader."""

from __future__ import annotations

from enum import Enum
from functools import lru_cache
from typing import Optional

from pydantic import (
    Field,
    NonNegativeFloat,
    PositiveInt,
    SecretStr,
    ValidationError,
    field_validator,
    model_validator,
)
from pydantic_settings import BaseSettings, SettingsConfigDict


class SourceMode(str, Enum):
    LOCAL = "local"
    REMOTE = "remote"
    SAMPLE = "sample"


class DuplicatePolicy(str, Enum):
    """How records sharing a title across files are reconciled."""

    KEEP_FIRST = "keep_first"
    MERGE = "merge"
    ERROR = "error"


class Settings(BaseSettings):
    """Environment-driven configuration for loading conference data."""

    model_config = SettingsConfigDict(
        case_sensitive=False,
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        frozen=True,
        populate_by_name=True,
    )

    source: SourceMode = Field(SourceMode.REMOTE, alias="DEADLINES_SOURCE", description="Data source: local, remote or sample.")
    root_dir: Optional[str] = Field(None, alias="DEADLINES_ROOT_DIR", description="Local root holding category directories.")
    file_extension: str = Field(".yml", alias="DEADLINES_FILE_EXTENSION", description="Suffix of conference data files.")
    github_api_base: str = Field("https://api.github.com", alias="GITHUB_API_BASE", description="GitHub REST API base URL.")
    github_repo_owner: str = Field("ccfddl", alias="GITHUB_REPO_OWNER", description="Owner of the data repository.")
    github_repo_name: str = Field("ccf-deadlines", alias="GITHUB_REPO_NAME", description="Name of the data repository.")
    github_repo_path: str = Field("conference", alias="GITHUB_REPO_PATH", description="Root path inside the repository.")
    github_ref: Optional[str] = Field(None, alias="GITHUB_REF", description="Branch, tag or commit to read.")
    github_token: Optional[SecretStr] = Field(None, alias="GITHUB_TOKEN", description="Optional token for higher rate limits.")
    http_timeout_seconds: PositiveInt = Field(10, alias="HTTP_TIMEOUT_SECONDS", description="Per-request timeout (seconds).")
    http_max_attempts: PositiveInt = Field(3, alias="HTTP_MAX_ATTEMPTS", description="Attempts per request, first try included.")
    http_retry_backoff_seconds: NonNegativeFloat = Field(
        0.5,
        alias="HTTP_RETRY_BACKOFF_SECONDS",
        description="Base delay of the exponential retry backoff.",
    )
    fetch_concurrency: PositiveInt = Field(8, alias="FETCH_CONCURRENCY", description="Concurrent listing/fetch cap (<=64).")
    duplicate_policy: DuplicatePolicy = Field(
        DuplicatePolicy.KEEP_FIRST,
        alias="DUPLICATE_POLICY",
        description="keep_first, merge or error.",
    )
    log_level: str = Field("INFO", alias="LOG_LEVEL", description="Root log level.")
    log_json: bool = Field(False, alias="LOG_JSON", description="Emit logs as JSON lines.")

    @field_validator("source", "duplicate_policy", mode="before")
    @classmethod
    def _lower_enum(cls, value):
        if isinstance(value, str):
            return value.strip().lower()
        return value

    @field_validator("root_dir")
    @classmethod
    def _validate_root_dir(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return None
        root = value.strip()
        return root or None

    @field_validator("file_extension")
    @classmethod
    def _validate_extension(cls, value: str) -> str:
        ext = value.strip()
        if not ext.startswith(".") or len(ext) < 2:
            raise ValueError("DEADLINES_FILE_EXTENSION must look like '.yml'.")
        return ext

    @field_validator("github_api_base")
    @classmethod
    def _validate_api_base(cls, value: str) -> str:
        if "://" not in value:
            raise ValueError("GITHUB_API_BASE must be an absolute URL.")
        return value.rstrip("/")

    @field_validator("github_repo_path")
    @classmethod
    def _strip_repo_path(cls, value: str) -> str:
        return value.strip().strip("/")

    @field_validator("fetch_concurrency")
    @classmethod
    def _validate_concurrency(cls, v: int) -> int:
        if v > 64:
            raise ValueError("FETCH_CONCURRENCY must be 64 or lower.")
        return v

    @model_validator(mode="after")
    def _require_root_for_local(self) -> "Settings":
        if self.source is SourceMode.LOCAL and not self.root_dir:
            raise ValueError("DEADLINES_ROOT_DIR is required when DEADLINES_SOURCE=local.")
        return self

    @property
    def contents_url(self) -> str:
        base = f"{self.github_api_base}/repos/{self.github_repo_owner}/{self.github_repo_name}/contents"
        return f"{base}/{self.github_repo_path}" if self.github_repo_path else base


@lru_cache()
def get_settings() -> Settings:
    """Return a Settings instance built from the environment."""
    try:
        return Settings()
    except ValidationError as exc:
        raise RuntimeError(f"Invalid deadline settings: {exc}") from exc


def reset_settings_cache() -> None:
    """Clear the Settings LRU cache (tests)."""
    get_settings.cache_clear()  # type: ignore[attr-defined]
