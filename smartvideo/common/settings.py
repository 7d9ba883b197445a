# smartvideo/common/settings.py
from __future__ import annotations

from functools import lru_cache
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from smartvideo.common.strings.splitters import csv_to_list


def _to_bool(v: str | bool | int | None, default: bool = False) -> bool:
    if isinstance(v, bool):
        return v
    if v is None:
        return default
    s = str(v).strip().lower()
    return s in {"1", "true", "yes", "y", "on"}


class APIConfig(BaseModel):
    host: str = "0.0.0.0"
    port: int = 8000
    prefix: str = "/api"

    cors_allow_origins: List[str] = Field(default_factory=lambda: ["http://localhost:5173"])
    cors_allow_methods: List[str] = Field(default_factory=lambda: ["GET", "POST", "OPTIONS"])
    cors_allow_headers: List[str] = Field(default_factory=lambda: ["*"])
    cors_allow_credentials: bool = False

    @field_validator("cors_allow_origins", "cors_allow_methods", "cors_allow_headers", mode="before")
    @classmethod
    def _split_csv(cls, v):
        return csv_to_list(v)


class ConcurrencyConfig(BaseModel):
    request_workers: int = Field(4, ge=1, le=64)
    thread_queue_maxsize: int = 64
    # 0 = process batch items one after another on the request worker
    batch_fanout_workers: int = Field(0, ge=0, le=32)
    cancel_on_exit: bool = True

    @field_validator("cancel_on_exit", mode="before")
    @classmethod
    def _boolify(cls, v):
        return _to_bool(v, default=True)


class FFProbeConfig(BaseModel):
    bin: str = "ffprobe"
    log_level: str = "error"  # quiet|panic|fatal|error|warning|info|verbose|debug|trace
    # local files are probed without an upper bound unless this is set
    timeout_sec: Optional[int] = Field(None, ge=1)


class RemoteSourceConfig(BaseModel):
    load_timeout_sec: int = Field(10, ge=1, le=600)
    allowed_schemes: List[str] = Field(default_factory=lambda: ["http", "https"])

    @field_validator("allowed_schemes", mode="before")
    @classmethod
    def _split_csv(cls, v):
        return csv_to_list(v, lower=True)


class Settings(BaseSettings):
    # -------- App / Env --------
    app_name: str = "smartvideo"
    app_env: str = "development"  # development|test|staging|production
    log_level: str = "INFO"

    # -------- Sub-configs --------
    api: APIConfig = APIConfig()
    concurrency: ConcurrencyConfig = ConcurrencyConfig()
    ffprobe: FFProbeConfig = FFProbeConfig()
    remote: RemoteSourceConfig = RemoteSourceConfig()

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        case_sensitive=False,
        extra="ignore",
    )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """
    Global settings accessor (cached). Use this everywhere you need config:
        from smartvideo.common.settings import get_settings
        cfg = get_settings()
    Nested values come from e.g. FFPROBE__BIN or REMOTE__LOAD_TIMEOUT_SEC.
    """
    return Settings()  # pydantic_settings will read from .env automatically
