"""Application configuration and settings management."""

from typing import Any, Literal, Optional

import json
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Runtime configuration loaded from environment variables or defaults."""

    model_config = SettingsConfigDict(
        env_prefix="WASTEROUTE_",
        case_sensitive=False,
        env_file=".env",
        env_file_encoding="utf-8",
    )

    app_name: str = "Waste Collection Route Planner API"
    api_prefix: str = "/api"
    log_level: str = Field(default="INFO", description="Root log level applied by create_app().")

    geocoder_base_url: str = Field(
        default="https://nominatim.openstreetmap.org",
        description="Base URL of a Nominatim-compatible geocoding service.",
    )
    geocoder_user_agent: str = Field(
        default="wasteroute/0.1 (collection route planner)",
        description="User-Agent sent with geocoding requests (required by Nominatim usage policy).",
    )
    geocoder_timeout_seconds: float = Field(default=10.0, gt=0.0)
    geocode_region_suffix: str = Field(
        default=", Tharaka Nithi County, Kenya",
        description="Appended to every location name before geocoding to disambiguate the query.",
    )
    geocode_max_parallel_requests: int = Field(default=4, ge=1)
    geocode_cache_max_entries: Optional[int] = Field(
        default=None,
        ge=1,
        description="Upper bound on cached geocode entries. None keeps every entry.",
    )
    geocode_cache_ttl_seconds: Optional[float] = Field(
        default=None,
        gt=0.0,
        description="Lifetime of a cached geocode entry. None means entries never expire.",
    )

    origin_timeout_seconds: float = Field(default=10.0, gt=0.0)
    origin_max_age_seconds: float = Field(default=60.0, ge=0.0)
    base_latitude: Optional[float] = Field(default=None, ge=-90.0, le=90.0)
    base_longitude: Optional[float] = Field(default=None, ge=-180.0, le=180.0)

    reports_api_base_url: Optional[str] = Field(
        default=None,
        description="Base URL of the reports backend (e.g., http://localhost:3000).",
    )
    reports_api_token: Optional[str] = Field(default=None, description="Bearer token for the reports backend.")
    reports_api_timeout_seconds: float = Field(default=15.0, gt=0.0)

    optimizer_strategy: Literal["nearest_neighbor", "exhaustive"] = Field(
        default="nearest_neighbor",
        description="Stop ordering strategy used by the planning session.",
    )
    exhaustive_max_stops: int = Field(default=8, ge=1, le=10)

    urgent_fill_level: int = Field(default=80, ge=0, le=100)
    warning_fill_level: int = Field(default=50, ge=0, le=100)

    navigation_base_url: str = "https://www.google.com/maps/dir/"

    frontend_allowed_origins: tuple[str, ...] = Field(
        default=(
            "http://localhost:5173",
            "http://127.0.0.1:5173",
            "http://localhost:8080",
            "http://127.0.0.1:8080",
        ),
        description="Permitted web origins for browser clients (CORS).",
    )

    @field_validator("frontend_allowed_origins", mode="before")
    @classmethod
    def _parse_str_tuple_from_env(cls, value: Any) -> tuple[str, ...]:
        """Parse string tuple from environment variable (comma-separated or JSON array)."""
        if isinstance(value, tuple):
            return value
        if isinstance(value, list):
            return tuple(str(item) for item in value)
        if isinstance(value, str):
            try:
                parsed = json.loads(value)
                if isinstance(parsed, list):
                    return tuple(str(item) for item in parsed)
            except (json.JSONDecodeError, TypeError):
                pass
            if "," in value:
                return tuple(item.strip() for item in value.split(",") if item.strip())
            if value.strip():
                return (value.strip(),)
        return tuple()

    @field_validator("reports_api_base_url", "geocoder_base_url", mode="after")
    @classmethod
    def _strip_trailing_slash(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return None
        return value.rstrip("/")


settings = Settings()
