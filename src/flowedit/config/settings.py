"""Application settings.

All configuration is sourced from environment variables (and optionally `.env`).
"""

from __future__ import annotations

from functools import lru_cache
from typing import List

from pydantic import Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from ..core.exceptions import ConfigurationError


class Settings(BaseSettings):
    """Typed environment-backed settings for flowedit."""

    model_config = SettingsConfigDict(
        env_prefix="FLOWEDIT_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    log_level: str = "INFO"
    json_logs: bool = False

    # Document export
    document_variant: str = Field(default="reactflow")
    export_filename: str = "flowchart.json"
    default_node_color: str = "#D3D3D3"

    # HTTP host
    host: str = "127.0.0.1"
    port: int = 5050
    cors_origins: str = "http://localhost:5173,http://127.0.0.1:5173"
    rate_limit: str = "120 per minute"

    @field_validator("document_variant")
    @classmethod
    def validate_variant(cls, value: str) -> str:
        normalized = value.strip().lower()
        if normalized not in {"reactflow", "canvas"}:
            raise ValueError(f"document_variant must be 'reactflow' or 'canvas', got '{value}'")
        return normalized

    def cors_origin_list(self) -> List[str]:
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    try:
        return Settings()
    except ValidationError as exc:
        fields = [".".join(str(part) for part in error["loc"]) for error in exc.errors()]
        raise ConfigurationError("Invalid flowedit settings", {"fields": fields}) from exc
