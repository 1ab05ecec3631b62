"""Runtime configuration for the enricher.

Relies on pydantic-settings so that environment variables (prefixed with ``ENRICHER_``)
can override defaults.
"""
from __future__ import annotations

from pathlib import Path
from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Captures runtime configuration for one enrichment run."""

    input_path: Path = Field(default=Path("input.csv"), description="Pipe-delimited booking feed")
    output_path: Path = Field(default=Path("output.csv"), description="Report destination")
    hotels_path: Path = Field(default=Path("hotels.json"), description="Newline-delimited JSON hotel data")
    room_names_path: Path = Field(
        default=Path("room_names.csv"), description="Header-less pipe-delimited room names"
    )

    input_delimiter: str = Field(default="|")
    room_names_delimiter: str = Field(default="|")
    output_delimiter: str = Field(default=";")
    encoding: str = Field(default="utf-8")

    log_level: str = Field(default="INFO")
    log_dir: Optional[Path] = Field(
        default=None, description="Also write diagnostics to <log_dir>/enricher.log when set"
    )

    model_config = SettingsConfigDict(
        env_prefix="ENRICHER_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        validate_assignment=True,
    )

    @field_validator("input_path", "output_path", "hotels_path", "room_names_path", mode="before")
    @classmethod
    def _expand_path(cls, value: str | Path) -> Path:
        if isinstance(value, Path):
            return value.expanduser()
        return Path(value).expanduser()

    @field_validator("log_dir", mode="before")
    @classmethod
    def _expand_log_dir(cls, value: str | Path | None) -> Optional[Path]:
        if value in (None, ""):
            return None
        return Path(value).expanduser()

    @field_validator("input_delimiter", "room_names_delimiter", "output_delimiter")
    @classmethod
    def _validate_delimiter(cls, value: str) -> str:
        if len(value) != 1:
            raise ValueError("delimiters must be a single character")
        return value
