"""TOML run profiles layered on top of environment-based settings."""
from __future__ import annotations

import tomllib
from pathlib import Path
from typing import Optional, TYPE_CHECKING

from pydantic import BaseModel, Field, field_validator

if TYPE_CHECKING:  # pragma: no cover
    from booking_enricher.config.settings import Settings


class PathsSection(BaseModel):
    """File locations; relative entries resolve against the profile's directory."""

    input: Optional[str] = None
    output: Optional[str] = None
    hotels: Optional[str] = None
    room_names: Optional[str] = None

    @field_validator("input", "output", "hotels", "room_names", mode="before")
    @classmethod
    def _blank_to_none(cls, value: object) -> object:
        if isinstance(value, str) and not value.strip():
            return None
        return value


class FormatSection(BaseModel):
    """Delimiter and encoding overrides."""

    input_delimiter: Optional[str] = Field(default=None, min_length=1, max_length=1)
    room_names_delimiter: Optional[str] = Field(default=None, min_length=1, max_length=1)
    output_delimiter: Optional[str] = Field(default=None, min_length=1, max_length=1)
    encoding: Optional[str] = None


class LoggingSection(BaseModel):
    level: Optional[str] = None
    directory: Optional[str] = None


class RunConfig(BaseModel):
    """Top-level configuration decoded from TOML."""

    profile: str = Field(default="default", description="Human label used for logging")
    title: Optional[str] = None
    notes: Optional[str] = None
    paths: PathsSection = Field(default_factory=PathsSection)
    format: FormatSection = Field(default_factory=FormatSection)
    logging: LoggingSection = Field(default_factory=LoggingSection)

    @classmethod
    def load(cls, path: Path) -> "RunConfig":
        """Load a config from a TOML file."""
        data = tomllib.loads(path.read_text())
        return cls.model_validate(data)

    # Public API -----------------------------------------------------------------

    def apply_to(self, settings: "Settings", *, base_dir: Optional[Path] = None) -> None:
        """Apply overrides to an existing Settings instance."""
        self._apply_paths(settings, base_dir)
        self._apply_format(settings)
        self._apply_logging(settings, base_dir)

    # Internal helpers -----------------------------------------------------------

    def _apply_paths(self, settings: "Settings", base_dir: Optional[Path]) -> None:
        paths = self.paths
        if paths.input:
            settings.input_path = _resolve_path(paths.input, base_dir)
        if paths.output:
            settings.output_path = _resolve_path(paths.output, base_dir)
        if paths.hotels:
            settings.hotels_path = _resolve_path(paths.hotels, base_dir)
        if paths.room_names:
            settings.room_names_path = _resolve_path(paths.room_names, base_dir)

    def _apply_format(self, settings: "Settings") -> None:
        fmt = self.format
        if fmt.input_delimiter is not None:
            settings.input_delimiter = fmt.input_delimiter
        if fmt.room_names_delimiter is not None:
            settings.room_names_delimiter = fmt.room_names_delimiter
        if fmt.output_delimiter is not None:
            settings.output_delimiter = fmt.output_delimiter
        if fmt.encoding:
            settings.encoding = fmt.encoding

    def _apply_logging(self, settings: "Settings", base_dir: Optional[Path]) -> None:
        if self.logging.level:
            settings.log_level = self.logging.level
        if self.logging.directory:
            settings.log_dir = _resolve_path(self.logging.directory, base_dir)


def _resolve_path(raw: str, base_dir: Optional[Path]) -> Path:
    path = Path(raw).expanduser()
    if not path.is_absolute() and base_dir:
        return (base_dir / path).resolve()
    return path


__all__ = ["RunConfig"]
