"""Exceptions raised by the booking enrichment pipeline."""
from __future__ import annotations

from pathlib import Path
from typing import Optional


class EnricherError(Exception):
    """Base class for enrichment failures."""


class InputOpenError(EnricherError):
    """Raised when one of the configured files cannot be opened or created."""

    def __init__(self, role: str, path: Path, reason: str) -> None:
        super().__init__(f"Cannot open {role} file {path}: {reason}")
        self.role = role
        self.path = path


class RecordError(EnricherError):
    """A single input row could not be converted into a typed record."""

    def __init__(self, message: str, *, line: Optional[int] = None) -> None:
        prefix = f"line {line}: " if line is not None else ""
        super().__init__(f"{prefix}{message}")
        self.line = line
