"""Helpers for treating binary or text streams uniformly."""
from __future__ import annotations

import io
import re
from typing import IO, Union

Stream = Union[IO[bytes], IO[str]]

# surrogateescape maps each undecodable byte to U+DC80..U+DCFF
_ESCAPED_BYTES = re.compile("[\udc80-\udcff]")


def as_text(stream: Stream, encoding: str = "utf-8", errors: str = "strict") -> IO[str]:
    """Return a text view of *stream*; csv wants ``newline=""`` on the wrapper."""
    if isinstance(stream, io.TextIOBase):
        return stream
    return io.TextIOWrapper(stream, encoding=encoding, errors=errors, newline="")


def as_lenient_text(stream: Stream, encoding: str = "utf-8") -> IO[str]:
    """Text view that never raises on bad bytes; check lines with :func:`is_undecodable`."""
    return as_text(stream, encoding, errors="surrogateescape")


def is_undecodable(text: str) -> bool:
    """True when *text* carries bytes that were not valid in the stream's encoding."""
    return _ESCAPED_BYTES.search(text) is not None


def detach(text: IO[str], stream: Stream) -> None:
    """Release a wrapper created by :func:`as_text` without closing *stream*."""
    if text is not stream and isinstance(text, io.TextIOWrapper):
        text.detach()
