"""Loaders for the hotel and room-name reference tables."""
from __future__ import annotations

import csv
import logging
from types import MappingProxyType
from typing import Mapping

from pydantic import ValidationError

from .models import HotelRef, RoomKey
from .streams import Stream, as_lenient_text, detach, is_undecodable

logger = logging.getLogger(__name__)

ROOM_NAME_FIELDS = 4


def _describe(exc: ValidationError) -> str:
    parts = []
    for error in exc.errors():
        location = ".".join(str(item) for item in error.get("loc", ())) or "line"
        parts.append(f"{location}: {error.get('msg')}")
    return "; ".join(parts)


def load_hotels(stream: Stream, *, encoding: str = "utf-8") -> Mapping[str, HotelRef]:
    """Read newline-delimited JSON hotel entries into an ``id -> HotelRef`` map.

    Each line is validated on its own; bad lines are logged and dropped. A
    repeated id replaces the earlier entry. The returned mapping is read-only.
    """
    hotels: dict[str, HotelRef] = {}
    text = as_lenient_text(stream, encoding)
    try:
        for number, raw in enumerate(text, start=1):
            line = raw.strip()
            if not line:
                continue
            if is_undecodable(line):
                logger.warning("Ignoring hotel line %s %r: undecodable bytes", number, line)
                continue
            try:
                hotel = HotelRef.model_validate_json(line)
            except ValidationError as exc:
                logger.warning(
                    "Ignoring invalid hotel line %s %r: %s",
                    number,
                    line,
                    _describe(exc),
                )
                continue
            hotels[hotel.id] = hotel
    finally:
        detach(text, stream)
    logger.info("Loaded %s hotels", len(hotels))
    return MappingProxyType(hotels)


def load_room_names(
    stream: Stream, *, delimiter: str = "|", encoding: str = "utf-8"
) -> Mapping[RoomKey, str]:
    """Read header-less ``hotel_code|source|room_name|room_code`` rows.

    Keyed by :class:`RoomKey`; later rows overwrite earlier ones.
    """
    room_names: dict[RoomKey, str] = {}
    text = as_lenient_text(stream, encoding)
    try:
        reader = csv.reader(text, delimiter=delimiter)
        while True:
            try:
                row = next(reader)
            except StopIteration:
                break
            except csv.Error as exc:
                logger.warning("Ignoring invalid room name line %s: %s", reader.line_num, exc)
                continue
            if not row:
                continue
            if any(is_undecodable(field) for field in row):
                logger.warning(
                    "Ignoring room name line %s %r: undecodable bytes",
                    reader.line_num,
                    delimiter.join(row),
                )
                continue
            if len(row) != ROOM_NAME_FIELDS:
                logger.warning(
                    "Ignoring invalid room name line %s %r: expected %s fields, got %s",
                    reader.line_num,
                    delimiter.join(row),
                    ROOM_NAME_FIELDS,
                    len(row),
                )
                continue
            hotel_code, source, room_name, room_code = row
            room_names[RoomKey(hotel_code, source, room_code)] = room_name
    finally:
        detach(text, stream)
    logger.info("Loaded %s room names", len(room_names))
    return MappingProxyType(room_names)
