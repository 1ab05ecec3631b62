"""Parse the pipe-delimited booking feed into typed records."""
from __future__ import annotations

import csv
import logging
import re
from datetime import date, datetime
from typing import Iterator, Mapping, Optional

from .errors import RecordError
from .models import BookingRecord
from .streams import Stream, as_lenient_text, detach, is_undecodable

logger = logging.getLogger(__name__)

BOOKING_COLUMNS: tuple[str, ...] = (
    "city_code",
    "hotel_code",
    "room_type",
    "room_code",
    "meal",
    "checkin",
    "adults",
    "children",
    "price",
    "source",
)

CHECKIN_FORMAT = "%Y%m%d"
_COUNT = re.compile(r"\d+", re.ASCII)
_DECIMAL = re.compile(r"-?(?:\d+(?:\.\d*)?|\.\d+)", re.ASCII)


def _parse_checkin(value: str) -> date:
    text = value.strip()
    if len(text) != 8 or not _COUNT.fullmatch(text):
        raise ValueError(f"invalid checkin '{value}' (expected YYYYMMDD)")
    try:
        return datetime.strptime(text, CHECKIN_FORMAT).date()
    except ValueError as exc:
        raise ValueError(f"invalid checkin '{value}' (expected YYYYMMDD)") from exc


def _parse_count(name: str, value: str) -> int:
    text = value.strip()
    if not _COUNT.fullmatch(text):
        raise ValueError(f"invalid {name} '{value}' (expected a non-negative integer)")
    return int(text)


def _parse_price(value: str) -> float:
    text = value.strip()
    if not _DECIMAL.fullmatch(text):
        raise ValueError(f"invalid price '{value}' (expected a decimal amount)")
    return float(text)


def parse_booking(row: Mapping[Optional[str], object], *, line: Optional[int] = None) -> BookingRecord:
    """Convert one ``csv.DictReader`` row into a :class:`BookingRecord`.

    Rows with extra trailing fields (collected under the ``None`` key) or
    missing fields (``None`` values) are rejected as structurally invalid.
    """
    if None in row:
        raise RecordError("too many fields", line=line)
    missing = [name for name in BOOKING_COLUMNS if row.get(name) is None]
    if missing:
        raise RecordError(f"missing fields: {', '.join(missing)}", line=line)
    values = {name: str(row[name]) for name in BOOKING_COLUMNS}
    if any(is_undecodable(value) for value in values.values()):
        raise RecordError("undecodable bytes in line", line=line)
    try:
        return BookingRecord(
            city_code=values["city_code"],
            hotel_code=values["hotel_code"],
            room_type=values["room_type"],
            room_code=values["room_code"],
            meal=values["meal"],
            checkin=_parse_checkin(values["checkin"]),
            adults=_parse_count("adults", values["adults"]),
            children=_parse_count("children", values["children"]),
            price=_parse_price(values["price"]),
            source=values["source"],
        )
    except ValueError as exc:
        raise RecordError(str(exc), line=line) from exc


def read_bookings(stream: Stream, *, delimiter: str = "|", encoding: str = "utf-8") -> Iterator[BookingRecord]:
    """Yield bookings from *stream* one at a time, dropping malformed rows.

    The first line is the header. Output order follows input order.
    """
    text = as_lenient_text(stream, encoding)
    try:
        reader = csv.DictReader(text, delimiter=delimiter)
        header = reader.fieldnames or []
        absent = [name for name in BOOKING_COLUMNS if name not in header]
        if absent:
            logger.error("Booking header is missing columns: %s", ", ".join(absent))
            return
        while True:
            try:
                row = next(reader)
            except StopIteration:
                break
            except csv.Error as exc:
                logger.warning("Ignoring invalid booking line %s: %s", reader.line_num, exc)
                continue
            try:
                record = parse_booking(row, line=reader.line_num)
            except RecordError as exc:
                logger.warning("Ignoring invalid booking %s", exc)
                continue
            yield record
    finally:
        detach(text, stream)
