"""Semicolon-delimited report output.

Numbers are rounded half-up on the shortest decimal representation of the
float (``repr``), so ``2.345`` renders as ``2.35`` regardless of how the
binary value sits relative to the midpoint. Dates use ISO 8601 (``YYYY-MM-DD``).
"""
from __future__ import annotations

import csv
import logging
import math
from decimal import ROUND_HALF_UP, Decimal
from typing import Iterable

from .models import REPORT_COLUMNS, EnrichedRecord
from .streams import Stream, as_text, detach

logger = logging.getLogger(__name__)

_CENTS = Decimal("0.01")
_TENTHS = Decimal("0.1")


def _round_half_up(value: float, exponent: Decimal) -> str:
    if not math.isfinite(value):
        raise ValueError(f"cannot format non-finite value {value!r}")
    return str(Decimal(repr(value)).quantize(exponent, rounding=ROUND_HALF_UP))


def format_price(value: float) -> str:
    """Render a currency amount with exactly two decimals."""
    return _round_half_up(value, _CENTS)


def format_category(value: float) -> str:
    """Render a hotel category with exactly one decimal."""
    return _round_half_up(value, _TENTHS)


def format_row(record: EnrichedRecord) -> list[str]:
    return [
        record.room_type_meal,
        record.room_code,
        record.source,
        record.hotel_name,
        record.city_name,
        record.city_code,
        format_category(record.hotel_category),
        str(record.pax),
        str(record.adults),
        str(record.children),
        record.room_name,
        record.checkin.isoformat(),
        record.checkout.isoformat(),
        format_price(record.price),
    ]


class ReportWriter:
    """Streams enriched records into a delimited report."""

    def __init__(self, stream: Stream, *, delimiter: str = ";", encoding: str = "utf-8") -> None:
        self._stream = stream
        self._text = as_text(stream, encoding)
        self._writer = csv.writer(self._text, delimiter=delimiter, lineterminator="\n")
        self.rows_written = 0
        self.rows_failed = 0
        self._closed = False

    def __enter__(self) -> "ReportWriter":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def write_header(self) -> None:
        self._writer.writerow(REPORT_COLUMNS)

    def write(self, record: EnrichedRecord) -> bool:
        """Write one row; a row that cannot be serialised is logged and dropped."""
        try:
            row = format_row(record)
            self._writer.writerow(row)
        except (ArithmeticError, ValueError, OSError, csv.Error) as exc:
            self.rows_failed += 1
            logger.warning(
                "Dropping report row for hotel %s room %s: %s",
                record.hotel_name,
                record.room_code,
                exc,
            )
            return False
        self.rows_written += 1
        return True

    def write_all(self, records: Iterable[EnrichedRecord]) -> int:
        written = 0
        for record in records:
            if self.write(record):
                written += 1
        return written

    def close(self) -> None:
        """Flush buffered output; a flush failure is logged, not raised."""
        if self._closed:
            return
        self._closed = True
        try:
            self._text.flush()
            detach(self._text, self._stream)
            self._stream.flush()
        except OSError as exc:
            logger.error("Failed to flush report output: %s", exc)
