"""End-to-end enrichment run: load references, stream bookings, write the report."""
from __future__ import annotations

import logging
from contextlib import ExitStack
from dataclasses import dataclass
from pathlib import Path
from typing import IO

from booking_enricher.bookings import (
    EnrichmentStats,
    InputOpenError,
    ReportWriter,
    enrich_bookings,
    load_hotels,
    load_room_names,
    read_bookings,
)
from booking_enricher.bookings.streams import Stream
from booking_enricher.config.settings import Settings

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class RunSummary:
    """Counts describing a finished run."""

    hotels_loaded: int = 0
    room_names_loaded: int = 0
    bookings_read: int = 0
    bookings_skipped: int = 0
    rows_written: int = 0
    rows_failed: int = 0


def enrich_streams(
    bookings: Stream,
    hotels: Stream,
    room_names: Stream,
    report: Stream,
    *,
    input_delimiter: str = "|",
    room_names_delimiter: str = "|",
    output_delimiter: str = ";",
    encoding: str = "utf-8",
) -> RunSummary:
    """Run the enrichment over already-open streams.

    Both reference tables are fully loaded before the first booking is read.
    """
    hotel_map = load_hotels(hotels, encoding=encoding)
    room_map = load_room_names(room_names, delimiter=room_names_delimiter, encoding=encoding)

    stats = EnrichmentStats()
    records = read_bookings(bookings, delimiter=input_delimiter, encoding=encoding)
    with ReportWriter(report, delimiter=output_delimiter, encoding=encoding) as writer:
        writer.write_header()
        writer.write_all(enrich_bookings(records, hotel_map, room_map, stats=stats))

    summary = RunSummary(
        hotels_loaded=len(hotel_map),
        room_names_loaded=len(room_map),
        bookings_read=stats.read,
        bookings_skipped=stats.skipped,
        rows_written=writer.rows_written,
        rows_failed=writer.rows_failed,
    )
    logger.info(
        "Enrichment finished: %s bookings read, %s skipped, %s rows written, %s rows dropped",
        summary.bookings_read,
        summary.bookings_skipped,
        summary.rows_written,
        summary.rows_failed,
    )
    return summary


def _open(stack: ExitStack, role: str, path: Path, mode: str) -> IO[bytes]:
    try:
        return stack.enter_context(open(path, mode))
    except OSError as exc:
        raise InputOpenError(role, path, exc.strerror or str(exc)) from exc


def _open_report(stack: ExitStack, path: Path) -> IO[bytes]:
    try:
        report = open(path, "wb")
    except OSError as exc:
        raise InputOpenError("output", path, exc.strerror or str(exc)) from exc
    stack.callback(_close_report, report, path)
    return report


def _close_report(report: IO[bytes], path: Path) -> None:
    try:
        report.close()
    except OSError as exc:
        logger.error("Failed to close report %s: %s", path, exc)


def run(settings: Settings) -> RunSummary:
    """Open the configured files and enrich the booking feed.

    Raises :class:`InputOpenError` before any processing if a file cannot be
    opened or created.
    """
    with ExitStack() as stack:
        hotels = _open(stack, "hotels", settings.hotels_path, "rb")
        room_names = _open(stack, "room names", settings.room_names_path, "rb")
        bookings = _open(stack, "input", settings.input_path, "rb")
        report = _open_report(stack, settings.output_path)
        logger.info(
            "Enriching %s with %s and %s into %s",
            settings.input_path,
            settings.hotels_path,
            settings.room_names_path,
            settings.output_path,
        )
        return enrich_streams(
            bookings,
            hotels,
            room_names,
            report,
            input_delimiter=settings.input_delimiter,
            room_names_delimiter=settings.room_names_delimiter,
            output_delimiter=settings.output_delimiter,
            encoding=settings.encoding,
        )
