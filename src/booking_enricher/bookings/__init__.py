"""Booking domain models, loaders and the enrichment join."""

from .enrichment import EnrichmentStats, enrich_booking, enrich_bookings
from .errors import EnricherError, InputOpenError, RecordError
from .models import BookingRecord, EnrichedRecord, HotelRef, RoomKey
from .parser import parse_booking, read_bookings
from .references import load_hotels, load_room_names
from .report import ReportWriter, format_category, format_price

__all__ = [
    "BookingRecord",
    "EnrichedRecord",
    "EnricherError",
    "EnrichmentStats",
    "HotelRef",
    "InputOpenError",
    "RecordError",
    "ReportWriter",
    "RoomKey",
    "enrich_booking",
    "enrich_bookings",
    "format_category",
    "format_price",
    "load_hotels",
    "load_room_names",
    "parse_booking",
    "read_bookings",
]
