"""Join bookings with the reference tables and derive report fields."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import timedelta
from typing import Iterable, Iterator, Mapping, Optional

from .models import BookingRecord, EnrichedRecord, HotelRef, RoomKey

logger = logging.getLogger(__name__)

STAY_LENGTH = timedelta(days=1)


@dataclass(slots=True)
class EnrichmentStats:
    """Counters collected while enriching a booking stream."""

    read: int = 0
    enriched: int = 0
    hotel_misses: int = 0
    room_misses: int = 0
    empty_bookings: int = 0

    @property
    def skipped(self) -> int:
        return self.hotel_misses + self.room_misses + self.empty_bookings


def enrich_booking(
    record: BookingRecord,
    hotels: Mapping[str, HotelRef],
    room_names: Mapping[RoomKey, str],
    *,
    stats: Optional[EnrichmentStats] = None,
) -> Optional[EnrichedRecord]:
    """Return the enriched row for *record*, or ``None`` when it must be skipped.

    The hotel is looked up first; on a miss the room table is not consulted,
    so only one diagnostic is logged per skipped booking.
    """
    hotel = hotels.get(record.hotel_code)
    if hotel is None:
        logger.warning("Skipping booking: hotel %s not found", record.hotel_code)
        if stats is not None:
            stats.hotel_misses += 1
        return None

    key = RoomKey(record.hotel_code, record.source, record.room_code)
    room_name = room_names.get(key)
    if room_name is None:
        logger.warning(
            "Skipping booking: room name not found for hotel %s, source %s, room %s",
            record.hotel_code,
            record.source,
            record.room_code,
        )
        if stats is not None:
            stats.room_misses += 1
        return None

    pax = record.pax
    if pax == 0:
        logger.warning(
            "Skipping booking for hotel %s room %s: no adults or children",
            record.hotel_code,
            record.room_code,
        )
        if stats is not None:
            stats.empty_bookings += 1
        return None

    if stats is not None:
        stats.enriched += 1
    return EnrichedRecord(
        room_type_meal=f"{record.room_type} {record.meal}",
        room_code=record.room_code,
        source=record.source,
        hotel_name=hotel.name,
        city_name=hotel.city,
        city_code=record.city_code,
        hotel_category=hotel.category,
        pax=pax,
        adults=record.adults,
        children=record.children,
        room_name=room_name,
        checkin=record.checkin,
        checkout=record.checkin + STAY_LENGTH,
        price=record.price / pax,
    )


def enrich_bookings(
    records: Iterable[BookingRecord],
    hotels: Mapping[str, HotelRef],
    room_names: Mapping[RoomKey, str],
    *,
    stats: Optional[EnrichmentStats] = None,
) -> Iterator[EnrichedRecord]:
    """Lazily enrich *records* in order, dropping the ones that cannot be joined."""
    for record in records:
        if stats is not None:
            stats.read += 1
        enriched = enrich_booking(record, hotels, room_names, stats=stats)
        if enriched is not None:
            yield enriched
