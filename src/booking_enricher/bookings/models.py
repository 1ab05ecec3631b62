"""Dataclasses for booking records, reference data and report rows."""
from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import NamedTuple

from pydantic import BaseModel, ConfigDict

REPORT_COLUMNS: tuple[str, ...] = (
    "room_type meal",
    "room_code",
    "source",
    "hotel_name",
    "city_name",
    "city_code",
    "hotel_category",
    "pax",
    "adults",
    "children",
    "room_name",
    "checkin",
    "checkout",
    "price",
)


@dataclass(frozen=True, slots=True)
class BookingRecord:
    """One booking line item from the primary feed."""

    city_code: str
    hotel_code: str
    room_type: str
    room_code: str
    meal: str
    checkin: date
    adults: int
    children: int
    price: float
    source: str

    @property
    def pax(self) -> int:
        return self.adults + self.children


class HotelRef(BaseModel):
    """Hotel attributes decoded from one line of the hotel reference file."""

    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    category: float
    city: str


class RoomKey(NamedTuple):
    hotel_code: str
    source: str
    room_code: str


@dataclass(frozen=True, slots=True)
class EnrichedRecord:
    """Booking joined with hotel and room reference data."""

    room_type_meal: str
    room_code: str
    source: str
    hotel_name: str
    city_name: str
    city_code: str
    hotel_category: float
    pax: int
    adults: int
    children: int
    room_name: str
    checkin: date
    checkout: date
    price: float
