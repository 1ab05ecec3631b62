from __future__ import annotations

from pathlib import Path

import pytest

BOOKING_HEADER = "city_code|hotel_code|room_type|room_code|meal|checkin|adults|children|price|source"
EXAMPLE_BOOKING = "PAR|H1|DBL|101|BB|20240601|2|0|100.00|SRC1"
EXAMPLE_HOTEL = '{"id":"H1","name":"Grand","category":4.5,"city":"Paris"}'
EXAMPLE_ROOM_NAME = "H1|SRC1|Double Room|101"
EXAMPLE_ROW = "DBL BB;101;SRC1;Grand;Paris;PAR;4.5;2;2;0;Double Room;2024-06-01;2024-06-02;50.00"
REPORT_HEADER = (
    "room_type meal;room_code;source;hotel_name;city_name;city_code;hotel_category;"
    "pax;adults;children;room_name;checkin;checkout;price"
)


def bookings_text(*lines: str) -> str:
    return "\n".join((BOOKING_HEADER, *lines)) + "\n"


@pytest.fixture
def data_files(tmp_path: Path) -> dict[str, Path]:
    files = {
        "input": tmp_path / "input.csv",
        "hotels": tmp_path / "hotels.json",
        "room_names": tmp_path / "room_names.csv",
        "output": tmp_path / "output.csv",
    }
    files["input"].write_text(
        bookings_text(
            EXAMPLE_BOOKING,
            "PAR|H2|SGL|201|RO|20240602|1|1|90.00|SRC1",
            "PAR|H1|DBL|101|BB|not-a-date|2|0|100.00|SRC1",
            "ROM|H9|DBL|101|BB|20240603|2|0|80.00|SRC2",
        )
    )
    files["hotels"].write_text(
        EXAMPLE_HOTEL
        + "\n"
        + '{"id":"H2","name":"Petit","category":3,"city":"Lyon"}\n'
        + "not json\n"
    )
    files["room_names"].write_text(EXAMPLE_ROOM_NAME + "\nH2|SRC1|Single Room|201\n")
    return files
