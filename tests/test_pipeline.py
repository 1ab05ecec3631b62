from __future__ import annotations

import io
import logging
from pathlib import Path

import pytest

from booking_enricher.bookings import InputOpenError
from booking_enricher.config.settings import Settings
from booking_enricher.pipeline import enrich_streams, run

from conftest import (
    EXAMPLE_BOOKING,
    EXAMPLE_HOTEL,
    EXAMPLE_ROOM_NAME,
    EXAMPLE_ROW,
    REPORT_HEADER,
    bookings_text,
)


def _settings(files) -> Settings:
    return Settings(
        input_path=files["input"],
        output_path=files["output"],
        hotels_path=files["hotels"],
        room_names_path=files["room_names"],
    )


def test_enrich_streams_produces_expected_report():
    report = io.BytesIO()
    summary = enrich_streams(
        io.BytesIO(bookings_text(EXAMPLE_BOOKING).encode()),
        io.BytesIO(EXAMPLE_HOTEL.encode()),
        io.BytesIO(EXAMPLE_ROOM_NAME.encode()),
        report,
    )

    assert report.getvalue().decode() == f"{REPORT_HEADER}\n{EXAMPLE_ROW}\n"
    assert summary.rows_written == 1
    assert summary.bookings_skipped == 0


def test_enrich_streams_skips_unknown_hotel(caplog):
    report = io.BytesIO()
    summary = enrich_streams(
        io.BytesIO(bookings_text(EXAMPLE_BOOKING).encode()),
        io.BytesIO(b'{"id":"H2","name":"Other","category":3,"city":"Lyon"}\n'),
        io.BytesIO(EXAMPLE_ROOM_NAME.encode()),
        report,
    )

    assert report.getvalue().decode() == f"{REPORT_HEADER}\n"
    assert summary.bookings_read == 1
    assert summary.bookings_skipped == 1
    warnings = [r.getMessage() for r in caplog.records if r.levelno == logging.WARNING]
    assert len(warnings) == 1
    assert "H1" in warnings[0]


def test_run_processes_files_and_skips_bad_lines(data_files):
    summary = run(_settings(data_files))

    lines = data_files["output"].read_text().splitlines()
    assert lines == [
        REPORT_HEADER,
        EXAMPLE_ROW,
        "SGL RO;201;SRC1;Petit;Lyon;PAR;3.0;2;1;1;Single Room;2024-06-02;2024-06-03;45.00",
    ]
    assert summary.hotels_loaded == 2
    assert summary.room_names_loaded == 2
    assert summary.bookings_read == 3
    assert summary.bookings_skipped == 1
    assert summary.rows_written == 2


def test_run_is_idempotent(data_files):
    settings = _settings(data_files)
    run(settings)
    first = data_files["output"].read_bytes()
    run(settings)
    assert data_files["output"].read_bytes() == first


@pytest.mark.parametrize("missing", ["input", "hotels", "room_names"])
def test_run_fails_before_processing_when_a_file_is_missing(data_files, missing):
    data_files[missing].unlink()

    with pytest.raises(InputOpenError) as excinfo:
        run(_settings(data_files))

    assert excinfo.value.path == data_files[missing]
    assert not data_files["output"].exists()


def test_run_fails_when_output_cannot_be_created(data_files, tmp_path):
    settings = _settings(data_files)
    settings.output_path = tmp_path / "missing-dir" / "output.csv"

    with pytest.raises(InputOpenError) as excinfo:
        run(settings)

    assert excinfo.value.role == "output"


@pytest.mark.skipif(not Path("/dev/full").exists(), reason="needs /dev/full")
def test_run_logs_flush_failure_on_full_device(data_files, caplog):
    settings = _settings(data_files)
    settings.output_path = Path("/dev/full")

    summary = run(settings)

    assert summary.rows_written == 2
    errors = [r.getMessage() for r in caplog.records if r.levelno == logging.ERROR]
    assert any("Failed to flush report output" in message for message in errors)
