from __future__ import annotations

import logging
from pathlib import Path

import pytest

from booking_enricher import cli
from booking_enricher.core.logging import configure_logging

from conftest import EXAMPLE_ROW, REPORT_HEADER


@pytest.fixture(autouse=True)
def _quiet_logging(monkeypatch):
    monkeypatch.setattr("booking_enricher.cli.configure_logging", lambda *args, **kwargs: None)


def _args(files) -> list[str]:
    return [
        "-i",
        str(files["input"]),
        "-o",
        str(files["output"]),
        "-t",
        str(files["hotels"]),
        "-r",
        str(files["room_names"]),
    ]


def test_main_writes_report(data_files):
    assert cli.main(_args(data_files)) == 0
    lines = data_files["output"].read_text().splitlines()
    assert lines[:2] == [REPORT_HEADER, EXAMPLE_ROW]


def test_main_returns_non_zero_when_input_missing(data_files):
    data_files["hotels"].unlink()
    assert cli.main(_args(data_files)) == 1
    assert not data_files["output"].exists()


def test_main_uses_environment_defaults(data_files, monkeypatch):
    monkeypatch.setenv("ENRICHER_INPUT_PATH", str(data_files["input"]))
    monkeypatch.setenv("ENRICHER_OUTPUT_PATH", str(data_files["output"]))
    monkeypatch.setenv("ENRICHER_HOTELS_PATH", str(data_files["hotels"]))
    monkeypatch.setenv("ENRICHER_ROOM_NAMES_PATH", str(data_files["room_names"]))

    assert cli.main([]) == 0
    assert data_files["output"].exists()


def test_main_applies_run_profile_and_overrides(data_files, tmp_path):
    profile = tmp_path / "run.toml"
    profile.write_text(
        f"""
profile = "test"

[paths]
input = "{data_files['input'].name}"
output = "{data_files['output'].name}"
hotels = "{data_files['hotels'].name}"
room_names = "{data_files['room_names'].name}"
"""
    )

    assert cli.main(["--config", str(profile), "--override", "output_delimiter=,"]) == 0
    assert data_files["output"].read_text().splitlines()[1] == EXAMPLE_ROW.replace(";", ",")


def test_main_rejects_malformed_override(data_files):
    with pytest.raises(SystemExit):
        cli.main(_args(data_files) + ["--override", "output_delimiter"])


def test_main_rejects_missing_config(tmp_path):
    with pytest.raises(SystemExit):
        cli.main(["--config", str(tmp_path / "absent.toml")])


def test_configure_logging_writes_log_file(tmp_path):
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    try:
        configure_logging("debug", tmp_path / "logs")
        logging.getLogger("booking_enricher.test").info("hello")
        for handler in root.handlers:
            handler.flush()
        assert "hello" in (tmp_path / "logs" / "enricher.log").read_text()
    finally:
        for handler in root.handlers:
            handler.close()
        root.handlers[:] = handlers
        root.setLevel(level)


def test_main_skips_undecodable_room_name_lines(data_files):
    data_files["room_names"].write_bytes(
        b"H9|S|\xff|1\n" + data_files["room_names"].read_bytes()
    )

    assert cli.main(_args(data_files)) == 0
    assert data_files["output"].read_text().splitlines()[1] == EXAMPLE_ROW


@pytest.mark.skipif(not Path("/dev/full").exists(), reason="needs /dev/full")
def test_main_exits_cleanly_when_report_flush_fails(data_files):
    args = _args(data_files)
    args[args.index("-o") + 1] = "/dev/full"

    assert cli.main(args) == 0
