"""Command-line entry point."""
from __future__ import annotations

import argparse
import json
import logging
import sys
import tomllib
from pathlib import Path
from typing import Optional, Sequence

from pydantic import ValidationError

from booking_enricher.bookings import InputOpenError
from booking_enricher.config.run_config import RunConfig
from booking_enricher.config.settings import Settings
from booking_enricher.core.logging import configure_logging
from booking_enricher.pipeline import run

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Enriches a booking feed with hotel and room names")
    parser.add_argument("-i", "--input", type=Path, default=None, help="Path to input file")
    parser.add_argument("-o", "--output", type=Path, default=None, help="Path to output report")
    parser.add_argument(
        "-t", "--hotels", type=Path, default=None, help="Path to additional hotels info file"
    )
    parser.add_argument(
        "-r", "--room-names", type=Path, default=None, help="Path to room names file"
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Path to a TOML run configuration file",
    )
    parser.add_argument("--log-level", default=None, help="Logging level (default INFO)")
    parser.add_argument(
        "--override",
        action="append",
        metavar="KEY=VALUE",
        help="Override a Settings attribute (repeatable). Values accept JSON literals.",
    )
    return parser


def _decode_override(value: str) -> object:
    try:
        return json.loads(value)
    except json.JSONDecodeError:
        return value


def _apply_overrides(settings: Settings, overrides: dict[str, object]) -> list[str]:
    """Set known Settings attributes; returns the keys that were not recognised."""
    unknown: list[str] = []
    for key, raw in overrides.items():
        if key not in Settings.model_fields:
            unknown.append(key)
            continue
        setattr(settings, key, raw)
    return unknown


def _apply_arguments(settings: Settings, args: argparse.Namespace) -> None:
    if args.input is not None:
        settings.input_path = args.input
    if args.output is not None:
        settings.output_path = args.output
    if args.hotels is not None:
        settings.hotels_path = args.hotels
    if args.room_names is not None:
        settings.room_names_path = args.room_names
    if args.log_level:
        settings.log_level = args.log_level


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    settings = Settings()

    run_config: Optional[RunConfig] = None
    if args.config:
        if not args.config.exists():
            parser.error(f"Config file not found: {args.config}")
        try:
            run_config = RunConfig.load(args.config)
            run_config.apply_to(settings, base_dir=args.config.parent)
        except (tomllib.TOMLDecodeError, ValidationError) as exc:
            parser.error(f"Invalid config file {args.config}: {exc}")

    _apply_arguments(settings, args)

    overrides: dict[str, object] = {}
    for entry in args.override or []:
        if "=" not in entry:
            parser.error(f"Override must be in KEY=VALUE form (got '{entry}')")
        key, value = entry.split("=", 1)
        overrides[key.strip()] = _decode_override(value.strip())
    try:
        unknown = _apply_overrides(settings, overrides)
    except ValidationError as exc:
        parser.error(f"Invalid override: {exc}")

    configure_logging(settings.log_level, settings.log_dir)
    if run_config:
        suffix = f" ({run_config.title})" if run_config.title else ""
        logger.info("Loaded run profile '%s'%s from %s", run_config.profile, suffix, args.config)
        if run_config.notes:
            logger.info("Profile notes: %s", run_config.notes)
    for key in unknown:
        logger.warning("Ignoring unknown override '%s'", key)
    for key, raw in overrides.items():
        if key not in unknown:
            logger.info("Override: set %s=%r", key, raw)

    try:
        run(settings)
    except InputOpenError as exc:
        logger.error("%s", exc)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
