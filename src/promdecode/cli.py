"""Command line interface for promdecode."""

from __future__ import annotations

import logging
import sys
from contextlib import ExitStack
from pathlib import Path
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

import typer

from promdecode import __version__
from promdecode.adapters.stream_reader import RecordStreamReader
from promdecode.config import DecodeOptions
from promdecode.pipeline import run

_LOGGER_NAME = "promdecode"

_LOG_LEVELS = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARNING": logging.WARNING,
    "ERROR": logging.ERROR,
    "CRITICAL": logging.CRITICAL,
}


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(f"promdecode {__version__}")
        raise typer.Exit()


def create_app() -> typer.Typer:
    """Create the Typer application."""

    app = typer.Typer(
        add_completion=False,
        help="Decode snappy-compressed Prometheus remote-write records into JSON.",
    )

    @app.command()
    def decode(
        input: Path = typer.Option(
            ...,
            "--input",
            "-i",
            help="File containing concatenated JSON records.",
            dir_okay=False,
        ),
        output: Path | None = typer.Option(
            None,
            "--output",
            "-o",
            help="Write JSON results to a file instead of stdout.",
            dir_okay=False,
        ),
        pretty: bool = typer.Option(
            True,
            "--pretty/--no-pretty",
            help="Pretty-print JSON output.",
            envvar="PROMDECODE_PRETTY",
            show_default=True,
        ),
        human_time: bool = typer.Option(
            False,
            "--human-time/--no-human-time",
            help="Show human-readable timestamps before each document.",
            envvar="PROMDECODE_HUMAN_TIME",
            show_default=True,
        ),
        timezone: str | None = typer.Option(
            None,
            "--timezone",
            help="IANA zone for human-readable timestamps (default: local).",
            envvar="PROMDECODE_TIMEZONE",
        ),
        log_level: str = typer.Option(
            "INFO",
            "--log-level",
            help=(
                "Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL). Skipped-record"
                " diagnostics and the final count are always shown."
            ),
            envvar="PROMDECODE_LOG_LEVEL",
            show_default=True,
        ),
        version: bool = typer.Option(
            False,
            "--version",
            help="Show the version and exit.",
            callback=_version_callback,
            is_eager=True,
        ),
    ) -> None:
        """Decode every record in INPUT and write one JSON document per record."""
        tz = None
        if timezone:
            try:
                tz = ZoneInfo(timezone)
            except (ZoneInfoNotFoundError, ValueError) as exc:
                raise typer.BadParameter(
                    f"unknown time zone {timezone!r}", param_hint="--timezone"
                ) from exc

        level = _LOG_LEVELS.get(log_level.upper())
        if level is None:
            raise typer.BadParameter(
                f"unknown log level {log_level!r}", param_hint="--log-level"
            )

        options = DecodeOptions(pretty=pretty, human_time=human_time, timezone=tz)

        with ExitStack() as stack:
            handler = _configure_logging(level)
            stack.callback(_remove_handler, handler)

            try:
                source = stack.enter_context(input.open("rb"))
            except OSError as exc:
                typer.echo(f"Error opening input file: {exc}", err=True)
                raise typer.Exit(code=1) from exc

            if output is None:
                sink = sys.stdout
            else:
                try:
                    sink = stack.enter_context(output.open("w", encoding="utf-8"))
                except OSError as exc:
                    typer.echo(f"Error creating output file: {exc}", err=True)
                    raise typer.Exit(code=1) from exc

            summary = run(RecordStreamReader(source), sink, options)
            sink.flush()

        typer.echo(summary.message, err=True)

        if summary.halted:
            raise typer.Exit(code=1)

    return app


def _configure_logging(level: int) -> logging.Handler:
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter("%(message)s"))
    logger = logging.getLogger(_LOGGER_NAME)
    logger.addHandler(handler)
    # WARNING is the ceiling so skip diagnostics pass at every level.
    logger.setLevel(min(level, logging.WARNING))
    return handler


def _remove_handler(handler: logging.Handler) -> None:
    logging.getLogger(_LOGGER_NAME).removeHandler(handler)
    handler.flush()


app = create_app()


def main() -> None:
    app()
