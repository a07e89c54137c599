from __future__ import annotations

from datetime import timedelta
from typing import Optional

import typer
from pydantic import ValidationError

from logflood import __version__
from logflood.config import get_settings
from logflood.controller import run_profiled
from logflood.domain.models import RunConfig
from logflood.errors import ConfigurationError
from logflood.padding import minimum_record_size
from logflood.reporter import print_summary
from logflood.utils.logging import configure_logging, get_logger
from logflood.utils.units import UnitParseError, format_duration, parse_byte_size, parse_duration

app = typer.Typer(help="Emit fixed-size log records at a steady rate to load-test log pipelines.")
log = get_logger(__name__)


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(f"logflood {__version__}")
        raise typer.Exit()


@app.callback()
def cli(
    version: bool = typer.Option(
        False,
        "--version",
        callback=_version_callback,
        is_eager=True,
        help="Show the version and exit.",
    ),
) -> None:
    """
    Emit fixed-size log records at a steady rate to load-test log pipelines.
    """


def _resolve_record_size(value: Optional[str]) -> int:
    if value is None:
        return get_settings().record_size
    try:
        return parse_byte_size(value)
    except UnitParseError as exc:
        raise typer.BadParameter(str(exc), param_hint="--record-size") from exc


def _resolve_duration(value: Optional[str], forever: bool) -> Optional[timedelta]:
    if forever:
        return None
    if value is None:
        return get_settings().duration
    try:
        return parse_duration(value)
    except UnitParseError as exc:
        raise typer.BadParameter(str(exc), param_hint="--duration") from exc


@app.command()
def info(
    record_size: Optional[str] = typer.Option(
        None, "--record-size", "-s", help="Record size to check, e.g. 512, 1KiB, 2MiB."
    ),
    run_id: Optional[str] = typer.Option(None, "--run-id", help="Run identifier to account for."),
) -> None:
    """
    Show effective configuration values and the smallest possible record.
    """
    settings = get_settings()
    size = _resolve_record_size(record_size)
    effective_run_id = run_id if run_id is not None else settings.run_id
    minimum = minimum_record_size(effective_run_id)
    typer.echo(
        f"record_size={size} duration={format_duration(settings.duration)} "
        f"run_id={effective_run_id or '-'} | minimum_record_size={minimum}"
    )
    if size < minimum:
        typer.echo(f"Record size {size} is below the minimum of {minimum} bytes.", err=True)
        raise typer.Exit(code=1)


@app.command()
def run(
    records_per_second: int = typer.Option(
        ...,
        "--records-per-second",
        "-r",
        min=1,
        help="Number of records to emit per second.",
    ),
    record_size: Optional[str] = typer.Option(
        None,
        "--record-size",
        "-s",
        help="Exact size of each record excluding the newline, e.g. 512, 1KiB (default 1KiB).",
    ),
    duration: Optional[str] = typer.Option(
        None,
        "--duration",
        "-d",
        help="How long to emit records for, e.g. 500ms, 10s, 1m30s (default 10s).",
    ),
    run_id: Optional[str] = typer.Option(
        None,
        "--run-id",
        help="Arbitrary string identifying the run, written as the run_id field.",
    ),
    forever: bool = typer.Option(False, "--forever", help="Ignore --duration and run until interrupted."),
    debug: bool = typer.Option(False, "--debug", help="Verbose diagnostics on stderr."),
    summary: bool = typer.Option(False, "--summary", help="Print a run summary table on stderr."),
    json_logs: bool = typer.Option(False, "--json-logs", help="Emit diagnostics as JSON."),
) -> None:
    """
    Write records to stdout until the duration elapses.
    """
    settings = get_settings()
    configure_logging(
        level="DEBUG" if debug else settings.log_level,
        json_logs=json_logs or settings.json_logs,
    )

    try:
        config = RunConfig(
            record_size=_resolve_record_size(record_size),
            records_per_second=records_per_second,
            duration=_resolve_duration(duration, forever),
            run_id=run_id if run_id is not None else settings.run_id,
            debug=debug,
        )
        result = run_profiled(config)
    except (ConfigurationError, ValidationError) as exc:
        log.error("Invalid configuration", extra={"error": str(exc)})
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(code=1) from exc
    except BrokenPipeError:
        log.error("Record sink closed by reader")
        raise
    except KeyboardInterrupt:
        typer.echo("Cancelled by user.", err=True)
        raise typer.Exit(code=130) from None

    if summary:
        print_summary(result, config)


def main() -> None:
    app()


if __name__ == "__main__":
    main()
