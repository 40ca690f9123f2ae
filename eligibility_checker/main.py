from __future__ import annotations

import json
import sys
from contextlib import contextmanager
from typing import Any, Dict, Generator

import psycopg
import typer
from rich import box
from rich.console import Console
from rich.table import Table

from eligibility_checker.config import Settings, get_settings
from eligibility_checker.errors import InputValidationError, StorageError, StorageUnavailable
from eligibility_checker.health import liveness, readiness
from eligibility_checker.infrastructure.db_factory import PoolManager, get_sync_connection
from eligibility_checker.infrastructure.schema import apply_schema
from eligibility_checker.service import DeterminationService
from eligibility_checker.stores.postgres import PostgresDeterminationStore, translate_errors
from eligibility_checker.utils.logging import configure_logging, get_logger

app = typer.Typer(help="Eligibility Checker CLI.")
log = get_logger(__name__)

EXIT_STORAGE_ERROR = 1
EXIT_VALIDATION_ERROR = 2


@contextmanager
def _service_session(settings: Settings) -> Generator[DeterminationService, None, None]:
    """
    Open the process-wide pool, wire store and service, and close on exit.
    """
    manager = PoolManager(settings)
    try:
        manager.open()
    except psycopg.Error as exc:
        raise StorageUnavailable("connection pool could not be opened") from exc
    try:
        store = PostgresDeterminationStore(manager.pool)
        yield DeterminationService(store, threshold_years=settings.eligibility_threshold_years)
    finally:
        manager.close()


def _setup() -> Settings:
    settings = get_settings()
    configure_logging(level=settings.log_level, json_logs=settings.log_json)
    return settings


def _echo_json(payload: Dict[str, Any]) -> None:
    typer.echo(json.dumps(payload, indent=2, default=str))


def _statistics_table(payload: Dict[str, Any]) -> Table:
    table = Table(title="Eligibility Statistics", box=box.ROUNDED)
    table.add_column("Metric", style="cyan", no_wrap=True)
    table.add_column("Value", justify="right", style="magenta")
    for key, value in payload.items():
        table.add_row(key, "N/A" if value is None else str(value))
    return table


@app.command()
def info() -> None:
    """
    Show effective configuration values.
    """
    settings = get_settings()
    typer.echo(
        f"DB={settings.db_user}@{settings.db_host}:{settings.db_port}/{settings.db_name} | "
        f"pool=({settings.db_pool_min_size},{settings.db_pool_max_size}) "
        f"statement_timeout_ms={settings.db_statement_timeout_ms} | "
        f"threshold={settings.eligibility_threshold_years} env={settings.app_env}"
    )


@app.command("init-db")
def init_db() -> None:
    """
    Create the determinations table, indexes and statistics view.
    """
    settings = _setup()
    try:
        with translate_errors("init-db"):
            with get_sync_connection(settings) as conn:
                apply_schema(conn)
    except StorageError as exc:
        log.exception("Schema bootstrap failed", extra={"db_host": settings.db_host})
        _echo_json(exc.to_response())
        raise typer.Exit(code=EXIT_STORAGE_ERROR)
    typer.echo("Schema applied.")


@app.command()
def check(
    first_name: str = typer.Option(..., "--first-name", "-f", help="Given name."),
    last_name: str = typer.Option(..., "--last-name", "-l", help="Family name."),
    date_of_birth: str = typer.Option(..., "--dob", "-d", help="Date of birth (YYYY-MM-DD)."),
    as_json: bool = typer.Option(False, "--json", help="Print the raw JSON response."),
) -> None:
    """
    Determine eligibility for one person and record the result.
    """
    settings = _setup()
    raw = {"firstName": first_name, "lastName": last_name, "dateOfBirth": date_of_birth}
    try:
        with _service_session(settings) as service:
            record = service.check_eligibility(raw)
    except InputValidationError as exc:
        _echo_json(exc.to_response())
        raise typer.Exit(code=EXIT_VALIDATION_ERROR)
    except StorageError as exc:
        _echo_json(exc.to_response())
        raise typer.Exit(code=EXIT_STORAGE_ERROR)

    response = record.to_response()
    if as_json:
        _echo_json(response)
    else:
        typer.echo(f"[{response['id']}] age={response['age']} - {response['message']}")


@app.command()
def stats(
    as_json: bool = typer.Option(False, "--json", help="Print the raw JSON response."),
    detailed: bool = typer.Option(
        False, "--detailed", help="Include min/max age and recent activity counts."
    ),
) -> None:
    """
    Show aggregate statistics over all determinations.
    """
    settings = _setup()
    try:
        with _service_session(settings) as service:
            snapshot = service.get_statistics()
    except StorageError as exc:
        _echo_json(exc.to_response())
        raise typer.Exit(code=EXIT_STORAGE_ERROR)

    payload = snapshot.to_detailed_response() if detailed else snapshot.to_response()
    if as_json:
        _echo_json({"statistics": payload})
    else:
        Console().print(_statistics_table(payload))


@app.command()
def health() -> None:
    """
    Liveness report: process uptime, memory and database connectivity.
    """
    settings = _setup()
    try:
        with _service_session(settings) as service:
            report = liveness(service)
    except StorageError:
        log.exception("Health check failed")
        report = {"status": "unhealthy", "database": "disconnected"}
    _echo_json(report)
    if report["status"] != "healthy":
        raise typer.Exit(code=1)


@app.command()
def ready() -> None:
    """
    Readiness probe: exit 0 when the database is reachable.
    """
    settings = _setup()
    try:
        with _service_session(settings) as service:
            report = readiness(service)
    except StorageError:
        log.exception("Readiness check failed")
        report = {"status": "not ready"}
    _echo_json(report)
    if report["status"] != "ready":
        raise typer.Exit(code=1)


def main() -> None:
    try:
        app()
    except KeyboardInterrupt:
        typer.echo("Cancelled by user.", err=True)
        sys.exit(130)


if __name__ == "__main__":
    main()
