"""
Pytest configuration for the Eligibility Checker.

Provides fixtures for:
- A fixed evaluation clock
- In-memory store and service wiring for unit tests
- Database connection management for integration tests
- Settings override for integration tests
"""

from __future__ import annotations

import os
from datetime import datetime, timezone
from typing import Callable, Generator

import psycopg
import pytest

from eligibility_checker.config import Settings
from eligibility_checker.infrastructure.schema import apply_schema, schema_exists
from eligibility_checker.service import DeterminationService
from eligibility_checker.stores.memory import InMemoryDeterminationStore

FIXED_NOW = datetime(2024, 6, 15, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def fixed_clock() -> Callable[[], datetime]:
    """Clock pinned to 2024-06-15 12:00 UTC."""
    return lambda: FIXED_NOW


@pytest.fixture
def memory_store(fixed_clock: Callable[[], datetime]) -> InMemoryDeterminationStore:
    return InMemoryDeterminationStore(clock=fixed_clock)


@pytest.fixture
def service(
    memory_store: InMemoryDeterminationStore, fixed_clock: Callable[[], datetime]
) -> DeterminationService:
    return DeterminationService(memory_store, clock=fixed_clock)


@pytest.fixture(scope="session")
def test_settings() -> Settings:
    """
    Settings fixture with test-specific overrides.

    Can be overridden via environment variables in CI or local testing.
    """
    return Settings(
        db_host=os.getenv("DB_HOST", "localhost"),
        db_port=int(os.getenv("DB_PORT", "5432")),
        db_user=os.getenv("DB_USER", "postgres"),
        db_password=os.getenv("DB_PASSWORD", "postgres"),
        db_name=os.getenv("DB_NAME", "eligibility_db"),
        db_startup_retries=1,
        log_level="DEBUG",
    )


@pytest.fixture(scope="session")
def test_dsn(test_settings: Settings) -> str:
    """
    Database connection string for tests.
    """
    return test_settings.dsn


@pytest.fixture(scope="session")
def db_connection_available(test_dsn: str) -> bool:
    """
    Check if database is reachable.

    Used to conditionally skip integration tests when DB is not available.
    """
    try:
        with psycopg.connect(test_dsn, connect_timeout=5) as conn:
            conn.execute("SELECT 1;")
        return True
    except psycopg.Error:
        return False


@pytest.fixture(scope="session")
def db_connection(
    test_dsn: str, db_connection_available: bool
) -> Generator[psycopg.Connection, None, None]:
    """
    Provide a session-scoped database connection for integration tests.

    Skips tests if database is not available.
    """
    if not db_connection_available:
        pytest.skip("Database not available for integration tests")

    conn = psycopg.connect(test_dsn)
    try:
        yield conn
    finally:
        conn.close()


@pytest.fixture(scope="session")
def db_schema_initialized(db_connection: psycopg.Connection) -> bool:
    """
    Ensure the determinations table and statistics view exist.
    """
    if not schema_exists(db_connection):
        apply_schema(db_connection)
    return True


@pytest.fixture(scope="function")
def clean_determinations_table(db_connection: psycopg.Connection, db_schema_initialized: bool):
    """
    Empty the determinations table around each test function.
    """
    with db_connection.cursor() as cur:
        cur.execute("TRUNCATE TABLE public.determinations;")
    db_connection.commit()
    yield
    with db_connection.cursor() as cur:
        cur.execute("TRUNCATE TABLE public.determinations;")
    db_connection.commit()
