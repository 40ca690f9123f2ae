"""CLI commands wired to an in-memory service."""

from __future__ import annotations

import json
from contextlib import contextmanager

import psycopg
import pytest
from typer.testing import CliRunner

from eligibility_checker import main
from eligibility_checker.config import Settings
from eligibility_checker.errors import StorageUnavailable

runner = CliRunner()


@pytest.fixture
def cli_service(monkeypatch, service):
    """Route every command to the in-memory service fixture."""

    @contextmanager
    def _session(settings):
        del settings
        yield service

    monkeypatch.setattr(main, "_service_session", _session)
    monkeypatch.setattr(main, "_setup", lambda: Settings())
    return service


@pytest.fixture
def unavailable_storage(monkeypatch):
    @contextmanager
    def _session(settings):
        del settings
        raise StorageUnavailable("connection pool could not be opened")
        yield  # pragma: no cover

    monkeypatch.setattr(main, "_service_session", _session)
    monkeypatch.setattr(main, "_setup", lambda: Settings())


def test_check_prints_summary(cli_service):
    result = runner.invoke(
        main.app, ["check", "--first-name", "John", "--last-name", "Doe", "--dob", "1990-01-01"]
    )

    assert result.exit_code == 0
    assert "age=34" in result.output
    assert "You are eligible for the program" in result.output


def test_check_json_matches_response_shape(cli_service):
    result = runner.invoke(
        main.app,
        ["check", "-f", "Jane", "-l", "Doe", "-d", "2010-01-01", "--json"],
    )

    assert result.exit_code == 0
    payload = json.loads(result.output)
    assert set(payload) == {"id", "age", "eligible", "message", "timestamp"}
    assert payload["eligible"] is False


def test_check_validation_failure_exits_two_with_all_errors(cli_service, memory_store):
    result = runner.invoke(main.app, ["check", "-f", "", "-l", "D0e", "-d", "2999-01-01"])

    assert result.exit_code == main.EXIT_VALIDATION_ERROR
    payload = json.loads(result.output)
    assert payload["error"] == "Validation failed"
    assert payload["details"] == [
        "First name is required",
        "Last name must contain only letters, spaces, hyphens, and apostrophes",
        "Date of birth cannot be in the future",
    ]
    assert len(memory_store) == 0


def test_check_storage_failure_exits_one_with_generic_message(unavailable_storage):
    result = runner.invoke(main.app, ["check", "-f", "John", "-l", "Doe", "-d", "1990-01-01"])

    assert result.exit_code == main.EXIT_STORAGE_ERROR
    assert "Please try again later" in result.output
    assert "pool" not in result.output


def test_stats_json_after_checks(cli_service):
    cli_service.check_eligibility(
        {"firstName": "John", "lastName": "Doe", "dateOfBirth": "1990-01-01"}
    )

    result = runner.invoke(main.app, ["stats", "--json"])

    assert result.exit_code == 0
    assert json.loads(result.output) == {
        "statistics": {
            "totalUsers": 1,
            "eligibleUsers": 1,
            "ineligibleUsers": 0,
            "averageAge": 34.0,
        }
    }


def test_stats_detailed_table(cli_service):
    result = runner.invoke(main.app, ["stats", "--detailed"])

    assert result.exit_code == 0
    assert "totalUsers" in result.output
    assert "usersThisMonth" in result.output


def test_ready_and_health_succeed_with_reachable_store(cli_service):
    ready = runner.invoke(main.app, ["ready"])
    health = runner.invoke(main.app, ["health"])

    assert ready.exit_code == 0
    assert json.loads(ready.output) == {"status": "ready"}
    assert health.exit_code == 0
    assert json.loads(health.output)["status"] == "healthy"


def test_ready_and_health_fail_without_storage(unavailable_storage):
    ready = runner.invoke(main.app, ["ready"])
    health = runner.invoke(main.app, ["health"])

    assert ready.exit_code == 1
    assert "not ready" in ready.output
    assert health.exit_code == 1
    assert "unhealthy" in health.output


def test_init_db_unreachable_database_exits_one_with_generic_message(monkeypatch):
    def _refuse(settings):
        del settings
        raise psycopg.OperationalError("connection refused at 10.0.0.5")

    monkeypatch.setattr(main, "_setup", lambda: Settings())
    monkeypatch.setattr(main, "get_sync_connection", _refuse)

    result = runner.invoke(main.app, ["init-db"])

    assert result.exit_code == main.EXIT_STORAGE_ERROR
    assert '"success": false' in result.output
    assert "Unable to complete the request. Please try again later." in result.output
    assert not isinstance(result.exception, psycopg.Error)


def test_info_shows_threshold():
    result = runner.invoke(main.app, ["info"])

    assert result.exit_code == 0
    assert "threshold=" in result.output
