"""
Liveness and readiness reports.

``liveness`` describes the running process (uptime, memory via psutil) and the
database connection state; ``readiness`` answers only whether the service can
take traffic, i.e. whether the store is reachable.
"""

from __future__ import annotations

import time
from datetime import datetime, timezone
from typing import Any, Dict, Optional

import psutil

from eligibility_checker import __version__
from eligibility_checker.errors import StorageError
from eligibility_checker.service import DeterminationService
from eligibility_checker.utils.logging import get_logger

log = get_logger(__name__)

_PROCESS_STARTED = time.monotonic()


def _memory_usage() -> Dict[str, int]:
    info = psutil.Process().memory_info()
    return {"rss_bytes": info.rss, "vms_bytes": info.vms}


def liveness(service: DeterminationService, started_at: Optional[float] = None) -> Dict[str, Any]:
    """
    Build the health report.

    ``status`` is "healthy" when the store answers a ping, "unhealthy"
    otherwise; the error detail stays in the logs.
    """
    report: Dict[str, Any] = {
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "uptime_seconds": round(time.monotonic() - (started_at or _PROCESS_STARTED), 3),
        "version": __version__,
    }
    try:
        service.ping()
    except StorageError:
        log.error("Health check failed", exc_info=True)
        report.update(
            {
                "status": "unhealthy",
                "database": "disconnected",
                "error": "Database connection failed",
            }
        )
        return report

    report.update({"status": "healthy", "database": "connected", "memory": _memory_usage()})
    return report


def readiness(service: DeterminationService) -> Dict[str, str]:
    try:
        service.ping()
    except StorageError:
        return {"status": "not ready"}
    return {"status": "ready"}


__all__ = ["liveness", "readiness"]
