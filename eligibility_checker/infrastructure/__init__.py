"""
Infrastructure package for the Eligibility Checker.

Centralizes database connectivity concerns (pool lifecycle, bootstrap
connections, schema). Keep this layer focused on I/O and resource management,
decoupled from validation and service logic.
"""

from eligibility_checker.infrastructure.db_factory import (
    PoolManager,
    connection_kwargs,
    get_sync_connection,
)
from eligibility_checker.infrastructure.schema import apply_schema, schema_exists

__all__ = [
    "PoolManager",
    "apply_schema",
    "connection_kwargs",
    "get_sync_connection",
    "schema_exists",
]
