"""
Stores package for the Eligibility Checker.

This module re-exports the store interfaces and the concrete store classes so
downstream code can import from `eligibility_checker.stores` directly.
"""

from eligibility_checker.stores.abstract import AbstractDeterminationStore, DeterminationStore
from eligibility_checker.stores.memory import InMemoryDeterminationStore
from eligibility_checker.stores.postgres import PostgresDeterminationStore

__all__ = [
    # Abstracts
    "AbstractDeterminationStore",
    "DeterminationStore",
    # Concrete stores
    "InMemoryDeterminationStore",
    "PostgresDeterminationStore",
]
