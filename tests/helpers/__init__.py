"""Test helpers module for shared test utilities.

- constants: Caller identities
- factories: Ledger seeding and transaction helpers
"""

from tests.helpers.constants import ADMIN, ALICE, BOB, CAROL
from tests.helpers.factories import counting_ids, read_pool, run, seed_ledger

__all__ = [
    # Constants
    "ADMIN",
    "ALICE",
    "BOB",
    "CAROL",
    # Factories
    "counting_ids",
    "read_pool",
    "run",
    "seed_ledger",
]
