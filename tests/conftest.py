"""Pytest configuration and fixtures."""

from collections.abc import Iterator

import pytest
import structlog

from exchange.config import ExchangeConfig
from exchange.dispatch import Dispatcher
from exchange.ledger.memory import InMemoryLedger
from exchange.models.pool import Pool
from exchange.state_machine import PoolStateMachine
from tests.helpers import ALICE, BOB, counting_ids, seed_ledger


@pytest.fixture(autouse=True)
def reset_structlog() -> Iterator[None]:
    """Undo any structlog.configure() a test (e.g. the CLI) performed."""
    yield
    structlog.reset_defaults()


@pytest.fixture
def ledger() -> InMemoryLedger:
    """An empty in-memory ledger with predictable transaction ids."""
    return InMemoryLedger(id_factory=counting_ids())


@pytest.fixture
def machine() -> PoolStateMachine:
    """A state machine with the default 3/1000 fee."""
    return PoolStateMachine(ExchangeConfig())


@pytest.fixture
def dispatcher(ledger: InMemoryLedger, machine: PoolStateMachine) -> Dispatcher:
    return Dispatcher(ledger, machine)


@pytest.fixture
def balanced_ledger() -> InMemoryLedger:
    """Pool with 1000 base / 1000 token, all 1000 shares held by ALICE."""
    return seed_ledger(
        Pool(
            base_reserve=1000,
            token_reserve=1000,
            total_shares=1000,
            lp_shares={ALICE: 1000},
            liquidity_providers=[ALICE],
        )
    )


@pytest.fixture
def two_provider_ledger() -> InMemoryLedger:
    """Pool after ALICE createPool(1000) and BOB addLiquidity(500)."""
    return seed_ledger(
        Pool(
            base_reserve=500,
            token_reserve=1500,
            total_shares=1500,
            lp_shares={ALICE: 1000, BOB: 500},
            liquidity_providers=[ALICE, BOB],
        )
    )
