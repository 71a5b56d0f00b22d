"""Constant-product liquidity pool state machine."""

from exchange.dispatch import Dispatcher
from exchange.models.pool import Pool
from exchange.state_machine import PoolStateMachine

__version__ = "0.1.0"
__all__ = ["Dispatcher", "Pool", "PoolStateMachine", "__version__"]
