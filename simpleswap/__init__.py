"""
SimpleSwap: a two-asset, fee-free constant-product liquidity pool.

Public API:
- `SimpleSwap(asset_ledger, share_ledger, pool_address)`: the pool
- `InMemoryAssetLedger` / `InMemoryShareLedger`: reference ledgers
- `step(pool, command, now)`: data-driven command execution
"""

from .config import PoolConfig, load_config, resolve_config
from .core import (
    SCALE,
    Action,
    Command,
    EventLog,
    LiquidityAdded,
    LiquidityRemoved,
    SimpleSwap,
    StepResult,
    TokensSwapped,
    get_amount_out,
    step,
    step_or_raise,
)
from .errors import PoolError
from .state import InMemoryAssetLedger, InMemoryShareLedger

__version__ = "0.1.0"

__all__ = [
    "PoolConfig",
    "load_config",
    "resolve_config",
    "SCALE",
    "Action",
    "Command",
    "EventLog",
    "LiquidityAdded",
    "LiquidityRemoved",
    "SimpleSwap",
    "StepResult",
    "TokensSwapped",
    "get_amount_out",
    "step",
    "step_or_raise",
    "PoolError",
    "InMemoryAssetLedger",
    "InMemoryShareLedger",
]
