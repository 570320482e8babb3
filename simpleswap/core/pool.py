"""
SimpleSwap pool facade.

Composes the three stateless components over one ``PoolContext``:
- ``LiquidityAccounting``: add_liquidity / remove_liquidity
- ``SwapEngine``: swap_exact_tokens_for_tokens
- ``PricingOracle``: get_price / get_amount_out
"""

from __future__ import annotations

from typing import List, Optional, Sequence, Tuple

from ..config import DEFAULT_POOL_ADDRESS, PoolConfig
from ..state.balances import Amount, AssetId, AssetLedger, Holder, InMemoryAssetLedger
from ..state.shares import InMemoryShareLedger, ShareLedger
from .context import PoolContext
from .events import EventLog
from .liquidity import LiquidityAccounting
from .pricing import PricingOracle
from .swap import SwapEngine


class SimpleSwap:
    """Two-asset liquidity pool. Mutating calls take the caller and current time explicitly."""

    def __init__(
        self,
        asset_ledger: AssetLedger,
        share_ledger: ShareLedger,
        pool_address: Holder = DEFAULT_POOL_ADDRESS,
        events: Optional[EventLog] = None,
    ) -> None:
        self.context = PoolContext(asset_ledger, share_ledger, pool_address, events)
        self.liquidity = LiquidityAccounting(self.context)
        self.swaps = SwapEngine(self.context)
        self.oracle = PricingOracle(self.context)

    @classmethod
    def from_config(
        cls,
        config: PoolConfig,
        asset_ledger: Optional[AssetLedger] = None,
        share_ledger: Optional[ShareLedger] = None,
    ) -> "SimpleSwap":
        """Build a pool from config, defaulting to fresh in-memory ledgers."""
        return cls(
            asset_ledger if asset_ledger is not None else InMemoryAssetLedger(),
            share_ledger if share_ledger is not None else InMemoryShareLedger(),
            pool_address=config.pool_address,
        )

    @property
    def pool_address(self) -> Holder:
        return self.context.pool_address

    @property
    def events(self) -> EventLog:
        return self.context.events

    @property
    def asset_ledger(self) -> AssetLedger:
        return self.context.asset_ledger

    @property
    def share_ledger(self) -> ShareLedger:
        return self.context.share_ledger

    def reserves(self, asset_a: AssetId, asset_b: AssetId) -> Tuple[Amount, Amount]:
        return self.context.reserves(asset_a, asset_b)

    def total_issued(self) -> Amount:
        return self.context.share_ledger.total_issued()

    def shares_of(self, holder: Holder) -> Amount:
        return self.context.share_ledger.balance_of(holder)

    def add_liquidity(
        self,
        caller: Holder,
        asset_a: AssetId,
        asset_b: AssetId,
        amount_a_desired: Amount,
        amount_b_desired: Amount,
        amount_a_min: Amount,
        amount_b_min: Amount,
        to: Holder,
        deadline: int,
        now: int,
    ) -> Tuple[Amount, Amount, Amount]:
        return self.liquidity.add_liquidity(
            caller,
            asset_a,
            asset_b,
            amount_a_desired,
            amount_b_desired,
            amount_a_min,
            amount_b_min,
            to,
            deadline,
            now,
        )

    def remove_liquidity(
        self,
        caller: Holder,
        asset_a: AssetId,
        asset_b: AssetId,
        shares: Amount,
        amount_a_min: Amount,
        amount_b_min: Amount,
        to: Holder,
        deadline: int,
        now: int,
    ) -> Tuple[Amount, Amount]:
        return self.liquidity.remove_liquidity(
            caller, asset_a, asset_b, shares, amount_a_min, amount_b_min, to, deadline, now
        )

    def swap_exact_tokens_for_tokens(
        self,
        caller: Holder,
        amount_in: Amount,
        amount_out_min: Amount,
        path: Sequence[AssetId],
        to: Holder,
        deadline: int,
        now: int,
    ) -> List[Amount]:
        return self.swaps.swap_exact_tokens_for_tokens(caller, amount_in, amount_out_min, path, to, deadline, now)

    def get_price(self, asset_a: AssetId, asset_b: AssetId) -> Amount:
        return self.oracle.get_price(asset_a, asset_b)

    def get_amount_out(self, amount_in: Amount, reserve_in: Amount, reserve_out: Amount) -> Amount:
        return self.oracle.get_amount_out(amount_in, reserve_in, reserve_out)
