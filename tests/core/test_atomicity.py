# [TESTER] v1

from __future__ import annotations

from typing import List, Set

import pytest

from simpleswap.core.context import PoolContext
from simpleswap.core.events import LiquidityAdded, TokensSwapped
from simpleswap.core.pool import SimpleSwap
from simpleswap.errors import InsufficientBalance, TransferFailed
from simpleswap.state.balances import InMemoryAssetLedger
from simpleswap.state.shares import InMemoryShareLedger

POOL = "pool"
TOKEN_A = "TKA"
TOKEN_B = "TKB"
OWNER = "owner"
NOW = 1_700_000_000
DEADLINE = NOW + 1200


class _RefusingLedger(InMemoryAssetLedger):
    """Asset ledger that reports failure (returns False) for selected assets."""

    def __init__(self) -> None:
        super().__init__()
        self.refuse: Set[str] = set()

    def transfer_from(self, asset, owner, spender, to, amount) -> bool:  # type: ignore[override]
        if asset in self.refuse:
            return False
        return super().transfer_from(asset, owner, spender, to, amount)

    def transfer(self, asset, sender, to, amount) -> bool:  # type: ignore[override]
        if asset in self.refuse:
            return False
        return super().transfer(asset, sender, to, amount)


def _pool(assets: InMemoryAssetLedger, balance: int = 1_000) -> SimpleSwap:
    for asset in (TOKEN_A, TOKEN_B):
        assets.mint(OWNER, asset, balance)
        assets.approve(OWNER, POOL, asset, balance)
    return SimpleSwap(assets, InMemoryShareLedger(), pool_address=POOL)


class TestRollback:
    def test_false_return_becomes_transfer_failed(self):
        assets = _RefusingLedger()
        pool = _pool(assets)
        assets.refuse.add(TOKEN_A)
        with pytest.raises(TransferFailed) as exc_info:
            pool.add_liquidity(OWNER, TOKEN_A, TOKEN_B, 100, 100, 0, 0, OWNER, DEADLINE, NOW)
        assert exc_info.value.asset == TOKEN_A
        assert exc_info.value.code == "transfer_failed"

    def test_second_pull_failure_undoes_first(self):
        assets = _RefusingLedger()
        pool = _pool(assets)
        before = assets.get_all_balances()
        assets.refuse.add(TOKEN_B)
        with pytest.raises(TransferFailed):
            pool.add_liquidity(OWNER, TOKEN_A, TOKEN_B, 100, 100, 0, 0, OWNER, DEADLINE, NOW)
        assert assets.get_all_balances() == before
        assert assets.allowance(OWNER, POOL, TOKEN_A) == 1_000
        assert pool.total_issued() == 0
        assert len(pool.events) == 0

    def test_payout_failure_restores_burned_shares(self):
        assets = _RefusingLedger()
        pool = _pool(assets)
        pool.add_liquidity(OWNER, TOKEN_A, TOKEN_B, 100, 100, 0, 0, OWNER, DEADLINE, NOW)
        assets.refuse.add(TOKEN_B)
        with pytest.raises(TransferFailed):
            pool.remove_liquidity(OWNER, TOKEN_A, TOKEN_B, 50, 0, 0, OWNER, DEADLINE, NOW)
        assert pool.shares_of(OWNER) == 100
        assert pool.total_issued() == 100
        assert pool.reserves(TOKEN_A, TOKEN_B) == (100, 100)

    def test_swap_payout_failure_restores_input(self):
        assets = _RefusingLedger()
        pool = _pool(assets)
        pool.add_liquidity(OWNER, TOKEN_A, TOKEN_B, 500, 500, 0, 0, OWNER, DEADLINE, NOW)
        assets.refuse.add(TOKEN_B)
        with pytest.raises(TransferFailed):
            pool.swap_exact_tokens_for_tokens(OWNER, 10, 0, [TOKEN_A, TOKEN_B], OWNER, DEADLINE, NOW)
        assert pool.reserves(TOKEN_A, TOKEN_B) == (500, 500)
        assert assets.balance_of(OWNER, TOKEN_A) == 500
        assert not pool.events.of_type(TokensSwapped)

    def test_raised_ledger_error_propagates_unchanged(self):
        pool = _pool(InMemoryAssetLedger(), balance=50)
        pool.asset_ledger.approve(OWNER, POOL, TOKEN_B, 1_000)
        with pytest.raises(InsufficientBalance):
            pool.add_liquidity(OWNER, TOKEN_A, TOKEN_B, 10, 100, 0, 0, OWNER, DEADLINE, NOW)
        assert pool.asset_ledger.balance_of(OWNER, TOKEN_A) == 50
        assert pool.total_issued() == 0


class TestEvents:
    def test_subscriber_sees_committed_events_only(self):
        assets = _RefusingLedger()
        pool = _pool(assets)
        seen: List[object] = []
        pool.events.subscribe(seen.append)

        pool.add_liquidity(OWNER, TOKEN_A, TOKEN_B, 100, 100, 0, 0, OWNER, DEADLINE, NOW)
        assets.refuse.add(TOKEN_B)
        with pytest.raises(TransferFailed):
            pool.swap_exact_tokens_for_tokens(OWNER, 10, 0, [TOKEN_A, TOKEN_B], OWNER, DEADLINE, NOW)

        assert seen == [LiquidityAdded(TOKEN_A, TOKEN_B, 100, 100, 100, OWNER)]

    def test_unsubscribe(self):
        pool = _pool(InMemoryAssetLedger())
        seen: List[object] = []
        unsubscribe = pool.events.subscribe(seen.append)
        unsubscribe()
        unsubscribe()
        pool.add_liquidity(OWNER, TOKEN_A, TOKEN_B, 100, 100, 0, 0, OWNER, DEADLINE, NOW)
        assert seen == []
        assert len(pool.events) == 1

    def test_event_to_dict(self):
        event = TokensSwapped(caller="u", asset_in=TOKEN_A, asset_out=TOKEN_B, amount_in=10, amount_out=9)
        assert event.to_dict() == {
            "event": "TokensSwapped",
            "caller": "u",
            "asset_in": TOKEN_A,
            "asset_out": TOKEN_B,
            "amount_in": 10,
            "amount_out": 9,
        }


class TestContext:
    def test_rejects_empty_pool_address(self):
        with pytest.raises(ValueError):
            PoolContext(InMemoryAssetLedger(), InMemoryShareLedger(), "")

    def test_emit_outside_atomic(self):
        ctx = PoolContext(InMemoryAssetLedger(), InMemoryShareLedger(), POOL)
        with pytest.raises(RuntimeError):
            ctx.emit(LiquidityAdded(TOKEN_A, TOKEN_B, 1, 1, 1, OWNER))

    def test_nested_atomic(self):
        ctx = PoolContext(InMemoryAssetLedger(), InMemoryShareLedger(), POOL)
        with ctx.atomic("outer"):
            with pytest.raises(RuntimeError):
                with ctx.atomic("inner"):
                    pass

    def test_atomic_rolls_back_direct_mutations(self):
        assets = InMemoryAssetLedger()
        shares = InMemoryShareLedger()
        ctx = PoolContext(assets, shares, POOL)
        with pytest.raises(KeyError):
            with ctx.atomic("probe"):
                assets.mint(OWNER, TOKEN_A, 5)
                shares.mint(OWNER, 5)
                ctx.emit(LiquidityAdded(TOKEN_A, TOKEN_B, 5, 0, 5, OWNER))
                raise KeyError("boom")
        assert assets.balance_of(OWNER, TOKEN_A) == 0
        assert shares.total_issued() == 0
        assert len(ctx.events) == 0

        with ctx.atomic("again"):
            ctx.emit(LiquidityAdded(TOKEN_A, TOKEN_B, 5, 0, 5, OWNER))
        assert len(ctx.events) == 1
